from sqlalchemy import Boolean, Column, Integer, Text, UniqueConstraint
from volunteer_hub.database import Base

CATEGORY_TYPES = ("volunteer", "requester")


class JobCategory(Base):
    __tablename__ = "job_categories"
    __table_args__ = (UniqueConstraint("category_name", "category_type"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_name = Column(Text, nullable=False)
    category_type = Column(Text, nullable=False)
    description = Column(Text)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(Text, nullable=False)

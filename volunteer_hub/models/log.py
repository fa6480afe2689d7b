from sqlalchemy import JSON, Column, Integer, Text
from volunteer_hub.database import Base


class PartnershipLog(Base):
    __tablename__ = "partnership_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    organization = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    phone = Column(Text, nullable=False)
    families_served = Column(Integer, nullable=False)
    events = Column(JSON, nullable=False, default=list)
    prepared_by_first = Column(Text, nullable=False)
    prepared_by_last = Column(Text, nullable=False)
    position_title = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    volunteer_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    phone = Column(Text)
    student_id = Column(Text)
    activities = Column(JSON, nullable=False, default=list)
    prepared_by_first = Column(Text, nullable=False)
    prepared_by_last = Column(Text, nullable=False)
    position_title = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

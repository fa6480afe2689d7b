from sqlalchemy import Column, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from volunteer_hub.database import Base

APPLICATION_STATUSES = ("pending", "accepted", "rejected", "withdrawn")


class JobApplication(Base):
    __tablename__ = "job_applications"
    __table_args__ = (UniqueConstraint("job_id", "email", name="idx_job_applications_job_email"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    volunteer_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    phone = Column(Text)
    message = Column(Text)
    availability = Column(Text)
    experience = Column(Text)
    preferred_start_date = Column(Text)
    status = Column(Text, nullable=False, default="pending")
    admin_notes = Column(Text)
    applied_at = Column(Text, nullable=False)
    responded_at = Column(Text)
    updated_at = Column(Text, nullable=False)

    job = relationship("Job", back_populates="applications")

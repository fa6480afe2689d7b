from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from volunteer_hub.database import Base

JOB_STATUSES = ("active", "filled", "expired", "cancelled")
URGENCY_RANK = {"critical": 4, "high": 3, "medium": 2, "low": 1}


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(Text, nullable=False)
    contact_name = Column(Text, nullable=False, default="")
    contact_email = Column(Text, nullable=False)
    contact_phone = Column(Text, nullable=False, default="")
    address = Column(Text, nullable=False, default="")
    city = Column(Text, nullable=False, default="")
    state = Column(Text, nullable=False, default="")
    zipcode = Column(Text, nullable=False)
    latitude = Column(Float)
    longitude = Column(Float)
    skills_needed = Column(Text, nullable=False, default="")
    time_commitment = Column(Text, nullable=False, default="")
    duration_hours = Column(Float)
    volunteers_needed = Column(Integer, nullable=False, default=1)
    age_requirement = Column(Text, nullable=False, default="")
    background_check_required = Column(Boolean, nullable=False, default=False)
    training_provided = Column(Boolean, nullable=False, default=False)
    start_date = Column(Text)
    end_date = Column(Text)
    flexible_schedule = Column(Boolean, nullable=False, default=False)
    preferred_times = Column(Text, nullable=False, default="")
    urgency = Column(Text, nullable=False, default="medium")
    remote_possible = Column(Boolean, nullable=False, default=False)
    transportation_provided = Column(Boolean, nullable=False, default=False)
    meal_provided = Column(Boolean, nullable=False, default=False)
    stipend_amount = Column(Float)
    status = Column(Text, nullable=False, default="active")
    posted_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    expires_at = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    poster = relationship("User", back_populates="jobs")
    applications = relationship(
        "JobApplication",
        back_populates="job",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

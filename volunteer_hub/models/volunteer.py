from sqlalchemy import JSON, Boolean, Column, Float, Integer, Text
from volunteer_hub.database import Base


class VolunteerRegistration(Base):
    __tablename__ = "volunteer_registrations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, nullable=False, unique=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    phone = Column(Text)
    birth_date = Column(Text)
    address = Column(Text, nullable=False)
    city = Column(Text, nullable=False)
    state = Column(Text, nullable=False)
    zipcode = Column(Text, nullable=False)
    latitude = Column(Float)
    longitude = Column(Float)
    skills = Column(JSON, nullable=False, default=list)
    interests = Column(JSON, nullable=False, default=list)
    categories_interested = Column(JSON, nullable=False, default=list)
    experience_level = Column(Text, nullable=False, default="beginner")
    availability = Column(JSON, nullable=False, default=dict)
    max_distance = Column(Float, nullable=False, default=25.0)
    transportation = Column(Text, nullable=False, default="own")
    emergency_contact_name = Column(Text, nullable=False)
    emergency_contact_phone = Column(Text, nullable=False)
    emergency_contact_relationship = Column(Text, nullable=False)
    background_check_consent = Column(Boolean, nullable=False, default=False)
    email_notifications = Column(Boolean, nullable=False, default=True)
    sms_notifications = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=False, default="")
    status = Column(Text, nullable=False, default="active")
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

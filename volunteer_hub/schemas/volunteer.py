from typing import Any

from pydantic import BaseModel


class VolunteerSignup(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    birth_date: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    latitude: Any = None
    longitude: Any = None
    skills: list[str] | None = None
    interests: list[str] | None = None
    categories_interested: list[str] | None = None
    experience_level: str | None = None
    availability: dict | None = None
    max_distance: Any = None
    transportation: str | None = None
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None
    emergency_contact_relationship: str | None = None
    background_check_consent: bool = False
    email_notifications: bool = True
    sms_notifications: bool = False
    notes: str | None = None


class RegisteredVolunteer(BaseModel):
    id: int
    username: str
    name: str
    email: str


class NearbyOpportunity(BaseModel):
    id: int
    title: str
    category: str
    location: str
    distance: float | None = None
    volunteers_needed: int
    start_date: str | None = None
    end_date: str | None = None
    match_score: float
    matched_keywords: list[str]


class VolunteerSignupResponse(BaseModel):
    success: bool = True
    volunteer: RegisteredVolunteer
    nearby_opportunities: list[NearbyOpportunity]
    message: str


class VolunteerSummary(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    username: str
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    city: str
    state: str
    zipcode: str
    categories_interested: list[str]
    experience_level: str
    status: str
    created_at: str


class VolunteerRegistrationList(BaseModel):
    volunteers: list[VolunteerSummary]
    pagination: dict

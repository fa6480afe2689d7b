from datetime import datetime
from typing import Any

from pydantic import BaseModel


class JobCreate(BaseModel):
    title: str | None = None
    description: str | None = None
    category: str | None = None
    contact_name: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    skills_needed: str | list[str] | None = None
    time_commitment: str | None = None
    duration_hours: Any = None
    volunteers_needed: Any = None
    age_requirement: str | None = None
    background_check_required: bool = False
    training_provided: bool = False
    start_date: str | None = None
    end_date: str | None = None
    flexible_schedule: bool = False
    preferred_times: str | None = None
    urgency: str | None = None
    remote_possible: bool = False
    transportation_provided: bool = False
    meal_provided: bool = False
    stipend_amount: Any = None
    expires_at: datetime | None = None


class JobCreated(BaseModel):
    id: int
    title: str
    created_at: str


class JobCreateResponse(BaseModel):
    success: bool = True
    job: JobCreated
    message: str = "Job posted successfully"


class JobResponse(BaseModel):
    id: int
    title: str
    description: str
    category: str
    contact_name: str
    contact_email: str
    contact_phone: str
    address: str
    city: str
    state: str
    zipcode: str
    latitude: float | None
    longitude: float | None
    skills_needed: str
    time_commitment: str
    duration_hours: float | None
    volunteers_needed: int
    age_requirement: str
    background_check_required: bool
    training_provided: bool
    start_date: str | None
    end_date: str | None
    flexible_schedule: bool
    preferred_times: str
    urgency: str
    remote_possible: bool
    transportation_provided: bool
    meal_provided: bool
    stipend_amount: float | None
    status: str
    posted_by: int | None
    expires_at: str
    created_at: str
    updated_at: str

    zip_city: str | None = None
    zip_state: str | None = None
    computed_latitude: float | None = None
    computed_longitude: float | None = None
    posted_by_username: str | None = None
    filled_positions: int = 0
    positions_remaining: int = 0


class JobListingItem(JobResponse):
    zip_latitude: float | None = None
    zip_longitude: float | None = None
    distance_miles: float | None = None


class PaginationResponse(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int
    hasNext: bool
    hasPrev: bool


class JobListResponse(BaseModel):
    jobs: list[JobListingItem]
    pagination: PaginationResponse


class JobApplicationSummary(BaseModel):
    id: int
    volunteer_name: str
    email: str
    phone: str | None
    status: str
    message: str | None
    applied_at: str


class JobDetailResponse(JobResponse):
    category_label: str
    pending_applications: int = 0
    can_edit: bool = False
    applications: list[JobApplicationSummary] | None = None


class JobUpdateResponse(BaseModel):
    success: bool = True
    id: int
    updated_at: str
    message: str = "Job updated successfully"


class MessageResponse(BaseModel):
    success: bool = True
    message: str

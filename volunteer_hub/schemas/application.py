from typing import Any

from pydantic import BaseModel


class ApplicationCreate(BaseModel):
    job_id: Any = None
    volunteer_name: str | None = None
    email: str | None = None
    phone: str | None = None
    message: str | None = None
    availability: str | None = None
    experience: str | None = None
    preferred_start_date: str | None = None


class ApplicationCreated(BaseModel):
    id: int
    job_id: int
    volunteer_name: str
    email: str
    status: str
    applied_at: str


class ApplicationCreateResponse(BaseModel):
    success: bool = True
    application: ApplicationCreated
    message: str


class ApplicationStatusUpdate(BaseModel):
    application_id: Any = None
    status: str | None = None
    admin_notes: str | None = None


class ApplicationResponse(BaseModel):
    id: int
    job_id: int
    job_title: str | None = None
    volunteer_name: str
    email: str
    phone: str | None = None
    message: str | None = None
    availability: str | None = None
    experience: str | None = None
    preferred_start_date: str | None = None
    status: str
    admin_notes: str | None = None
    applied_at: str
    responded_at: str | None = None
    updated_at: str


class ApplicationPagination(BaseModel):
    total: int
    limit: int
    offset: int
    hasMore: bool


class ApplicationListResponse(BaseModel):
    applications: list[ApplicationResponse]
    pagination: ApplicationPagination
    message: str | None = None


class ApplicationUpdateResponse(BaseModel):
    success: bool = True
    application: ApplicationResponse
    message: str

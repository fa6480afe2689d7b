from typing import Any

from pydantic import BaseModel


class PartnershipLogCreate(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    organization: str | None = None
    email: str | None = None
    phone: str | None = None
    families_served: Any = None
    events: Any = None
    prepared_by_first: str | None = None
    prepared_by_last: str | None = None
    position_title: str | None = None


class ActivityLogCreate(BaseModel):
    volunteer_name: str | None = None
    email: str | None = None
    phone: str | None = None
    student_id: str | None = None
    activities: Any = None
    prepared_by_first: str | None = None
    prepared_by_last: str | None = None
    position_title: str | None = None


class PartnershipLogResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    organization: str
    email: str
    phone: str
    families_served: int
    events: list[dict]
    prepared_by_first: str
    prepared_by_last: str
    position_title: str
    total_hours: float
    created_at: str
    updated_at: str


class ActivityLogResponse(BaseModel):
    id: int
    volunteer_name: str
    email: str
    phone: str | None = None
    student_id: str | None = None
    activities: list[dict]
    prepared_by_first: str
    prepared_by_last: str
    position_title: str
    total_hours: float
    created_at: str
    updated_at: str


class LogCreateResponse(BaseModel):
    success: bool = True
    id: int
    total_hours: float
    message: str


class LogPagination(BaseModel):
    total: int
    limit: int
    offset: int
    hasMore: bool


class PartnershipLogList(BaseModel):
    logs: list[PartnershipLogResponse]
    pagination: LogPagination


class ActivityLogList(BaseModel):
    logs: list[ActivityLogResponse]
    pagination: LogPagination


class VolunteerRow(BaseModel):
    id: int
    name: str
    email: str
    organization: str
    total_hours: float
    log_type: str
    impact_metric: int
    created_at: str


class VolunteerStats(BaseModel):
    total_volunteers: int
    total_organizations: int
    total_hours: float

"""Filtered job listing: one predicate list folded into both the page query and the count query.

Every optional filter is an independent ``FilterContribution`` whose values travel as
bound parameters inside its own clause. ``JobListingQuery`` builds the data statement
and the count statement separately from the same contribution list and the same joined
source, so adding a filter can never change one without the other.
"""
import math
from dataclasses import dataclass

from sqlalchemy import case, func, or_, select
from sqlalchemy.orm import Session, aliased
from sqlalchemy.sql.elements import ColumnElement

from volunteer_hub.models.application import JobApplication
from volunteer_hub.models.job import URGENCY_RANK, Job
from volunteer_hub.models.user import User
from volunteer_hub.models.zipcode import ZipcodeCoordinate
from volunteer_hub.utils.dates import now_ts

JobZip = aliased(ZipcodeCoordinate, name="zc")
CallerZip = aliased(ZipcodeCoordinate, name="user_zc")


@dataclass
class JobListingFilters:
    category: str | None = None
    zipcode: str | None = None
    distance: float = 25.0
    skills: str | None = None
    search: str | None = None
    page: int = 1
    limit: int = 20

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def proximity(self) -> bool:
        return bool(self.zipcode)


@dataclass(frozen=True)
class FilterContribution:
    name: str
    clause: ColumnElement


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page * self.limit < self.total

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def to_dict(self) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


def accepted_count() -> ColumnElement:
    return (
        select(func.count(JobApplication.id))
        .where(JobApplication.job_id == Job.id, JobApplication.status == "accepted")
        .correlate(Job)
        .scalar_subquery()
    )


def computed_latitude() -> ColumnElement:
    return func.coalesce(Job.latitude, JobZip.latitude)


def computed_longitude() -> ColumnElement:
    return func.coalesce(Job.longitude, JobZip.longitude)


def distance_expression() -> ColumnElement:
    return func.calculate_distance_miles(
        computed_latitude(),
        computed_longitude(),
        CallerZip.latitude,
        CallerZip.longitude,
    )


def urgency_rank() -> ColumnElement:
    return case(URGENCY_RANK, value=Job.urgency, else_=0)


def contributions(filters: JobListingFilters, now: str) -> list[FilterContribution]:
    parts = [
        FilterContribution("active", Job.status == "active"),
        FilterContribution("not_expired", Job.expires_at > now),
    ]

    if filters.category and filters.category != "all":
        if ":" in filters.category:
            clause = Job.category == filters.category
        else:
            # A parent key also matches its "parent:sub" children
            clause = or_(
                Job.category == filters.category,
                Job.category.startswith(f"{filters.category}:", autoescape=True),
            )
        parts.append(FilterContribution("category", clause))

    if filters.skills:
        parts.append(FilterContribution(
            "skills", Job.skills_needed.icontains(filters.skills, autoescape=True)
        ))

    if filters.search:
        parts.append(FilterContribution("search", or_(
            Job.title.icontains(filters.search, autoescape=True),
            Job.description.icontains(filters.search, autoescape=True),
        )))

    if filters.proximity:
        parts.append(FilterContribution("proximity", distance_expression() <= filters.distance))

    return parts


class JobListingQuery:
    def __init__(self, filters: JobListingFilters, now: str | None = None):
        self.filters = filters
        self.now = now or now_ts()
        self.contributions = contributions(filters, self.now)

    @property
    def predicates(self) -> list[ColumnElement]:
        return [c.clause for c in self.contributions]

    def _joined(self, stmt):
        stmt = stmt.select_from(Job).outerjoin(JobZip, JobZip.zipcode == Job.zipcode)
        if self.filters.proximity:
            stmt = stmt.outerjoin(CallerZip, CallerZip.zipcode == self.filters.zipcode)
        return stmt

    def data_statement(self):
        filled = accepted_count()
        columns = [
            Job,
            JobZip.city.label("zip_city"),
            JobZip.state.label("zip_state"),
            JobZip.latitude.label("zip_latitude"),
            JobZip.longitude.label("zip_longitude"),
            computed_latitude().label("computed_latitude"),
            computed_longitude().label("computed_longitude"),
            User.username.label("posted_by_username"),
            filled.label("filled_positions"),
            (Job.volunteers_needed - filled).label("positions_remaining"),
        ]
        order_by = []
        if self.filters.proximity:
            distance = distance_expression()
            columns.append(distance.label("distance_miles"))
            order_by.append(distance.asc())
        order_by += [urgency_rank().desc(), Job.created_at.desc(), Job.id.desc()]

        stmt = self._joined(select(*columns)).outerjoin(User, User.id == Job.posted_by)
        return (
            stmt.where(*self.predicates)
            .order_by(*order_by)
            .limit(self.filters.limit)
            .offset(self.filters.offset)
        )

    def count_statement(self):
        return self._joined(select(func.count(Job.id))).where(*self.predicates)


def job_columns(job: Job) -> dict:
    return {column.key: getattr(job, column.key) for column in Job.__table__.columns}


def shape_listing_row(row, proximity: bool) -> dict:
    job: Job = row.Job
    item = job_columns(job)
    item.update(
        zip_city=row.zip_city,
        zip_state=row.zip_state,
        zip_latitude=row.zip_latitude,
        zip_longitude=row.zip_longitude,
        computed_latitude=float(row.computed_latitude) if row.computed_latitude is not None else None,
        computed_longitude=float(row.computed_longitude) if row.computed_longitude is not None else None,
        posted_by_username=row.posted_by_username,
        filled_positions=int(row.filled_positions or 0),
        positions_remaining=int(
            row.positions_remaining if row.positions_remaining is not None else job.volunteers_needed
        ),
    )
    if proximity:
        item["distance_miles"] = (
            round(float(row.distance_miles), 1) if row.distance_miles is not None else None
        )
    return item


def fetch_job_listing(db: Session, filters: JobListingFilters) -> tuple[list[dict], Pagination]:
    query = JobListingQuery(filters)
    rows = db.execute(query.data_statement()).all()
    total = db.execute(query.count_statement()).scalar_one()
    items = [shape_listing_row(row, filters.proximity) for row in rows]
    return items, Pagination(page=filters.page, limit=filters.limit, total=int(total))

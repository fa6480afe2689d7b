import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from volunteer_hub.database import get_db
from volunteer_hub.dependencies import require_admin
from volunteer_hub.errors import NotFoundError, ValidationError, persistence_errors
from volunteer_hub.models.category import CATEGORY_TYPES, JobCategory
from volunteer_hub.schemas.category import (
    CatalogEntry,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
)
from volunteer_hub.services.categories import get_flat_category_list
from volunteer_hub.services.job_service import parse_id
from volunteer_hub.services.session_service import CurrentUser
from volunteer_hub.utils.dates import now_ts
from volunteer_hub.utils.validation import clean_str, require_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"])

NULLABLE_FIELDS = ("description",)


def _validate_type(category_type: str) -> str:
    if category_type not in CATEGORY_TYPES:
        raise ValidationError(f"Invalid category_type. Must be one of: {', '.join(CATEGORY_TYPES)}")
    return category_type


@router.get("")
async def list_categories(
    type: str | None = None,
    active: bool = True,
    db: Session = Depends(get_db),
):
    if type is not None:
        _validate_type(type)

    with persistence_errors(db, "fetch categories"):
        query = db.query(JobCategory)
        if type is not None:
            query = query.filter(JobCategory.category_type == type)
        if active:
            query = query.filter(JobCategory.is_active.is_(True))
        rows = query.order_by(JobCategory.display_order, JobCategory.category_name).all()

    categories = [CategoryResponse.model_validate(row).model_dump() for row in rows]
    if type is not None:
        return {"categories": categories}

    grouped: dict[str, list[dict]] = {t: [] for t in CATEGORY_TYPES}
    for category in categories:
        grouped[category["category_type"]].append(category)
    return {"categories": grouped}


@router.get("/catalog", response_model=list[CatalogEntry])
async def category_catalog():
    return get_flat_category_list()


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    req: CategoryCreate,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    require_fields(req.model_dump(), ("category_name", "category_type"))
    category = JobCategory(
        category_name=clean_str(req.category_name),
        category_type=_validate_type(req.category_type),
        description=clean_str(req.description),
        display_order=req.display_order,
        is_active=req.is_active,
        created_at=now_ts(),
    )
    with persistence_errors(db, "create category"):
        db.add(category)
        db.commit()
        db.refresh(category)
    logger.info("Category %s (%s) created by %s", category.category_name, category.category_type, admin.username)
    return category


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    req: CategoryUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    category_pk = parse_id(category_id, "category")
    changes = req.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("No valid fields to update")
    cleared = sorted(k for k, v in changes.items() if v is None and k not in NULLABLE_FIELDS)
    if cleared:
        raise ValidationError(f"Fields cannot be null: {', '.join(cleared)}", details=cleared)

    if "category_name" in changes:
        changes["category_name"] = clean_str(changes["category_name"])
        if changes["category_name"] is None:
            raise ValidationError("category_name cannot be empty")
    if "category_type" in changes:
        _validate_type(changes["category_type"])
    if "description" in changes:
        changes["description"] = clean_str(changes["description"])

    with persistence_errors(db, "update category"):
        category = db.query(JobCategory).filter(JobCategory.id == category_pk).first()
        if not category:
            raise NotFoundError("Category not found")
        for key, value in changes.items():
            setattr(category, key, value)
        db.commit()
        db.refresh(category)
    logger.info("Category %s updated by %s", category.id, admin.username)
    return category

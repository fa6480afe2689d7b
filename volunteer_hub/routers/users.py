import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from volunteer_hub.database import get_db
from volunteer_hub.dependencies import require_admin, require_user
from volunteer_hub.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
    persistence_errors,
)
from volunteer_hub.models.user import ROLES, User
from volunteer_hub.schemas.job import MessageResponse
from volunteer_hub.schemas.user import UserCreate, UserListResponse, UserResponse, UserUpdate
from volunteer_hub.services.job_service import parse_id
from volunteer_hub.services.session_service import CurrentUser
from volunteer_hub.utils.dates import now_ts
from volunteer_hub.utils.security import hash_password
from volunteer_hub.utils.validation import clean_email, clean_str, require_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

MIN_PASSWORD_LENGTH = 8


def _validate_role(role: str) -> str:
    if role not in ROLES:
        raise ValidationError(f"Invalid role. Must be one of: {', '.join(ROLES)}")
    return role


def _validate_password(password: str) -> str:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return password


def _validate_email(email: str | None) -> str:
    email = clean_email(email)
    if not email or "@" not in email:
        raise ValidationError("email must be a valid email address")
    return email


def _ensure_unique(db: Session, username: str | None, email: str | None, exclude_id: int | None = None) -> None:
    if username is not None:
        query = db.query(User.id).filter(User.username == username)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        if query.first():
            raise ConflictError("Username already exists")
    if email is not None:
        query = db.query(User.id).filter(User.email == email)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        if query.first():
            raise ConflictError("Email already exists")


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


@router.get("", response_model=UserListResponse)
async def list_users(admin: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)):
    with persistence_errors(db, "fetch users"):
        users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    return UserListResponse(users=[UserResponse.model_validate(u) for u in users], total=len(users))


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    req: UserCreate,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    require_fields(req.model_dump(), ("username", "password", "email"))
    username = clean_str(req.username)
    email = _validate_email(req.email)
    password = _validate_password(req.password)
    role = _validate_role(req.role or "user")

    with persistence_errors(db, "create user"):
        _ensure_unique(db, username, email)
        now = now_ts()
        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            role=role,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
    logger.info("User %s created by %s with role %s", user.username, admin.username, role)
    return user


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    current: CurrentUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    user_pk = parse_id(user_id, "user")
    if not current.is_admin and current.id != user_pk:
        raise AuthorizationError("You can only view your own account")
    with persistence_errors(db, "fetch user"):
        return _get_user_or_404(db, user_pk)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    req: UserUpdate,
    current: CurrentUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    user_pk = parse_id(user_id, "user")
    if not current.is_admin and current.id != user_pk:
        raise AuthorizationError("You can only update your own account")

    changes = req.model_dump(exclude_unset=True)
    if not current.is_admin and ({"role", "is_active"} & changes.keys()):
        raise AuthorizationError("Only admins can change role or active status")

    with persistence_errors(db, "update user"):
        user = _get_user_or_404(db, user_pk)
        updates = {}
        if changes.get("username") is not None:
            updates["username"] = clean_str(changes["username"])
            if updates["username"] is None:
                raise ValidationError("username cannot be empty")
        if changes.get("email") is not None:
            updates["email"] = _validate_email(changes["email"])
        if changes.get("password") is not None:
            updates["password_hash"] = hash_password(_validate_password(changes["password"]))
        if changes.get("role") is not None:
            updates["role"] = _validate_role(changes["role"])
        if changes.get("is_active") is not None:
            updates["is_active"] = changes["is_active"]
        if not updates:
            raise ValidationError("No valid fields to update")

        _ensure_unique(db, updates.get("username"), updates.get("email"), exclude_id=user.id)
        for key, value in updates.items():
            setattr(user, key, value)
        user.updated_at = now_ts()
        db.commit()
        db.refresh(user)
    logger.info("User %s updated by %s", user.id, current.username)
    return user


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user_pk = parse_id(user_id, "user")
    if user_pk == admin.id:
        raise ValidationError("You cannot delete your own account")

    with persistence_errors(db, "delete user"):
        user = _get_user_or_404(db, user_pk)
        username = user.username
        db.delete(user)
        db.commit()
    logger.info("User %s deleted by %s", username, admin.username)
    return MessageResponse(message=f'User "{username}" deleted successfully')

from pydantic import BaseModel


class UserCreate(BaseModel):
    username: str | None = None
    password: str | None = None
    email: str | None = None
    role: str | None = None


class UserUpdate(BaseModel):
    username: str | None = None
    password: str | None = None
    email: str | None = None
    role: str | None = None
    is_active: bool | None = None


class UserResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    username: str
    email: str
    role: str
    is_active: bool
    created_at: str
    updated_at: str
    last_login: str | None = None


class UserListResponse(BaseModel):
    users: list[UserResponse]
    total: int

from pydantic import BaseModel


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class SessionUser(BaseModel):
    id: int
    username: str
    email: str
    role: str


class LoginResponse(BaseModel):
    success: bool = True
    user: SessionUser


class SessionStatus(BaseModel):
    authenticated: bool
    user: SessionUser | None = None

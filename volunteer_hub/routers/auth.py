from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from volunteer_hub.config import settings
from volunteer_hub.database import get_db
from volunteer_hub.dependencies import get_current_user
from volunteer_hub.errors import AuthenticationError, RateLimitedError, persistence_errors
from volunteer_hub.schemas.auth import LoginRequest, LoginResponse, SessionStatus
from volunteer_hub.services.session_service import CurrentUser, session_service
from volunteer_hub.utils.validation import clean_str, require_fields

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )


def _clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.session_cookie_name, path="/")


@router.post("/login", response_model=LoginResponse)
async def login(req: LoginRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    require_fields(req.model_dump(), ("username", "password"))

    client_host = request.client.host if request.client else "unknown"
    with persistence_errors(db, "log in"):
        result = session_service.login(
            db,
            clean_str(req.username),
            req.password,
            user_agent=request.headers.get("user-agent", ""),
            ip_address=client_host,
            throttle_key=f"login:{client_host}",
        )
    if result is None:
        raise AuthenticationError("Invalid username or password")
    if "error" in result:
        raise RateLimitedError(
            "Too many failed login attempts. Try again later.",
            retry_after_seconds=round(result["retry_after_seconds"], 1),
        )

    _set_session_cookie(response, result["token"])
    return LoginResponse(user=result["user"].to_dict())


@router.post("/logout")
async def logout(request: Request, response: Response, db: Session = Depends(get_db)):
    with persistence_errors(db, "log out"):
        session_service.logout(db, request.cookies.get(settings.session_cookie_name))
    _clear_session_cookie(response)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/session", response_model=SessionStatus, response_model_exclude_none=True)
async def session_status(
    request: Request,
    response: Response,
    user: CurrentUser | None = Depends(get_current_user),
):
    if user is None:
        if settings.session_cookie_name in request.cookies:
            _clear_session_cookie(response)
        return SessionStatus(authenticated=False)
    return SessionStatus(authenticated=True, user=user.to_dict())

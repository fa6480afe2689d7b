import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from volunteer_hub.config import settings
from volunteer_hub.database import get_db
from volunteer_hub.errors import AuthenticationError, AuthorizationError
from volunteer_hub.services.session_service import CurrentUser, session_service

logger = logging.getLogger(__name__)


async def get_current_user(request: Request, db: Session = Depends(get_db)) -> CurrentUser | None:
    token = request.cookies.get(settings.session_cookie_name)
    return session_service.resolve(db, token)


async def require_user(user: CurrentUser | None = Depends(get_current_user)) -> CurrentUser:
    if user is None:
        raise AuthenticationError("Authentication required")
    return user


async def require_admin(user: CurrentUser = Depends(require_user)) -> CurrentUser:
    if not user.is_admin:
        logger.info("User %s refused admin-only operation", user.username)
        raise AuthorizationError("Admin access required")
    return user

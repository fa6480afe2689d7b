import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from volunteer_hub.database import get_db
from volunteer_hub.errors import persistence_errors
from volunteer_hub.services.migration_service import run_migrations

logger = logging.getLogger(__name__)

router = APIRouter(tags=["migrate"])


@router.get("/migrate")
async def migrate(db: Session = Depends(get_db)):
    with persistence_errors(db, "run migrations"):
        result = run_migrations(db)
    logger.info("Migration run complete: %s", result["tables"])
    return result

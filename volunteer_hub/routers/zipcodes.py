from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from volunteer_hub.database import get_db
from volunteer_hub.errors import persistence_errors
from volunteer_hub.schemas.zipcode import ZipcodeResponse
from volunteer_hub.services.zipcode_service import get_zipcode

router = APIRouter(prefix="/zipcodes", tags=["zipcodes"])


@router.get("/{zipcode}", response_model=ZipcodeResponse)
async def lookup_zipcode(zipcode: str, db: Session = Depends(get_db)):
    with persistence_errors(db, "look up zip code"):
        return get_zipcode(db, zipcode)

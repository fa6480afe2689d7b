import csv
import logging
import re
from pathlib import Path

from sqlalchemy.orm import Session

from volunteer_hub.errors import NotFoundError, ValidationError
from volunteer_hub.models.zipcode import ZipcodeCoordinate

logger = logging.getLogger(__name__)

_ZIP_RE = re.compile(r"^\d{5}$")

# Census Gazetteer headers first, plain headers second
_COLUMN_ALIASES = {
    "zipcode": ("GEOID", "ZCTA5", "zipcode", "zip"),
    "city": ("NAME", "city"),
    "state": ("USPS", "state"),
    "latitude": ("INTPTLAT", "latitude", "lat"),
    "longitude": ("INTPTLONG", "longitude", "lon", "lng"),
}


def validate_zipcode(zipcode: str) -> str:
    zipcode = (zipcode or "").strip()
    if not _ZIP_RE.match(zipcode):
        raise ValidationError("Zip code must be 5 digits")
    return zipcode


def get_zipcode(db: Session, zipcode: str) -> ZipcodeCoordinate:
    zipcode = validate_zipcode(zipcode)
    row = db.query(ZipcodeCoordinate).filter(ZipcodeCoordinate.zipcode == zipcode).first()
    if not row:
        raise NotFoundError("Zip code not found")
    return row


def _pick(row: dict, field: str) -> str | None:
    for alias in _COLUMN_ALIASES[field]:
        value = row.get(alias)
        if value is not None and value.strip():
            return value.strip()
    return None


def load_zipcodes_csv(db: Session, path: Path, states: set[str] | None = None) -> int:
    """Upsert zip code coordinates from a Gazetteer TSV or a plain CSV. Returns rows written."""
    path = Path(path)
    with path.open(newline="", encoding="utf-8-sig") as fh:
        sample = fh.read(4096)
        fh.seek(0)
        delimiter = "\t" if "\t" in sample.splitlines()[0] else ","
        reader = csv.DictReader(fh, delimiter=delimiter)
        # Gazetteer files pad the last header with whitespace
        reader.fieldnames = [name.strip() for name in reader.fieldnames or []]

        existing = {z.zipcode: z for z in db.query(ZipcodeCoordinate).all()}
        written = 0
        for row in reader:
            zipcode = _pick(row, "zipcode")
            state = _pick(row, "state")
            if not zipcode or not _ZIP_RE.match(zipcode):
                continue
            if states and (state or "").upper() not in states:
                continue
            try:
                latitude = float(_pick(row, "latitude"))
                longitude = float(_pick(row, "longitude"))
            except (TypeError, ValueError):
                logger.warning("Skipping zip code %s with bad coordinates", zipcode)
                continue

            record = existing.get(zipcode)
            if record is None:
                record = ZipcodeCoordinate(zipcode=zipcode)
                db.add(record)
                existing[zipcode] = record
            record.city = _pick(row, "city")
            record.state = state
            record.latitude = latitude
            record.longitude = longitude
            written += 1

    db.commit()
    logger.info("Loaded %d zip codes from %s", written, path.name)
    return written

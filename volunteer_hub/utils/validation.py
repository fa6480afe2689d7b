import math
from typing import Any, Iterable, Mapping

from volunteer_hub.errors import ValidationError


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def missing_fields(data: Mapping[str, Any], required: Iterable[str]) -> list[str]:
    return [name for name in required if is_blank(data.get(name))]


def require_fields(data: Mapping[str, Any], required: Iterable[str]) -> None:
    missing = missing_fields(data, required)
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", details=missing)


def clean_str(value: Any, default: str | None = None) -> str | None:
    if value is None:
        return default
    text = str(value).strip()
    return text if text else default


def clean_email(value: Any) -> str | None:
    text = clean_str(value)
    return text.lower() if text else None


def parse_number(value: Any, field: str, minimum: float | None = None) -> float:
    """Coerce a JSON number or numeric string, rejecting NaN and infinities."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a valid number")
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a valid number") from None
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{field} must be a valid number")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field} must be at least {minimum:g}")
    return number


def parse_int(value: Any, field: str, minimum: int | None = None) -> int:
    number = parse_number(value, field)
    if number != int(number):
        raise ValidationError(f"{field} must be a whole number")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    return int(number)


def validate_items(
    items: Any,
    field: str,
    required: Iterable[str],
    numeric: Mapping[str, float] | None = None,
    integer: Mapping[str, int] | None = None,
) -> list[dict]:
    """Validate every element of a list-shaped field and report all failures at once.

    ``numeric`` and ``integer`` map item keys to their minimum allowed value.
    Returns the items with string values trimmed.
    """
    if not isinstance(items, list) or not items:
        raise ValidationError(f"At least one entry is required in {field}")

    required = list(required)
    errors: list[str] = []
    cleaned: list[dict] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            errors.append(f"{field}[{index}]: must be an object")
            continue
        problems = []
        missing = missing_fields(item, required)
        if missing:
            problems.append(f"missing {', '.join(missing)}")
        for key, minimum in (numeric or {}).items():
            if key in missing or is_blank(item.get(key)):
                continue
            try:
                parse_number(item[key], key, minimum)
            except ValidationError as exc:
                problems.append(exc.message)
        for key, minimum in (integer or {}).items():
            if key in missing or is_blank(item.get(key)):
                continue
            try:
                parse_int(item[key], key, minimum)
            except ValidationError as exc:
                problems.append(exc.message)
        if problems:
            errors.append(f"{field}[{index}]: {'; '.join(problems)}")
            continue
        cleaned.append({k: v.strip() if isinstance(v, str) else v for k, v in item.items()})

    if errors:
        raise ValidationError(f"Invalid entries in {field}", details=errors)
    return cleaned

import re
from datetime import datetime, timezone
from typing import Any, Optional

from userapi.core.exceptions import NotFoundError, ValidationError

_USER_ID_RE = re.compile(r"\s*[+-]?[0-9]+\s*")

# ids live in a signed 64-bit INTEGER column
MIN_USER_ID = -(2**63)
MAX_USER_ID = 2**63 - 1


def require_non_empty(*values: Optional[str], message: str) -> None:
    for value in values:
        if not value:
            raise ValidationError(message)


def parse_user_id(value: Any) -> int:
    """Parse a path identifier; the whole value must be a base-10 integer.

    Integers outside the column range cannot match a row.
    """
    if isinstance(value, bool):
        raise ValidationError("invalid id")
    if not isinstance(value, int):
        text = str(value)
        if not _USER_ID_RE.fullmatch(text):
            raise ValidationError("invalid id")
        value = int(text)
    if not MIN_USER_ID <= value <= MAX_USER_ID:
        raise NotFoundError("not found")
    return value


def parse_request_date(value: Any) -> datetime:
    """Parse an ISO 8601 date or date-time into a naive UTC datetime.

    Date-only values mean midnight UTC, offsets are converted to UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError("invalid requestDate")
    else:
        raise ValidationError("invalid requestDate")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def to_int(value: Any, default: int) -> int:
    """Lenient integer parsing for query parameters."""
    if value is None:
        return default
    try:
        return int(str(value).strip(), 10)
    except ValueError:
        return default

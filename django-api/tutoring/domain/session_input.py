"""Parsing of client-supplied session fields into domain values.

Every offending field is collected before raising, so callers get one
SessionValidationError listing all problems at once.
"""

from collections.abc import Mapping
from datetime import date, datetime, time, tzinfo
from typing import Any

from tutoring.domain.errors import InvalidPayloadError, SessionValidationError
from tutoring.domain.value_objects import Capacity, Duration, ScheduledInstant

REQUIRED = "This field is required."
BLANK = "This field may not be blank."
NOT_TEXT = "Not a valid string."
NOT_INT = "A valid integer is required."
TOO_SMALL = "Ensure this value is greater than or equal to 1."
MAX_INTEGER = 2147483647
TOO_LARGE = f"Ensure this value is less than or equal to {MAX_INTEGER}."
BAD_DATE = "Date has wrong format. Use YYYY-MM-DD."
BAD_TIME = "Time has wrong format. Use hh:mm[:ss]."
BAD_DATETIME = "Datetime has wrong format. Use ISO 8601."

TEXT_FIELDS = {
    "title": 200,
    "description": None,
    "subject": 100,
    "location": None,
}


def parse_session_fields(
    data: Mapping[str, Any], tz: tzinfo, partial: bool = False
) -> dict[str, Any]:
    """Validate ``data`` and return the recognised fields as domain values.

    Keys in the result are ``title``, ``description``, ``subject``,
    ``location``, ``requirements``, ``scheduled_at``, ``duration`` and
    ``max_students``. Unknown keys (including ``current_students`` and
    ``is_active``) are ignored.

    With ``partial`` only supplied fields are returned, and ``date`` without
    ``time`` (or the reverse) leaves ``scheduled_at`` out of the result.
    """
    if not isinstance(data, Mapping):
        raise InvalidPayloadError(type(data).__name__)

    errors: dict[str, list[str]] = {}
    fields: dict[str, Any] = {}

    for name, max_length in TEXT_FIELDS.items():
        if name not in data:
            if not partial:
                errors[name] = [REQUIRED]
            continue
        text, problem = _text(data[name], max_length)
        if problem:
            errors[name] = [problem]
        else:
            fields[name] = text

    if "requirements" in data:
        value = data["requirements"]
        if value is not None and not isinstance(value, str):
            errors["requirements"] = [NOT_TEXT]
        else:
            fields["requirements"] = (value or "").strip() or None
    elif not partial:
        fields["requirements"] = None

    for name, factory in (("max_students", Capacity), ("duration", Duration)):
        if name not in data:
            if not partial:
                errors[name] = [REQUIRED]
            continue
        number = _integer(data[name])
        if number is None:
            errors[name] = [NOT_INT]
        elif number < 1:
            errors[name] = [TOO_SMALL]
        elif number > MAX_INTEGER:
            errors[name] = [TOO_LARGE]
        else:
            fields[name] = factory(number)

    instant = _scheduled_at(data, tz, partial, errors)
    if instant is not None:
        fields["scheduled_at"] = instant

    if errors:
        raise SessionValidationError(errors)
    return fields


def _text(value: Any, max_length: int | None) -> tuple[str, str | None]:
    if not isinstance(value, str):
        return "", NOT_TEXT
    text = value.strip()
    if not text:
        return "", BLANK
    if max_length is not None and len(text) > max_length:
        return "", f"Ensure this field has no more than {max_length} characters."
    return text, None


def _integer(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def _scheduled_at(
    data: Mapping[str, Any],
    tz: tzinfo,
    partial: bool,
    errors: dict[str, list[str]],
) -> ScheduledInstant | None:
    if "scheduled_at" in data:
        moment = _parse(data["scheduled_at"], datetime, datetime.fromisoformat)
        if moment is None:
            errors["scheduled_at"] = [BAD_DATETIME]
            return None
        return ScheduledInstant.from_datetime(moment, tz)

    day = time_of_day = None
    if "date" in data:
        day = _parse(data["date"], date, date.fromisoformat)
        if day is None or isinstance(day, datetime):
            errors["date"] = [BAD_DATE]
            day = None
    elif not partial:
        errors["date"] = [REQUIRED]

    if "time" in data:
        time_of_day = _parse(data["time"], time, time.fromisoformat)
        if time_of_day is None:
            errors["time"] = [BAD_TIME]
    elif not partial:
        errors["time"] = [REQUIRED]

    if day is None or time_of_day is None:
        return None
    return ScheduledInstant.combine(day, time_of_day, tz)


def _parse(value: Any, kind: type, parser) -> Any:
    if isinstance(value, kind):
        return value
    if not isinstance(value, str):
        return None
    try:
        return parser(value.strip())
    except ValueError:
        return None

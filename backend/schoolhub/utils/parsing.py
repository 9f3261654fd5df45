from datetime import datetime, date
from schoolhub.errors import ValidationError
from schoolhub.models import ParentLanguage, RoleEnum

ADMIN_INFO_FIELDS = {"parent_language", "parent_occupation", "address", "bio", "preferences"}
PROFILE_INFO_FIELDS = {"address", "bio", "preferences"}


def require_fields(data, *fields):
    missing = [field for field in fields if data.get(field) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def parse_date(value, field="date"):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid {field}: expected YYYY-MM-DD")
    text = value.strip().split("T")[0]
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid {field}: expected YYYY-MM-DD")


def parse_datetime(value, field="date"):
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid {field}: expected an ISO 8601 timestamp")
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None) - parsed.utcoffset()
    return parsed


def parse_id(value, field="id"):
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field}")
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field}")
    if parsed < 1:
        raise ValidationError(f"Invalid {field}")
    return parsed


def parse_id_list(values, field="ids"):
    if not isinstance(values, (list, tuple)):
        raise ValidationError(f"{field} must be a list")
    return [parse_id(value, field) for value in values]


def parse_role(value):
    try:
        return RoleEnum(str(value).lower())
    except ValueError:
        raise ValidationError(f"Invalid role '{value}'")


def parse_language(value):
    if value in (None, ""):
        return None
    try:
        return ParentLanguage(str(value).lower())
    except ValueError:
        raise ValidationError(f"Unsupported parent language '{value}'")


def parse_bool(value, field):
    if isinstance(value, bool):
        return value
    raise ValidationError(f"{field} must be a boolean")


def clean_additional_info(info, allowed=ADMIN_INFO_FIELDS, strict=True):
    """
    Normalise an additional_info payload into model column values.

    Unknown keys raise ValidationError when `strict`, otherwise they are dropped.
    """
    if info is None:
        return {}
    if not isinstance(info, dict):
        raise ValidationError("additional_info must be an object")

    unknown = set(info) - set(allowed)
    if unknown and strict:
        raise ValidationError(f"Unknown additional_info fields: {', '.join(sorted(unknown))}")

    cleaned = {}
    for key, value in info.items():
        if key not in allowed:
            continue
        if key == "parent_language":
            cleaned[key] = parse_language(value)
        elif key == "preferences":
            if value is not None and not isinstance(value, dict):
                raise ValidationError("preferences must be an object")
            cleaned[key] = value
        else:
            cleaned[key] = value
    return cleaned

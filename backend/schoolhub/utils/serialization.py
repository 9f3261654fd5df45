from enum import Enum
from datetime import datetime, date
from sqlalchemy.inspection import inspect

HIDDEN_FIELDS = {"password_hash"}


def serialize_value(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def to_dict(model_instance, include_hidden=False, exclude=()):
    output = {}
    mapper = inspect(model_instance.__class__)

    for column in mapper.columns:
        key = column.key
        if key in exclude:
            continue
        if not include_hidden and key in HIDDEN_FIELDS:
            continue
        output[key] = serialize_value(getattr(model_instance, key))

    return output

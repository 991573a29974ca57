"""Schema based validation of untrusted request input.

``validate_object`` type-checks a JSON object against a schema of field specs
(see :mod:`app.core.fields`). The object is modified in place: undeclared keys
are removed, numeric strings become numbers and date strings become
``date``/``datetime`` values. The return value is the list of errors; an empty
list means the object is valid.

Error codes are grouped by category and must stay stable:
1000-1099 generic, 1100-1199 string/format, 1200-1299 numeric.
"""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import MutableMapping
from datetime import datetime
from datetime import timezone
from enum import IntEnum
from typing import Any
import math
import re

from app.core.errors import SchemaDefinitionError
from app.core.fields import DateField
from app.core.fields import DateTimeField
from app.core.fields import EnumField
from app.core.fields import FieldSpec
from app.core.fields import IdField
from app.core.fields import IntegerField
from app.core.fields import NumberField
from app.core.fields import StringField
from app.core.fields import build_schema
from app.schemas.error import ErrorItem

# max integer in database
MAX_INT = 2147483647

EMAIL_PATTERN = re.compile(
    r'(([^<>()\[\]\\.,;:\s@"]+(\.[^<>()\[\]\\.,;:\s@"]+)*)|(".+"))'
    r"@((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))"
)
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
DATETIME_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", re.ASCII)
DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class ErrorCode(IntEnum):
    MISSING_FIELD = 1000
    NULL_VALUE = 1001
    INVALID_INPUT = 1002
    INVALID_INPUT_ARRAY = 1003
    EXPECTED_STRING = 1100
    EMPTY_OR_SPACES_STRING = 1101
    MAX_LENGTH = 1102
    INVALID_EMAIL = 1103
    INVALID_DATETIME = 1104
    INVALID_DATE = 1105
    INVALID_ENUM = 1106
    EXPECTED_NUMBER = 1200
    EXPECTED_INTEGER = 1201
    INVALID_ID = 1202


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.MISSING_FIELD: "Missing field",
    ErrorCode.NULL_VALUE: "Null value is not allowed",
    ErrorCode.INVALID_INPUT: "Input body must be an object",
    ErrorCode.INVALID_INPUT_ARRAY: (
        "Request data must be wrapped inside '{name}' array and it must contain only one element"
    ),
    ErrorCode.EXPECTED_STRING: "String value expected",
    ErrorCode.EMPTY_OR_SPACES_STRING: "String value cannot be empty or contain only spaces",
    ErrorCode.MAX_LENGTH: "String is too long",
    ErrorCode.INVALID_EMAIL: "Value is not valid email address",
    ErrorCode.INVALID_DATETIME: "Invalid date time format. Expected format: YYYY-MM-DD HH:mm:ss",
    ErrorCode.INVALID_DATE: "Invalid date format. Expected format: YYYY-MM-DD",
    ErrorCode.INVALID_ENUM: "Invalid enum value. Value must be one of the allowed_values",
    ErrorCode.EXPECTED_NUMBER: "Number value expected",
    ErrorCode.EXPECTED_INTEGER: "Integer value expected",
    ErrorCode.INVALID_ID: "Database ID expected (Integer value. Range from 1 to 2147483647)",
}


def make_error(code: ErrorCode, field: str | None = None, **extra: Any) -> ErrorItem:
    """Build an error item for ``code`` with optional field name and details."""
    return ErrorItem(code=int(code), message=ERROR_MESSAGES[code], field=field, **extra)


def coerce_number(value: Any) -> int | float:
    """Convert a raw input value to a number; anything unparseable becomes NaN.

    Only decimal text is parsed. Empty or blank strings, booleans, hex literals
    such as ``"0x1A"`` and digit-group underscores all become NaN so they fail
    the numeric checks instead of turning into 0, 1 or 26.
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text or "_" in text:
            return math.nan
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def is_valid_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # Ints past the float range count as infinite.
        return False


def is_valid_integer(value: Any) -> bool:
    return is_valid_number(value) and value % 1 == 0


def is_valid_id(value: Any) -> bool:
    return is_valid_integer(value) and 0 < value <= MAX_INT


def _parse_strict(value: Any, pattern: re.Pattern[str], fmt: str) -> datetime | None:
    if not isinstance(value, str) or pattern.fullmatch(value) is None:
        return None
    try:
        return datetime.strptime(value, fmt)
    except ValueError:
        return None


def _check_string(spec: StringField, value: Any) -> ErrorItem | None:
    if not isinstance(value, str):
        return make_error(ErrorCode.EXPECTED_STRING)
    if spec.length and len(value) > spec.length:
        return make_error(ErrorCode.MAX_LENGTH, max_length=spec.length)
    if not value.strip() and (not spec.empty or spec.required or spec.optional_required):
        return make_error(ErrorCode.EMPTY_OR_SPACES_STRING)
    if spec.email and EMAIL_PATTERN.fullmatch(value) is None:
        return make_error(ErrorCode.INVALID_EMAIL)
    return None


def _check_field(spec: FieldSpec, data: MutableMapping[str, Any], name: str) -> ErrorItem | None:
    """Run the type check for one present, non-null field; apply coercions on success."""
    value = data[name]

    if isinstance(spec, StringField):
        return _check_string(spec, value)

    if isinstance(spec, NumberField):
        if not is_valid_number(value):
            return make_error(ErrorCode.EXPECTED_NUMBER)
        return None

    if isinstance(spec, IntegerField):
        if not is_valid_integer(value):
            return make_error(ErrorCode.EXPECTED_INTEGER)
        data[name] = int(value)
        return None

    if isinstance(spec, IdField):
        if not is_valid_id(value):
            return make_error(ErrorCode.INVALID_ID)
        data[name] = int(value)
        return None

    if isinstance(spec, DateTimeField):
        parsed = _parse_strict(value, DATETIME_PATTERN, DATETIME_FORMAT)
        if parsed is None:
            return make_error(ErrorCode.INVALID_DATETIME)
        data[name] = parsed.replace(tzinfo=timezone.utc)
        return None

    if isinstance(spec, DateField):
        parsed = _parse_strict(value, DATE_PATTERN, DATE_FORMAT)
        if parsed is None:
            return make_error(ErrorCode.INVALID_DATE)
        data[name] = parsed.date()
        return None

    if isinstance(spec, EnumField):
        if value not in spec.values:
            return make_error(ErrorCode.INVALID_ENUM, allowed_values=list(spec.values))
        return None

    raise SchemaDefinitionError(f"Unknown type: {type(spec).__name__}")


def validate_object(schema: Mapping[str, FieldSpec | Mapping[str, Any]], data: Any) -> list[ErrorItem]:
    """Validate ``data`` against ``schema`` and return the list of errors.

    Keys not declared in the schema are removed from ``data``. Numeric fields
    are coerced before checking, ``date``/``datetime`` fields are replaced with
    parsed values. Only the first failing check is reported per field.
    """
    if not isinstance(data, MutableMapping):
        return [make_error(ErrorCode.INVALID_INPUT)]

    specs = build_schema(schema)
    for name in [key for key in data if key not in specs]:
        del data[name]

    errors = [
        make_error(ErrorCode.MISSING_FIELD, name)
        for name, spec in specs.items()
        if name not in data and spec.required
    ]

    for name, spec in specs.items():
        if name not in data:
            continue
        if data[name] is None:
            if spec.rejects_null:
                errors.append(make_error(ErrorCode.NULL_VALUE, name))
            continue
        if spec.numeric:
            data[name] = coerce_number(data[name])
        error = _check_field(spec, data, name)
        if error is not None:
            error.field = name
            errors.append(error)
    return errors


def validate_id(value: Any) -> list[ErrorItem]:
    """Validate a database id; the reported field is always ``id``."""
    if is_valid_id(value):
        return []
    return [make_error(ErrorCode.INVALID_ID, "id")]


def validate_single_array_element(body: Any, property_name: str) -> ErrorItem | None:
    """Check that ``body[property_name]`` is a list holding exactly one element."""
    if isinstance(body, Mapping):
        wrapped = body.get(property_name)
        if isinstance(wrapped, list) and len(wrapped) == 1:
            return None
    return ErrorItem(
        code=int(ErrorCode.INVALID_INPUT_ARRAY),
        message=ERROR_MESSAGES[ErrorCode.INVALID_INPUT_ARRAY].format(name=property_name),
    )

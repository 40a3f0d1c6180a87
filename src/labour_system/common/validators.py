from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Optional, Type, TypeVar

from ..core.enums import ValueEnum
from ..core.exceptions import InvalidEnumError, InvalidIdentifierError, NotFoundError, ValidationError
from .datetime_utils import parse_datetime

E = TypeVar("E", bound=ValueEnum)

_OBJECT_ID = re.compile(r"^[0-9a-fA-F]{24}$")


def is_valid_identifier(value: Any) -> bool:
    return isinstance(value, str) and bool(_OBJECT_ID.match(value))


def require_non_empty(value: Any, field_name: str, *, max_len: Optional[int] = None) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    value = value.strip()
    if max_len is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def optional_text(value: Any, field_name: str, *, max_len: Optional[int] = None) -> Optional[str]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return require_non_empty(value, field_name, max_len=max_len)


def require_min_length(value: Any, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_identifier(value: Any, field_name: str) -> str:
    if not is_valid_identifier(value):
        raise InvalidIdentifierError(f"Invalid {field_name}")
    return value.lower()


def optional_identifier(value: Any, field_name: str) -> Optional[str]:
    if value is None or value == "":
        return None
    return require_identifier(value, field_name)


def require_enum(value: Any, enum_cls: Type[E], field_name: str) -> E:
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            pass
    raise InvalidEnumError(f"{field_name} must be one of: {', '.join(enum_cls.values())}")


def require_date(value: Any, field_name: str) -> datetime:
    if value is None or value == "":
        raise ValidationError(f"{field_name} is required")
    return parse_datetime(value, field_name)


def optional_date(value: Any, field_name: str) -> Optional[datetime]:
    if value is None or value == "":
        return None
    return parse_datetime(value, field_name)


def require_number(
    value: Any,
    field_name: str,
    *,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
) -> float:
    # bool is an int subclass; true/false is never a valid amount.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field_name} must be a number")
    if minimum is not None and value < minimum:
        raise ValidationError(f"{field_name} must be at least {minimum:g}")
    if maximum is not None and value > maximum:
        raise ValidationError(f"{field_name} must be at most {maximum:g}")
    return value


def require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field_name} must be a positive integer")
    return value


def require_digits(value: Any, field_name: str) -> str:
    value = require_non_empty(value, field_name)
    if not value.isdigit():
        raise ValidationError(f"{field_name} must contain digits only")
    return value


def require_found(entity: Optional[Any], message: str) -> Any:
    if entity is None:
        raise NotFoundError(message)
    return entity

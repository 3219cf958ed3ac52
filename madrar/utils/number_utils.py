# madrar/utils/number_utils.py

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional, Type, TypeVar
from enum import Enum

from madrar.config import MONEY_PLACES
from madrar.errors import ValidationError

E = TypeVar('E', bound=Enum)

MONEY_QUANTUM = Decimal(1).scaleb(-MONEY_PLACES)  # Decimal("0.01")


def to_decimal(value: Any, field_name: str) -> Decimal:
    """Parses user input into a Decimal; floats go through str so 0.1 stays 0.1."""
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be a number.", "validation.invalid_number", field=field_name)
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError(f"{field_name} must be a number, got {value!r}.",
                                  "validation.invalid_number", field=field_name)
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be a finite number.", "validation.invalid_number", field=field_name)
    return result


def to_positive_decimal(value: Any, field_name: str, message_key: str = "validation.quantity_positive") -> Decimal:
    result = to_decimal(value, field_name)
    if result <= 0:
        raise ValidationError(f"{field_name} must be greater than zero.", message_key, field=field_name)
    return result


def to_whole_units(value: Any, field_name: str) -> Decimal:
    """A positive count of finished units; recipe quantities use to_positive_decimal instead."""
    result = to_positive_decimal(value, field_name)
    if result != result.to_integral_value():
        raise ValidationError(f"{field_name} must be a whole number of units, got {value!r}.",
                              "validation.whole_units", field=field_name)
    return result


def to_non_negative_decimal(value: Any, field_name: str) -> Decimal:
    result = to_decimal(value, field_name)
    if result < 0:
        raise ValidationError(f"{field_name} cannot be negative.", "validation.amount_non_negative", field=field_name)
    return result


def to_optional_non_negative_decimal(value: Any, field_name: str) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return to_non_negative_decimal(value, field_name)


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def to_enum(enum_cls: Type[E], value: Any, field_name: str) -> E:
    """Accepts an enum member, its value or its name."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        pass
    if isinstance(value, str) and value.upper() in enum_cls.__members__:
        return enum_cls[value.upper()]
    raise ValidationError(f"{value!r} is not a valid {field_name}.", "validation.invalid_choice",
                          value=value, field=field_name)

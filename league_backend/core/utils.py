import math
import re
from typing import Any, Optional
from league_backend.core.exceptions import ValidationError

# Largest integer the database drivers bind as a parameter (signed 64-bit)
MAX_ID = 2**63 - 1

_INT_PATTERN = re.compile(r"^[+-]?\d+$")


def _parse_int_text(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not _INT_PATTERN.match(text):
        return None
    return int(text)


def parse_positive_int(value: Any, field_name: str) -> int:
    """
    Parse an identifier coming from a query string or JSON body.

    Digits are parsed as an exact integer; decimals, floats and values
    outside the id column range are rejected.

    :param value: Raw value (str, int or None)
    :param field_name: Name used in the error message
    :return: The identifier as a positive int
    :raises ValidationError: if the value is missing, non-numeric, not positive or too large
    """
    if value is None:
        raise ValidationError(f"{field_name} is required and must be a number.")

    number = _parse_int_text(value)
    if number is None or number <= 0:
        raise ValidationError(f"{field_name} is required and must be a number.")
    if number > MAX_ID:
        raise ValidationError(f"{field_name} is out of range.")

    return number


def parse_optional_int(value: Optional[str], field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    number = _parse_int_text(value)
    if number is None:
        raise ValidationError(f"{field_name} must be a number.")
    if abs(number) > MAX_ID:
        raise ValidationError(f"{field_name} is out of range.")
    return number


def safe_str(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    return text or None


def safe_int(value) -> Optional[int]:
    try:
        if value is None:
            return None
        if isinstance(value, float) and math.isnan(value):
            return None
        return int(value)
    except (ValueError, TypeError):
        return None

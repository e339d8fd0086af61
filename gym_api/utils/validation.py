"""
Input coercion helpers raising ValidationError on malformed values.
"""
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from gym_api.errors import ValidationError


def parse_date(value, field):
    """
    Coerce an ISO-8601 date string (or date) into a date.

    Args:
        value: date, datetime or ISO-8601 string
        field (str): Field name used in the error message

    Returns:
        date: The parsed date
    """
    if value is None or value == '':
        raise ValidationError(f"{field} is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            pass
    raise ValidationError(f"{field} must be an ISO-8601 date (YYYY-MM-DD)")


def parse_int(value, field, minimum=None):
    """Coerce to int, optionally enforcing a lower bound."""
    if value is None or value == '':
        raise ValidationError(f"{field} is required")
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, float) and value != number:
        raise ValidationError(f"{field} must be an integer")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    return number


def parse_decimal(value, field, minimum=None):
    """Coerce to a two-place Decimal, optionally enforcing a lower bound."""
    if value is None or value == '' or isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{field} must be a number")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    return number.quantize(Decimal('0.01'))


def parse_bool(value, field):
    """Accept JSON booleans and the usual query-string spellings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ('true', '1', 'yes'):
        return True
    if isinstance(value, str) and value.lower() in ('false', '0', 'no'):
        return False
    raise ValidationError(f"{field} must be a boolean")


def parse_str(value, field, max_length=None, required=False):
    """Validate an optional string field."""
    if value is None:
        if required:
            raise ValidationError(f"{field} is required")
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    value = value.strip()
    if required and not value:
        raise ValidationError(f"{field} is required")
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return value

"""
Input validation helpers for Indian corporate identifiers and form payloads
"""
import re
from datetime import date

from .errors import ValidationError

CIN_PATTERN = re.compile(r'^[LU]\d{5}[A-Z]{2}\d{4}[A-Z]{3}\d{6}$')
LLPIN_PATTERN = re.compile(r'^[A-Z]{3}-\d{4}$')
PAN_PATTERN = re.compile(r'^[A-Z]{5}\d{4}[A-Z]$')
GSTIN_PATTERN = re.compile(r'^\d{2}[A-Z]{5}\d{4}[A-Z][1-9A-Z]Z[0-9A-Z]$')
IFSC_PATTERN = re.compile(r'^[A-Z]{4}0[A-Z0-9]{6}$')
EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
INDIAN_MOBILE_PATTERN = re.compile(r'^[6-9]\d{9}$')


def is_valid_cin(value):
    return bool(value) and bool(CIN_PATTERN.match(value))


def is_valid_llpin(value):
    return bool(value) and bool(LLPIN_PATTERN.match(value))


def is_valid_pan(value):
    return bool(value) and bool(PAN_PATTERN.match(value))


def is_valid_gstin(value):
    """GSTIN embeds the PAN at positions 3-12"""
    if not value or not GSTIN_PATTERN.match(value):
        return False
    return is_valid_pan(value[2:12])


def is_valid_ifsc(value):
    return bool(value) and bool(IFSC_PATTERN.match(value))


def is_valid_email(value):
    return bool(value) and bool(EMAIL_PATTERN.match(value))


def is_valid_indian_mobile(value):
    if not value:
        return False
    digits = re.sub(r'\D', '', value)
    if len(digits) == 12 and digits.startswith('91'):
        digits = digits[2:]
    return bool(INDIAN_MOBILE_PATTERN.match(digits))


def require_fields(payload, fields):
    """Messages for required fields that are missing or blank"""
    errors = []
    for field in fields:
        value = payload.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors.append(f'{field} is required')
    return errors


def parse_date(value, field):
    """Parse an ISO date (YYYY-MM-DD, time part ignored)"""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be an ISO date (YYYY-MM-DD)')


def ensure_choice(value, enum_cls, field):
    """Coerce a raw value into a member of enum_cls"""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ', '.join(member.value for member in enum_cls)
        raise ValidationError(f'{field} must be one of: {allowed}')


def ensure_choices(values, enum_cls, field):
    if not isinstance(values, (list, tuple)):
        raise ValidationError(f'{field} must be a list')
    return [ensure_choice(value, enum_cls, field) for value in values]


def non_negative_number(value, field):
    if not isinstance(value, (int, float)) or isinstance(value, bool) or value < 0:
        raise ValidationError(f'{field} must be a non-negative number')
    return value

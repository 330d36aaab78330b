"""
Listing helpers: pagination, search, sorting and date-range filters
"""
import math
from datetime import date, datetime

from resolution_desk.config.settings import DeskConfig

from .errors import ValidationError


def paginate(items, page=1, limit=10):
    """Slice a list into a page and describe the result set"""
    if page < 1:
        raise ValidationError('page must be 1 or greater')
    if limit < 1:
        raise ValidationError('limit must be 1 or greater')

    items = list(items)
    total = len(items)
    start = (page - 1) * limit
    return {
        'data': items[start:start + limit],
        'total': total,
        'page': page,
        'limit': limit,
        'total_pages': math.ceil(total / limit) if total else 0,
    }


def parse_pagination(args, config):
    """Read page/limit query arguments, clamped to the configured page size"""
    try:
        page = int(args.get('page', 1))
        limit = DeskConfig.page_size(args.get('limit'), config)
    except (TypeError, ValueError):
        raise ValidationError('page and limit must be integers')
    return page, limit


def parse_list_arg(args, name):
    """Comma separated or repeated query argument as a list"""
    values = []
    for raw in args.getlist(name) if hasattr(args, 'getlist') else [args.get(name)]:
        if raw:
            values.extend(part.strip() for part in raw.split(',') if part.strip())
    return values


def matches_search(record, term, fields):
    """Case-insensitive substring match of term against any of the fields"""
    if not term:
        return True
    term = term.lower()
    for field in fields:
        value = record.get(field)
        if isinstance(value, (list, tuple)):
            if any(term in str(item).lower() for item in value):
                return True
        elif value is not None and term in str(value).lower():
            return True
    return False


def _as_date(value):
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def in_date_range(value, date_from=None, date_to=None):
    """True when value (ISO date or datetime string) falls inside the range"""
    current = _as_date(value)
    if current is None:
        return date_from is None and date_to is None
    start = _as_date(date_from)
    end = _as_date(date_to)
    if start and current < start:
        return False
    if end and current > end:
        return False
    return True


def in_amount_range(value, minimum=None, maximum=None):
    if minimum is not None and value < minimum:
        return False
    if maximum is not None and value > maximum:
        return False
    return True


def sort_records(items, key, descending=False):
    """Sort dict records by a key; missing values sort last"""
    present = [item for item in items if item.get(key) is not None]
    missing = [item for item in items if item.get(key) is None]
    present.sort(key=lambda item: item[key], reverse=descending)
    return present + missing

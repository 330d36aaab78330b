"""
Request helpers shared by component routes
"""
from flask import request

from .errors import ValidationError


def json_body(required=True):
    """Parsed JSON object body of the current request"""
    data = request.get_json(silent=True)
    if data is None:
        if required:
            raise ValidationError('No data received')
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def current_actor():
    """Acting user id as forwarded by the gateway"""
    return request.headers.get('X-User-Id')


def arg_float(name):
    value = request.args.get(name)
    if value in (None, ''):
        return None
    try:
        return float(value)
    except ValueError:
        raise ValidationError(f'{name} must be a number')


def arg_bool(name, default=False):
    value = request.args.get(name)
    if value is None:
        return default
    return value.lower() in ('1', 'true', 'yes')

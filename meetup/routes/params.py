"""Request parameter parsing shared by the JSON routes."""

import math

from meetup.errors import ValidationError

TRUE_VALUES = ('1', 'true', 'yes', 'on')


def request_data(request):
    """JSON or form body of a request."""
    return request.get_json(silent=True) or request.form


def float_arg(args, name, default=None, required=False):
    value = args.get(name)
    if value in (None, ''):
        if required:
            raise ValidationError(f'{name} is required')
        return default
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{name} must be a number')
    # nan, inf and overflowing literals like 1e400
    if not math.isfinite(value):
        raise ValidationError(f'{name} must be a number')
    return value


def int_arg(args, name, default=None):
    value = float_arg(args, name)
    return default if value is None else int(value)


def bool_arg(args, name, default=False):
    value = args.get(name)
    if value in (None, ''):
        return default
    return str(value).lower() in TRUE_VALUES

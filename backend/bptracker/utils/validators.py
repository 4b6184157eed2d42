"""
Input validation for readings and list filters.
"""
from .errors import ValidationError

# (payload key, label, unit, min, max)
READING_FIELDS = [
    ('upperPressure', 'Upper pressure', 'mmHg', 50, 300),
    ('lowerPressure', 'Lower pressure', 'mmHg', 30, 200),
    ('pulseRate', 'Pulse rate', 'bpm', 30, 200),
]


def _to_int(value):
    if isinstance(value, bool):
        raise TypeError('bool is not a reading value')
    if isinstance(value, float) and not value.is_integer():
        raise ValueError('fractional reading value')
    return int(value)


def validate_reading(data: dict) -> list:
    """Validate a new blood pressure reading. Returns list of error strings (empty = valid)."""
    errors = []
    values = {}

    for key, label, unit, low, high in READING_FIELDS:
        raw = data.get(key)
        if raw is None or raw == '':
            errors.append(f'{label} is required')
            continue
        try:
            value = _to_int(raw)
        except (ValueError, TypeError):
            errors.append(f'{label} must be an integer')
            continue
        if value < low or value > high:
            errors.append(f'{label} must be between {low}-{high} {unit}')
            continue
        values[key] = value

    upper = values.get('upperPressure')
    lower = values.get('lowerPressure')
    if upper is not None and lower is not None and upper <= lower:
        errors.append('Upper pressure must be higher than lower pressure')

    return errors


def validate_reading_update(data: dict, current) -> list:
    """Validate an edit by laying the supplied fields over the stored reading."""
    merged = {
        'upperPressure': current.systolic,
        'lowerPressure': current.diastolic,
        'pulseRate': current.pulse,
    }
    for key, *_ in READING_FIELDS:
        if key in data:
            merged[key] = data[key]
    return validate_reading(merged)


def validate_filter_range(from_text, to_text, normalizer):
    """Check an optional inclusive date filter.

    Returns ``(from, to)`` as ``YYYY-MM-DD`` strings, or ``(None, None)``
    when no filter was given. Raises ValidationError otherwise.
    """
    from_text = (from_text or '').strip()
    to_text = (to_text or '').strip()

    if not from_text and not to_text:
        return None, None
    if not from_text or not to_text:
        raise ValidationError('Please select both from and to dates')

    from_date = normalizer.parse_display_date(from_text)
    to_date = normalizer.parse_display_date(to_text)

    if from_date > to_date:
        raise ValidationError('From date must be before or equal to to date')
    return from_date, to_date

"""
Date and time normalization between storage and display formats.

Storage uses ``YYYY-MM-DD`` / ``HH:MM:SS``. The reading list shows
``DD/MM/YY`` and ``HH:MM``; the edit form shows ``DD/MM/YYYY``. Every
"current moment" is taken in one configured zone rather than the
machine's local zone.
"""
import logging
import re
from collections import namedtuple
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as dateutil_parser

from .errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = 'Asia/Hong_Kong'
DEFAULT_FILTER_DAYS = 14

WEEKDAYS = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']

DATE_ERROR = 'Could not determine date'
TIME_ERROR = 'Could not determine time'

_ISO_DATE_RE = re.compile(r'^(\d{4})-(\d{1,2})-(\d{1,2})(?:[ T].*)?$')
_SLASH_DATE_RE = re.compile(r'^(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})$')
_TIME_RE = re.compile(r'^(\d{1,2}):(\d{2})(?::(\d{2}))?$')
_OFFSET_RE = re.compile(r'^(?:UTC|GMT)?\s*([+-])(\d{1,2})(?::?(\d{2}))?$', re.IGNORECASE)

_FILL_FIRST = datetime(2000, 1, 1)
_FILL_SECOND = datetime(2001, 2, 2)

DisplayDate = namedtuple('DisplayDate', ['ddmmyy', 'ddmmyyyy', 'weekday'])
EMPTY_DISPLAY_DATE = DisplayDate('', '', '')


def resolve_timezone(value):
    """Turn a config value into a tzinfo.

    Accepts an IANA name (``Asia/Hong_Kong``) or a fixed offset such as
    ``UTC+8``, ``UTC+08:00`` or ``-0500``.
    """
    if value is None or value == '':
        value = DEFAULT_TIMEZONE
    if hasattr(value, 'utcoffset'):
        return value

    text = str(value).strip()
    if text.upper() in ('UTC', 'GMT', 'Z'):
        return timezone.utc

    m = _OFFSET_RE.match(text)
    if m:
        sign, hours, minutes = m.group(1), int(m.group(2)), int(m.group(3) or 0)
        if hours > 14 or minutes > 59:
            raise ValueError(f'Invalid UTC offset: {text}')
        offset = timedelta(hours=hours, minutes=minutes)
        return timezone(-offset if sign == '-' else offset)

    try:
        return ZoneInfo(text)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f'Unknown timezone: {text}') from e


def isoformat_utc(instant):
    """ISO 8601 text for a stored instant, always with a +00:00 offset.

    Storage keeps naive UTC; aware values are converted.
    """
    if instant is None:
        return None
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc).isoformat()
    return instant.astimezone(timezone.utc).isoformat()


def utc_now_naive():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _build_date(year, month, day):
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        raise ValidationError(DATE_ERROR)


class DateTimeNormalizer:
    """Formats and parses reading dates/times relative to one timezone."""

    def __init__(self, tz=None):
        self.tz = resolve_timezone(tz)

    def __repr__(self):
        return f'<DateTimeNormalizer {self.tz}>'

    # -- current moment ------------------------------------------------------

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def localize(self, instant: datetime) -> datetime:
        """Express an instant in the configured zone. Naive values are UTC."""
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return instant.astimezone(self.tz)

    def today(self) -> date:
        return self.now().date()

    def storage_stamp(self, instant: datetime = None):
        """Return ``(YYYY-MM-DD, HH:MM:SS)`` for an instant (default: now)."""
        local = self.localize(instant) if instant is not None else self.now()
        return local.strftime('%Y-%m-%d'), local.strftime('%H:%M:%S')

    def default_filter_window(self, now: datetime = None, days: int = DEFAULT_FILTER_DAYS):
        """Inclusive ``(from, to)`` covering the last ``days`` days up to today."""
        local = self.localize(now) if now is not None else self.now()
        to_date = local.date()
        from_date = to_date - timedelta(days=days)
        return from_date.isoformat(), to_date.isoformat()

    # -- parsing (display -> storage) ----------------------------------------

    def to_date(self, value) -> date:
        """Map any accepted date spelling to a ``date``.

        Raises ValidationError when no calendar date can be determined.
        """
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(self.tz)
            return value.date()
        if isinstance(value, date):
            return value
        if value is None:
            raise ValidationError(DATE_ERROR)

        text = str(value).strip()
        if not text:
            raise ValidationError(DATE_ERROR)

        m = _ISO_DATE_RE.match(text)
        if m:
            return _build_date(m.group(1), m.group(2), m.group(3))

        m = _SLASH_DATE_RE.match(text)
        if m:
            day, month, year = m.groups()
            if len(year) == 2:
                year = 2000 + int(year)
            return _build_date(year, month, day)

        # dateutil fills missing parts from its default; two different
        # defaults must agree or the text did not name a full date
        try:
            parsed = dateutil_parser.parse(text, dayfirst=True, default=_FILL_FIRST)
            check = dateutil_parser.parse(text, dayfirst=True, default=_FILL_SECOND)
        except (ValueError, OverflowError):
            raise ValidationError(DATE_ERROR)
        if parsed.date() != check.date():
            raise ValidationError(DATE_ERROR)
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(self.tz)
        return parsed.date()

    def parse_display_date(self, text) -> str:
        """Normalize user-entered date text to ``YYYY-MM-DD``."""
        return self.to_date(text).isoformat()

    def parse_display_time(self, text) -> str:
        """Normalize ``HH:MM`` or ``HH:MM:SS`` to ``HH:MM:SS``."""
        if isinstance(text, time):
            return text.strftime('%H:%M:%S')
        m = _TIME_RE.match(str(text or '').strip())
        if not m:
            raise ValidationError(TIME_ERROR)
        hour, minute, second = int(m.group(1)), int(m.group(2)), int(m.group(3) or 0)
        if hour > 23 or minute > 59 or second > 59:
            raise ValidationError(TIME_ERROR)
        return f'{hour:02d}:{minute:02d}:{second:02d}'

    # -- formatting (storage -> display) -------------------------------------

    def format_for_display(self, value) -> DisplayDate:
        """Render a stored date for the list and the edit form.

        Never raises; unparseable input is logged and yields empty strings.
        """
        try:
            d = self.to_date(value)
        except ValidationError:
            logger.warning('Could not parse date for display: %r', value)
            return EMPTY_DISPLAY_DATE

        # date.weekday() is Monday=0; WEEKDAYS starts on Sunday
        weekday = WEEKDAYS[(d.weekday() + 1) % 7]
        return DisplayDate(
            ddmmyy=f'{d.day:02d}/{d.month:02d}/{d.year % 100:02d}',
            ddmmyyyy=f'{d.day:02d}/{d.month:02d}/{d.year:04d}',
            weekday=weekday,
        )

    def format_time_for_display(self, value) -> str:
        """Render a stored time as ``HH:MM``. Returns '' when unparseable."""
        if isinstance(value, (datetime, time)):
            return value.strftime('%H:%M')
        if isinstance(value, timedelta):
            # MySQL TIME columns come back as timedelta from some drivers
            minutes = int(value.total_seconds()) // 60
            return f'{(minutes // 60) % 24:02d}:{minutes % 60:02d}'

        m = _TIME_RE.match(str(value or '').strip())
        if not m or int(m.group(1)) > 23 or int(m.group(2)) > 59:
            logger.warning('Could not parse time for display: %r', value)
            return ''
        return f'{int(m.group(1)):02d}:{m.group(2)}'


def get_normalizer() -> DateTimeNormalizer:
    """Return the normalizer configured for the current app."""
    from flask import current_app
    normalizer = current_app.extensions.get('bptracker.normalizer')
    if normalizer is None:
        normalizer = DateTimeNormalizer(current_app.config.get('APP_TIMEZONE'))
        current_app.extensions['bptracker.normalizer'] = normalizer
    return normalizer

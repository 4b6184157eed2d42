from .errors import ValidationError, DuplicateReadingError
from .classification import classify_bp, classify_pulse
from .datetime_format import DateTimeNormalizer, get_normalizer
from .event_logger import log_event
from .validators import validate_reading, validate_reading_update, validate_filter_range

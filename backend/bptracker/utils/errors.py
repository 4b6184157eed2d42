"""
Exceptions raised by the reading rules and surfaced by the API layer.
"""


class ValidationError(ValueError):
    """Input could not be mapped to a storable value."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.message = message
        self.errors = errors or [message]


class DuplicateReadingError(ValidationError):
    """Another reading already occupies the same date and time."""

    def __init__(self, reading_date, reading_time, existing_id=None):
        super().__init__(
            f'A reading already exists for {reading_date} {reading_time}'
        )
        self.reading_date = reading_date
        self.reading_time = reading_time
        self.existing_id = existing_id

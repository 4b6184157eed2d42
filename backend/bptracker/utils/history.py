"""
View state for one loaded page of readings.

Routes and exports build a ReadingHistory after each query and render from
it, rather than keeping a module-level list of readings around.
"""
from .classification import classify_bp, classify_pulse


class ReadingHistory:
    """Readings currently on screen plus the filter window that produced them."""

    def __init__(self, readings, normalizer, from_date=None, to_date=None):
        self.readings = list(readings)
        self.normalizer = normalizer
        self.from_date = from_date
        self.to_date = to_date

    def __len__(self):
        return len(self.readings)

    @property
    def is_empty(self):
        return not self.readings

    @property
    def is_filtered(self):
        return self.from_date is not None and self.to_date is not None

    def refresh(self, readings, from_date=None, to_date=None):
        """Replace the loaded readings wholesale, e.g. after a mutation."""
        self.readings = list(readings)
        self.from_date = from_date
        self.to_date = to_date
        return self

    def date_range_label(self):
        if not self.is_filtered:
            return ''
        start = self.normalizer.format_for_display(self.from_date).ddmmyy
        end = self.normalizer.format_for_display(self.to_date).ddmmyy
        return f'{start} to {end}'

    def display_row(self, reading):
        shown = self.normalizer.format_for_display(reading.reading_date)
        return {
            'date': shown.ddmmyy,
            'editDate': shown.ddmmyyyy,
            'weekday': shown.weekday,
            'time': self.normalizer.format_time_for_display(reading.reading_time),
            'bloodPressure': classify_bp(reading.systolic, reading.diastolic).to_dict(),
            'pulse': classify_pulse(reading.pulse).to_dict(),
        }

    def rows(self):
        """Yield ``(reading, display_row)`` pairs in list order."""
        for reading in self.readings:
            yield reading, self.display_row(reading)

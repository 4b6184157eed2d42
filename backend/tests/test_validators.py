"""Reading and filter validation."""
from types import SimpleNamespace

import pytest

from bptracker.utils.datetime_format import DateTimeNormalizer
from bptracker.utils.errors import ValidationError
from bptracker.utils.validators import (
    validate_filter_range, validate_reading, validate_reading_update,
)


def _reading(**overrides):
    data = {'upperPressure': 125, 'lowerPressure': 82, 'pulseRate': 70}
    data.update(overrides)
    return data


def test_valid_reading_has_no_errors():
    assert validate_reading(_reading()) == []
    assert validate_reading(_reading(upperPressure='125', lowerPressure='82')) == []


@pytest.mark.parametrize('field, value, message', [
    ('upperPressure', 49, 'Upper pressure must be between 50-300 mmHg'),
    ('upperPressure', 301, 'Upper pressure must be between 50-300 mmHg'),
    ('lowerPressure', 29, 'Lower pressure must be between 30-200 mmHg'),
    ('pulseRate', 29, 'Pulse rate must be between 30-200 bpm'),
    ('pulseRate', 201, 'Pulse rate must be between 30-200 bpm'),
])
def test_out_of_range(field, value, message):
    assert message in validate_reading(_reading(**{field: value}))


def test_range_edges_are_inclusive():
    assert validate_reading({'upperPressure': 300, 'lowerPressure': 200, 'pulseRate': 200}) == []
    assert validate_reading({'upperPressure': 50, 'lowerPressure': 30, 'pulseRate': 30}) == []


@pytest.mark.parametrize('upper, lower', [(120, 120), (110, 120)])
def test_upper_must_exceed_lower(upper, lower):
    errors = validate_reading(_reading(upperPressure=upper, lowerPressure=lower))
    assert errors == ['Upper pressure must be higher than lower pressure']


def test_missing_and_non_integer_fields():
    errors = validate_reading({'upperPressure': 'abc', 'pulseRate': True})
    assert 'Upper pressure must be an integer' in errors
    assert 'Lower pressure is required' in errors
    assert 'Pulse rate must be an integer' in errors


def test_fractional_values_rejected():
    assert validate_reading(_reading(pulseRate=70.5)) == ['Pulse rate must be an integer']
    assert validate_reading(_reading(pulseRate=70.0)) == []


def test_update_merges_over_current_values():
    current = SimpleNamespace(systolic=130, diastolic=85, pulse=72)
    assert validate_reading_update({'pulseRate': 64}, current) == []
    assert validate_reading_update({'lowerPressure': 130}, current) == [
        'Upper pressure must be higher than lower pressure']
    assert validate_reading_update({'upperPressure': None}, current) == ['Upper pressure is required']


class TestFilterRange:
    normalizer = DateTimeNormalizer('UTC+8')

    def test_no_filter(self):
        assert validate_filter_range(None, '', self.normalizer) == (None, None)

    def test_both_bounds(self):
        assert validate_filter_range('2025-10-01', '2025-10-29', self.normalizer) == ('2025-10-01', '2025-10-29')

    def test_display_format_accepted(self):
        assert validate_filter_range('01/10/2025', '29/10/2025', self.normalizer) == ('2025-10-01', '2025-10-29')

    def test_same_day(self):
        assert validate_filter_range('2025-10-29', '2025-10-29', self.normalizer) == ('2025-10-29', '2025-10-29')

    def test_one_sided(self):
        with pytest.raises(ValidationError, match='both from and to'):
            validate_filter_range('2025-10-01', None, self.normalizer)

    def test_inverted(self):
        with pytest.raises(ValidationError, match='before or equal'):
            validate_filter_range('2025-10-29', '2025-10-01', self.normalizer)

    def test_unparseable(self):
        with pytest.raises(ValidationError):
            validate_filter_range('yesterday-ish', '2025-10-01', self.normalizer)

"""Display rows built from loaded readings."""
from datetime import date, datetime, time, timezone
from types import SimpleNamespace

from bptracker.utils.datetime_format import DateTimeNormalizer
from bptracker.utils.export import generate_readings_csv, generate_readings_pdf
from bptracker.utils.history import ReadingHistory


def _reading(id, systolic, diastolic, pulse, reading_date, reading_time):
    return SimpleNamespace(
        id=id, systolic=systolic, diastolic=diastolic, pulse=pulse,
        reading_date=reading_date, reading_time=reading_time,
        created_at=datetime(2025, 10, 29, 1, 0, tzinfo=timezone.utc),
    )


READINGS = [
    _reading(2, 185, 125, 110, date(2025, 10, 29), time(20, 5, 9)),
    _reading(1, 118, 76, 58, date(2025, 10, 26), time(7, 30)),
]


def _history(**kwargs):
    return ReadingHistory(READINGS, DateTimeNormalizer('UTC+8'), **kwargs)


def test_rows_carry_display_fields():
    rows = [shown for _, shown in _history().rows()]
    assert rows[0] == {
        'date': '29/10/25',
        'editDate': '29/10/2025',
        'weekday': 'Wednesday',
        'time': '20:05',
        'bloodPressure': {'label': 'Crisis', 'severity': 'crisis'},
        'pulse': {'label': 'High', 'severity': 'high'},
    }
    assert rows[1]['weekday'] == 'Sunday'
    assert rows[1]['bloodPressure']['label'] == 'Normal'
    assert rows[1]['pulse']['label'] == 'Low'


def test_date_range_label():
    assert _history().date_range_label() == ''
    history = _history(from_date='2025-10-15', to_date='2025-10-29')
    assert history.is_filtered
    assert history.date_range_label() == '15/10/25 to 29/10/25'


def test_refresh_replaces_state():
    history = _history()
    assert len(history) == 2
    history.refresh([], '2025-01-01', '2025-01-31')
    assert history.is_empty
    assert history.from_date == '2025-01-01'


def test_csv_export():
    lines = generate_readings_csv(_history()).getvalue().splitlines()
    assert lines[0] == ('id,date,time,day_of_week,upper_pressure,lower_pressure,'
                        'bp_category,pulse_rate,pulse_category,created_at')
    assert lines[1].startswith('2,2025-10-29,20:05:09,Wednesday,185,125,Crisis,110,High,')
    assert lines[2].startswith('1,2025-10-26,07:30:00,Sunday,118,76,Normal,58,Low,')
    assert lines[1].endswith(',2025-10-29T01:00:00+00:00')


def test_pdf_export():
    history = _history(from_date='2025-10-15', to_date='2025-10-29')
    pdf = generate_readings_pdf(history, printed_at=datetime(2025, 10, 29, 21, 0, tzinfo=timezone.utc))
    assert pdf.getvalue().startswith(b'%PDF')

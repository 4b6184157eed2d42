from datetime import date, time

import pytest

from bptracker import create_app, db
from bptracker.models import BloodPressureReading


@pytest.fixture
def app(tmp_path):
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'test.db'}",
        'APP_TIMEZONE': 'UTC+08:00',
        'EVENT_LOG_FILE': str(tmp_path / 'events.log'),
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_reading(app):
    """Insert a reading directly and return its id."""
    def _make(systolic=120, diastolic=80, pulse=70,
              reading_date='2025-10-29', reading_time='08:00:00', client_ref=None):
        reading = BloodPressureReading(
            client_ref=client_ref,
            systolic=systolic,
            diastolic=diastolic,
            pulse=pulse,
            reading_date=date.fromisoformat(reading_date),
            reading_time=time.fromisoformat(reading_time),
        )
        db.session.add(reading)
        db.session.commit()
        return reading.id
    return _make

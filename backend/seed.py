"""
Seed script to populate the database with two weeks of demo readings.
Run from backend/: python seed.py
"""
import sys
import os
from datetime import time, timedelta
sys.path.insert(0, os.path.dirname(__file__))

from bptracker import create_app, db
from bptracker.models import BloodPressureReading
from bptracker.utils.datetime_format import get_normalizer

# (days ago, time taken, systolic, diastolic, pulse)
DEMO_READINGS = [
    (0, time(7, 30), 118, 76, 68),
    (1, time(7, 45), 124, 78, 72),
    (2, time(8, 0), 132, 84, 75),
    (4, time(21, 15), 128, 82, 88),
    (6, time(7, 20), 145, 92, 95),
    (9, time(7, 50), 138, 86, 102),
    (13, time(8, 10), 116, 74, 58),
]


def seed():
    app = create_app()
    with app.app_context():
        db.create_all()
        today = get_normalizer().today()
        for days_ago, taken_at, systolic, diastolic, pulse in DEMO_READINGS:
            reading_date = today - timedelta(days=days_ago)
            if BloodPressureReading.find_at(reading_date, taken_at):
                print(f'  Reading at {reading_date} {taken_at} already exists, skipping.')
                continue
            db.session.add(BloodPressureReading(
                systolic=systolic,
                diastolic=diastolic,
                pulse=pulse,
                reading_date=reading_date,
                reading_time=taken_at,
            ))
            print(f'  Added {systolic}/{diastolic} pulse {pulse} on {reading_date} {taken_at}')
        db.session.commit()
        print(f'Readings seeded: {BloodPressureReading.query.count()} total.')


if __name__ == "__main__":
    seed()

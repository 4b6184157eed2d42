"""
Blood Pressure Reading model.
"""
from datetime import date
from bptracker import db
from bptracker.utils.datetime_format import isoformat_utc, utc_now_naive


class BloodPressureReading(db.Model):
    """
    A single blood pressure and pulse measurement.
    The id is assigned by storage; client_ref holds the id a browser
    generated for the submission and is only used to spot re-posts.
    """
    __tablename__ = 'blood_pressure_readings'
    __table_args__ = (
        db.Index('ix_blood_pressure_readings_taken_at', 'reading_date', 'reading_time'),
    )

    id = db.Column(db.Integer, primary_key=True)
    client_ref = db.Column(db.BigInteger, unique=True, nullable=True)

    # Blood pressure values
    systolic = db.Column(db.Integer, nullable=False)
    diastolic = db.Column(db.Integer, nullable=False)
    pulse = db.Column(db.Integer, nullable=False)

    # When the reading was taken, in the configured zone
    reading_date = db.Column(db.Date, nullable=False)
    reading_time = db.Column(db.Time, nullable=False)

    # naive UTC
    created_at = db.Column(db.DateTime, default=utc_now_naive)

    @classmethod
    def find_by_client_ref(cls, client_ref):
        if client_ref is None:
            return None
        return cls.query.filter_by(client_ref=client_ref).first()

    @classmethod
    def find_at(cls, reading_date, reading_time, exclude_id=None):
        """Return a reading taken at exactly this date and time, if any."""
        query = cls.query.filter(
            cls.reading_date == reading_date,
            cls.reading_time == reading_time,
        )
        if exclude_id is not None:
            query = query.filter(cls.id != exclude_id)
        return query.first()

    @classmethod
    def in_range(cls, from_date=None, to_date=None):
        """Readings newest first, optionally limited to an inclusive date range."""
        query = cls.query
        if from_date is not None and to_date is not None:
            if isinstance(from_date, str):
                from_date = date.fromisoformat(from_date)
            if isinstance(to_date, str):
                to_date = date.fromisoformat(to_date)
            query = query.filter(cls.reading_date.between(from_date, to_date))
        return query.order_by(cls.reading_date.desc(), cls.reading_time.desc())

    def to_dict(self):
        input_date = self.reading_date.isoformat() if self.reading_date else None
        input_time = self.reading_time.strftime('%H:%M:%S') if self.reading_time else None
        return {
            'id': self.id,
            'upperPressure': self.systolic,
            'lowerPressure': self.diastolic,
            'pulseRate': self.pulse,
            'inputDate': input_date,
            'inputTime': input_time,
            'dateTime': f'{input_date} {input_time}',
            'createdAt': isoformat_utc(self.created_at),
        }

    def __repr__(self):
        return f'<BloodPressureReading {self.id}: {self.systolic}/{self.diastolic} @ {self.pulse}>'

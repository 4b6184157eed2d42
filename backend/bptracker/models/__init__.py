from .reading import BloodPressureReading

__all__ = ['BloodPressureReading']

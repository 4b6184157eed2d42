"""
Blood pressure and pulse categories (AHA/ACC guideline bands).
"""
from collections import namedtuple


class Category(namedtuple('Category', ['label', 'severity'])):
    """A display label plus the style key used to colour its badge."""
    __slots__ = ()

    def to_dict(self):
        return {'label': self.label, 'severity': self.severity}


BP_NORMAL = Category('Normal', 'normal')
BP_ELEVATED = Category('Elevated', 'elevated')
BP_STAGE_1 = Category('High Stage 1', 'high')
BP_STAGE_2 = Category('High Stage 2', 'high')
BP_CRISIS = Category('Crisis', 'crisis')

PULSE_LOW = Category('Low', 'low')
PULSE_NORMAL = Category('Normal', 'normal')
PULSE_HIGH = Category('High', 'high')

BP_LABELS = tuple(c.label for c in (BP_NORMAL, BP_ELEVATED, BP_STAGE_1, BP_STAGE_2, BP_CRISIS))
PULSE_LABELS = tuple(c.label for c in (PULSE_LOW, PULSE_NORMAL, PULSE_HIGH))


def classify_bp(systolic: int, diastolic: int) -> Category:
    """Classify a systolic/diastolic pair.

    The checks run in order and the first hit wins, so a diastolic in the
    Stage 1 band outranks a systolic in the Crisis band (e.g. 185/85 is
    High Stage 1). Keep the order when touching this.
    """
    if systolic < 120 and diastolic < 80:
        return BP_NORMAL
    if 120 <= systolic < 130 and diastolic < 80:
        return BP_ELEVATED
    if 130 <= systolic < 140 or 80 <= diastolic < 90:
        return BP_STAGE_1
    if systolic >= 180 or diastolic >= 120:
        return BP_CRISIS
    return BP_STAGE_2


def classify_pulse(pulse: int) -> Category:
    """Classify a resting pulse in bpm."""
    if pulse < 60:
        return PULSE_LOW
    if pulse <= 100:
        return PULSE_NORMAL
    return PULSE_HIGH

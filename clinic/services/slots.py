"""
Time-slot enumeration for doctor bookings.

A doctor's open slots for a date are computed from a fixed half-hour
grid.  When the doctor has published schedule entries for that weekday
only grid slots inside an available window are offered; a doctor with
no schedule at all is treated as available for the whole grid.  Slots
overlapping a non-cancelled appointment (taking its duration into
account) are then removed.

The listing is advisory: it is read-only and booking does not consult
it unless unique slots are enforced (see ``services.appointments``).
"""
from __future__ import annotations

from datetime import date as date_cls
from typing import Iterable

from django.conf import settings

from clinic.models import Appointment, DoctorSchedule

FALLBACK_START = "08:00"
FALLBACK_END = "17:00"


def to_minutes(hhmm: str) -> int:
    """Parse ``HH:MM`` into minutes after midnight."""
    hours, _, minutes = hhmm.partition(':')
    value = int(hours) * 60 + int(minutes or 0)
    if not 0 <= value < 24 * 60 or not 0 <= int(minutes or 0) < 60:
        raise ValueError(f"invalid time: {hhmm!r}")
    return value


def to_hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def client_day_of_week(day: date_cls) -> int:
    """Weekday in the client convention, 0 = Sunday."""
    return (day.weekday() + 1) % 7


def grid(start: str, end: str, step: int, *, inclusive: bool = True) -> list[str]:
    first, last = to_minutes(start), to_minutes(end)
    stop = last + 1 if inclusive else last
    return [to_hhmm(m) for m in range(first, stop, step)]


def fallback_slots() -> list[str]:
    """Grid offered by the client when the slot lookup is unavailable."""
    return grid(FALLBACK_START, FALLBACK_END, 30, inclusive=False)


def overlaps(start: int, length: int, other_start: int, other_length: int) -> bool:
    return start < other_start + other_length and other_start < start + length


def _inside_windows(slot: int, windows: Iterable[tuple[int, int]]) -> bool:
    return any(start <= slot < end for start, end in windows)


def available_slots(doctor_id: int, day: date_cls) -> list[str]:
    step = settings.APPOINTMENT_SLOT_MINUTES
    candidates = [to_minutes(s) for s in grid(settings.APPOINTMENT_SLOT_START, settings.APPOINTMENT_SLOT_END, step)]

    entries = list(DoctorSchedule.objects.filter(doctor_id=doctor_id))
    if entries:
        dow = client_day_of_week(day)
        windows = [
            (to_minutes(e.start_time), to_minutes(e.end_time))
            for e in entries
            if e.day_of_week == dow and e.is_available
        ]
        candidates = [m for m in candidates if _inside_windows(m, windows)]

    booked = [
        (to_minutes(a.time), a.duration or settings.APPOINTMENT_DEFAULT_DURATION)
        for a in Appointment.objects.filter(doctor_id=doctor_id, date=day)
        .exclude(status=Appointment.STATUS_CANCELLED)
        .only('time', 'duration')
    ]
    return [
        to_hhmm(m) for m in candidates
        if not any(overlaps(m, step, start, length) for start, length in booked)
    ]

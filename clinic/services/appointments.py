"""
Booking rules for appointments.

``book_appointment`` and ``update_appointment`` apply the checks in the
order the client relies on: the patient must exist (404), the doctor
must exist and hold the doctor role (404), and the requester must be the
patient or a doctor (403).  Two policies are switchable from settings:

* ``APPOINTMENT_ENFORCE_UNIQUE_SLOT``: reject (409) a booking that
  overlaps a non-cancelled appointment of the same doctor and date.
  Off by default; the slot listing is then only advisory.
* ``APPOINTMENT_ENFORCE_STATUS_TRANSITIONS``: only allow
  pending -> completed | cancelled.  Off by default, any status may then
  overwrite any other.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from django.conf import settings
from django.db import transaction
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from clinic.exceptions import Conflict
from clinic.models import Appointment, User
from clinic.permissions import can_access
from clinic.services import store
from clinic.services.audit import log_action
from clinic.services.slots import overlaps, to_minutes

logger = logging.getLogger(__name__)

_TRANSITIONS = {
    Appointment.STATUS_PENDING: {Appointment.STATUS_COMPLETED, Appointment.STATUS_CANCELLED},
    Appointment.STATUS_COMPLETED: set(),
    Appointment.STATUS_CANCELLED: set(),
}

# fields a PATCH may touch; patient and doctor are fixed at creation
UPDATABLE_FIELDS = ('date', 'time', 'duration', 'purpose', 'status', 'notes')


def can_transition(old: str, new: str) -> bool:
    if old == new:
        return True
    if not settings.APPOINTMENT_ENFORCE_STATUS_TRANSITIONS:
        return True
    return new in _TRANSITIONS.get(old, set())


def find_conflict(doctor_id: int, day, time: str, duration: int, *, exclude_id: Optional[int] = None) -> Optional[Appointment]:
    """Return a non-cancelled appointment of the doctor overlapping the given slot."""
    start = to_minutes(time)
    qs = Appointment.objects.filter(doctor_id=doctor_id, date=day).exclude(status=Appointment.STATUS_CANCELLED)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    for other in qs:
        if overlaps(start, duration, to_minutes(other.time), other.duration):
            return other
    return None


def _check_slot(doctor_id: int, day, time: str, duration: int, exclude_id: Optional[int] = None) -> None:
    if not settings.APPOINTMENT_ENFORCE_UNIQUE_SLOT:
        return
    clash = find_conflict(doctor_id, day, time, duration, exclude_id=exclude_id)
    if clash is not None:
        raise Conflict(f"Doctor already has an appointment at {clash.time} on {clash.date}")


def book_appointment(requester: User, data: dict[str, Any]) -> Appointment:
    patient = store.users.get(data['patient_id'])
    if patient is None:
        raise NotFound('Patient not found')
    doctor = store.users.get(data['doctor_id'])
    if doctor is None or not doctor.is_doctor:
        raise NotFound('Doctor not found')
    if not can_access(requester, patient.id):
        raise PermissionDenied('Access denied')

    duration = data.get('duration') or settings.APPOINTMENT_DEFAULT_DURATION
    with transaction.atomic():
        _check_slot(doctor.id, data['date'], data['time'], duration)
        appointment = store.appointments.create(
            patient=patient,
            doctor=doctor,
            date=data['date'],
            time=data['time'],
            duration=duration,
            purpose=data['purpose'],
            status=data.get('status') or Appointment.STATUS_PENDING,
            notes=data.get('notes', ''),
        )
    logger.info("appointment #%s booked: doctor=%s patient=%s %s %s",
                appointment.id, doctor.id, patient.id, appointment.date, appointment.time)
    return appointment


def update_appointment(requester: User, appointment: Appointment, changes: dict[str, Any]) -> Appointment:
    if not can_access(requester, appointment.patient_id, appointment.doctor_id):
        raise PermissionDenied('Access denied')

    partial = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
    old_status = appointment.status
    new_status = partial.get('status', old_status)
    if not can_transition(old_status, new_status):
        raise ValidationError({'status': [f"Cannot change status from {old_status} to {new_status}"]})

    with transaction.atomic():
        if {'date', 'time', 'duration'} & partial.keys() and new_status != Appointment.STATUS_CANCELLED:
            _check_slot(
                appointment.doctor_id,
                partial.get('date', appointment.date),
                partial.get('time', appointment.time),
                partial.get('duration', appointment.duration),
                exclude_id=appointment.id,
            )
        updated = store.appointments.update(appointment.id, **partial)
        if new_status != old_status:
            log_action(user=requester, action='appointment_status', object_type='appointment',
                       object_id=appointment.id, detail={'from': old_status, 'to': new_status})
    return updated

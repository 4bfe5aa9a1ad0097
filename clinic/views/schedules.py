"""
Doctor schedule views.

Schedules are public to signed-in users; only the owning doctor may add,
change or delete entries.  ``available_slots`` is the server-side slot
lookup used by the booking form.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import User
from clinic.permissions import IsDoctorRole
from clinic.serializers.schedule import AvailableSlotsQuerySerializer, ScheduleSerializer
from clinic.services import notify, shaping, store
from clinic.services.slots import available_slots as compute_slots, fallback_slots

from .common import fetch


def _doctor_or_404(doctor_id: int) -> User:
    doctor = store.users.get(doctor_id)
    if doctor is None or not doctor.is_doctor:
        raise NotFound('Doctor not found')
    return doctor


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def doctor_schedule(request, doctor_id: int):
    if request.method == 'GET':
        entries = store.schedules.list(doctor_id=doctor_id)
        return Response({'schedule': [shaping.schedule(e) for e in entries]})

    # POST: a doctor maintains their own schedule only
    if not IsDoctorRole().has_permission(request, None) or request.user.id != doctor_id:
        raise PermissionDenied('Access denied')
    s = ScheduleSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    entry = store.schedules.create(doctor=request.user, **s.validated_data)
    notify.entity_changed('schedule', entry.id, 'created')
    return Response({'schedule': shaping.schedule(entry)}, status=status.HTTP_201_CREATED)


@api_view(['PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsDoctorRole])
def schedule_detail(request, schedule_id: int):
    entry = fetch(store.schedules, schedule_id, 'Schedule not found')
    if entry.doctor_id != request.user.id:
        raise PermissionDenied('Access denied')

    if request.method == 'PATCH':
        s = ScheduleSerializer(entry, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        entry = store.schedules.update(entry.id, **s.validated_data)
        notify.entity_changed('schedule', entry.id, 'updated')
        return Response({'schedule': shaping.schedule(entry)})

    store.schedules.delete(entry.id)
    notify.entity_changed('schedule', schedule_id, 'deleted')
    return Response({'success': True})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def available_slots(request, doctor_id: int):
    doctor = _doctor_or_404(doctor_id)
    q = AvailableSlotsQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    day = q.validated_data['date']
    return Response({
        'doctorId': doctor.id,
        'date': day.isoformat(),
        'availableSlots': compute_slots(doctor.id, day),
        'fallbackSlots': fallback_slots(),
    })

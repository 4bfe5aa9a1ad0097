"""
Appointment views.

Listing honours explicit ``doctorId`` (optionally with ``date``) and
``patientId`` filters in that order, otherwise returns the requester's
own appointments by role.  Patients only ever see appointments they are
on.  Booking and updates go through :mod:`clinic.services.appointments`.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import User
from clinic.permissions import ensure_access
from clinic.serializers.appointments import (
    AppointmentCreateSerializer,
    AppointmentListQuerySerializer,
    AppointmentUpdateSerializer,
)
from clinic.services import notify, shaping, store
from clinic.services.appointments import book_appointment, update_appointment

from .common import fetch


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def appointments_list(request):
    user: User = request.user
    if request.method == 'GET':
        q = AppointmentListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        doctor_id = q.validated_data.get('doctorId')
        patient_id = q.validated_data.get('patientId')
        day = q.validated_data.get('date')

        filters = {}
        if doctor_id and day:
            filters = {'doctor_id': doctor_id, 'date': day}
        elif doctor_id:
            filters = {'doctor_id': doctor_id}
        elif patient_id:
            ensure_access(user, patient_id)
            filters = {'patient_id': patient_id}
        elif user.is_doctor:
            filters = {'doctor_id': user.id}
        else:
            filters = {'patient_id': user.id}
        if not user.is_doctor:
            filters['patient_id'] = user.id

        appointments = store.appointments.list(**filters)
        return Response({'appointments': [shaping.appointment(a) for a in appointments]})

    s = AppointmentCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appointment = book_appointment(user, s.validated_data)
    notify.entity_changed('appointment', appointment.id, 'created', owner_id=appointment.patient_id)
    return Response({'appointment': shaping.appointment(appointment)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def appointment_detail(request, pk: int):
    user: User = request.user
    appointment = fetch(store.appointments, pk, 'Appointment not found')

    if request.method == 'GET':
        ensure_access(user, appointment.patient_id, appointment.doctor_id)
        return Response({'appointment': shaping.appointment(appointment)})

    if request.method == 'PATCH':
        ensure_access(user, appointment.patient_id, appointment.doctor_id)
        s = AppointmentUpdateSerializer(appointment, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        updated = update_appointment(user, appointment, s.validated_data)
        notify.entity_changed('appointment', appointment.id, 'updated', owner_id=appointment.patient_id)
        return Response({'appointment': shaping.appointment(updated)})

    ensure_access(user, appointment.patient_id, appointment.doctor_id)
    store.appointments.delete(appointment.id)
    notify.entity_changed('appointment', pk, 'deleted', owner_id=appointment.patient_id)
    return Response({'success': True})

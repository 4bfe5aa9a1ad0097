"""
Medical record views.  Doctors write; patients read their own.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import User
from clinic.permissions import check_object_permission, ensure_access, ensure_doctor
from clinic.serializers.records import MedicalRecordSerializer, MedicalRecordUpdateSerializer, RecordListQuerySerializer
from clinic.services import notify, shaping, store

from .common import fetch, fetch_patient


def _check_appointment(appointment_id, patient_id: int) -> None:
    if not appointment_id:
        return
    appointment = store.appointments.get(appointment_id)
    if appointment is None or appointment.patient_id != patient_id:
        raise NotFound('Appointment not found')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def records_list(request):
    user: User = request.user
    if request.method == 'GET':
        q = RecordListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        patient_id = q.validated_data.get('patientId')
        if patient_id:
            ensure_access(user, patient_id)
            records = store.medical_records.list(patient_id=patient_id)
        else:
            # unfiltered listing spans every patient
            ensure_doctor(user)
            records = store.medical_records.list()
        return Response({'records': [shaping.medical_record(r, with_patient=True) for r in records]})

    ensure_doctor(user)
    s = MedicalRecordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    patient = fetch_patient(data.pop('patient_id'))
    _check_appointment(data.get('appointment_id'), patient.id)
    record = store.medical_records.create(patient=patient, **data)
    notify.entity_changed('medicalRecord', record.id, 'created', owner_id=record.patient_id)
    return Response({'record': shaping.medical_record(record)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def record_detail(request, pk: int):
    record = fetch(store.medical_records, pk, 'Medical record not found')
    if request.method == 'GET':
        check_object_permission(request, record)
        return Response({'record': shaping.medical_record(record, with_patient=True)})

    ensure_doctor(request.user)
    s = MedicalRecordUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    _check_appointment(s.validated_data.get('appointment_id'), record.patient_id)
    record = store.medical_records.update(record.id, **s.validated_data)
    notify.entity_changed('medicalRecord', record.id, 'updated', owner_id=record.patient_id)
    return Response({'record': shaping.medical_record(record)})

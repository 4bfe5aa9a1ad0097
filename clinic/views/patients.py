"""
Per-patient views: medical background and the patient's records, files
and invoices.  Every route is limited to the patient themself and to
doctors.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.permissions import ensure_access
from clinic.serializers.patient_info import PatientInfoSerializer
from clinic.services import notify, shaping, store

from .common import fetch_patient


@api_view(['GET', 'POST', 'PATCH'])
@permission_classes([IsAuthenticated])
def patient_info(request, patient_id: int):
    ensure_access(request.user, patient_id)
    info = store.patient_infos.queryset().filter(patient_id=patient_id).first()

    if request.method == 'GET':
        if info is None:
            raise NotFound('Patient info not found')
        return Response({'patientInfo': shaping.patient_info(info)})

    if request.method == 'POST':
        patient = fetch_patient(patient_id)
        if info is not None:
            raise ValidationError('Patient info already exists')
        s = PatientInfoSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        info = store.patient_infos.create(patient=patient, **s.validated_data)
        notify.entity_changed('patientInfo', info.id, 'created', owner_id=info.patient_id)
        return Response({'patientInfo': shaping.patient_info(info)}, status=status.HTTP_201_CREATED)

    # PATCH
    if info is None:
        raise NotFound('Patient info not found')
    s = PatientInfoSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    info = store.patient_infos.update(info.id, **s.validated_data)
    notify.entity_changed('patientInfo', info.id, 'updated', owner_id=info.patient_id)
    return Response({'patientInfo': shaping.patient_info(info)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def patient_records(request, patient_id: int):
    ensure_access(request.user, patient_id)
    records = store.medical_records.list(patient_id=patient_id)
    return Response({'records': [shaping.medical_record(r) for r in records]})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def patient_files(request, patient_id: int):
    ensure_access(request.user, patient_id)
    files = store.medical_files.list(patient_id=patient_id)
    return Response({'files': [shaping.medical_file(f) for f in files]})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def patient_invoices(request, patient_id: int):
    ensure_access(request.user, patient_id)
    invoices = store.invoices.list(patient_id=patient_id)
    return Response({'invoices': [shaping.invoice(i) for i in invoices]})

"""
Prescription views.

Doctors issue prescriptions in their own name, optionally with the
medication items inline; the prescription and its items are written in
one transaction.  Further items may only be added by the issuing doctor.
"""
from __future__ import annotations

from django.db import transaction
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import PrescriptionItem, User
from clinic.permissions import IsDoctorRole, ensure_access, ensure_doctor
from clinic.serializers.prescriptions import (
    PrescriptionCreateSerializer,
    PrescriptionItemSerializer,
    PrescriptionListQuerySerializer,
)
from clinic.services import notify, shaping, store

from .common import fetch, fetch_patient


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def prescriptions_list(request):
    user: User = request.user
    if request.method == 'GET':
        q = PrescriptionListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        patient_id = q.validated_data.get('patientId')
        doctor_id = q.validated_data.get('doctorId')
        if patient_id:
            ensure_access(user, patient_id)
            filters = {'patient_id': patient_id}
        elif doctor_id:
            filters = {'doctor_id': doctor_id}
            if not user.is_doctor:
                filters['patient_id'] = user.id
        elif user.is_doctor:
            filters = {'doctor_id': user.id}
        else:
            filters = {'patient_id': user.id}
        prescriptions = store.prescriptions.list(**filters)
        return Response({'prescriptions': [shaping.prescription(p) for p in prescriptions]})

    ensure_doctor(user)
    s = PrescriptionCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    items = data.pop('items', [])
    patient = fetch_patient(data.pop('patient_id'))
    if data.get('appointment_id') and store.appointments.get(data['appointment_id']) is None:
        raise NotFound('Appointment not found')
    with transaction.atomic():
        prescription = store.prescriptions.create(patient=patient, doctor=user, **data)
        PrescriptionItem.objects.bulk_create([PrescriptionItem(prescription=prescription, **item) for item in items])
    notify.entity_changed('prescription', prescription.id, 'created', owner_id=prescription.patient_id)
    prescription = store.prescriptions.get(prescription.id)
    return Response({'prescription': shaping.prescription(prescription)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def prescription_detail(request, pk: int):
    prescription = fetch(store.prescriptions, pk, 'Prescription not found')
    ensure_access(request.user, prescription.patient_id, prescription.doctor_id)
    return Response({'prescription': shaping.prescription(prescription)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsDoctorRole])
def prescription_items(request, pk: int):
    prescription = fetch(store.prescriptions, pk, 'Prescription not found')
    if prescription.doctor_id != request.user.id:
        raise PermissionDenied('Access denied')
    s = PrescriptionItemSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    item = store.prescription_items.create(prescription=prescription, **s.validated_data)
    notify.entity_changed('prescription', prescription.id, 'updated', owner_id=prescription.patient_id)
    return Response({'item': shaping.prescription_item(item)}, status=status.HTTP_201_CREATED)

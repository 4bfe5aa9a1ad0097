"""
Medical file views.  File content travels inline as base64; listings
from ``/api/patients/<id>/files`` include it as the client expects.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.permissions import check_object_permission, ensure_access
from clinic.serializers.files import MedicalFileSerializer
from clinic.services import notify, shaping, store
from clinic.services.audit import log_action

from .common import fetch, fetch_patient


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def files_upload(request):
    s = MedicalFileSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    ensure_access(request.user, data['patient_id'])
    patient = fetch_patient(data.pop('patient_id'))
    record_id = data.get('record_id')
    if record_id:
        record = store.medical_records.get(record_id)
        if record is None or record.patient_id != patient.id:
            raise ValidationError({'recordId': ['Record does not belong to this patient']})
    f = store.medical_files.create(patient=patient, **data)
    notify.entity_changed('medicalFile', f.id, 'created', owner_id=f.patient_id)
    return Response({'file': shaping.medical_file(f)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def file_detail(request, pk: int):
    f = fetch(store.medical_files, pk, 'Medical file not found')
    check_object_permission(request, f)
    if request.method == 'GET':
        return Response({'file': shaping.medical_file(f)})

    store.medical_files.delete(f.id)
    log_action(user=request.user, action='file_delete', object_type='medical_file', object_id=pk,
               detail={'patientId': f.patient_id, 'fileName': f.file_name})
    notify.entity_changed('medicalFile', pk, 'deleted', owner_id=f.patient_id)
    return Response({'success': True})

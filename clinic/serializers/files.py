import base64
import binascii

from django.conf import settings
from rest_framework import serializers

from .fields import CleanCharField


class MedicalFileSerializer(serializers.Serializer):
    """Upload of one file, carried inline as base64 (optionally a data: URL)."""

    patientId = serializers.IntegerField(source='patient_id', min_value=1)
    recordId = serializers.IntegerField(source='record_id', min_value=1, required=False, allow_null=True)
    fileType = CleanCharField(source='file_type', max_length=64)
    fileName = CleanCharField(source='file_name', max_length=255)
    fileData = serializers.CharField(source='file_data', trim_whitespace=True)
    description = CleanCharField(required=False, allow_blank=True)

    def validate_fileData(self, v):
        payload = v.split(',', 1)[1] if v.startswith('data:') and ',' in v else v
        try:
            raw = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError):
            raise serializers.ValidationError('File data must be base64 encoded')
        if len(raw) > settings.UPLOAD_MAX_MB * 1024 * 1024:
            raise serializers.ValidationError(f'File exceeds {settings.UPLOAD_MAX_MB} MB')
        return v

from rest_framework import serializers

from .fields import CleanCharField, CleanListField


class MedicalRecordSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(source='patient_id', min_value=1)
    appointmentId = serializers.IntegerField(source='appointment_id', min_value=1, required=False, allow_null=True)
    recordDate = serializers.DateTimeField(source='record_date', required=False)
    diagnosis = CleanCharField(required=False, allow_blank=True)
    symptoms = CleanListField(required=False)
    treatment = CleanCharField(required=False, allow_blank=True)
    notes = CleanCharField(required=False, allow_blank=True)


class MedicalRecordUpdateSerializer(MedicalRecordSerializer):
    patientId = None


class RecordListQuerySerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1, required=False)

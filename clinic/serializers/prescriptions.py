from rest_framework import serializers

from .fields import CleanCharField


class PrescriptionItemSerializer(serializers.Serializer):
    medicationName = CleanCharField(source='medication_name', max_length=255)
    dosage = CleanCharField(max_length=128)
    frequency = CleanCharField(max_length=128)
    duration = CleanCharField(max_length=128)
    instructions = CleanCharField(required=False, allow_blank=True)


class PrescriptionCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(source='patient_id', min_value=1)
    appointmentId = serializers.IntegerField(source='appointment_id', min_value=1, required=False, allow_null=True)
    prescriptionDate = serializers.DateTimeField(source='prescription_date', required=False)
    expiryDate = serializers.DateField(source='expiry_date', required=False, allow_null=True)
    diagnosis = CleanCharField(required=False, allow_blank=True)
    notes = CleanCharField(required=False, allow_blank=True)
    items = PrescriptionItemSerializer(many=True, required=False)


class PrescriptionListQuerySerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1, required=False)
    doctorId = serializers.IntegerField(min_value=1, required=False)

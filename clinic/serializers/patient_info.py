from rest_framework import serializers

from .fields import CleanCharField, CleanListField


class PatientInfoSerializer(serializers.Serializer):
    allergies = CleanListField(required=False)
    medicalConditions = CleanListField(source='medical_conditions', required=False)
    currentMedications = CleanListField(source='current_medications', required=False)
    emergencyContact = CleanCharField(source='emergency_contact', max_length=255, required=False, allow_blank=True)
    emergencyPhone = CleanCharField(source='emergency_phone', max_length=32, required=False, allow_blank=True)
    height = CleanCharField(max_length=32, required=False, allow_blank=True)
    weight = CleanCharField(max_length=32, required=False, allow_blank=True)

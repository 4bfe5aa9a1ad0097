from rest_framework import serializers

from clinic.models import Appointment
from .fields import CleanCharField, TimeOfDayField


class AppointmentCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(source='patient_id', min_value=1)
    doctorId = serializers.IntegerField(source='doctor_id', min_value=1)
    date = serializers.DateField()
    time = TimeOfDayField()
    duration = serializers.IntegerField(min_value=1, max_value=24 * 60, required=False)
    purpose = CleanCharField(max_length=255)
    status = serializers.ChoiceField(choices=Appointment.STATUS_CHOICES, required=False)
    notes = CleanCharField(required=False, allow_blank=True)


class AppointmentUpdateSerializer(serializers.Serializer):
    """Fields a PATCH may change.

    ``patientId`` and ``doctorId`` are fixed at booking: echoing the current
    value is tolerated, sending a different one is an error.
    """

    date = serializers.DateField(required=False)
    time = TimeOfDayField(required=False)
    duration = serializers.IntegerField(min_value=1, max_value=24 * 60, required=False)
    purpose = CleanCharField(max_length=255, required=False)
    status = serializers.ChoiceField(choices=Appointment.STATUS_CHOICES, required=False)
    notes = CleanCharField(required=False, allow_blank=True)

    def validate(self, attrs):
        current = {'patientId': getattr(self.instance, 'patient_id', None), 'doctorId': getattr(self.instance, 'doctor_id', None)}
        fixed = [f for f, v in current.items() if f in self.initial_data and str(self.initial_data[f]) != str(v)]
        if fixed:
            raise serializers.ValidationError({f: ['This field cannot be changed'] for f in fixed})
        return attrs


class AppointmentListQuerySerializer(serializers.Serializer):
    doctorId = serializers.IntegerField(min_value=1, required=False)
    patientId = serializers.IntegerField(min_value=1, required=False)
    date = serializers.DateField(required=False)

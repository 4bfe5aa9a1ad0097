from rest_framework import serializers

from clinic.services.slots import to_minutes
from .fields import TimeOfDayField


class ScheduleSerializer(serializers.Serializer):
    dayOfWeek = serializers.IntegerField(source='day_of_week', min_value=0, max_value=6)
    startTime = TimeOfDayField(source='start_time')
    endTime = TimeOfDayField(source='end_time')
    isAvailable = serializers.BooleanField(source='is_available', required=False, default=True)

    def validate(self, attrs):
        instance = self.instance
        start = attrs.get('start_time', getattr(instance, 'start_time', None))
        end = attrs.get('end_time', getattr(instance, 'end_time', None))
        if start and end and to_minutes(start) >= to_minutes(end):
            raise serializers.ValidationError({'endTime': ['End time must be after start time']})
        return attrs


class AvailableSlotsQuerySerializer(serializers.Serializer):
    date = serializers.DateField()

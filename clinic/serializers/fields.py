import re

import bleach
from rest_framework import serializers

HHMM = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


class CleanCharField(serializers.CharField):
    """CharField that strips any markup with ``bleach.clean``."""

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        return bleach.clean(value, strip=True)


class TimeOfDayField(serializers.CharField):
    """``HH:MM`` on a 24 hour clock."""

    def __init__(self, **kwargs):
        kwargs.setdefault('max_length', 5)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        if not HHMM.match(value):
            raise serializers.ValidationError('Time must be HH:MM (24 hour clock).')
        return value


class CleanListField(serializers.ListField):
    child = CleanCharField(max_length=255, allow_blank=True)

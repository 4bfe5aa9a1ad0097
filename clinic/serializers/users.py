from rest_framework import serializers

from clinic.models import User
from .auth import ProfileFieldsSerializer


class UserListQuerySerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, required=False)


class UserUpdateSerializer(ProfileFieldsSerializer):
    """Profile changes.  ``role``, ``username`` and ``password`` are not fields here."""

    isActive = serializers.BooleanField(source='is_active', required=False)

    def validate_isActive(self, v):
        request = self.context.get('request')
        if request is None or getattr(request.user, 'role', None) != User.ROLE_DOCTOR:
            raise serializers.ValidationError('Only doctors may change account status.')
        return v

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from clinic.models import User
from .fields import CleanCharField, CleanListField


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)


class ProfileFieldsSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False, allow_blank=True)
    fullName = CleanCharField(source='full_name', max_length=255, required=False, allow_blank=True)
    phone = CleanCharField(max_length=32, required=False, allow_blank=True)
    gender = serializers.ChoiceField(choices=User.GENDER_CHOICES, required=False, allow_blank=True)
    dateOfBirth = serializers.DateField(source='date_of_birth', required=False, allow_null=True)
    bloodGroup = serializers.ChoiceField(source='blood_group', choices=User.BLOOD_GROUPS, required=False, allow_blank=True)
    address = CleanCharField(required=False, allow_blank=True)
    profileImage = serializers.CharField(source='profile_image', required=False, allow_blank=True)
    specialization = CleanCharField(max_length=255, required=False, allow_blank=True)
    languages = CleanListField(required=False)

    def validate_profileImage(self, v):
        if v and not v.startswith('data:image'):
            raise serializers.ValidationError('Invalid image format')
        return v


class RegisterSerializer(ProfileFieldsSerializer):
    username = serializers.RegexField(r'^[\w.@+-]+$', max_length=150)
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, required=False, default=User.ROLE_PATIENT)

    def validate_username(self, v):
        if User.objects.filter(username__iexact=v).exists():
            raise serializers.ValidationError('Username already exists')
        return v

    def validate(self, attrs):
        candidate = User(username=attrs['username'], email=attrs.get('email', ''))
        try:
            validate_password(attrs['password'], user=candidate)
        except DjangoValidationError as e:
            raise serializers.ValidationError({'password': list(e.messages)})
        return attrs


class ChangePasswordSerializer(serializers.Serializer):
    currentPassword = serializers.CharField(trim_whitespace=False)
    newPassword = serializers.CharField(trim_whitespace=False)

    def validate(self, attrs):
        user = self.context['request'].user
        if not user.check_password(attrs['currentPassword']):
            raise serializers.ValidationError({'currentPassword': ['Current password is incorrect']})
        try:
            validate_password(attrs['newPassword'], user=user)
        except DjangoValidationError as e:
            raise serializers.ValidationError({'newPassword': list(e.messages)})
        return attrs

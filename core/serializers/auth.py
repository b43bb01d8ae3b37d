from rest_framework import serializers

from core.models import BLOOD_TYPE_CHOICES, PROFILE_TYPE_CHOICES
from core.serializers import clean_text


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_email(self, v):
        return (v or '').strip().lower()

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required')
        return v


class SignupSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False, write_only=True)
    type = serializers.ChoiceField(choices=PROFILE_TYPE_CHOICES)
    name = serializers.CharField(max_length=255)
    contact = serializers.CharField(max_length=64)
    address = serializers.CharField(max_length=255)
    bloodType = serializers.ChoiceField(choices=BLOOD_TYPE_CHOICES, required=False, allow_null=True, allow_blank=True)

    def validate_email(self, v):
        return (v or '').strip().lower()

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Name is required')
        return v

    def validate_contact(self, v):
        return clean_text(v)

    def validate_address(self, v):
        return clean_text(v)

    def validate(self, attrs):
        if attrs['type'] == 'donor':
            if not attrs.get('bloodType'):
                raise serializers.ValidationError({'bloodType': 'Donors must select a blood type'})
        else:
            attrs['bloodType'] = None
        return attrs


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)

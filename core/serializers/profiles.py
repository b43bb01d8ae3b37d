from rest_framework import serializers

from core.models import BLOOD_TYPE_CHOICES
from core.serializers import clean_text


class ProfileUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    contact = serializers.CharField(max_length=64)
    address = serializers.CharField(max_length=255)
    # Accepted from every caller; only persisted for donor profiles.
    bloodType = serializers.ChoiceField(choices=BLOOD_TYPE_CHOICES, required=False, allow_null=True, allow_blank=True)

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Name is required')
        return v

    def validate_contact(self, v):
        return clean_text(v)

    def validate_address(self, v):
        return clean_text(v)


class DonorListQuerySerializer(serializers.Serializer):
    bloodType = serializers.ChoiceField(choices=['all', *[c for c, _ in BLOOD_TYPE_CHOICES]], required=False, default='all')


def format_profile(profile) -> dict:
    return {
        'id': profile.id,
        'userId': profile.user_id,
        'type': profile.type,
        'name': profile.name,
        'contact': profile.contact,
        'address': profile.address,
        'bloodType': profile.blood_type,
        'email': profile.user.email,
    }

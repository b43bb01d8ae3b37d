from rest_framework import serializers

from core.models import BLOOD_TYPE_CHOICES, URGENCY_CHOICES
from core.serializers import clean_text

SORT_CHOICES = ['recent', 'urgent']


class BloodRequestCreateSerializer(serializers.Serializer):
    bloodType = serializers.ChoiceField(choices=BLOOD_TYPE_CHOICES)
    unitsNeeded = serializers.IntegerField(min_value=1, max_value=1000)
    urgencyLevel = serializers.ChoiceField(choices=URGENCY_CHOICES)
    description = serializers.CharField(required=False, allow_blank=True, max_length=2000, default='')

    def validate_description(self, v):
        return clean_text(v)


class BloodRequestDeleteSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)


class RequestListQuerySerializer(serializers.Serializer):
    bloodType = serializers.ChoiceField(choices=['all', *[c for c, _ in BLOOD_TYPE_CHOICES]], required=False, default='all')
    sortBy = serializers.ChoiceField(choices=SORT_CHOICES, required=False, default='recent')

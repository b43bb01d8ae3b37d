"""
Hospital dashboard: a hospital's own blood requests.

Creates and deletes go through the profile-scoped mutation flow in
:mod:`core.services.blood_requests`: the caller's profile is resolved
first and must be a hospital (donors get 403), then the write is
filtered by that profile id.  The response
reports success only once the database confirmed the write.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from core.serializers.blood_requests import BloodRequestCreateSerializer, BloodRequestDeleteSerializer
from core.services.blood_requests import (
    RequestRecord,
    create_blood_request,
    delete_blood_request,
    list_hospital_requests,
)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_requests(request):
    """Return the caller's requests, newest first."""
    records = list_hospital_requests(request.user)
    return Response({'ok': True, 'data': [r.as_dict() for r in records]})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def create_request(request):
    data = BloodRequestCreateSerializer(data=request.data)
    data.is_valid(raise_exception=True)
    vd = data.validated_data
    obj = create_blood_request(
        request.user,
        blood_type=vd['bloodType'],
        units_needed=vd['unitsNeeded'],
        urgency_level=vd['urgencyLevel'],
        description=vd.get('description', ''),
    )
    return Response({
        'ok': True,
        'message': 'Blood request created successfully',
        'data': RequestRecord.from_model(obj, with_hospital=False).as_dict(),
    }, status=status.HTTP_201_CREATED)

create_request.cls.throttle_scope = 'request_write'


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def delete_request(request):
    """Delete one of the caller's requests.  Not owned or missing -> 404."""
    data = BloodRequestDeleteSerializer(data=request.data)
    data.is_valid(raise_exception=True)
    request_id = data.validated_data['id']
    delete_blood_request(request.user, request_id)
    return Response({'ok': True, 'message': 'Request deleted successfully', 'id': request_id})

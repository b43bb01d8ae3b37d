"""
Profile endpoints for donors and hospitals.

Each account reads and updates only its own profile.  Hospitals never
store a blood type: a submitted ``bloodType`` is discarded for them.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.serializers.profiles import ProfileUpdateSerializer, format_profile
from core.services.profiles import resolve_profile, update_profile
from core.services.session import dashboard_for


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def profile_get(request):
    """Return the caller's profile and the dashboard to go back to."""
    profile = resolve_profile(request.user)
    return Response({'ok': True, 'data': format_profile(profile), 'dashboard': dashboard_for(profile)})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def profile_update(request):
    data = ProfileUpdateSerializer(data=request.data)
    data.is_valid(raise_exception=True)
    vd = data.validated_data
    profile = update_profile(
        request.user,
        name=vd['name'],
        contact=vd['contact'],
        address=vd['address'],
        blood_type=vd.get('bloodType'),
    )
    return Response({'ok': True, 'message': 'Profile updated successfully', 'data': format_profile(profile)})

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core.services.stats import landing_stats


@api_view(['GET'])
@permission_classes([AllowAny])
def public_stats(request):
    """Donor, hospital and active request counts for the landing page."""
    return Response({'ok': True, 'data': landing_stats()})

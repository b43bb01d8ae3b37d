"""
Donor dashboard: browse active blood requests.

Filtering by blood type and sorting by recency or urgency happen on
the fetched rows, see :class:`core.services.blood_requests.RequestListViewModel`.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.permissions import IsDonorRole
from core.serializers.blood_requests import RequestListQuerySerializer
from core.services.blood_requests import RequestListViewModel


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsDonorRole])
def list_active_requests(request):
    """Active requests joined with the posting hospital's name, contact and address.

    Query parameters: ``bloodType`` (``all`` or one of the eight types)
    and ``sortBy`` (``recent`` or ``urgent``).  When the fetch fails the
    list is empty and ``fetchFailed`` is true; the filter options are
    still returned.
    """
    q = RequestListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vm = RequestListViewModel(
        blood_type=q.validated_data['bloodType'],
        sort_by=q.validated_data['sortBy'],
    )
    return Response(vm.as_payload())

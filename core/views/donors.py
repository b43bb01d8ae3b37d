from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.permissions import IsHospitalRole
from core.serializers.profiles import DonorListQuerySerializer
from core.services.donors import DonorListViewModel


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def list_donors(request):
    """Donor profiles for hospitals, optionally filtered by ``bloodType``."""
    q = DonorListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vm = DonorListViewModel(blood_type=q.validated_data['bloodType'])
    return Response(vm.as_payload())

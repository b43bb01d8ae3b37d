"""
Authentication views.

Sign-up, sign-in, sign-out and session introspection for donors and
hospitals.  Each view builds its own :class:`SessionContext` from the
request; nothing about the session is held in module state.  By
isolating these views from the authentication class (see
``core.authentication``) we prevent circular imports when Django REST
framework initialises authentication classes.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenRefreshView

from core.serializers.auth import LoginSerializer, SignupSerializer, LogoutSerializer
from core.serializers.profiles import format_profile
from core.services.session import SessionContext


# ---------------------------------------------------------------------
# Sign up: account + profile
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def signup_view(request):
    """
    Create an account and its donor or hospital profile.
    Accepts: email, password, type, name, contact, address, bloodType
    (donors only; ignored for hospitals).
    """
    s = SignupSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data

    ctx = SessionContext.from_request(request)
    profile = ctx.sign_up(
        email=vd['email'],
        password=vd['password'],
        type=vd['type'],
        name=vd['name'],
        contact=vd['contact'],
        address=vd['address'],
        blood_type=vd.get('bloodType'),
    )
    return Response({
        'ok': True,
        'message': 'Account created successfully!',
        'profile': format_profile(profile),
        'login': f"/{profile.type}/login",
    }, status=201)

# ScopedRateThrottle reads the scope from the wrapped view class
signup_view.cls.throttle_scope = 'signup'


# ---------------------------------------------------------------------
# Email/password login
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """
    Sign in with email and password.  The response carries a legacy DRF
    token, a JWT pair and the dashboard route matching the profile type.
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data

    ctx = SessionContext.from_request(request)
    result = ctx.sign_in(vd['email'], vd['password'])
    user = result.user

    payload: dict[str, object] = {
        'ok': True,
        'token': result.token,
        'jwt_access': result.jwt_access,
        'jwt_refresh': result.jwt_refresh,
        'session': ctx.state.value,
        'profileType': getattr(result.profile, 'type', None),
        'dashboard': result.dashboard,
        'user': {
            'id': user.pk,
            'email': user.email,
            'name': getattr(result.profile, 'name', None) or user.email,
        },
    }
    return Response(payload, status=200)

login_view.cls.throttle_scope = 'login'


# ---------------------------------------------------------------------
# Session introspection (route guards)
# ---------------------------------------------------------------------
@api_view(['GET'])
@permission_classes([AllowAny])
def session_view(request):
    """Return ``authenticated`` or ``unauthenticated`` plus the dashboard route."""
    ctx = SessionContext.from_request(request)
    return Response({'ok': True, **ctx.as_dict()})


# ---------------------------------------------------------------------
# JWT: refresh & logout
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from refresh token."""
    view = TokenRefreshView.as_view()
    resp = view(request._request)
    if isinstance(resp, Response):
        data = dict(resp.data)
        if 'access' in data and 'jwt_access' not in data:
            data['jwt_access'] = data.pop('access')
        return Response(data, status=resp.status_code)
    return resp


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    """Drop the DRF token and blacklist the given (or every) refresh token."""
    s = LogoutSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    ctx = SessionContext.from_request(request)
    profile = ctx.profile
    count = ctx.sign_out(refresh=s.validated_data.get('refresh') or None)
    return Response({
        'ok': True,
        'blacklisted': count,
        'session': ctx.state.value,
        'login': f"/{profile.type}/login" if profile else '/',
    })


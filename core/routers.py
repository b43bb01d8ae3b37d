"""
URL mappings for the BloodConnect API.

Paths mirror the calls made by the donor and hospital front-end.  Note
that trailing slashes are deliberately omitted (``APPEND_SLASH = False``).
"""
from django.urls import path, include

from .auth_views import signup_view, login_view, logout_view, session_view, jwt_refresh_view
from .views import health
from .views.donors import list_donors
from .views.hospital import my_requests, create_request, delete_request
from .views.profile import profile_get, profile_update
from .views.requests import list_active_requests
from .views.stats import public_stats


urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    # Landing page
    path('api/stats', public_stats, name='public_stats'),
    # Authentication
    path('api/auth/signup', signup_view, name='signup_view'),
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/logout', logout_view, name='logout_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh_view'),
    path('api/auth/session', session_view, name='session_view'),
    # Donor dashboard
    path('api/requests', list_active_requests, name='list_active_requests'),
    # Hospital dashboard
    path('api/hospital/requests', my_requests, name='my_requests'),
    path('api/hospital/requests/create', create_request, name='create_request'),
    path('api/hospital/requests/delete', delete_request, name='delete_request'),
    path('api/donors', list_donors, name='list_donors'),
    # Profile
    path('api/profile', profile_get, name='profile_get'),
    path('api/profile/update', profile_update, name='profile_update'),
]

"""
Custom permission classes for profile type based access control.
"""
from rest_framework.permissions import BasePermission


def profile_type_for(user):
    """Return the profile type of an authenticated user, or None."""
    if not (user and user.is_authenticated):
        return None
    profile = getattr(user, "profile", None)
    return getattr(profile, "type", None)


class IsHospitalRole(BasePermission):
    """Allow access only to accounts whose profile is a hospital."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return profile_type_for(getattr(request, "user", None)) == "hospital"


class IsDonorRole(BasePermission):
    """Allow access only to accounts whose profile is a donor."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return profile_type_for(getattr(request, "user", None)) == "donor"

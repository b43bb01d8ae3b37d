"""
Profile resolution and profile-scoped updates.

Every write an account makes is scoped to its own profile row.  The
profile is looked up first from the account id, then the write is
filtered by that profile id.  The two steps do not share a transaction:
a profile changed between them is not detected.
"""
import logging

from django.utils import timezone

from core.exceptions import ProfileResolutionError, MutationRejected
from core.models import Profile
from core.services.audit import log_action

logger = logging.getLogger(__name__)


def resolve_profile(user) -> Profile:
    """Return the single profile owned by ``user``.

    Raises :class:`ProfileResolutionError` when the account has no
    profile; callers must not attempt the dependent write.
    """
    user_id = getattr(user, 'pk', None)
    if user_id is None:
        raise ProfileResolutionError()
    profiles = list(Profile.objects.select_related('user').filter(user_id=user_id)[:2])
    if len(profiles) != 1:
        logger.warning('profile resolution failed for user %s (found %d)', user_id, len(profiles))
        raise ProfileResolutionError()
    return profiles[0]


def update_profile(user, *, name, contact, address, blood_type=None) -> Profile:
    profile = resolve_profile(user)
    # hospitals never carry a blood type, whatever was submitted
    stored_blood_type = (blood_type or profile.blood_type) if profile.is_donor else None
    updated = Profile.objects.filter(id=profile.id, user_id=user.pk).update(
        name=name,
        contact=contact,
        address=address,
        blood_type=stored_blood_type,
        updated_at=timezone.now(),
    )
    if updated == 0:
        raise MutationRejected('Failed to update profile')
    log_action(user=user, action='profile_update', object_type='profile', object_id=profile.id,
               detail={'type': profile.type})
    profile.refresh_from_db()
    return profile

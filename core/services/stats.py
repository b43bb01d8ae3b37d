import logging
from typing import Optional

from django.db import DatabaseError

from core.models import Profile, BloodRequest

logger = logging.getLogger(__name__)


def _safe_count(qs, label: str) -> Optional[int]:
    try:
        return qs.count()
    except DatabaseError:
        logger.exception('count failed: %s', label)
        return None


def landing_stats() -> dict:
    """Counts shown on the public landing page.  A failed count is ``None``."""
    return {
        'donors': _safe_count(Profile.objects.filter(type='donor'), 'donors'),
        'hospitals': _safe_count(Profile.objects.filter(type='hospital'), 'hospitals'),
        'activeRequests': _safe_count(BloodRequest.objects.filter(status='active'), 'active requests'),
    }

"""
Blood request listing and hospital-scoped request mutations.

Donor browsing fetches the active requests once (joined with the posting
hospital's display fields), converts each row into a :class:`RequestRecord`
and then filters and sorts in Python.  The filter and sort options are
fixed enumerations and never depend on the fetched data.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Iterable, Optional

from django.db import DatabaseError
from rest_framework.exceptions import PermissionDenied

from core.exceptions import MutationRejected
from core.models import BloodRequest, BLOOD_TYPES, Profile
from core.services.audit import log_action
from core.services.profiles import resolve_profile

logger = logging.getLogger(__name__)

ALL_BLOOD_TYPES = 'all'

URGENCY_RANK = {'low': 0, 'medium': 1, 'high': 2, 'critical': 3}

BLOOD_TYPE_FILTER_OPTIONS = (
    {'value': ALL_BLOOD_TYPES, 'label': 'All Blood Types'},
    *({'value': t, 'label': t} for t in BLOOD_TYPES),
)

SORT_OPTIONS = (
    {'value': 'recent', 'label': 'Most Recent'},
    {'value': 'urgent', 'label': 'Most Urgent'},
)


@dataclass(frozen=True)
class HospitalSummary:
    name: str
    contact: str
    address: str


@dataclass(frozen=True)
class RequestRecord:
    id: int
    hospital_id: int
    blood_type: str
    units_needed: int
    urgency_level: str
    status: str
    description: str
    created_at: datetime
    hospital: Optional[HospitalSummary] = None

    @classmethod
    def from_model(cls, obj: BloodRequest, *, with_hospital: bool = True) -> 'RequestRecord':
        hospital = None
        if with_hospital:
            h = obj.hospital
            hospital = HospitalSummary(name=h.name, contact=h.contact, address=h.address)
        return cls(
            id=obj.id,
            hospital_id=obj.hospital_id,
            blood_type=obj.blood_type,
            units_needed=obj.units_needed,
            urgency_level=obj.urgency_level,
            status=obj.status,
            description=obj.description,
            created_at=obj.created_at,
            hospital=hospital,
        )

    def as_dict(self) -> dict:
        data = {
            'id': self.id,
            'hospitalId': self.hospital_id,
            'bloodType': self.blood_type,
            'unitsNeeded': self.units_needed,
            'urgencyLevel': self.urgency_level,
            'status': self.status,
            'description': self.description,
            'createdAt': self.created_at.isoformat(),
        }
        if self.hospital is not None:
            data['hospital'] = asdict(self.hospital)
        return data


def urgency_rank(level: str) -> int:
    # unknown levels sort below 'low'
    return URGENCY_RANK.get(level, -1)


def filter_by_blood_type(items: Iterable, blood_type: str) -> list:
    """Keep everything for ``'all'``, otherwise exact ``blood_type`` matches."""
    if blood_type == ALL_BLOOD_TYPES:
        return list(items)
    return [item for item in items if item.blood_type == blood_type]


def sort_requests(items: Iterable[RequestRecord], sort_by: str) -> list[RequestRecord]:
    """Order by recency or urgency, both descending.

    ``sorted`` is stable even with ``reverse=True``, so equal keys keep
    the order in which they were fetched.
    """
    if sort_by == 'recent':
        return sorted(items, key=lambda r: r.created_at, reverse=True)
    if sort_by == 'urgent':
        return sorted(items, key=lambda r: urgency_rank(r.urgency_level), reverse=True)
    raise ValueError(f'unknown sort mode: {sort_by}')


class RequestListViewModel:
    """Active blood requests as shown on the donor dashboard."""

    blood_type_options = BLOOD_TYPE_FILTER_OPTIONS
    sort_options = SORT_OPTIONS

    def __init__(self, blood_type: str = ALL_BLOOD_TYPES, sort_by: str = 'recent'):
        self.blood_type = blood_type
        self.sort_by = sort_by
        self.fetch_failed = False

    def fetch(self) -> list[RequestRecord]:
        qs = (BloodRequest.objects.select_related('hospital')
              .filter(status='active')
              .order_by('-created_at'))
        try:
            return [RequestRecord.from_model(obj) for obj in qs]
        except DatabaseError:
            logger.exception('failed to fetch active blood requests')
            self.fetch_failed = True
            return []

    def rows(self) -> list[RequestRecord]:
        return sort_requests(filter_by_blood_type(self.fetch(), self.blood_type), self.sort_by)

    def as_payload(self) -> dict:
        data = [r.as_dict() for r in self.rows()]
        return {
            'ok': True,
            'data': data,
            'filters': {
                'bloodType': self.blood_type,
                'sortBy': self.sort_by,
                'bloodTypes': list(self.blood_type_options),
                'sortOptions': list(self.sort_options),
            },
            'fetchFailed': self.fetch_failed,
        }


def resolve_hospital_profile(user) -> Profile:
    """Resolve the caller's profile and require it to be a hospital."""
    profile = resolve_profile(user)
    if not profile.is_hospital:
        raise PermissionDenied('Only hospitals can manage blood requests')
    return profile


def list_hospital_requests(user) -> list[RequestRecord]:
    profile = resolve_hospital_profile(user)
    qs = BloodRequest.objects.filter(hospital_id=profile.id).order_by('-created_at')
    return [RequestRecord.from_model(obj, with_hospital=False) for obj in qs]


def create_blood_request(user, *, blood_type: str, units_needed: int, urgency_level: str, description: str = '') -> BloodRequest:
    """Insert a request stamped with the caller's hospital profile id."""
    profile = resolve_hospital_profile(user)
    obj = BloodRequest.objects.create(
        hospital_id=profile.id,
        blood_type=blood_type,
        units_needed=units_needed,
        urgency_level=urgency_level,
        description=description or '',
    )
    log_action(user=user, action='request_create', object_type='blood_request', object_id=obj.id,
               detail={'bloodType': blood_type, 'urgency': urgency_level, 'units': units_needed})
    return obj


def delete_blood_request(user, request_id: int) -> int:
    """Delete one of the caller's own requests.

    The delete is filtered by both the request id and the resolved
    hospital profile id; zero affected rows (missing or not owned)
    raises :class:`MutationRejected`.
    """
    profile = resolve_hospital_profile(user)
    deleted, _ = BloodRequest.objects.filter(id=request_id, hospital_id=profile.id).delete()
    if deleted == 0:
        log_action(user=user, action='request_delete', object_type='blood_request', object_id=request_id,
                   detail={'result': 'rejected'})
        raise MutationRejected('Failed to delete request')
    log_action(user=user, action='request_delete', object_type='blood_request', object_id=request_id,
               detail={'result': 'ok'})
    return deleted

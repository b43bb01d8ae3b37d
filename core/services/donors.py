import logging
from dataclasses import dataclass, asdict
from typing import Optional

from django.db import DatabaseError

from core.models import Profile
from core.services.blood_requests import ALL_BLOOD_TYPES, BLOOD_TYPE_FILTER_OPTIONS, filter_by_blood_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DonorRecord:
    id: int
    name: str
    blood_type: Optional[str]
    contact: str
    address: str

    def as_dict(self) -> dict:
        data = asdict(self)
        data['bloodType'] = data.pop('blood_type')
        return data


class DonorListViewModel:
    """Donor profiles as shown on the hospital dashboard; filter only, no sort."""

    blood_type_options = BLOOD_TYPE_FILTER_OPTIONS

    def __init__(self, blood_type: str = ALL_BLOOD_TYPES):
        self.blood_type = blood_type
        self.fetch_failed = False

    def fetch(self) -> list[DonorRecord]:
        qs = (Profile.objects.filter(type='donor')
              .only('id', 'name', 'blood_type', 'contact', 'address')
              .order_by('name', 'id'))
        try:
            return [DonorRecord(id=p.id, name=p.name, blood_type=p.blood_type, contact=p.contact, address=p.address)
                    for p in qs]
        except DatabaseError:
            logger.exception('failed to fetch donor profiles')
            self.fetch_failed = True
            return []

    def rows(self) -> list[DonorRecord]:
        return filter_by_blood_type(self.fetch(), self.blood_type)

    def as_payload(self) -> dict:
        return {
            'ok': True,
            'data': [d.as_dict() for d in self.rows()],
            'filters': {
                'bloodType': self.blood_type,
                'bloodTypes': list(self.blood_type_options),
            },
            'fetchFailed': self.fetch_failed,
        }

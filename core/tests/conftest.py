import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from core.tests.factories import make_account


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    # throttle history lives in the default cache and is shared across tests
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def donor(db):
    return make_account('donor@example.com', type='donor', name='Dana Donor', blood_type='O-')


@pytest.fixture
def hospital(db):
    return make_account('city@example.com', type='hospital', name='City Hospital', blood_type=None)


@pytest.fixture
def other_hospital(db):
    return make_account('county@example.com', type='hospital', name='County Hospital', blood_type=None)


@pytest.fixture
def client_for():
    def _client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return _client

"""
Integration tests for the BloodConnect API.

These tests exercise the donor and hospital dashboards, the profile
endpoints and the ownership rules on request mutations.  The tests use
Django REST Framework's APIClient within the APITestCase base class.

To run the tests:

```
pytest -q core/tests
```
"""
from datetime import timedelta

from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase, APIClient

from core.models import AuditEvent, BloodRequest, Profile, User
from core.tests.factories import make_account, make_request


class BloodConnectAPITests(APITestCase):
    def setUp(self) -> None:
        """Two hospitals, two donors and a few requests."""
        self.hospital_user, self.hospital = make_account(
            'city@example.com', type='hospital', name='City Hospital', blood_type=None,
            contact='555-0001', address='1 Center Ave',
        )
        self.other_user, self.other_hospital = make_account(
            'county@example.com', type='hospital', name='County Hospital', blood_type=None,
        )
        self.donor_user, self.donor = make_account('dana@example.com', type='donor', name='Dana', blood_type='O-')
        self.donor2_user, self.donor2 = make_account('ali@example.com', type='donor', name='Ali', blood_type='A+')

        now = timezone.now()
        self.req_low = make_request(self.hospital, blood_type='O-', urgency_level='low', created_at=now)
        self.req_critical = make_request(self.hospital, blood_type='O-', urgency_level='critical',
                                         created_at=now - timedelta(hours=2))
        self.req_other = make_request(self.other_hospital, blood_type='A+', urgency_level='high',
                                      created_at=now - timedelta(hours=1))
        self.req_closed = make_request(self.hospital, blood_type='B+', status='fulfilled')

    def authenticate(self, user: User) -> APIClient:
        """Return an authenticated APIClient for the given user."""
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    # ------------------------------------------------------------------
    # Donor dashboard
    # ------------------------------------------------------------------
    def test_donor_sees_active_requests_newest_first(self):
        client = self.authenticate(self.donor_user)
        response = client.get('/api/requests')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = [r['id'] for r in response.data['data']]
        self.assertEqual(ids, [self.req_low.id, self.req_other.id, self.req_critical.id])
        self.assertNotIn(self.req_closed.id, ids)
        self.assertFalse(response.data['fetchFailed'])
        first = response.data['data'][0]
        self.assertEqual(first['hospital'], {'name': 'City Hospital', 'contact': '555-0001', 'address': '1 Center Ave'})

    def test_donor_filters_and_sorts_by_urgency(self):
        client = self.authenticate(self.donor_user)
        response = client.get('/api/requests', {'bloodType': 'O-', 'sortBy': 'urgent'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        levels = [r['urgencyLevel'] for r in response.data['data']]
        self.assertEqual(levels, ['critical', 'low'])
        self.assertEqual(response.data['filters']['bloodType'], 'O-')
        self.assertEqual(response.data['filters']['sortBy'], 'urgent')

    def test_unknown_filter_value_is_rejected(self):
        client = self.authenticate(self.donor_user)
        response = client.get('/api/requests', {'bloodType': 'C+'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['ok'])
        response = client.get('/api/requests', {'sortBy': 'oldest'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_anonymous_cannot_browse_requests(self):
        response = APIClient().get('/api/requests')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['ok'], False)

    def test_hospital_cannot_use_donor_dashboard(self):
        client = self.authenticate(self.hospital_user)
        response = client.get('/api/requests')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    # ------------------------------------------------------------------
    # Hospital dashboard
    # ------------------------------------------------------------------
    def test_hospital_lists_only_own_requests(self):
        client = self.authenticate(self.hospital_user)
        response = client.get('/api/hospital/requests')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = {r['id'] for r in response.data['data']}
        self.assertEqual(ids, {self.req_low.id, self.req_critical.id, self.req_closed.id})

    def test_hospital_creates_request_stamped_with_own_profile(self):
        client = self.authenticate(self.hospital_user)
        response = client.post(
            '/api/hospital/requests/create',
            {'bloodType': 'AB-', 'unitsNeeded': 4, 'urgencyLevel': 'high', 'description': '<b>ICU</b> need'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        created = BloodRequest.objects.get(id=response.data['data']['id'])
        self.assertEqual(created.hospital_id, self.hospital.id)
        self.assertEqual(created.status, 'active')
        self.assertEqual(created.description, 'ICU need')
        self.assertTrue(AuditEvent.objects.filter(action='request_create', object_id=created.id).exists())

    def test_create_request_validates_units(self):
        client = self.authenticate(self.hospital_user)
        response = client.post(
            '/api/hospital/requests/create',
            {'bloodType': 'AB-', 'unitsNeeded': 0, 'urgencyLevel': 'high'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(BloodRequest.objects.count(), 4)

    def test_donor_cannot_create_request(self):
        client = self.authenticate(self.donor_user)
        response = client.post(
            '/api/hospital/requests/create',
            {'bloodType': 'O-', 'unitsNeeded': 1, 'urgencyLevel': 'low'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(BloodRequest.objects.count(), 4)

    def test_hospital_deletes_own_request(self):
        client = self.authenticate(self.hospital_user)
        response = client.post('/api/hospital/requests/delete', {'id': self.req_low.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['ok'])
        self.assertFalse(BloodRequest.objects.filter(id=self.req_low.id).exists())

    def test_deleting_another_hospitals_request_is_rejected(self):
        """Zero rows affected surfaces as failure and nothing changes."""
        client = self.authenticate(self.hospital_user)
        response = client.post('/api/hospital/requests/delete', {'id': self.req_other.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error']['code'], 'mutation_rejected')
        self.assertTrue(BloodRequest.objects.filter(id=self.req_other.id).exists())
        listing = self.authenticate(self.other_user).get('/api/hospital/requests')
        self.assertEqual([r['id'] for r in listing.data['data']], [self.req_other.id])

    def test_deleting_missing_request_is_rejected(self):
        client = self.authenticate(self.hospital_user)
        response = client.post('/api/hospital/requests/delete', {'id': 999999}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(BloodRequest.objects.count(), 4)

    def test_donor_cannot_list_or_delete_hospital_requests(self):
        client = self.authenticate(self.donor_user)
        response = client.get('/api/hospital/requests')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(response.data['ok'])
        response = client.post('/api/hospital/requests/delete', {'id': self.req_low.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(BloodRequest.objects.filter(id=self.req_low.id).exists())

    def test_hospital_browses_donors_by_blood_type(self):
        client = self.authenticate(self.hospital_user)
        response = client.get('/api/donors', {'bloodType': 'A+'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([d['name'] for d in response.data['data']], ['Ali'])
        response = client.get('/api/donors')
        self.assertEqual({d['name'] for d in response.data['data']}, {'Ali', 'Dana'})

    def test_donor_cannot_browse_donors(self):
        client = self.authenticate(self.donor_user)
        response = client.get('/api/donors')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------
    def test_profile_get_returns_own_profile_and_dashboard(self):
        client = self.authenticate(self.donor_user)
        response = client.get('/api/profile')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['id'], self.donor.id)
        self.assertEqual(response.data['data']['bloodType'], 'O-')
        self.assertEqual(response.data['dashboard'], '/donor/dashboard')

    def test_donor_updates_blood_type(self):
        client = self.authenticate(self.donor_user)
        response = client.post(
            '/api/profile/update',
            {'name': 'Dana R.', 'contact': '555-7777', 'address': '4 Oak Lane', 'bloodType': 'B+'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.donor.refresh_from_db()
        self.assertEqual(self.donor.name, 'Dana R.')
        self.assertEqual(self.donor.blood_type, 'B+')

    def test_profile_text_is_stored_as_typed(self):
        client = self.authenticate(self.hospital_user)
        response = client.post(
            '/api/profile/update',
            {'name': 'Smith & Sons', 'contact': '<i>555-0003</i>', 'address': 'A < B Street'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.hospital.refresh_from_db()
        self.assertEqual(self.hospital.name, 'Smith & Sons')
        self.assertEqual(self.hospital.contact, '555-0003')
        self.assertEqual(self.hospital.address, 'A < B Street')
        self.assertEqual(response.data['data']['name'], 'Smith & Sons')

    def test_request_description_keeps_ampersands(self):
        client = self.authenticate(self.hospital_user)
        response = client.post(
            '/api/hospital/requests/create',
            {'bloodType': 'B-', 'unitsNeeded': 2, 'urgencyLevel': 'medium',
             'description': 'Surgery & trauma, Hb < 7'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['description'], 'Surgery & trauma, Hb < 7')
        listing = self.authenticate(self.donor_user).get('/api/requests', {'bloodType': 'B-'})
        self.assertEqual([r['description'] for r in listing.data['data']], ['Surgery & trauma, Hb < 7'])

    def test_hospital_profile_update_discards_blood_type(self):
        client = self.authenticate(self.hospital_user)
        response = client.post(
            '/api/profile/update',
            {'name': 'City General', 'contact': '555-0002', 'address': '2 Center Ave', 'bloodType': 'A-'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['data']['bloodType'])
        self.hospital.refresh_from_db()
        self.assertEqual(self.hospital.name, 'City General')
        self.assertIsNone(self.hospital.blood_type)

    def test_account_without_profile_cannot_mutate(self):
        orphan = User.objects.create_user(username='orphan@example.com', email='orphan@example.com', password='x')
        client = self.authenticate(orphan)
        response = client.post(
            '/api/hospital/requests/create',
            {'bloodType': 'O-', 'unitsNeeded': 1, 'urgencyLevel': 'low'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['code'], 'profile_unverified')
        self.assertEqual(str(response.data['error']['message']), 'Could not verify profile')
        self.assertEqual(BloodRequest.objects.count(), 4)
        response = client.post('/api/profile/update', {'name': 'x', 'contact': 'y', 'address': 'z'}, format='json')
        self.assertEqual(response.data['error']['code'], 'profile_unverified')
        self.assertFalse(Profile.objects.filter(user=orphan).exists())

    # ------------------------------------------------------------------
    # Landing page & health
    # ------------------------------------------------------------------
    def test_public_stats_counts(self):
        response = APIClient().get('/api/stats')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], {'donors': 2, 'hospitals': 2, 'activeRequests': 3})

    def test_healthz(self):
        response = self.client.get('/healthz')
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()['db'])

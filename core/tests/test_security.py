import pytest
from django.urls import reverse
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken

from core.models import AuditEvent, Profile, User
from core.tests.factories import PASSWORD, make_account

pytestmark = pytest.mark.django_db


def signup(client, **overrides):
    payload = {
        'email': 'new@example.com',
        'password': PASSWORD,
        'type': 'donor',
        'name': 'New Donor',
        'contact': '555-1234',
        'address': '7 River Road',
        'bloodType': 'AB+',
    }
    payload.update(overrides)
    return client.post(reverse('signup_view'), payload, format='json')


def login(client, email, password=PASSWORD):
    return client.post(reverse('login_view'), {'email': email, 'password': password}, format='json')


@pytest.mark.parametrize('ptype, dashboard', [
    ('donor', '/donor/dashboard'),
    ('hospital', '/hospital/dashboard'),
])
def test_signup_then_login_routes_to_matching_dashboard(ptype, dashboard):
    client = APIClient()
    r = signup(client, type=ptype, email=f'{ptype}@example.com')
    assert r.status_code == 201
    assert r.data['login'] == f'/{ptype}/login'

    r = login(client, f'{ptype}@example.com')
    assert r.status_code == 200
    assert r.data['ok'] is True
    assert r.data['profileType'] == ptype
    assert r.data['dashboard'] == dashboard
    assert r.data['session'] == 'authenticated'
    assert r.data['token'] and r.data['jwt_access'] and r.data['jwt_refresh']


def test_signup_as_hospital_stores_no_blood_type():
    r = signup(APIClient(), type='hospital', email='clinic@example.com', bloodType='O-')
    assert r.status_code == 201
    profile = Profile.objects.get(user__email='clinic@example.com')
    assert profile.type == 'hospital'
    assert profile.blood_type is None


def test_signup_stores_names_without_html_entities():
    r = signup(APIClient(), type='hospital', email='mercy@example.com', name='Mercy <b>& Grace</b>')
    assert r.status_code == 201
    assert Profile.objects.get(user__email='mercy@example.com').name == 'Mercy & Grace'


def test_signup_donor_requires_blood_type():
    r = signup(APIClient(), bloodType='')
    assert r.status_code == 400
    assert not User.objects.filter(email='new@example.com').exists()


def test_duplicate_signup_is_an_auth_error():
    client = APIClient()
    assert signup(client).status_code == 201
    r = signup(client, email='NEW@example.com')
    assert r.status_code == 400
    assert r.data['error']['code'] == 'account_exists'
    assert User.objects.filter(email='new@example.com').count() == 1


def test_signup_rejects_weak_password():
    r = signup(APIClient(), password='123')
    assert r.status_code == 400
    assert not User.objects.filter(email='new@example.com').exists()


def test_bad_credentials_are_reported_and_audited():
    make_account('dana@example.com')
    r = login(APIClient(), 'dana@example.com', password='wrong-password')
    assert r.status_code == 400
    assert r.data['ok'] is False
    assert r.data['error']['code'] == 'invalid_credentials'
    assert AuditEvent.objects.filter(action='login', detail__result='fail').exists()


def test_session_state_follows_credentials():
    make_account('dana@example.com', type='donor')
    client = APIClient()
    r = client.get(reverse('session_view'))
    assert r.status_code == 200
    assert r.data['state'] == 'unauthenticated'
    assert r.data['user'] is None

    token = login(client, 'dana@example.com').data['token']
    client.credentials(HTTP_AUTHORIZATION=f'Token {token}')
    r = client.get(reverse('session_view'))
    assert r.data['state'] == 'authenticated'
    assert r.data['profileType'] == 'donor'
    assert r.data['dashboard'] == '/donor/dashboard'


def test_jwt_bearer_token_authenticates():
    make_account('city@example.com', type='hospital', blood_type=None)
    client = APIClient()
    access = login(client, 'city@example.com').data['jwt_access']
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')
    r = client.get('/api/hospital/requests')
    assert r.status_code == 200
    assert r.data['ok'] is True


def test_logout_revokes_token_and_blacklists_refresh_tokens():
    user, _ = make_account('dana@example.com', type='donor')
    client = APIClient()
    data = login(client, 'dana@example.com').data
    client.credentials(HTTP_AUTHORIZATION=f"Token {data['token']}")

    r = client.post(reverse('logout_view'), {}, format='json')
    assert r.status_code == 200
    assert r.data['session'] == 'unauthenticated'
    assert r.data['blacklisted'] >= 1
    assert r.data['login'] == '/donor/login'
    assert not Token.objects.filter(user=user).exists()
    assert BlacklistedToken.objects.filter(token__user=user).exists()

    # old token no longer works
    r = client.get('/api/profile')
    assert r.status_code == 401

    # refresh token is dead too
    r = APIClient().post(reverse('jwt_refresh_view'), {'refresh': data['jwt_refresh']}, format='json')
    assert r.status_code == 401


def test_refresh_returns_new_access_token():
    make_account('dana@example.com')
    client = APIClient()
    refresh = login(client, 'dana@example.com').data['jwt_refresh']
    r = client.post(reverse('jwt_refresh_view'), {'refresh': refresh}, format='json')
    assert r.status_code == 200
    assert r.data['jwt_access']

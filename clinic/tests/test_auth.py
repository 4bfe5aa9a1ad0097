import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from clinic.models import AuditEvent, User

PASSWORD = 'S3cure-pass!42'

pytestmark = pytest.mark.django_db


def login(client, username, password):
    r = client.post(reverse('login_view'), {'username': username, 'password': password})
    assert r.status_code in (200, 400, 401)
    return r


def test_login_returns_bearer_tokens_and_public_user(patient):
    r = login(APIClient(), 'patient1', PASSWORD)
    assert r.status_code == 200
    assert r.data['tokenType'] == 'Bearer'
    assert r.data['access'] and r.data['refresh']
    assert r.data['user']['id'] == patient.id
    assert 'password' not in r.data['user']


def test_login_with_wrong_password_is_401_and_audited(patient):
    r = login(APIClient(), 'patient1', 'wrong-password')
    assert r.status_code == 401
    assert r.data['error']['message'] == 'Invalid username or password'
    assert AuditEvent.objects.filter(action='login', detail__result='fail').exists()


def test_login_without_credentials_is_400():
    r = login(APIClient(), '', '')
    assert r.status_code == 400
    assert r.data['error']['message'] == 'Username and password are required'


def test_inactive_user_cannot_log_in(patient):
    patient.is_active = False
    patient.save(update_fields=['is_active'])
    assert login(APIClient(), 'patient1', PASSWORD).status_code == 401


def test_access_token_authenticates_requests(patient):
    client = APIClient()
    token = login(client, 'patient1', PASSWORD).data['access']
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    r = client.get(reverse('user_detail', args=[patient.id]))
    assert r.status_code == 200
    assert r.data['user']['username'] == 'patient1'


def test_register_creates_patient_and_returns_tokens():
    client = APIClient()
    r = client.post(reverse('register_view'), {
        'username': 'newpatient', 'password': PASSWORD, 'fullName': 'Debojyoti Deb',
        'bloodGroup': 'B+', 'dateOfBirth': '1975-08-07',
    })
    assert r.status_code == 201
    assert r.data['user']['role'] == 'patient'
    assert r.data['user']['bloodGroup'] == 'B+'
    assert 'password' not in r.data['user']
    assert User.objects.get(username='newpatient').check_password(PASSWORD)


def test_duplicate_username_is_rejected_without_second_record(patient):
    r = APIClient().post(reverse('register_view'), {'username': 'PATIENT1', 'password': PASSWORD})
    assert r.status_code == 400
    assert r.data['error']['message'] == 'Username already exists'
    assert User.objects.filter(username__iexact='patient1').count() == 1


def test_weak_password_is_rejected():
    r = APIClient().post(reverse('register_view'), {'username': 'weakling', 'password': '123'})
    assert r.status_code == 400
    assert 'password' in r.data['error']['fields']
    assert not User.objects.filter(username='weakling').exists()


def test_refresh_returns_new_access_token(patient):
    refresh = login(APIClient(), 'patient1', PASSWORD).data['refresh']
    r = APIClient().post(reverse('jwt_refresh'), {'refresh': refresh})
    assert r.status_code == 200
    assert r.data['access']


def test_refresh_with_garbage_is_401():
    r = APIClient().post(reverse('jwt_refresh'), {'refresh': 'not-a-token'})
    assert r.status_code == 401


def test_logout_blacklists_refresh_token(patient):
    client = APIClient()
    tokens = login(client, 'patient1', PASSWORD).data
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
    r = client.post(reverse('jwt_logout'), {'refresh': tokens['refresh']})
    assert r.status_code == 200
    assert r.data == {'success': True, 'blacklisted': 1}
    assert APIClient().post(reverse('jwt_refresh'), {'refresh': tokens['refresh']}).status_code == 401


def test_change_password(patient_client, patient):
    new_password = 'An0ther-str0ng!pass'
    r = patient_client.post(reverse('change_password'), {'currentPassword': 'nope', 'newPassword': new_password})
    assert r.status_code == 400
    r = patient_client.post(reverse('change_password'), {'currentPassword': PASSWORD, 'newPassword': new_password})
    assert r.status_code == 200
    patient.refresh_from_db()
    assert patient.check_password(new_password)

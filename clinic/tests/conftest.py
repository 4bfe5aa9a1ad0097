import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from clinic.models import User

PASSWORD = 'S3cure-pass!42'


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def doctor(db):
    return User.objects.create_user(
        username='dr.house', password=PASSWORD, role=User.ROLE_DOCTOR,
        full_name='Dr. Gregory House', specialization='Diagnostics',
    )


@pytest.fixture
def other_doctor(db):
    return User.objects.create_user(
        username='dr.wilson', password=PASSWORD, role=User.ROLE_DOCTOR,
        full_name='Dr. James Wilson', specialization='Oncology',
    )


@pytest.fixture
def patient(db):
    return User.objects.create_user(
        username='patient1', password=PASSWORD, role=User.ROLE_PATIENT,
        full_name='Avimanyu Dutta', address='123 GS Road, Guwahati',
    )


@pytest.fixture
def other_patient(db):
    return User.objects.create_user(
        username='patient2', password=PASSWORD, role=User.ROLE_PATIENT,
        full_name='Abhinandita Kumar',
    )


def _client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def anon_client():
    return APIClient()


@pytest.fixture
def doctor_client(doctor):
    return _client_for(doctor)


@pytest.fixture
def other_doctor_client(other_doctor):
    return _client_for(other_doctor)


@pytest.fixture
def patient_client(patient):
    return _client_for(patient)


@pytest.fixture
def other_patient_client(other_patient):
    return _client_for(other_patient)

import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from clinic.models import DoctorSchedule, User

pytestmark = pytest.mark.django_db


def test_unauthenticated_requests_are_401(anon_client):
    r = anon_client.get(reverse('appointments_list'))
    assert r.status_code == 401
    assert r.data['ok'] is False
    assert r.data['error']['code'] == 'not_authenticated'


def test_legacy_user_id_header_is_refused(patient):
    client = APIClient()
    r = client.get(reverse('appointments_list'), HTTP_USER_ID=str(patient.id))
    assert r.status_code == 401
    assert r.json()['error']['code'] == 'legacy_auth'


def test_patient_cannot_read_another_patients_info(other_patient_client, patient):
    r = other_patient_client.get(reverse('patient_info', args=[patient.id]))
    assert r.status_code == 403
    assert r.data['error']['message'] == 'Access denied'


def test_user_responses_never_include_password(doctor_client, patient, doctor):
    r = doctor_client.get(reverse('users_list'))
    assert r.status_code == 200
    assert r.data['users']
    assert all('password' not in u for u in r.data['users'])
    assert 'password' not in doctor_client.get(reverse('user_detail', args=[patient.id])).data['user']


def test_patient_user_list_shows_doctors_and_self(patient_client, patient, other_patient, doctor):
    r = patient_client.get(reverse('users_list'))
    ids = {u['id'] for u in r.data['users']}
    assert ids == {patient.id, doctor.id}


def test_doctor_profiles_are_public_but_patients_are_not(other_patient_client, doctor, patient):
    assert other_patient_client.get(reverse('user_detail', args=[doctor.id])).status_code == 200
    assert other_patient_client.get(reverse('user_detail', args=[patient.id])).status_code == 403


def test_profile_update_cannot_escalate_role(patient_client, patient):
    r = patient_client.patch(reverse('user_detail', args=[patient.id]),
                             {'role': 'doctor', 'username': 'root', 'fullName': 'New Name'})
    assert r.status_code == 200
    patient.refresh_from_db()
    assert patient.role == User.ROLE_PATIENT
    assert patient.username == 'patient1'
    assert patient.full_name == 'New Name'


def test_patient_cannot_change_account_status(patient_client, patient):
    r = patient_client.patch(reverse('user_detail', args=[patient.id]), {'isActive': False})
    assert r.status_code == 400
    patient.refresh_from_db()
    assert patient.is_active


def test_markup_is_stripped_from_text_fields(patient_client, patient):
    r = patient_client.patch(reverse('user_detail', args=[patient.id]),
                             {'address': '<script>alert(1)</script>12 MG Road'})
    assert r.status_code == 200
    assert '<script>' not in r.data['user']['address']


def test_only_doctors_create_users(patient_client, doctor_client):
    payload = {'username': 'walkin', 'password': 'S3cure-pass!42', 'fullName': 'Walk In'}
    assert patient_client.post(reverse('users_list'), payload).status_code == 403
    r = doctor_client.post(reverse('users_list'), payload)
    assert r.status_code == 201
    assert r.data['user']['role'] == 'patient'


def test_doctor_cannot_delete_colleagues_schedule(other_doctor_client, doctor):
    entry = DoctorSchedule.objects.create(doctor=doctor, day_of_week=1, start_time='09:00', end_time='17:00')
    r = other_doctor_client.delete(reverse('schedule_detail', args=[entry.id]))
    assert r.status_code == 403
    entry.refresh_from_db()
    assert (entry.start_time, entry.end_time, entry.is_available) == ('09:00', '17:00', True)


def test_patient_cannot_touch_schedules(patient_client, doctor):
    entry = DoctorSchedule.objects.create(doctor=doctor, day_of_week=1, start_time='09:00', end_time='17:00')
    assert patient_client.delete(reverse('schedule_detail', args=[entry.id])).status_code == 403
    r = patient_client.post(reverse('doctor_schedule', args=[doctor.id]),
                            {'dayOfWeek': 2, 'startTime': '09:00', 'endTime': '12:00'})
    assert r.status_code == 403


def test_health_check_is_public(anon_client):
    r = anon_client.get(reverse('healthz'))
    assert r.status_code == 200


def test_profile_update_with_non_object_body_is_400(patient_client, patient):
    url = reverse('user_detail', args=[patient.id])
    for body in ([1, 2], 'plain string'):
        r = patient_client.patch(url, body, format='json')
        assert r.status_code == 400
        assert r.data['error']['message'] == 'Expected an object'
    patient.refresh_from_db()
    assert patient.full_name == 'Avimanyu Dutta'


def test_logout_with_non_object_body_is_400(patient_client):
    r = patient_client.post(reverse('jwt_logout'), [1, 2], format='json')
    assert r.status_code == 400

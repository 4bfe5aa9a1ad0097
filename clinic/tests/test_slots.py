import datetime

import pytest
from django.urls import reverse

from clinic.models import Appointment, DoctorSchedule
from clinic.services import slots

# 2025-03-03 is a Monday (day 1 with Sunday = 0)
MONDAY = datetime.date(2025, 3, 3)


def test_time_helpers():
    assert slots.to_minutes('08:30') == 510
    assert slots.to_hhmm(510) == '08:30'
    with pytest.raises(ValueError):
        slots.to_minutes('25:00')


def test_client_day_of_week_starts_on_sunday():
    assert slots.client_day_of_week(datetime.date(2025, 3, 2)) == 0
    assert slots.client_day_of_week(MONDAY) == 1
    assert slots.client_day_of_week(datetime.date(2025, 3, 8)) == 6


def test_fallback_slots_run_from_eight_to_half_past_four():
    fallback = slots.fallback_slots()
    assert fallback[0] == '08:00'
    assert fallback[-1] == '16:30'
    assert len(fallback) == 18


@pytest.mark.django_db
def test_doctor_without_schedule_gets_full_grid(doctor, settings):
    settings.APPOINTMENT_SLOT_START = '08:00'
    settings.APPOINTMENT_SLOT_END = '20:00'
    settings.APPOINTMENT_SLOT_MINUTES = 30
    result = slots.available_slots(doctor.id, MONDAY)
    assert result[0] == '08:00'
    assert result[-1] == '20:00'
    assert len(result) == 25


@pytest.mark.django_db
def test_booked_slot_is_excluded_and_lookup_is_idempotent(doctor, patient):
    Appointment.objects.create(patient=patient, doctor=doctor, date=MONDAY, time='10:00',
                               duration=30, purpose='Checkup')
    first = slots.available_slots(doctor.id, MONDAY)
    assert '10:00' not in first
    assert '09:30' in first and '10:30' in first
    assert slots.available_slots(doctor.id, MONDAY) == first


@pytest.mark.django_db
def test_longer_appointment_blocks_every_overlapping_slot(doctor, patient):
    Appointment.objects.create(patient=patient, doctor=doctor, date=MONDAY, time='10:00',
                               duration=60, purpose='Procedure')
    result = slots.available_slots(doctor.id, MONDAY)
    assert '10:00' not in result and '10:30' not in result
    assert '11:00' in result


@pytest.mark.django_db
def test_cancelled_appointment_frees_its_slot(doctor, patient):
    Appointment.objects.create(patient=patient, doctor=doctor, date=MONDAY, time='10:00',
                               purpose='Checkup', status=Appointment.STATUS_CANCELLED)
    assert '10:00' in slots.available_slots(doctor.id, MONDAY)


@pytest.mark.django_db
def test_schedule_windows_limit_the_grid(doctor):
    DoctorSchedule.objects.create(doctor=doctor, day_of_week=1, start_time='09:00', end_time='12:00')
    DoctorSchedule.objects.create(doctor=doctor, day_of_week=2, start_time='14:00', end_time='18:00')
    monday = slots.available_slots(doctor.id, MONDAY)
    assert monday == ['09:00', '09:30', '10:00', '10:30', '11:00', '11:30']
    # no window on Sunday
    assert slots.available_slots(doctor.id, datetime.date(2025, 3, 2)) == []


@pytest.mark.django_db
def test_available_slots_endpoint(patient_client, doctor, patient):
    Appointment.objects.create(patient=patient, doctor=doctor, date=MONDAY, time='10:00', purpose='Checkup')
    url = reverse('available_slots', args=[doctor.id])
    r = patient_client.get(url, {'date': '2025-03-03'})
    assert r.status_code == 200
    assert r.data['doctorId'] == doctor.id
    assert r.data['date'] == '2025-03-03'
    assert '10:00' not in r.data['availableSlots']
    assert r.data['fallbackSlots'] == slots.fallback_slots()


@pytest.mark.django_db
def test_available_slots_for_non_doctor_is_404(patient_client, patient):
    r = patient_client.get(reverse('available_slots', args=[patient.id]), {'date': '2025-03-03'})
    assert r.status_code == 404
    assert r.data['error']['message'] == 'Doctor not found'


@pytest.mark.django_db
def test_available_slots_requires_date(patient_client, doctor):
    r = patient_client.get(reverse('available_slots', args=[doctor.id]))
    assert r.status_code == 400
    assert 'date' in r.data['error']['fields']

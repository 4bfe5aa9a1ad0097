from io import StringIO

import pytest
from django.core.management import call_command

from clinic.models import Appointment, DoctorSchedule, Invoice, User
from clinic.services.billing import invoice_total

pytestmark = pytest.mark.django_db


def test_populate_data_is_idempotent():
    call_command('populate_data', stdout=StringIO())
    counts = (User.objects.count(), Appointment.objects.count(), Invoice.objects.count())
    call_command('populate_data', stdout=StringIO())
    assert (User.objects.count(), Appointment.objects.count(), Invoice.objects.count()) == counts

    assert User.objects.filter(role=User.ROLE_DOCTOR).count() == 3
    assert DoctorSchedule.objects.filter(doctor__username='dr.sumit').count() == 4
    for invoice in Invoice.objects.all():
        assert invoice.total_amount == invoice_total(invoice.items.all())


def test_ensure_test_users_resets_password():
    out = StringIO()
    call_command('ensure_test_users', password='known-pass', stdout=out)
    user = User.objects.get(username='doctor1')
    assert user.is_doctor
    assert user.check_password('known-pass')
    assert 'All test users ensured.' in out.getvalue()

from types import SimpleNamespace

import pytest
from django.contrib.auth.models import AnonymousUser
from rest_framework.exceptions import PermissionDenied

from clinic.permissions import can_access, ensure_access, ensure_doctor


def _user(pk, role):
    return SimpleNamespace(id=pk, role=role, is_authenticated=True)


def test_doctor_may_access_any_record():
    assert can_access(_user(1, 'doctor'), 99)
    assert can_access(_user(1, 'doctor'), None)


def test_patient_may_access_own_record_only():
    me = _user(5, 'patient')
    assert can_access(me, 5)
    assert not can_access(me, 6)


def test_secondary_owner_is_allowed():
    me = _user(5, 'patient')
    assert can_access(me, 6, 5)
    assert not can_access(me, 6, 7)


def test_missing_or_anonymous_user_is_refused():
    assert not can_access(None, 1)
    assert not can_access(AnonymousUser(), 1)


def test_ensure_helpers_raise_permission_denied():
    with pytest.raises(PermissionDenied):
        ensure_access(_user(5, 'patient'), 6)
    with pytest.raises(PermissionDenied):
        ensure_doctor(_user(5, 'patient'))
    ensure_doctor(_user(1, 'doctor'))

"""
Role and ownership based access control.

There are two roles.  Doctors may read and write every record; patients
may only touch records they own.  ``can_access`` is the single predicate
used by the views; the permission classes wrap it for DRF.
"""
from __future__ import annotations

from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission


def can_access(user, owner_id, secondary_owner_id=None) -> bool:
    """Return True if ``user`` may operate on a record owned by ``owner_id``.

    ``secondary_owner_id`` is the second party of two-sided records such
    as appointments and prescriptions (the doctor on them).  Never raises:
    an anonymous or missing user is simply refused.
    """
    if user is None or not getattr(user, 'is_authenticated', False):
        return False
    if getattr(user, 'role', None) == 'doctor':
        return True
    if owner_id is not None and user.id == owner_id:
        return True
    return secondary_owner_id is not None and user.id == secondary_owner_id


class IsDoctorRole(BasePermission):
    """Allow access only to users with the doctor role."""
    message = 'Access denied'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) == "doctor")


class IsOwnerOrDoctor(BasePermission):
    """Object must belong to the user (``obj.patient_id``/``obj.doctor_id``) or the user is a doctor."""
    message = 'Access denied'

    def has_object_permission(self, request, view, obj) -> bool:
        return can_access(request.user, getattr(obj, "patient_id", None), getattr(obj, "doctor_id", None))


def check_object_permission(request, obj, permission_class=IsOwnerOrDoctor) -> None:
    """Raise ``PermissionDenied`` unless ``permission_class`` allows ``obj``.

    Function views do not run DRF's object permission hook, so they call
    this after loading the record.
    """
    permission = permission_class()
    if not permission.has_object_permission(request, None, obj):
        raise PermissionDenied(permission.message)


def ensure_access(user, owner_id, secondary_owner_id=None) -> None:
    if not can_access(user, owner_id, secondary_owner_id):
        raise PermissionDenied('Access denied')


def ensure_doctor(user) -> None:
    if getattr(user, 'role', None) != 'doctor':
        raise PermissionDenied('Access denied')

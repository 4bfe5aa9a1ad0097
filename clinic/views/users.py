"""
User directory and profile views.

Any signed-in user may browse doctors.  Patient profiles are visible to
the patient themself and to doctors only, so a patient listing users
sees the doctors plus their own entry.  Profile updates never touch
``role``, ``username`` or ``password``: those keys are dropped before
validation.
"""
from __future__ import annotations

from django.db import transaction
from django.db.models import Q
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import User
from clinic.permissions import ensure_access, ensure_doctor
from clinic.serializers.auth import RegisterSerializer
from clinic.serializers.users import UserListQuerySerializer, UserUpdateSerializer
from clinic.services import notify, shaping, store
from clinic.services.audit import log_action

from .common import fetch

PROTECTED_FIELDS = ('role', 'username', 'password')


def _owner(u: User):
    # doctor profiles are public
    return None if u.is_doctor else u.id


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def users_list(request):
    user: User = request.user
    if request.method == 'GET':
        q = UserListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        filters = {}
        if q.validated_data.get('role'):
            filters['role'] = q.validated_data['role']
        qs = store.users.queryset().filter(**filters)
        if not user.is_doctor:
            qs = qs.filter(Q(role=User.ROLE_DOCTOR) | Q(pk=user.pk))
        return Response({'users': [shaping.user_public(u) for u in qs.order_by('id')]})

    # POST: doctors register patients (or colleagues) on their behalf
    ensure_doctor(user)
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    password = data.pop('password')
    with transaction.atomic():
        created = User.objects.create_user(password=password, **data)
        log_action(user=user, action='user_create', object_type='user', object_id=created.id,
                   detail={'role': created.role})
    notify.entity_changed('user', created.id, 'created', owner_id=_owner(created))
    return Response({'user': shaping.user_public(created)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def user_detail(request, pk: int):
    user: User = request.user
    target = fetch(store.users, pk, 'User not found')

    if request.method == 'GET':
        if not target.is_doctor:
            ensure_access(user, target.id)
        return Response({'user': shaping.user_public(target)})

    ensure_access(user, target.id)
    if not isinstance(request.data, dict):
        raise ValidationError('Expected an object')
    payload = {k: v for k, v in request.data.items() if k not in PROTECTED_FIELDS}
    s = UserUpdateSerializer(data=payload, partial=True, context={'request': request})
    s.is_valid(raise_exception=True)
    updated = store.users.update(target.id, **s.validated_data)
    notify.entity_changed('user', target.id, 'updated', owner_id=_owner(updated))
    return Response({'user': shaping.user_public(updated)})

"""
Authentication views.

Username/password login, self-registration, token refresh, logout and
password change.  Passwords are stored with Django's salted hashers and
compared with ``authenticate``; successful logins receive a short-lived
JWT access token and a refresh token.  Kept apart from
``clinic.authentication`` so that DRF can load the authentication class
without importing any view.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from django.db import transaction
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import AuthenticationFailed, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken

from clinic.models import User
from clinic.serializers.auth import ChangePasswordSerializer, LoginSerializer, RegisterSerializer
from clinic.services import shaping
from clinic.services.audit import log_action

logger = logging.getLogger(__name__)


def _token_payload(user: User) -> dict:
    refresh = RefreshToken.for_user(user)
    return {
        'user': shaping.user_public(user),
        'access': str(refresh.access_token),
        'refresh': str(refresh),
        'tokenType': 'Bearer',
    }


# ---------------------------------------------------------------------
# Username/password login
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    username = (s.validated_data.get('username') or '').strip()
    password = s.validated_data.get('password') or ''

    if not username or not password:
        raise ValidationError('Username and password are required')

    ip = request.META.get('REMOTE_ADDR')
    user = authenticate(request, username=username, password=password)
    if user is None:
        log_action(user=None, action='login', object_type='user', object_id=None,
                   detail={'result': 'fail', 'username': username, 'ip': ip})
        logger.info("login failed for %r from %s", username, ip)
        raise AuthenticationFailed('Invalid username or password')

    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': ip})
    return Response(_token_payload(user), status=status.HTTP_200_OK)

# ScopedRateThrottle reads throttle_scope from the generated view class
login_view.cls.throttle_scope = 'login'


# ---------------------------------------------------------------------
# Self-registration (patient or doctor)
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def register_view(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    password = data.pop('password')
    with transaction.atomic():
        user = User.objects.create_user(password=password, **data)
        log_action(user=user, action='register', object_type='user', object_id=user.id,
                   detail={'role': user.role})
    logger.info("registered %s as %s", user.username, user.role)
    return Response(_token_payload(user), status=status.HTTP_201_CREATED)

register_view.cls.throttle_scope = 'register'


# ---------------------------------------------------------------------
# JWT: refresh & logout
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from a refresh token."""
    s = TokenRefreshSerializer(data=request.data)
    try:
        s.is_valid(raise_exception=True)
    except TokenError as e:
        raise InvalidToken(e.args[0])
    return Response(s.validated_data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist the given refresh token, or every outstanding one of the user."""
    if not isinstance(request.data, dict):
        raise ValidationError('Expected an object')
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            token = RefreshToken(refresh)
        except TokenError as e:
            raise ValidationError({'refresh': [str(e)]})
        if str(token.get("user_id")) != str(request.user.id):
            raise ValidationError({'refresh': ['Token does not belong to this user']})
        token.blacklist()
        count = 1
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    return Response({'success': True, 'blacklisted': count})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def change_password_view(request):
    s = ChangePasswordSerializer(data=request.data, context={'request': request})
    s.is_valid(raise_exception=True)
    user = request.user
    user.set_password(s.validated_data['newPassword'])
    user.save(update_fields=['password'])
    log_action(user=user, action='password_change', object_type='user', object_id=user.id)
    return Response({'success': True})

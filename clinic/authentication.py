"""
Bearer token authentication for the REST API.

This module defines a subclass of simplejwt's ``JWTAuthentication``
that additionally refuses tokens belonging to deactivated accounts.  It
lives apart from the views so that Django REST framework can import it
while settings are loaded without pulling in any view modules.
"""
from __future__ import annotations

from rest_framework import exceptions
from rest_framework_simplejwt.authentication import JWTAuthentication


class BearerJWTAuthentication(JWTAuthentication):
    """JWT authentication using the ``Bearer`` keyword.

    simplejwt already rejects inactive users when ``CHECK_USER_IS_ACTIVE``
    is on; the explicit check keeps the behaviour independent of that
    setting.
    """

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        if not user.is_active:
            raise exceptions.AuthenticationFailed('User is inactive', code='user_inactive')
        return user

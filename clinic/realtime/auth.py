"""
Websocket authentication.

Browsers cannot set an ``Authorization`` header on a websocket
handshake, so the access token is passed as ``?token=<jwt>``.  The
middleware resolves it to a user and stores it in ``scope['user']``;
invalid or missing tokens leave an ``AnonymousUser``.
"""
from __future__ import annotations

import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.exceptions import TokenError

from clinic.authentication import BearerJWTAuthentication

logger = logging.getLogger(__name__)


@database_sync_to_async
def _user_for_token(raw: str):
    auth = BearerJWTAuthentication()
    try:
        validated = auth.get_validated_token(raw)
        return auth.get_user(validated)
    except (TokenError, AuthenticationFailed) as e:
        logger.info("websocket token rejected: %s", e)
        return AnonymousUser()


class JWTQueryAuthMiddleware(BaseMiddleware):
    async def __call__(self, scope, receive, send):
        params = parse_qs(scope.get("query_string", b"").decode())
        token = (params.get("token") or [None])[0]
        scope = dict(scope)
        scope["user"] = await _user_for_token(token) if token else AnonymousUser()
        return await super().__call__(scope, receive, send)

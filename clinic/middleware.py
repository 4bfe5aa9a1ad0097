from django.http import JsonResponse


class LegacyUserIdHeaderMiddleware:
    """Refuse requests that identify themselves with the old ``user-id`` header.

    The header used to be trusted as the caller's identity.  Requests that
    still send it without a bearer token get a 401 telling the client to
    log in and use ``Authorization: Bearer <token>`` instead.
    """
    LEGACY_HEADER = 'HTTP_USER_ID'

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        path = request.path or ''
        if (path.startswith('/api/') and self.LEGACY_HEADER in request.META
                and not request.META.get('HTTP_AUTHORIZATION')):
            return JsonResponse(
                {'ok': False, 'error': {'code': 'legacy_auth', 'message': 'The user-id header is no longer accepted. Log in and send Authorization: Bearer <token>.'}},
                status=401,
            )
        return self.get_response(request)

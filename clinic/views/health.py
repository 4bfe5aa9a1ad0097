import logging

from django.db import connections
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def healthz(request):
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
    except Exception as e:
        logger.exception("health check failed")
        return JsonResponse({'ok': False, 'db': False, 'error': e.__class__.__name__}, status=503)
    return JsonResponse({'ok': True, 'db': bool(row and row[0] == 1)})

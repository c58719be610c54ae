from django.http import JsonResponse

from apps.core.storage import get_storage_backend


def health_check(request):
    """Health check endpoint for monitoring."""
    health_data = {
        'status': 'ok',
        'service': 'storefront',
        'checks': {},
    }

    # Check storage backend
    try:
        storage = get_storage_backend()
        storage.check()
        health_data['checks']['storage'] = storage.kind
        if getattr(storage, 'read_only', False):
            health_data['status'] = 'degraded'
            health_data['checks']['storage'] = f'{storage.kind} (read-only)'
    except Exception as e:
        health_data['status'] = 'degraded'
        health_data['checks']['storage'] = str(e)

    status_code = 200 if health_data['status'] == 'ok' else 503
    return JsonResponse(health_data, status=status_code)


def ready_check(request):
    """Readiness check for container orchestration."""
    try:
        get_storage_backend().check()
        return JsonResponse({'status': 'ready'})
    except Exception as e:
        return JsonResponse({'status': 'not_ready', 'error': str(e)}, status=503)

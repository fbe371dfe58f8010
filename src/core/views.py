"""Process-level endpoints."""
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET


@require_GET
def health(request):
    """Lightweight health check (process alive)."""
    return JsonResponse({"status": "ok", "time": timezone.now().isoformat()})

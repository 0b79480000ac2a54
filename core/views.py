"""
Operational endpoints: liveness, readiness and Prometheus metrics.
"""

from django.db import connection
from django.http import HttpResponse, JsonResponse
from django.views import View
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest


class HealthView(View):
    """Liveness check; never touches external services."""

    def get(self, _request):
        return JsonResponse({"status": "healthy", "service": "license-expiry-service"})


class ReadyView(View):
    """Readiness check; the database must answer."""

    def get(self, _request):
        """Report whether the service can reach its database."""
        try:
            connection.ensure_connection()
        except Exception as e:  # pylint: disable=broad-exception-caught
            return JsonResponse({"status": "not_ready", "database": str(e)}, status=503)
        return JsonResponse({"status": "ready", "database": "connected"})


class MetricsView(View):
    """Prometheus scrape endpoint."""

    def get(self, _request):
        return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)

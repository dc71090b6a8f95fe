"""
Dashboard aggregates.

Both payloads are computed from the live tables and cached for
``DASHBOARD_CACHE_SECONDS``; see ``erp.services.dashboard``.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..services import dashboard


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_stats(request):
    """Headline counts: patients, today's appointments, beds and revenue."""
    return Response(dashboard.dashboard_stats())


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def resource_utilization(request):
    """Percentages of beds, staff, critical care, procedures and stock in use."""
    return Response(dashboard.resource_utilization())

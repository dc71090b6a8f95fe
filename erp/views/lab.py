"""
Lab system registry, results, sync runs and connection checks.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import LabResult, LabSystem
from ..serializers.lab import ConnectionTestSerializer, LabResultSerializer, LabSyncLogSerializer
from ..services import lab
from .base import EntityListCreate


class LabResultList(EntityListCreate):
    """Results filtered by patient, order, system or status.

    With no filter at all only pending results are listed.
    """
    serializer_class = LabResultSerializer
    query_filters = {
        'patientId': 'patient_id',
        'orderId': 'medical_order_id',
        'labSystemId': 'lab_system_id',
        'status': 'status',
    }
    ordering = ('-created_at', '-id')

    def base_queryset(self):
        qs = LabResult.objects.all()
        if not any(self.request.query_params.get(p) for p in self.query_filters) and not self.kwargs:
            qs = qs.filter(status='pending')
        return qs


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def sync_lab_system(request, pk: int):
    system = get_object_or_404(LabSystem, pk=pk)
    log = lab.sync_lab_system(system, user=request.user)
    return Response({'ok': log.status == 'completed', 'syncLog': LabSyncLogSerializer(log).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def connection_test(request):
    """Probe an unsaved lab configuration."""
    s = ConnectionTestSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    return Response(lab.check_connection(v.get('apiUrl') or v['url'], api_key=v.get('apiKey'),
                                         username=v.get('username'), password=v.get('password')))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def system_connection_test(request, pk: int):
    system = get_object_or_404(LabSystem, pk=pk)
    return Response(lab.check_system_connection(system))

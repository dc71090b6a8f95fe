"""
Service catalogue, price versions and service orders.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Service, ServiceOrder
from ..serializers.catalog import (
    ServiceOrderDetailSerializer,
    ServiceOrderItemSerializer,
    ServiceOrderSerializer,
    ServicePriceVersionSerializer,
    ServiceSerializer,
)
from ..services import catalog
from .base import EntityDetail, EntityListCreate


class ServiceList(EntityListCreate):
    """Catalogue; ``?active=true`` keeps active services only."""
    serializer_class = ServiceSerializer
    query_filters = {'category': 'category', 'status': 'status'}

    def base_queryset(self):
        qs = Service.objects.all()
        if self.request.query_params.get('active') in ('1', 'true', 'True'):
            qs = qs.filter(status='active')
        return qs

    def perform_create(self, serializer):
        serializer.instance = catalog.create_service(dict(serializer.validated_data), user=self.request.user)


class ServiceDetail(EntityDetail):
    serializer_class = ServiceSerializer

    def perform_update(self, serializer):
        serializer.instance = catalog.update_service(serializer.instance, dict(serializer.validated_data),
                                                     user=self.request.user)


class PriceVersionList(EntityListCreate):
    serializer_class = ServicePriceVersionSerializer
    query_filters = {'serviceId': 'service_id', 'year': 'year'}
    ordering = ('-effective_date', '-id')

    def perform_create(self, serializer):
        serializer.instance = catalog.create_price_version(serializer.validated_data, user=self.request.user)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def current_price(request, service_id: int):
    service = get_object_or_404(Service, pk=service_id)
    version = catalog.current_price_version(service)
    if version is None:
        raise NotFound('No current price for this service')
    return Response(ServicePriceVersionSerializer(version).data)


class ServiceOrderList(EntityListCreate):
    serializer_class = ServiceOrderSerializer
    query_filters = {'patientId': 'patient_id', 'billId': 'bill_id', 'status': 'status'}
    ordering = ('-order_date', '-id')

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)


class ServiceOrderDetail(EntityDetail):
    def get_serializer_class(self):
        return ServiceOrderDetailSerializer if self.request.method == 'GET' else ServiceOrderSerializer

    def base_queryset(self):
        return ServiceOrder.objects.prefetch_related('items')


class ServiceOrderItemList(EntityListCreate):
    serializer_class = ServiceOrderItemSerializer
    query_filters = {'serviceOrderId': 'service_order_id'}

    def perform_create(self, serializer):
        serializer.instance = catalog.add_order_item(serializer.validated_data)


class ServiceOrderItemDetail(EntityDetail):
    serializer_class = ServiceOrderItemSerializer

    def perform_update(self, serializer):
        serializer.instance = catalog.update_order_item(serializer.instance, serializer.validated_data)

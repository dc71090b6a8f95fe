"""
Bills, bill items and direct payments.

``GET /api/bills`` lists unpaid bills unless ``?status=`` is given;
a single bill embeds its items.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Bill
from ..serializers.billing import BillDetailSerializer, BillSerializer, ConfirmPaymentSerializer
from ..services import billing
from .base import EntityDetail, EntityListCreate


class BillList(EntityListCreate):
    serializer_class = BillSerializer
    query_filters = {'patientId': 'patient_id', 'status': 'status'}
    ordering = ('-bill_date', '-id')

    def base_queryset(self):
        qs = Bill.objects.all()
        if 'status' not in self.request.query_params and 'patient_id' not in self.kwargs:
            qs = qs.exclude(status='paid')
        return qs

    def perform_create(self, serializer):
        serializer.instance = billing.create_bill(serializer.validated_data)


class BillDetail(EntityDetail):
    def get_serializer_class(self):
        return BillDetailSerializer if self.request.method == 'GET' else BillSerializer

    def base_queryset(self):
        return Bill.objects.prefetch_related('items')

    def perform_update(self, serializer):
        serializer.instance = billing.update_bill(serializer.instance, serializer.validated_data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def confirm_payment(request):
    """Apply a direct payment: ``{billId, amount}``."""
    s = ConfirmPaymentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    bill = billing.confirm_payment(s.validated_data['billId'], s.validated_data['amount'], user=request.user)
    return Response({'ok': True, 'bill': BillSerializer(bill).data})

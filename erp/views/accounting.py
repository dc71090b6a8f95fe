"""
Chart of accounts, ledger postings and point of sale.

Ledger entries are immutable once posted; balances only change through
new postings.
"""
from __future__ import annotations

from django.utils.dateparse import parse_date
from rest_framework.exceptions import ValidationError

from ..models import PosTransaction
from ..serializers.accounting import PosTransactionSerializer, TransactionSerializer
from ..services import accounting
from .base import EntityDetail, EntityListCreate


class TransactionList(EntityListCreate):
    serializer_class = TransactionSerializer
    query_filters = {'accountId': 'account_id', 'type': 'type'}
    ordering = ('-transaction_date', '-id')

    def perform_create(self, serializer):
        serializer.instance = accounting.post_transaction(serializer.validated_data)


class PosTransactionList(EntityListCreate):
    """Sales, filtered by ``terminalId`` or a ``startDate``/``endDate`` range."""
    serializer_class = PosTransactionSerializer
    query_filters = {'terminalId': 'terminal_id', 'status': 'status', 'patientId': 'patient_id'}
    ordering = ('-created_at', '-id')

    def base_queryset(self):
        qs = PosTransaction.objects.prefetch_related('items')
        for param, lookup in (('startDate', 'created_at__date__gte'), ('endDate', 'created_at__date__lte')):
            raw = self.request.query_params.get(param)
            if raw:
                day = parse_date(raw)
                if day is None:
                    raise ValidationError({param: ['Use the YYYY-MM-DD format.']})
                qs = qs.filter(**{lookup: day})
        return qs

    def perform_create(self, serializer):
        serializer.instance = accounting.create_pos_transaction(dict(serializer.validated_data),
                                                                user=self.request.user)


class PosTransactionDetail(EntityDetail):
    serializer_class = PosTransactionSerializer

    def base_queryset(self):
        return PosTransaction.objects.prefetch_related('items')

    def perform_update(self, serializer):
        serializer.instance = accounting.update_pos_transaction(serializer.instance, serializer.validated_data,
                                                                user=self.request.user)

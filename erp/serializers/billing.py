from decimal import Decimal

from rest_framework import serializers

from ..models import Bill, BillItem, CreditCompany
from .base import CamelModelSerializer


class CreditCompanySerializer(CamelModelSerializer):
    sanitized_fields = ('name', 'contact_person')

    class Meta:
        model = CreditCompany
        fields = '__all__'
        read_only_fields = ['created_at']


class BillItemSerializer(CamelModelSerializer):
    class Meta:
        model = BillItem
        fields = '__all__'
        read_only_fields = ['created_at']


class BillSerializer(CamelModelSerializer):
    class Meta:
        model = Bill
        fields = '__all__'
        # status follows paidAmount, totalAmount and the Stripe status
        read_only_fields = ['status', 'bill_date', 'created_at']


class BillDetailSerializer(BillSerializer):
    items = BillItemSerializer(many=True, read_only=True)


class ConfirmPaymentSerializer(serializers.Serializer):
    billId = serializers.PrimaryKeyRelatedField(queryset=Bill.objects.all())
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))

from decimal import Decimal

from rest_framework import serializers

from ..models import Service, ServiceOrder, ServiceOrderItem, ServicePriceVersion
from .base import CamelModelSerializer


class ServicePriceVersionSerializer(CamelModelSerializer):
    class Meta:
        model = ServicePriceVersion
        fields = '__all__'
        read_only_fields = ['created_at']
        extra_kwargs = {
            # year falls back to effectiveDate's year
            'year': {'required': False},
            # a new open version expires the previous one, see services.catalog
            'service': {'validators': []},
        }
        validators = []


class ServiceSerializer(CamelModelSerializer):
    """Catalogue entry.

    ``price`` is write-only: supplying it on create or patch opens a new
    current price version.  ``currentPrice`` is the open version, if any.
    """
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'),
                                     write_only=True, required=False)
    current_price = serializers.SerializerMethodField()
    sanitized_fields = ('name', 'description')

    class Meta:
        model = Service
        fields = '__all__'
        read_only_fields = ['created_at']

    def get_current_price(self, obj):
        from ..services.catalog import current_price_version
        version = current_price_version(obj)
        return ServicePriceVersionSerializer(version).data if version else None


class ServiceOrderItemSerializer(CamelModelSerializer):
    class Meta:
        model = ServiceOrderItem
        fields = '__all__'
        read_only_fields = ['created_at']
        extra_kwargs = {
            'unit_price': {'required': False},
            'total_price': {'required': False},
        }


class ServiceOrderSerializer(CamelModelSerializer):
    class Meta:
        model = ServiceOrder
        fields = '__all__'
        # totalAmount is the running sum of the order's items
        read_only_fields = ['order_date', 'total_amount', 'created_by', 'created_at']


class ServiceOrderDetailSerializer(ServiceOrderSerializer):
    items = ServiceOrderItemSerializer(many=True, read_only=True)

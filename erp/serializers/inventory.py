from rest_framework import serializers

from ..models import InventoryItem, InventoryTransfer, PharmacyStore
from .base import CamelModelSerializer


class PharmacyStoreSerializer(CamelModelSerializer):
    sanitized_fields = ('name',)

    class Meta:
        model = PharmacyStore
        fields = '__all__'
        read_only_fields = ['created_at']


class InventoryItemSerializer(CamelModelSerializer):
    low_stock = serializers.BooleanField(read_only=True)
    sanitized_fields = ('name',)

    class Meta:
        model = InventoryItem
        fields = '__all__'
        read_only_fields = ['created_at']


class InventoryTransferSerializer(CamelModelSerializer):
    class Meta:
        model = InventoryTransfer
        fields = '__all__'
        read_only_fields = ['created_at']

    def validate(self, attrs):
        source = attrs.get('source_store', getattr(self.instance, 'source_store', None))
        destination = attrs.get('destination_store', getattr(self.instance, 'destination_store', None))
        if source is not None and source == destination:
            raise serializers.ValidationError(
                {'destinationStoreId': ['Destination store must differ from the source store']}
            )
        return attrs

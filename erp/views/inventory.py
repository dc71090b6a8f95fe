from ..models import InventoryItem
from ..serializers.inventory import InventoryItemSerializer, InventoryTransferSerializer
from ..services import inventory
from .base import EntityDetail, EntityList, EntityListCreate


class InventoryList(EntityListCreate):
    serializer_class = InventoryItemSerializer
    query_filters = {'storeId': 'store_id', 'category': 'category'}


class LowStockItems(EntityList):
    serializer_class = InventoryItemSerializer
    ordering = ('name', 'id')

    def base_queryset(self):
        return InventoryItem.objects.low_stock()


class TransferList(EntityListCreate):
    serializer_class = InventoryTransferSerializer
    query_filters = {'status': 'status', 'itemId': 'item_id'}
    ordering = ('-created_at', '-id')

    def perform_create(self, serializer):
        serializer.instance = inventory.create_transfer(serializer.validated_data, user=self.request.user)


class TransferDetail(EntityDetail):
    serializer_class = InventoryTransferSerializer

    def perform_update(self, serializer):
        serializer.instance = inventory.update_transfer(serializer.instance, serializer.validated_data,
                                                        user=self.request.user)

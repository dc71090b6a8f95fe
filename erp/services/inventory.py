"""
Stock movements between pharmacy stores.

Completing a transfer of ``quantity`` moves stock from the transfer's
item to the item of the same name in the destination store, creating
that item when the destination does not stock it yet.  The source
quantity never drops below zero.
"""
from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from erp.models import InventoryItem, InventoryTransfer, User
from erp.services.audit import log_action

logger = logging.getLogger(__name__)

# Attributes a newly stocked destination item inherits from the source item
COPIED_FIELDS = ('category', 'unit', 'cost', 'reorder_level', 'expiry_date', 'batch_number', 'manufacturer')


def _complete(transfer: InventoryTransfer, user: User | None) -> None:
    source = InventoryItem.objects.select_for_update().get(pk=transfer.item_id)
    quantity = transfer.quantity

    source.quantity = max(0, source.quantity - quantity)
    source.save(update_fields=['quantity'])

    destination = (InventoryItem.objects.select_for_update()
                   .filter(store_id=transfer.destination_store_id, name=source.name)
                   .order_by('id').first())
    if destination is not None:
        destination.quantity += quantity
        destination.save(update_fields=['quantity'])
    else:
        destination = InventoryItem.objects.create(
            name=source.name,
            store_id=transfer.destination_store_id,
            quantity=quantity,
            location=source.location,
            **{field: getattr(source, field) for field in COPIED_FIELDS},
        )

    logger.info("Transfer %s completed: %s x%s from store %s to store %s",
                transfer.pk, source.name, quantity, transfer.source_store_id, transfer.destination_store_id)
    log_action(user=user, action='transfer_complete', object_type='inventory_transfer', object_id=transfer.pk,
               detail={'sourceItemId': source.pk, 'destinationItemId': destination.pk, 'quantity': quantity})


@transaction.atomic
def create_transfer(data: dict, *, user: User | None = None) -> InventoryTransfer:
    transfer = InventoryTransfer(**data)
    if transfer.status == 'completed' and transfer.completed_date is None:
        transfer.completed_date = timezone.now()
    transfer.save()
    if transfer.status == 'completed':
        _complete(transfer, user)
    return transfer


@transaction.atomic
def update_transfer(transfer: InventoryTransfer, data: dict, *, user: User | None = None) -> InventoryTransfer:
    transfer = InventoryTransfer.objects.select_for_update().get(pk=transfer.pk)
    previous = transfer.status
    for field, value in data.items():
        setattr(transfer, field, value)

    completing = transfer.status == 'completed' and previous != 'completed'
    if completing and transfer.completed_date is None:
        transfer.completed_date = timezone.now()
    transfer.save()
    if completing:
        _complete(transfer, user)
    return transfer

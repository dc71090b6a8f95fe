"""
Service catalogue pricing and service orders.

Prices are versioned.  The version whose ``expiry_date`` is NULL is the
current price; opening a new one expires the old one as of yesterday.
Order totals are maintained incrementally: adding an item adds its
total, changing an item applies the difference.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from erp.models import Service, ServiceOrder, ServiceOrderItem, ServicePriceVersion, User
from erp.services.audit import log_action

logger = logging.getLogger(__name__)


def current_price_version(service: Service) -> ServicePriceVersion | None:
    return (ServicePriceVersion.objects.filter(service=service, expiry_date__isnull=True)
            .order_by('-effective_date', '-id').first())


# ---------------------------------------------------------------------------
# Price versions
# ---------------------------------------------------------------------------

@transaction.atomic
def create_price_version(data: dict, *, user: User | None = None) -> ServicePriceVersion:
    # Locking the service serialises concurrent price changes for it
    service = Service.objects.select_for_update().get(pk=data['service'].pk)
    data = dict(data, service=service)
    data.setdefault('year', data['effective_date'].year)

    if data.get('expiry_date') is None:
        yesterday = timezone.localdate() - timedelta(days=1)
        expired = (ServicePriceVersion.objects
                   .filter(service=service, expiry_date__isnull=True)
                   .update(expiry_date=yesterday))
        if expired:
            logger.info("Expired %s open price version(s) of service %s as of %s", expired, service.pk, yesterday)

    version = ServicePriceVersion.objects.create(**data)
    log_action(user=user, action='price_change', object_type='service', object_id=service.pk,
               detail={'versionId': version.pk, 'price': str(version.price)})
    return version


def set_current_price(service: Service, price: Decimal, *, effective_date: date | None = None,
                      user: User | None = None) -> ServicePriceVersion:
    return create_price_version(
        {'service': service, 'price': price, 'effective_date': effective_date or timezone.localdate()},
        user=user,
    )


@transaction.atomic
def create_service(data: dict, *, user: User | None = None) -> Service:
    price = data.pop('price', None)
    service = Service.objects.create(**data)
    if price is not None:
        set_current_price(service, price, user=user)
    return service


@transaction.atomic
def update_service(service: Service, data: dict, *, user: User | None = None) -> Service:
    price = data.pop('price', None)
    for field, value in data.items():
        setattr(service, field, value)
    service.save()
    if price is not None:
        set_current_price(service, price, user=user)
    return service


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

@transaction.atomic
def add_order_item(data: dict) -> ServiceOrderItem:
    order = ServiceOrder.objects.select_for_update().get(pk=data['service_order'].pk)
    data = dict(data, service_order=order)

    if data.get('unit_price') is None:
        version = data.get('service_price_version') or current_price_version(data['service'])
        if version is None:
            raise ValidationError({'unitPrice': ['Service has no current price; supply a unit price']})
        data['service_price_version'] = version
        data['unit_price'] = version.price
    if data.get('total_price') is None:
        data['total_price'] = data['unit_price'] * data.get('quantity', 1)

    item = ServiceOrderItem.objects.create(**data)
    order.total_amount += item.total_price
    order.save(update_fields=['total_amount'])
    logger.info("Order %s: added item %s (%s), total now %s", order.pk, item.pk, item.total_price, order.total_amount)
    return item


@transaction.atomic
def update_order_item(item: ServiceOrderItem, data: dict) -> ServiceOrderItem:
    data = dict(data)
    # Items do not move between orders
    data.pop('service_order', None)

    item = ServiceOrderItem.objects.select_for_update().get(pk=item.pk)
    order = ServiceOrder.objects.select_for_update().get(pk=item.service_order_id)
    previous_total = item.total_price

    for field, value in data.items():
        setattr(item, field, value)
    if 'total_price' not in data and ('quantity' in data or 'unit_price' in data):
        item.total_price = item.unit_price * item.quantity
    item.save()

    delta = item.total_price - previous_total
    if delta:
        order.total_amount += delta
        order.save(update_fields=['total_amount'])
    return item

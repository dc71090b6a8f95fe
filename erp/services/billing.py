"""
Bill status bookkeeping.

A bill's status follows from its amounts: nothing paid is ``pending``,
something short of the total is ``partial``, the total or more is
``paid``.  A Stripe status of ``succeeded`` settles the bill in full.
"""
from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction
from rest_framework.exceptions import ValidationError

from erp.models import Bill, User
from erp.services.audit import log_action

logger = logging.getLogger(__name__)

STRIPE_SUCCEEDED = 'succeeded'


def derive_status(total_amount: Decimal, paid_amount: Decimal) -> str:
    paid = paid_amount or Decimal('0')
    if paid >= total_amount:
        return 'paid'
    if paid > 0:
        return 'partial'
    return 'pending'


def _settle(bill: Bill, data: dict) -> None:
    if data.get('stripe_payment_status') == STRIPE_SUCCEEDED:
        bill.paid_amount = bill.total_amount
    bill.status = derive_status(bill.total_amount, bill.paid_amount)


@transaction.atomic
def create_bill(data: dict) -> Bill:
    bill = Bill(**data)
    _settle(bill, data)
    bill.save()
    return bill


@transaction.atomic
def update_bill(bill: Bill, data: dict) -> Bill:
    bill = Bill.objects.select_for_update().get(pk=bill.pk)
    for field, value in data.items():
        setattr(bill, field, value)
    _settle(bill, data)
    bill.save()
    return bill


@transaction.atomic
def confirm_payment(bill: Bill, amount: Decimal, *, user: User | None = None) -> Bill:
    """Record a direct payment of ``amount`` against ``bill``."""
    bill = Bill.objects.select_for_update().get(pk=bill.pk)
    if bill.status == 'paid':
        raise ValidationError({'billId': ['Bill is already paid']})
    if amount <= 0:
        raise ValidationError({'amount': ['Amount must be positive']})

    bill.paid_amount = (bill.paid_amount or Decimal('0')) + amount
    bill.status = derive_status(bill.total_amount, bill.paid_amount)
    bill.payment_method = 'Direct Payment'
    bill.save(update_fields=['paid_amount', 'status', 'payment_method'])

    logger.info("Payment of %s confirmed for bill %s (now %s)", amount, bill.pk, bill.status)
    log_action(user=user, action='payment', object_type='bill', object_id=bill.pk,
               detail={'amount': str(amount), 'status': bill.status})
    return bill

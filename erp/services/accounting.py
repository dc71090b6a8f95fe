"""
Ledger postings and point-of-sale settlement.

Every balance change goes through :func:`post_transaction`, which locks
the account row.  A completed POS sale posts exactly one credit against
the account matching its payment method.
"""
from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from erp.models import Account, PosItem, PosTransaction, Transaction, User
from erp.services.audit import log_action

logger = logging.getLogger(__name__)

PAYMENT_ACCOUNT_TYPES = {
    'cash': 'cash',
    'card': 'bank',
    'credit_card': 'bank',
    'debit_card': 'bank',
    'mobile': 'bank',
    'insurance': 'receivable',
    'credit': 'receivable',
}


@transaction.atomic
def post_transaction(data: dict) -> Transaction:
    """Store a ledger entry and move the account balance.

    Credits add to the balance, debits subtract.  There is no overdraft
    check.
    """
    account = Account.objects.select_for_update().get(pk=data['account'].pk)
    txn = Transaction.objects.create(**dict(data, account=account))
    if txn.type == 'credit':
        account.balance += txn.amount
    else:
        account.balance -= txn.amount
    account.save(update_fields=['balance'])
    logger.info("Posted %s of %s to account %s, balance %s", txn.type, txn.amount, account.code, account.balance)
    return txn


def account_for_payment(payment_method: str) -> Account | None:
    account_type = PAYMENT_ACCOUNT_TYPES.get(payment_method, 'cash')
    return Account.objects.filter(type=account_type, status='active').order_by('id').first()


def _settle_sale(pos: PosTransaction, user: User | None) -> None:
    if pos.completed_at is None:
        pos.completed_at = timezone.now()
        pos.save(update_fields=['completed_at'])
    if Transaction.objects.filter(pos_transaction=pos).exists():
        return

    account = account_for_payment(pos.payment_method)
    if account is None:
        logger.warning("POS %s completed but no active account matches payment method %r",
                       pos.transaction_number, pos.payment_method)
        return
    post_transaction({
        'account': account,
        'type': 'credit',
        'amount': pos.total_amount,
        'description': f'POS sale {pos.transaction_number}',
        'reference': pos.transaction_number,
        'pos_transaction': pos,
    })
    log_action(user=user, action='pos_settle', object_type='pos_transaction', object_id=pos.pk,
               detail={'accountId': account.pk, 'amount': str(pos.total_amount)})


@transaction.atomic
def create_pos_transaction(data: dict, *, user: User | None = None) -> PosTransaction:
    items = data.pop('items', [])
    pos = PosTransaction.objects.create(**data)
    PosItem.objects.bulk_create([PosItem(pos_transaction=pos, **item) for item in items])
    if pos.status == 'completed':
        _settle_sale(pos, user)
    return pos


@transaction.atomic
def update_pos_transaction(pos: PosTransaction, data: dict, *, user: User | None = None) -> PosTransaction:
    data = dict(data)
    data.pop('items', None)
    pos = PosTransaction.objects.select_for_update().get(pk=pos.pk)
    for field, value in data.items():
        setattr(pos, field, value)
    pos.save()
    if pos.status == 'completed':
        _settle_sale(pos, user)
    return pos

"""
Synchronous report runner.

Each report type is a function taking the merged template/execution
parameters and returning JSON-serialisable data.  Date-bounded reports
accept ``startDate``/``endDate`` (``YYYY-MM-DD``, inclusive).
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Callable, Dict

from django.db.models import Count, Sum
from django.utils import timezone
from django.utils.dateparse import parse_date

from erp.models import (
    Admission, Appointment, Bed, Bill, InventoryItem, Patient, PosTransaction, ReportExecution, User, Ward,
)

logger = logging.getLogger(__name__)

REPORTS: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {}


class ReportError(Exception):
    pass


def report(name: str):
    def register(fn):
        REPORTS[name] = fn
        return fn
    return register


def _money(value) -> str:
    return str((value or Decimal('0')).quantize(Decimal('0.01')))


def _date_range(qs, field: str, params: Dict[str, Any]):
    for key, lookup in (('startDate', 'gte'), ('endDate', 'lte')):
        raw = params.get(key)
        if not raw:
            continue
        day = parse_date(str(raw))
        if day is None:
            raise ReportError(f'{key} must be a YYYY-MM-DD date')
        qs = qs.filter(**{f'{field}__date__{lookup}': day})
    return qs


def _counts(qs, field: str) -> Dict[str, int]:
    return {row[field]: row['n'] for row in qs.values(field).annotate(n=Count('id')).order_by(field)}


@report('patient-census')
def patient_census(params):
    return {
        'totalPatients': Patient.objects.count(),
        'byStatus': _counts(Patient.objects.all(), 'status'),
        'activeAdmissions': Admission.objects.filter(status='active').count(),
    }


@report('bed-occupancy')
def bed_occupancy(params):
    wards = []
    for ward in Ward.objects.order_by('id'):
        by_status = _counts(Bed.objects.filter(ward=ward), 'status')
        total = sum(by_status.values())
        occupied = by_status.get('occupied', 0)
        wards.append({
            'wardId': ward.pk,
            'ward': ward.name,
            'capacity': ward.capacity,
            'totalBeds': total,
            'occupied': occupied,
            'available': by_status.get('available', 0),
            'maintenance': by_status.get('maintenance', 0),
            'occupancyRate': round(occupied * 100 / total, 1) if total else 0.0,
        })
    return {'wards': wards}


@report('revenue-summary')
def revenue_summary(params):
    bills = _date_range(Bill.objects.all(), 'bill_date', params)
    totals = bills.aggregate(billed=Sum('total_amount'), paid=Sum('paid_amount'))
    sales = _date_range(PosTransaction.objects.filter(status='completed'), 'completed_at', params)
    billed = totals['billed'] or Decimal('0')
    paid = totals['paid'] or Decimal('0')
    return {
        'billCount': bills.count(),
        'totalBilled': _money(billed),
        'totalPaid': _money(paid),
        'outstanding': _money(billed - paid),
        'billsByStatus': _counts(bills, 'status'),
        'posSales': _money(sales.aggregate(total=Sum('total_amount'))['total']),
    }


@report('low-stock')
def low_stock(params):
    items = InventoryItem.objects.low_stock().order_by('name')
    return {'items': [
        {'id': i.pk, 'name': i.name, 'storeId': i.store_id, 'quantity': i.quantity, 'reorderLevel': i.reorder_level}
        for i in items
    ]}


@report('appointment-summary')
def appointment_summary(params):
    appointments = _date_range(Appointment.objects.all(), 'date', params)
    return {
        'total': appointments.count(),
        'byStatus': _counts(appointments, 'status'),
        'byType': _counts(appointments, 'type'),
    }


def run_report(execution: ReportExecution) -> ReportExecution:
    template = execution.template
    params = {**(template.parameters or {}), **(execution.parameters or {})}
    runner = REPORTS.get(template.report_type)
    try:
        if runner is None:
            raise ReportError(f'Unknown report type {template.report_type!r}')
        execution.result_data = runner(params)
        execution.status = 'completed'
    except ReportError as exc:
        logger.warning("Report execution %s failed: %s", execution.pk, exc)
        execution.status = 'failed'
        execution.error_message = str(exc)
    execution.completed_at = timezone.now()
    execution.save(update_fields=['result_data', 'status', 'error_message', 'completed_at'])
    return execution


def execute(data: dict, *, user: User | None = None) -> ReportExecution:
    execution = ReportExecution.objects.create(executed_by=user, **data)
    return run_report(execution)

"""
Dashboard aggregates, computed live and cached briefly.

Growth figures are percentage changes rounded to one decimal: patients
registered in the last 30 days against the 30 days before, and today's
appointments and revenue against yesterday's.
"""
from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.core.cache import cache
from django.db.models import Sum
from django.utils import timezone

from erp.models import Appointment, Bed, Bill, Employee, InventoryItem, MedicalOrder, Patient

STATS_KEY = 'dashboard:stats'
UTILIZATION_KEY = 'dashboard:utilization'


def _pct_change(current, previous) -> float:
    if not previous:
        return 100.0 if current else 0.0
    return round(float(current - previous) * 100 / float(previous), 1)


def _pct(part, whole) -> float:
    return round(part * 100 / whole, 1) if whole else 0.0


def _revenue_on(day) -> Decimal:
    return Bill.objects.filter(bill_date__date=day).aggregate(total=Sum('paid_amount'))['total'] or Decimal('0')


def compute_dashboard_stats() -> dict:
    now = timezone.now()
    today = timezone.localdate()
    yesterday = today - timedelta(days=1)

    recent = Patient.objects.filter(created_at__gte=now - timedelta(days=30)).count()
    prior = Patient.objects.filter(created_at__gte=now - timedelta(days=60),
                                   created_at__lt=now - timedelta(days=30)).count()
    appointments_today = Appointment.objects.filter(date__date=today).count()
    appointments_yesterday = Appointment.objects.filter(date__date=yesterday).count()
    revenue_today = _revenue_on(today)

    return {
        'totalPatients': Patient.objects.count(),
        'todayAppointments': appointments_today,
        'availableBeds': Bed.objects.filter(status='available').count(),
        'totalBeds': Bed.objects.count(),
        'todayRevenue': str(revenue_today.quantize(Decimal('0.01'))),
        'patientGrowth': _pct_change(recent, prior),
        'appointmentChange': _pct_change(appointments_today, appointments_yesterday),
        'revenueGrowth': _pct_change(revenue_today, _revenue_on(yesterday)),
        'date': now.isoformat(),
    }


def compute_resource_utilization() -> dict:
    beds = Bed.objects.all()
    critical_beds = beds.filter(ward__type__in=['icu', 'emergency'])
    staff = Employee.objects.exclude(status='terminated')
    procedures = MedicalOrder.objects.filter(order_type='procedure', ordered_at__date=timezone.localdate()) \
        .exclude(status='cancelled')
    items = InventoryItem.objects.all()

    return {
        'bedUtilization': _pct(beds.filter(status='occupied').count(), beds.count()),
        'staffAllocation': _pct(staff.filter(status='active').count(), staff.count()),
        'emergencyCapacity': _pct(critical_beds.filter(status='occupied').count(), critical_beds.count()),
        'operatingRoomUsage': _pct(procedures.exclude(status='ordered').count(), procedures.count()),
        'pharmacyInventory': _pct(items.count() - items.low_stock().count(), items.count()),
        'date': timezone.now().isoformat(),
    }


def _cached(key: str, compute) -> dict:
    payload = cache.get(key)
    if payload is None:
        payload = compute()
        cache.set(key, payload, settings.DASHBOARD_CACHE_SECONDS)
    return payload


def dashboard_stats() -> dict:
    return _cached(STATS_KEY, compute_dashboard_stats)


def resource_utilization() -> dict:
    return _cached(UTILIZATION_KEY, compute_resource_utilization)


def refresh() -> list[str]:
    """Recompute and store both aggregates; returns the keys written."""
    cache.set(STATS_KEY, compute_dashboard_stats(), settings.DASHBOARD_CACHE_SECONDS)
    cache.set(UTILIZATION_KEY, compute_resource_utilization(), settings.DASHBOARD_CACHE_SECONDS)
    return [STATS_KEY, UTILIZATION_KEY]

"""
Dashboard aggregates and the health probe.
"""
from datetime import date
from decimal import Decimal

import pytest
from django.core.cache import cache
from django.core.management import call_command
from django.utils import timezone

from erp.models import Appointment, Bed, Bill, Employee, InventoryItem, MedicalOrder, Patient, Ward
from erp.services import dashboard

pytestmark = pytest.mark.django_db


@pytest.fixture
def hospital(doctor, patient):
    general = Ward.objects.create(name='General Ward', type='general', capacity=4)
    icu = Ward.objects.create(name='ICU', type='icu', capacity=2)
    for n, status in enumerate(['occupied', 'occupied', 'available', 'available']):
        Bed.objects.create(bed_number=f'GW-{n}', ward=general, status=status)
    Bed.objects.create(bed_number='ICU-1', ward=icu, status='occupied')
    Bed.objects.create(bed_number='ICU-2', ward=icu, status='available')

    Appointment.objects.create(patient=patient, doctor=doctor, date=timezone.now(), duration=30, type='Checkup')
    Bill.objects.create(patient=patient, total_amount=Decimal('200.00'), paid_amount=Decimal('125.50'))

    Employee.objects.create(user=doctor, department='Medicine', position='Physician', join_date=date(2020, 1, 1),
                            salary=Decimal('1000'))
    MedicalOrder.objects.create(patient=patient, ordered_by=doctor, order_type='procedure', description='Appendectomy',
                                status='in-progress')
    MedicalOrder.objects.create(patient=patient, ordered_by=doctor, order_type='procedure', description='Biopsy')
    InventoryItem.objects.create(name='Masks', category='supplies', quantity=5, unit='box', reorder_level=10,
                                 location='A', cost=Decimal('1'))
    InventoryItem.objects.create(name='Gloves', category='supplies', quantity=500, unit='box', reorder_level=10,
                                 location='A', cost=Decimal('1'))


def test_dashboard_stats(api, hospital):
    r = api.get('/api/dashboard-stats')
    assert r.status_code == 200
    data = r.data
    assert data['totalPatients'] == 1
    assert data['todayAppointments'] == 1
    assert (data['availableBeds'], data['totalBeds']) == (3, 6)
    assert data['todayRevenue'] == '125.50'
    assert data['patientGrowth'] == 100.0


def test_resource_utilization(api, hospital):
    data = api.get('/api/resource-utilization').data
    assert data['bedUtilization'] == 50.0
    assert data['staffAllocation'] == 100.0
    assert data['emergencyCapacity'] == 50.0
    assert data['operatingRoomUsage'] == 50.0
    assert data['pharmacyInventory'] == 50.0


def test_empty_hospital_has_zero_percentages(api):
    data = api.get('/api/resource-utilization').data
    assert data['bedUtilization'] == 0.0
    assert data['pharmacyInventory'] == 0.0


def test_stats_are_cached_until_refreshed(api, hospital):
    assert api.get('/api/dashboard-stats').data['totalPatients'] == 1
    Patient.objects.create(patient_id='P-2', first_name='A', last_name='B')
    assert api.get('/api/dashboard-stats').data['totalPatients'] == 1

    call_command('refresh_caches')
    assert cache.get(dashboard.STATS_KEY)['totalPatients'] == 2
    assert api.get('/api/dashboard-stats').data['totalPatients'] == 2


def test_percent_change():
    assert dashboard._pct_change(15, 10) == 50.0
    assert dashboard._pct_change(5, 10) == -50.0
    assert dashboard._pct_change(0, 0) == 0.0
    assert dashboard._pct_change(Decimal('20'), Decimal('0')) == 100.0


def test_healthz(client):
    r = client.get('/healthz')
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True}

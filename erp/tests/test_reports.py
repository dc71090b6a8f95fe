"""
Report templates and synchronous executions.
"""
from decimal import Decimal

import pytest

from erp.models import Bed, Bill, InventoryItem, ReportTemplate, Ward

pytestmark = pytest.mark.django_db


def template(api, report_type, **extra):
    payload = {'name': report_type.title(), 'category': 'operations', 'reportType': report_type}
    payload.update(extra)
    r = api.post('/api/report-templates', payload, format='json')
    assert r.status_code == 201
    return r.data


def execute(api, template_id, **parameters):
    return api.post('/api/report-executions', {'templateId': template_id, 'parameters': parameters}, format='json')


def test_template_records_its_author(api, doctor):
    data = template(api, 'patient-census')
    assert data['createdBy'] == doctor.pk
    assert [t['id'] for t in api.get(f'/api/report-templates/user/{doctor.pk}').data] == [data['id']]
    assert len(api.get('/api/report-templates/category/operations').data) == 1
    assert api.get('/api/report-templates/system').data == []


def test_bed_occupancy_report(api, ward):
    Bed.objects.create(bed_number='GW-1', ward=ward, status='occupied')
    Bed.objects.create(bed_number='GW-2', ward=ward, status='available')
    Bed.objects.create(bed_number='GW-3', ward=ward, status='available')
    Bed.objects.create(bed_number='GW-4', ward=ward, status='maintenance')

    r = execute(api, template(api, 'bed-occupancy')['id'])
    assert r.status_code == 201
    assert r.data['status'] == 'completed'
    assert r.data['completedAt'] is not None
    row = r.data['resultData']['wards'][0]
    assert (row['totalBeds'], row['occupied'], row['available'], row['maintenance']) == (4, 1, 2, 1)
    assert row['occupancyRate'] == 25.0


def test_revenue_summary(api, patient):
    Bill.objects.create(patient=patient, total_amount=Decimal('100.00'), paid_amount=Decimal('100.00'),
                        status='paid')
    Bill.objects.create(patient=patient, total_amount=Decimal('50.00'), paid_amount=Decimal('20.00'),
                        status='partial')

    data = execute(api, template(api, 'revenue-summary')['id']).data['resultData']
    assert data['billCount'] == 2
    assert data['totalBilled'] == '150.00'
    assert data['totalPaid'] == '120.00'
    assert data['outstanding'] == '30.00'
    assert data['billsByStatus'] == {'paid': 1, 'partial': 1}
    assert data['posSales'] == '0.00'


def test_execution_parameters_override_template(api, patient):
    Bill.objects.create(patient=patient, total_amount=Decimal('10.00'))
    template_id = template(api, 'revenue-summary', parameters={'endDate': '2000-01-01'})['id']

    assert execute(api, template_id).data['resultData']['billCount'] == 0
    assert execute(api, template_id, endDate='2999-12-31').data['resultData']['billCount'] == 1


def test_low_stock_report(api):
    InventoryItem.objects.create(name='Surgical Masks', category='supplies', quantity=80, unit='boxes',
                                 reorder_level=100, location='Store 2', cost=Decimal('5.00'))
    data = execute(api, template(api, 'low-stock')['id']).data['resultData']
    assert [i['name'] for i in data['items']] == ['Surgical Masks']


def test_bad_parameters_and_unknown_types_fail_the_execution(api):
    r = execute(api, template(api, 'appointment-summary')['id'], startDate='last week')
    assert r.status_code == 201
    assert r.data['status'] == 'failed'
    assert 'startDate' in r.data['errorMessage']

    r = execute(api, template(api, 'no-such-report')['id'])
    assert r.data['status'] == 'failed'
    assert r.data['resultData'] is None


def test_executions_by_template(api):
    template_id = template(api, 'patient-census')['id']
    execute(api, template_id)
    execute(api, template_id)
    assert len(api.get(f'/api/report-executions/template/{template_id}').data) == 2
    assert ReportTemplate.objects.get(pk=template_id).executions.count() == 2

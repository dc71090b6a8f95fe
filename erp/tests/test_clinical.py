"""
Plain create/patch/list entities: HR, dialysis, emergency and clinical
decision support.
"""
from datetime import date

import pytest
from django.utils import timezone

from erp.models import Bed, DialysisUnit, Employee

pytestmark = pytest.mark.django_db


def test_ids_increase_and_created_at_is_not_in_the_future(api, ward):
    ids = []
    for n in range(3):
        r = api.post('/api/beds', {'bedNumber': f'GW-{n}', 'wardId': ward.pk}, format='json')
        assert r.status_code == 201
        assert r.data['status'] == 'available'
        ids.append(r.data['id'])
    assert ids == sorted(ids) and len(set(ids)) == 3
    assert all(b.created_at <= timezone.now() for b in Bed.objects.all())


def test_duplicate_bed_number_is_rejected(api, bed):
    r = api.post('/api/beds', {'bedNumber': 'GW-1', 'wardId': bed.ward_id}, format='json')
    assert r.status_code == 400
    assert 'bedNumber' in r.data['error']['fields']


def test_employee_and_leave_requests(api, doctor):
    r = api.post('/api/employees', {
        'userId': doctor.pk, 'department': 'Medicine', 'position': 'Physician',
        'joinDate': '2020-01-01', 'salary': '5000.00',
    }, format='json')
    assert r.status_code == 201
    employee_id = r.data['id']

    r = api.post('/api/leaves', {
        'employeeId': employee_id, 'type': 'annual', 'startDate': '2024-07-10', 'endDate': '2024-07-01',
        'reason': 'Holiday',
    }, format='json')
    assert r.status_code == 400
    assert 'endDate' in r.data['error']['fields']

    r = api.post('/api/leaves', {
        'employeeId': employee_id, 'type': 'annual', 'startDate': '2024-07-01', 'endDate': '2024-07-10',
        'reason': 'Holiday',
    }, format='json')
    assert r.status_code == 201
    leave_id = r.data['id']

    r = api.patch(f'/api/leaves/{leave_id}', {'status': 'approved', 'reviewedBy': doctor.pk}, format='json')
    assert r.data['status'] == 'approved'
    assert r.data['reviewedBy'] == doctor.pk

    # The cross-field check also applies to partial updates
    r = api.patch(f'/api/leaves/{leave_id}', {'endDate': '2024-06-01'}, format='json')
    assert r.status_code == 400

    assert len(api.get(f'/api/leaves/employee/{employee_id}').data) == 1
    assert len(api.get('/api/leaves', {'status': 'pending'}).data) == 0


def test_dialysis_sessions(api, patient):
    unit = DialysisUnit.objects.create(name='Renal Unit', machine_count=6)
    r = api.post('/api/dialysis-sessions', {
        'patientId': patient.pk, 'unitId': unit.pk, 'machineNumber': 2,
        'scheduledAt': timezone.now().isoformat(), 'preWeight': '72.40',
    }, format='json')
    assert r.status_code == 201
    assert r.data['status'] == 'scheduled'

    session_id = r.data['id']
    r = api.patch(f'/api/dialysis-sessions/{session_id}', {'status': 'completed', 'postWeight': '70.10'},
                  format='json')
    assert r.data['postWeight'] == '70.10'
    assert len(api.get('/api/dialysis-sessions', {'unitId': unit.pk}).data) == 1


def test_emergency_triage_level_is_bounded(api, doctor):
    payload = {'patientName': 'Unknown male', 'arrivalAt': timezone.now().isoformat(),
               'chiefComplaint': 'Chest pain', 'triageLevel': 6}
    r = api.post('/api/emergency-cases', payload, format='json')
    assert r.status_code == 400
    assert 'triageLevel' in r.data['error']['fields']

    payload['triageLevel'] = 1
    r = api.post('/api/emergency-cases', payload, format='json')
    assert r.status_code == 201
    assert r.data['patientId'] is None

    r = api.patch(f"/api/emergency-cases/{r.data['id']}", {'status': 'in-treatment', 'assignedDoctorId': doctor.pk},
                  format='json')
    assert r.data['assignedDoctorId'] == doctor.pk
    assert len(api.get('/api/emergency-cases', {'status': 'waiting'}).data) == 0


def test_guidelines_and_diagnostic_sessions(api, patient, doctor):
    r = api.post('/api/clinical-guidelines', {
        'title': 'Community-acquired pneumonia', 'category': 'respiratory', 'content': 'CURB-65 ...',
    }, format='json')
    assert r.status_code == 201
    guideline_id = r.data['id']

    r = api.post('/api/diagnostic-sessions', {
        'patientId': patient.pk, 'doctorId': doctor.pk, 'guidelineId': guideline_id,
        'symptoms': ['fever', 'cough'], 'suggestedDiagnoses': ['pneumonia'],
    }, format='json')
    assert r.status_code == 201
    assert r.data['symptoms'] == ['fever', 'cough']
    assert len(api.get('/api/clinical-guidelines', {'category': 'respiratory'}).data) == 1
    assert len(api.get('/api/diagnostic-sessions', {'patientId': patient.pk}).data) == 1


def test_employee_for_unknown_user(api):
    r = api.post('/api/employees', {
        'userId': 999, 'department': 'X', 'position': 'Y', 'joinDate': date(2020, 1, 1).isoformat(),
        'salary': '1.00',
    }, format='json')
    assert r.status_code == 400
    assert not Employee.objects.exists()

"""
Patients, appointments and medical records, plus the JSON conventions
every entity endpoint shares.
"""
from datetime import timedelta

import pytest
from django.utils import timezone

from erp.models import Appointment, MedicalRecord, Patient

pytestmark = pytest.mark.django_db


def test_create_patient_accepts_camel_case_and_renders_camel_case(api):
    r = api.post('/api/patients', {
        'patientId': 'P-21504', 'firstName': 'Maria', 'lastName': 'Johnson',
        'dateOfBirth': '1985-03-02', 'gender': 'female', 'bloodType': 'A+',
    }, format='json')
    assert r.status_code == 201
    assert r.data['patientId'] == 'P-21504'
    assert r.data['firstName'] == 'Maria'
    assert r.data['status'] == 'active'
    assert 'createdAt' in r.data
    assert 'first_name' not in r.data


def test_snake_case_input_is_also_accepted(api):
    r = api.post('/api/patients', {'patient_id': 'P-1', 'first_name': 'A', 'last_name': 'B'}, format='json')
    assert r.status_code == 201
    assert Patient.objects.get(patient_id='P-1').first_name == 'A'


def test_markup_is_stripped_from_names(api):
    r = api.post('/api/patients', {'patientId': 'P-2', 'firstName': '<b>Robert</b>', 'lastName': 'Williams'},
                 format='json')
    assert r.status_code == 201
    assert r.data['firstName'] == 'Robert'


def test_duplicate_patient_code_is_a_400_with_field_errors(api, patient):
    r = api.post('/api/patients', {'patientId': 'P-21503', 'firstName': 'X', 'lastName': 'Y'}, format='json')
    assert r.status_code == 400
    assert r.data['ok'] is False
    assert r.data['error']['code'] == 'validation_error'
    assert 'patientId' in r.data['error']['fields']


def test_missing_required_fields_are_reported_in_camel_case(api):
    r = api.post('/api/patients', {'patientId': 'P-3'}, format='json')
    assert r.status_code == 400
    assert set(r.data['error']['fields']) == {'firstName', 'lastName'}


def test_patch_validates_only_the_supplied_fields(api, patient):
    r = api.patch(f'/api/patients/{patient.pk}', {'phone': '555-0101'}, format='json')
    assert r.status_code == 200
    assert r.data['phone'] == '555-0101'
    assert r.data['firstName'] == 'John'

    r = api.patch(f'/api/patients/{patient.pk}', {'gender': 'unknown'}, format='json')
    assert r.status_code == 400
    assert 'gender' in r.data['error']['fields']
    patient.refresh_from_db()
    assert patient.gender == 'male'


def test_unknown_id_is_a_404_in_the_error_envelope(api):
    r = api.get('/api/patients/999')
    assert r.status_code == 404
    assert r.data == {'ok': False, 'error': {'code': 'not_found', 'message': r.data['error']['message']}}


def test_put_is_not_allowed(api, patient):
    r = api.put(f'/api/patients/{patient.pk}', {'firstName': 'Z'}, format='json')
    assert r.status_code == 405
    assert r.data['error']['code'] == 'method_not_allowed'


def test_patient_search_and_recent(api):
    for n, (first, last) in enumerate([('John', 'Doe'), ('Maria', 'Johnson'), ('Robert', 'Williams')]):
        Patient.objects.create(patient_id=f'P-2150{n + 3}', first_name=first, last_name=last)

    r = api.get('/api/patients', {'q': 'john'})
    assert {p['lastName'] for p in r.data} == {'Doe', 'Johnson'}

    r = api.get('/api/patients', {'q': 'P-21505'})
    assert [p['firstName'] for p in r.data] == ['Robert']

    recent = api.get('/api/patients/recent').data
    assert [p['patientId'] for p in recent] == ['P-21505', 'P-21504', 'P-21503']


def test_recent_patients_are_capped_at_five(api):
    for n in range(7):
        Patient.objects.create(patient_id=f'P-{n}', first_name='F', last_name=str(n))
    assert len(api.get('/api/patients/recent').data) == 5
    assert len(api.get('/api/patients/recent', {'limit': 2}).data) == 2


def test_today_appointments_and_doctor_filter(api, patient, doctor):
    now = timezone.now()
    today = Appointment.objects.create(patient=patient, doctor=doctor, date=now, duration=30, type='Checkup')
    Appointment.objects.create(patient=patient, doctor=doctor, date=now + timedelta(days=3), duration=15,
                               type='Follow-up')

    r = api.get('/api/appointments/today')
    assert [a['id'] for a in r.data] == [today.pk]
    assert r.data[0]['patientId'] == patient.pk
    assert r.data[0]['doctorId'] == doctor.pk

    assert len(api.get(f'/api/appointments/doctor/{doctor.pk}').data) == 2
    assert len(api.get(f'/api/appointments/patient/{patient.pk}').data) == 2


def test_appointment_requires_existing_patient(api, doctor):
    r = api.post('/api/appointments', {
        'patientId': 999, 'doctorId': doctor.pk, 'date': timezone.now().isoformat(),
        'duration': 30, 'type': 'Consultation',
    }, format='json')
    assert r.status_code == 400
    assert 'patientId' in r.data['error']['fields']


def test_medical_records_are_append_only(api, patient, doctor):
    r = api.post('/api/medical-records', {
        'patientId': patient.pk, 'doctorId': doctor.pk,
        'subjective': 'Headache for two days', 'assessment': 'Tension headache', 'plan': 'Paracetamol',
    }, format='json')
    assert r.status_code == 201
    record_id = r.data['id']

    assert api.get(f'/api/medical-records/patient/{patient.pk}').data[0]['id'] == record_id
    assert api.patch(f'/api/medical-records/{record_id}', {'plan': 'x'}, format='json').status_code == 405
    assert MedicalRecord.objects.get(pk=record_id).plan == 'Paracetamol'

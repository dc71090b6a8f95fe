"""
Vehicle status follows its in-progress assignments.
"""
import pytest

from erp.models import Vehicle

pytestmark = pytest.mark.django_db


@pytest.fixture
def ambulance():
    return Vehicle.objects.create(registration_number='AMB-01', type='ambulance', capacity=2)


def assign(api, vehicle, **extra):
    payload = {'vehicleId': vehicle.pk, 'purpose': 'Patient transfer'}
    payload.update(extra)
    return api.post('/api/vehicle-assignments', payload, format='json')


def status_of(vehicle):
    vehicle.refresh_from_db()
    return vehicle.status


def test_dispatch_and_return(api, ambulance, patient):
    r = assign(api, ambulance, patientId=patient.pk)
    assert r.status_code == 201
    assert status_of(ambulance) == 'available'

    assignment_id = r.data['id']
    r = api.patch(f'/api/vehicle-assignments/{assignment_id}', {'status': 'in-progress'}, format='json')
    assert r.data['startedAt'] is not None
    assert status_of(ambulance) == 'in-use'

    r = api.patch(f'/api/vehicle-assignments/{assignment_id}', {'status': 'completed'}, format='json')
    assert r.data['completedAt'] is not None
    assert status_of(ambulance) == 'available'


def test_vehicle_stays_in_use_while_another_assignment_runs(api, ambulance):
    first = assign(api, ambulance, status='in-progress').data['id']
    second = assign(api, ambulance, status='in-progress').data['id']
    assert status_of(ambulance) == 'in-use'

    api.patch(f'/api/vehicle-assignments/{first}', {'status': 'completed'}, format='json')
    assert status_of(ambulance) == 'in-use'

    api.patch(f'/api/vehicle-assignments/{second}', {'status': 'cancelled'}, format='json')
    assert status_of(ambulance) == 'available'


def test_cancelling_a_scheduled_assignment_does_not_touch_the_vehicle(api, ambulance):
    ambulance.status = 'maintenance'
    ambulance.save()
    assignment_id = assign(api, ambulance).data['id']
    api.patch(f'/api/vehicle-assignments/{assignment_id}', {'status': 'cancelled'}, format='json')
    assert status_of(ambulance) == 'maintenance'


def test_assignment_filters(api, ambulance, doctor):
    other = Vehicle.objects.create(registration_number='AMB-02')
    assign(api, ambulance, driverId=doctor.pk)
    assign(api, other)
    assert len(api.get('/api/vehicle-assignments', {'vehicleId': other.pk}).data) == 1
    assert len(api.get('/api/vehicle-assignments', {'driverId': doctor.pk}).data) == 1
    assert len(api.get('/api/vehicles', {'status': 'available'}).data) == 2

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from erp.models import Bed, Patient, User, Ward


@pytest.fixture(autouse=True)
def _clear_cache():
    # Dashboard aggregates and login throttle counters live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(username='admin', password='admin123', name='System Administrator', role='admin')


@pytest.fixture
def doctor(db):
    return User.objects.create_user(username='drjohn', password='password123', name='Dr. John Doe',
                                    role='doctor', specialty='General Physician')


@pytest.fixture
def api(doctor):
    client = APIClient()
    client.force_authenticate(user=doctor)
    return client


@pytest.fixture
def admin_api(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def patient(db):
    return Patient.objects.create(patient_id='P-21503', first_name='John', last_name='Doe', gender='male')


@pytest.fixture
def ward(db):
    return Ward.objects.create(name='General Ward', type='general', capacity=20)


@pytest.fixture
def bed(ward):
    return Bed.objects.create(bed_number='GW-1', ward=ward, status='available')


@pytest.fixture
def now():
    return timezone.now()


@pytest.fixture
def today():
    return timezone.localdate()

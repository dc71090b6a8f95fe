import pytest
from django.core.management import call_command
from rest_framework.test import APIClient

from erp.models import Bed, InventoryItem, Patient, ServicePriceVersion, User

pytestmark = pytest.mark.django_db


def test_populate_data_seeds_demo_hospital_once():
    call_command('populate_data')
    call_command('populate_data')

    assert User.objects.get(username='drjohn').specialty == 'General Physician'
    assert Bed.objects.count() == 45
    assert Bed.objects.filter(status='occupied').count() == 32
    assert list(Patient.objects.order_by('patient_id').values_list('patient_id', flat=True)) == [
        'P-21503', 'P-21504', 'P-21505', 'P-21506',
    ]
    assert InventoryItem.objects.count() == 4
    assert ServicePriceVersion.objects.filter(expiry_date__isnull=True).count() == 4

    r = APIClient().post('/api/auth/login', {'username': 'admin', 'password': 'admin123'}, format='json')
    assert r.status_code == 200
    assert r.data['user']['role'] == 'admin'


def test_ensure_test_users_resets_passwords():
    User.objects.create_user(username='nurse1', password='forgotten', role='staff')
    call_command('ensure_test_users', password='s3cret-pass')
    nurse = User.objects.get(username='nurse1')
    assert nurse.role == 'nurse'
    assert nurse.check_password('s3cret-pass')
    assert User.objects.filter(username__in=['admin', 'drjohn']).count() == 2

"""
Stock levels and transfers between pharmacy stores.
"""
from decimal import Decimal

import pytest

from erp.models import InventoryItem, InventoryTransfer, PharmacyStore

pytestmark = pytest.mark.django_db


@pytest.fixture
def stores():
    main = PharmacyStore.objects.create(name='Main Pharmacy', code='MAIN', type='main')
    ward = PharmacyStore.objects.create(name='Ward 3 Cabinet', code='W3', type='ward')
    return main, ward


@pytest.fixture
def paracetamol(stores):
    return InventoryItem.objects.create(
        name='Paracetamol 500mg', category='medicine', store=stores[0], quantity=500, unit='tablets',
        reorder_level=100, location='Shelf A1', cost=Decimal('0.05'), batch_number='B-1',
    )


def transfer(api, item, source, destination, **extra):
    payload = {'itemId': item.pk, 'sourceStoreId': source.pk, 'destinationStoreId': destination.pk, 'quantity': 50}
    payload.update(extra)
    return api.post('/api/inventory-transfers', payload, format='json')


def test_low_stock_listing(api, stores):
    InventoryItem.objects.create(name='Surgical Masks', category='supplies', quantity=80, unit='boxes',
                                 reorder_level=100, location='Store 2', cost=Decimal('5.00'))
    InventoryItem.objects.create(name='Disposable Syringes', category='supplies', quantity=1000, unit='pieces',
                                 reorder_level=200, location='Store 1', cost=Decimal('0.20'))
    InventoryItem.objects.create(name='Gauze', category='supplies', quantity=10, unit='packs',
                                 reorder_level=10, location='Store 1', cost=Decimal('1.00'))

    low = api.get('/api/inventory/low-stock').data
    assert [i['name'] for i in low] == ['Gauze', 'Surgical Masks']
    assert all(i['lowStock'] for i in low)


def test_completed_transfer_moves_stock_and_creates_destination_item(api, stores, paracetamol):
    main, ward = stores
    r = transfer(api, paracetamol, main, ward, status='completed')
    assert r.status_code == 201
    assert r.data['completedDate'] is not None

    paracetamol.refresh_from_db()
    assert paracetamol.quantity == 450
    moved = InventoryItem.objects.get(store=ward, name='Paracetamol 500mg')
    assert moved.quantity == 50
    assert moved.batch_number == 'B-1'
    assert moved.cost == Decimal('0.05')
    assert [i['name'] for i in api.get(f'/api/inventory/store/{ward.pk}').data] == ['Paracetamol 500mg']


def test_pending_transfer_moves_nothing_until_completed(api, stores, paracetamol):
    main, ward = stores
    r = transfer(api, paracetamol, main, ward)
    assert r.data['status'] == 'pending'
    paracetamol.refresh_from_db()
    assert paracetamol.quantity == 500

    transfer_id = r.data['id']
    r = api.patch(f'/api/inventory-transfers/{transfer_id}', {'status': 'completed'}, format='json')
    assert r.status_code == 200
    paracetamol.refresh_from_db()
    assert paracetamol.quantity == 450

    # Re-saving a completed transfer must not move stock again
    api.patch(f'/api/inventory-transfers/{transfer_id}', {'notes': 'checked', 'status': 'completed'}, format='json')
    paracetamol.refresh_from_db()
    assert paracetamol.quantity == 450
    assert InventoryItem.objects.get(store=ward).quantity == 50


def test_transfer_adds_to_existing_destination_item(api, stores, paracetamol):
    main, ward = stores
    existing = InventoryItem.objects.create(
        name='Paracetamol 500mg', category='medicine', store=ward, quantity=20, unit='tablets',
        reorder_level=10, location='Cabinet', cost=Decimal('0.05'),
    )
    transfer(api, paracetamol, main, ward, status='completed', quantity=30)
    existing.refresh_from_db()
    assert existing.quantity == 50
    assert InventoryItem.objects.filter(store=ward).count() == 1


def test_source_quantity_never_goes_negative(api, stores, paracetamol):
    main, ward = stores
    transfer(api, paracetamol, main, ward, status='completed', quantity=800)
    paracetamol.refresh_from_db()
    assert paracetamol.quantity == 0


def test_transfer_to_the_same_store_is_rejected(api, stores, paracetamol):
    main, _ = stores
    r = transfer(api, paracetamol, main, main)
    assert r.status_code == 400
    assert 'destinationStoreId' in r.data['error']['fields']
    assert not InventoryTransfer.objects.exists()


def test_transfer_quantity_must_be_positive(api, stores, paracetamol):
    main, ward = stores
    r = transfer(api, paracetamol, main, ward, quantity=0)
    assert r.status_code == 400
    assert 'quantity' in r.data['error']['fields']


def test_store_codes_are_unique(api, stores):
    r = api.post('/api/pharmacy-stores', {'name': 'Another', 'code': 'MAIN'}, format='json')
    assert r.status_code == 400
    assert 'code' in r.data['error']['fields']

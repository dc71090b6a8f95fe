"""
Management command to populate the database with demo data.
"""
from datetime import datetime, time
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from erp.models import (
    Account, Appointment, Bed, InventoryItem, Patient, PharmacyStore, PosTerminal, Service, User, Ward,
)
from erp.services.catalog import current_price_version, set_current_price
from erp.services.dashboard import refresh


class Command(BaseCommand):
    help = 'Populate database with demo data'

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write('Creating demo data...')

        users = self.create_users()
        self.create_wards()
        patients = self.create_patients()
        self.create_appointments(patients, users['drjohn'])
        store = self.create_store()
        self.create_inventory(store)
        self.create_services()
        self.create_accounts()

        refresh()
        self.stdout.write(self.style.SUCCESS('Demo data created.'))

    def create_users(self):
        users_data = [
            {'username': 'admin', 'password': 'admin123', 'name': 'System Administrator',
             'email': 'admin@hospital.com', 'role': 'admin'},
            {'username': 'drjohn', 'password': 'password123', 'name': 'Dr. John Doe',
             'email': 'john.doe@hospital.com', 'role': 'doctor', 'specialty': 'General Physician'},
            {'username': 'nurse1', 'password': 'password123', 'name': 'Jane Smith',
             'email': 'jane.smith@hospital.com', 'role': 'nurse'},
        ]

        users = {}
        for data in users_data:
            data = dict(data)
            password = data.pop('password')
            user, created = User.objects.get_or_create(username=data['username'], defaults=data)
            if created:
                user.set_password(password)
                user.save(update_fields=['password'])
            users[user.username] = user
            self.stdout.write(f'User: {user.username} ({user.role})')
        return users

    def create_wards(self):
        # (name, type, capacity, bed prefix, occupied beds)
        wards_data = [
            ('General Ward', 'general', 20, 'GW', 15),
            ('ICU', 'icu', 10, 'ICU', 7),
            ('Pediatric Ward', 'pediatric', 15, 'PED', 10),
        ]
        for name, ward_type, capacity, prefix, occupied in wards_data:
            ward, _ = Ward.objects.get_or_create(name=name, defaults={'type': ward_type, 'capacity': capacity})
            for i in range(1, capacity + 1):
                Bed.objects.get_or_create(
                    bed_number=f'{prefix}-{i}',
                    defaults={'ward': ward, 'status': 'occupied' if i <= occupied else 'available'},
                )
            self.stdout.write(f'Ward: {ward.name} ({capacity} beds)')

    def create_patients(self):
        patients_data = [
            ('P-21503', 'John', 'Doe', 'john.doe@example.com', '555-1234', '1985-05-15', 'male', 'active'),
            ('P-21504', 'Maria', 'Johnson', 'maria.j@example.com', '555-2345', '1990-08-21', 'female', 'active'),
            ('P-21505', 'Robert', 'Williams', 'r.williams@example.com', '555-3456', '1978-03-10', 'male',
             'discharged'),
            ('P-21506', 'Sophia', 'Davis', 'sophia.d@example.com', '555-4567', '1995-11-30', 'female', 'scheduled'),
        ]
        patients = []
        for code, first, last, email, phone, dob, gender, status in patients_data:
            patient, _ = Patient.objects.get_or_create(
                patient_id=code,
                defaults={'first_name': first, 'last_name': last, 'email': email, 'phone': phone,
                          'date_of_birth': dob, 'gender': gender, 'status': status},
            )
            patients.append(patient)
            self.stdout.write(f'Patient: {patient}')
        return patients

    def create_appointments(self, patients, doctor):
        today = timezone.localdate()
        slots = [
            ('Checkup', time(9, 15)),
            ('Follow-up', time(10, 30)),
            ('Emergency', time(11, 45)),
            ('Consultation', time(14, 15)),
        ]
        for patient, (kind, at) in zip(patients, slots):
            when = timezone.make_aware(datetime.combine(today, at))
            Appointment.objects.get_or_create(
                patient=patient, doctor=doctor, date=when,
                defaults={'duration': 30, 'type': kind, 'notes': f'Regular {kind.lower()} appointment'},
            )
        self.stdout.write(f'Appointments for {today}: {len(slots)}')

    def create_store(self):
        store, _ = PharmacyStore.objects.get_or_create(
            code='MAIN', defaults={'name': 'Main Pharmacy', 'location': 'Ground floor', 'type': 'main'},
        )
        return store

    def create_inventory(self, store):
        items_data = [
            ('Paracetamol', 'medicine', 500, 'tablet', 100, 'pharmacy', '0.50'),
            ('Disposable Syringes', 'supplies', 1000, 'piece', 200, 'central store', '0.25'),
            ('Blood Pressure Monitor', 'equipment', 15, 'piece', 5, 'medical equipment', '75.00'),
            ('Surgical Masks', 'supplies', 2000, 'piece', 500, 'central store', '0.20'),
        ]
        for name, category, quantity, unit, reorder, location, cost in items_data:
            InventoryItem.objects.get_or_create(
                name=name, store=store,
                defaults={'category': category, 'quantity': quantity, 'unit': unit, 'reorder_level': reorder,
                          'location': location, 'cost': Decimal(cost)},
            )
        self.stdout.write(f'Inventory items: {len(items_data)}')

    def create_services(self):
        services_data = [
            ('CONS', 'General Consultation', 'consultation', '50.00', True),
            ('CBC', 'Complete Blood Count', 'laboratory', '25.00', False),
            ('XRAY', 'Chest X-Ray', 'imaging', '120.00', False),
            ('DIAL', 'Hemodialysis Session', 'dialysis', '300.00', True),
        ]
        for code, name, category, price, requires_doctor in services_data:
            service, _ = Service.objects.get_or_create(
                code=code, defaults={'name': name, 'category': category, 'requires_doctor': requires_doctor},
            )
            if current_price_version(service) is None:
                set_current_price(service, Decimal(price))
        self.stdout.write(f'Services: {len(services_data)}')

    def create_accounts(self):
        for code, name, account_type in [('1000', 'Cash on hand', 'cash'), ('1100', 'Main bank account', 'bank'),
                                         ('1200', 'Accounts receivable', 'receivable'),
                                         ('4000', 'Patient service revenue', 'revenue')]:
            Account.objects.get_or_create(code=code, defaults={'name': name, 'type': account_type})
        PosTerminal.objects.get_or_create(terminal_code='POS-1', defaults={'name': 'Front desk',
                                                                           'location': 'Reception'})
        self.stdout.write('Accounts and POS terminal ready')

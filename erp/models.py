"""
Database models for the hospital ERP backend.

Every entity gets an integer surrogate key and a ``created_at`` stamp
from :class:`Entity`.  Nothing is hard-deleted through the API; records
are retired by flipping their ``status``.  Money is stored in
``DecimalField`` columns and rendered as decimal strings.

The constraints declared in ``Meta`` (unique codes, one active admission
per bed, one open price version per service) are the data-level half of
the invariants; the other half lives in ``erp.services``.
"""
from __future__ import annotations

from decimal import Decimal

from django.contrib.auth.models import AbstractUser
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import F, Q


MONEY = dict(max_digits=12, decimal_places=2)


class Entity(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ['id']


# ---------------------------------------------------------------------------
# Staff & patients
# ---------------------------------------------------------------------------

class User(AbstractUser):
    """Staff account.

    Passwords are hashed by Django; ``role`` drives what the front end
    shows and ``specialty`` is only meaningful for doctors.
    """
    ROLE_CHOICES = [
        ('admin', 'Administrator'),
        ('doctor', 'Doctor'),
        ('nurse', 'Nurse'),
        ('staff', 'Staff'),
        ('receptionist', 'Receptionist'),
        ('pharmacist', 'Pharmacist'),
        ('lab_technician', 'Lab technician'),
        ('accountant', 'Accountant'),
        ('driver', 'Driver'),
    ]
    name = models.CharField(max_length=255)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='staff', db_index=True)
    specialty = models.CharField(max_length=255, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Patient(Entity):
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
        ('scheduled', 'Scheduled'),
        ('discharged', 'Discharged'),
        ('deceased', 'Deceased'),
    ]
    GENDER_CHOICES = [('male', 'Male'), ('female', 'Female'), ('other', 'Other')]
    BLOOD_TYPE_CHOICES = [(t, t) for t in ('A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-')]

    # Human readable identifier printed on wristbands, e.g. "P-21503"
    patient_id = models.CharField(max_length=32, unique=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=32, blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    date_of_birth = models.DateField(blank=True, null=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True, null=True)
    blood_type = models.CharField(max_length=3, choices=BLOOD_TYPE_CHOICES, blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active', db_index=True)

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name} ({self.patient_id})"


class Appointment(Entity):
    STATUS_CHOICES = [
        ('scheduled', 'Scheduled'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
        ('no-show', 'No show'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='appointments')
    doctor = models.ForeignKey(User, on_delete=models.PROTECT, related_name='appointments')
    date = models.DateTimeField(db_index=True)
    duration = models.PositiveIntegerField(help_text="Length in minutes")
    type = models.CharField(max_length=50)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='scheduled', db_index=True)
    notes = models.TextField(blank=True, null=True)

    def __str__(self) -> str:
        return f"{self.type} for {self.patient_id} at {self.date:%F %H:%M}"


class MedicalRecord(Entity):
    """A SOAP note. Append-only: there is no update path."""
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='medical_records')
    doctor = models.ForeignKey(User, on_delete=models.PROTECT, related_name='medical_records')
    date = models.DateTimeField(auto_now_add=True)
    subjective = models.TextField(blank=True, null=True)
    objective = models.TextField(blank=True, null=True)
    assessment = models.TextField(blank=True, null=True)
    plan = models.TextField(blank=True, null=True)


# ---------------------------------------------------------------------------
# Inpatient
# ---------------------------------------------------------------------------

class Ward(Entity):
    name = models.CharField(max_length=100)
    type = models.CharField(max_length=50)
    capacity = models.PositiveIntegerField()

    def __str__(self) -> str:
        return self.name


class Bed(Entity):
    STATUS_CHOICES = [
        ('available', 'Available'),
        ('occupied', 'Occupied'),
        ('maintenance', 'Maintenance'),
    ]
    bed_number = models.CharField(max_length=32, unique=True)
    ward = models.ForeignKey(Ward, on_delete=models.PROTECT, related_name='beds')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='available', db_index=True)

    def __str__(self) -> str:
        return f"{self.bed_number} ({self.status})"


class Admission(Entity):
    STATUS_CHOICES = [('active', 'Active'), ('discharged', 'Discharged')]
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='admissions')
    bed = models.ForeignKey(Bed, on_delete=models.PROTECT, related_name='admissions')
    doctor = models.ForeignKey(User, on_delete=models.PROTECT, related_name='admissions')
    admission_date = models.DateTimeField()
    discharge_date = models.DateTimeField(blank=True, null=True)
    diagnosis = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active', db_index=True)
    deposit = models.DecimalField(default=Decimal('0'), **MONEY)

    class Meta(Entity.Meta):
        constraints = [
            models.UniqueConstraint(
                fields=['bed'], condition=Q(status='active'), name='one_active_admission_per_bed',
            ),
        ]

    def __str__(self) -> str:
        return f"Admission #{self.pk} bed={self.bed_id} ({self.status})"


class TreatmentPlan(Entity):
    STATUS_CHOICES = [('active', 'Active'), ('completed', 'Completed'), ('cancelled', 'Cancelled')]
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='treatment_plans')
    admission = models.ForeignKey(Admission, null=True, blank=True, on_delete=models.SET_NULL,
                                  related_name='treatment_plans')
    doctor = models.ForeignKey(User, on_delete=models.PROTECT, related_name='treatment_plans')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    start_date = models.DateField()
    end_date = models.DateField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')


class MedicalOrder(Entity):
    TYPE_CHOICES = [('lab', 'Lab'), ('imaging', 'Imaging'), ('medication', 'Medication'),
                    ('procedure', 'Procedure'), ('nursing', 'Nursing')]
    PRIORITY_CHOICES = [('routine', 'Routine'), ('urgent', 'Urgent'), ('stat', 'Stat')]
    STATUS_CHOICES = [('ordered', 'Ordered'), ('in-progress', 'In progress'),
                      ('completed', 'Completed'), ('cancelled', 'Cancelled')]
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='medical_orders')
    admission = models.ForeignKey(Admission, null=True, blank=True, on_delete=models.SET_NULL,
                                  related_name='medical_orders')
    treatment_plan = models.ForeignKey(TreatmentPlan, null=True, blank=True, on_delete=models.SET_NULL,
                                       related_name='orders')
    ordered_by = models.ForeignKey(User, on_delete=models.PROTECT, related_name='medical_orders')
    order_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    description = models.TextField()
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='routine')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='ordered', db_index=True)
    ordered_at = models.DateTimeField(auto_now_add=True)


class OrderResult(Entity):
    STATUS_CHOICES = [('preliminary', 'Preliminary'), ('final', 'Final'), ('amended', 'Amended')]
    order = models.ForeignKey(MedicalOrder, on_delete=models.PROTECT, related_name='results')
    result_text = models.TextField(blank=True, null=True)
    result_data = models.JSONField(default=dict, blank=True)
    resulted_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL,
                                    related_name='order_results')
    resulted_at = models.DateTimeField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='preliminary')
    abnormal = models.BooleanField(default=False)


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------

class PharmacyStore(Entity):
    TYPE_CHOICES = [('main', 'Main'), ('satellite', 'Satellite'), ('ward', 'Ward')]
    STATUS_CHOICES = [('active', 'Active'), ('inactive', 'Inactive')]
    name = models.CharField(max_length=100)
    code = models.CharField(max_length=32, unique=True)
    location = models.CharField(max_length=255, blank=True, null=True)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='main')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')

    def __str__(self) -> str:
        return self.name


class InventoryItemQuerySet(models.QuerySet):
    def low_stock(self):
        return self.filter(quantity__lte=F('reorder_level'))


class InventoryItem(Entity):
    CATEGORY_CHOICES = [('medicine', 'Medicine'), ('equipment', 'Equipment'),
                        ('supplies', 'Supplies'), ('consumables', 'Consumables')]
    name = models.CharField(max_length=255, db_index=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
    store = models.ForeignKey(PharmacyStore, null=True, blank=True, on_delete=models.PROTECT,
                              related_name='items')
    quantity = models.PositiveIntegerField(default=0)
    unit = models.CharField(max_length=32)
    reorder_level = models.PositiveIntegerField()
    location = models.CharField(max_length=255)
    cost = models.DecimalField(**MONEY)
    expiry_date = models.DateField(blank=True, null=True)
    batch_number = models.CharField(max_length=64, blank=True, null=True)
    manufacturer = models.CharField(max_length=255, blank=True, null=True)

    objects = InventoryItemQuerySet.as_manager()

    @property
    def low_stock(self) -> bool:
        return self.quantity <= self.reorder_level

    def __str__(self) -> str:
        return f"{self.name} x{self.quantity}"


class InventoryTransfer(Entity):
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('in-transit', 'In transit'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]
    item = models.ForeignKey(InventoryItem, on_delete=models.PROTECT, related_name='transfers')
    source_store = models.ForeignKey(PharmacyStore, on_delete=models.PROTECT, related_name='outgoing_transfers')
    destination_store = models.ForeignKey(PharmacyStore, on_delete=models.PROTECT,
                                          related_name='incoming_transfers')
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True)
    requested_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL,
                                     related_name='inventory_transfers')
    transfer_date = models.DateTimeField(blank=True, null=True)
    completed_date = models.DateTimeField(blank=True, null=True)
    notes = models.TextField(blank=True, null=True)


# ---------------------------------------------------------------------------
# Billing
# ---------------------------------------------------------------------------

class CreditCompany(Entity):
    STATUS_CHOICES = [('active', 'Active'), ('inactive', 'Inactive')]
    name = models.CharField(max_length=255)
    code = models.CharField(max_length=32, unique=True)
    contact_person = models.CharField(max_length=255, blank=True, null=True)
    phone = models.CharField(max_length=32, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    credit_limit = models.DecimalField(default=Decimal('0'), **MONEY)
    payment_terms_days = models.PositiveIntegerField(default=30)
    discount_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0'),
                                        validators=[MinValueValidator(0), MaxValueValidator(100)])
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active', db_index=True)


class Bill(Entity):
    STATUS_CHOICES = [('pending', 'Pending'), ('partial', 'Partial'), ('paid', 'Paid')]
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='bills')
    total_amount = models.DecimalField(**MONEY)
    paid_amount = models.DecimalField(default=Decimal('0'), **MONEY)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True)
    bill_date = models.DateTimeField(auto_now_add=True)
    due_date = models.DateTimeField(blank=True, null=True)
    payment_method = models.CharField(max_length=50, blank=True, null=True)
    stripe_payment_intent_id = models.CharField(max_length=255, blank=True, null=True)
    stripe_payment_status = models.CharField(max_length=50, blank=True, null=True)

    def __str__(self) -> str:
        return f"Bill #{self.pk} {self.paid_amount}/{self.total_amount} ({self.status})"


class BillItem(Entity):
    bill = models.ForeignKey(Bill, on_delete=models.PROTECT, related_name='items')
    description = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(**MONEY)
    # Supplied by the caller, not recomputed
    total_price = models.DecimalField(**MONEY)


# ---------------------------------------------------------------------------
# Service catalogue & orders
# ---------------------------------------------------------------------------

class Service(Entity):
    STATUS_CHOICES = [('active', 'Active'), ('inactive', 'Inactive')]
    name = models.CharField(max_length=255)
    code = models.CharField(max_length=32, blank=True, null=True)
    category = models.CharField(max_length=100)
    description = models.TextField(blank=True, null=True)
    duration = models.PositiveIntegerField(blank=True, null=True, help_text="Minutes")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active', db_index=True)
    requires_doctor = models.BooleanField(default=False)
    requires_appointment = models.BooleanField(default=False)
    taxable = models.BooleanField(default=False)

    def __str__(self) -> str:
        return self.name


class ServicePriceVersion(Entity):
    service = models.ForeignKey(Service, on_delete=models.PROTECT, related_name='price_versions')
    price = models.DecimalField(**MONEY)
    effective_date = models.DateField()
    # NULL marks the current price
    expiry_date = models.DateField(blank=True, null=True)
    year = models.PositiveIntegerField(db_index=True)

    class Meta(Entity.Meta):
        constraints = [
            models.UniqueConstraint(
                fields=['service'], condition=Q(expiry_date__isnull=True), name='one_open_price_per_service',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.service_id}: {self.price} from {self.effective_date}"


class ServiceOrder(Entity):
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('in-progress', 'In progress'),
        ('completed', 'Completed'),
        ('billed', 'Billed'),
        ('cancelled', 'Cancelled'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='service_orders')
    doctor = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL,
                               related_name='service_orders')
    created_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL,
                                   related_name='created_service_orders')
    order_date = models.DateTimeField(auto_now_add=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True)
    total_amount = models.DecimalField(default=Decimal('0'), **MONEY)
    bill = models.ForeignKey(Bill, null=True, blank=True, on_delete=models.SET_NULL, related_name='service_orders')
    notes = models.TextField(blank=True, null=True)


class ServiceOrderItem(Entity):
    STATUS_CHOICES = [('pending', 'Pending'), ('completed', 'Completed'), ('cancelled', 'Cancelled')]
    service_order = models.ForeignKey(ServiceOrder, on_delete=models.PROTECT, related_name='items')
    service = models.ForeignKey(Service, on_delete=models.PROTECT, related_name='order_items')
    service_price_version = models.ForeignKey(ServicePriceVersion, null=True, blank=True,
                                              on_delete=models.PROTECT, related_name='order_items')
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(**MONEY)
    total_price = models.DecimalField(**MONEY)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    notes = models.TextField(blank=True, null=True)


# ---------------------------------------------------------------------------
# HR
# ---------------------------------------------------------------------------

class Employee(Entity):
    STATUS_CHOICES = [('active', 'Active'), ('on-leave', 'On leave'), ('terminated', 'Terminated')]
    user = models.OneToOneField(User, on_delete=models.PROTECT, related_name='employee')
    employee_number = models.CharField(max_length=32, unique=True, blank=True, null=True)
    department = models.CharField(max_length=100)
    position = models.CharField(max_length=100)
    join_date = models.DateField()
    salary = models.DecimalField(**MONEY)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active', db_index=True)
    emergency_contact_name = models.CharField(max_length=255, blank=True, null=True)
    emergency_contact_phone = models.CharField(max_length=32, blank=True, null=True)


class Leave(Entity):
    TYPE_CHOICES = [('annual', 'Annual'), ('sick', 'Sick'), ('maternity', 'Maternity'),
                    ('paternity', 'Paternity'), ('unpaid', 'Unpaid'), ('other', 'Other')]
    STATUS_CHOICES = [('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')]
    employee = models.ForeignKey(Employee, on_delete=models.PROTECT, related_name='leaves')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True)
    reason = models.TextField()
    reviewed_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL,
                                    related_name='reviewed_leaves')


# ---------------------------------------------------------------------------
# Laboratory integration
# ---------------------------------------------------------------------------

class LabSystem(Entity):
    STATUS_CHOICES = [('active', 'Active'), ('inactive', 'Inactive'), ('error', 'Error')]
    name = models.CharField(max_length=100)
    type = models.CharField(max_length=50)
    url = models.URLField()
    api_url = models.URLField(blank=True, null=True)
    username = models.CharField(max_length=100, blank=True, null=True)
    password = models.CharField(max_length=255, blank=True, null=True)
    api_key = models.CharField(max_length=255, blank=True, null=True)
    description = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active', db_index=True)
    sync_frequency = models.CharField(max_length=20, blank=True, null=True)
    last_sync_at = models.DateTimeField(blank=True, null=True)

    def __str__(self) -> str:
        return self.name


class LabResult(Entity):
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('preliminary', 'Preliminary'),
        ('final', 'Final'),
        ('corrected', 'Corrected'),
        ('cancelled', 'Cancelled'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='lab_results')
    lab_system = models.ForeignKey(LabSystem, null=True, blank=True, on_delete=models.SET_NULL,
                                   related_name='results')
    medical_order = models.ForeignKey(MedicalOrder, null=True, blank=True, on_delete=models.SET_NULL,
                                      related_name='lab_results')
    external_id = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    test_type = models.CharField(max_length=100)
    test_name = models.CharField(max_length=255)
    result_data = models.JSONField(default=dict, blank=True)
    reference_range = models.CharField(max_length=100, blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True)
    critical_flag = models.BooleanField(default=False)
    collected_at = models.DateTimeField(blank=True, null=True)
    resulted_at = models.DateTimeField(blank=True, null=True)


class LabSyncLog(Entity):
    STATUS_CHOICES = [('in_progress', 'In progress'), ('completed', 'Completed'), ('failed', 'Failed')]
    lab_system = models.ForeignKey(LabSystem, on_delete=models.CASCADE, related_name='sync_logs')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='in_progress')
    started_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(blank=True, null=True)
    total_records = models.PositiveIntegerField(default=0)
    success_count = models.PositiveIntegerField(default=0)
    error_count = models.PositiveIntegerField(default=0)
    error_message = models.TextField(blank=True, null=True)


# ---------------------------------------------------------------------------
# Accounting & point of sale
# ---------------------------------------------------------------------------

class Account(Entity):
    TYPE_CHOICES = [
        ('cash', 'Cash'),
        ('bank', 'Bank'),
        ('receivable', 'Receivable'),
        ('revenue', 'Revenue'),
        ('expense', 'Expense'),
        ('liability', 'Liability'),
        ('equity', 'Equity'),
    ]
    STATUS_CHOICES = [('active', 'Active'), ('inactive', 'Inactive')]
    code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=255)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, db_index=True)
    balance = models.DecimalField(default=Decimal('0'), **MONEY)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')

    def __str__(self) -> str:
        return f"{self.code} {self.name}"


class PosTerminal(Entity):
    STATUS_CHOICES = [('active', 'Active'), ('inactive', 'Inactive'), ('maintenance', 'Maintenance')]
    terminal_code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=100)
    location = models.CharField(max_length=255, blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active', db_index=True)


class PosTransaction(Entity):
    PAYMENT_CHOICES = [
        ('cash', 'Cash'),
        ('card', 'Card'),
        ('credit_card', 'Credit card'),
        ('debit_card', 'Debit card'),
        ('mobile', 'Mobile'),
        ('insurance', 'Insurance'),
        ('credit', 'Credit'),
    ]
    STATUS_CHOICES = [('pending', 'Pending'), ('completed', 'Completed'),
                      ('cancelled', 'Cancelled'), ('refunded', 'Refunded')]
    terminal = models.ForeignKey(PosTerminal, on_delete=models.PROTECT, related_name='transactions')
    patient = models.ForeignKey(Patient, null=True, blank=True, on_delete=models.SET_NULL,
                                related_name='pos_transactions')
    bill = models.ForeignKey(Bill, null=True, blank=True, on_delete=models.SET_NULL, related_name='pos_transactions')
    transaction_number = models.CharField(max_length=64, unique=True)
    total_amount = models.DecimalField(**MONEY)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_CHOICES)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True)
    completed_at = models.DateTimeField(blank=True, null=True)


class PosItem(Entity):
    pos_transaction = models.ForeignKey(PosTransaction, on_delete=models.CASCADE, related_name='items')
    description = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(**MONEY)
    total_price = models.DecimalField(**MONEY)


class Transaction(Entity):
    TYPE_CHOICES = [('credit', 'Credit'), ('debit', 'Debit')]
    account = models.ForeignKey(Account, on_delete=models.PROTECT, related_name='transactions')
    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    amount = models.DecimalField(validators=[MinValueValidator(Decimal('0.01'))], **MONEY)
    description = models.CharField(max_length=255, blank=True, null=True)
    reference = models.CharField(max_length=100, blank=True, null=True)
    transaction_date = models.DateTimeField(auto_now_add=True)
    pos_transaction = models.OneToOneField(PosTransaction, null=True, blank=True, on_delete=models.SET_NULL,
                                           related_name='ledger_entry')


# ---------------------------------------------------------------------------
# Fleet
# ---------------------------------------------------------------------------

class Vehicle(Entity):
    STATUS_CHOICES = [('available', 'Available'), ('in-use', 'In use'),
                      ('maintenance', 'Maintenance'), ('retired', 'Retired')]
    registration_number = models.CharField(max_length=32, unique=True)
    type = models.CharField(max_length=50, default='ambulance')
    make = models.CharField(max_length=100, blank=True, null=True)
    model = models.CharField(max_length=100, blank=True, null=True)
    capacity = models.PositiveIntegerField(default=1)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='available', db_index=True)


class VehicleAssignment(Entity):
    STATUS_CHOICES = [('scheduled', 'Scheduled'), ('in-progress', 'In progress'),
                      ('completed', 'Completed'), ('cancelled', 'Cancelled')]
    vehicle = models.ForeignKey(Vehicle, on_delete=models.PROTECT, related_name='assignments')
    driver = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL,
                               related_name='vehicle_assignments')
    patient = models.ForeignKey(Patient, null=True, blank=True, on_delete=models.SET_NULL,
                                related_name='vehicle_assignments')
    purpose = models.CharField(max_length=255)
    pickup_location = models.CharField(max_length=255, blank=True, null=True)
    destination = models.CharField(max_length=255, blank=True, null=True)
    scheduled_at = models.DateTimeField(blank=True, null=True)
    started_at = models.DateTimeField(blank=True, null=True)
    completed_at = models.DateTimeField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='scheduled', db_index=True)


# ---------------------------------------------------------------------------
# Clinical decision support
# ---------------------------------------------------------------------------

class ClinicalGuideline(Entity):
    STATUS_CHOICES = [('draft', 'Draft'), ('active', 'Active'), ('archived', 'Archived')]
    title = models.CharField(max_length=255)
    category = models.CharField(max_length=100, db_index=True)
    condition = models.CharField(max_length=255, blank=True, null=True)
    content = models.TextField()
    source = models.CharField(max_length=255, blank=True, null=True)
    version = models.CharField(max_length=20, default='1.0')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')


class DiagnosticSession(Entity):
    STATUS_CHOICES = [('open', 'Open'), ('closed', 'Closed')]
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='diagnostic_sessions')
    doctor = models.ForeignKey(User, on_delete=models.PROTECT, related_name='diagnostic_sessions')
    guideline = models.ForeignKey(ClinicalGuideline, null=True, blank=True, on_delete=models.SET_NULL,
                                  related_name='sessions')
    symptoms = models.JSONField(default=list, blank=True)
    findings = models.TextField(blank=True, null=True)
    suggested_diagnoses = models.JSONField(default=list, blank=True)
    outcome = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='open')


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------

class ReportTemplate(Entity):
    STATUS_CHOICES = [('active', 'Active'), ('archived', 'Archived')]
    name = models.CharField(max_length=255)
    category = models.CharField(max_length=100, db_index=True)
    description = models.TextField(blank=True, null=True)
    report_type = models.CharField(max_length=50)
    parameters = models.JSONField(default=dict, blank=True)
    is_system = models.BooleanField(default=False)
    created_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL,
                                   related_name='report_templates')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')


class ReportExecution(Entity):
    STATUS_CHOICES = [('pending', 'Pending'), ('completed', 'Completed'), ('failed', 'Failed')]
    template = models.ForeignKey(ReportTemplate, on_delete=models.PROTECT, related_name='executions')
    executed_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL,
                                    related_name='report_executions')
    parameters = models.JSONField(default=dict, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    result_data = models.JSONField(blank=True, null=True)
    error_message = models.TextField(blank=True, null=True)
    completed_at = models.DateTimeField(blank=True, null=True)


# ---------------------------------------------------------------------------
# Dialysis & emergency
# ---------------------------------------------------------------------------

class DialysisUnit(Entity):
    STATUS_CHOICES = [('operational', 'Operational'), ('maintenance', 'Maintenance'), ('closed', 'Closed')]
    name = models.CharField(max_length=100)
    location = models.CharField(max_length=255, blank=True, null=True)
    machine_count = models.PositiveIntegerField(default=1)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='operational')


class DialysisSession(Entity):
    STATUS_CHOICES = [('scheduled', 'Scheduled'), ('in-progress', 'In progress'),
                      ('completed', 'Completed'), ('cancelled', 'Cancelled')]
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='dialysis_sessions')
    unit = models.ForeignKey(DialysisUnit, on_delete=models.PROTECT, related_name='sessions')
    machine_number = models.PositiveIntegerField(blank=True, null=True)
    scheduled_at = models.DateTimeField()
    started_at = models.DateTimeField(blank=True, null=True)
    ended_at = models.DateTimeField(blank=True, null=True)
    pre_weight = models.DecimalField(max_digits=6, decimal_places=2, blank=True, null=True)
    post_weight = models.DecimalField(max_digits=6, decimal_places=2, blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='scheduled', db_index=True)
    notes = models.TextField(blank=True, null=True)


class EmergencyCase(Entity):
    STATUS_CHOICES = [('waiting', 'Waiting'), ('in-treatment', 'In treatment'), ('admitted', 'Admitted'),
                      ('discharged', 'Discharged'), ('transferred', 'Transferred')]
    # Quick registration may precede a full patient record
    patient = models.ForeignKey(Patient, null=True, blank=True, on_delete=models.SET_NULL,
                                related_name='emergency_cases')
    patient_name = models.CharField(max_length=255)
    arrival_at = models.DateTimeField()
    triage_level = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    chief_complaint = models.TextField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='waiting', db_index=True)
    assigned_doctor = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL,
                                        related_name='emergency_cases')
    notes = models.TextField(blank=True, null=True)


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------

class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at']),
            models.Index(fields=['object_type', 'object_id', 'created_at']),
        ]

    def __str__(self):
        return f"{self.action}:{self.object_type}#{self.object_id}"

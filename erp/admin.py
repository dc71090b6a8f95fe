"""
Django admin registrations.

Hooks the ERP models into ``/admin/`` so superusers can inspect and
correct records during development.  Only the entities staff most often
look up get list displays; the rest use the default admin.
"""

from django.contrib import admin

from . import models


@admin.register(models.User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'name', 'role', 'specialty', 'is_staff', 'is_superuser')
    list_filter = ('role',)
    search_fields = ('username', 'name', 'email')


@admin.register(models.Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('patient_id', 'first_name', 'last_name', 'gender', 'status', 'created_at')
    list_filter = ('status', 'gender')
    search_fields = ('patient_id', 'first_name', 'last_name', 'phone')


@admin.register(models.Bed)
class BedAdmin(admin.ModelAdmin):
    list_display = ('bed_number', 'ward', 'status')
    list_filter = ('ward', 'status')
    search_fields = ('bed_number',)


@admin.register(models.Admission)
class AdmissionAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'bed', 'doctor', 'admission_date', 'discharge_date', 'status')
    list_filter = ('status',)


@admin.register(models.InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ('name', 'store', 'category', 'quantity', 'reorder_level', 'expiry_date')
    list_filter = ('category', 'store')
    search_fields = ('name', 'batch_number')


@admin.register(models.Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'total_amount', 'paid_amount', 'status', 'bill_date')
    list_filter = ('status',)


@admin.register(models.ServicePriceVersion)
class ServicePriceVersionAdmin(admin.ModelAdmin):
    list_display = ('service', 'price', 'effective_date', 'expiry_date', 'year')
    list_filter = ('year',)


@admin.register(models.Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ('code', 'name', 'type', 'balance', 'status')
    list_filter = ('type', 'status')


@admin.register(models.LabSyncLog)
class LabSyncLogAdmin(admin.ModelAdmin):
    list_display = ('lab_system', 'status', 'started_at', 'completed_at', 'success_count', 'error_count')
    list_filter = ('status', 'lab_system')


@admin.register(models.AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'object_type', 'object_id', 'user', 'created_at')
    list_filter = ('action', 'object_type')
    readonly_fields = ('user', 'action', 'object_type', 'object_id', 'detail', 'created_at')


for model in (
    models.Appointment, models.MedicalRecord, models.Ward, models.TreatmentPlan, models.MedicalOrder,
    models.OrderResult, models.PharmacyStore, models.InventoryTransfer, models.CreditCompany, models.BillItem,
    models.Service, models.ServiceOrder, models.ServiceOrderItem, models.Employee, models.Leave,
    models.LabSystem, models.LabResult, models.Transaction, models.PosTerminal, models.PosTransaction,
    models.PosItem, models.Vehicle, models.VehicleAssignment, models.ClinicalGuideline, models.DiagnosticSession,
    models.ReportTemplate, models.ReportExecution, models.DialysisUnit, models.DialysisSession,
    models.EmergencyCase,
):
    admin.site.register(model)

"""
URL mappings for the hospital ERP API.

Every entity follows the same shape: ``GET``/``POST`` on the collection,
``GET``/``PATCH`` on ``<id>``, plus the filtered lists the front-end
pages need.  Trailing slashes are deliberately omitted.
"""
from django.urls import path, include

from .auth_views import login_view, logout_view, refresh_view, session_view
from .serializers.accounting import AccountSerializer, PosTerminalSerializer, TransactionSerializer
from .serializers.billing import BillItemSerializer, CreditCompanySerializer
from .serializers.catalog import ServiceOrderItemSerializer, ServiceOrderSerializer, ServicePriceVersionSerializer
from .serializers.clinical import (
    ClinicalGuidelineSerializer,
    DiagnosticSessionSerializer,
    DialysisSessionSerializer,
    DialysisUnitSerializer,
    EmergencyCaseSerializer,
)
from .serializers.fleet import VehicleSerializer
from .serializers.hr import EmployeeSerializer, LeaveSerializer
from .serializers.inpatient import (
    AdmissionSerializer,
    BedSerializer,
    MedicalOrderSerializer,
    OrderResultSerializer,
    TreatmentPlanSerializer,
    WardSerializer,
)
from .serializers.inventory import InventoryItemSerializer, PharmacyStoreSerializer
from .serializers.lab import LabResultSerializer, LabSyncLogSerializer, LabSystemSerializer
from .serializers.patients import AppointmentSerializer, MedicalRecordSerializer, PatientSerializer
from .serializers.reports import ReportExecutionSerializer, ReportTemplateSerializer
from .views import accounting, billing, catalog, fleet, health, inpatient, inventory, lab, patients, reports
from .views.base import EntityDetail, EntityList, EntityListCreate, EntityRetrieve
from .views.dashboard import dashboard_stats, resource_utilization


def crud(prefix: str, serializer_class, **list_options):
    """Collection and detail routes for an entity without side effects."""
    return [
        path(f'api/{prefix}', EntityListCreate.as_view(serializer_class=serializer_class, **list_options)),
        path(f'api/{prefix}/<int:pk>', EntityDetail.as_view(serializer_class=serializer_class)),
    ]


def listing(route: str, serializer_class, **options):
    return path(f'api/{route}', EntityList.as_view(serializer_class=serializer_class, **options))


urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz),

    # Authentication
    path('api/auth/login', login_view),
    path('api/auth/logout', logout_view),
    path('api/auth/session', session_view),
    path('api/auth/refresh', refresh_view),

    # Dashboard
    path('api/dashboard-stats', dashboard_stats),
    path('api/resource-utilization', resource_utilization),

    # Staff & patients
    path('api/users', patients.UserList.as_view()),
    path('api/users/<int:pk>', patients.UserDetail.as_view()),
    path('api/doctors', patients.DoctorList.as_view()),
    path('api/patients', patients.PatientList.as_view()),
    path('api/patients/recent', patients.RecentPatients.as_view()),
    path('api/patients/<int:pk>', EntityDetail.as_view(serializer_class=PatientSerializer)),
    path('api/appointments', patients.AppointmentList.as_view()),
    path('api/appointments/today', patients.TodayAppointments.as_view()),
    listing('appointments/doctor/<int:doctor_id>', AppointmentSerializer, ordering=('date', 'id')),
    listing('appointments/patient/<int:patient_id>', AppointmentSerializer, ordering=('date', 'id')),
    path('api/appointments/<int:pk>', EntityDetail.as_view(serializer_class=AppointmentSerializer)),
    path('api/medical-records', patients.MedicalRecordList.as_view()),
    listing('medical-records/patient/<int:patient_id>', MedicalRecordSerializer, ordering=('-date', '-id')),
    path('api/medical-records/<int:pk>', patients.MedicalRecordDetail.as_view()),

    # Inpatient
    *crud('wards', WardSerializer),
    path('api/beds', inpatient.BedList.as_view()),
    path('api/beds/available', inpatient.AvailableBeds.as_view()),
    listing('beds/ward/<int:ward_id>', BedSerializer),
    path('api/beds/<int:pk>', EntityDetail.as_view(serializer_class=BedSerializer)),
    path('api/admissions', inpatient.AdmissionList.as_view()),
    path('api/admissions/patient/<int:patient_id>', inpatient.AdmissionList.as_view(http_method_names=['get'])),
    path('api/admissions/<int:pk>', inpatient.AdmissionDetail.as_view()),
    path('api/admissions/<int:pk>/discharge', inpatient.discharge_admission),
    *crud('treatments', TreatmentPlanSerializer, query_filters={'status': 'status'}),
    listing('treatments/patient/<int:patient_id>', TreatmentPlanSerializer),
    listing('treatments/admission/<int:admission_id>', TreatmentPlanSerializer),
    *crud('medical-orders', MedicalOrderSerializer, query_filters={'status': 'status', 'orderType': 'order_type'}),
    listing('medical-orders/patient/<int:patient_id>', MedicalOrderSerializer),
    listing('medical-orders/admission/<int:admission_id>', MedicalOrderSerializer),
    *crud('order-results', OrderResultSerializer),
    listing('order-results/order/<int:order_id>', OrderResultSerializer),

    # Inventory
    *crud('pharmacy-stores', PharmacyStoreSerializer, query_filters={'status': 'status'}),
    path('api/inventory', inventory.InventoryList.as_view()),
    path('api/inventory/low-stock', inventory.LowStockItems.as_view()),
    listing('inventory/store/<int:store_id>', InventoryItemSerializer),
    path('api/inventory/<int:pk>', EntityDetail.as_view(serializer_class=InventoryItemSerializer)),
    path('api/inventory-transfers', inventory.TransferList.as_view()),
    path('api/inventory-transfers/<int:pk>', inventory.TransferDetail.as_view()),

    # Billing
    *crud('credit-companies', CreditCompanySerializer, query_filters={'status': 'status'}),
    listing('active-credit-companies', CreditCompanySerializer, filters={'status': 'active'}),
    path('api/bills', billing.BillList.as_view()),
    path('api/bills/patient/<int:patient_id>', billing.BillList.as_view(http_method_names=['get'])),
    path('api/bills/<int:pk>', billing.BillDetail.as_view()),
    *crud('bill-items', BillItemSerializer, query_filters={'billId': 'bill_id'}),
    listing('bill-items/bill/<int:bill_id>', BillItemSerializer),
    path('api/confirm-payment', billing.confirm_payment),

    # Services & orders
    path('api/services', catalog.ServiceList.as_view()),
    path('api/services/<int:pk>', catalog.ServiceDetail.as_view()),
    path('api/service-price-versions', catalog.PriceVersionList.as_view()),
    listing('service-price-versions/service/<int:service_id>', ServicePriceVersionSerializer,
            ordering=('-effective_date', '-id')),
    listing('service-price-versions/year/<int:year>', ServicePriceVersionSerializer,
            ordering=('service_id', '-effective_date')),
    path('api/service-price-versions/current/<int:service_id>', catalog.current_price),
    path('api/service-price-versions/<int:pk>',
         EntityRetrieve.as_view(serializer_class=ServicePriceVersionSerializer)),
    listing('service-prices/<int:service_id>', ServicePriceVersionSerializer, ordering=('-effective_date', '-id')),
    path('api/service-orders', catalog.ServiceOrderList.as_view()),
    listing('service-orders/pending', ServiceOrderSerializer, filters={'status': 'pending'},
            ordering=('-order_date', '-id')),
    listing('service-orders/patient/<int:patient_id>', ServiceOrderSerializer, ordering=('-order_date', '-id')),
    listing('service-orders/bill/<int:bill_id>', ServiceOrderSerializer),
    path('api/service-orders/<int:pk>', catalog.ServiceOrderDetail.as_view()),
    path('api/service-order-items', catalog.ServiceOrderItemList.as_view()),
    listing('service-order-items/order/<int:service_order_id>', ServiceOrderItemSerializer),
    path('api/service-order-items/<int:pk>', catalog.ServiceOrderItemDetail.as_view()),

    # HR
    *crud('employees', EmployeeSerializer, query_filters={'status': 'status', 'department': 'department'}),
    *crud('leaves', LeaveSerializer, query_filters={'status': 'status', 'employeeId': 'employee_id'}),
    listing('leaves/employee/<int:employee_id>', LeaveSerializer),

    # Laboratory
    *crud('lab-systems', LabSystemSerializer, query_filters={'status': 'status'}),
    listing('active-lab-systems', LabSystemSerializer, filters={'status': 'active'}),
    path('api/lab-systems/test-connection', lab.connection_test),
    path('api/lab-systems/<int:pk>/test-connection', lab.system_connection_test),
    path('api/lab-systems/<int:pk>/sync', lab.sync_lab_system),
    path('api/lab-results', lab.LabResultList.as_view()),
    path('api/lab-results/<int:pk>', EntityDetail.as_view(serializer_class=LabResultSerializer)),
    listing('lab-sync-logs', LabSyncLogSerializer, query_filters={'labSystemId': 'lab_system_id'},
            ordering=('-started_at', '-id'), default_limit=10),
    path('api/lab-sync-logs/<int:pk>', EntityRetrieve.as_view(serializer_class=LabSyncLogSerializer)),

    # Accounting & point of sale
    *crud('accounts', AccountSerializer, query_filters={'type': 'type', 'status': 'status'}),
    path('api/transactions', accounting.TransactionList.as_view()),
    path('api/transactions/<int:pk>', EntityRetrieve.as_view(serializer_class=TransactionSerializer)),
    *crud('pos/terminals', PosTerminalSerializer),
    listing('pos/terminals/active', PosTerminalSerializer, filters={'status': 'active'}),
    path('api/pos/transactions', accounting.PosTransactionList.as_view()),
    path('api/pos/transactions/<int:pk>', accounting.PosTransactionDetail.as_view()),

    # Fleet
    *crud('vehicles', VehicleSerializer, query_filters={'status': 'status'}),
    path('api/vehicle-assignments', fleet.AssignmentList.as_view()),
    path('api/vehicle-assignments/<int:pk>', fleet.AssignmentDetail.as_view()),

    # Clinical decision support, dialysis & emergency
    *crud('clinical-guidelines', ClinicalGuidelineSerializer, query_filters={'category': 'category'}),
    *crud('diagnostic-sessions', DiagnosticSessionSerializer, query_filters={'patientId': 'patient_id'}),
    *crud('dialysis-units', DialysisUnitSerializer),
    *crud('dialysis-sessions', DialysisSessionSerializer,
          query_filters={'patientId': 'patient_id', 'unitId': 'unit_id', 'status': 'status'}),
    *crud('emergency-cases', EmergencyCaseSerializer, query_filters={'status': 'status'}),

    # Reporting
    path('api/report-templates', reports.ReportTemplateList.as_view()),
    listing('report-templates/system', ReportTemplateSerializer, filters={'is_system': True}),
    listing('report-templates/category/<str:category>', ReportTemplateSerializer),
    listing('report-templates/user/<int:created_by_id>', ReportTemplateSerializer),
    path('api/report-templates/<int:pk>', EntityDetail.as_view(serializer_class=ReportTemplateSerializer)),
    path('api/report-executions', reports.ReportExecutionList.as_view()),
    listing('report-executions/template/<int:template_id>', ReportExecutionSerializer, ordering=('-created_at',)),
    listing('report-executions/user/<int:executed_by_id>', ReportExecutionSerializer, ordering=('-created_at',)),
    path('api/report-executions/<int:pk>', EntityRetrieve.as_view(serializer_class=ReportExecutionSerializer)),
]

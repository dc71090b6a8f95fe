"""
Staff accounts, patients, appointments and SOAP medical records.
"""
from __future__ import annotations

from django.db.models import Q
from django.utils import timezone

from ..models import Appointment, Patient, User
from ..permissions import IsAdminOrReadOnly
from ..serializers.auth import UserSerializer
from ..serializers.patients import AppointmentSerializer, MedicalRecordSerializer, PatientSerializer
from .base import EntityDetail, EntityList, EntityListCreate, EntityRetrieve


class UserList(EntityListCreate):
    """Staff directory; only administrators create accounts."""
    serializer_class = UserSerializer
    permission_classes = [IsAdminOrReadOnly]
    query_filters = {'role': 'role'}


class UserDetail(EntityDetail):
    serializer_class = UserSerializer
    permission_classes = [IsAdminOrReadOnly]


class PatientList(EntityListCreate):
    """Patients, optionally narrowed by ``?q=`` on name or patient code."""
    serializer_class = PatientSerializer
    query_filters = {'status': 'status'}

    def base_queryset(self):
        qs = Patient.objects.all()
        q = (self.request.query_params.get('q') or '').strip()
        if q:
            qs = qs.filter(Q(first_name__icontains=q) | Q(last_name__icontains=q) | Q(patient_id__icontains=q))
        return qs


class RecentPatients(EntityList):
    serializer_class = PatientSerializer
    ordering = ('-created_at', '-id')
    default_limit = 5


class AppointmentList(EntityListCreate):
    serializer_class = AppointmentSerializer
    query_filters = {'doctorId': 'doctor_id', 'patientId': 'patient_id', 'status': 'status'}
    ordering = ('date', 'id')


class TodayAppointments(EntityList):
    serializer_class = AppointmentSerializer
    ordering = ('date', 'id')

    def base_queryset(self):
        return Appointment.objects.filter(date__date=timezone.localdate())


class MedicalRecordList(EntityListCreate):
    serializer_class = MedicalRecordSerializer
    query_filters = {'patientId': 'patient_id'}
    ordering = ('-date', '-id')


class MedicalRecordDetail(EntityRetrieve):
    # SOAP notes are append-only
    serializer_class = MedicalRecordSerializer


class DoctorList(EntityList):
    serializer_class = UserSerializer

    def base_queryset(self):
        return User.objects.filter(role='doctor', is_active=True)

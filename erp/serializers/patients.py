from ..models import Appointment, MedicalRecord, Patient
from .base import CamelModelSerializer


class PatientSerializer(CamelModelSerializer):
    sanitized_fields = ('first_name', 'last_name', 'address')

    class Meta:
        model = Patient
        fields = '__all__'
        read_only_fields = ['created_at']


class AppointmentSerializer(CamelModelSerializer):
    sanitized_fields = ('notes',)

    class Meta:
        model = Appointment
        fields = '__all__'
        read_only_fields = ['created_at']


class MedicalRecordSerializer(CamelModelSerializer):
    class Meta:
        model = MedicalRecord
        fields = '__all__'
        read_only_fields = ['date', 'created_at']

"""Decision support, dialysis and emergency department records."""
from ..models import ClinicalGuideline, DialysisSession, DialysisUnit, DiagnosticSession, EmergencyCase
from .base import CamelModelSerializer


class ClinicalGuidelineSerializer(CamelModelSerializer):
    sanitized_fields = ('title',)

    class Meta:
        model = ClinicalGuideline
        fields = '__all__'
        read_only_fields = ['created_at']


class DiagnosticSessionSerializer(CamelModelSerializer):
    class Meta:
        model = DiagnosticSession
        fields = '__all__'
        read_only_fields = ['created_at']


class DialysisUnitSerializer(CamelModelSerializer):
    sanitized_fields = ('name',)

    class Meta:
        model = DialysisUnit
        fields = '__all__'
        read_only_fields = ['created_at']


class DialysisSessionSerializer(CamelModelSerializer):
    class Meta:
        model = DialysisSession
        fields = '__all__'
        read_only_fields = ['created_at']


class EmergencyCaseSerializer(CamelModelSerializer):
    sanitized_fields = ('patient_name', 'chief_complaint')

    class Meta:
        model = EmergencyCase
        fields = '__all__'
        read_only_fields = ['created_at']

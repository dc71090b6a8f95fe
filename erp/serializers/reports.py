from ..models import ReportExecution, ReportTemplate
from .base import CamelModelSerializer


class ReportTemplateSerializer(CamelModelSerializer):
    sanitized_fields = ('name', 'description')

    class Meta:
        model = ReportTemplate
        fields = '__all__'
        read_only_fields = ['created_by', 'created_at']


class ReportExecutionSerializer(CamelModelSerializer):
    class Meta:
        model = ReportExecution
        fields = '__all__'
        read_only_fields = ['executed_by', 'status', 'result_data', 'error_message', 'completed_at', 'created_at']

from ..serializers.reports import ReportExecutionSerializer, ReportTemplateSerializer
from ..services import reports
from .base import EntityListCreate


class ReportTemplateList(EntityListCreate):
    serializer_class = ReportTemplateSerializer
    query_filters = {'category': 'category', 'reportType': 'report_type'}

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)


class ReportExecutionList(EntityListCreate):
    """Creating an execution runs the report before responding."""
    serializer_class = ReportExecutionSerializer
    query_filters = {'templateId': 'template_id', 'status': 'status'}
    ordering = ('-created_at', '-id')

    def perform_create(self, serializer):
        serializer.instance = reports.execute(serializer.validated_data, user=self.request.user)

from rest_framework import serializers

from ..models import Employee, Leave
from .base import CamelModelSerializer


class EmployeeSerializer(CamelModelSerializer):
    sanitized_fields = ('department', 'position', 'emergency_contact_name')

    class Meta:
        model = Employee
        fields = '__all__'
        read_only_fields = ['created_at']


class LeaveSerializer(CamelModelSerializer):
    sanitized_fields = ('reason',)

    class Meta:
        model = Leave
        fields = '__all__'
        read_only_fields = ['created_at']

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'endDate': ['End date cannot be before the start date']})
        return attrs

from rest_framework import serializers

from ..models import LabResult, LabSyncLog, LabSystem
from .base import CamelModelSerializer


class LabSystemSerializer(CamelModelSerializer):
    class Meta:
        model = LabSystem
        fields = '__all__'
        read_only_fields = ['last_sync_at', 'created_at']
        extra_kwargs = {
            'password': {'write_only': True},
            'api_key': {'write_only': True},
        }


class LabResultSerializer(CamelModelSerializer):
    class Meta:
        model = LabResult
        fields = '__all__'
        read_only_fields = ['created_at']


class LabSyncLogSerializer(CamelModelSerializer):
    class Meta:
        model = LabSyncLog
        fields = '__all__'
        read_only_fields = ['started_at', 'created_at']


class ConnectionTestSerializer(serializers.Serializer):
    url = serializers.URLField(required=False)
    apiUrl = serializers.URLField(required=False, allow_null=True, allow_blank=True)
    apiKey = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    username = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    password = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate(self, attrs):
        if not (attrs.get('apiUrl') or attrs.get('url')):
            raise serializers.ValidationError({'url': ['A url or apiUrl is required']})
        return attrs

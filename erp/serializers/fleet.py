from ..models import Vehicle, VehicleAssignment
from .base import CamelModelSerializer


class VehicleSerializer(CamelModelSerializer):
    class Meta:
        model = Vehicle
        fields = '__all__'
        read_only_fields = ['created_at']


class VehicleAssignmentSerializer(CamelModelSerializer):
    sanitized_fields = ('purpose',)

    class Meta:
        model = VehicleAssignment
        fields = '__all__'
        read_only_fields = ['created_at']

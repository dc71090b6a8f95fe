from ..serializers.fleet import VehicleAssignmentSerializer
from ..services import fleet
from .base import EntityDetail, EntityListCreate


class AssignmentList(EntityListCreate):
    serializer_class = VehicleAssignmentSerializer
    query_filters = {'vehicleId': 'vehicle_id', 'driverId': 'driver_id', 'status': 'status'}
    ordering = ('-created_at', '-id')

    def perform_create(self, serializer):
        serializer.instance = fleet.create_assignment(serializer.validated_data)


class AssignmentDetail(EntityDetail):
    serializer_class = VehicleAssignmentSerializer

    def perform_update(self, serializer):
        serializer.instance = fleet.update_assignment(serializer.instance, serializer.validated_data)

"""
Wards, beds and admissions.

Admission writes go through ``erp.services.inpatient`` so the bed status
follows the admission.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Admission
from ..serializers.inpatient import AdmissionSerializer, BedSerializer
from ..services import inpatient
from .base import EntityDetail, EntityList, EntityListCreate


class BedList(EntityListCreate):
    serializer_class = BedSerializer
    query_filters = {'wardId': 'ward_id', 'status': 'status'}


class AvailableBeds(EntityList):
    serializer_class = BedSerializer
    filters = {'status': 'available'}


class AdmissionList(EntityListCreate):
    """Active admissions unless ``?status=`` asks for another status."""
    serializer_class = AdmissionSerializer
    query_filters = {'patientId': 'patient_id', 'bedId': 'bed_id', 'status': 'status'}

    def base_queryset(self):
        qs = Admission.objects.select_related('bed')
        if 'status' not in self.request.query_params and 'patient_id' not in self.kwargs:
            qs = qs.filter(status='active')
        return qs

    def perform_create(self, serializer):
        serializer.instance = inpatient.admit_patient(serializer.validated_data, user=self.request.user)


class AdmissionDetail(EntityDetail):
    serializer_class = AdmissionSerializer

    def perform_update(self, serializer):
        serializer.instance = inpatient.update_admission(serializer.instance, serializer.validated_data,
                                                         user=self.request.user)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def discharge_admission(request, pk: int):
    """Discharge an admission; ``dischargeDate`` is optional and defaults to now."""
    admission = get_object_or_404(Admission, pk=pk)
    s = AdmissionSerializer(admission, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    admission = inpatient.discharge_patient(admission, discharge_date=s.validated_data.get('discharge_date'),
                                            user=request.user)
    return Response(AdmissionSerializer(admission).data)

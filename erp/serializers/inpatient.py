from ..models import Admission, Bed, MedicalOrder, OrderResult, TreatmentPlan, Ward
from .base import CamelModelSerializer


class WardSerializer(CamelModelSerializer):
    sanitized_fields = ('name',)

    class Meta:
        model = Ward
        fields = '__all__'
        read_only_fields = ['created_at']


class BedSerializer(CamelModelSerializer):
    class Meta:
        model = Bed
        fields = '__all__'
        read_only_fields = ['created_at']


class AdmissionSerializer(CamelModelSerializer):
    class Meta:
        model = Admission
        fields = '__all__'
        read_only_fields = ['created_at']
        # bed availability is checked under a row lock in services.inpatient,
        # which replaces the generated one-active-admission-per-bed validator
        extra_kwargs = {'bed': {'validators': []}}
        validators = []


class TreatmentPlanSerializer(CamelModelSerializer):
    sanitized_fields = ('title',)

    class Meta:
        model = TreatmentPlan
        fields = '__all__'
        read_only_fields = ['created_at']


class MedicalOrderSerializer(CamelModelSerializer):
    class Meta:
        model = MedicalOrder
        fields = '__all__'
        read_only_fields = ['ordered_at', 'created_at']


class OrderResultSerializer(CamelModelSerializer):
    class Meta:
        model = OrderResult
        fields = '__all__'
        read_only_fields = ['created_at']

"""
Bed occupancy follows admissions and discharges.
"""
from django.utils import timezone
from rest_framework.test import APIClient, APITestCase

from erp.models import Admission, AuditEvent, Bed, Patient, User, Ward


class AdmissionFlowTests(APITestCase):
    def setUp(self) -> None:
        self.doctor = User.objects.create_user(username='drjohn', password='password123', name='Dr. John Doe',
                                               role='doctor')
        self.patient = Patient.objects.create(patient_id='P-21503', first_name='John', last_name='Doe')
        self.other = Patient.objects.create(patient_id='P-21504', first_name='Maria', last_name='Johnson')
        self.ward = Ward.objects.create(name='General Ward', type='general', capacity=20)
        self.bed = Bed.objects.create(bed_number='GW-1', ward=self.ward)
        self.client = APIClient()
        self.client.force_authenticate(user=self.doctor)

    def admit(self, patient, bed=None, **extra):
        payload = {
            'patientId': patient.pk,
            'bedId': (bed or self.bed).pk,
            'doctorId': self.doctor.pk,
            'admissionDate': timezone.now().isoformat(),
            'diagnosis': 'Pneumonia',
        }
        payload.update(extra)
        return self.client.post('/api/admissions', payload, format='json')

    def test_admission_occupies_bed_and_discharge_frees_it(self):
        r = self.admit(self.patient)
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.data['status'], 'active')
        self.assertEqual(r.data['bedId'], self.bed.pk)
        self.bed.refresh_from_db()
        self.assertEqual(self.bed.status, 'occupied')
        self.assertEqual(self.client.get('/api/beds/available').data, [])

        admission_id = r.data['id']
        r = self.client.patch(f'/api/admissions/{admission_id}', {'status': 'discharged'}, format='json')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data['status'], 'discharged')
        self.assertIsNotNone(r.data['dischargeDate'])
        self.bed.refresh_from_db()
        self.assertEqual(self.bed.status, 'available')
        self.assertTrue(AuditEvent.objects.filter(action='discharge', object_id=admission_id).exists())

    def test_occupied_bed_cannot_be_admitted_into(self):
        self.assertEqual(self.admit(self.patient).status_code, 201)

        r = self.admit(self.other)
        self.assertEqual(r.status_code, 400)
        self.assertIn('bedId', r.data['error']['fields'])
        self.assertEqual(Admission.objects.filter(bed=self.bed, status='active').count(), 1)

    def test_bed_in_maintenance_is_rejected(self):
        self.bed.status = 'maintenance'
        self.bed.save()
        r = self.admit(self.patient)
        self.assertEqual(r.status_code, 400)
        self.assertFalse(Admission.objects.exists())

    def test_discharge_endpoint_keeps_supplied_date(self):
        admission_id = self.admit(self.patient).data['id']
        when = '2024-05-01T10:00:00Z'
        r = self.client.post(f'/api/admissions/{admission_id}/discharge', {'dischargeDate': when}, format='json')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data['status'], 'discharged')
        self.assertTrue(r.data['dischargeDate'].startswith('2024-05-01T10:00:00'))
        self.bed.refresh_from_db()
        self.assertEqual(self.bed.status, 'available')

    def test_bed_can_be_reused_after_discharge(self):
        admission_id = self.admit(self.patient).data['id']
        self.client.post(f'/api/admissions/{admission_id}/discharge', {}, format='json')
        self.assertEqual(self.admit(self.other).status_code, 201)

    def test_discharging_twice_leaves_a_reoccupied_bed_alone(self):
        first = self.admit(self.patient).data['id']
        self.client.post(f'/api/admissions/{first}/discharge', {}, format='json')
        self.admit(self.other)

        r = self.client.patch(f'/api/admissions/{first}', {'status': 'discharged'}, format='json')
        self.assertEqual(r.status_code, 200)
        self.bed.refresh_from_db()
        self.assertEqual(self.bed.status, 'occupied')

    def test_admission_listing_defaults_to_active(self):
        first = self.admit(self.patient).data['id']
        self.client.post(f'/api/admissions/{first}/discharge', {}, format='json')
        second = self.admit(self.other).data['id']

        self.assertEqual([a['id'] for a in self.client.get('/api/admissions').data], [second])
        discharged = self.client.get('/api/admissions', {'status': 'discharged'}).data
        self.assertEqual([a['id'] for a in discharged], [first])
        history = self.client.get(f'/api/admissions/patient/{self.patient.pk}').data
        self.assertEqual([a['id'] for a in history], [first])

    def test_beds_by_ward(self):
        other_ward = Ward.objects.create(name='ICU', type='icu', capacity=10)
        Bed.objects.create(bed_number='ICU-1', ward=other_ward)
        r = self.client.get(f'/api/beds/ward/{other_ward.pk}')
        self.assertEqual([b['bedNumber'] for b in r.data], ['ICU-1'])
        r = self.client.get('/api/beds', {'wardId': self.ward.pk})
        self.assertEqual([b['bedNumber'] for b in r.data], ['GW-1'])

    def test_moving_an_active_admission_swaps_bed_occupancy(self):
        second_bed = Bed.objects.create(bed_number='GW-2', ward=self.ward)
        admission_id = self.admit(self.patient).data['id']

        r = self.client.patch(f'/api/admissions/{admission_id}', {'bedId': second_bed.pk}, format='json')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data['bedId'], second_bed.pk)
        self.bed.refresh_from_db()
        second_bed.refresh_from_db()
        self.assertEqual(self.bed.status, 'available')
        self.assertEqual(second_bed.status, 'occupied')

        # The freed bed takes a new patient; the occupied one refuses them
        r = self.admit(self.other, bed=second_bed)
        self.assertEqual(r.status_code, 400)
        self.assertEqual(list(r.data['error']['fields']), ['bedId'])
        self.assertEqual(r.data['error']['message'], 'bedId: Bed GW-2 is occupied')
        self.assertEqual(self.admit(self.other).status_code, 201)

    def test_moving_into_an_occupied_bed_is_rejected(self):
        second_bed = Bed.objects.create(bed_number='GW-2', ward=self.ward)
        first = self.admit(self.patient).data['id']
        self.admit(self.other, bed=second_bed)

        r = self.client.patch(f'/api/admissions/{first}', {'bedId': second_bed.pk}, format='json')
        self.assertEqual(r.status_code, 400)
        self.assertIn('bedId', r.data['error']['fields'])
        self.assertEqual(Admission.objects.get(pk=first).bed_id, self.bed.pk)
        self.bed.refresh_from_db()
        self.assertEqual(self.bed.status, 'occupied')

    def test_reactivating_a_discharge_takes_the_bed_back(self):
        admission_id = self.admit(self.patient).data['id']
        self.client.post(f'/api/admissions/{admission_id}/discharge', {}, format='json')

        r = self.client.patch(f'/api/admissions/{admission_id}', {'status': 'active'}, format='json')
        self.assertEqual(r.status_code, 200)
        self.bed.refresh_from_db()
        self.assertEqual(self.bed.status, 'occupied')

    def test_reactivation_is_rejected_once_the_bed_is_taken(self):
        admission_id = self.admit(self.patient).data['id']
        self.client.post(f'/api/admissions/{admission_id}/discharge', {}, format='json')
        self.admit(self.other)

        r = self.client.patch(f'/api/admissions/{admission_id}', {'status': 'active'}, format='json')
        self.assertEqual(r.status_code, 400)
        self.assertIn('bedId', r.data['error']['fields'])
        self.assertEqual(Admission.objects.get(pk=admission_id).status, 'discharged')
        self.assertEqual(Admission.objects.filter(bed=self.bed, status='active').count(), 1)


class ClinicalOrderTests(APITestCase):
    def setUp(self) -> None:
        self.doctor = User.objects.create_user(username='drjohn', password='password123', role='doctor')
        self.patient = Patient.objects.create(patient_id='P-1', first_name='A', last_name='B')
        self.client.force_authenticate(user=self.doctor)

    def test_orders_results_and_treatment_plans(self):
        r = self.client.post('/api/treatments', {
            'patientId': self.patient.pk, 'doctorId': self.doctor.pk, 'title': 'Antibiotic course',
            'startDate': '2024-05-01',
        }, format='json')
        self.assertEqual(r.status_code, 201)
        plan_id = r.data['id']

        r = self.client.post('/api/medical-orders', {
            'patientId': self.patient.pk, 'treatmentPlanId': plan_id, 'orderedBy': self.doctor.pk,
            'orderType': 'lab', 'description': 'CBC', 'priority': 'urgent',
        }, format='json')
        self.assertEqual(r.status_code, 201)
        order_id = r.data['id']
        self.assertEqual(r.data['status'], 'ordered')

        r = self.client.post('/api/order-results', {
            'orderId': order_id, 'resultText': 'WBC high', 'abnormal': True, 'resultData': {'wbc': 13.2},
        }, format='json')
        self.assertEqual(r.status_code, 201)

        self.assertEqual(len(self.client.get(f'/api/order-results/order/{order_id}').data), 1)
        self.assertEqual(len(self.client.get(f'/api/medical-orders/patient/{self.patient.pk}').data), 1)
        self.assertEqual(len(self.client.get('/api/medical-orders', {'orderType': 'imaging'}).data), 0)
        self.assertEqual(len(self.client.get(f'/api/treatments/patient/{self.patient.pk}').data), 1)

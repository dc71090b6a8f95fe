"""
Admission and discharge.

Both operations lock the bed row before touching it so two requests
cannot hand the same bed to two patients.  The partial unique
constraint on ``Admission`` (one active admission per bed) backs this up
on databases without row locks.
"""
from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from erp.models import Admission, Bed, User
from erp.services.audit import log_action

logger = logging.getLogger(__name__)


@transaction.atomic
def admit_patient(data: dict, *, user: User | None = None) -> Admission:
    """Create an admission and mark its bed occupied.

    Raises ``ValidationError`` when the bed is not available.
    """
    bed = Bed.objects.select_for_update().get(pk=data['bed'].pk)
    status = data.get('status', 'active')
    if status == 'active' and bed.status != 'available':
        raise ValidationError({'bedId': [f'Bed {bed.bed_number} is {bed.status}']})

    admission = Admission.objects.create(**data)
    if admission.status == 'active':
        bed.status = 'occupied'
        bed.save(update_fields=['status'])

    logger.info("Admitted patient %s to bed %s (admission %s)", admission.patient_id, bed.bed_number, admission.pk)
    log_action(user=user, action='admit', object_type='admission', object_id=admission.pk,
               detail={'patientId': admission.patient_id, 'bedId': bed.pk})
    return admission


@transaction.atomic
def update_admission(admission: Admission, data: dict, *, user: User | None = None) -> Admission:
    """Apply a partial update and keep bed occupancy in step.

    Leaving ``active`` (discharge) or moving to another bed frees the old
    bed.  Entering ``active`` (reactivation) or moving to another bed takes
    the new one, which must be available.  Discharging an already
    discharged admission leaves the bed alone.
    """
    admission = Admission.objects.select_for_update().get(pk=admission.pk)
    previous_status, previous_bed_id = admission.status, admission.bed_id
    for field, value in data.items():
        setattr(admission, field, value)

    was_active = previous_status == 'active'
    is_active = admission.status == 'active'
    moved = admission.bed_id != previous_bed_id
    release = was_active and (moved or not is_active)
    occupy = is_active and (moved or not was_active)

    # Lock in id order so concurrent moves between the same beds cannot deadlock
    beds = {b.pk: b for b in Bed.objects.select_for_update()
            .filter(pk__in={previous_bed_id, admission.bed_id}).order_by('pk')}
    new_bed = beds[admission.bed_id]
    if occupy and new_bed.status != 'available':
        raise ValidationError({'bedId': [f'Bed {new_bed.bed_number} is {new_bed.status}']})

    discharged = admission.status == 'discharged' and previous_status != 'discharged'
    if discharged and admission.discharge_date is None:
        admission.discharge_date = timezone.now()
    admission.save()

    if release:
        old_bed = beds[previous_bed_id]
        old_bed.status = 'available'
        old_bed.save(update_fields=['status'])
    if occupy:
        new_bed.status = 'occupied'
        new_bed.save(update_fields=['status'])

    if discharged:
        logger.info("Discharged admission %s, bed %s available", admission.pk, beds[previous_bed_id].bed_number)
        log_action(user=user, action='discharge', object_type='admission', object_id=admission.pk,
                   detail={'bedId': previous_bed_id})
    elif moved or occupy:
        logger.info("Admission %s now in bed %s", admission.pk, new_bed.bed_number)
        log_action(user=user, action='admit', object_type='admission', object_id=admission.pk,
                   detail={'patientId': admission.patient_id, 'bedId': new_bed.pk})
    return admission


def discharge_patient(admission: Admission, *, discharge_date=None, user: User | None = None) -> Admission:
    data = {'status': 'discharged'}
    if discharge_date is not None:
        data['discharge_date'] = discharge_date
    return update_admission(admission, data, user=user)

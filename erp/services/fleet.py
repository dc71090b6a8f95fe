"""
Ambulance dispatch.

A vehicle is ``in-use`` while any of its assignments is ``in-progress``
and goes back to ``available`` when the last of them ends.
"""
from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from erp.models import Vehicle, VehicleAssignment

logger = logging.getLogger(__name__)

ENDED = ('completed', 'cancelled')


def _apply_transition(assignment: VehicleAssignment, previous: str | None) -> None:
    if assignment.status == previous:
        return
    vehicle = Vehicle.objects.select_for_update().get(pk=assignment.vehicle_id)

    if assignment.status == 'in-progress':
        if assignment.started_at is None:
            assignment.started_at = timezone.now()
            assignment.save(update_fields=['started_at'])
        vehicle.status = 'in-use'
        vehicle.save(update_fields=['status'])
        logger.info("Vehicle %s dispatched on assignment %s", vehicle.registration_number, assignment.pk)

    elif previous == 'in-progress' and assignment.status in ENDED:
        if assignment.completed_at is None:
            assignment.completed_at = timezone.now()
            assignment.save(update_fields=['completed_at'])
        still_busy = (VehicleAssignment.objects
                      .filter(vehicle=vehicle, status='in-progress')
                      .exclude(pk=assignment.pk).exists())
        if not still_busy:
            vehicle.status = 'available'
            vehicle.save(update_fields=['status'])
            logger.info("Vehicle %s back in service", vehicle.registration_number)


@transaction.atomic
def create_assignment(data: dict) -> VehicleAssignment:
    assignment = VehicleAssignment.objects.create(**data)
    _apply_transition(assignment, None)
    return assignment


@transaction.atomic
def update_assignment(assignment: VehicleAssignment, data: dict) -> VehicleAssignment:
    assignment = VehicleAssignment.objects.select_for_update().get(pk=assignment.pk)
    previous = assignment.status
    for field, value in data.items():
        setattr(assignment, field, value)
    assignment.save()
    _apply_transition(assignment, previous)
    return assignment

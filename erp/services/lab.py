"""
Laboratory information system integration.

A lab system exposes ``GET {apiUrl}/results`` returning either a JSON
list of result records or an object with a ``results`` list.  Each
record is matched to a patient by the patient's human-readable
``patientId`` code and upserted by ``externalId``::

    {"externalId": "R-1", "patientId": "P-21503", "testType": "blood",
     "testName": "CBC", "resultData": {...}, "status": "final",
     "referenceRange": "...", "criticalFlag": false,
     "collectedAt": "2024-05-01T08:00:00Z", "resultedAt": "..."}
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

import requests
from django.conf import settings
from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from erp.models import LabResult, LabSyncLog, LabSystem, Patient, User
from erp.services.audit import log_action

logger = logging.getLogger(__name__)

RESULT_STATUSES = {choice for choice, _ in LabResult.STATUS_CHOICES}


class LabRecordError(ValueError):
    """A record from the lab system could not be stored."""


def _request_kwargs(api_key: Optional[str], username: Optional[str], password: Optional[str]) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {'timeout': settings.LAB_SYNC_TIMEOUT, 'headers': {'Accept': 'application/json'}}
    if api_key:
        kwargs['headers']['Authorization'] = f'Bearer {api_key}'
    elif username:
        kwargs['auth'] = (username, password or '')
    return kwargs


def check_connection(url: str, *, api_key: Optional[str] = None, username: Optional[str] = None,
                     password: Optional[str] = None) -> Dict[str, Any]:
    """Probe a lab endpoint and report ``{ok, statusCode, message}``."""
    try:
        r = requests.get(url, **_request_kwargs(api_key, username, password))
    except requests.RequestException as exc:
        logger.warning("Lab connection test to %s failed: %s", url, exc)
        return {'ok': False, 'statusCode': None, 'message': str(exc)}
    return {'ok': r.ok, 'statusCode': r.status_code, 'message': r.reason or ''}


def check_system_connection(lab: LabSystem) -> Dict[str, Any]:
    return check_connection(lab.api_url or lab.url, api_key=lab.api_key,
                            username=lab.username, password=lab.password)


def _parse_dt(value):
    if not value:
        return None
    try:
        parsed = parse_datetime(value) if isinstance(value, str) else None
    except ValueError:
        parsed = None
    if parsed is None:
        raise LabRecordError(f'invalid datetime {value!r}')
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


@transaction.atomic
def _upsert_result(lab: LabSystem, record: Dict[str, Any]) -> LabResult:
    if not isinstance(record, dict):
        raise LabRecordError('record is not an object')
    external_id = record.get('externalId')
    if not external_id:
        raise LabRecordError('missing externalId')
    try:
        patient = Patient.objects.get(patient_id=record.get('patientId'))
    except Patient.DoesNotExist:
        raise LabRecordError(f"unknown patient {record.get('patientId')!r}")
    status = record.get('status') or 'preliminary'
    if status not in RESULT_STATUSES:
        raise LabRecordError(f'invalid status {status!r}')

    values = {
        'patient': patient,
        'test_type': record.get('testType') or 'general',
        'test_name': record.get('testName') or external_id,
        'result_data': record.get('resultData') or {},
        'reference_range': record.get('referenceRange'),
        'status': status,
        'critical_flag': bool(record.get('criticalFlag')),
        'collected_at': _parse_dt(record.get('collectedAt')),
        'resulted_at': _parse_dt(record.get('resultedAt')),
    }
    result, _ = LabResult.objects.update_or_create(lab_system=lab, external_id=external_id, defaults=values)
    return result


def _records(payload) -> Iterable[Dict[str, Any]]:
    if isinstance(payload, dict):
        payload = payload.get('results', [])
    if not isinstance(payload, list):
        raise ValueError('lab system returned an unexpected payload')
    return payload


def _close_failed(log: LabSyncLog, lab: LabSystem, error: str, user: User | None) -> None:
    log.status = 'failed'
    log.error_message = error
    log.completed_at = timezone.now()
    log.save(update_fields=['status', 'error_message', 'completed_at'])
    lab.status = 'error'
    lab.last_sync_at = log.completed_at
    lab.save(update_fields=['status', 'last_sync_at'])
    log_action(user=user, action='lab_sync', object_type='lab_system', object_id=lab.pk,
               detail={'result': 'fail', 'error': error})


def sync_lab_system(lab: LabSystem, *, user: User | None = None) -> LabSyncLog:
    """Pull results from ``lab`` and record the run in a sync log.

    Network and payload errors fail the whole run; a bad record only
    counts as an error and the run carries on.  Anything unexpected
    closes the log as failed before propagating.
    """
    log = LabSyncLog.objects.create(lab_system=lab, status='in_progress')
    url = f"{(lab.api_url or lab.url).rstrip('/')}/results"
    logger.info("Syncing lab system %s from %s", lab.pk, url)

    try:
        r = requests.get(url, **_request_kwargs(lab.api_key, lab.username, lab.password))
        r.raise_for_status()
        records = list(_records(r.json()))
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Lab sync %s for system %s failed: %s", log.pk, lab.pk, exc)
        _close_failed(log, lab, str(exc), user)
        return log

    errors = []
    try:
        for record in records:
            try:
                _upsert_result(lab, record)
            except LabRecordError as exc:
                logger.warning("Lab sync %s skipped record %r: %s", log.pk, record, exc)
                errors.append(str(exc))
    except Exception as exc:
        logger.exception("Lab sync %s for system %s aborted", log.pk, lab.pk)
        _close_failed(log, lab, f'{type(exc).__name__}: {exc}', user)
        raise

    log.total_records = len(records)
    log.error_count = len(errors)
    log.success_count = log.total_records - log.error_count
    log.error_message = '; '.join(errors[:10]) or None
    log.status = 'completed'
    log.completed_at = timezone.now()
    log.save()

    lab.status = 'active'
    lab.last_sync_at = log.completed_at
    lab.save(update_fields=['status', 'last_sync_at'])
    logger.info("Lab sync %s done: %s ok, %s errors", log.pk, log.success_count, log.error_count)
    log_action(user=user, action='lab_sync', object_type='lab_system', object_id=lab.pk,
               detail={'result': 'ok', 'total': log.total_records, 'errors': log.error_count})
    return log

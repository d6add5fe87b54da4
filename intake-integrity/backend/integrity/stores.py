"""
DjangoRecordStore — RecordStore 的 ORM 实现。

把 model 实例转换成引擎的 frozen 快照类型，引擎永远不碰 ORM 对象。
所有 DatabaseError 统一转成 StoreError，保证"查询失败"不会被当成"没有重复"。
"""

import logging
from functools import wraps

from django.db import DatabaseError

from .engine.store import RecordStore
from .engine.types import ExistingOrder, ExistingPatientRecord, ProviderRecord
from .exceptions import StoreError
from .models import Order, Patient, Provider

logger = logging.getLogger(__name__)


def _wrap_db_errors(method):
    @wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except DatabaseError as exc:
            logger.error("Record store query %s failed: %s", method.__name__, exc)
            raise StoreError(
                message='Record store is unavailable; duplicate check could not run.',
                detail={'operation': method.__name__},
            ) from exc
    return wrapper


def patient_snapshot(patient: Patient) -> ExistingPatientRecord:
    return ExistingPatientRecord(
        id=patient.id,
        mrn=patient.mrn,
        first_name=patient.first_name,
        last_name=patient.last_name,
    )


def provider_snapshot(provider: Provider) -> ProviderRecord:
    return ProviderRecord(identifier=provider.npi, display_name=provider.name, id=provider.id)


class DjangoRecordStore(RecordStore):

    @_wrap_db_errors
    def find_recent_patients(self, limit: int) -> list[ExistingPatientRecord]:
        patients = Patient.objects.order_by('-created_at')[:limit]
        return [patient_snapshot(p) for p in patients]

    @_wrap_db_errors
    def find_orders_for_patient(self, patient_id) -> list[ExistingOrder]:
        orders = Order.objects.filter(patient_id=patient_id).order_by('-created_at')
        return [
            ExistingOrder(
                id=o.id,
                patient_id=o.patient_id,
                medication_name=o.medication_name,
                created_at=o.created_at,
            )
            for o in orders
        ]

    @_wrap_db_errors
    def find_provider_by_identifier(self, identifier: str) -> ProviderRecord | None:
        provider = Provider.objects.filter(npi=identifier).first()
        return provider_snapshot(provider) if provider else None

    @_wrap_db_errors
    def find_patient_by_mrn(self, mrn: str) -> ExistingPatientRecord | None:
        patient = Patient.objects.filter(mrn=mrn).order_by('created_at').first()
        return patient_snapshot(patient) if patient else None


# ── model loaders for the service layer ───────────────────────────────────

@_wrap_db_errors
def load_patient(patient_id) -> Patient:
    return Patient.objects.get(id=patient_id)


@_wrap_db_errors
def load_provider(provider_id) -> Provider:
    return Provider.objects.get(id=provider_id)

"""
Shared fixtures for all tests.

factory-boy factories live here so both unit/ and integration/ can import them.
InMemoryRecordStore 让引擎测试完全不碰数据库。
"""
import pytest
from datetime import datetime, timezone

import factory
from integrity.engine.store import RecordStore
from integrity.engine.types import ExistingOrder, ExistingPatientRecord, ProviderRecord
from integrity.engine.validators import check_digit
from integrity.models import Patient, Provider, Order


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

class PatientFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Patient

    mrn = factory.Sequence(lambda n: f'{100000 + n}')
    first_name = 'John'
    last_name = 'Doe'


def _valid_npi(n):
    base = f'{100000000 + n}'
    return base + check_digit(base)


class ProviderFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Provider

    npi = factory.Sequence(_valid_npi)
    name = 'Dr. Smith'


class OrderFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Order

    patient = factory.SubFactory(PatientFactory)
    provider = factory.SubFactory(ProviderFactory)
    medication_name = 'Humira'
    primary_diagnosis = 'L40.0'
    status = 'pending'


# ---------------------------------------------------------------------------
# In-memory store
# ---------------------------------------------------------------------------

class InMemoryRecordStore(RecordStore):
    """patients 按插入顺序保存，最新的在最后。"""

    def __init__(self, patients=None, orders=None, providers=None):
        self.patients = list(patients or [])
        self.orders = list(orders or [])
        self.providers = {p.identifier: p for p in (providers or [])}
        self.recent_limits = []

    def find_recent_patients(self, limit):
        self.recent_limits.append(limit)
        return list(reversed(self.patients))[:limit]

    def find_orders_for_patient(self, patient_id):
        return [o for o in self.orders if o.patient_id == patient_id]

    def find_provider_by_identifier(self, identifier):
        return self.providers.get(identifier)

    def find_patient_by_mrn(self, mrn):
        return next((p for p in self.patients if p.mrn == mrn), None)

    def add_patient(self, id, mrn, first_name, last_name):
        record = ExistingPatientRecord(id=id, mrn=mrn, first_name=first_name, last_name=last_name)
        self.patients.append(record)
        return record

    def add_order(self, id, patient_id, medication_name, created_at):
        order = ExistingOrder(id=id, patient_id=patient_id, medication_name=medication_name, created_at=created_at)
        self.orders.append(order)
        return order

    def add_provider(self, identifier, display_name, id=None):
        record = ProviderRecord(identifier=identifier, display_name=display_name, id=id or f'prov-{identifier}')
        self.providers[identifier] = record
        return record


class FailingRecordStore(RecordStore):
    """每个查询都抛出给定异常，模拟基础设施故障。"""

    def __init__(self, exc):
        self.exc = exc

    def find_recent_patients(self, limit):
        raise self.exc

    def find_orders_for_patient(self, patient_id):
        raise self.exc

    def find_provider_by_identifier(self, identifier):
        raise self.exc


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def now():
    return datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_order_payload():
    """Minimal valid payload for services.create_order()."""
    return {
        'patient': {
            'mrn': '999001',
            'first_name': 'Alice',
            'last_name': 'Wang',
        },
        'provider': {
            'npi': '1234567893',
            'name': 'Dr. Test',
        },
        'medication': {
            'name': 'Humira',
            'primary_diagnosis': 'L40.0',
        },
    }

"""
Warning 模型 —— 封闭的 tagged union。

每个变体是一个 frozen dataclass，带 WarningType 标签和 severity。
Warning 只是一次调用里产生的建议值：不入库、构造后不可修改。

调用方用 match / isinstance 分派；新增变体时必须同时加进 WARNING_TYPES，
assert_handled() 帮调用方在漏处理时尽早失败。
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar


class WarningType(str, Enum):
    DUPLICATE_PATIENT = "DUPLICATE_PATIENT"
    SIMILAR_PATIENT = "SIMILAR_PATIENT"
    DUPLICATE_ORDER = "DUPLICATE_ORDER"
    PROVIDER_CONFLICT = "PROVIDER_CONFLICT"


class Severity(str, Enum):
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class IntegrityWarning:
    """Base class; never instantiated directly."""

    type: ClassVar[WarningType]
    severity: ClassVar[Severity]

    @property
    def message(self) -> str:
        raise NotImplementedError

    def payload(self) -> dict[str, Any]:
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        """JSON-able dict; the caller wraps it in its own response shape."""
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "message": self.message,
            **self.payload(),
        }


@dataclass(frozen=True)
class DuplicatePatient(IntegrityWarning):
    type: ClassVar[WarningType] = WarningType.DUPLICATE_PATIENT
    severity: ClassVar[Severity] = Severity.HIGH

    patient_id: Any
    mrn: str
    name: str

    @property
    def message(self) -> str:
        return f"Patient with MRN {self.mrn} already exists: {self.name}"

    def payload(self) -> dict[str, Any]:
        return {
            "existing_patient": {"id": str(self.patient_id), "mrn": self.mrn, "name": self.name},
        }


@dataclass(frozen=True)
class SimilarPatient(IntegrityWarning):
    type: ClassVar[WarningType] = WarningType.SIMILAR_PATIENT
    severity: ClassVar[Severity] = Severity.MEDIUM

    patient_id: Any
    mrn: str
    name: str
    score: float

    @property
    def message(self) -> str:
        return (
            f"Similar patient found: {self.name} (MRN: {self.mrn}) - "
            f"{round(self.score * 100)}% match"
        )

    def payload(self) -> dict[str, Any]:
        return {
            "similar_patient": {"id": str(self.patient_id), "mrn": self.mrn, "name": self.name},
            "similarity_score": self.score,
        }


@dataclass(frozen=True)
class DuplicateOrder(IntegrityWarning):
    type: ClassVar[WarningType] = WarningType.DUPLICATE_ORDER
    severity: ClassVar[Severity] = Severity.HIGH

    order_id: Any
    medication_name: str
    created_at: datetime

    @property
    def message(self) -> str:
        return (
            f"Order for {self.medication_name} already exists for this patient "
            f"(created {self.created_at.strftime('%Y-%m-%d')})"
        )

    def payload(self) -> dict[str, Any]:
        return {
            "existing_order": {
                "id": str(self.order_id),
                "medication_name": self.medication_name,
                "created_at": self.created_at.isoformat(),
            },
        }


@dataclass(frozen=True)
class ProviderConflict(IntegrityWarning):
    """expected_name 是库里已登记的名字，actual_name 是本次提交的名字。"""

    type: ClassVar[WarningType] = WarningType.PROVIDER_CONFLICT
    severity: ClassVar[Severity] = Severity.HIGH

    identifier: str
    expected_name: str
    actual_name: str

    @property
    def message(self) -> str:
        return (
            f'NPI {self.identifier} is registered to "{self.expected_name}". '
            f'You entered "{self.actual_name}".'
        )

    def payload(self) -> dict[str, Any]:
        return {
            "npi": self.identifier,
            "expected_name": self.expected_name,
            "actual_name": self.actual_name,
        }


WARNING_TYPES: dict[WarningType, type[IntegrityWarning]] = {
    WarningType.DUPLICATE_PATIENT: DuplicatePatient,
    WarningType.SIMILAR_PATIENT: SimilarPatient,
    WarningType.DUPLICATE_ORDER: DuplicateOrder,
    WarningType.PROVIDER_CONFLICT: ProviderConflict,
}


def assert_handled(handled: set[WarningType]) -> None:
    """
    Raise if a caller's handler table does not cover every variant.

    Callers typically run this once at import time next to their dispatch
    table so a new warning variant cannot be silently ignored.
    """
    missing = set(WARNING_TYPES) - set(handled)
    if missing:
        names = ", ".join(sorted(t.value for t in missing))
        raise TypeError(f"Unhandled warning types: {names}")

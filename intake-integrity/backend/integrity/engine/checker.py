"""
IntegrityChecker — 把 detector 和 resolver 的结果合成一条 warning 流。

顺序固定：duplicate patient → similar patients → provider conflict → duplicate orders。
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .detector import DuplicateDetector
from .resolver import ConflictResolver
from .store import RecordStore
from .types import OrderCandidate, PatientCandidate, ProviderRecord
from .warnings import IntegrityWarning


@dataclass(frozen=True)
class IntegrityReport:
    provider: ProviderRecord
    warnings: list[IntegrityWarning] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


class IntegrityChecker:

    def __init__(self, detector: DuplicateDetector | None = None, resolver: ConflictResolver | None = None):
        self.detector = detector or DuplicateDetector()
        self.resolver = resolver or ConflictResolver()

    def check(
        self,
        patient: PatientCandidate,
        provider_identifier: str,
        provider_name: str,
        medication_name: str,
        store: RecordStore,
        patient_id: Any = None,
        now: datetime | None = None,
    ) -> IntegrityReport:
        """
        patient_id 只在患者已存在时传入；新患者不可能有历史订单，跳过订单查重。
        """
        warnings: list[IntegrityWarning] = []
        warnings.extend(self.detector.find_duplicate_patient(patient, store))
        warnings.extend(self.detector.find_similar_patients(patient, store))

        provider, conflicts = self.resolver.resolve_provider(provider_identifier, provider_name, store)
        warnings.extend(conflicts)

        if patient_id is not None:
            warnings.extend(self.detector.find_duplicate_orders(
                OrderCandidate(patient_id=patient_id, medication_name=medication_name),
                store,
                now=now,
            ))

        return IntegrityReport(provider=provider, warnings=warnings)

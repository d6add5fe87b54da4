"""
RecordStore — 引擎唯一认识的数据来源。

引擎只做只读查询，事务边界和隔离级别由调用方负责。
实现方在基础设施出错（连不上库等）时应抛 integrity.exceptions.StoreError，
而不是返回空列表：「没查到重复」和「没能查重」必须可区分。
"""

from abc import ABC, abstractmethod
from typing import Any

from .types import ExistingOrder, ExistingPatientRecord, ProviderRecord


class RecordStore(ABC):

    @abstractmethod
    def find_recent_patients(self, limit: int) -> list[ExistingPatientRecord]:
        """Most recently created patients first, at most ``limit`` of them."""

    @abstractmethod
    def find_orders_for_patient(self, patient_id: Any) -> list[ExistingOrder]:
        """All orders of one patient; the detector applies the time window."""

    @abstractmethod
    def find_provider_by_identifier(self, identifier: str) -> ProviderRecord | None:
        """Lookup by normalized NPI."""

    def find_patient_by_mrn(self, mrn: str) -> ExistingPatientRecord | None:
        """
        可选：按 MRN 精确查找。

        默认返回 None，表示该 store 不支持硬重复检查；
        DuplicateDetector.find_duplicate_patient() 此时不产生任何警告。
        """
        return None

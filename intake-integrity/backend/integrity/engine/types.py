"""
引擎的输入 / 快照类型。

全部 frozen：候选数据和从 store 读出的记录在一次检测中都不会被修改。
id 的类型由 store 决定（ORM 里是 UUID，测试里可以是 str / int）。
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class PatientCandidate:
    first_name: str
    last_name: str
    mrn: str


@dataclass(frozen=True)
class ExistingPatientRecord:
    id: Any
    mrn: str
    first_name: str
    last_name: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class OrderCandidate:
    patient_id: Any
    medication_name: str


@dataclass(frozen=True)
class ExistingOrder:
    id: Any
    patient_id: Any
    medication_name: str
    created_at: datetime


@dataclass(frozen=True)
class ProviderRecord:
    """id is None until the caller persists a newly resolved provider."""

    identifier: str
    display_name: str
    id: Any = None

    @property
    def is_new(self) -> bool:
        return self.id is None

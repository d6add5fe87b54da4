"""
IntakeRequest dataclass — service 层唯一认识的输入格式。

API 层（不在本项目内）负责把各种外部 payload 解析成这个结构；
from_dict() 接受最常见的嵌套 dict 形式。
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class PatientData:
    mrn: str
    first_name: str
    last_name: str


@dataclass
class ProviderData:
    npi: str
    name: str


@dataclass
class MedicationData:
    name: str
    primary_diagnosis: str                    # ICD-10
    additional_diagnoses: list[str] = field(default_factory=list)


@dataclass
class IntakeRequest:
    """
    confirm  用户是否已确认（WarningError 二次提交时为 True）。
    """

    patient: PatientData
    provider: ProviderData
    medication: MedicationData
    confirm: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IntakeRequest":
        patient = data.get("patient") or {}
        provider = data.get("provider") or {}
        medication = data.get("medication") or {}

        additional = medication.get("additional_diagnoses") or []
        if isinstance(additional, str):
            additional = [additional] if additional else []

        return cls(
            patient=PatientData(
                mrn=str(patient.get("mrn") or "").strip(),
                first_name=(patient.get("first_name") or "").strip(),
                last_name=(patient.get("last_name") or "").strip(),
            ),
            provider=ProviderData(
                npi=str(provider.get("npi") or "").strip(),
                name=(provider.get("name") or "").strip(),
            ),
            medication=MedicationData(
                name=(medication.get("name") or "").strip(),
                primary_diagnosis=(medication.get("primary_diagnosis") or "").strip(),
                additional_diagnoses=[c.strip() for c in additional if (c or "").strip()],
            ),
            confirm=bool(data.get("confirm", False)),
        )

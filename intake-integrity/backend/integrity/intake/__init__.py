from .types import IntakeRequest, MedicationData, PatientData, ProviderData
from .validation import validate_intake

__all__ = [
    "IntakeRequest",
    "MedicationData",
    "PatientData",
    "ProviderData",
    "validate_intake",
]

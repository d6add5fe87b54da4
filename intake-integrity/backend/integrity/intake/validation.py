"""
IntakeRequest 字段校验：必填项 / MRN 与姓名格式 / 长度上限 + NPI 校验位 + ICD-10 语法。

所有字段错误收集完一次性抛出 ValidationError，前端可以逐项标红。
通过校验后返回规范化后的副本（NPI 去分隔符，诊断码大写）。
"""

import logging
import re
from dataclasses import replace
from enum import Enum

from ..engine.validators import validate_code, validate_identifier
from ..exceptions import ValidationError
from .types import IntakeRequest

logger = logging.getLogger(__name__)

MRN_RE = re.compile(r"^[A-Za-z0-9-]+$")
PERSON_NAME_RE = re.compile(r"^[A-Za-z '-]+$")

# 与 models.py 的 max_length 一致
MRN_MAX_LENGTH = 20
PERSON_NAME_MAX_LENGTH = 100
PROVIDER_NAME_MAX_LENGTH = 200
MEDICATION_NAME_MAX_LENGTH = 200
MAX_ADDITIONAL_DIAGNOSES = 10

_DIAGNOSIS_FIELDS = ("medication.primary_diagnosis", "medication.additional_diagnoses")


class FieldReason(str, Enum):
    REQUIRED = "REQUIRED"
    MALFORMED = "MALFORMED"
    TOO_LONG = "TOO_LONG"
    TOO_MANY = "TOO_MANY"


def _check_text(errors, field, label, value, max_length, pattern=None, hint=""):
    if not value:
        errors.append({"field": field, "reason": FieldReason.REQUIRED.value, "message": f"{label} is required."})
    elif len(value) > max_length:
        errors.append({
            "field": field,
            "reason": FieldReason.TOO_LONG.value,
            "message": f"{label} must be at most {max_length} characters.",
        })
    elif pattern is not None and not pattern.match(value):
        errors.append({"field": field, "reason": FieldReason.MALFORMED.value, "message": f"{label} {hint}"})


def _error_code(fields):
    if fields == {"provider.npi"}:
        return "INVALID_NPI"
    if all(f.startswith(_DIAGNOSIS_FIELDS) for f in fields):
        return "INVALID_DIAGNOSIS_CODE"
    return "VALIDATION_ERROR"


def validate_intake(request: IntakeRequest) -> IntakeRequest:
    errors = []

    _check_text(errors, "patient.mrn", "MRN", request.patient.mrn, MRN_MAX_LENGTH,
                MRN_RE, "may only contain letters, digits and hyphens.")
    _check_text(errors, "patient.first_name", "First name", request.patient.first_name,
                PERSON_NAME_MAX_LENGTH, PERSON_NAME_RE,
                "may only contain letters, spaces, hyphens and apostrophes.")
    _check_text(errors, "patient.last_name", "Last name", request.patient.last_name,
                PERSON_NAME_MAX_LENGTH, PERSON_NAME_RE,
                "may only contain letters, spaces, hyphens and apostrophes.")

    npi_result = validate_identifier(request.provider.npi)
    if not npi_result.valid:
        errors.append({
            "field": "provider.npi",
            "reason": npi_result.reason.value,
            "message": npi_result.message,
        })
    _check_text(errors, "provider.name", "Provider name", request.provider.name, PROVIDER_NAME_MAX_LENGTH)

    _check_text(errors, "medication.name", "Medication name", request.medication.name,
                MEDICATION_NAME_MAX_LENGTH)

    primary = validate_code(request.medication.primary_diagnosis)
    if not primary.valid:
        errors.append({
            "field": "medication.primary_diagnosis",
            "reason": primary.reason.value,
            "message": primary.message,
        })

    if len(request.medication.additional_diagnoses) > MAX_ADDITIONAL_DIAGNOSES:
        errors.append({
            "field": "medication.additional_diagnoses",
            "reason": FieldReason.TOO_MANY.value,
            "message": f"At most {MAX_ADDITIONAL_DIAGNOSES} additional diagnoses are allowed.",
        })

    additional = []
    for i, code in enumerate(request.medication.additional_diagnoses):
        result = validate_code(code)
        if not result.valid:
            errors.append({
                "field": f"medication.additional_diagnoses[{i}]",
                "reason": result.reason.value,
                "message": f"Invalid ICD-10 code {code!r}: {result.message}",
            })
        additional.append(result.normalized)

    if errors:
        fields = {e["field"] for e in errors}
        logger.info("Intake validation failed: mrn=%s fields=%s", request.patient.mrn, sorted(fields))
        raise ValidationError(
            message="Request validation failed.",
            code=_error_code(fields),
            detail={"errors": errors},
        )

    return replace(
        request,
        provider=replace(request.provider, npi=npi_result.normalized),
        medication=replace(
            request.medication,
            primary_diagnosis=primary.normalized,
            additional_diagnoses=additional,
        ),
    )

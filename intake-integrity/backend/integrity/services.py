import logging

from django.db import transaction

from .engine.detector import DuplicateDetector
from .engine.resolver import ConflictResolver, names_match, normalize_display_name
from .engine.types import OrderCandidate, PatientCandidate
from .engine.warnings import WarningType
from .exceptions import BlockError, WarningError
from .intake import IntakeRequest, PatientData, ProviderData, validate_intake
from .models import Order, Patient, Provider
from .policy import get_checker, get_detection_policy
from .stores import DjangoRecordStore, load_patient, load_provider

logger = logging.getLogger(__name__)


def _as_request(data):
    if isinstance(data, IntakeRequest):
        return data
    return IntakeRequest.from_dict(data)


def check_provider(provider_data: ProviderData, store=None):
    """
    Provider 查重。返回 (provider_or_None, warnings)。
    - NPI 不存在 → None，调用方新建
    - NPI 相同 + 名字相同 → 现有 provider
    - NPI 相同 + 名字不同 → 现有 provider + PROVIDER_CONFLICT 警告（库里的名字不会被覆盖）
    """
    store = store or DjangoRecordStore()
    record, conflicts = ConflictResolver().resolve_provider(provider_data.npi, provider_data.name, store)

    if record.is_new:
        return None, conflicts
    return load_provider(record.id), conflicts


def check_patient(patient_data: PatientData, store=None):
    """
    Patient 查重。返回 (patient_or_None, warnings)。
    - MRN 相同 + 姓名相同 → 复用现有患者，无警告
    - MRN 相同 + 姓名不同 → 阻止 (409 DUPLICATE_PATIENT)
    - MRN 不存在 → None + 相似患者警告（可能为空）
    """
    store = store or DjangoRecordStore()
    detector = DuplicateDetector(get_detection_policy())
    candidate = PatientCandidate(
        first_name=patient_data.first_name,
        last_name=patient_data.last_name,
        mrn=patient_data.mrn,
    )

    duplicates = detector.find_duplicate_patient(candidate, store)
    if duplicates:
        duplicate = duplicates[0]
        existing = load_patient(duplicate.patient_id)
        if (names_match(existing.first_name, candidate.first_name)
                and names_match(existing.last_name, candidate.last_name)):
            return existing, []

        raise BlockError(
            message=duplicate.message,
            code='DUPLICATE_PATIENT',
            detail=duplicate.to_dict(),
        )

    return None, detector.find_similar_patients(candidate, store)


def check_order(patient, medication_name, store=None):
    """
    Order 查重：同一患者 + 同一药物（忽略大小写）+ 时间窗内 → 每条历史订单一个警告。
    """
    store = store or DjangoRecordStore()
    detector = DuplicateDetector(get_detection_policy())
    return detector.find_duplicate_orders(
        OrderCandidate(patient_id=patient.id, medication_name=medication_name),
        store,
    )


def check_intake(data):
    """
    只读预检：校验字段并返回全部警告的 dict 列表，不写库。

    与 create_order 一致：MRN 相同且姓名相同 → 会复用该患者，不报 DUPLICATE_PATIENT；
    姓名不同 → 保留 DUPLICATE_PATIENT（create_order 会阻止）。
    """
    request = validate_intake(_as_request(data))
    store = DjangoRecordStore()

    existing = store.find_patient_by_mrn(request.patient.mrn)
    reuses_patient = existing is not None and (
        names_match(existing.first_name, request.patient.first_name)
        and names_match(existing.last_name, request.patient.last_name)
    )
    report = get_checker().check(
        patient=PatientCandidate(
            first_name=request.patient.first_name,
            last_name=request.patient.last_name,
            mrn=request.patient.mrn,
        ),
        provider_identifier=request.provider.npi,
        provider_name=request.provider.name,
        medication_name=request.medication.name,
        store=store,
        patient_id=existing.id if existing else None,
    )
    warnings = report.warnings
    if reuses_patient:
        warnings = [w for w in warnings if w.type is not WarningType.DUPLICATE_PATIENT]
    return [w.to_dict() for w in warnings]


def create_order(data):
    """
    校验 → provider / patient / order 查重 → 建单。
    返回 (order, warnings)。

    有警告且用户未确认 → 抛 WarningError，detail['warnings'] 里是每条警告的 dict；
    用户确认后带 confirm=True 重新提交，警告照常返回但不再阻止。
    """
    request = validate_intake(_as_request(data))
    store = DjangoRecordStore()
    warnings = []

    provider, provider_warnings = check_provider(request.provider, store)
    warnings.extend(provider_warnings)

    patient, patient_warnings = check_patient(request.patient, store)
    warnings.extend(patient_warnings)

    if patient is not None:
        warnings.extend(check_order(patient, request.medication.name, store))

    if warnings and not request.confirm:
        logger.info("Intake paused for confirmation: mrn=%s warnings=%d",
                    request.patient.mrn, len(warnings))
        raise WarningError(
            message='Potential duplicates detected; resubmit with confirm=true to proceed.',
            detail={'warnings': [w.to_dict() for w in warnings]},
        )

    with transaction.atomic():
        if provider is None:
            provider = Provider.objects.create(
                npi=request.provider.npi,
                name=normalize_display_name(request.provider.name),
            )
            logger.info("Provider created: id=%s npi=%s", provider.id, provider.npi)

        if patient is None:
            patient = Patient.objects.create(
                mrn=request.patient.mrn,
                first_name=request.patient.first_name,
                last_name=request.patient.last_name,
            )
            logger.info("Patient created: id=%s mrn=%s", patient.id, patient.mrn)

        order = Order.objects.create(
            patient=patient,
            provider=provider,
            medication_name=request.medication.name,
            primary_diagnosis=request.medication.primary_diagnosis,
            additional_diagnoses=request.medication.additional_diagnoses,
            status='pending',
        )

    logger.info("Order created: id=%s patient_id=%s warnings=%d", order.id, patient.id, len(warnings))
    return order, warnings

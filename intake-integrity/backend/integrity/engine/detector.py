"""
DuplicateDetector — 患者模糊查重 + 订单时间窗查重。

患者相似度（加权）：
    score = w_first * sim(first, first)
          + w_last  * sim(last, last)
          + w_mrn   * sim(mrn[:prefix], mrn[:prefix])

已知限制：只比对最近 candidate_window 个患者（默认 100）。
这是延迟和召回之间的取舍，窗口之外的重复会漏掉；要全量覆盖，
需要在数据库侧做带索引的 trigram 检索（例如 PostgreSQL pg_trgm），
而不是在这里扫全表。
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from .similarity import similarity
from .store import RecordStore
from .types import ExistingPatientRecord, OrderCandidate, PatientCandidate
from .warnings import DuplicateOrder, DuplicatePatient, SimilarPatient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionPolicy:
    first_name_weight: float = 0.3
    last_name_weight: float = 0.5
    mrn_weight: float = 0.2
    similarity_threshold: float = 0.7
    candidate_window: int = 100
    order_window: timedelta = timedelta(days=30)
    mrn_prefix_length: int = 6

    def __post_init__(self):
        weights = (self.first_name_weight, self.last_name_weight, self.mrn_weight)
        if any(w < 0 for w in weights):
            raise ValueError(f"Similarity weights must be non-negative, got {weights}")
        if not math.isclose(sum(weights), 1.0, abs_tol=1e-9):
            raise ValueError(f"Similarity weights must sum to 1.0, got {sum(weights)}")
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ValueError("similarity_threshold must be between 0.0 and 1.0")
        if self.candidate_window <= 0:
            raise ValueError("candidate_window must be positive")
        if self.order_window <= timedelta(0):
            raise ValueError("order_window must be positive")
        if self.mrn_prefix_length <= 0:
            raise ValueError("mrn_prefix_length must be positive")


DEFAULT_POLICY = DetectionPolicy()


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class DuplicateDetector:
    """
    Stateless apart from its policy; one instance can serve concurrent calls.

    Store errors propagate unchanged. An empty list always means the check
    ran and found nothing.
    """

    def __init__(self, policy: DetectionPolicy = DEFAULT_POLICY):
        self.policy = policy

    def score_patient(self, candidate: PatientCandidate, existing: ExistingPatientRecord) -> float:
        p = self.policy
        prefix = p.mrn_prefix_length

        score = (
            p.first_name_weight * similarity(candidate.first_name, existing.first_name)
            + p.last_name_weight * similarity(candidate.last_name, existing.last_name)
            + p.mrn_weight * similarity(candidate.mrn[:prefix], existing.mrn[:prefix])
        )
        # 浮点累加可能出现 1.0000000000000002
        return min(max(score, 0.0), 1.0)

    def find_similar_patients(self, candidate: PatientCandidate, store: RecordStore) -> list[SimilarPatient]:
        recent = store.find_recent_patients(self.policy.candidate_window)

        warnings = []
        for record in recent:
            # MRN 完全相同属于硬重复，由 find_duplicate_patient / 上游处理
            if record.mrn == candidate.mrn:
                continue

            score = self.score_patient(candidate, record)
            if score > self.policy.similarity_threshold:
                warnings.append(SimilarPatient(
                    patient_id=record.id,
                    mrn=record.mrn,
                    name=record.full_name,
                    score=score,
                ))

        logger.debug("Similar patient check: mrn=%s checked=%d found=%d",
                     candidate.mrn, len(recent), len(warnings))
        return warnings

    def find_duplicate_patient(self, candidate: PatientCandidate, store: RecordStore) -> list[DuplicatePatient]:
        existing = store.find_patient_by_mrn(candidate.mrn)
        if existing is None:
            return []

        logger.info("Exact MRN duplicate: mrn=%s existing_id=%s", candidate.mrn, existing.id)
        return [DuplicatePatient(patient_id=existing.id, mrn=existing.mrn, name=existing.full_name)]

    def find_duplicate_orders(
        self,
        candidate: OrderCandidate,
        store: RecordStore,
        now: datetime | None = None,
    ) -> list[DuplicateOrder]:
        now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
        window_start = now - self.policy.order_window
        medication = candidate.medication_name.strip().lower()

        warnings = []
        for order in store.find_orders_for_patient(candidate.patient_id):
            if order.medication_name.strip().lower() != medication:
                continue
            if _as_utc(order.created_at) < window_start:
                continue
            warnings.append(DuplicateOrder(
                order_id=order.id,
                medication_name=order.medication_name,
                created_at=order.created_at,
            ))

        if warnings:
            logger.info("Duplicate orders detected: patient_id=%s count=%d",
                        candidate.patient_id, len(warnings))
        return warnings

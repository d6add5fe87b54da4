"""
纯计算引擎：不依赖 Django，不做 I/O（除了调用方传入的 RecordStore 的只读查询）。
"""

from .checker import IntegrityChecker, IntegrityReport
from .detector import DEFAULT_POLICY, DetectionPolicy, DuplicateDetector
from .resolver import ConflictResolver, normalize_display_name
from .similarity import similarity, trigrams
from .store import RecordStore
from .types import (
    ExistingOrder,
    ExistingPatientRecord,
    OrderCandidate,
    PatientCandidate,
    ProviderRecord,
)
from .validators import (
    CodeReason,
    CodeResult,
    check_digit,
    IdentifierReason,
    IdentifierResult,
    format_code,
    format_identifier,
    normalize_identifier,
    validate_code,
    validate_identifier,
)
from .warnings import (
    WARNING_TYPES,
    DuplicateOrder,
    DuplicatePatient,
    IntegrityWarning,
    ProviderConflict,
    Severity,
    SimilarPatient,
    WarningType,
    assert_handled,
)

__all__ = [
    "IntegrityChecker",
    "IntegrityReport",
    "DEFAULT_POLICY",
    "DetectionPolicy",
    "DuplicateDetector",
    "ConflictResolver",
    "normalize_display_name",
    "similarity",
    "trigrams",
    "RecordStore",
    "ExistingOrder",
    "ExistingPatientRecord",
    "OrderCandidate",
    "PatientCandidate",
    "ProviderRecord",
    "CodeReason",
    "CodeResult",
    "check_digit",
    "IdentifierReason",
    "IdentifierResult",
    "format_code",
    "format_identifier",
    "normalize_identifier",
    "validate_code",
    "validate_identifier",
    "WARNING_TYPES",
    "DuplicateOrder",
    "DuplicatePatient",
    "IntegrityWarning",
    "ProviderConflict",
    "Severity",
    "SimilarPatient",
    "WarningType",
    "assert_handled",
]

"""
标识符校验：NPI（10 位 + Luhn 校验位）与 ICD-10 诊断码语法。

两个校验函数都不抛异常，只返回结构化结果。调用方根据 reason 区分：
- 格式错误（EMPTY / WRONG_LENGTH / NON_NUMERIC / MALFORMED）→ 提示用户检查输入格式
- 格式正确但语义无效（CHECKSUM_MISMATCH / RESERVED_CHAPTER）→ 多半是抄录错误
"""

import re
from dataclasses import dataclass
from enum import Enum

# CMS 规定的 NPI 发行方前缀，参与 Luhn 计算但不属于 NPI 本身
NPI_ISSUER_PREFIX = "80840"
NPI_LENGTH = 10

_SEPARATORS_RE = re.compile(r"[\s-]")
_ASCII_DIGITS_RE = re.compile(r"^[0-9]+$")

# 形状检查（任意字母），之后再单独排除保留字母 U。\d 会匹配全角等 Unicode 数字，这里只认 ASCII
ICD10_SHAPE_RE = re.compile(r"^[A-Z][0-9]{2}(\.[0-9]{1,4})?$")
ICD10_RE = re.compile(r"^[A-TV-Z][0-9]{2}(\.[0-9]{1,4})?$")
ICD10_RESERVED_CHAPTER = "U"


# ── NPI ────────────────────────────────────────────────────────────────────

class IdentifierReason(str, Enum):
    EMPTY = "EMPTY"
    WRONG_LENGTH = "WRONG_LENGTH"
    NON_NUMERIC = "NON_NUMERIC"
    CHECKSUM_MISMATCH = "CHECKSUM_MISMATCH"


_IDENTIFIER_MESSAGES = {
    IdentifierReason.EMPTY: "NPI is required.",
    IdentifierReason.WRONG_LENGTH: "NPI must be exactly 10 digits.",
    IdentifierReason.NON_NUMERIC: "NPI may only contain digits (spaces and dashes are ignored).",
    IdentifierReason.CHECKSUM_MISMATCH: "NPI check digit is invalid; please re-check the number for a typo.",
}


@dataclass(frozen=True)
class IdentifierResult:
    normalized: str
    reason: IdentifierReason | None = None

    @property
    def valid(self) -> bool:
        return self.reason is None

    @property
    def is_malformed(self) -> bool:
        return self.reason in (
            IdentifierReason.EMPTY,
            IdentifierReason.WRONG_LENGTH,
            IdentifierReason.NON_NUMERIC,
        )

    @property
    def is_checksum_failure(self) -> bool:
        return self.reason is IdentifierReason.CHECKSUM_MISMATCH

    @property
    def message(self) -> str:
        if self.reason is None:
            return ""
        return _IDENTIFIER_MESSAGES[self.reason]


def normalize_identifier(raw: str) -> str:
    """去掉空白和连字符：'123-456 7893' → '1234567893'。"""
    return _SEPARATORS_RE.sub("", raw or "")


def luhn_checksum_ok(digits: str) -> bool:
    """
    Luhn mod-10 over NPI_ISSUER_PREFIX + digits.

    从右往左，每隔一位乘 2（结果 > 9 时减 9），总和能被 10 整除即通过。
    """
    total = 0
    double = False
    for ch in reversed(NPI_ISSUER_PREFIX + digits):
        digit = int(ch)
        if double:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
        double = not double
    return total % 10 == 0


def check_digit(base: str) -> str:
    """第 10 位校验位：check_digit('123456789') → '3'。base 必须是 9 位数字。"""
    if len(base) != NPI_LENGTH - 1 or not _ASCII_DIGITS_RE.match(base):
        raise ValueError(f"NPI base must be {NPI_LENGTH - 1} digits, got {base!r}")
    for digit in "0123456789":
        if luhn_checksum_ok(base + digit):
            return digit
    raise AssertionError("unreachable: one of ten digits always satisfies mod 10")


def validate_identifier(raw: str) -> IdentifierResult:
    """
    校验 NPI。永不抛异常。

    Examples:
        validate_identifier('1234567893')    → valid
        validate_identifier('123-456-7893')  → valid（分隔符被忽略）
        validate_identifier('1234567890')    → CHECKSUM_MISMATCH
        validate_identifier('123456789A')    → NON_NUMERIC
    """
    cleaned = normalize_identifier(raw)

    if not cleaned:
        return IdentifierResult(cleaned, IdentifierReason.EMPTY)
    # str.isdigit() 也接受全角数字等，这里只认 ASCII
    if not _ASCII_DIGITS_RE.match(cleaned):
        return IdentifierResult(cleaned, IdentifierReason.NON_NUMERIC)
    if len(cleaned) != NPI_LENGTH:
        return IdentifierResult(cleaned, IdentifierReason.WRONG_LENGTH)
    if not luhn_checksum_ok(cleaned):
        return IdentifierResult(cleaned, IdentifierReason.CHECKSUM_MISMATCH)

    return IdentifierResult(cleaned)


def format_identifier(raw: str) -> str:
    """Display form XXX-XXX-XXXX; anything that is not 10 digits comes back unchanged."""
    cleaned = normalize_identifier(raw)
    if len(cleaned) != NPI_LENGTH or not _ASCII_DIGITS_RE.match(cleaned):
        return raw
    return f"{cleaned[:3]}-{cleaned[3:6]}-{cleaned[6:]}"


# ── ICD-10 ─────────────────────────────────────────────────────────────────

class CodeReason(str, Enum):
    EMPTY = "EMPTY"
    MALFORMED = "MALFORMED"
    RESERVED_CHAPTER = "RESERVED_CHAPTER"


_CODE_MESSAGES = {
    CodeReason.EMPTY: "Diagnosis code is required.",
    CodeReason.MALFORMED: (
        "ICD-10 code must be a letter, two digits and an optional decimal "
        "with 1-4 digits (e.g. J45, J45.50)."
    ),
    CodeReason.RESERVED_CHAPTER: "ICD-10 chapter U is reserved and cannot be used.",
}


@dataclass(frozen=True)
class CodeResult:
    normalized: str
    reason: CodeReason | None = None

    @property
    def valid(self) -> bool:
        return self.reason is None

    @property
    def is_malformed(self) -> bool:
        return self.reason in (CodeReason.EMPTY, CodeReason.MALFORMED)

    @property
    def message(self) -> str:
        if self.reason is None:
            return ""
        return _CODE_MESSAGES[self.reason]


def normalize_code(raw: str) -> str:
    return (raw or "").strip().upper()


def validate_code(raw: str) -> CodeResult:
    """
    校验 ICD-10 诊断码语法。永不抛异常。

    3 位码（'J45'）本身合法，不要求小数点。
    """
    cleaned = normalize_code(raw)

    if not cleaned:
        return CodeResult(cleaned, CodeReason.EMPTY)
    if not ICD10_SHAPE_RE.match(cleaned):
        return CodeResult(cleaned, CodeReason.MALFORMED)
    if cleaned[0] == ICD10_RESERVED_CHAPTER:
        return CodeResult(cleaned, CodeReason.RESERVED_CHAPTER)

    return CodeResult(cleaned)


def format_code(raw: str) -> str:
    """
    Best-effort formatter: 'j4550' → 'J45.50', 'e119' → 'E11.9'.

    Never fails; input that cannot be turned into a valid code is returned
    unchanged.
    """
    cleaned = normalize_code(raw)
    if ICD10_RE.match(cleaned):
        return cleaned

    if cleaned.isalnum() and len(cleaned) > 3:
        candidate = f"{cleaned[:3]}.{cleaned[3:]}"
        if validate_code(candidate).valid:
            return candidate

    return raw

"""
ConflictResolver — provider 按 NPI upsert 的语义。

- NPI 不存在            → 新 ProviderRecord（未保存，id=None），无警告
- NPI 存在 + 名字相同    → 返回现有记录，无警告（忽略大小写和多余空白）
- NPI 存在 + 名字不同    → 返回现有记录（绝不覆盖库里的名字）+ ProviderConflict

是否继续由调用方决定。resolver 本身不写库。
"""

import logging

from .store import RecordStore
from .types import ProviderRecord
from .validators import normalize_identifier
from .warnings import ProviderConflict

logger = logging.getLogger(__name__)


def normalize_display_name(name: str) -> str:
    """'  DR.  john   SMITH ' → 'Dr. John Smith'"""
    words = (name or "").lower().split()
    return " ".join(word[:1].upper() + word[1:] for word in words)


def names_match(a: str, b: str) -> bool:
    return " ".join(a.lower().split()) == " ".join(b.lower().split())


class ConflictResolver:

    def resolve_provider(
        self,
        identifier: str,
        display_name: str,
        store: RecordStore,
    ) -> tuple[ProviderRecord, list[ProviderConflict]]:
        npi = normalize_identifier(identifier)
        name = normalize_display_name(display_name)

        existing = store.find_provider_by_identifier(npi)
        if existing is None:
            return ProviderRecord(identifier=npi, display_name=name), []

        if names_match(existing.display_name, name):
            return existing, []

        logger.warning("Provider NPI conflict: npi=%s", npi)
        conflict = ProviderConflict(
            identifier=npi,
            expected_name=existing.display_name,
            actual_name=name,
        )
        return existing, [conflict]

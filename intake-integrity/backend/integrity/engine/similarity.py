"""
Trigram / Jaccard 相似度。

'hello' → {'hel', 'ell', 'llo'}
similarity = |A ∩ B| / |A ∪ B|

必须用集合（去重）而不是多重集：重复字母的字符串（'hello' vs 'hallo'）
按多重集计数会把交集算大，相似度被高估。
"""

TRIGRAM_SIZE = 3


def trigrams(value: str) -> frozenset[str]:
    """Set of contiguous 3-char substrings; shorter strings are their own single trigram."""
    if not value:
        return frozenset()
    if len(value) < TRIGRAM_SIZE:
        return frozenset([value])
    return frozenset(value[i:i + TRIGRAM_SIZE] for i in range(len(value) - TRIGRAM_SIZE + 1))


def similarity(a: str, b: str) -> float:
    a = (a or "").lower()
    b = (b or "").lower()

    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0

    grams_a = trigrams(a)
    grams_b = trigrams(b)
    return len(grams_a & grams_b) / len(grams_a | grams_b)

"""Pre-authored suggestions used whenever live generation is unavailable.

Lookup is a case-insensitive exact match on the whole trimmed name; anything
not in the table gets the generic triple. The table is built once at import
and exposed read-only.
"""
from types import MappingProxyType
from typing import List, Mapping, Tuple

from .models import NameCandidate, NameSuggestion


def _triple(*rows: Tuple[str, str, str, str]) -> Tuple[NameSuggestion, ...]:
    return tuple(
        NameSuggestion(chineseName=c, pinyin=p, chineseMeaning=cm, englishMeaning=em)
        for c, p, cm, em in rows
    )


FALLBACK_NAMES: Mapping[str, Tuple[NameSuggestion, ...]] = MappingProxyType({
    "john": _triple(
        ("约翰", "Yuē hàn", "寓意诚实守信，品格高尚的君子", "Represents honesty and noble character"),
        ("俊涵", "Jùn hán", "俊秀有才华，内涵丰富", "Handsome and talented with rich inner qualities"),
        ("君瀚", "Jūn hàn", "君子风范，学识如海般深广", "Gentlemanly demeanor with vast knowledge like the sea"),
    ),
    "mary": _triple(
        ("玛丽", "Mǎ lì", "美丽优雅，如珍珠般珍贵", "Beautiful and elegant, precious like a pearl"),
        ("美莉", "Měi lì", "美丽如花，茉莉花般纯洁", "Beautiful like a flower, pure as jasmine"),
        ("慧琳", "Huì lín", "智慧如林，才华横溢", "Wise as a forest, exceptionally talented"),
    ),
    "david": _triple(
        ("大卫", "Dà wèi", "伟大的守护者，勇敢坚强", "Great guardian, brave and strong"),
        ("达维", "Dá wéi", "通达事理，维护正义", "Understanding and upholding justice"),
        ("德威", "Dé wēi", "品德高尚，威望卓著", "Noble character with distinguished reputation"),
    ),
})

GENERIC_NAMES: Tuple[NameSuggestion, ...] = _triple(
    ("文华", "Wén huá", "文采斐然，才华横溢", "Literary talent and exceptional ability"),
    ("志远", "Zhì yuǎn", "志向远大，前程似锦", "Ambitious with a bright future"),
    ("雅韵", "Yǎ yùn", "优雅有韵味，气质非凡", "Elegant and graceful with extraordinary temperament"),
)


def lookup(candidate: NameCandidate) -> List[NameSuggestion]:
    return list(FALLBACK_NAMES.get(candidate.lower(), GENERIC_NAMES))

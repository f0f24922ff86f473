"""Statistical shape of a column's values: Numeric, Enum or Mixed."""

from __future__ import annotations

import math
import re
from collections import Counter
from collections.abc import Iterable

from aionxml.models.inference import ValueDomainKind, ValueDomainStatistics

_NUMBER = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")

# Row-instance identifiers such as item1 or npc3 name rows, not categories.
_NUMBERED_IDENTIFIER = re.compile(r"^[A-Za-z_]+\d+$")


def _parse_number(token: str) -> float | None:
    if not _NUMBER.match(token):
        return None
    number = float(token)
    return number if math.isfinite(number) else None


class ValueDomainAnalyzer:
    """Classifies one column sample; blanks are counted but never classified."""

    def __init__(
        self,
        max_enum_values: int = 20,
        enum_distinct_ratio: float = 0.5,
        top_values_limit: int = 100,
    ) -> None:
        self._max_enum_values = max_enum_values
        self._enum_distinct_ratio = enum_distinct_ratio
        self._top_values_limit = top_values_limit

    def analyze_field(self, field_id: int, values: Iterable[str | None]) -> ValueDomainStatistics:
        sample = list(values)
        non_blank = [v.strip() for v in sample if v is not None and v.strip()]
        null_count = len(sample) - len(non_blank)

        if not non_blank:
            return ValueDomainStatistics(
                field_id=field_id,
                kind=ValueDomainKind.MIXED,
                sample_size=len(sample),
                null_count=null_count,
            )

        counts = Counter(non_blank)
        stats = ValueDomainStatistics(
            field_id=field_id,
            distinct_count=len(counts),
            sample_size=len(sample),
            null_count=null_count,
            distinct_rate=len(counts) / len(non_blank),
            top_values=dict(counts.most_common(self._top_values_limit)),
        )

        numbers = [_parse_number(v) for v in non_blank]
        if all(n is not None for n in numbers):
            stats.kind = ValueDomainKind.NUMERIC
            stats.numeric_range = (min(numbers), max(numbers))
            stats.mean = sum(numbers) / len(numbers)
            stats.all_integer = all(n.is_integer() for n in numbers)
            return stats

        if self._is_enum(counts, len(non_blank)):
            stats.kind = ValueDomainKind.ENUM
            stats.frequency_table = dict(counts.most_common())
        else:
            stats.kind = ValueDomainKind.MIXED
        return stats

    def _is_enum(self, counts: Counter[str], non_blank: int) -> bool:
        distinct = len(counts)
        if distinct > self._max_enum_values:
            return False
        if distinct > non_blank * self._enum_distinct_ratio:
            return False
        return not any(_NUMBERED_IDENTIFIER.match(token) for token in counts)

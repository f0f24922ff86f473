"""Field type guess from a column name, optionally refined by sample values.

Name rules are an ordered tuple evaluated first-match-wins:

    *_id            -> Id       90
    is_* / can_*    -> Boolean  90
    *_type          -> Enum     75
    stat keyword    -> Numeric  60   (any underscore segment, trailing digits stripped)
    anything else   -> String   30

``level`` therefore resolves to Numeric: the keyword rule runs before the
String default.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import NamedTuple

from aionxml.models.inference import FieldType, InferenceResult

STAT_KEYWORDS: frozenset[str] = frozenset({
    "attr", "attribute", "bonus", "level", "lv", "ratio", "rate", "prob", "chance",
    "count", "cnt", "amount", "exp", "hp", "mp", "delay", "cooltime",
})

_NUMBER = re.compile(r"^[+-]?\d+(?:\.\d+)?$")


class NameRule(NamedTuple):
    predicate: Callable[[str], bool]
    field_type: FieldType
    confidence: int


def _has_stat_keyword(name: str) -> bool:
    return any(segment.rstrip("0123456789") in STAT_KEYWORDS for segment in name.split("_"))


NAME_RULES: tuple[NameRule, ...] = (
    NameRule(lambda n: n.endswith("_id"), FieldType.ID, 90),
    NameRule(lambda n: n.startswith(("is_", "can_")), FieldType.BOOLEAN, 90),
    NameRule(lambda n: n.endswith("_type"), FieldType.ENUM, 75),
    NameRule(_has_stat_keyword, FieldType.NUMERIC, 60),
)
DEFAULT_RULE = NameRule(lambda n: True, FieldType.STRING, 30)


class FieldTypeInferrer:
    """Independent field-type hypothesis; never raises on odd names or values."""

    def __init__(
        self,
        rules: tuple[NameRule, ...] = NAME_RULES,
        max_enum_values: int = 20,
        numeric_enum_values: int = 10,
        enum_distinct_ratio: float = 0.5,
    ) -> None:
        self._rules = rules
        self._max_enum_values = max_enum_values
        self._enum_distinct_ratio = enum_distinct_ratio
        self._numeric_enum_values = numeric_enum_values

    def infer_from_name(self, field_name: str | None) -> InferenceResult:
        name = (field_name or "").strip().lower()
        if not name:
            return InferenceResult(field_type=FieldType.UNKNOWN, confidence=0)
        rule = next((r for r in self._rules if r.predicate(name)), DEFAULT_RULE)
        return InferenceResult(field_type=rule.field_type, confidence=rule.confidence)

    def infer_from_values(self, field_name: str | None, values: Iterable[str | None]) -> InferenceResult:
        """Refine a weak name-only String guess with observed values.

        Only a String guess is upgraded: all-numeric values give Numeric (90);
        few repeating distinct values give Enum (85). A value-derived Numeric
        column is demoted to Enum only when it has very few distinct values.
        """
        result = self.infer_from_name(field_name)
        non_blank = [v.strip() for v in values if v is not None and v.strip()]
        if not non_blank or result.field_type is not FieldType.STRING:
            return result

        if all(_NUMBER.match(v) for v in non_blank):
            result = InferenceResult(field_type=FieldType.NUMERIC, confidence=90)

        distinct = len(set(non_blank))
        if distinct <= self._max_enum_values and distinct < len(non_blank) * self._enum_distinct_ratio:
            if result.field_type is FieldType.STRING or distinct <= self._numeric_enum_values:
                result = InferenceResult(field_type=FieldType.ENUM, confidence=85)
        return result

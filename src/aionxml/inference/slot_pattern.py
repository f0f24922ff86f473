"""Repeated ``bonus_attrN`` slot families and their "<attr_code> <number>" values."""

from __future__ import annotations

import re
from collections import Counter, defaultdict
from collections.abc import Iterable, Mapping

from aionxml.models.inference import (
    AttrRange,
    BonusAttrSummary,
    BonusAttrValue,
    SlotCategory,
    SlotInfo,
)

_SLOT_FIELD = re.compile(
    r"^(?:(?:physical|magical)_)?bonus_attr(?:_(?P<group>[a-z]))?(?P<index>\d+)$",
    re.IGNORECASE,
)
_NUMBER = re.compile(r"^[+-]?\d+(?:\.\d+)?$")

# Checked in order; the first matching prefix sets the category.
CATEGORY_PREFIXES: tuple[tuple[str, SlotCategory], ...] = (
    ("physical_", SlotCategory.PHYSICAL),
    ("magical_", SlotCategory.MAGICAL),
)


class BonusAttrPatternAnalyzer:

    def extract_slot_info(self, field_name: str | None) -> SlotInfo | None:
        name = (field_name or "").strip()
        match = _SLOT_FIELD.match(name)
        if match is None:
            return None
        index = int(match.group("index"))
        if index < 1:
            return None

        lowered = name.lower()
        category = SlotCategory.GENERIC
        for prefix, prefix_category in CATEGORY_PREFIXES:
            if lowered.startswith(prefix):
                category = prefix_category
                break

        group = match.group("group")
        return SlotInfo(category=category, slot_index=index, group=group.lower() if group else None)

    def is_bonus_attr_field(self, field_name: str | None) -> bool:
        return self.extract_slot_info(field_name) is not None

    def parse_value(self, raw: str | None, slot_name: str | None = None) -> BonusAttrValue | None:
        """Parse ``"max_hp 500"``; anything but exactly two tokens with a numeric second is None."""
        if raw is None:
            return None
        tokens = raw.split()
        if len(tokens) != 2 or not _NUMBER.match(tokens[1]):
            return None
        return BonusAttrValue(
            attr_code=tokens[0],
            value=float(tokens[1]),
            raw_value=raw,
            slot_name=slot_name,
        )

    def analyze_group(self, row: Mapping[str, str | None]) -> list[BonusAttrValue]:
        """Parsed values of every slot field in one row, in slot order."""
        slots: list[tuple[SlotInfo, BonusAttrValue]] = []
        for field_name, raw in row.items():
            info = self.extract_slot_info(field_name)
            if info is None:
                continue
            value = self.parse_value(raw, slot_name=field_name)
            if value is not None:
                slots.append((info, value))
        slots.sort(key=lambda pair: (pair[0].category, pair[0].group or "", pair[0].slot_index))
        return [value for _, value in slots]

    def attr_usage(self, values: Iterable[BonusAttrValue]) -> dict[str, int]:
        return dict(Counter(v.attr_code for v in values).most_common())

    def analyze_value_range(self, values: Iterable[BonusAttrValue]) -> dict[str, AttrRange]:
        by_attr: dict[str, list[float]] = defaultdict(list)
        for v in values:
            by_attr[v.attr_code].append(v.value)
        return {
            code: AttrRange(min=min(nums), max=max(nums), avg=sum(nums) / len(nums), count=len(nums))
            for code, nums in by_attr.items()
        }

    def summarize(self, values: Iterable[BonusAttrValue]) -> BonusAttrSummary:
        values = list(values)
        usage = self.attr_usage(values)
        return BonusAttrSummary(
            total_values=len(values),
            distinct_attrs=len(usage),
            usage=usage,
            ranges=self.analyze_value_range(values),
        )

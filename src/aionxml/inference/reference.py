"""Foreign-reference detection from field naming conventions."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import NamedTuple

from aionxml.models.inference import ReferenceDetectionResult


class EntityTarget(NamedTuple):
    table_name: str
    mechanism_code: str | None


ENTITY_TABLE: dict[str, EntityTarget] = {
    "item": EntityTarget("items", "ITEM"),
    "npc": EntityTarget("npcs", "NPC"),
    "monster": EntityTarget("npcs", "NPC"),
    "skill": EntityTarget("skills", "SKILL"),
    "quest": EntityTarget("quests", "QUEST"),
    "title": EntityTarget("titles", "TITLE"),
    "map": EntityTarget("maps", None),
    "world": EntityTarget("worlds", None),
    "instance": EntityTarget("instances", "INSTANCE"),
    "drop": EntityTarget("drops", "DROP"),
    "pet": EntityTarget("pets", "PET"),
    "toypet": EntityTarget("toypets", "PET"),
    "effect": EntityTarget("effects", None),
    "buff": EntityTarget("effects", None),
}

TARGET_FIELD = "id"

_ID_FIELD = re.compile(r"^(?P<stem>[a-z0-9_]*[a-z0-9])_id\d*$")
# itemid, npcid: only trusted when the stem is a known entity
_JOINED_ID_FIELD = re.compile(r"^(?P<stem>[a-z0-9_]*[a-z])id\d*$")
_FLAG_PREFIXES = ("is_", "can_")

NOT_A_REFERENCE = ReferenceDetectionResult(is_reference=False, confidence=0)


def pluralize(stem: str) -> str:
    """Naive English plural used for unknown reference stems."""
    if stem.endswith("y") and len(stem) > 1:
        return stem[:-1] + "ies"
    if stem.endswith(("s", "x", "ch", "sh")):
        return stem + "es"
    return stem + "s"


def _reference(table_name: str, mechanism_code: str | None, confidence: int) -> ReferenceDetectionResult:
    return ReferenceDetectionResult(
        is_reference=True,
        target_table_name=table_name,
        target_field_name=TARGET_FIELD,
        target_mechanism_code=mechanism_code,
        confidence=confidence,
    )


def _known_entity(stem: str) -> EntityTarget | None:
    stem = stem.rstrip("0123456789")
    target = ENTITY_TABLE.get(stem)
    if target is None:
        target = ENTITY_TABLE.get(stem.rsplit("_", 1)[-1].rstrip("0123456789"))
    return target


def _known_id_rule(name: str) -> ReferenceDetectionResult | None:
    match = _ID_FIELD.match(name) or _JOINED_ID_FIELD.match(name)
    if match is None:
        return None
    target = _known_entity(match.group("stem"))
    if target is None:
        return None
    return _reference(target.table_name, target.mechanism_code, 90)


def _unknown_id_rule(name: str) -> ReferenceDetectionResult | None:
    match = _ID_FIELD.match(name)
    if match is None:
        return None
    return _reference(pluralize(match.group("stem")), None, 60)


def _bare_entity_rule(name: str) -> ReferenceDetectionResult | None:
    if name.startswith(_FLAG_PREFIXES):
        return None
    last = name.rsplit("_", 1)[-1].rstrip("0123456789")
    target = ENTITY_TABLE.get(last)
    if target is None:
        return None
    return _reference(target.table_name, target.mechanism_code, 75)


ReferenceRule = Callable[[str], ReferenceDetectionResult | None]

REFERENCE_RULES: tuple[ReferenceRule, ...] = (
    _known_id_rule,
    _unknown_id_rule,
    _bare_entity_rule,
)


class ReferenceDetector:
    """First matching rule decides; no match means not a reference."""

    def __init__(self, rules: tuple[ReferenceRule, ...] = REFERENCE_RULES) -> None:
        self._rules = rules

    def detect_field(self, field_name: str | None) -> ReferenceDetectionResult:
        name = (field_name or "").strip().lower()
        if not name or name == "id":
            return NOT_A_REFERENCE
        for rule in self._rules:
            result = rule(name)
            if result is not None:
                return result
        return NOT_A_REFERENCE

    def detect_fields(self, field_names: Iterable[str]) -> dict[str, ReferenceDetectionResult]:
        return {name: self.detect_field(name) for name in field_names}

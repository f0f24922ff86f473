"""Tests for ReferenceDetector."""

from __future__ import annotations

import pytest

from aionxml.inference.reference import ReferenceDetector, pluralize


@pytest.fixture
def detector():
    return ReferenceDetector()


class TestKnownIdFields:
    @pytest.mark.parametrize("name, table, code", [
        ("item_id", "items", "ITEM"),
        ("npc_id", "npcs", "NPC"),
        ("monster_id", "npcs", "NPC"),
        ("skill_id2", "skills", "SKILL"),
        ("reward_item_id", "items", "ITEM"),
        ("toypet_id", "toypets", "PET"),
        ("world_id", "worlds", None),
        ("buff_id", "effects", None),
        ("itemid", "items", "ITEM"),
        ("npcid", "npcs", "NPC"),
        ("reward_itemid2", "items", "ITEM"),
    ])
    def test_high_confidence(self, detector, name, table, code):
        result = detector.detect_field(name)
        assert result.is_reference
        assert result.target_table_name == table
        assert result.target_field_name == "id"
        assert result.target_mechanism_code == code
        assert result.confidence == 90


class TestUnknownIdFields:
    @pytest.mark.parametrize("name, table", [
        ("guild_id", "guilds"),
        ("category_id", "categories"),
        ("box_id", "boxes"),
        ("match_id", "matches"),
    ])
    def test_pluralized_guess(self, detector, name, table):
        result = detector.detect_field(name)
        assert result.is_reference
        assert result.target_table_name == table
        assert result.target_mechanism_code is None
        assert result.confidence == 60


class TestBareEntityFields:
    @pytest.mark.parametrize("name, table", [
        ("reward_item1", "items"),
        ("npc", "npcs"),
        ("quest", "quests"),
    ])
    def test_medium_confidence(self, detector, name, table):
        result = detector.detect_field(name)
        assert result.is_reference
        assert result.target_table_name == table
        assert result.confidence == 75

    def test_boolean_flag_is_not_a_reference(self, detector):
        assert not detector.detect_field("is_quest").is_reference


class TestNotReferences:
    @pytest.mark.parametrize("name", ["name", "id", "", "level", "description", "paid", "valid"])
    def test_zero_confidence(self, detector, name):
        result = detector.detect_field(name)
        assert not result.is_reference
        assert result.confidence == 0
        assert result.target_table_name is None


def test_detect_fields_batch(detector):
    results = detector.detect_fields(["item_id", "name"])
    assert results["item_id"].is_reference
    assert not results["name"].is_reference


@pytest.mark.parametrize("stem, plural", [
    ("guild", "guilds"), ("city", "cities"), ("box", "boxes"), ("bus", "buses"), ("dish", "dishes"),
])
def test_pluralize(stem, plural):
    assert pluralize(stem) == plural

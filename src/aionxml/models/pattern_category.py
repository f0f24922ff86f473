"""Fixed taxonomy of game-mechanism categories used to tag inferred patterns.

The table is built once at import and never changes at runtime. Folder-only
groupings (animation markers, character presets, subzones) are assigned by the
upstream scanner from directory names and are not part of this taxonomy.
"""

from __future__ import annotations

from pydantic import BaseModel

from aionxml.core.exceptions import CategoryNotFoundError


class PatternCategory(BaseModel):
    """One game-mechanism category."""

    model_config = {"frozen": True}

    mechanism_code: str
    mechanism_icon: str
    mechanism_name: str
    description: str = ""
    color: str = ""


def _category(code: str, icon: str, name: str, description: str, color: str) -> PatternCategory:
    return PatternCategory(
        mechanism_code=code,
        mechanism_icon=icon,
        mechanism_name=name,
        description=description,
        color=color,
    )


PATTERN_CATEGORIES: tuple[PatternCategory, ...] = (
    # --- Game-specific systems ---
    _category("ABYSS", "⚔️", "Abyss", "Abyss points, ranks, fortress sieges and artifacts", "#8B0000"),
    _category("LUNA", "🌙", "Luna currency", "Luna shop, draws and spending", "#E6E6FA"),
    _category("HOUSING", "🏠", "Housing", "Houses, furniture and housing shops", "#8B4513"),
    _category("STIGMA_TRANSFORM", "🔮", "Stigma & transform", "Stigma stones and transformations", "#9400D3"),
    _category("PET", "🐾", "Pets", "Pets, mounts and familiars", "#FF69B4"),
    # --- Combat ---
    _category("SKILL", "✨", "Skills", "Skill definitions, learning and passive skills", "#4169E1"),
    _category("NPC_AI", "🤖", "NPC AI", "NPC behaviour patterns and AI decisions", "#006400"),
    _category("NPC", "👤", "NPCs", "NPCs, monsters, bosses and spawns", "#228B22"),
    _category("ITEM", "🎒", "Items", "Item, equipment and consumable definitions", "#DAA520"),
    _category("ENCHANT", "⚡", "Enchanting", "Enchanting, upgrades and tuning", "#00CED1"),
    # --- Content ---
    _category("QUEST", "📜", "Quests", "Story, side and daily quests", "#FF8C00"),
    _category("INSTANCE", "🏰", "Instances", "Instanced dungeons, cooldowns and difficulty", "#800080"),
    _category("DROP", "💎", "Drops", "Drop tables, rewards and chests", "#32CD32"),
    _category("CRAFT", "🔨", "Crafting", "Recipes, materials and disassembly", "#CD853F"),
    # --- Economy ---
    _category("SHOP", "🛒", "Shops & trade", "Goods lists, NPC shops and trading", "#FFD700"),
    _category("GOTCHA", "🎰", "Gacha", "Draw configuration, odds and prize pools", "#FF1493"),
    # --- Progression ---
    _category("PLAYER_GROWTH", "📈", "Player growth", "Experience tables and level-up growth", "#00FF7F"),
    _category("TITLE", "🏆", "Titles", "Title unlocks, stats and display", "#FFB6C1"),
    # --- Social ---
    _category("LEGION", "🛡️", "Legions", "Legion creation, territory and wars", "#4682B4"),
    _category("PVP_RANKING", "🥇", "PvP & ranking", "Rankings, arenas and battlegrounds", "#DC143C"),
    # --- World ---
    _category("PORTAL", "🌀", "Portals", "Portals, flight paths and teleports", "#00BFFF"),
    _category("TIME_EVENT", "⏰", "Timed events", "Login rewards, limited-time and seasonal events", "#FF4500"),
    # --- Client resources ---
    _category("CLIENT_STRINGS", "📝", "Client strings", "Localised UI, item and skill text", "#708090"),
    _category("ANIMATION", "🎬", "Animation", "Animation configuration", "#9370DB"),
    # --- Configuration ---
    _category("ID_MAPPING", "🔢", "ID mappings", "Item, NPC and other id mapping tables", "#778899"),
    _category("GAME_CONFIG", "⚙️", "Game config", "Global settings, constants and parameters", "#696969"),
    # --- Catch-all ---
    _category("OTHER", "📄", "Other", "Unclassified table files", "#A9A9A9"),
)

_BY_CODE: dict[str, PatternCategory] = {c.mechanism_code: c for c in PATTERN_CATEGORIES}


def all_categories() -> tuple[PatternCategory, ...]:
    return PATTERN_CATEGORIES


def category_codes() -> list[str]:
    return [c.mechanism_code for c in PATTERN_CATEGORIES]


def get_category(code: str) -> PatternCategory | None:
    return _BY_CODE.get(code.upper())


def require_category(code: str) -> PatternCategory:
    category = get_category(code)
    if category is None:
        raise CategoryNotFoundError(code)
    return category

from __future__ import annotations

from typing import Any, Callable

from srd.fields import (
    first,
    first_value,
    format_number,
    get_bool,
    get_float,
    get_int,
    get_list,
    get_lower,
    get_str,
    get_upper,
    is_number,
    join,
    leading_int,
    lookup,
    names,
    truncate,
)
from srd.schemas import (
    ArmorRow,
    BatchKind,
    ClassRow,
    EntityKind,
    MagicItemRow,
    MonsterAction,
    MonsterRow,
    RaceRow,
    Row,
    SpellRow,
    WeaponRow,
)

MAGIC_ITEM_DESCRIPTION_LIMIT = 2000

ABILITY_FIELDS = {
    "strength": "strength",
    "dex": "dexterity",
    "con": "constitution",
    "intl": "intelligence",
    "wis": "wisdom",
    "cha": "charisma",
}


class MappingError(ValueError):
    pass


def _identity(record: Any, slug: str | None, name: str | None) -> dict:
    resolved_slug = slug or get_str(record, "index", default="")
    if not resolved_slug:
        raise MappingError("Record has no slug.")
    resolved_name = get_str(record, "name", default="") or name or resolved_slug
    return {"slug": resolved_slug, "name": resolved_name}


def _string_or_empty(value: Any) -> str:
    return value if isinstance(value, str) else ""


def map_action(entry: Any) -> MonsterAction:
    damage = first(entry, "damage").value
    return MonsterAction(
        name=get_str(entry, "name", default=""),
        attack_bonus=get_int(entry, "attack_bonus", default=0),
        damage_dice=get_str(damage, "damage_dice", default="1d6"),
        damage_type=get_str(damage, "damage_type", "name", default="bludgeoning"),
    )


def map_monster(record: Any, *, slug: str | None = None, name: str | None = None) -> MonsterRow:
    abilities = {
        column: get_int(record, source, default=10) for column, source in ABILITY_FIELDS.items()
    }
    return MonsterRow(
        **_identity(record, slug, name),
        size=get_str(record, "size", default="Medium"),
        type=get_str(record, "type", default=""),
        ac=get_int(
            first(record, "armor_class").value,
            "value",
            default=get_int(record, "armor_class", default=10),
        ),
        hp=get_int(record, "hit_points", default=0),
        hit_dice=get_str(record, "hit_dice", default=""),
        speed=leading_int(lookup(record, "speed", "walk").value, default=30),
        **abilities,
        cr=format_number(lookup(record, "challenge_rating").value, default="0"),
        xp=get_int(record, "xp", default=0),
        actions=[
            map_action(entry) for entry in get_list(record, "actions") if isinstance(entry, dict)
        ],
    )


def map_spell(record: Any, *, slug: str | None = None, name: str | None = None) -> SpellRow:
    return SpellRow(
        **_identity(record, slug, name),
        level=get_int(record, "level", default=0),
        school=get_lower(record, "school", "name", default="evocation"),
        casting_time=get_str(record, "casting_time", default=""),
        range=get_str(record, "range", default=""),
        components=join(
            item for item in get_list(record, "components") if isinstance(item, str)
        ),
        duration=get_str(record, "duration", default=""),
        description=truncate(_string_or_empty(first(record, "desc").value)),
        damage_dice=_string_or_empty(first_value(record, "damage", "damage_at_slot_level").value),
        damage_type=get_lower(record, "damage", "damage_type", "name", default=""),
        saving_throw=get_upper(record, "dc", "dc_type", "index", default=""),
        healing=_string_or_empty(first_value(record, "heal_at_slot_level").value),
        ritual=get_bool(record, "ritual"),
        concentration=get_bool(record, "concentration"),
        classes=names(record, "classes", key="index"),
    )


def map_class(record: Any, *, slug: str | None = None, name: str | None = None) -> ClassRow:
    return ClassRow(
        **_identity(record, slug, name),
        hit_die=get_int(record, "hit_die", default=8),
        primary_ability="",
        saving_throws=join(names(record, "saving_throws", key="index", transform=str.upper)),
        spellcasting_ability=get_upper(
            record, "spellcasting", "spellcasting_ability", "index", default=""
        ),
    )


def map_race(record: Any, *, slug: str | None = None, name: str | None = None) -> RaceRow:
    ability_mods: dict[str, int] = {}
    for bonus in get_list(record, "ability_bonuses"):
        ability = get_upper(bonus, "ability_score", "index", default="")
        if not ability or not is_number(lookup(bonus, "bonus").value):
            continue
        ability_mods[ability] = get_int(bonus, "bonus", default=0)
    return RaceRow(
        **_identity(record, slug, name),
        size=get_str(record, "size", default="Medium"),
        speed=get_int(record, "speed", default=30),
        ability_mods=ability_mods,
        traits=join(names(record, "traits")),
    )


def map_weapon(record: Any, *, slug: str | None = None, name: str | None = None) -> WeaponRow:
    return WeaponRow(
        **_identity(record, slug, name),
        type=get_lower(record, "weapon_category", default="simple"),
        damage=get_str(record, "damage", "damage_dice", default="1d6"),
        damage_type=get_lower(record, "damage", "damage_type", "name", default="bludgeoning"),
        weight=get_float(record, "weight", default=0.0),
        properties=join(names(record, "properties")),
        weapon_range=get_lower(record, "weapon_range", default="melee"),
    )


def armor_dex_bonus(record: Any) -> str:
    if not get_bool(record, "armor_class", "dex_bonus"):
        return ""
    max_bonus = lookup(record, "armor_class", "max_bonus")
    if is_number(max_bonus.value):
        return f"+DEX (max {int(max_bonus.value)})"
    return "+DEX"


def map_armor(record: Any, *, slug: str | None = None, name: str | None = None) -> ArmorRow:
    return ArmorRow(
        **_identity(record, slug, name),
        type=get_lower(record, "armor_category", default="light"),
        ac=get_int(record, "armor_class", "base", default=10),
        ac_bonus=armor_dex_bonus(record),
        str_req=get_int(record, "str_minimum", default=0),
        stealth_disadvantage=get_bool(record, "stealth_disadvantage"),
        weight=get_float(record, "weight", default=0.0),
    )


def map_magic_item(
    record: Any, *, slug: str | None = None, name: str | None = None
) -> MagicItemRow:
    paragraphs = [item for item in get_list(record, "desc") if isinstance(item, str)]
    return MagicItemRow(
        **_identity(record, slug, name),
        rarity=get_lower(record, "rarity", "name", default="common"),
        type=get_lower(record, "equipment_category", "name", default="wondrous item"),
        attunement=any("requires attunement" in item.lower() for item in paragraphs),
        description=truncate("\n".join(paragraphs), MAGIC_ITEM_DESCRIPTION_LIMIT),
    )


EQUIPMENT_MAPPERS: dict[str, Callable[..., Row]] = {
    "weapon": map_weapon,
    "armor": map_armor,
}


def map_equipment(record: Any, *, slug: str | None = None, name: str | None = None) -> Row | None:
    category = get_str(record, "equipment_category", "index", default="")
    mapper = EQUIPMENT_MAPPERS.get(category)
    if mapper is None:
        return None
    return mapper(record, slug=slug, name=name)


MAPPERS: dict[BatchKind, Callable[..., Row | None]] = {
    BatchKind.MONSTERS: map_monster,
    BatchKind.SPELLS: map_spell,
    BatchKind.CLASSES: map_class,
    BatchKind.RACES: map_race,
    BatchKind.EQUIPMENT: map_equipment,
    BatchKind.MAGIC_ITEMS: map_magic_item,
}

# Rows a batch kind can produce; equipment fans out to two tables.
ENTITY_KINDS: dict[BatchKind, tuple[EntityKind, ...]] = {
    BatchKind.MONSTERS: (EntityKind.MONSTER,),
    BatchKind.SPELLS: (EntityKind.SPELL,),
    BatchKind.CLASSES: (EntityKind.CLASS,),
    BatchKind.RACES: (EntityKind.RACE,),
    BatchKind.EQUIPMENT: (EntityKind.WEAPON, EntityKind.ARMOR),
    BatchKind.MAGIC_ITEMS: (EntityKind.MAGIC_ITEM,),
}

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EntityKind(str, Enum):
    MONSTER = "monster"
    SPELL = "spell"
    CLASS = "class"
    RACE = "race"
    WEAPON = "weapon"
    ARMOR = "armor"
    MAGIC_ITEM = "magic_item"


class BatchKind(str, Enum):
    MONSTERS = "monsters"
    SPELLS = "spells"
    CLASSES = "classes"
    RACES = "races"
    EQUIPMENT = "equipment"
    MAGIC_ITEMS = "magic-items"


KIND_ORDER: tuple[BatchKind, ...] = (
    BatchKind.MONSTERS,
    BatchKind.SPELLS,
    BatchKind.CLASSES,
    BatchKind.RACES,
    BatchKind.EQUIPMENT,
    BatchKind.MAGIC_ITEMS,
)

TABLE_BY_KIND: dict[EntityKind, str] = {
    EntityKind.MONSTER: "monsters",
    EntityKind.SPELL: "spells",
    EntityKind.CLASS: "classes",
    EntityKind.RACE: "races",
    EntityKind.WEAPON: "weapons",
    EntityKind.ARMOR: "armor",
    EntityKind.MAGIC_ITEM: "magic_items",
}


class Row(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    kind: EntityKind = Field(exclude=True)
    slug: str = Field(min_length=1)
    name: str

    def columns(self) -> dict:
        return self.model_dump(by_alias=True)


class MonsterAction(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    attack_bonus: int = 0
    damage_dice: str = "1d6"
    damage_type: str = "bludgeoning"


class MonsterRow(Row):
    kind: EntityKind = Field(default=EntityKind.MONSTER, exclude=True)
    size: str = "Medium"
    type: str = ""
    ac: int = 10
    hp: int = 0
    hit_dice: str = ""
    speed: int = 30
    strength: int = Field(default=10, alias="str")
    dex: int = 10
    con: int = 10
    intl: int = 10
    wis: int = 10
    cha: int = 10
    cr: str = "0"
    xp: int = 0
    actions: list[MonsterAction] = Field(default_factory=list)


class SpellRow(Row):
    kind: EntityKind = Field(default=EntityKind.SPELL, exclude=True)
    level: int = 0
    school: str = "evocation"
    casting_time: str = ""
    range: str = ""
    components: str = ""
    duration: str = ""
    description: str = ""
    damage_dice: str = ""
    damage_type: str = ""
    saving_throw: str = ""
    healing: str = ""
    ritual: bool = False
    concentration: bool = False
    classes: list[str] = Field(default_factory=list)


class ClassRow(Row):
    kind: EntityKind = Field(default=EntityKind.CLASS, exclude=True)
    hit_die: int = 8
    primary_ability: str = ""
    saving_throws: str = ""
    spellcasting_ability: str = ""


class RaceRow(Row):
    kind: EntityKind = Field(default=EntityKind.RACE, exclude=True)
    size: str = "Medium"
    speed: int = 30
    ability_mods: dict[str, int] = Field(default_factory=dict)
    traits: str = ""


class WeaponRow(Row):
    kind: EntityKind = Field(default=EntityKind.WEAPON, exclude=True)
    type: str = "simple"
    damage: str = "1d6"
    damage_type: str = "bludgeoning"
    weight: float = 0.0
    properties: str = ""
    weapon_range: str = "melee"


class ArmorRow(Row):
    kind: EntityKind = Field(default=EntityKind.ARMOR, exclude=True)
    type: str = "light"
    ac: int = 10
    ac_bonus: str = ""
    str_req: int = 0
    stealth_disadvantage: bool = False
    weight: float = 0.0


class MagicItemRow(Row):
    kind: EntityKind = Field(default=EntityKind.MAGIC_ITEM, exclude=True)
    rarity: str = "common"
    type: str = "wondrous item"
    attunement: bool = False
    description: str = ""

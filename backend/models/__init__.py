from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Float, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    pass


class SRDMixin:
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    source: Mapped[str] = mapped_column(String(50), server_default="srd")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class Monster(SRDMixin, Base):
    __tablename__ = "monsters"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    size: Mapped[str | None] = mapped_column(String(20), index=True)
    type: Mapped[str | None] = mapped_column(String(50), index=True)
    ac: Mapped[int | None] = mapped_column(Integer)
    hp: Mapped[int | None] = mapped_column(Integer, index=True)
    hit_dice: Mapped[str | None] = mapped_column(String(20))
    speed: Mapped[int | None] = mapped_column(Integer)
    str_: Mapped[int | None] = mapped_column("str", Integer)
    dex: Mapped[int | None] = mapped_column(Integer)
    con: Mapped[int | None] = mapped_column(Integer)
    intl: Mapped[int | None] = mapped_column(Integer)
    wis: Mapped[int | None] = mapped_column(Integer)
    cha: Mapped[int | None] = mapped_column(Integer)
    cr: Mapped[str | None] = mapped_column(String(10), index=True)
    xp: Mapped[int | None] = mapped_column(Integer)
    actions: Mapped[list | None] = mapped_column(JSONType)


class Spell(SRDMixin, Base):
    __tablename__ = "spells"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    level: Mapped[int | None] = mapped_column(Integer, index=True)
    school: Mapped[str | None] = mapped_column(String(50), index=True)
    casting_time: Mapped[str | None] = mapped_column(String(50))
    range: Mapped[str | None] = mapped_column(String(50))
    components: Mapped[str | None] = mapped_column(String(50))
    duration: Mapped[str | None] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(Text)
    damage_dice: Mapped[str | None] = mapped_column(String(20))
    damage_type: Mapped[str | None] = mapped_column(String(30))
    saving_throw: Mapped[str | None] = mapped_column(String(10))
    healing: Mapped[str | None] = mapped_column(String(20))
    ritual: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    concentration: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    classes: Mapped[list | None] = mapped_column(JSONType)


class CharacterClass(SRDMixin, Base):
    __tablename__ = "classes"

    name: Mapped[str] = mapped_column(String(50), nullable=False)
    hit_die: Mapped[int | None] = mapped_column(Integer)
    primary_ability: Mapped[str | None] = mapped_column(String(20))
    saving_throws: Mapped[str | None] = mapped_column(String(50))
    spellcasting_ability: Mapped[str | None] = mapped_column(String(10))


class Race(SRDMixin, Base):
    __tablename__ = "races"

    name: Mapped[str] = mapped_column(String(50), nullable=False)
    size: Mapped[str | None] = mapped_column(String(20))
    speed: Mapped[int | None] = mapped_column(Integer)
    ability_mods: Mapped[dict | None] = mapped_column(JSONType)
    traits: Mapped[str | None] = mapped_column(Text)


class Weapon(SRDMixin, Base):
    __tablename__ = "weapons"

    name: Mapped[str] = mapped_column(String(50), nullable=False)
    type: Mapped[str | None] = mapped_column(String(20), index=True)
    damage: Mapped[str | None] = mapped_column(String(20))
    damage_type: Mapped[str | None] = mapped_column(String(20), index=True)
    weight: Mapped[float | None] = mapped_column(Float)
    properties: Mapped[str | None] = mapped_column(Text)
    weapon_range: Mapped[str | None] = mapped_column(String(20), index=True)


class Armor(SRDMixin, Base):
    __tablename__ = "armor"

    name: Mapped[str] = mapped_column(String(50), nullable=False)
    type: Mapped[str | None] = mapped_column(String(20))
    ac: Mapped[int | None] = mapped_column(Integer)
    ac_bonus: Mapped[str | None] = mapped_column(String(20))
    str_req: Mapped[int | None] = mapped_column(Integer)
    stealth_disadvantage: Mapped[bool] = mapped_column(Boolean, default=False)
    weight: Mapped[float | None] = mapped_column(Float)


class MagicItem(SRDMixin, Base):
    __tablename__ = "magic_items"

    name: Mapped[str] = mapped_column(String(150), nullable=False)
    rarity: Mapped[str | None] = mapped_column(String(30), index=True)
    type: Mapped[str | None] = mapped_column(String(50))
    attunement: Mapped[bool] = mapped_column(Boolean, default=False)
    description: Mapped[str | None] = mapped_column(Text)


MODELS_BY_TABLE: dict[str, type[Base]] = {
    model.__tablename__: model
    for model in (Monster, Spell, CharacterClass, Race, Weapon, Armor, MagicItem)
}

from typing import Any

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy import Text, cast, func, inspect

from db import SessionLocal, check_db_connection
from models import MODELS_BY_TABLE, Monster, Spell

DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100

MONSTER_SORTS = {
    "hp": Monster.hp.asc(),
    "hp_desc": Monster.hp.desc(),
    "cr": Monster.cr.asc(),
    "name": Monster.name.asc(),
}

SPELL_SORTS = {
    "level": Spell.level.asc(),
    "level_desc": Spell.level.desc(),
    "school": Spell.school.asc(),
    "name": Spell.name.asc(),
}

HIDDEN_COLUMNS = {"id", "created_at"}


class PaginatedResponse(BaseModel):
    data: list[dict[str, Any]]
    count: int
    total: int
    page: int
    per_page: int
    total_pages: int
    has_more: bool


def _pagination(page: str | None, per_page: str | None) -> tuple[int, int]:
    resolved_page = 1
    resolved_per_page = DEFAULT_PER_PAGE
    if page and page.isdigit() and int(page) > 0:
        resolved_page = int(page)
    if per_page and per_page.isdigit() and 0 < int(per_page) <= MAX_PER_PAGE:
        resolved_per_page = int(per_page)
    return resolved_page, resolved_per_page


def _optional_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _optional_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in {"true", "1", "yes"}:
        return True
    if lowered in {"false", "0", "no"}:
        return False
    return None


def _row_payload(record: Any) -> dict[str, Any]:
    mapper = inspect(type(record))
    payload = {}
    for attr in mapper.column_attrs:
        column = attr.columns[0]
        if column.name in HIDDEN_COLUMNS:
            continue
        payload[column.name] = getattr(record, attr.key)
    return payload


def _monster_payload(record: Monster) -> dict[str, Any]:
    payload = _row_payload(record)
    payload["int"] = payload.pop("intl", None)
    payload["actions"] = payload.get("actions") or []
    return payload


def _paginate(query, sort_clause, page: int, per_page: int, serialize) -> PaginatedResponse:
    total = query.count()
    records = query.order_by(sort_clause).offset((page - 1) * per_page).limit(per_page).all()
    total_pages = (total + per_page - 1) // per_page
    data = [serialize(record) for record in records]
    return PaginatedResponse(
        data=data,
        count=len(data),
        total=total,
        page=page,
        per_page=per_page,
        total_pages=total_pages,
        has_more=page < total_pages,
    )


app = FastAPI(
    title="srd-sync API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


@app.get("/health")
def health() -> dict:
    try:
        check_db_connection()
    except Exception as exc:
        raise HTTPException(status_code=503, detail="Database unavailable") from exc
    return {"status": "ok"}


@app.get("/srd/monsters/search", response_model=PaginatedResponse)
def search_monsters(
    type: str | None = None,
    size: str | None = None,
    cr: str | None = None,
    hp_min: str | None = None,
    hp_max: str | None = None,
    name: str | None = None,
    sort: str | None = None,
    page: str | None = None,
    per_page: str | None = None,
) -> PaginatedResponse:
    resolved_page, resolved_per_page = _pagination(page, per_page)
    with SessionLocal() as db:
        query = db.query(Monster)
        if type:
            query = query.filter(func.lower(Monster.type).like(f"%{type.lower()}%"))
        if size:
            query = query.filter(func.lower(Monster.size) == size.lower())
        minimum = _optional_int(hp_min)
        if minimum is not None:
            query = query.filter(Monster.hp >= minimum)
        maximum = _optional_int(hp_max)
        if maximum is not None:
            query = query.filter(Monster.hp <= maximum)
        if cr:
            query = query.filter(Monster.cr == cr)
        if name:
            query = query.filter(func.lower(Monster.name).like(f"%{name.lower()}%"))
        return _paginate(
            query,
            MONSTER_SORTS.get(sort or "name", MONSTER_SORTS["name"]),
            resolved_page,
            resolved_per_page,
            _monster_payload,
        )


@app.get("/srd/spells/search", response_model=PaginatedResponse)
def search_spells(
    level: str | None = None,
    level_min: str | None = None,
    level_max: str | None = None,
    school: str | None = None,
    damage_type: str | None = None,
    concentration: str | None = None,
    ritual: str | None = None,
    class_name: str | None = Query(default=None, alias="class"),
    name: str | None = None,
    sort: str | None = None,
    page: str | None = None,
    per_page: str | None = None,
) -> PaginatedResponse:
    resolved_page, resolved_per_page = _pagination(page, per_page)
    with SessionLocal() as db:
        query = db.query(Spell)
        exact_level = _optional_int(level)
        if exact_level is not None:
            query = query.filter(Spell.level == exact_level)
        minimum = _optional_int(level_min)
        if minimum is not None:
            query = query.filter(Spell.level >= minimum)
        maximum = _optional_int(level_max)
        if maximum is not None:
            query = query.filter(Spell.level <= maximum)
        if school:
            query = query.filter(func.lower(Spell.school) == school.lower())
        if damage_type:
            query = query.filter(func.lower(Spell.damage_type) == damage_type.lower())
        needs_concentration = _optional_bool(concentration)
        if needs_concentration is not None:
            query = query.filter(Spell.concentration.is_(needs_concentration))
        is_ritual = _optional_bool(ritual)
        if is_ritual is not None:
            query = query.filter(Spell.ritual.is_(is_ritual))
        if name:
            query = query.filter(func.lower(Spell.name).like(f"%{name.lower()}%"))
        if class_name:
            # classes is stored as a JSON list of class indexes
            needle = f'%"{class_name.strip().lower()}"%'
            query = query.filter(func.lower(cast(Spell.classes, Text)).like(needle))
        return _paginate(
            query,
            SPELL_SORTS.get(sort or "name", SPELL_SORTS["name"]),
            resolved_page,
            resolved_per_page,
            _row_payload,
        )


@app.get("/srd/{kind}/{slug}")
def get_entry(kind: str, slug: str) -> dict:
    model = MODELS_BY_TABLE.get(kind.replace("-", "_"))
    if model is None:
        raise HTTPException(status_code=404, detail="Unknown SRD kind")
    with SessionLocal() as db:
        record = db.query(model).filter(model.slug == slug).first()
        if not record:
            raise HTTPException(status_code=404, detail=f"{kind} {slug} not found")
        if isinstance(record, Monster):
            return _monster_payload(record)
        return _row_payload(record)

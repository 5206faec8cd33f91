from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import MODELS_BY_TABLE
from srd.schemas import TABLE_BY_KIND, EntityKind, Row

logger = logging.getLogger(__name__)

INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class UnsupportedDialectError(RuntimeError):
    pass


def build_upsert(dialect_name: str, kind: EntityKind, columns: dict):
    """INSERT ... ON CONFLICT (slug) DO UPDATE for every non-key column."""
    insert = INSERT_BY_DIALECT.get(dialect_name)
    if insert is None:
        raise UnsupportedDialectError(f"No upsert support for dialect {dialect_name!r}.")
    table = MODELS_BY_TABLE[TABLE_BY_KIND[kind]].__table__
    statement = insert(table).values(**columns)
    return statement.on_conflict_do_update(
        index_elements=[table.c.slug],
        set_={name: statement.excluded[name] for name in columns if name != "slug"},
    )


class UpsertSink:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.dialect_name = session.get_bind().dialect.name

    def upsert(self, kind: EntityKind, slug: str, row: Row) -> bool:
        if row.kind is not kind:
            raise ValueError(f"Row of kind {row.kind.value} cannot be written as {kind.value}.")
        if not slug or slug != row.slug:
            raise ValueError(f"Slug {slug!r} does not match row slug {row.slug!r}.")
        statement = build_upsert(self.dialect_name, kind, row.columns())
        try:
            self.session.execute(statement)
            self.session.commit()
        except (SQLAlchemyError, OverflowError) as exc:
            # sqlite3 raises a bare OverflowError for integers past 64 bits.
            self.session.rollback()
            logger.warning("Upsert failed for %s %s: %s", kind.value, row.slug, exc)
            return False
        return True

    def write(self, row: Row) -> bool:
        return self.upsert(row.kind, row.slug, row)


def count_rows(session: Session) -> dict[str, int]:
    counts = {}
    for table_name in TABLE_BY_KIND.values():
        model = MODELS_BY_TABLE[table_name]
        counts[table_name] = session.scalar(select(func.count()).select_from(model)) or 0
    return counts

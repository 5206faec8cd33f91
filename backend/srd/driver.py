from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Protocol

from sqlalchemy.orm import Session

from srd.mappers import ENTITY_KINDS, MAPPERS
from srd.schemas import KIND_ORDER, BatchKind, EntityKind, Row
from srd.sink import UpsertSink
from srd.source import ResourceList, ResourceRef, SourceError

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 50

# Plural labels for the "Inserted N ..." line.
ENTITY_LABELS = {
    EntityKind.MONSTER: "monsters",
    EntityKind.SPELL: "spells",
    EntityKind.CLASS: "classes",
    EntityKind.RACE: "races",
    EntityKind.WEAPON: "weapons",
    EntityKind.ARMOR: "armor",
    EntityKind.MAGIC_ITEM: "magic items",
}


class SourceClient(Protocol):
    def fetch_list(self, kind: BatchKind) -> ResourceList: ...

    def fetch_detail(self, kind: BatchKind, ref: ResourceRef) -> Any: ...


class ItemOutcome(str, Enum):
    SUCCESS = "success"
    DEGRADED = "degraded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class KindSummary:
    kind: BatchKind
    listed: int = 0
    list_error: str | None = None
    outcomes: Counter = field(default_factory=Counter)
    written: Counter = field(default_factory=Counter)

    @property
    def processed(self) -> int:
        return sum(self.outcomes.values())

    def record(self, outcome: ItemOutcome, entity: EntityKind | None = None) -> None:
        self.outcomes[outcome] += 1
        if entity is not None and outcome in (ItemOutcome.SUCCESS, ItemOutcome.DEGRADED):
            self.written[entity] += 1

    def inserted_line(self) -> str:
        parts = [
            f"{self.written[entity]} {ENTITY_LABELS[entity]}" for entity in ENTITY_KINDS[self.kind]
        ]
        return "  Inserted " + ", ".join(parts)


@dataclass
class RunSummary:
    kinds: list[KindSummary] = field(default_factory=list)

    def totals(self) -> Counter:
        total: Counter = Counter()
        for summary in self.kinds:
            total.update(summary.outcomes)
        return total

    def written(self) -> Counter:
        total: Counter = Counter()
        for summary in self.kinds:
            total.update(summary.written)
        return total


class BatchDriver:
    """Fetch, map and upsert every SRD document of each batch kind, in order.

    Items are processed one at a time. A failed detail fetch or a mapping error
    degrades the item to an all-defaults row; a failed write is recorded and
    the batch moves on. One session is opened per batch kind.
    """

    def __init__(
        self,
        client: SourceClient,
        session_factory: Callable[[], Session],
        *,
        progress_every: int = PROGRESS_EVERY,
        echo: Callable[..., None] = print,
    ) -> None:
        self.client = client
        self.session_factory = session_factory
        self.progress_every = max(1, progress_every)
        self.echo = echo

    def run(self, kinds: Iterable[BatchKind] = KIND_ORDER) -> RunSummary:
        summary = RunSummary()
        for kind in kinds:
            summary.kinds.append(self.run_kind(kind))
        return summary

    def run_kind(self, kind: BatchKind) -> KindSummary:
        summary = KindSummary(kind=kind)
        self.echo(f"Fetching {kind.value}...", end="")
        try:
            listing = self.client.fetch_list(kind)
        except SourceError as exc:
            self.echo(" failed")
            logger.warning("Could not list %s: %s", kind.value, exc)
            summary.list_error = str(exc)
            return summary

        summary.listed = listing.count
        self.echo(f" {listing.count} found")

        with self.session_factory() as session:
            sink = UpsertSink(session)
            total = len(listing.results)
            for position, ref in enumerate(listing.results, start=1):
                outcome, entity = self._process(kind, ref, sink)
                summary.record(outcome, entity)
                if position % self.progress_every == 0:
                    self.echo(f"  {position}/{total}")

        self.echo(summary.inserted_line())
        return summary

    def _process(
        self, kind: BatchKind, ref: ResourceRef, sink: UpsertSink
    ) -> tuple[ItemOutcome, EntityKind | None]:
        degraded = False
        try:
            record = self.client.fetch_detail(kind, ref)
        except SourceError as exc:
            logger.warning("Using defaults for %s %s: %s", kind.value, ref.index, exc)
            record = {}
            degraded = True
        else:
            if not isinstance(record, dict) or not record:
                logger.warning(
                    "Using defaults for %s %s: detail is not a usable record",
                    kind.value,
                    ref.index,
                )
                record = {}
                degraded = True

        row, mapped_cleanly = self._map(kind, ref, record)
        degraded = degraded or not mapped_cleanly
        if row is None:
            return ItemOutcome.SKIPPED, None
        if not sink.upsert(row.kind, row.slug, row):
            return ItemOutcome.FAILED, row.kind
        return (ItemOutcome.DEGRADED if degraded else ItemOutcome.SUCCESS), row.kind

    def _map(self, kind: BatchKind, ref: ResourceRef, record: Any) -> tuple[Row | None, bool]:
        mapper = MAPPERS[kind]
        try:
            return mapper(record, slug=ref.index, name=ref.name), True
        except ValueError as exc:
            logger.warning("Mapping %s %s failed, using defaults: %s", kind.value, ref.index, exc)
        return mapper({}, slug=ref.index, name=ref.name), False

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from .errors import DataError, RecordFormatError
from .labels import EdgeTask, VertexTask
from .logger import LOGGER_NAME
from .registry import IdentityRegistry, family_for_label, parse_identifier
from .row_stream import EdgeLayout, VertexLayout
from .statistics import Statistics

_MAX_SKIP_WARNINGS = 10


@dataclass
class FileCounts:
    rows: int = 0
    skipped: int = 0


class CardinalityAccumulator:
    """Fold streamed records into a :class:`Statistics` instance.

    Vertex rows of Place/Organisation families are also registered in the
    identity registry so that later edge files can resolve their endpoints.
    All lookups for a row are done before any counter changes.

    With ``strict=False`` a row failing with a :class:`DataError` is skipped
    and counted instead of aborting the run.
    """

    def __init__(
        self,
        statistics: Statistics,
        registry: IdentityRegistry,
        *,
        strict: bool = True,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.statistics = statistics
        self.registry = registry
        self.strict = strict
        self.logger = logger or logging.getLogger(LOGGER_NAME)

    def import_vertex_rows(
        self,
        task: VertexTask,
        layout: VertexLayout,
        rows: Iterable[Sequence[str]],
    ) -> FileCounts:
        counts = FileCounts()
        for record in rows:
            try:
                label = self._vertex_label(task, layout, record)
            except DataError as exc:
                self._skip(counts, exc)
                continue
            self.statistics.add_vertex(label)
            counts.rows += 1
        return counts

    def import_edge_rows(
        self,
        task: EdgeTask,
        layout: EdgeLayout,
        rows: Iterable[Sequence[str]],
    ) -> FileCounts:
        counts = FileCounts()
        for record in rows:
            try:
                source, destination = self._edge_endpoints(task, layout, record)
            except DataError as exc:
                self._skip(counts, exc)
                continue
            self.statistics.add_edge(source, task.edge, destination)
            counts.rows += 1
        return counts

    def _vertex_label(self, task: VertexTask, layout: VertexLayout, record: Sequence[str]) -> str:
        if layout.label_index is None:
            label = task.label
        else:
            label = record[layout.label_index]
            if not label:
                raise RecordFormatError(f"empty LABEL value for id {record[layout.id_index]!r}")
        family = family_for_label(label)
        if family is not None:
            identifier = parse_identifier(record[layout.id_index])
            self.registry.register(family, identifier, label)
        return label

    def _edge_endpoints(self, task: EdgeTask, layout: EdgeLayout, record: Sequence[str]) -> Tuple[str, str]:
        source_id = parse_identifier(record[layout.source_index])
        destination_id = parse_identifier(record[layout.destination_index])
        source = task.source
        if layout.source_family is not None:
            source = self.registry.resolve(layout.source_family, source_id)
        destination = task.destination
        if layout.destination_family is not None:
            destination = self.registry.resolve(layout.destination_family, destination_id)
        return source, destination

    def _skip(self, counts: FileCounts, exc: DataError) -> None:
        if self.strict:
            raise exc
        counts.skipped += 1
        if counts.skipped <= _MAX_SKIP_WARNINGS:
            self.logger.warning("Skipping record: %s", exc)
        elif counts.skipped == _MAX_SKIP_WARNINGS + 1:
            self.logger.warning("Further skipped records in this file are only counted")

"""Cardinality tables and their JSON form."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, Tuple

WILDCARD = ""

VertexCardinality = Dict[str, int]
EdgeCardinality = Dict[str, Dict[str, Dict[str, int]]]


@dataclass
class Statistics:
    vertex_cardinality: VertexCardinality = field(default_factory=dict)
    edge_cardinality: EdgeCardinality = field(default_factory=dict)

    def add_vertex(self, label: str, count: int = 1) -> None:
        self.vertex_cardinality[label] = self.vertex_cardinality.get(label, 0) + count
        self.vertex_cardinality[WILDCARD] = self.vertex_cardinality.get(WILDCARD, 0) + count

    def add_edge(self, source: str, edge: str, destination: str, count: int = 1) -> None:
        # Every subset of the three positions may be replaced by the wildcard.
        for src_key in (source, WILDCARD):
            src_entry = self.edge_cardinality.setdefault(src_key, {})
            for edge_key in (edge, WILDCARD):
                edge_entry = src_entry.setdefault(edge_key, {})
                for dst_key in (destination, WILDCARD):
                    edge_entry[dst_key] = edge_entry.get(dst_key, 0) + count

    def vertex_count(self, label: str = WILDCARD) -> int:
        return self.vertex_cardinality.get(label, 0)

    def edge_count(
        self,
        source: str = WILDCARD,
        edge: str = WILDCARD,
        destination: str = WILDCARD,
    ) -> int:
        return self.edge_cardinality.get(source, {}).get(edge, {}).get(destination, 0)

    def iter_edge_counts(self) -> Iterator[Tuple[str, str, str, int]]:
        for source, by_edge in self.edge_cardinality.items():
            for edge, by_destination in by_edge.items():
                for destination, count in by_destination.items():
                    yield source, edge, destination, count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vertex_cardinality": dict(self.vertex_cardinality),
            "edge_cardinality": {
                source: {edge: dict(by_dst) for edge, by_dst in by_edge.items()}
                for source, by_edge in self.edge_cardinality.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Statistics":
        vertex = {str(k): int(v) for k, v in (data.get("vertex_cardinality") or {}).items()}
        edge: EdgeCardinality = {}
        for source, by_edge in (data.get("edge_cardinality") or {}).items():
            edge[source] = {
                edge_label: {dst: int(count) for dst, count in by_dst.items()}
                for edge_label, by_dst in by_edge.items()
            }
        return cls(vertex_cardinality=vertex, edge_cardinality=edge)


def write_statistics(path: Path, statistics: Statistics, *, indent: int = 2) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(statistics.to_dict(), f, ensure_ascii=False, indent=indent)
    return path


def read_statistics(path: Path) -> Statistics:
    with Path(path).open("r", encoding="utf-8") as f:
        return Statistics.from_dict(json.load(f))

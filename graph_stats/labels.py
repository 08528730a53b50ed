"""Map data file names to import tasks."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from .errors import LabelResolutionError

# Adding a label means extending these tables.
VERTEX_NAMES: Dict[str, str] = {
    "place": "Place",
    "organisation": "Organisation",
    "tagclass": "TagClass",
    "tag": "Tag",
    "comment": "Comment",
    "forum": "Forum",
    "person": "Person",
    "post": "Post",
}

EDGE_NAMES: Dict[str, str] = {
    "isPartOf": "IS_PART_OF",
    "isSubclassOf": "IS_SUBCLASS_OF",
    "isLocatedIn": "IS_LOCATED_IN",
    "hasType": "HAS_TYPE",
    "hasCreator": "HAS_CREATOR",
    "replyOf": "REPLY_OF",
    "containerOf": "CONTAINER_OF",
    "hasMember": "HAS_MEMBER",
    "hasModerator": "HAS_MODERATOR",
    "hasTag": "HAS_TAG",
    "hasInterest": "HAS_INTEREST",
    "knows": "KNOWS",
    "likes": "LIKES",
    "studyAt": "STUDY_AT",
    "workAt": "WORK_AT",
}


@dataclass(frozen=True)
class VertexTask:
    label: str

    def describe(self) -> str:
        return f"Vertex({self.label})"


@dataclass(frozen=True)
class EdgeTask:
    source: str
    edge: str
    destination: str

    def describe(self) -> str:
        return f"Edge({self.source})-[{self.edge}]->({self.destination})"


ImportTask = Union[VertexTask, EdgeTask]


def name_tokens(path: Union[str, Path]) -> List[str]:
    stem = Path(path).name.split(".", 1)[0]
    return stem.split("_")


def token_count(path: Union[str, Path]) -> int:
    """Number of underscore separated tokens in the file's base name."""
    return len(name_tokens(path))


def resolve_file_name(path: Union[str, Path]) -> ImportTask:
    tokens = name_tokens(path)
    padded: List[Optional[str]] = list(tokens[:3]) + [None] * (3 - min(len(tokens), 3))
    src_name, edge_name, dst_name = padded

    src_label = VERTEX_NAMES.get(src_name) if src_name is not None else None
    edge_label = EDGE_NAMES.get(edge_name) if edge_name is not None else None
    dst_label = VERTEX_NAMES.get(dst_name) if dst_name is not None else None

    if src_label and edge_label and dst_label:
        return EdgeTask(src_label, edge_label, dst_label)
    if src_label and edge_label is None and dst_label is None:
        return VertexTask(src_label)

    unresolved = [
        token
        for token, label in ((src_name, src_label), (edge_name, edge_label), (dst_name, dst_label))
        if label is None
    ]
    raise LabelResolutionError(padded, unresolved)

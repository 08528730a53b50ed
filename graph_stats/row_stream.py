"""Header layouts and the bounded producer/consumer row stream."""

from __future__ import annotations

import csv
import queue
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterator, List, Optional, Sequence, Union

from .errors import HeaderFormatError, RecordFormatError
from .labels import EdgeTask
from .registry import IdentityFamily, family_for_label

DEFAULT_QUEUE_CAPACITY = 1024
DEFAULT_DELIMITER = "|"

_PUT_POLL_SECONDS = 0.1
_END_OF_STREAM = object()


@dataclass(frozen=True)
class Column:
    name: str
    type: str


def parse_header(fields: Sequence[str]) -> List[Column]:
    """Split ``name:TYPE`` header fields; a field without ``:`` has an empty type."""
    columns = []
    for field in fields:
        name, _, type_ = field.partition(":")
        columns.append(Column(name=name, type=type_))
    return columns


@dataclass(frozen=True)
class VertexLayout:
    id_index: int = 0
    label_index: Optional[int] = None

    @classmethod
    def from_header(cls, columns: Sequence[Column]) -> "VertexLayout":
        id_index: Optional[int] = None
        label_index: Optional[int] = None
        for i, column in enumerate(columns):
            if column.type == "LABEL":
                if label_index is not None:
                    raise HeaderFormatError(
                        f"More than one LABEL column (positions {label_index} and {i})"
                    )
                label_index = i
            elif column.type.startswith("ID"):
                if i != 0:
                    raise HeaderFormatError(
                        f"Identifier column {column.name!r} must be the first column, found at {i}"
                    )
                id_index = i
        if id_index is None:
            raise HeaderFormatError("Vertex header has no ID column")
        return cls(id_index=id_index, label_index=label_index)


@dataclass(frozen=True)
class EdgeLayout:
    source_index: int = 0
    destination_index: int = 1
    source_family: Optional[IdentityFamily] = None
    destination_family: Optional[IdentityFamily] = None

    @classmethod
    def from_header(cls, columns: Sequence[Column], task: EdgeTask) -> "EdgeLayout":
        source_index = cls.source_index
        destination_index = cls.destination_index
        seen_start = seen_end = False
        for i, column in enumerate(columns):
            if column.type.startswith("START_ID"):
                if seen_start or i != source_index:
                    raise HeaderFormatError(
                        f"START_ID column must appear once at position {source_index}, found at {i}"
                    )
                seen_start = True
            elif column.type.startswith("END_ID"):
                if seen_end or i != destination_index:
                    raise HeaderFormatError(
                        f"END_ID column must appear once at position {destination_index}, found at {i}"
                    )
                seen_end = True
        if not (seen_start and seen_end):
            raise HeaderFormatError("Edge header needs both START_ID and END_ID columns")
        return cls(
            source_index=source_index,
            destination_index=destination_index,
            source_family=family_for_label(task.source),
            destination_family=family_for_label(task.destination),
        )


class _ProducerFailure:
    def __init__(self, exc: BaseException) -> None:
        self.exc = exc


class RowStream:
    """Stream the records of one delimited file through a bounded queue.

    The header is read on the calling thread when the stream is entered.
    A single producer thread then reads the remaining records in file
    order and blocks whenever ``capacity`` records are waiting. Failures on
    the producer side are re-raised from the consumer's iteration.
    Leaving the context stops and joins the producer.

    Usage::

        with RowStream(path) as stream:
            layout = VertexLayout.from_header(stream.header)
            for record in stream:
                ...
    """

    def __init__(
        self,
        path: Union[str, Path],
        *,
        capacity: int = DEFAULT_QUEUE_CAPACITY,
        delimiter: str = DEFAULT_DELIMITER,
        encoding: str = "utf-8",
    ) -> None:
        if not isinstance(capacity, int) or capacity <= 0:
            raise ValueError(f"Queue capacity must be a positive integer, got {capacity!r}")
        self.path = Path(path)
        self.capacity = capacity
        self.delimiter = delimiter
        self.encoding = encoding
        self.header: List[Column] = []
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=capacity)
        self._stop = threading.Event()
        self._handle: Optional[IO[str]] = None
        self._reader = None
        self._thread: Optional[threading.Thread] = None
        self._exhausted = False

    def __enter__(self) -> "RowStream":
        self._handle = self.path.open("r", encoding=self.encoding, newline="")
        try:
            self._reader = csv.reader(self._handle, delimiter=self.delimiter)
            self.header = parse_header(self._read_header())
        except BaseException:
            self._handle.close()
            self._handle = None
            raise
        self._thread = threading.Thread(
            target=self._produce,
            name=f"row-stream:{self.path.name}",
            daemon=True,
        )
        self._thread.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def _read_header(self) -> List[str]:
        try:
            fields = next(self._reader)
        except StopIteration:
            raise HeaderFormatError(f"{self.path} has no header row") from None
        except (csv.Error, UnicodeDecodeError) as exc:
            raise RecordFormatError(f"{self.path}: unreadable header: {exc}") from exc
        if not fields or not any(field.strip() for field in fields):
            raise HeaderFormatError(f"{self.path} has an empty header row")
        return fields

    def _put(self, item: object) -> bool:
        while not self._stop.is_set():
            try:
                self._queue.put(item, timeout=_PUT_POLL_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def _produce(self) -> None:
        width = len(self.header)
        try:
            for record in self._reader:
                if not record:
                    continue
                if len(record) != width:
                    raise RecordFormatError(
                        f"{self.path}:{self._reader.line_num}: expected {width} fields, "
                        f"found {len(record)}"
                    )
                if not self._put(record):
                    return
        except (csv.Error, UnicodeDecodeError) as exc:
            self._put(_ProducerFailure(
                RecordFormatError(f"{self.path}:{self._reader.line_num}: {exc}")
            ))
            return
        except Exception as exc:
            self._put(_ProducerFailure(exc))
            return
        self._put(_END_OF_STREAM)

    def __iter__(self) -> Iterator[List[str]]:
        if self._thread is None and not self._exhausted:
            raise RuntimeError("RowStream must be entered before iterating")
        while not self._exhausted:
            item = self._queue.get()
            if item is _END_OF_STREAM:
                self._exhausted = True
                return
            if isinstance(item, _ProducerFailure):
                self._exhausted = True
                raise item.exc
            yield item  # type: ignore[misc]

"""Error taxonomy for the statistics import.

Every failure raised by the pipeline is fatal by default; the ``kind``
attribute is what the orchestrator reports in logs and in the run summary.
I/O failures are left as the builtin ``OSError``.
"""

from __future__ import annotations

from typing import Optional, Sequence


class GraphStatsError(Exception):
    kind = "unknown"


class SchemaError(GraphStatsError):
    """Raised when a file name or header does not describe a known layout."""

    kind = "schema"


class DataError(GraphStatsError):
    """Raised when a record value cannot be accumulated."""

    kind = "data"


class LabelResolutionError(SchemaError):
    def __init__(self, tokens: Sequence[Optional[str]], unresolved: Sequence[Optional[str]]) -> None:
        self.tokens = tuple(tokens)
        self.unresolved = tuple(unresolved)
        super().__init__(
            f"illegal label name {self.tokens!r}: unresolved tokens {self.unresolved!r}"
        )


class HeaderFormatError(SchemaError):
    pass


class RecordFormatError(DataError):
    pass


class InvalidIdentifierError(DataError):
    pass


class DuplicateIdentifierError(DataError):
    pass


class UnresolvedIdentifierError(DataError):
    pass

"""Statistics import orchestrator."""

from __future__ import annotations

import datetime as dt
import time
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from .accumulator import CardinalityAccumulator, FileCounts
from .artifacts import FileImportArtifact, RunSummary, compute_dict_hash, save_run_summary
from .config import ImportConfig
from .errors import GraphStatsError
from .labels import ImportTask, VertexTask, resolve_file_name
from .logger import attach_file_handler, detach_file_handler, setup_logger
from .registry import IdentityRegistry
from .row_stream import EdgeLayout, RowStream, VertexLayout
from .sources import discover_input_files, order_input_files
from .statistics import Statistics, write_statistics


def error_kind(exc: BaseException) -> str:
    if isinstance(exc, GraphStatsError):
        return exc.kind
    if isinstance(exc, OSError):
        return "io"
    return "internal"


class ImportOrchestrator:
    """Drive every data file through resolve -> stream -> accumulate.

    Files are imported one at a time, vertex files first, so edge files can
    resolve Place/Organisation identifiers registered by earlier vertex
    files. The statistics are written once, after the last file.
    """

    def __init__(self, config: ImportConfig, logger=None) -> None:
        self.config = config
        now = dt.datetime.now(dt.timezone.utc)
        self.run_id = now.strftime("%Y%m%d-%H%M%S")
        self.logger = logger or setup_logger()
        self._file_handler = None
        if config.output.log_file:
            self._file_handler = attach_file_handler(self.logger, Path(config.output.log_file))

        self.statistics = Statistics()
        self.registry = IdentityRegistry()
        self.accumulator = CardinalityAccumulator(
            self.statistics,
            self.registry,
            strict=config.general.strict,
            logger=self.logger,
        )
        self.summary = RunSummary(
            run_id=self.run_id,
            config_hash=compute_dict_hash(config.to_dict()),
            started_at=now.isoformat(timespec="seconds"),
        )
        self.logger.info("Import orchestrator initialized (strict=%s)", config.general.strict)

    def plan(self) -> List[Path]:
        general = self.config.general
        if not general.input_root:
            raise ValueError("general.input_root must be configured")
        files = discover_input_files(Path(general.input_root), general.partitions)
        ordered = order_input_files(files, by_name=general.sort_by_name)
        self.logger.info("Found %d input files under %s", len(ordered), general.input_root)
        return ordered

    def import_file(self, path: Path) -> FileImportArtifact:
        path = Path(path)
        start = time.monotonic()
        task: Optional[ImportTask] = None
        try:
            task = resolve_file_name(path)
            self.logger.info("import %s as %s", path, task.describe())
            counts = self._stream_file(path, task)
        except Exception:
            self.summary.files.append(
                FileImportArtifact(
                    path=str(path),
                    task=task.describe() if task is not None else "unresolved",
                    status="failed",
                    rows=0,
                    skipped=0,
                    elapsed_seconds=time.monotonic() - start,
                )
            )
            raise

        elapsed = time.monotonic() - start
        artifact = FileImportArtifact(
            path=str(path),
            task=task.describe(),
            status="success",
            rows=counts.rows,
            skipped=counts.skipped,
            elapsed_seconds=elapsed,
        )
        self.summary.files.append(artifact)
        if counts.skipped:
            self.logger.warning(
                "Imported %d rows from %s in %.2f seconds, skipped %d",
                counts.rows,
                path.name,
                elapsed,
                counts.skipped,
            )
        else:
            self.logger.info("Imported %d rows from %s in %.2f seconds", counts.rows, path.name, elapsed)
        return artifact

    def _stream_file(self, path: Path, task: ImportTask) -> FileCounts:
        stream_cfg = self.config.stream
        with RowStream(
            path,
            capacity=stream_cfg.queue_capacity,
            delimiter=stream_cfg.delimiter,
            encoding=stream_cfg.encoding,
        ) as stream:
            rows = tqdm(
                stream,
                desc=path.name,
                unit="rows",
                leave=False,
                disable=not self.config.general.show_progress,
            )
            if isinstance(task, VertexTask):
                layout = VertexLayout.from_header(stream.header)
                return self.accumulator.import_vertex_rows(task, layout, rows)
            layout = EdgeLayout.from_header(stream.header, task)
            return self.accumulator.import_edge_rows(task, layout, rows)

    def write_output(self) -> Path:
        output_file = self.config.general.output_file
        if not output_file:
            raise ValueError("general.output_file must be configured")
        path = write_statistics(Path(output_file), self.statistics, indent=self.config.output.indent)
        self.summary.output_file = str(path)
        self.logger.info("Statistics saved to %s", path)
        return path

    def finalize(self) -> None:
        self.summary.completed_at = dt.datetime.now(dt.timezone.utc).isoformat(timespec="seconds")
        self.summary.totals = {
            "files": len(self.summary.files),
            "vertices": self.statistics.vertex_count(),
            "edges": self.statistics.edge_count(),
            "skipped": sum(item.skipped for item in self.summary.files),
        }
        self.summary.registry_sizes = self.registry.sizes()
        try:
            summary_file = self.config.output.summary_file
            if summary_file:
                path = save_run_summary(Path(summary_file), self.summary)
                self.logger.info("Run summary saved to %s", path)
        finally:
            detach_file_handler(self.logger, self._file_handler)
            self._file_handler = None

    def run(self) -> Statistics:
        self.logger.info("Starting statistics import %s", self.run_id)
        try:
            for path in self.plan():
                self.import_file(path)
            self.write_output()
            self.summary.status = "success"
        except Exception as exc:
            kind = error_kind(exc)
            self.summary.status = "failed"
            self.summary.error = {"kind": kind, "type": type(exc).__name__, "message": str(exc)}
            self.logger.error("Import aborted (%s error): %s", kind, exc, exc_info=True)
            raise
        finally:
            self.finalize()
        return self.statistics

import json
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union, get_args, get_origin

import yaml

from .row_stream import DEFAULT_DELIMITER, DEFAULT_QUEUE_CAPACITY


@dataclass
class GeneralConfig:
    input_root: Optional[str] = None
    output_file: Optional[str] = None
    partitions: List[str] = field(default_factory=lambda: ["static", "dynamic"])
    strict: bool = True
    sort_by_name: bool = True
    show_progress: bool = True


@dataclass
class StreamConfig:
    queue_capacity: int = DEFAULT_QUEUE_CAPACITY
    delimiter: str = DEFAULT_DELIMITER
    encoding: str = "utf-8"


@dataclass
class OutputConfig:
    indent: Optional[int] = 2
    summary_file: Optional[str] = None
    log_file: Optional[str] = None


@dataclass
class ImportConfig:
    general: GeneralConfig = field(default_factory=GeneralConfig)
    stream: StreamConfig = field(default_factory=StreamConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def with_overrides(
        self,
        *,
        input_root: Optional[str] = None,
        output_file: Optional[str] = None,
        strict: Optional[bool] = None,
        queue_capacity: Optional[int] = None,
        show_progress: Optional[bool] = None,
        log_file: Optional[str] = None,
    ) -> "ImportConfig":
        general = self.general
        if input_root is not None:
            general = replace(general, input_root=str(input_root))
        if output_file is not None:
            general = replace(general, output_file=str(output_file))
        if strict is not None:
            general = replace(general, strict=strict)
        if show_progress is not None:
            general = replace(general, show_progress=show_progress)
        stream = self.stream
        if queue_capacity is not None:
            stream = replace(stream, queue_capacity=queue_capacity)
            _check_section("stream", stream)
        output = self.output
        if log_file is not None:
            output = replace(output, log_file=str(log_file))
        return ImportConfig(general=general, stream=stream, output=output)


def _matches_type(value: Any, annotation: Any) -> bool:
    origin = get_origin(annotation)
    if origin is Union:
        return any(_matches_type(value, arg) for arg in get_args(annotation))
    if origin is list:
        (item_type,) = get_args(annotation)
        return isinstance(value, list) and all(_matches_type(item, item_type) for item in value)
    if annotation is type(None):
        return value is None
    # bool is an int subclass; keep `strict: 1` and `queue_capacity: true` apart
    if annotation is int:
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, annotation)


def _check_section(name: str, section: Any) -> None:
    if isinstance(section, StreamConfig):
        if section.queue_capacity <= 0:
            raise ValueError(f"Config key '{name}.queue_capacity' must be positive, got {section.queue_capacity}")
        if len(section.delimiter) != 1:
            raise ValueError(f"Config key '{name}.delimiter' must be a single character, got {section.delimiter!r}")
    if isinstance(section, OutputConfig) and section.indent is not None and section.indent < 0:
        raise ValueError(f"Config key '{name}.indent' must not be negative, got {section.indent}")


def _build_section(cls, name: str, data: Any):
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ValueError(f"Config section '{name}' must be a mapping, got {type(data).__name__}")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown keys in config section '{name}': {', '.join(unknown)}")
    for f in fields(cls):
        if f.name in data and not _matches_type(data[f.name], f.type):
            raise ValueError(
                f"Config key '{name}.{f.name}' has invalid value {data[f.name]!r}"
            )
    section = cls(**data)
    _check_section(name, section)
    return section


class ConfigLoader:
    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> ImportConfig:
        content = self.path.read_text(encoding="utf-8")
        try:
            if self.path.suffix.lower() in {".yaml", ".yml"}:
                data = yaml.safe_load(content)
            else:
                data = json.loads(content)
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ValueError(f"Failed to parse config {self.path}: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {self.path} must contain a mapping")
        unknown = sorted(set(data) - {"general", "stream", "output"})
        if unknown:
            raise ValueError(f"Unknown config sections: {', '.join(unknown)}")

        cfg = ImportConfig(
            general=_build_section(GeneralConfig, "general", data.get("general")),
            stream=_build_section(StreamConfig, "stream", data.get("stream")),
            output=_build_section(OutputConfig, "output", data.get("output")),
        )

        base_dir = self.path.parent

        def _abspath(relative_path: Optional[str]) -> Optional[str]:
            if not relative_path:
                return relative_path
            p = Path(relative_path)
            if not p.is_absolute():
                p = (base_dir / p).resolve()
            return str(p)

        cfg.general.input_root = _abspath(cfg.general.input_root)
        cfg.general.output_file = _abspath(cfg.general.output_file)
        cfg.output.summary_file = _abspath(cfg.output.summary_file)
        cfg.output.log_file = _abspath(cfg.output.log_file)

        return cfg

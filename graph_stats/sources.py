from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence

from .labels import token_count

DEFAULT_PARTITIONS = ("static", "dynamic")


def discover_input_files(input_root: Path, partitions: Sequence[str] = DEFAULT_PARTITIONS) -> List[Path]:
    """List the data files of every partition directory, in enumeration order."""
    input_root = Path(input_root)
    if not input_root.exists():
        raise FileNotFoundError(f"Input root not found: {input_root}")
    files: List[Path] = []
    for partition in partitions:
        partition_dir = input_root / partition
        if not partition_dir.is_dir():
            raise FileNotFoundError(f"Partition directory not found: {partition_dir}")
        for entry in partition_dir.iterdir():
            if entry.name.startswith(".") or not entry.is_file():
                continue
            files.append(entry)
    return files


def order_input_files(paths: Iterable[Path], *, by_name: bool = True) -> List[Path]:
    """Order files so every vertex file precedes every edge file.

    Vertex file names have fewer underscore separated tokens than edge file
    names. ``by_name`` breaks ties by file name; without it the enumeration
    order of equal-length names is kept.
    """
    if by_name:
        return sorted(paths, key=lambda p: (token_count(p), p.name, str(p)))
    return sorted(paths, key=token_count)

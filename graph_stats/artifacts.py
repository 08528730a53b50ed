import hashlib
import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class FileImportArtifact:
    path: str
    task: str
    status: str
    rows: int
    skipped: int
    elapsed_seconds: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RunSummary:
    run_id: str
    config_hash: str
    started_at: str
    completed_at: Optional[str] = None
    status: str = "running"
    output_file: Optional[str] = None
    files: List[FileImportArtifact] = field(default_factory=list)
    totals: Dict[str, int] = field(default_factory=dict)
    registry_sizes: Dict[str, int] = field(default_factory=dict)
    error: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_dict_hash(data: Dict[str, Any]) -> str:
    serialized = json.dumps(data, sort_keys=True, ensure_ascii=False)
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


def save_run_summary(path: Path, summary: RunSummary) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(summary.to_dict(), f, ensure_ascii=False, indent=2)
    return path

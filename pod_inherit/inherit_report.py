"""Per-run summary of which source units were written, skipped or failed."""

import hashlib
import json
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

STATUSES = ("written", "unchanged", "empty", "skipped", "failed")


@dataclass
class UnitResult:
    """The outcome of processing a single source unit."""

    source: str
    output: str
    status: str
    detail: str = ""


def compute_config_hash(config: Any) -> str:
    """Compute a stable hash of the configuration.

    Uses canonical JSON serialization (sorted keys); paths and sets are
    normalized first so equal settings always hash alike.
    """
    config_json = json.dumps(_canonical(config), sort_keys=True, ensure_ascii=True)
    return hashlib.sha256(config_json.encode("utf-8")).hexdigest()


def _canonical(value: Any) -> Any:
    if hasattr(value, "__dataclass_fields__"):
        value = asdict(value)
    if isinstance(value, dict):
        return {str(k): _canonical(v) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        return sorted(_canonical(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [_canonical(v) for v in value]
    if isinstance(value, Path):
        return value.as_posix()
    return value


class InheritReport:
    """Collects unit results and writes them out as JSON."""

    def __init__(self, config_hash: str) -> None:
        """Initialize an empty report for a run with the given config hash."""
        self.config_hash = config_hash
        self.results: list[UnitResult] = []
        self.start_time = time.time()

    def add_result(
        self, source: Path, output: Path, status: str, detail: str = ""
    ) -> None:
        """Record the outcome for one source unit."""
        if status not in STATUSES:
            msg = f"Unknown unit status: {status}"
            raise ValueError(msg)
        self.results.append(
            UnitResult(
                source=Path(source).as_posix(),
                output=Path(output).as_posix(),
                status=status,
                detail=detail,
            )
        )

    def count(self, status: str) -> int:
        """Return how many units ended with ``status``."""
        return sum(1 for r in self.results if r.status == status)

    @property
    def failed(self) -> list[UnitResult]:
        """Units whose processing raised an error."""
        return [r for r in self.results if r.status == "failed"]

    def summary(self) -> str:
        """Return a one-line human readable summary."""
        return ", ".join(f"{self.count(s)} {s}" for s in STATUSES)

    def generate_report(self, path: str | Path) -> None:
        """Write the report as JSON to ``path``."""
        report = {
            "meta": {
                "timestamp": time.time(),
                "duration": time.time() - self.start_time,
                "config_hash": self.config_hash,
                "total_units": len(self.results),
            },
            "results": [asdict(r) for r in self.results],
            "stats": {s: self.count(s) for s in STATUSES},
        }

        with open(path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2)

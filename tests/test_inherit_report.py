"""Tests for the run report."""

import json
from pathlib import Path

import pytest

from pod_inherit.inherit_report import InheritReport


def test_report_generation(tmp_path: Path) -> None:
    """Verify results and per-status counts are written as JSON."""
    report = InheritReport("hash123")
    report.add_result(Path("lib/A.pm"), Path("lib/A.pod"), "written")
    report.add_result(Path("lib/B.pm"), Path("lib/B.pod"), "empty")
    report.add_result(Path("lib/C.pm"), Path("lib/C.pod"), "failed", "Can't locate")

    out = tmp_path / "report.json"
    report.generate_report(out)
    data = json.loads(out.read_text(encoding="utf-8"))

    assert data["meta"]["config_hash"] == "hash123"
    assert data["meta"]["total_units"] == 3
    assert data["stats"] == {
        "written": 1,
        "unchanged": 0,
        "empty": 1,
        "skipped": 0,
        "failed": 1,
    }
    assert data["results"][2] == {
        "source": "lib/C.pm",
        "output": "lib/C.pod",
        "status": "failed",
        "detail": "Can't locate",
    }


def test_summary_and_failed() -> None:
    """Verify the one-line summary and the failed list."""
    report = InheritReport("h")
    report.add_result(Path("A.pm"), Path("A.pod"), "skipped", "skip_classes")
    report.add_result(Path("B.pm"), Path("B.pod"), "failed", "boom")
    assert report.summary() == "0 written, 0 unchanged, 0 empty, 1 skipped, 1 failed"
    assert [r.source for r in report.failed] == ["B.pm"]


def test_unknown_status() -> None:
    """Verify statuses are restricted to the known set."""
    with pytest.raises(ValueError, match="Unknown unit status"):
        InheritReport("h").add_result(Path("A.pm"), Path("A.pod"), "done")

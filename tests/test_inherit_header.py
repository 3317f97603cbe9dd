"""Tests for the generated-file header and ownership check."""

import logging
from pathlib import Path

import pytest

from pod_inherit.inherit_header import GENERATED_MARKER, inherit_header, is_ours


def test_header_text() -> None:
    """Verify the header names the class and its source path."""
    header = inherit_header("My::Mod", Path("lib") / "My" / "Mod.pm")
    lines = header.splitlines()
    assert lines[0] == GENERATED_MARKER
    assert lines[2] == "this file, but rather the original, inline with My::Mod"
    assert lines[3] == "at lib/My/Mod.pm"
    assert header.endswith("\n=cut\n\n")


def test_missing_output_is_ours(tmp_path: Path) -> None:
    """Verify a file that does not exist yet may be written."""
    assert is_ours(tmp_path / "New.pod")


def test_generated_output_is_ours(tmp_path: Path) -> None:
    """Verify a file starting with the marker may be overwritten."""
    path = tmp_path / "Old.pod"
    path.write_text(inherit_header("Old", "Old.pm") + "=head1 NAME\n", encoding="utf-8")
    assert is_ours(path)


def test_foreign_output_is_skipped(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """Verify a hand-written file is left alone with a warning."""
    path = tmp_path / "Hand.pod"
    path.write_text("=head1 NAME\n\nHand written\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        assert not is_ours(path)
    assert "doesn't look like we generated it" in caplog.text


def test_marker_must_be_whole_first_line(tmp_path: Path) -> None:
    """Verify trailing text after the marker disqualifies the file."""
    path = tmp_path / "Edited.pod"
    path.write_text(GENERATED_MARKER + " (edited)\n", encoding="utf-8")
    assert not is_ours(path)

from __future__ import annotations

from pathlib import Path

import pytest

from media_relay.utils.file_helper import open_staging_file, remove_quietly


def test_staging_files_are_unique(tmp_path: Path) -> None:
    first, first_stream = open_staging_file(tmp_path / "stage", suffix=".mp4")
    second, second_stream = open_staging_file(tmp_path / "stage", suffix=".mp4")
    first_stream.close()
    second_stream.close()

    assert first != second
    assert first.name.startswith("media-")
    assert first.suffix == ".mp4"


def test_remove_quietly_tolerates_missing_file(tmp_path: Path) -> None:
    assert remove_quietly(tmp_path / "gone.mp4")


def test_remove_quietly_reports_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog) -> None:
    target = tmp_path / "locked.mp4"
    target.write_bytes(b"x")

    def _refuse(self, missing_ok: bool = False) -> None:
        raise PermissionError("locked")

    monkeypatch.setattr(Path, "unlink", _refuse)

    assert remove_quietly(target) is False
    assert any(getattr(record, "event", None) == "staging.cleanup_failed" for record in caplog.records)

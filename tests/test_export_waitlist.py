from __future__ import annotations

import csv
import importlib.util
import io
import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from sendrec.domain.entries import WaitlistEntry
from sendrec.repositories.json_storage import JsonWaitlistStorage

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "export_waitlist.py"


@pytest.fixture()
def export_module():
    spec = importlib.util.spec_from_file_location("export_waitlist", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture()
def snapshot(tmp_path):
    path = tmp_path / "waitlist.json"
    JsonWaitlistStorage(path).save(
        [
            WaitlistEntry(id=1, email="a@example.com", created_at=datetime(2024, 1, 1, tzinfo=timezone.utc)),
            WaitlistEntry(id=2, email="b@example.com", created_at=datetime(2024, 1, 2, tzinfo=timezone.utc)),
        ]
    )
    return path


def test_export_csv_newest_first(export_module, snapshot, monkeypatch):
    out = io.StringIO()
    monkeypatch.setattr(export_module.sys, "stdout", out)

    export_module.main(["--file", str(snapshot)])

    rows = list(csv.reader(io.StringIO(out.getvalue())))
    assert rows[0] == ["id", "email", "created_at"]
    assert [row[1] for row in rows[1:]] == ["b@example.com", "a@example.com"]


def test_export_json_to_file(export_module, snapshot, tmp_path):
    target = tmp_path / "out.json"
    export_module.main(["--file", str(snapshot), "--format", "json", "--output", str(target)])

    data = json.loads(target.read_text(encoding="utf-8"))
    assert [item["id"] for item in data] == [2, 1]


def test_export_missing_snapshot_exits(export_module, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        export_module.main(["--file", str(tmp_path / "missing.json")])
    assert "Snapshot not found" in str(excinfo.value)


def test_export_corrupt_snapshot_exits(export_module, tmp_path):
    path = tmp_path / "waitlist.json"
    path.write_text("{", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        export_module.main(["--file", str(path)])
    assert "Unreadable snapshot" in str(excinfo.value)

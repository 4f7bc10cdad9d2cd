from __future__ import annotations

import json
import os
from pathlib import Path

from qtpy import QtWidgets

from studypdf.annotations.persistence import PersistenceGateway, RecordKind


os.environ.setdefault("QT_QPA_PLATFORM", "minimal")


_QAPP = None


def _ensure_qapp():
    global _QAPP
    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    _QAPP = app
    return _QAPP


def _highlight_record() -> dict:
    return {
        "documentName": "paper.pdf",
        "highlights": [
            {
                "id": "b",
                "page": 2,
                "x": 10.0,
                "y": 20.5,
                "width": 30.0,
                "height": 8.25,
                "color": "#FFFF00",
                "note": "second",
                "created": 1700000000000,
                "modified": 1700000000000,
            },
            {
                "id": "a",
                "page": 1,
                "x": 1.0,
                "y": 2.0,
                "width": 6.0,
                "height": 7.0,
                "color": "#90EE90",
                "note": "",
                "created": 1700000000001,
                "modified": 1700000000001,
            },
        ],
    }


def test_save_then_load_round_trips_record(tmp_path: Path) -> None:
    gateway = PersistenceGateway(tmp_path)
    record = _highlight_record()

    assert gateway.save(RecordKind.HIGHLIGHTS, "paper", record) is True
    assert gateway.load(RecordKind.HIGHLIGHTS, "paper") == record

    bookmarks = {
        "documentName": "paper.pdf",
        "bookmarks": [{"id": "x", "page": 4, "created": 1}],
    }
    assert gateway.save(RecordKind.BOOKMARKS, "paper", bookmarks) is True
    assert gateway.load(RecordKind.BOOKMARKS, "paper") == bookmarks


def test_save_writes_pretty_utf8_json_in_kind_folder(tmp_path: Path) -> None:
    gateway = PersistenceGateway(tmp_path / "nested" / "root")
    record = {"documentName": "Über.pdf", "bookmarks": []}

    gateway.save(RecordKind.BOOKMARKS, "Über", record)

    path = tmp_path / "nested" / "root" / "bookmarks" / "Über.json"
    text = path.read_text(encoding="utf-8")
    assert "\n  \"documentName\": \"Über.pdf\"" in text
    assert json.loads(text) == record
    assert not path.with_suffix(".tmp").exists()


def test_load_missing_file_returns_empty_record(tmp_path: Path) -> None:
    gateway = PersistenceGateway(tmp_path)

    record = gateway.load(RecordKind.HIGHLIGHTS, "nonexistent")

    assert record["highlights"] == []
    assert gateway.last_status == {}


def test_load_invalid_json_returns_empty_and_reports_status(tmp_path: Path) -> None:
    _ensure_qapp()
    gateway = PersistenceGateway(tmp_path)
    events: list[dict] = []
    gateway.status_changed.connect(events.append)
    target = tmp_path / "bookmarks" / "broken.json"
    target.parent.mkdir(parents=True)
    target.write_text("{ not json", encoding="utf-8")

    record = gateway.load(RecordKind.BOOKMARKS, "broken")

    assert record["bookmarks"] == []
    assert len(events) == 1
    assert events[0]["op"] == "load"
    assert events[0]["ok"] is False
    assert events[0]["docId"] == "broken"


def test_load_wrong_layout_is_treated_as_empty(tmp_path: Path) -> None:
    gateway = PersistenceGateway(tmp_path)
    target = tmp_path / "highlights" / "odd.json"
    target.parent.mkdir(parents=True)
    target.write_text(json.dumps([1, 2, 3]), encoding="utf-8")

    assert gateway.load(RecordKind.HIGHLIGHTS, "odd")["highlights"] == []
    assert gateway.last_status["ok"] is False


def test_load_fills_missing_array_key(tmp_path: Path) -> None:
    gateway = PersistenceGateway(tmp_path)
    target = tmp_path / "highlights" / "bare.json"
    target.parent.mkdir(parents=True)
    target.write_text(json.dumps({"documentName": "bare.pdf"}), encoding="utf-8")

    record = gateway.load(RecordKind.HIGHLIGHTS, "bare")

    assert record == {"documentName": "bare.pdf", "highlights": []}


def test_save_failure_is_swallowed_and_reported(tmp_path: Path) -> None:
    _ensure_qapp()
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file in the way", encoding="utf-8")
    gateway = PersistenceGateway(blocker)
    events: list[dict] = []
    gateway.status_changed.connect(events.append)

    ok = gateway.save(RecordKind.HIGHLIGHTS, "paper", _highlight_record())

    assert ok is False
    assert events and events[-1]["op"] == "save"
    assert events[-1]["ok"] is False
    assert events[-1]["error"]

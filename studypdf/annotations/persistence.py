"""JSON sidecar storage for per-document highlights and bookmarks.

Layout under the injected data directory::

    <data_dir>/highlights/<doc_id>.json
    <data_dir>/bookmarks/<doc_id>.json

Failures never reach the reader: they are logged and reported through
``status_changed`` so a status bar (or a test) can observe them.
"""

from __future__ import annotations

import json
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from qtpy import QtCore

from studypdf.utils.logger import logger


class RecordKind(Enum):
    HIGHLIGHTS = "highlights"
    BOOKMARKS = "bookmarks"


def empty_record(kind: RecordKind, document_name: str = "") -> Dict[str, Any]:
    return {"documentName": document_name, kind.value: []}


class PersistenceGateway(QtCore.QObject):
    """Reads and writes sidecar records; never raises on I/O problems."""

    status_changed = QtCore.Signal(dict)

    def __init__(
        self,
        data_dir: Union[str, Path],
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.data_dir = Path(data_dir)
        self.last_status: Dict[str, object] = {}

    def path_for(self, kind: RecordKind, doc_id: str) -> Path:
        return self.data_dir / kind.value / f"{doc_id}.json"

    def save(self, kind: RecordKind, doc_id: str, record: Dict[str, Any]) -> bool:
        path = self.path_for(kind, doc_id)
        tmp = path.with_suffix(".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            text = json.dumps(record, ensure_ascii=False, indent=2)
            tmp.write_text(text, encoding="utf-8")
            os.replace(str(tmp), str(path))
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to save %s for %s at %s: %s",
                         kind.value, doc_id, path, exc)
            try:
                if tmp.exists():
                    tmp.unlink()
            except OSError:
                pass
            self._report("save", kind, doc_id, path, ok=False, error=str(exc))
            return False
        logger.debug("Saved %s for %s to %s", kind.value, doc_id, path)
        self._report("save", kind, doc_id, path, ok=True)
        return True

    def load(self, kind: RecordKind, doc_id: str) -> Dict[str, Any]:
        path = self.path_for(kind, doc_id)
        if not path.exists():
            return empty_record(kind)
        try:
            obj = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            # TODO: copy the unreadable file aside before the next save
            # overwrites it.
            logger.error("Failed to load %s for %s from %s: %s",
                         kind.value, doc_id, path, exc)
            self._report("load", kind, doc_id, path, ok=False, error=str(exc))
            return empty_record(kind)

        if not isinstance(obj, dict) or not isinstance(obj.get(kind.value, []), list):
            logger.error("Unexpected %s layout in %s; ignoring it", kind.value, path)
            self._report(
                "load", kind, doc_id, path, ok=False, error="unexpected layout"
            )
            return empty_record(kind)
        obj.setdefault(kind.value, [])
        obj.setdefault("documentName", "")
        return obj

    def _report(
        self,
        op: str,
        kind: RecordKind,
        doc_id: str,
        path: Path,
        *,
        ok: bool,
        error: str = "",
    ) -> None:
        status: Dict[str, object] = {
            "op": op,
            "kind": kind.value,
            "docId": doc_id,
            "path": str(path),
            "ok": ok,
            "error": error,
        }
        self.last_status = status
        self.status_changed.emit(status)

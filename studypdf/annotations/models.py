from __future__ import annotations

import hashlib
import time
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union

from .geometry import Rect


class HighlightColor(Enum):
    """Palette offered by the highlighter; values are the persisted hex codes."""

    YELLOW = "#FFFF00"
    GREEN = "#90EE90"
    BLUE = "#87CEEB"
    PINK = "#FFB6C1"
    ORANGE = "#FFA500"
    PURPLE = "#DDA0DD"

    @classmethod
    def from_value(cls, value: Union[str, "HighlightColor"]) -> "HighlightColor":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip()
        for color in cls:
            if text.upper() in (color.name, color.value):
                return color
        raise ValueError(f"Unknown highlight color: {value!r}")


def new_id() -> str:
    return uuid.uuid4().hex


def now_ms() -> int:
    return int(time.time() * 1000)


def _page_number(value: object) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Page must be an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"Page must be a whole number, got {value!r}")
    page = int(value)  # type: ignore[arg-type]
    if page < 1:
        raise ValueError(f"Page numbers start at 1, got {page}")
    return page


@dataclass(frozen=True)
class Highlight:
    page: int
    rect: Rect
    color: HighlightColor = HighlightColor.YELLOW
    note: str = ""
    id: str = field(default_factory=new_id)
    created: int = field(default_factory=now_ms)
    modified: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "page", _page_number(self.page))
        object.__setattr__(self, "color", HighlightColor.from_value(self.color))
        if not self.modified:
            object.__setattr__(self, "modified", self.created)

    def with_note(self, note: str, *, modified: int | None = None) -> "Highlight":
        return replace(
            self,
            note=str(note or ""),
            modified=modified if modified is not None else now_ms(),
        )

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {"id": self.id, "page": self.page}
        payload.update(self.rect.to_dict())
        payload.update(
            {
                "color": self.color.value,
                "note": self.note,
                "created": self.created,
                "modified": self.modified,
            }
        )
        return payload

    @classmethod
    def from_dict(
        cls,
        payload: Dict[str, object],
        fallback_color: Optional[HighlightColor] = None,
    ) -> "Highlight":
        """Parse a persisted entry.

        An unknown ``color`` raises ``ValueError`` unless ``fallback_color``
        is given, in which case that colour is used instead.
        """
        if not isinstance(payload, dict):
            raise ValueError("Highlight entry must be an object.")
        try:
            color = HighlightColor.from_value(payload.get("color", ""))
        except ValueError:
            if fallback_color is None:
                raise
            color = fallback_color
        try:
            rect = Rect(
                float(payload["x"]),  # type: ignore[arg-type]
                float(payload["y"]),  # type: ignore[arg-type]
                float(payload["width"]),  # type: ignore[arg-type]
                float(payload["height"]),  # type: ignore[arg-type]
            )
            created = int(payload.get("created") or 0)  # type: ignore[arg-type]
            return cls(
                id=str(payload["id"]),
                page=_page_number(payload["page"]),
                rect=rect,
                color=color,
                note=str(payload.get("note") or ""),
                created=created,
                modified=int(payload.get("modified") or created),  # type: ignore[arg-type]
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed highlight entry: {payload!r}") from exc


@dataclass(frozen=True)
class Bookmark:
    page: int
    id: str = field(default_factory=new_id)
    created: int = field(default_factory=now_ms)

    def __post_init__(self) -> None:
        object.__setattr__(self, "page", _page_number(self.page))

    def to_dict(self) -> Dict[str, object]:
        return {"id": self.id, "page": self.page, "created": self.created}

    @classmethod
    def from_dict(cls, payload: Dict[str, object]) -> "Bookmark":
        if not isinstance(payload, dict):
            raise ValueError("Bookmark entry must be an object.")
        try:
            return cls(
                id=str(payload["id"]),
                page=_page_number(payload["page"]),
                created=int(payload.get("created") or 0),  # type: ignore[arg-type]
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed bookmark entry: {payload!r}") from exc


def document_id(path: Union[str, Path], mode: str = "basename") -> str:
    """Sidecar key for a document.

    ``basename`` is the file name without its extension, so equally named
    files in different folders share annotations. ``path_hash`` keys by the
    resolved path instead.
    """
    path = Path(path)
    if mode == "basename":
        return path.stem
    if mode == "path_hash":
        try:
            resolved = str(path.expanduser().resolve())
        except OSError:
            resolved = str(path)
        return hashlib.sha256(resolved.encode("utf-8")).hexdigest()[:32]
    raise ValueError(f"Unknown document identity mode: {mode!r}")


def document_name(path: Union[str, Path]) -> str:
    return Path(path).name

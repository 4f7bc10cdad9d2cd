from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from qtpy import QtCore

from studypdf.utils.logger import logger

from .bookmark_store import BookmarkStore
from .geometry import MIN_SELECTION_SIZE, Rect, to_screen
from .highlight_store import HighlightStore
from .models import HighlightColor, document_id, document_name
from .persistence import PersistenceGateway
from .selection import SelectionController


@dataclass(frozen=True)
class OverlayItem:
    """One highlight projected to screen pixels for drawing."""

    id: str
    rect: Rect
    color: HighlightColor
    note: str = ""


class DocumentSession(QtCore.QObject):
    """Annotation state for the single document shown by one viewer surface.

    The owning surface forwards its render notifications to
    :meth:`on_page_rendered`; the session answers with overlay draw
    instructions through ``overlay_changed``.
    """

    highlights_changed = QtCore.Signal()
    bookmarks_changed = QtCore.Signal(list)
    overlay_changed = QtCore.Signal(int, object)
    document_opened = QtCore.Signal(str)

    def __init__(
        self,
        data_dir: Union[str, Path],
        config: Optional[Dict[str, Any]] = None,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        config = dict(config or {})
        self.identity_mode = str(config.get("document_identity") or "basename")
        self.gateway = PersistenceGateway(data_dir, parent=self)
        self.selection = SelectionController(
            min_size=float(config.get("min_selection_size", MIN_SELECTION_SIZE)),
            color=config.get("default_color") or HighlightColor.YELLOW,
            parent=self,
        )
        self.selection.highlight_created.connect(self._on_highlight_created)
        self.path: Optional[Path] = None
        self.document_id = ""
        self.highlights: Optional[HighlightStore] = None
        self.bookmarks: Optional[BookmarkStore] = None
        self.current_page = 1
        self.scale = float(config.get("default_scale", 1.5))

    @property
    def is_open(self) -> bool:
        return self.highlights is not None

    def open(self, path: Union[str, Path]) -> None:
        """Bind the session to ``path`` and load its sidecars."""
        path = Path(path)
        doc_id = document_id(path, self.identity_mode)
        name = document_name(path)
        highlights = HighlightStore(self.gateway, doc_id, name)
        bookmarks = BookmarkStore(self.gateway, doc_id, name)
        highlights.load()
        bookmarks.load()

        self.path = path
        self.document_id = doc_id
        self.highlights = highlights
        self.bookmarks = bookmarks
        self.current_page = 1
        self.selection.bind_store(highlights)
        self.selection.set_view(self.current_page, self.scale)
        logger.info("Opened %s (%d highlights, %d bookmarks)",
                    name, len(highlights), len(bookmarks))
        self.document_opened.emit(doc_id)
        self.highlights_changed.emit()
        self.bookmarks_changed.emit(bookmarks.pages())

    def close(self) -> None:
        self.selection.bind_store(None)
        self.path = None
        self.document_id = ""
        self.highlights = None
        self.bookmarks = None

    # ---- render coordinator hooks -------------------------------------------
    def on_page_rendered(self, page: int, scale: float) -> None:
        self.current_page = int(page)
        self.scale = float(scale)
        self.selection.set_view(self.current_page, self.scale)
        self.overlay_changed.emit(self.current_page, self.overlay())

    def overlay(
        self, page: Optional[int] = None, scale: Optional[float] = None
    ) -> List[OverlayItem]:
        if self.highlights is None:
            return []
        page = self.current_page if page is None else page
        scale = self.scale if scale is None else scale
        return [
            OverlayItem(h.id, to_screen(h.rect, scale), h.color, h.note)
            for h in self.highlights.for_page(page)
        ]

    # ---- user actions ------------------------------------------------------
    def delete_highlight(self, highlight_id: str) -> bool:
        if self.highlights is None or not self.highlights.remove(highlight_id):
            return False
        self._highlights_mutated()
        return True

    def edit_note(self, highlight_id: str, text: str) -> bool:
        if self.highlights is None or not self.highlights.set_note(highlight_id, text):
            return False
        self._highlights_mutated()
        return True

    def finish_note(self, text: Optional[str]) -> bool:
        """Close the note flow opened by a new highlight; ``None`` cancels it."""
        if text is None:
            self.selection.cancel_note()
            return False
        if not self.selection.finish_note(text):
            return False
        self._highlights_mutated()
        return True

    def toggle_bookmark(self, page: Optional[int] = None) -> bool:
        if self.bookmarks is None:
            return False
        added = self.bookmarks.toggle(self.current_page if page is None else page)
        self.bookmarks_changed.emit(self.bookmarks.pages())
        return added

    def is_bookmarked(self, page: Optional[int] = None) -> bool:
        if self.bookmarks is None:
            return False
        return self.bookmarks.is_bookmarked(
            self.current_page if page is None else page
        )

    def _on_highlight_created(self, _highlight) -> None:
        self._highlights_mutated()

    def _highlights_mutated(self) -> None:
        self.highlights_changed.emit()
        self.overlay_changed.emit(self.current_page, self.overlay())

"""Drag-to-highlight gesture handling.

Pointer coordinates are screen pixels relative to the rendered page at the
current render scale. The drag anchor is kept in stable coordinates so a
zoom in the middle of a drag does not distort the selection. Three states:
idle, dragging (live rubber band) and committing (highlight created, waiting
for the note flow to finish).
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Optional, Tuple

from qtpy import QtCore

from studypdf.utils.logger import logger

from .geometry import (
    MIN_SELECTION_SIZE,
    Rect,
    meets_minimum,
    normalized_rect,
    to_screen,
)
from .highlight_store import HighlightStore
from .models import Highlight, HighlightColor


class SelectionState(Enum):
    IDLE = auto()
    DRAGGING = auto()
    COMMITTING = auto()


class SelectionController(QtCore.QObject):
    # Live rubber band in screen pixels, or None to hide it.
    selection_changed = QtCore.Signal(object)
    note_requested = QtCore.Signal(str)
    highlight_created = QtCore.Signal(object)
    highlight_mode_changed = QtCore.Signal(bool)

    def __init__(
        self,
        store: Optional[HighlightStore] = None,
        *,
        min_size: float = MIN_SELECTION_SIZE,
        color: HighlightColor = HighlightColor.YELLOW,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.store = store
        self.min_size = float(min_size)
        self.color = HighlightColor.from_value(color)
        self.page = 1
        self.scale = 1.0
        self._state = SelectionState.IDLE
        self._highlight_mode = False
        self._anchor: Optional[Tuple[float, float]] = None
        self._pending_id: Optional[str] = None

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def highlight_mode(self) -> bool:
        return self._highlight_mode

    @property
    def pending_highlight_id(self) -> Optional[str]:
        return self._pending_id

    def bind_store(self, store: Optional[HighlightStore]) -> None:
        self.reset()
        self.store = store

    def set_view(self, page: int, scale: float) -> None:
        """Track the page/scale currently on screen; a page change drops a drag."""
        if page != self.page and self._state is SelectionState.DRAGGING:
            logger.debug("Page changed mid-drag; dropping selection")
            self.cancel()
        self.page = int(page)
        self.scale = float(scale)

    def set_color(self, color) -> None:
        self.color = HighlightColor.from_value(color)

    def set_highlight_mode(self, enabled: bool) -> None:
        enabled = bool(enabled)
        if enabled == self._highlight_mode:
            return
        self._highlight_mode = enabled
        if not enabled:
            self.cancel()
        self.highlight_mode_changed.emit(enabled)

    def toggle_highlight_mode(self) -> bool:
        self.set_highlight_mode(not self._highlight_mode)
        return self._highlight_mode

    def _stable_selection(self, x: float, y: float) -> Rect:
        ax, ay = self._anchor  # type: ignore[misc]
        return normalized_rect(ax, ay, x / self.scale, y / self.scale)

    # ---- pointer events ----------------------------------------------------
    def pointer_down(self, x: float, y: float) -> None:
        if not self._highlight_mode or self._state is not SelectionState.IDLE:
            return
        self._anchor = (float(x) / self.scale, float(y) / self.scale)
        self._state = SelectionState.DRAGGING
        self.selection_changed.emit(normalized_rect(x, y, x, y))

    def pointer_move(self, x: float, y: float) -> None:
        if not self._highlight_mode or self._state is not SelectionState.DRAGGING:
            return
        self.selection_changed.emit(
            to_screen(self._stable_selection(x, y), self.scale)
        )

    def pointer_up(self, x: float, y: float) -> Optional[Highlight]:
        if not self._highlight_mode or self._state is not SelectionState.DRAGGING:
            return None
        stable_rect = self._stable_selection(x, y)
        self._anchor = None
        self.selection_changed.emit(None)

        # The size threshold applies to what the user sees on screen.
        screen_rect = to_screen(stable_rect, self.scale)
        if not meets_minimum(screen_rect, self.min_size) or self.store is None:
            self._state = SelectionState.IDLE
            return None

        highlight = Highlight(
            page=self.page,
            rect=stable_rect,
            color=self.color,
        )
        self.store.add(highlight)
        self._pending_id = highlight.id
        self._state = SelectionState.COMMITTING
        self.highlight_created.emit(highlight)
        self.note_requested.emit(highlight.id)
        return highlight

    # ---- note flow ---------------------------------------------------------
    def finish_note(self, text: str) -> bool:
        """Attach ``text`` to the pending highlight; False if none was pending."""
        if self._state is not SelectionState.COMMITTING:
            return False
        saved = False
        if self.store is not None and self._pending_id is not None:
            saved = self.store.set_note(self._pending_id, text)
        self._pending_id = None
        self._state = SelectionState.IDLE
        return saved

    def cancel_note(self) -> None:
        if self._state is not SelectionState.COMMITTING:
            return
        self._pending_id = None
        self._state = SelectionState.IDLE

    def cancel(self) -> None:
        """Abandon an in-progress drag. The note flow is left alone."""
        if self._state is not SelectionState.DRAGGING:
            return
        self._anchor = None
        self._state = SelectionState.IDLE
        self.selection_changed.emit(None)

    def reset(self) -> None:
        self.cancel()
        self.cancel_note()

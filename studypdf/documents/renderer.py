"""Page rasterization on PyMuPDF.

``PageRenderer`` owns the open document, the current page and the render
scale. Each successful render emits ``page_rendered(page, scale)``, which a
:class:`~studypdf.annotations.session.DocumentSession` uses to redraw its
highlight overlay.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import fitz  # PyMuPDF
from qtpy import QtCore, QtGui

from studypdf.utils.logger import logger


class PageRenderer(QtCore.QObject):
    page_rendered = QtCore.Signal(int, float)
    document_changed = QtCore.Signal(int)

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        config = dict(config or {})
        self.default_scale = float(config.get("default_scale", 1.5))
        self.min_scale = float(config.get("min_scale", 0.5))
        self.max_scale = float(config.get("max_scale", 3.0))
        self.zoom_step = float(config.get("zoom_step", 0.25))
        self.thumbnail_scale = float(config.get("thumbnail_scale", 0.3))
        self._doc: Optional[fitz.Document] = None
        self._path: Optional[Path] = None
        self._current_page = 1
        self._scale = self._clamp(self.default_scale)

    # ---- document lifecycle -------------------------------------------------
    def open(self, path: Union[str, Path]) -> None:
        path = Path(path)
        try:
            doc = fitz.open(str(path))
        except Exception as exc:
            raise RuntimeError(f"Could not open {path}: {exc}") from exc
        if doc.page_count == 0:
            doc.close()
            raise RuntimeError(f"{path} does not contain any pages.")

        self.close()
        self._doc = doc
        self._path = path
        self._current_page = 1
        logger.info("Loaded %s with %d pages", path.name, doc.page_count)
        self.document_changed.emit(doc.page_count)

    def close(self) -> None:
        if self._doc is not None:
            self._doc.close()
            self._doc = None
            self._path = None

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def page_count(self) -> int:
        return int(self._doc.page_count) if self._doc is not None else 0

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def scale(self) -> float:
        return self._scale

    def zoom_percent(self) -> int:
        return int(round(self._scale * 100))

    # ---- navigation / zoom --------------------------------------------------
    def go_to_page(self, page: int) -> bool:
        if self._doc is None or not 1 <= int(page) <= self.page_count:
            return False
        self._current_page = int(page)
        self.render_current_page()
        return True

    def next_page(self) -> bool:
        return self.go_to_page(self._current_page + 1)

    def previous_page(self) -> bool:
        return self.go_to_page(self._current_page - 1)

    def _clamp(self, scale: float) -> float:
        return max(self.min_scale, min(self.max_scale, float(scale)))

    def set_scale(self, scale: float) -> None:
        clamped = self._clamp(scale)
        if clamped == self._scale:
            return
        self._scale = clamped
        if self._doc is not None:
            self.render_current_page()

    def zoom_in(self) -> None:
        self.set_scale(self._scale + self.zoom_step)

    def zoom_out(self) -> None:
        self.set_scale(self._scale - self.zoom_step)

    def reset_zoom(self) -> None:
        self.set_scale(self.default_scale)

    # ---- rasterization ------------------------------------------------------
    def _pixmap_to_image(self, pix) -> QtGui.QImage:
        fmt = QtGui.QImage.Format_RGBA8888 if pix.alpha else QtGui.QImage.Format_RGB888
        return QtGui.QImage(pix.samples, pix.width, pix.height, pix.stride, fmt).copy()

    def render_page(self, page: int, scale: float) -> QtGui.QImage:
        if self._doc is None:
            raise RuntimeError("No document is open.")
        if not 1 <= int(page) <= self.page_count:
            raise ValueError(f"Page {page} out of range (1-{self.page_count})")
        fitz_page = self._doc.load_page(int(page) - 1)
        pix = fitz_page.get_pixmap(matrix=fitz.Matrix(scale, scale))
        return self._pixmap_to_image(pix)

    def render_current_page(self) -> Optional[QtGui.QImage]:
        if self._doc is None:
            return None
        image = self.render_page(self._current_page, self._scale)
        self.page_rendered.emit(self._current_page, self._scale)
        return image

    def render_thumbnail(self, page: int) -> QtGui.QImage:
        return self.render_page(page, self.thumbnail_scale)

    def page_size(self, page: int) -> tuple[float, float]:
        """Unscaled page size in points, the space highlights are stored in."""
        if self._doc is None:
            raise RuntimeError("No document is open.")
        rect = self._doc.load_page(int(page) - 1).rect
        return float(rect.width), float(rect.height)

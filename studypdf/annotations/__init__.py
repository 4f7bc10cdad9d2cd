from .bookmark_store import BookmarkStore
from .geometry import (
    MIN_SELECTION_SIZE,
    Rect,
    meets_minimum,
    normalized_rect,
    to_screen,
    to_stable,
)
from .highlight_store import HighlightStore
from .models import (
    Bookmark,
    Highlight,
    HighlightColor,
    document_id,
    document_name,
)
from .persistence import PersistenceGateway, RecordKind, empty_record
from .selection import SelectionController, SelectionState
from .session import DocumentSession, OverlayItem

__all__ = [
    "Bookmark",
    "BookmarkStore",
    "DocumentSession",
    "Highlight",
    "HighlightColor",
    "HighlightStore",
    "MIN_SELECTION_SIZE",
    "OverlayItem",
    "PersistenceGateway",
    "Rect",
    "RecordKind",
    "SelectionController",
    "SelectionState",
    "document_id",
    "document_name",
    "empty_record",
    "meets_minimum",
    "normalized_rect",
    "to_screen",
    "to_stable",
]

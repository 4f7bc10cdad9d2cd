from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from studypdf.utils.logger import logger

from .models import Highlight, HighlightColor
from .persistence import PersistenceGateway, RecordKind


class HighlightStore:
    """Ordered highlights of one open document.

    Every mutation is written through to the gateway before returning.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        document_id: str,
        document_name: str = "",
        fallback_color: HighlightColor = HighlightColor.YELLOW,
    ) -> None:
        self.gateway = gateway
        self.document_id = document_id
        self.document_name = document_name
        self.fallback_color = HighlightColor.from_value(fallback_color)
        self._highlights: List[Highlight] = []

    def __len__(self) -> int:
        return len(self._highlights)

    def __iter__(self) -> Iterator[Highlight]:
        return iter(list(self._highlights))

    def get(self, highlight_id: str) -> Optional[Highlight]:
        for highlight in self._highlights:
            if highlight.id == highlight_id:
                return highlight
        return None

    def _index_of(self, highlight_id: str) -> int:
        for index, highlight in enumerate(self._highlights):
            if highlight.id == highlight_id:
                return index
        return -1

    def add(self, highlight: Highlight) -> None:
        if self._index_of(highlight.id) >= 0:
            raise ValueError(f"Duplicate highlight id: {highlight.id}")
        self._highlights.append(highlight)
        self._persist()

    def remove(self, highlight_id: str) -> bool:
        index = self._index_of(highlight_id)
        if index < 0:
            logger.warning("No highlight %s to remove in %s",
                           highlight_id, self.document_id)
            return False
        del self._highlights[index]
        self._persist()
        return True

    def set_note(self, highlight_id: str, text: str) -> bool:
        index = self._index_of(highlight_id)
        if index < 0:
            logger.warning("No highlight %s to annotate in %s",
                           highlight_id, self.document_id)
            return False
        self._highlights[index] = self._highlights[index].with_note(text)
        self._persist()
        return True

    def for_page(self, page: int) -> List[Highlight]:
        return [h for h in self._highlights if h.page == page]

    def replace_all(self, highlights: Iterable[Highlight]) -> None:
        self._highlights = list(highlights)

    def load(self) -> None:
        """Replace the contents with whatever the sidecar holds."""
        record = self.gateway.load(RecordKind.HIGHLIGHTS, self.document_id)
        highlights: List[Highlight] = []
        seen = set()
        for entry in record.get(RecordKind.HIGHLIGHTS.value, []):
            try:
                highlight = Highlight.from_dict(entry)
            except ValueError as exc:
                # Keep entries whose only fault is a colour outside the palette.
                try:
                    highlight = Highlight.from_dict(
                        entry, fallback_color=self.fallback_color
                    )
                except ValueError:
                    logger.warning("Skipping highlight in %s: %s",
                                   self.document_id, exc)
                    continue
                logger.warning("%s (highlight %s in %s); using %s",
                               exc, highlight.id, self.document_id,
                               self.fallback_color.name.lower())
            if highlight.id in seen:
                logger.warning("Skipping duplicate highlight id %s in %s",
                               highlight.id, self.document_id)
                continue
            seen.add(highlight.id)
            highlights.append(highlight)
        self.replace_all(highlights)

    def to_record(self) -> Dict[str, object]:
        return {
            "documentName": self.document_name,
            RecordKind.HIGHLIGHTS.value: [h.to_dict() for h in self._highlights],
        }

    def _persist(self) -> bool:
        return self.gateway.save(
            RecordKind.HIGHLIGHTS, self.document_id, self.to_record()
        )

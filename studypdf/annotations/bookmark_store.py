from __future__ import annotations

from typing import Dict, Iterable, Iterator, List

from studypdf.utils.logger import logger

from .models import Bookmark
from .persistence import PersistenceGateway, RecordKind


class BookmarkStore:
    """Bookmarked pages of one open document, unique per page and sorted."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        document_id: str,
        document_name: str = "",
    ) -> None:
        self.gateway = gateway
        self.document_id = document_id
        self.document_name = document_name
        self._bookmarks: List[Bookmark] = []

    def __len__(self) -> int:
        return len(self._bookmarks)

    def __iter__(self) -> Iterator[Bookmark]:
        return iter(list(self._bookmarks))

    def pages(self) -> List[int]:
        return [b.page for b in self._bookmarks]

    def is_bookmarked(self, page: int) -> bool:
        return any(b.page == page for b in self._bookmarks)

    def toggle(self, page: int) -> bool:
        """Flip the bookmark on ``page``; returns True when it is now set."""
        kept = [b for b in self._bookmarks if b.page != page]
        added = len(kept) == len(self._bookmarks)
        if added:
            kept.append(Bookmark(page=page))
        self._bookmarks = sorted(kept, key=lambda b: b.page)
        self._persist()
        return added

    def replace_all(self, bookmarks: Iterable[Bookmark]) -> None:
        unique: Dict[int, Bookmark] = {}
        for bookmark in bookmarks:
            if bookmark.page in unique:
                logger.warning("Dropping duplicate bookmark for page %s in %s",
                               bookmark.page, self.document_id)
                continue
            unique[bookmark.page] = bookmark
        self._bookmarks = sorted(unique.values(), key=lambda b: b.page)

    def load(self) -> None:
        record = self.gateway.load(RecordKind.BOOKMARKS, self.document_id)
        bookmarks: List[Bookmark] = []
        for entry in record.get(RecordKind.BOOKMARKS.value, []):
            try:
                bookmarks.append(Bookmark.from_dict(entry))
            except ValueError as exc:
                logger.warning("Skipping bookmark in %s: %s",
                               self.document_id, exc)
        self.replace_all(bookmarks)

    def to_record(self) -> Dict[str, object]:
        return {
            "documentName": self.document_name,
            RecordKind.BOOKMARKS.value: [b.to_dict() for b in self._bookmarks],
        }

    def _persist(self) -> bool:
        return self.gateway.save(
            RecordKind.BOOKMARKS, self.document_id, self.to_record()
        )

from __future__ import annotations

import json
import random
from pathlib import Path

from studypdf.annotations.bookmark_store import BookmarkStore
from studypdf.annotations.models import Bookmark
from studypdf.annotations.persistence import PersistenceGateway


def _store(tmp_path: Path) -> BookmarkStore:
    return BookmarkStore(PersistenceGateway(tmp_path), "paper", "paper.pdf")


def test_toggle_sequence_leaves_only_page_two(tmp_path: Path) -> None:
    store = _store(tmp_path)

    assert store.toggle(5) is True
    assert store.toggle(2) is True
    assert store.toggle(5) is False

    assert store.pages() == [2]
    saved = json.loads((tmp_path / "bookmarks" / "paper.json").read_text("utf-8"))
    assert [b["page"] for b in saved["bookmarks"]] == [2]
    assert set(saved["bookmarks"][0]) == {"id", "page", "created"}


def test_double_toggle_restores_previous_pages(tmp_path: Path) -> None:
    store = _store(tmp_path)
    for page in (9, 1, 4):
        store.toggle(page)
    before = store.pages()

    store.toggle(7)
    store.toggle(7)

    assert store.pages() == before == [1, 4, 9]


def test_pages_stay_sorted_and_unique_after_random_toggles(tmp_path: Path) -> None:
    store = _store(tmp_path)
    rng = random.Random(1234)
    expected: set[int] = set()
    for _ in range(200):
        page = rng.randint(1, 15)
        store.toggle(page)
        expected ^= {page}
        pages = store.pages()
        assert pages == sorted(set(pages))
    assert store.pages() == sorted(expected)


def test_is_bookmarked(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.toggle(3)
    assert store.is_bookmarked(3)
    assert not store.is_bookmarked(4)


def test_replace_all_sorts_and_drops_duplicate_pages(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.replace_all(
        [Bookmark(page=8, id="a"), Bookmark(page=2, id="b"), Bookmark(page=8, id="c")]
    )
    assert [(b.page, b.id) for b in store] == [(2, "b"), (8, "a")]


def test_load_round_trips_through_sidecar(tmp_path: Path) -> None:
    first = _store(tmp_path)
    first.toggle(12)
    first.toggle(3)

    second = _store(tmp_path)
    second.load()

    assert second.pages() == [3, 12]
    assert [b.id for b in second] == [b.id for b in first]

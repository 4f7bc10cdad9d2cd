from __future__ import annotations

import json
from pathlib import Path

import fitz

from studypdf.cli import build_parser, main


def _base_args(tmp_path: Path) -> list[str]:
    return [
        "--config", str(tmp_path / "absent.yaml"),
        "--data-dir", str(tmp_path / "data"),
    ]


def test_parser_requires_a_command() -> None:
    parser = build_parser()
    args = parser.parse_args(["bookmarks", "paper.pdf"])
    assert args.command == "bookmarks"
    assert args.pdf == "paper.pdf"


def test_toggle_then_list_bookmarks(tmp_path: Path, capsys) -> None:
    base = _base_args(tmp_path)
    assert main(base + ["toggle-bookmark", "/x/paper.pdf", "3"]) == 0
    assert main(base + ["toggle-bookmark", "/x/paper.pdf", "1"]) == 0
    capsys.readouterr()

    assert main(base + ["bookmarks", "/y/paper.pdf"]) == 0

    assert capsys.readouterr().out.strip() == "Page 1, Page 3"
    saved = json.loads(
        (tmp_path / "data" / "bookmarks" / "paper.json").read_text("utf-8")
    )
    assert saved["documentName"] == "paper.pdf"


def test_toggle_bookmark_rejects_page_zero(tmp_path: Path) -> None:
    assert main(_base_args(tmp_path) + ["toggle-bookmark", "paper.pdf", "0"]) == 2


def test_highlights_listing(tmp_path: Path, capsys) -> None:
    sidecar = tmp_path / "data" / "highlights" / "paper.json"
    sidecar.parent.mkdir(parents=True)
    sidecar.write_text(
        json.dumps(
            {
                "documentName": "paper.pdf",
                "highlights": [
                    {"id": "h1", "page": 2, "x": 1, "y": 2, "width": 10,
                     "height": 6, "color": "#FFFF00", "note": "why",
                     "created": 1, "modified": 1},
                    {"id": "h2", "page": 5, "x": 1, "y": 2, "width": 10,
                     "height": 6, "color": "#FFA500", "note": "",
                     "created": 2, "modified": 2},
                ],
            }
        ),
        encoding="utf-8",
    )

    assert main(_base_args(tmp_path) + ["highlights", "paper.pdf", "--page", "2"]) == 0
    out = capsys.readouterr().out
    assert "h1" in out and "yellow" in out and "why" in out
    assert "h2" not in out


def test_merge_and_split(tmp_path: Path, capsys) -> None:
    sources = []
    for name, pages in (("a", 2), ("b", 3)):
        doc = fitz.open()
        for _ in range(pages):
            doc.new_page()
        path = tmp_path / f"{name}.pdf"
        doc.save(str(path))
        doc.close()
        sources.append(str(path))
    merged = tmp_path / "merged.pdf"

    assert main(_base_args(tmp_path) + ["merge", str(merged)] + sources) == 0
    with fitz.open(str(merged)) as doc:
        assert doc.page_count == 5

    out_dir = tmp_path / "parts"
    assert main(_base_args(tmp_path) + [
        "split", str(merged), "1,2-5", "--out-dir", str(out_dir)
    ]) == 0
    assert sorted(p.name for p in out_dir.iterdir()) == [
        "merged_part1.pdf", "merged_part2.pdf"
    ]


def test_split_with_bad_range_fails_cleanly(tmp_path: Path) -> None:
    doc = fitz.open()
    doc.new_page()
    path = tmp_path / "one.pdf"
    doc.save(str(path))
    doc.close()

    assert main(_base_args(tmp_path) + ["split", str(path), "3-4"]) == 1


def test_highlights_rejects_page_zero(tmp_path: Path, capsys) -> None:
    assert main(_base_args(tmp_path) + ["highlights", "paper.pdf", "--page", "0"]) == 2
    assert capsys.readouterr().out == ""

"""Merge and split whole documents with PyMuPDF.

Annotation sidecars are never touched here; merged or split files start
with no highlights of their own.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import fitz  # PyMuPDF

from studypdf.utils.logger import logger

PageRange = Tuple[int, int]
PathLike = Union[str, Path]


def parse_page_ranges(text: Optional[str], total_pages: int) -> List[PageRange]:
    """Parse ``"1-3,5,7-"`` into 1-based inclusive ``(start, end)`` pairs.

    Empty input selects every page. Open ends run to the last page.
    """
    if total_pages <= 0:
        return []
    if text is None or not str(text).strip():
        return [(1, total_pages)]

    ranges: List[PageRange] = []
    for chunk in str(text).split(","):
        part = chunk.strip().lower()
        if not part:
            continue
        try:
            if part == "first":
                start = end = 1
            elif part == "last":
                start = end = total_pages
            elif "-" in part:
                s, e = part.split("-", 1)
                start = int(s) if s.strip() else 1
                end = int(e) if e.strip() else total_pages
            else:
                start = end = int(part)
        except ValueError as exc:
            raise ValueError(f"Invalid page range: {chunk!r}") from exc
        if start < 1 or end > total_pages or start > end:
            raise ValueError(
                f"Page range {chunk.strip()!r} out of bounds (1-{total_pages})"
            )
        ranges.append((start, end))
    if not ranges:
        raise ValueError(f"No pages selected by {text!r}")
    return ranges


def compose_document(
    sources: Sequence[Tuple[PathLike, Optional[Sequence[PageRange]]]],
) -> fitz.Document:
    """Build a new document from page ranges of ``sources``, in order.

    A ``None`` range list takes every page of that source.
    """
    output = fitz.open()
    try:
        for source, ranges in sources:
            with fitz.open(str(source)) as src:
                selected = ranges or [(1, src.page_count)]
                for start, end in selected:
                    if start < 1 or end > src.page_count or start > end:
                        raise ValueError(
                            f"Page range {start}-{end} out of bounds for {source}"
                        )
                    output.insert_pdf(src, from_page=start - 1, to_page=end - 1)
    except Exception:
        output.close()
        raise
    return output


def document_bytes(doc: fitz.Document) -> bytes:
    return doc.tobytes(garbage=3, deflate=True)


def merge_documents(paths: Sequence[PathLike], output: PathLike) -> Path:
    if not paths:
        raise ValueError("Nothing to merge.")
    output = Path(output)
    doc = compose_document([(path, None) for path in paths])
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(document_bytes(doc))
        logger.info("Merged %d documents into %s (%d pages)",
                    len(paths), output, doc.page_count)
    finally:
        doc.close()
    return output


def split_document(
    path: PathLike, ranges: Union[str, Sequence[PageRange]], out_dir: PathLike
) -> List[Path]:
    """Write one ``<stem>_part<N>.pdf`` per range into ``out_dir``."""
    path = Path(path)
    out_dir = Path(out_dir)
    if isinstance(ranges, str):
        with fitz.open(str(path)) as src:
            ranges = parse_page_ranges(ranges, src.page_count)

    out_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for index, page_range in enumerate(ranges, start=1):
        doc = compose_document([(path, [page_range])])
        try:
            target = out_dir / f"{path.stem}_part{index}.pdf"
            target.write_bytes(document_bytes(doc))
        finally:
            doc.close()
        written.append(target)
    logger.info("Split %s into %d files under %s", path.name, len(written), out_dir)
    return written

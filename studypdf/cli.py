import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from qtpy import QtCore

from studypdf.annotations import BookmarkStore, HighlightStore, PersistenceGateway
from studypdf.annotations.models import document_id, document_name
from studypdf.configs import default_data_dir, get_config
from studypdf.documents import merge_documents, split_document
from studypdf.utils.logger import __appname__, logger, set_log_level
from studypdf.version import get_version

__all__ = ["build_parser", "main"]


def build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser for the ``studypdf`` command."""
    parser = argparse.ArgumentParser(
        prog="studypdf",
        description="Inspect PDF highlights/bookmarks and merge or split PDFs.",
    )
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"%(prog)s {get_version()}",
    )
    default_config_file = str(Path.home() / ".studypdfrc")
    parser.add_argument(
        "--config",
        dest="config",
        default=default_config_file,
        help=f"config file or yaml format string (default {default_config_file})",
    )
    parser.add_argument(
        "--data-dir",
        dest="data_dir",
        default=argparse.SUPPRESS,
        help="root folder holding highlights/ and bookmarks/",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=argparse.SUPPRESS,
        help="logging level",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("highlights", help="list highlights stored for a PDF")
    p.add_argument("pdf")
    p.add_argument("--page", type=int, default=None, help="only this page")

    p = sub.add_parser("bookmarks", help="list bookmarked pages of a PDF")
    p.add_argument("pdf")

    p = sub.add_parser("toggle-bookmark", help="add or remove a page bookmark")
    p.add_argument("pdf")
    p.add_argument("page", type=int)

    p = sub.add_parser("merge", help="concatenate PDFs into one file")
    p.add_argument("output")
    p.add_argument("inputs", nargs="+")

    p = sub.add_parser("split", help="write one PDF per page range")
    p.add_argument("pdf")
    p.add_argument("ranges", help='page ranges such as "1-3,4,5-"')
    p.add_argument("--out-dir", default=".", help="output folder")
    return parser


def _config_from_args(args: argparse.Namespace) -> dict:
    overrides = {}
    for key in ("data_dir", "log_level"):
        if hasattr(args, key):
            overrides[key] = getattr(args, key)
    config_source = args.config
    if config_source and not Path(config_source).expanduser().exists():
        config_source = None
    elif config_source:
        config_source = str(Path(config_source).expanduser())
    return get_config(config_source, overrides)


def _stores(config: dict, pdf: str):
    gateway = PersistenceGateway(default_data_dir(config))
    doc_id = document_id(pdf, config["document_identity"])
    name = document_name(pdf)
    highlights = HighlightStore(gateway, doc_id, name)
    bookmarks = BookmarkStore(gateway, doc_id, name)
    highlights.load()
    bookmarks.load()
    return highlights, bookmarks


def _format_highlight(highlight) -> str:
    r = highlight.rect
    line = (
        f"p{highlight.page:<4} {highlight.color.name.lower():<7} "
        f"x={r.x:.2f} y={r.y:.2f} w={r.width:.2f} h={r.height:.2f}  {highlight.id}"
    )
    if highlight.note:
        line += f"\n      {highlight.note}"
    return line


def main(argv: Optional[Sequence[str]] = None) -> int:
    QtCore.QCoreApplication.setApplicationName(__appname__)
    args = build_parser().parse_args(argv)
    try:
        config = _config_from_args(args)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2
    set_log_level(config["log_level"])

    if args.command == "highlights":
        if args.page is not None and args.page < 1:
            logger.error("Page numbers start at 1, got %d", args.page)
            return 2
        highlights, _ = _stores(config, args.pdf)
        if args.page is not None:
            items = highlights.for_page(args.page)
        else:
            items = list(highlights)
        for highlight in items:
            print(_format_highlight(highlight))
        if not items:
            print("No highlights.")
        return 0

    if args.command == "bookmarks":
        _, bookmarks = _stores(config, args.pdf)
        pages: List[int] = bookmarks.pages()
        print(", ".join(f"Page {p}" for p in pages) if pages else "No bookmarks.")
        return 0

    if args.command == "toggle-bookmark":
        _, bookmarks = _stores(config, args.pdf)
        try:
            added = bookmarks.toggle(args.page)
        except ValueError as exc:
            logger.error("%s", exc)
            return 2
        print(f"Page {args.page} {'bookmarked' if added else 'unbookmarked'}.")
        return 0

    try:
        if args.command == "merge":
            out = merge_documents(args.inputs, args.output)
            print(out)
        elif args.command == "split":
            for out in split_document(args.pdf, args.ranges, args.out_dir):
                print(out)
    except (RuntimeError, ValueError, OSError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

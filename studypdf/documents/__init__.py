from .editing import (
    compose_document,
    document_bytes,
    merge_documents,
    parse_page_ranges,
    split_document,
)
from .renderer import PageRenderer

__all__ = [
    "PageRenderer",
    "compose_document",
    "document_bytes",
    "merge_documents",
    "parse_page_ranges",
    "split_document",
]

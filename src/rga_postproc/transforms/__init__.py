"""Streaming transforms applied to extractor output."""

from .encoding import BINARY_SENTINEL, postproc_encoding, strip_bom
from .line_prefix import postproc_prefix
from .pagebreaks import FORM_FEED, page_label, postproc_pagebreaks
from .trailer import add_newline

__all__ = [
    "BINARY_SENTINEL",
    "FORM_FEED",
    "add_newline",
    "page_label",
    "postproc_encoding",
    "postproc_pagebreaks",
    "postproc_prefix",
    "strip_bom",
]

"""Markdown to plain text conversion for rule descriptions and reports."""

import html
import logging
import re
from functools import lru_cache

from markdown_it import MarkdownIt

logger = logging.getLogger(__name__)

_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")

_FALLBACK_PATTERNS = [
    (re.compile(r"```[\s\S]*?```"), " "),
    (re.compile(r"`[^`]*`"), " "),
    (re.compile(r"!\[[^\]]*\]\([^)]+\)"), " "),
    (re.compile(r"\[([^\]]*)\]\([^)]+\)"), r"\1"),
    (re.compile(r"^\s{0,3}#{1,6}\s+", re.MULTILINE), ""),
    (re.compile(r"[>*_~\-]+"), " "),
]


@lru_cache(maxsize=1)
def _markdown_parser() -> MarkdownIt:
    md = MarkdownIt("commonmark")
    md.enable("table")
    md.enable("strikethrough")
    return md


def convert_markdown_to_plain_text(markdown: str | None) -> str:
    """Render Markdown and reduce it to single-spaced plain text."""
    source = markdown or ""
    try:
        rendered = _markdown_parser().render(source)
    except Exception as e:
        logger.debug(f"Markdown rendering failed, stripping markup instead: {e}")
        return _strip_markdown(source)

    text = html.unescape(_TAG.sub("", rendered))
    return _WHITESPACE.sub(" ", text).strip()


def _strip_markdown(source: str) -> str:
    for pattern, replacement in _FALLBACK_PATTERNS:
        source = pattern.sub(replacement, source)
    return _WHITESPACE.sub(" ", source).strip()

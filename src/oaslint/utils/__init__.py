"""Conversion and retrieval helpers used around the lint engine."""

from .images import convert_image_to_data_url
from .portal import fetch_repo_map, fetch_spec_from_portal
from .text import convert_markdown_to_plain_text

__all__ = [
    "convert_image_to_data_url",
    "convert_markdown_to_plain_text",
    "fetch_repo_map",
    "fetch_spec_from_portal",
]

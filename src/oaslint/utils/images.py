"""Image download into data URLs for self-contained reports."""

import base64
import mimetypes
from urllib.parse import urlparse

import requests

from ..errors import FetchError

_TIMEOUT = 10  # seconds


def convert_image_to_data_url(image_url: str, timeout: float = _TIMEOUT) -> str:
    """Download an image and embed it as a ``data:`` URL.

    Raises:
        FetchError: Network error or non-success HTTP status
    """
    try:
        response = requests.get(image_url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(image_url, str(e)) from e

    mime_type = response.headers.get("Content-Type", "").split(";")[0].strip()
    if not mime_type:
        mime_type = mimetypes.guess_type(urlparse(image_url).path)[0] or "application/octet-stream"

    payload = base64.b64encode(response.content).decode("ascii")
    return f"data:{mime_type};base64,{payload}"

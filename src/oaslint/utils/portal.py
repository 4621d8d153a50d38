"""Retrieval of documents and the repository map from the documents portal.

Both helpers log and return None on any failure; callers decide whether a
missing document matters.
"""

import logging
from typing import Any

import requests
import yaml

from ..config import PortalConfig

logger = logging.getLogger(__name__)


def fetch_repo_map(title: str, config: PortalConfig | None = None) -> dict[str, str] | None:
    """Find the repository-map entry for the service named ``title``.

    The portal serves a YAML file shaped like::

        services:
          - Orders API: orders-repo
          - Billing API: billing-repo

    Returns:
        The matching single-entry mapping, or None when absent or unavailable
    """
    config = config or PortalConfig()
    url = f"{config.base_url}{config.repositories_path}"
    try:
        response = requests.get(url, timeout=config.timeout_seconds)
        response.raise_for_status()
        parsed = yaml.safe_load(response.text)
        services = parsed["services"]
        for entry in services:
            if isinstance(entry, dict) and title in entry:
                return entry
        return None
    except (requests.RequestException, yaml.YAMLError, KeyError, TypeError) as e:
        logger.error(f"Failed to load repository map from {url}: {e}")
        return None


def fetch_spec_from_portal(repo: str, path: str, config: PortalConfig | None = None) -> Any | None:
    """Fetch a document stored at ``path`` in repository ``repo``.

    Returns:
        The ``yaml`` field of the portal response (document text), or None
    """
    config = config or PortalConfig()
    url = f"{config.base_url}/api/gitea"
    try:
        response = requests.get(
            url,
            params={"repo": repo, "path": path},
            timeout=config.timeout_seconds,
        )
        data = response.json()
        if not response.ok:
            error = data.get("error") if isinstance(data, dict) else None
            raise requests.HTTPError(error or "Failed to fetch YAML", response=response)
        return data["yaml"]
    except (requests.RequestException, ValueError, KeyError, TypeError) as e:
        logger.error(f"Failed to fetch spec {path} from {repo}: {e}")
        return None

"""Fetch Rego sources over HTTP.

Each URL becomes one entry of the path -> contents mapping, keyed by the
URL itself so parse errors point back at where the policy came from.
"""

from __future__ import annotations

__all__ = [
    "fetch_remote_files",
]

from collections.abc import Iterable

import httpx

from rego_loader.constants import DEFAULT_REMOTE_TIMEOUT_SECONDS
from rego_loader.exceptions import PolicySourceError
from rego_loader.utils.logging import get_logger

_logger = get_logger("collect")


def fetch_remote_files(
    urls: Iterable[str],
    timeout: float = DEFAULT_REMOTE_TIMEOUT_SECONDS,
) -> dict[str, str]:
    """Download Rego sources.

    Args:
        urls: URLs returning Rego source text.
        timeout: Request timeout in seconds.

    Returns:
        Mapping of URL to response body.

    Raises:
        PolicySourceError: If a URL cannot be reached or returns an
            error status.
    """
    files: dict[str, str] = {}

    with httpx.Client(timeout=timeout, follow_redirects=True) as client:
        for url in urls:
            if url in files:
                continue
            try:
                response = client.get(url)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise PolicySourceError(url, f"HTTP {e.response.status_code}") from e
            except httpx.HTTPError as e:
                raise PolicySourceError(url, str(e) or type(e).__name__) from e

            files[url] = response.text
            _logger.debug({"event": "remote_policy_fetched", "url": url, "bytes": len(response.content)})

    return files

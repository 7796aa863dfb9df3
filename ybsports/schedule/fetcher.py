"""HTTP fetcher for third-party KBO schedule sources."""

from __future__ import annotations

import logging

import requests

from ybsports.schedule.errors import FetchError
from ybsports.settings import get_settings

logger = logging.getLogger(__name__)
MAX_BODY_SNIPPET = 300


def fetch_page(
    url: str,
    *,
    accept: str = "text/html",
    timeout: int | None = None,
    user_agent: str | None = None,
) -> str:
    """Fetch one upstream document and return its decoded text.

    One attempt only. Raises FetchError on timeout, network failure or a
    non-2xx status.
    """

    settings = get_settings()
    headers = {
        "User-Agent": user_agent or settings.kbo_user_agent,
        "Accept": accept,
    }
    timeout_seconds = timeout or settings.kbo_fetch_timeout_seconds

    try:
        response = requests.get(url, headers=headers, timeout=timeout_seconds)
    except requests.Timeout as exc:
        logger.error("Schedule fetch timed out after %ss url=%s", timeout_seconds, url)
        raise FetchError("Schedule source timed out", url=url, cause=exc) from exc
    except requests.RequestException as exc:
        logger.error("Schedule fetch failed url=%s error=%s", url, exc)
        raise FetchError("Failed to reach schedule source", url=url, cause=exc) from exc

    if not 200 <= response.status_code < 300:
        body_snippet = (response.text or "")[:MAX_BODY_SNIPPET]
        logger.error(
            "Schedule source non-2xx status=%s url=%s body=%s",
            response.status_code,
            url,
            body_snippet,
        )
        raise FetchError(
            "Schedule source returned non-2xx response",
            url=url,
            status=response.status_code,
            body=body_snippet,
        )

    logger.debug("Fetched schedule source status=%s url=%s", response.status_code, url)
    return response.text

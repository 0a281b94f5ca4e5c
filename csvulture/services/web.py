"""Single-shot HTTP GET returning the body as text."""

import logging
from typing import Optional

import httpx

from csvulture.config import Settings, get_settings
from csvulture.telemetry import traced

logger = logging.getLogger(__name__)


def build_headers(authorization: Optional[str], settings: Settings) -> dict[str, str]:
    headers = {"User-Agent": settings.http_user_agent}
    if authorization:
        # Sent verbatim, scheme included ("Bearer ...", "Basic ...")
        headers["Authorization"] = authorization
    return headers


@traced("csvulture.web.fetch")
def fetch_text(
    url: str,
    authorization: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> str:
    """GET url and return the decoded body.

    Transport failures and non-2xx responses raise httpx errors; nothing is retried.
    """
    settings = settings or get_settings()
    headers  = build_headers(authorization, settings)

    with httpx.Client(timeout=settings.http_timeout_seconds, follow_redirects=True) as client:
        resp = client.get(url, headers=headers)
        resp.raise_for_status()
        logger.info(f"[web] GET {url} → {resp.status_code} ({len(resp.content)} bytes)")
        return resp.text

"""
Shared HTTP clients.

Provides a pre-configured ``requests.Session`` for synchronous callers and
an ``httpx.AsyncClient`` factory for concurrent fetches.  Both make a single
attempt per request: no retry adapter, no backoff.  A failed page surfaces
to the caller instead of being replayed.

Usage::

    from urchin_radar.services.http import session

    resp = session.get("https://api.gbif.org/v1/occurrence/search", params={...})
    if not resp.ok:
        ...

    async with create_async_client() as client:
        resp = await client.get(url, params={...})
"""

from __future__ import annotations

import httpx
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

#: Single pass per request.  Status codes are left for the caller to inspect.
NO_RETRY = Retry(total=0, raise_on_status=False)

DEFAULT_TIMEOUT = 30  # seconds
USER_AGENT = "urchin-radar/0.1"


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Build a ``requests.Session`` with a retry adapter mounted.

    Args:
        retry: Retry strategy (defaults to ``NO_RETRY``).
        timeout: Default timeout applied to every request.
    """
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or NO_RETRY)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = USER_AGENT

    # Monkey-patch send to inject a default timeout so callers don't need to
    # remember to pass ``timeout=`` every time.
    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return _original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s


def create_async_client(
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    Build an ``httpx.AsyncClient`` with the same headers and timeout.

    Args:
        timeout: Default timeout applied to every request.
        transport: Custom transport (tests pass ``httpx.MockTransport``).
    """
    return httpx.AsyncClient(
        headers={"User-Agent": USER_AGENT},
        timeout=httpx.Timeout(timeout),
        transport=transport,
    )


#: Module-level session, import and use directly.
session: requests.Session = create_session()

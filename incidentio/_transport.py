"""Transport layer — a thin adapter over a requests.Session.

Sends one prepared request, returns the raw response. Connection
pooling, TLS and redirects are left to requests. No retries: a failed
send is reported once, to the caller.
"""

from __future__ import annotations

import logging

import requests

logger = logging.getLogger("incidentio.transport")


class Transport:
    """Send prepared requests through a (possibly shared) HTTP session."""

    def __init__(self, session: requests.Session | None = None) -> None:
        # HTTP session (reused for connection pooling)
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

    @property
    def session(self) -> requests.Session:
        return self._session

    def send(
        self, request: requests.PreparedRequest, timeout: float | None = None
    ) -> requests.Response:
        """Send *request*. requests exceptions propagate unchanged.

        Proxy and CA bundle settings from the environment apply, as they
        would for Session.request().
        """
        settings = self._session.merge_environment_settings(
            request.url, {}, None, None, None
        )
        try:
            return self._session.send(request, timeout=timeout, **settings)
        except requests.RequestException as e:
            logger.debug("Transport failure for %s %s: %s", request.method, request.url, e)
            raise

    def close(self) -> None:
        """Close the session if this transport created it."""
        if not self._owns_session:
            return
        self._session.close()

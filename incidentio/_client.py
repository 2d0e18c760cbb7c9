"""Client — request builder, dispatch and response decoding.

Every resource accessor funnels through the same pipeline:

    new_request()  resolve path, encode body, add auth + user agent
    bare_do()      check ctx, send via Transport, wrap, check status
    do()           decode the JSON body into the accessor's result type

API docs: https://api-docs.incident.io/#section/Making-requests
"""

from __future__ import annotations

import configparser
import json
import logging
import os
import threading
import time
from pathlib import Path
from typing import Any
from urllib.parse import urljoin, urlsplit

import requests
from pydantic import BaseModel, ValidationError

from ._context import Context
from ._errors import (
    APIError,
    ConfigurationError,
    DecodeError,
    InvalidArgumentError,
    TransportError,
)
from ._services import (
    ActionsService,
    CustomFieldsService,
    IncidentRolesService,
    IncidentsService,
    SeveritiesService,
)
from ._transport import Transport
from .enums import API_KEY_ENV_VAR, DEFAULT_BASE_URL, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from .models import Envelope, ErrorResponse

logger = logging.getLogger("incidentio.client")

# Smallest timeout handed to requests; zero is rejected by urllib3.
_MIN_TIMEOUT = 0.001


# ---------------------------------------------------------------------------
# Configuration file
# ---------------------------------------------------------------------------

def _read_config() -> dict[str, str]:
    """Read the [incidentio] section of the first config file found.

    Search order:
      1. ./incidentio.cfg  (current working directory)
      2. ~/.incidentio/incidentio.cfg  (user home)
    """
    candidates = [
        Path.cwd() / "incidentio.cfg",
        Path.home() / ".incidentio" / "incidentio.cfg",
    ]
    for path in candidates:
        if path.is_file():
            cfg = configparser.ConfigParser()
            cfg.read(path)
            if cfg.has_section("incidentio"):
                logger.debug("Configuration read from %s", path)
                return dict(cfg.items("incidentio"))
    return {}


def _resolve_base_url() -> str:
    endpoint = _read_config().get("endpoint")
    if endpoint:
        return endpoint.strip()
    return DEFAULT_BASE_URL


def _resolve_api_key() -> str:
    """API key from the environment, then the config file. Empty if unset."""
    key = os.environ.get(API_KEY_ENV_VAR)
    if key:
        return key
    return _read_config().get("api_key", "").strip()


# ---------------------------------------------------------------------------
# Response wrapper
# ---------------------------------------------------------------------------

class Response:
    """An incident.io API response.

    Wraps the requests.Response so pagination or rate limit headers can
    be surfaced later without changing call signatures.
    """

    def __init__(self, raw: requests.Response) -> None:
        self.raw = raw

    @property
    def status_code(self) -> int:
        return self.raw.status_code

    @property
    def status(self) -> str:
        """Status line, e.g. '200 OK'."""
        return f"{self.raw.status_code} {self.raw.reason or ''}".rstrip()

    @property
    def headers(self) -> requests.structures.CaseInsensitiveDict:
        return self.raw.headers

    @property
    def content(self) -> bytes:
        return self.raw.content

    @property
    def method(self) -> str:
        return self.raw.request.method if self.raw.request is not None else ""

    @property
    def url(self) -> str:
        return self.raw.url

    def __repr__(self) -> str:
        return f"<Response [{self.status}] {self.method} {self.url}>"


def check_response(response: Response) -> None:
    """Raise APIError unless the status is 2xx (202 counts as an error).

    The body is parsed as an ErrorResponse. A body that does not parse
    leaves the envelope fields empty; the APIError is raised either way.
    """
    code = response.status_code
    if 200 <= code <= 299 and code != 202:
        return

    body = ErrorResponse()
    if response.content:
        try:
            body = ErrorResponse.model_validate_json(response.content)
        except ValidationError:
            logger.debug("Unparseable error body for %s %s", response.method, response.url)

    raise APIError(response, body)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class Client:
    """Manages communication with the incident.io API.

    Usage::

        client = Client(api_key="...")
        ctx = Context.with_timeout(10)
        for incident in client.incidents.iter_incidents(ctx):
            print(incident.reference, incident.name)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float | None = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
        debug: bool = False,
    ) -> None:
        # Checked for a trailing slash when a request is built, not here.
        self.base_url = base_url or _resolve_base_url()
        self.user_agent = user_agent
        self.timeout = timeout
        self._api_key = api_key if api_key is not None else _resolve_api_key()

        if debug:
            logging.basicConfig(level=logging.DEBUG, format="%(name)s %(message)s")
            logging.getLogger("incidentio").setLevel(logging.DEBUG)

        # Guards the transport handle
        self._lock = threading.Lock()
        self._transport = Transport(session)

        # Accessors share this client (and its transport)
        self.actions = ActionsService(self)
        self.custom_fields = CustomFieldsService(self)
        self.severities = SeveritiesService(self)
        self.incident_roles = IncidentRolesService(self)
        self.incidents = IncidentsService(self)

    def __repr__(self) -> str:
        return f"<Client base_url={self.base_url!r}>"

    def __enter__(self) -> Client:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    @property
    def transport(self) -> Transport:
        """The transport used by this client."""
        with self._lock:
            return self._transport

    def close(self) -> None:
        self.transport.close()

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    def new_request(
        self, method: str, path: str, body: Any = None
    ) -> requests.PreparedRequest:
        """Build an API request for *path*, relative to base_url.

        Relative paths are given without a leading slash. When *body* is
        not None it is JSON encoded: pydantic models by their set, non-None
        fields, anything else through json.dumps.
        """
        if not urlsplit(self.base_url).path.endswith("/"):
            raise ConfigurationError(
                f"base_url must have a trailing slash, but {self.base_url!r} does not"
            )

        url = urljoin(self.base_url, path)

        headers = {"Accept": "application/json"}
        data = None
        if body is not None:
            data = _encode_body(body)
            headers["Content-Type"] = "application/json"
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        if self.user_agent:
            headers["User-Agent"] = self.user_agent

        request = requests.Request(method, url, data=data, headers=headers)
        return self.transport.session.prepare_request(request)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def bare_do(self, ctx: Context | None, request: requests.PreparedRequest) -> Response:
        """Send *request* and return the checked response.

        Raises InvalidArgumentError if ctx is None, CancellationError if
        ctx is done (before sending, or when the send failed after it
        was canceled), TransportError for other network failures and
        APIError for error statuses.
        """
        if ctx is None:
            raise InvalidArgumentError("context must be non-None")

        ctx_err = ctx.err()
        if ctx_err is not None:
            raise ctx_err

        start = time.monotonic()
        try:
            raw = self.transport.send(request, timeout=self._timeout_for(ctx))
        except requests.RequestException as e:
            # Cancellation is the more useful diagnosis
            ctx_err = ctx.err()
            if ctx_err is not None:
                raise ctx_err from e
            raise TransportError(str(e), url=request.url or "") from e

        response = Response(raw)
        logger.debug(
            "%s %s -> %d (%.0f ms)",
            request.method,
            request.url,
            response.status_code,
            (time.monotonic() - start) * 1000,
        )
        check_response(response)
        return response

    def do(
        self,
        ctx: Context | None,
        request: requests.PreparedRequest,
        result: Any = None,
    ) -> Any:
        """Send *request* and decode the body according to *result*.

        - None: return the Response untouched.
        - a writable binary stream: copy the raw body into it, return the Response.
        - a pydantic model class: return an instance decoded from the body
          (an empty body gives the zero-valued model). Envelope results
          keep the Response on ``.response``.
        """
        response = self.bare_do(ctx, request)

        if result is None:
            return response

        if not isinstance(result, type) and hasattr(result, "write"):
            result.write(response.content)
            return response

        return _decode(response, result)

    def _timeout_for(self, ctx: Context) -> float | None:
        remaining = ctx.remaining()
        if remaining is None:
            return self.timeout
        if self.timeout is not None:
            remaining = min(remaining, self.timeout)
        return max(remaining, _MIN_TIMEOUT)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _encode_body(body: Any) -> bytes:
    if isinstance(body, BaseModel):
        return body.model_dump_json(exclude_none=True, exclude_unset=True).encode("utf-8")
    return json.dumps(body, ensure_ascii=False).encode("utf-8")


def _decode(response: Response, result_type: type[BaseModel]) -> BaseModel:
    if not response.content.strip():
        decoded = result_type()
    else:
        try:
            decoded = result_type.model_validate_json(response.content)
        except ValidationError as e:
            raise DecodeError(
                f"cannot decode {result_type.__name__} from {response.method} {response.url}: {e}",
                response,
            ) from e

    if isinstance(decoded, Envelope):
        decoded._response = response
    return decoded

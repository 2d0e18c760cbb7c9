"""incidentio — typed Python client for the incident.io API.

Usage:
    import incidentio
    from incidentio import Context, IncidentsListOptions

    client = incidentio.init(api_key="...")
    ctx = Context.with_timeout(10)

    severities = client.severities.list_severities(ctx)
    page = client.incidents.list_incidents(ctx, IncidentsListOptions(page_size=5))
    print(page.response.status, page.pagination_meta.total_record_count)

    incidentio.reset()
"""

from __future__ import annotations

import logging

from ._client import Client, Response, check_response
from ._context import Context
from ._errors import (
    APIError,
    CancellationError,
    ConfigurationError,
    DecodeError,
    IncidentIOError,
    InvalidArgumentError,
    TransportError,
)
from ._query import add_options
from ._services import (
    ActionsService,
    CustomFieldsService,
    IncidentRolesService,
    IncidentsService,
    SeveritiesService,
)
from .enums import DEFAULT_TIMEOUT, SDK_VERSION
from .models import (
    Action,
    ActionsListOptions,
    APIKey,
    ApiKeyActor,
    CustomField,
    CustomFieldEntry,
    CustomFieldOption,
    CustomFieldValue,
    Incident,
    IncidentRole,
    IncidentsListOptions,
    PaginationMeta,
    Severity,
    User,
    UserActor,
)

__all__ = [
    "init",
    "get_client",
    "reset",
    "Client",
    "Context",
    "Response",
    "add_options",
    "check_response",
    "ActionsService",
    "CustomFieldsService",
    "IncidentRolesService",
    "IncidentsService",
    "SeveritiesService",
    "IncidentIOError",
    "ConfigurationError",
    "InvalidArgumentError",
    "CancellationError",
    "TransportError",
    "APIError",
    "DecodeError",
    "Action",
    "ActionsListOptions",
    "APIKey",
    "ApiKeyActor",
    "CustomField",
    "CustomFieldEntry",
    "CustomFieldOption",
    "CustomFieldValue",
    "Incident",
    "IncidentRole",
    "IncidentsListOptions",
    "PaginationMeta",
    "Severity",
    "User",
    "UserActor",
    "SDK_VERSION",
]

logger = logging.getLogger("incidentio")

# Module-level default client
_instance: Client | None = None


def init(
    api_key: str | None = None,
    base_url: str | None = None,
    timeout: float | None = DEFAULT_TIMEOUT,
    debug: bool = False,
) -> Client:
    """Create the module-level default client.

    Subsequent calls log a warning and return the existing instance.
    """
    global _instance

    if _instance is not None:
        logger.warning(
            "incidentio.init() called again; returning existing client. "
            "Call incidentio.reset() first to reinitialize."
        )
        return _instance

    _instance = Client(api_key=api_key, base_url=base_url, timeout=timeout, debug=debug)
    return _instance


def get_client() -> Client:
    """Return the default client created by init()."""
    if _instance is None:
        raise ConfigurationError("incidentio.init() has not been called")
    return _instance


def reset() -> None:
    """Close and clear the default client. Allows re-initialization."""
    global _instance
    if _instance is not None:
        _instance.close()
        _instance = None

"""Resource accessors — one per incident.io resource.

Each accessor maps a logical operation onto (method, path, options,
result type) and delegates to the shared Client pipeline. Naming is
uniform: list_<resources>, get_<resource>, create_<resource>.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from typing import TYPE_CHECKING
from urllib.parse import quote

from ._query import add_options
from .models import (
    ActionResponse,
    ActionsList,
    ActionsListOptions,
    CustomFieldResponse,
    CustomFieldsList,
    Incident,
    IncidentResponse,
    IncidentRoleResponse,
    IncidentRolesList,
    IncidentsList,
    IncidentsListOptions,
    SeveritiesList,
    SeverityResponse,
)

if TYPE_CHECKING:
    from ._client import Client
    from ._context import Context


class _Service:
    """Holds the shared client. Subclasses only describe their endpoints."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def _get(self, ctx: Context | None, path: str, result: type, opts=None):
        request = self._client.new_request("GET", add_options(path, opts))
        return self._client.do(ctx, request, result)


def _resource_path(collection: str, id: str) -> str:
    return f"{collection}/{quote(id, safe='')}"


class ActionsService(_Service):
    """Actions of an incident.

    API docs: https://api-docs.incident.io/#tag/Actions
    """

    def list_actions(
        self, ctx: Context | None, opts: ActionsListOptions | None = None
    ) -> ActionsList:
        """List all actions for the organisation, optionally filtered."""
        return self._get(ctx, "actions", ActionsList, opts)

    def get_action(self, ctx: Context | None, id: str) -> ActionResponse:
        return self._get(ctx, _resource_path("actions", id), ActionResponse)


class CustomFieldsService(_Service):
    """API docs: https://api-docs.incident.io/#tag/Custom-Fields"""

    def list_custom_fields(self, ctx: Context | None) -> CustomFieldsList:
        return self._get(ctx, "custom_fields", CustomFieldsList)

    def get_custom_field(self, ctx: Context | None, id: str) -> CustomFieldResponse:
        return self._get(ctx, _resource_path("custom_fields", id), CustomFieldResponse)


class SeveritiesService(_Service):
    """API docs: https://api-docs.incident.io/#tag/Severities"""

    def list_severities(self, ctx: Context | None) -> SeveritiesList:
        return self._get(ctx, "severities", SeveritiesList)

    def get_severity(self, ctx: Context | None, id: str) -> SeverityResponse:
        return self._get(ctx, _resource_path("severities", id), SeverityResponse)


class IncidentRolesService(_Service):
    """API docs: https://api-docs.incident.io/#tag/Incident-Roles"""

    def list_incident_roles(self, ctx: Context | None) -> IncidentRolesList:
        return self._get(ctx, "incident_roles", IncidentRolesList)

    def get_incident_role(self, ctx: Context | None, id: str) -> IncidentRoleResponse:
        return self._get(ctx, _resource_path("incident_roles", id), IncidentRoleResponse)


class IncidentsService(_Service):
    """Incidents: list, fetch, create and page through.

    API docs: https://api-docs.incident.io/#tag/Incidents
    """

    def list_incidents(
        self, ctx: Context | None, opts: IncidentsListOptions | None = None
    ) -> IncidentsList:
        """One page of incidents. Use ``opts.after`` / ``opts.page_size`` to page."""
        return self._get(ctx, "incidents", IncidentsList, opts)

    def get_incident(self, ctx: Context | None, id: str) -> IncidentResponse:
        return self._get(ctx, _resource_path("incidents", id), IncidentResponse)

    def create_incident(self, ctx: Context | None, incident: Incident) -> IncidentResponse:
        """Create an incident.

        Only the fields set on *incident* are sent. ``idempotency_key`` is
        required by the API and de-duplicates retried create requests.
        """
        request = self._client.new_request("POST", "incidents", incident)
        return self._client.do(ctx, request, IncidentResponse)

    def iter_incidents(
        self, ctx: Context | None, opts: IncidentsListOptions | None = None
    ) -> Iterator[Incident]:
        """Yield every incident matching *opts*, following the ``after`` cursor.

        Stops once the number of incidents seen reaches
        ``pagination_meta.total_record_count``, or on an empty page, or
        when the server sends no pagination metadata. *opts* is not modified.
        """
        page_opts = dataclasses.replace(opts) if opts is not None else IncidentsListOptions()
        seen = 0
        while True:
            page = self.list_incidents(ctx, page_opts)
            yield from page.incidents
            seen += len(page.incidents)

            meta = page.pagination_meta
            if not page.incidents or meta is None or seen >= meta.total_record_count:
                return
            page_opts.after = page.incidents[-1].id

"""incident.io Pydantic models — the wire contract of the v1 API.

Resources are read-only snapshots decoded from JSON. Keys the API adds
later are ignored; keys it omits fall back to zero values so that an
empty success body still produces a usable (empty) result.

API docs: https://api-docs.incident.io/
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Annotated, Any, Union

from pydantic import AfterValidator, BaseModel, Discriminator, Field, PrivateAttr, Tag, field_validator

from .enums import (
    ActionStatus,
    CustomFieldType,
    ExternalIssueProvider,
    IncidentRoleType,
    IncidentStatus,
    IncidentType,
    IncidentVisibility,
    UserRole,
)

if TYPE_CHECKING:
    from ._client import Response


class Open:
    """``Open[SomeEnum]``: known values decode to the enum, new ones stay strings.

    The API grows its enums over time; one unfamiliar status must not make
    a whole list response undecodable.
    """

    def __class_getitem__(cls, enum_cls):
        def to_member(value: str):
            try:
                return enum_cls(value)
            except ValueError:
                return value

        return Annotated[str, AfterValidator(to_member)]


# ═══════════════════════════════════════════════════════════════════════════
#  ACTORS — users and API keys
# ═══════════════════════════════════════════════════════════════════════════

class User(BaseModel):
    id: str = ""
    name: str = ""
    role: Open[UserRole] | None = None
    email: str = ""
    slack_user_id: str = ""


class APIKey(BaseModel):
    id: str = ""
    name: str = ""                              # For the owner's reference


class ApiKeyActor(BaseModel):
    """Actor variant: the action was performed with an API key."""
    api_key: APIKey


class UserActor(BaseModel):
    """Actor variant: the action was performed by a human."""
    user: User


def _actor_variant(value: Any) -> str | None:
    """Pick the Actor variant. Both or neither key set is a validation error."""
    if isinstance(value, dict):
        present = [k for k in ("api_key", "user") if value.get(k) is not None]
    else:
        present = [k for k in ("api_key", "user") if getattr(value, k, None) is not None]
    if len(present) != 1:
        return None
    return present[0]


Actor = Annotated[
    Union[
        Annotated[ApiKeyActor, Tag("api_key")],
        Annotated[UserActor, Tag("user")],
    ],
    Discriminator(_actor_variant),
]


# ═══════════════════════════════════════════════════════════════════════════
#  SEVERITIES & INCIDENT ROLES
# ═══════════════════════════════════════════════════════════════════════════

class Severity(BaseModel):
    id: str = ""
    name: str = ""
    description: str = ""
    rank: int = 0                               # Lower numbers are less severe
    created_at: datetime | None = None
    updated_at: datetime | None = None


class IncidentRole(BaseModel):
    id: str = ""
    name: str = ""
    description: str = ""                       # Purpose of the role
    instructions: str = ""                      # Shown to whoever is nominated
    required: bool = False
    role_type: Open[IncidentRoleType] | None = None
    shortform: str = ""                         # Short name used in Slack
    created_at: datetime | None = None
    updated_at: datetime | None = None


class IncidentRoleAssignment(BaseModel):
    role: IncidentRole = Field(default_factory=IncidentRole)
    assignee: User | None = None


# ═══════════════════════════════════════════════════════════════════════════
#  CUSTOM FIELDS
# ═══════════════════════════════════════════════════════════════════════════

class CustomFieldOption(BaseModel):
    id: str = ""
    custom_field_id: str = ""
    sort_key: int = 0
    value: str = ""                             # Human readable option name


class CustomFieldValue(BaseModel):
    """A typed value of a custom field entry. Only the matching value_* is set."""
    value_link: str | None = None
    value_numeric: str | None = None
    value_option: CustomFieldOption | None = None
    value_text: str | None = None

    # Only needed when creating an incident
    id: str | None = None
    value_option_id: str | None = None


class CustomFieldTypeInfo(BaseModel):
    """Reduced custom field embedded in an incident's entries."""
    id: str = ""
    name: str = ""
    description: str = ""
    field_type: Open[CustomFieldType] | None = None
    options: list[CustomFieldOption] = Field(default_factory=list)


class CustomFieldEntry(BaseModel):
    custom_field: CustomFieldTypeInfo | None = None
    values: list[CustomFieldValue] = Field(default_factory=list)

    # Only needed when creating an incident
    custom_field_id: str | None = None


class CustomField(BaseModel):
    id: str = ""
    name: str = ""
    description: str = ""
    field_type: Open[CustomFieldType] | None = None
    options: list[CustomFieldOption] = Field(default_factory=list)
    require_before_closure: bool = False
    require_before_creation: bool = False
    show_before_closure: bool = False
    show_before_creation: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ═══════════════════════════════════════════════════════════════════════════
#  INCIDENTS
# ═══════════════════════════════════════════════════════════════════════════

class IncidentTimestamp(BaseModel):
    name: str = ""                              # Lifecycle event name
    last_occurred_at: datetime | None = None


class Incident(BaseModel):
    id: str = ""
    name: str = ""
    reference: str = ""                         # e.g. INC-123
    status: Open[IncidentStatus] | None = None
    type: Open[IncidentType] | None = None
    visibility: Open[IncidentVisibility] | None = None
    summary: str | None = None
    call_url: str | None = None
    postmortem_document_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    creator: Actor | None = None
    severity: Severity | None = None
    slack_channel_id: str = ""
    slack_channel_name: str | None = None
    custom_field_entries: list[CustomFieldEntry] = Field(default_factory=list)
    incident_role_assignments: list[IncidentRoleAssignment] = Field(default_factory=list)
    timestamps: list[IncidentTimestamp] | None = None

    # Only needed when creating an incident
    severity_id: str | None = None
    idempotency_key: str | None = None          # De-duplicates create requests


# ═══════════════════════════════════════════════════════════════════════════
#  ACTIONS
# ═══════════════════════════════════════════════════════════════════════════

class ExternalIssueReference(BaseModel):
    issue_name: str = ""                        # Human readable issue id
    issue_permalink: str = ""
    provider: Open[ExternalIssueProvider] | None = None


class Action(BaseModel):
    id: str = ""
    description: str = ""
    status: Open[ActionStatus] | None = None
    follow_up: bool = False
    incident_id: str = ""
    assignee: User | None = None
    external_issue_reference: ExternalIssueReference | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    completed_at: datetime | None = None


# ═══════════════════════════════════════════════════════════════════════════
#  RESPONSE ENVELOPES
# ═══════════════════════════════════════════════════════════════════════════

class PaginationMeta(BaseModel):
    after: str | None = None                    # Cursor the page was fetched after
    page_size: int = 0
    total_record_count: int = 0


class Envelope(BaseModel):
    """Base for every decoded response body.

    Keeps a handle on the HTTP response it came from so callers can
    inspect status and headers next to the payload.
    """

    _response: Any = PrivateAttr(default=None)

    @property
    def response(self) -> Response | None:
        return self._response


class IncidentsList(Envelope):
    incidents: list[Incident] = Field(default_factory=list)
    pagination_meta: PaginationMeta | None = None


class IncidentResponse(Envelope):
    incident: Incident | None = None


class ActionsList(Envelope):
    actions: list[Action] = Field(default_factory=list)


class ActionResponse(Envelope):
    action: Action | None = None


class SeveritiesList(Envelope):
    severities: list[Severity] = Field(default_factory=list)


class SeverityResponse(Envelope):
    severity: Severity | None = None


class IncidentRolesList(Envelope):
    incident_roles: list[IncidentRole] = Field(default_factory=list)


class IncidentRoleResponse(Envelope):
    incident_role: IncidentRole | None = None


class CustomFieldsList(Envelope):
    custom_fields: list[CustomField] = Field(default_factory=list)


class CustomFieldResponse(Envelope):
    custom_field: CustomField | None = None


# ═══════════════════════════════════════════════════════════════════════════
#  ERROR ENVELOPE
# ═══════════════════════════════════════════════════════════════════════════

class ErrorSource(BaseModel):
    field: str = ""


class ErrorDetail(BaseModel):
    """One entry of ErrorResponse.errors."""
    code: str = ""                              # Machine readable validation code
    message: str = ""
    source: ErrorSource = Field(default_factory=ErrorSource)

    @field_validator("source", mode="before")
    @classmethod
    def _null_source(cls, value: Any) -> Any:
        return {} if value is None else value

    def __str__(self) -> str:
        return f"{self.message} (code: {self.code})"


class ErrorResponse(BaseModel):
    """Standard error shape returned with every non-2xx response."""
    type: str = ""
    status: int = 0
    request_id: str = ""                        # Quote this to incident.io support
    errors: list[ErrorDetail] = Field(default_factory=list)

    @field_validator("errors", mode="before")
    @classmethod
    def _null_errors(cls, value: Any) -> Any:
        return [] if value is None else value


# ═══════════════════════════════════════════════════════════════════════════
#  QUERY OPTIONS
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class IncidentsListOptions:
    """Parameters for IncidentsService.list_incidents."""

    page_size: int = 0
    # Return incidents created after the incident with this id
    after: str = ""
    status: list[str] = field(default_factory=list)

    def query_pairs(self) -> list[tuple[str, str | None]]:
        pairs: list[tuple[str, str | None]] = [
            ("page_size", str(self.page_size) if self.page_size else None),
            ("after", self.after or None),
        ]
        pairs.extend(("status", str(s)) for s in self.status if s)
        return pairs


@dataclass
class ActionsListOptions:
    """Parameters for ActionsService.list_actions."""

    incident_id: str = ""
    is_follow_up: bool = False
    # real / test / tutorial; the API defaults to real incidents only
    incident_mode: str = ""

    def query_pairs(self) -> list[tuple[str, str | None]]:
        return [
            ("incident_id", self.incident_id or None),
            ("is_follow_up", "true" if self.is_follow_up else None),
            ("incident_mode", str(self.incident_mode) if self.incident_mode else None),
        ]

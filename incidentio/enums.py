"""incident.io enumerations and constants.

Single source of truth for the string values the API exchanges:
incident lifecycle, action status, custom field types, user and
incident role kinds, external issue tracker providers.
"""

from enum import StrEnum


# ---------------------------------------------------------------------------
# API endpoint
# ---------------------------------------------------------------------------

# Only the cloud v1 API exists. Must keep the trailing slash.
DEFAULT_BASE_URL = "https://api.incident.io/v1/"

SDK_VERSION = "0.1.0"

DEFAULT_USER_AGENT = f"incidentio-python/{SDK_VERSION}"

DEFAULT_TIMEOUT = 30.0

API_KEY_ENV_VAR = "INCIDENT_IO_API_KEY"


# ---------------------------------------------------------------------------
# Incidents
# ---------------------------------------------------------------------------

class IncidentStatus(StrEnum):
    TRIAGE = "triage"
    INVESTIGATING = "investigating"
    FIXING = "fixing"
    MONITORING = "monitoring"
    CLOSED = "closed"
    DECLINED = "declined"


class IncidentType(StrEnum):
    REAL = "real"
    TEST = "test"
    TUTORIAL = "tutorial"


class IncidentVisibility(StrEnum):
    PRIVATE = "private"
    PUBLIC = "public"


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

class ActionStatus(StrEnum):
    OUTSTANDING = "outstanding"
    COMPLETED = "completed"
    NOT_DOING = "not_doing"
    DELETED = "deleted"


class ExternalIssueProvider(StrEnum):
    GITHUB = "github"
    JIRA = "jira"
    JIRA_SERVER = "jira_server"
    LINEAR = "linear"
    CLUBHOUSE = "clubhouse"


# ---------------------------------------------------------------------------
# Custom fields
# ---------------------------------------------------------------------------

class CustomFieldType(StrEnum):
    LINK = "link"
    TEXT = "text"
    NUMERIC = "numeric"
    SINGLE_SELECT = "single_select"
    MULTI_SELECT = "multi_select"


# ---------------------------------------------------------------------------
# Users and roles
# ---------------------------------------------------------------------------

class UserRole(StrEnum):
    ADMINISTRATOR = "administrator"
    OWNER = "owner"
    RESPONDER = "responder"
    VIEWER = "viewer"


class IncidentRoleType(StrEnum):
    LEAD = "lead"
    CUSTOM = "custom"

"""
Opencode SDK - Request parameter shapes.

Each endpoint's parameters are a dataclass whose fields are tagged with
``query_field`` or ``body_field``. Request-side values nested inside a body
(prompt parts, model references, auth credentials) are plain dataclasses.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from .encoding import body_field, query_field, wire
from .validation import validate_dict, validate_in_list


class ToastVariant(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class PermissionResponse(str, Enum):
    ONCE = "once"
    ALWAYS = "always"
    REJECT = "reject"


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    ERROR = "error"
    WARN = "warn"


# ==================== Body values ====================


@dataclass
class ModelRef:
    provider_id: str = wire("providerID")
    model_id: str = wire("modelID")


@dataclass
class TextPartInput:
    text: str
    id: Optional[str] = None
    synthetic: Optional[bool] = None
    type: str = field(default="text", init=False)


@dataclass
class FilePartInput:
    mime: str
    url: str
    filename: Optional[str] = None
    id: Optional[str] = None
    source: Optional[dict[str, Any]] = None
    type: str = field(default="file", init=False)


@dataclass
class AgentPartInput:
    name: str
    id: Optional[str] = None
    type: str = field(default="agent", init=False)


PartInput = Union[TextPartInput, FilePartInput, AgentPartInput]


@dataclass
class ApiAuth:
    key: str
    type: str = field(default="api", init=False)


@dataclass
class OAuth:
    access: str
    refresh: str
    expires: int
    type: str = field(default="oauth", init=False)


@dataclass
class WellKnownAuth:
    key: str
    token: str
    type: str = field(default="wellknown", init=False)


Auth = Union[ApiAuth, OAuth, WellKnownAuth]


# ==================== Endpoint parameters ====================


@dataclass
class DirectoryParams:
    """Parameters for endpoints that only accept the working directory."""

    directory: Optional[str] = query_field()


@dataclass
class SessionCreateParams:
    parent_id: Optional[str] = body_field("parentID")
    title: Optional[str] = body_field()
    directory: Optional[str] = query_field()


@dataclass
class SessionUpdateParams:
    title: Optional[str] = body_field()
    directory: Optional[str] = query_field()


@dataclass
class SessionInitParams:
    message_id: str = body_field("messageID", required=True)
    model_id: str = body_field("modelID", required=True)
    provider_id: str = body_field("providerID", required=True)
    directory: Optional[str] = query_field()


@dataclass
class SessionSummarizeParams:
    model_id: str = body_field("modelID", required=True)
    provider_id: str = body_field("providerID", required=True)
    directory: Optional[str] = query_field()


@dataclass
class SessionRevertParams:
    message_id: str = body_field("messageID", required=True)
    part_id: Optional[str] = body_field("partID")
    directory: Optional[str] = query_field()


@dataclass
class SessionCommandParams:
    command: str = body_field(required=True)
    arguments: str = body_field(required=True)
    agent: Optional[str] = body_field()
    message_id: Optional[str] = body_field("messageID")
    model: Optional[str] = body_field()
    directory: Optional[str] = query_field()


@dataclass
class SessionShellParams:
    agent: str = body_field(required=True)
    command: str = body_field(required=True)
    directory: Optional[str] = query_field()


@dataclass
class SessionPromptParams:
    parts: list[PartInput] = body_field(required=True)
    agent: Optional[str] = body_field()
    message_id: Optional[str] = body_field("messageID")
    model: Optional[ModelRef] = body_field()
    no_reply: Optional[bool] = body_field("noReply")
    system: Optional[str] = body_field()
    tools: Optional[dict[str, bool]] = body_field()
    directory: Optional[str] = query_field()


@dataclass
class PermissionRespondParams:
    response: PermissionResponse = body_field(required=True)
    directory: Optional[str] = query_field()

    def __post_init__(self):
        validate_in_list(self.response, "response", [r.value for r in PermissionResponse])


@dataclass
class FilePathParams:
    """Parameters for the file listing and file content endpoints."""

    path: str = query_field(required=True)
    directory: Optional[str] = query_field()


@dataclass
class FindTextParams:
    pattern: str = query_field(required=True)
    directory: Optional[str] = query_field()


@dataclass
class FindQueryParams:
    """Parameters for the file and symbol search endpoints."""

    query: str = query_field(required=True)
    directory: Optional[str] = query_field()


@dataclass
class ToolListParams:
    provider: str = query_field(required=True)
    model: str = query_field(required=True)
    directory: Optional[str] = query_field()


@dataclass
class ConfigUpdateParams:
    config: dict[str, Any] = body_field(required=True, root=True)
    directory: Optional[str] = query_field()

    def __post_init__(self):
        validate_dict(self.config, "config")


@dataclass
class AppLogParams:
    service: str = body_field(required=True)
    level: LogLevel = body_field(required=True)
    message: str = body_field(required=True)
    extra: Optional[dict[str, Any]] = body_field()
    directory: Optional[str] = query_field()

    def __post_init__(self):
        validate_in_list(self.level, "level", [lvl.value for lvl in LogLevel])
        validate_dict(self.extra, "extra")


@dataclass
class AuthSetParams:
    auth: Auth = body_field(required=True, root=True)
    directory: Optional[str] = query_field()


@dataclass
class TuiAppendPromptParams:
    text: str = body_field(required=True)
    directory: Optional[str] = query_field()


@dataclass
class TuiExecuteCommandParams:
    command: str = body_field(required=True)
    directory: Optional[str] = query_field()


@dataclass
class TuiShowToastParams:
    message: str = body_field(required=True)
    variant: ToastVariant = body_field(required=True)
    title: Optional[str] = body_field()
    directory: Optional[str] = query_field()

    def __post_init__(self):
        validate_in_list(self.variant, "variant", [v.value for v in ToastVariant])

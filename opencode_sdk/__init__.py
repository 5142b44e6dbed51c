"""
Opencode SDK - Python client for the opencode server API.

A typed HTTP client: validated request parameters, bounded retries with
per-call deadlines, typed errors, and tagged-union response models.
"""

__version__ = "0.1.0"

from .client import AsyncOpencodeClient, OpencodeClient
from .config import ClientConfig
from .decoding import DiscriminatedUnion, decode
from .exceptions import (
    APIError,
    AuthenticationError,
    BadRequestError,
    ConflictError,
    DecodeError,
    InternalServerError,
    NotFoundError,
    OpencodeError,
    ParamValidationError,
    PermissionDeniedError,
    RateLimitError,
    TransportError,
    UnprocessableEntityError,
)
from .models import (
    Agent,
    AgentConfig,
    AgentPart,
    AssistantMessage,
    Command,
    CommandResponse,
    Config,
    File,
    FileContent,
    FileNode,
    FilePart,
    LspDisabledConfig,
    LspServerConfig,
    McpConfig,
    McpLocalConfig,
    McpRemoteConfig,
    McpStatus,
    Message,
    MessageRole,
    MessageWithParts,
    PartType,
    Part,
    PatchPart,
    PathInfo,
    Permission,
    PermissionConfig,
    Project,
    PromptResponse,
    Provider,
    ProviderConfig,
    ProviderList,
    ReasoningPart,
    RetryPart,
    Session,
    SnapshotPart,
    StepFinishPart,
    StepStartPart,
    Symbol,
    TextMatch,
    TextPart,
    ToolListItem,
    ToolPart,
    ToolState,
    ToolStateCompleted,
    ToolStateError,
    ToolStatePending,
    ToolStateRunning,
    ToolStatus,
    UserMessage,
)
from .params import (
    AgentPartInput,
    ApiAuth,
    FilePartInput,
    LogLevel,
    ModelRef,
    OAuth,
    PermissionResponse,
    TextPartInput,
    ToastVariant,
    WellKnownAuth,
)
from .query import ArrayFormat, NestedFormat, QuerySettings
from .request import RequestOptions, RequestSpec

__all__ = [
    "__version__",
    # Clients
    "OpencodeClient",
    "AsyncOpencodeClient",
    "ClientConfig",
    "RequestOptions",
    "RequestSpec",
    "QuerySettings",
    "ArrayFormat",
    "NestedFormat",
    # Exceptions
    "OpencodeError",
    "ParamValidationError",
    "TransportError",
    "APIError",
    "BadRequestError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "ConflictError",
    "UnprocessableEntityError",
    "RateLimitError",
    "InternalServerError",
    "DecodeError",
    # Decoding
    "DiscriminatedUnion",
    "decode",
    # Models
    "Session",
    "Message",
    "MessageRole",
    "UserMessage",
    "AssistantMessage",
    "MessageWithParts",
    "PromptResponse",
    "CommandResponse",
    "Part",
    "PartType",
    "TextPart",
    "ReasoningPart",
    "FilePart",
    "ToolPart",
    "StepStartPart",
    "StepFinishPart",
    "SnapshotPart",
    "PatchPart",
    "AgentPart",
    "RetryPart",
    "ToolState",
    "ToolStatus",
    "ToolStatePending",
    "ToolStateRunning",
    "ToolStateCompleted",
    "ToolStateError",
    "File",
    "FileNode",
    "FileContent",
    "Symbol",
    "TextMatch",
    "ToolListItem",
    "Agent",
    "Command",
    "Project",
    "PathInfo",
    "Provider",
    "ProviderList",
    "McpStatus",
    "Permission",
    # Configuration
    "Config",
    "AgentConfig",
    "PermissionConfig",
    "ProviderConfig",
    "McpConfig",
    "McpLocalConfig",
    "McpRemoteConfig",
    "LspServerConfig",
    "LspDisabledConfig",
    # Parameters
    "TextPartInput",
    "FilePartInput",
    "AgentPartInput",
    "ModelRef",
    "ApiAuth",
    "OAuth",
    "WellKnownAuth",
    "PermissionResponse",
    "ToastVariant",
    "LogLevel",
]

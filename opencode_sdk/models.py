"""
Opencode SDK - Response models for the opencode server API.

Field names are snake_case; ``wire(...)`` records the JSON key where it
differs. Fields without defaults are required in the payload.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from .decoding import DiscriminatedUnion
from .encoding import wire


class ToolStatus(str, Enum):
    """Lifecycle state of a tool execution at fetch time."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"


class PartType(str, Enum):
    TEXT = "text"
    REASONING = "reasoning"
    FILE = "file"
    TOOL = "tool"
    STEP_START = "step-start"
    STEP_FINISH = "step-finish"
    SNAPSHOT = "snapshot"
    PATCH = "patch"
    AGENT = "agent"
    RETRY = "retry"


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class FileStatus(str, Enum):
    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"


class FileNodeType(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


# ==================== Sessions ====================


@dataclass
class SessionTime:
    created: float
    updated: float
    compacting: Optional[float] = None


@dataclass
class SessionShare:
    url: str


@dataclass
class SessionRevert:
    message_id: str = wire("messageID")
    diff: Optional[str] = None
    part_id: Optional[str] = wire("partID", default=None)
    snapshot: Optional[str] = None


@dataclass
class FileDiff:
    file: str
    before: str
    after: str
    additions: float
    deletions: float


@dataclass
class SessionSummary:
    diffs: list[FileDiff]


@dataclass
class Session:
    """A conversation with the agent, rooted in a project directory."""

    id: str
    directory: str
    title: str
    version: str
    time: SessionTime
    project_id: str = wire("projectID")
    parent_id: Optional[str] = wire("parentID", default=None)
    revert: Optional[SessionRevert] = None
    share: Optional[SessionShare] = None
    summary: Optional[SessionSummary] = None

    @property
    def is_shared(self) -> bool:
        return self.share is not None

    @property
    def has_parent(self) -> bool:
        return self.parent_id is not None


# ==================== Tool execution state ====================


@dataclass
class ToolStatePending:
    status: str


@dataclass
class ToolStateRunningTime:
    start: float


@dataclass
class ToolStateRunning:
    status: str
    input: Any
    time: ToolStateRunningTime
    metadata: dict[str, Any] = field(default_factory=dict)
    title: Optional[str] = None


@dataclass
class ToolStateCompletedTime:
    start: float
    end: float
    compacted: Optional[float] = None


@dataclass
class ToolStateCompleted:
    status: str
    input: dict[str, Any]
    metadata: dict[str, Any]
    output: str
    time: ToolStateCompletedTime
    title: str
    attachments: list["FilePart"] = field(default_factory=list)


@dataclass
class ToolStateErrorTime:
    start: float
    end: float


@dataclass
class ToolStateError:
    status: str
    error: str
    input: dict[str, Any]
    time: ToolStateErrorTime
    metadata: dict[str, Any] = field(default_factory=dict)


class ToolState(DiscriminatedUnion):
    """State of a tool call, one of pending / running / completed / error.

    Example:
        ```python
        if (running := part.state.as_running()) is not None:
            print(running.time.start)
        ```
    """

    __slots__ = ()

    discriminator = "status"
    variants = {
        ToolStatus.PENDING.value: ToolStatePending,
        ToolStatus.RUNNING.value: ToolStateRunning,
        ToolStatus.COMPLETED.value: ToolStateCompleted,
        ToolStatus.ERROR.value: ToolStateError,
    }

    @property
    def status(self) -> Optional[str]:
        return self.tag

    def as_pending(self) -> Optional[ToolStatePending]:
        return self._as(ToolStatus.PENDING.value)

    def as_running(self) -> Optional[ToolStateRunning]:
        return self._as(ToolStatus.RUNNING.value)

    def as_completed(self) -> Optional[ToolStateCompleted]:
        return self._as(ToolStatus.COMPLETED.value)

    def as_error(self) -> Optional[ToolStateError]:
        return self._as(ToolStatus.ERROR.value)


# ==================== Message parts ====================


@dataclass
class PartTime:
    start: float
    end: Optional[float] = None


@dataclass
class TextPart:
    id: str
    type: str
    text: str
    message_id: str = wire("messageID")
    session_id: str = wire("sessionID")
    synthetic: bool = False
    time: Optional[PartTime] = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ReasoningPart:
    id: str
    type: str
    text: str
    time: PartTime
    message_id: str = wire("messageID")
    session_id: str = wire("sessionID")
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class FilePart:
    id: str
    type: str
    mime: str
    url: str
    message_id: str = wire("messageID")
    session_id: str = wire("sessionID")
    filename: Optional[str] = None
    source: Optional[dict[str, Any]] = None


@dataclass
class ToolPart:
    id: str
    type: str
    tool: str
    state: ToolState
    call_id: str = wire("callID")
    message_id: str = wire("messageID")
    session_id: str = wire("sessionID")
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class StepStartPart:
    id: str
    type: str
    message_id: str = wire("messageID")
    session_id: str = wire("sessionID")
    snapshot: Optional[str] = None


@dataclass
class CacheTokens:
    read: float
    write: float


@dataclass
class TokenUsage:
    input: float
    output: float
    reasoning: float
    cache: CacheTokens


@dataclass
class StepFinishPart:
    id: str
    type: str
    cost: float
    reason: str
    tokens: TokenUsage
    message_id: str = wire("messageID")
    session_id: str = wire("sessionID")
    snapshot: Optional[str] = None


@dataclass
class SnapshotPart:
    id: str
    type: str
    snapshot: str
    message_id: str = wire("messageID")
    session_id: str = wire("sessionID")


@dataclass
class PatchPart:
    id: str
    type: str
    files: list[str]
    hash: str
    message_id: str = wire("messageID")
    session_id: str = wire("sessionID")


@dataclass
class AgentPart:
    id: str
    type: str
    name: str
    message_id: str = wire("messageID")
    session_id: str = wire("sessionID")
    source: Optional[dict[str, Any]] = None


@dataclass
class RetryPart:
    id: str
    type: str
    attempt: int
    error: dict[str, Any]
    time: dict[str, Any]
    message_id: str = wire("messageID")
    session_id: str = wire("sessionID")


class Part(DiscriminatedUnion):
    """One piece of a message, discriminated by ``type``."""

    __slots__ = ()

    discriminator = "type"
    variants = {
        PartType.TEXT.value: TextPart,
        PartType.REASONING.value: ReasoningPart,
        PartType.FILE.value: FilePart,
        PartType.TOOL.value: ToolPart,
        PartType.STEP_START.value: StepStartPart,
        PartType.STEP_FINISH.value: StepFinishPart,
        PartType.SNAPSHOT.value: SnapshotPart,
        PartType.PATCH.value: PatchPart,
        PartType.AGENT.value: AgentPart,
        PartType.RETRY.value: RetryPart,
    }

    @property
    def id(self) -> Optional[str]:
        return self._raw.get("id")

    @property
    def message_id(self) -> Optional[str]:
        return self._raw.get("messageID")

    @property
    def session_id(self) -> Optional[str]:
        return self._raw.get("sessionID")

    def as_text(self) -> Optional[TextPart]:
        return self._as(PartType.TEXT.value)

    def as_reasoning(self) -> Optional[ReasoningPart]:
        return self._as(PartType.REASONING.value)

    def as_file(self) -> Optional[FilePart]:
        return self._as(PartType.FILE.value)

    def as_tool(self) -> Optional[ToolPart]:
        return self._as(PartType.TOOL.value)

    def as_step_start(self) -> Optional[StepStartPart]:
        return self._as(PartType.STEP_START.value)

    def as_step_finish(self) -> Optional[StepFinishPart]:
        return self._as(PartType.STEP_FINISH.value)

    def as_snapshot(self) -> Optional[SnapshotPart]:
        return self._as(PartType.SNAPSHOT.value)

    def as_patch(self) -> Optional[PatchPart]:
        return self._as(PartType.PATCH.value)

    def as_agent(self) -> Optional[AgentPart]:
        return self._as(PartType.AGENT.value)

    def as_retry(self) -> Optional[RetryPart]:
        return self._as(PartType.RETRY.value)


# ==================== Messages ====================


@dataclass
class UserMessageTime:
    created: float


@dataclass
class UserMessage:
    id: str
    role: str
    time: UserMessageTime
    session_id: str = wire("sessionID")


@dataclass
class AssistantMessageTime:
    created: float
    completed: Optional[float] = None


@dataclass
class AssistantMessagePath:
    cwd: str
    root: str


@dataclass
class AssistantMessage:
    id: str
    role: str
    mode: str
    path: AssistantMessagePath
    system: list[str]
    cost: float
    tokens: TokenUsage
    time: AssistantMessageTime
    session_id: str = wire("sessionID")
    parent_id: str = wire("parentID")
    model_id: str = wire("modelID")
    provider_id: str = wire("providerID")
    summary: bool = False
    error: Optional[dict[str, Any]] = None


class Message(DiscriminatedUnion):
    """A user or assistant message, discriminated by ``role``."""

    __slots__ = ()

    discriminator = "role"
    variants = {
        MessageRole.USER.value: UserMessage,
        MessageRole.ASSISTANT.value: AssistantMessage,
    }

    @property
    def id(self) -> Optional[str]:
        return self._raw.get("id")

    @property
    def session_id(self) -> Optional[str]:
        return self._raw.get("sessionID")

    def as_user(self) -> Optional[UserMessage]:
        return self._as(MessageRole.USER.value)

    def as_assistant(self) -> Optional[AssistantMessage]:
        return self._as(MessageRole.ASSISTANT.value)


@dataclass
class MessageWithParts:
    """A message together with its parts, as returned by the message endpoints."""

    info: Message
    parts: list[Part]


@dataclass
class PromptResponse:
    info: AssistantMessage
    parts: list[Part]


# ==================== Files & search ====================


@dataclass
class FileNode:
    name: str
    path: str
    absolute: str
    type: str
    ignored: bool


@dataclass
class File:
    """Git status of a changed file."""

    path: str
    added: int
    removed: int
    status: str


@dataclass
class FileContent:
    type: str
    content: str
    diff: Optional[str] = None
    encoding: Optional[str] = None
    mime_type: Optional[str] = wire("mimeType", default=None)
    patch: Optional[dict[str, Any]] = None


@dataclass
class Position:
    line: int
    character: int


@dataclass
class Range:
    start: Position
    end: Position


@dataclass
class SymbolLocation:
    uri: str
    range: Range


@dataclass
class Symbol:
    name: str
    kind: float
    location: SymbolLocation


@dataclass
class TextMatch:
    """One line matching a text search."""

    path: dict[str, Any]
    lines: dict[str, Any]
    line_number: float
    absolute_offset: float
    submatches: list[dict[str, Any]] = field(default_factory=list)


# ==================== Tools ====================


@dataclass
class ToolListItem:
    """A tool with the JSON schema of its parameters."""

    id: str
    description: str
    parameters: Any = None


# ==================== App / config ====================


@dataclass
class Agent:
    name: str
    mode: str
    built_in: bool = wire("builtIn")
    description: Optional[str] = None
    prompt: Optional[str] = None
    model: Optional[dict[str, Any]] = None
    tools: dict[str, bool] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)
    permission: dict[str, Any] = field(default_factory=dict)


@dataclass
class Command:
    name: str
    template: str
    description: Optional[str] = None
    agent: Optional[str] = None
    model: Optional[str] = None
    subtask: bool = False


@dataclass
class ProjectTime:
    created: float
    initialized: Optional[float] = None


@dataclass
class Project:
    id: str
    time: ProjectTime
    worktree: str
    vcs: Optional[str] = None


@dataclass
class PathInfo:
    config: str
    directory: str
    state: str
    worktree: str


@dataclass
class Provider:
    id: str
    name: str
    env: list[str] = field(default_factory=list)
    models: dict[str, Any] = field(default_factory=dict)
    api: Optional[str] = None
    npm: Optional[str] = None


@dataclass
class ProviderList:
    providers: list[Provider]
    default: dict[str, str] = field(default_factory=dict)


@dataclass
class McpStatus:
    """Connection status of one configured MCP server."""

    status: str
    error: Optional[str] = None


@dataclass
class CommandResponse:
    info: AssistantMessage
    parts: list[Part]


@dataclass
class Permission:
    id: str
    title: str
    type: str
    session_id: str = wire("sessionID")
    message_id: str = wire("messageID")
    metadata: dict[str, Any] = field(default_factory=dict)
    call_id: Optional[str] = wire("callID", default=None)
    pattern: Any = None


# ==================== Configuration ====================


class McpType(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"


@dataclass
class PermissionConfig:
    """Tool permissions: ``ask``, ``allow`` or ``deny``.

    ``bash`` is either one rule for every command or a mapping from command
    pattern to rule, e.g. ``{"git push": "ask", "*": "allow"}``.
    """

    bash: Optional[Union[str, dict[str, str]]] = None
    edit: Optional[str] = None
    webfetch: Optional[str] = None

    def bash_rules(self) -> dict[str, str]:
        """The bash permission as a pattern mapping; a single rule applies to ``*``."""
        if self.bash is None:
            return {}
        if isinstance(self.bash, str):
            return {"*": self.bash}
        return dict(self.bash)


@dataclass
class AgentConfig:
    description: Optional[str] = None
    disable: bool = False
    mode: Optional[str] = None
    model: Optional[str] = None
    permission: Optional[PermissionConfig] = None
    prompt: Optional[str] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    tools: dict[str, bool] = field(default_factory=dict)


@dataclass
class CommandConfig:
    template: str
    agent: Optional[str] = None
    description: Optional[str] = None
    model: Optional[str] = None
    subtask: bool = False


@dataclass
class HookCommand:
    command: list[str]
    environment: dict[str, str] = field(default_factory=dict)


@dataclass
class ExperimentalHooks:
    file_edited: dict[str, list[HookCommand]] = field(default_factory=dict)
    session_completed: list[HookCommand] = field(default_factory=list)


@dataclass
class ExperimentalConfig:
    disable_paste_summary: bool = False
    hook: Optional[ExperimentalHooks] = None


@dataclass
class FormatterConfig:
    command: list[str] = field(default_factory=list)
    disabled: bool = False
    environment: dict[str, str] = field(default_factory=dict)
    extensions: list[str] = field(default_factory=list)


@dataclass
class LspServerConfig:
    command: list[str]
    disabled: bool = False
    env: dict[str, str] = field(default_factory=dict)
    extensions: list[str] = field(default_factory=list)
    initialization: dict[str, Any] = field(default_factory=dict)


@dataclass
class LspDisabledConfig:
    """A built-in language server switched off: ``{"disabled": true}``."""

    disabled: bool


@dataclass
class McpLocalConfig:
    type: str
    command: list[str]
    enabled: bool = True
    environment: dict[str, str] = field(default_factory=dict)


@dataclass
class McpRemoteConfig:
    type: str
    url: str
    enabled: bool = True
    headers: dict[str, str] = field(default_factory=dict)


class McpConfig(DiscriminatedUnion):
    """An MCP server entry, a local command or a remote URL."""

    __slots__ = ()

    discriminator = "type"
    variants = {
        McpType.LOCAL.value: McpLocalConfig,
        McpType.REMOTE.value: McpRemoteConfig,
    }

    def as_local(self) -> Optional[McpLocalConfig]:
        return self._as(McpType.LOCAL.value)

    def as_remote(self) -> Optional[McpRemoteConfig]:
        return self._as(McpType.REMOTE.value)


@dataclass
class ProviderModelCost:
    input: float
    output: float
    cache_read: Optional[float] = None
    cache_write: Optional[float] = None


@dataclass
class ProviderModelLimit:
    context: float
    output: float


@dataclass
class ProviderModelConfig:
    id: Optional[str] = None
    name: Optional[str] = None
    attachment: Optional[bool] = None
    cost: Optional[ProviderModelCost] = None
    experimental: Optional[bool] = None
    limit: Optional[ProviderModelLimit] = None
    modalities: Optional[dict[str, list[str]]] = None
    options: dict[str, Any] = field(default_factory=dict)
    reasoning: Optional[bool] = None
    release_date: Optional[str] = None
    status: Optional[str] = None
    temperature: Optional[bool] = None
    tool_call: Optional[bool] = None


@dataclass
class ProviderOptions:
    api_key: Optional[str] = wire("apiKey", default=None)
    base_url: Optional[str] = wire("baseURL", default=None)
    # milliseconds, or false to disable the timeout
    timeout: Optional[Union[int, bool]] = None


@dataclass
class ProviderConfig:
    id: Optional[str] = None
    name: Optional[str] = None
    api: Optional[str] = None
    npm: Optional[str] = None
    env: list[str] = field(default_factory=list)
    models: dict[str, ProviderModelConfig] = field(default_factory=dict)
    options: Optional[ProviderOptions] = None


@dataclass
class TuiConfig:
    scroll_speed: Optional[float] = None


@dataclass
class WatcherConfig:
    ignore: list[str] = field(default_factory=list)


@dataclass
class Config:
    """Server configuration as returned by the config endpoints.

    Every key is optional; unset sections decode to empty collections.
    """

    schema: Optional[str] = wire("$schema", default=None)
    agent: dict[str, AgentConfig] = field(default_factory=dict)
    autoshare: Optional[bool] = None
    autoupdate: Optional[bool] = None
    command: dict[str, CommandConfig] = field(default_factory=dict)
    disabled_providers: list[str] = field(default_factory=list)
    experimental: Optional[ExperimentalConfig] = None
    formatter: dict[str, FormatterConfig] = field(default_factory=dict)
    instructions: list[str] = field(default_factory=list)
    keybinds: dict[str, str] = field(default_factory=dict)
    layout: Optional[str] = None
    lsp: dict[str, Union[LspServerConfig, LspDisabledConfig]] = field(default_factory=dict)
    mcp: dict[str, McpConfig] = field(default_factory=dict)
    mode: dict[str, AgentConfig] = field(default_factory=dict)
    model: Optional[str] = None
    permission: Optional[PermissionConfig] = None
    plugin: list[str] = field(default_factory=list)
    provider: dict[str, ProviderConfig] = field(default_factory=dict)
    share: Optional[str] = None
    small_model: Optional[str] = None
    snapshot: Optional[bool] = None
    theme: Optional[str] = None
    tools: dict[str, bool] = field(default_factory=dict)
    tui: Optional[TuiConfig] = None
    username: Optional[str] = None
    watcher: Optional[WatcherConfig] = None

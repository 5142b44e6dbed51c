"""
Opencode SDK - HTTP client for the opencode server API.

Provides both synchronous and asynchronous clients. Every endpoint method
builds a RequestSpec and hands it to ``_execute``, which owns the attempt
loop: send, classify, retry or return, decode.
"""

import asyncio
import logging
import time
from typing import Any, Optional

import httpx

from .classifier import classify_response, classify_transport_error
from .config import ClientConfig
from .decoding import decode_response
from .exceptions import TransportError
from .models import (
    Agent,
    AssistantMessage,
    Command,
    CommandResponse,
    Config,
    File,
    FileContent,
    FileNode,
    McpStatus,
    MessageWithParts,
    PathInfo,
    Project,
    PromptResponse,
    ProviderList,
    Session,
    Symbol,
    TextMatch,
    ToolListItem,
)
from .params import (
    AppLogParams,
    Auth,
    AuthSetParams,
    ConfigUpdateParams,
    DirectoryParams,
    FilePathParams,
    FindQueryParams,
    FindTextParams,
    LogLevel,
    ModelRef,
    PartInput,
    PermissionRespondParams,
    PermissionResponse,
    SessionCommandParams,
    SessionCreateParams,
    SessionInitParams,
    SessionPromptParams,
    SessionRevertParams,
    SessionShellParams,
    SessionSummarizeParams,
    SessionUpdateParams,
    ToastVariant,
    ToolListParams,
    TuiAppendPromptParams,
    TuiExecuteCommandParams,
    TuiShowToastParams,
)
from .query import QuerySettings
from .request import Deadline, RequestOptions, RequestSpec
from .retry import Attempt, should_retry

logger = logging.getLogger("opencode_sdk.client")


def _resolve_config(config: Optional[ClientConfig], **overrides: Any) -> ClientConfig:
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if config is None:
        return ClientConfig.from_env(**overrides)
    if overrides:
        return config.with_options(**overrides)
    return config


def _deadline_error(deadline: Deadline, last: Attempt) -> TransportError:
    return TransportError(
        f"request deadline of {deadline.timeout}s exceeded after {last.number + 1} attempt(s)",
        cause=last.error,
        timed_out=True,
    )


class OpencodeClient:
    """
    Synchronous client for the opencode server.

    Example:
        ```python
        with OpencodeClient(base_url="http://localhost:54321") as client:
            session = client.create_session(title="Refactor parser")
            reply = client.prompt(session.id, [TextPartInput(text="hello")])
            for part in reply.parts:
                if (tool := part.as_tool()) is not None:
                    print(tool.tool, tool.state.status)
        ```

    The configuration is immutable and the client holds no per-call state,
    so one instance may be shared between threads. A caller-supplied
    ``http_client`` is used as-is and never closed by this client.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        max_retries: Optional[int] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = _resolve_config(
            config,
            base_url=base_url,
            api_key=api_key,
            max_retries=max_retries,
            timeout=timeout,
        )
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            timeout=self.config.timeout,
            transport=transport,
            follow_redirects=False,
        )

    # ==================== Request execution ====================

    def request(
        self,
        method: str,
        path: str,
        *,
        path_params: Optional[dict[str, Any]] = None,
        params: Any = None,
        shape: Any = None,
        settings: Optional[QuerySettings] = None,
        options: Optional[RequestOptions] = None,
    ) -> Any:
        """
        Call any endpoint.

        Args:
            method: HTTP method.
            path: Path template relative to the base URL, e.g. ``session/{id}``.
            path_params: Values for the template's ``{name}`` segments.
            params: Parameter dataclass with query/body tagged fields.
            shape: Type to decode the response into; ``None`` discards it.
            settings: Query array/nesting formats for this call.
            options: Per-call deadline and cancellation.

        Returns:
            The decoded response.
        """
        spec = RequestSpec.build(method, path, path_params, params, settings)
        return self._execute(spec, shape, options)

    def _execute(
        self,
        spec: RequestSpec,
        shape: Any = None,
        options: Optional[RequestOptions] = None,
    ) -> Any:
        options = options or RequestOptions()
        deadline = Deadline.for_call(self.config.timeout, options)
        content = spec.body
        number = 0
        backoff = 0.0

        while True:
            if options.cancel_event is not None and options.cancel_event.is_set():
                raise TransportError("request cancelled", cancelled=True)

            attempt = self._send(spec, content, number, backoff, deadline, options)
            if attempt.succeeded:
                return decode_response(attempt.content, shape)

            decision = should_retry(attempt, self.config)
            if not decision.retry:
                raise attempt.error from getattr(attempt.error, "cause", None)

            logger.warning(
                "%s %s failed on attempt %d (%s); retrying in %.2fs",
                spec.method,
                spec.path,
                number + 1,
                attempt.error,
                decision.delay,
            )
            self._wait(decision.delay, deadline, options, attempt)
            number += 1
            backoff = decision.delay

    def _send(
        self,
        spec: RequestSpec,
        content: Optional[bytes],
        number: int,
        backoff: float,
        deadline: Deadline,
        options: RequestOptions,
    ) -> Attempt:
        remaining = deadline.remaining()
        if remaining <= 0:
            return Attempt(
                number,
                backoff,
                error=TransportError("request deadline exceeded", timed_out=True),
            )

        headers = {**self.config.default_headers(), **spec.headers(), **options.extra_headers}
        logger.debug("%s %s attempt %d", spec.method, spec.path, number + 1)
        # httpx timeouts bound each read, not the whole body, so the body is
        # streamed and checked against the deadline between chunks.
        try:
            with self._client.stream(
                spec.method,
                self.config.base_url + spec.path,
                params=list(spec.query) or None,
                content=content,
                headers=headers,
                timeout=remaining,
                follow_redirects=False,
            ) as response:
                chunks = []
                for chunk in response.iter_bytes():
                    chunks.append(chunk)
                    if deadline.expired:
                        error = TransportError(
                            f"response body not received within {deadline.timeout}s",
                            timed_out=True,
                        )
                        return Attempt(number, backoff, status_code=response.status_code, error=error)
                body = b"".join(chunks)
        except httpx.RequestError as exc:
            return Attempt(number, backoff, error=classify_transport_error(exc))

        error = classify_response(response.status_code, body, response.headers)
        return Attempt(
            number,
            backoff,
            status_code=response.status_code,
            content=body,
            error=error,
        )

    def _wait(
        self,
        delay: float,
        deadline: Deadline,
        options: RequestOptions,
        last: Attempt,
    ) -> None:
        if deadline.remaining() <= delay:
            raise _deadline_error(deadline, last) from last.error
        if options.cancel_event is not None:
            if options.cancel_event.wait(delay):
                raise TransportError(
                    "request cancelled during backoff",
                    cause=last.error,
                    cancelled=True,
                ) from last.error
        else:
            time.sleep(delay)

    # ==================== Sessions ====================

    def create_session(
        self,
        title: Optional[str] = None,
        parent_id: Optional[str] = None,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Session:
        """
        Create a new session.

        Args:
            title: Optional session title.
            parent_id: Parent session when creating a child session.
            directory: Project directory the server should resolve against.

        Returns:
            The created Session.
        """
        params = SessionCreateParams(parent_id=parent_id, title=title, directory=directory)
        spec = RequestSpec.build("POST", "session", params=params)
        return self._execute(spec, Session, options)

    def list_sessions(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> list[Session]:
        """List all sessions."""
        spec = RequestSpec.build("GET", "session", params=DirectoryParams(directory))
        return self._execute(spec, list[Session], options)

    def get_session(
        self,
        session_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Session:
        """Get a session by ID."""
        spec = RequestSpec.build(
            "GET", "session/{id}", {"id": session_id}, DirectoryParams(directory)
        )
        return self._execute(spec, Session, options)

    def update_session(
        self,
        session_id: str,
        title: Optional[str] = None,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Session:
        """Update session properties."""
        params = SessionUpdateParams(title=title, directory=directory)
        spec = RequestSpec.build("PATCH", "session/{id}", {"id": session_id}, params)
        return self._execute(spec, Session, options)

    def delete_session(
        self,
        session_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> None:
        """Delete a session and all of its data."""
        spec = RequestSpec.build(
            "DELETE", "session/{id}", {"id": session_id}, DirectoryParams(directory)
        )
        self._execute(spec, None, options)

    def abort_session(
        self,
        session_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> None:
        """Abort whatever the session is currently running."""
        spec = RequestSpec.build(
            "POST", "session/{id}/abort", {"id": session_id}, DirectoryParams(directory)
        )
        self._execute(spec, None, options)

    def get_session_children(
        self,
        session_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> list[Session]:
        spec = RequestSpec.build(
            "GET", "session/{id}/children", {"id": session_id}, DirectoryParams(directory)
        )
        return self._execute(spec, list[Session], options)

    def init_session(
        self,
        session_id: str,
        message_id: str,
        provider_id: str,
        model_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        """Analyze the project and write an AGENTS.md file."""
        params = SessionInitParams(
            message_id=message_id,
            model_id=model_id,
            provider_id=provider_id,
            directory=directory,
        )
        spec = RequestSpec.build("POST", "session/{id}/init", {"id": session_id}, params)
        return self._execute(spec, bool, options)

    def share_session(
        self,
        session_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Session:
        spec = RequestSpec.build(
            "POST", "session/{id}/share", {"id": session_id}, DirectoryParams(directory)
        )
        return self._execute(spec, Session, options)

    def unshare_session(
        self,
        session_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Session:
        spec = RequestSpec.build(
            "DELETE", "session/{id}/share", {"id": session_id}, DirectoryParams(directory)
        )
        return self._execute(spec, Session, options)

    def summarize_session(
        self,
        session_id: str,
        provider_id: str,
        model_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        """Summarize the session with the given model."""
        params = SessionSummarizeParams(
            model_id=model_id, provider_id=provider_id, directory=directory
        )
        spec = RequestSpec.build("POST", "session/{id}/summarize", {"id": session_id}, params)
        return self._execute(spec, bool, options)

    def revert_session(
        self,
        session_id: str,
        message_id: str,
        part_id: Optional[str] = None,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Session:
        """Revert the session to a message, or to a part within it."""
        params = SessionRevertParams(message_id=message_id, part_id=part_id, directory=directory)
        spec = RequestSpec.build("POST", "session/{id}/revert", {"id": session_id}, params)
        return self._execute(spec, Session, options)

    def unrevert_session(
        self,
        session_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Session:
        """Restore all reverted messages."""
        spec = RequestSpec.build(
            "POST", "session/{id}/unrevert", {"id": session_id}, DirectoryParams(directory)
        )
        return self._execute(spec, Session, options)

    def run_command(
        self,
        session_id: str,
        command: str,
        arguments: str,
        agent: Optional[str] = None,
        message_id: Optional[str] = None,
        model: Optional[str] = None,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> CommandResponse:
        """Send a slash command to the session."""
        params = SessionCommandParams(
            command=command,
            arguments=arguments,
            agent=agent,
            message_id=message_id,
            model=model,
            directory=directory,
        )
        spec = RequestSpec.build("POST", "session/{id}/command", {"id": session_id}, params)
        return self._execute(spec, CommandResponse, options)

    def run_shell(
        self,
        session_id: str,
        command: str,
        agent: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> AssistantMessage:
        """Run a shell command in the session."""
        params = SessionShellParams(agent=agent, command=command, directory=directory)
        spec = RequestSpec.build("POST", "session/{id}/shell", {"id": session_id}, params)
        return self._execute(spec, AssistantMessage, options)

    def list_messages(
        self,
        session_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> list[MessageWithParts]:
        """List the messages of a session, each with its parts."""
        spec = RequestSpec.build(
            "GET", "session/{id}/message", {"id": session_id}, DirectoryParams(directory)
        )
        return self._execute(spec, list[MessageWithParts], options)

    def get_message(
        self,
        session_id: str,
        message_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> MessageWithParts:
        spec = RequestSpec.build(
            "GET",
            "session/{id}/message/{message_id}",
            {"id": session_id, "message_id": message_id},
            DirectoryParams(directory),
        )
        return self._execute(spec, MessageWithParts, options)

    def prompt(
        self,
        session_id: str,
        parts: list[PartInput],
        agent: Optional[str] = None,
        model: Optional[ModelRef] = None,
        system: Optional[str] = None,
        tools: Optional[dict[str, bool]] = None,
        message_id: Optional[str] = None,
        no_reply: Optional[bool] = None,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> PromptResponse:
        """
        Send a message to the session and wait for the assistant's reply.

        Args:
            session_id: The session to prompt.
            parts: Text, file and agent parts making up the message.
            agent: Agent to handle the message.
            model: Provider/model override.
            system: Extra system prompt.
            tools: Per-tool enable/disable overrides.
            message_id: Client-chosen ID for the new message.
            no_reply: Store the message without asking for a reply.

        Returns:
            The assistant message and its parts.
        """
        params = SessionPromptParams(
            parts=parts,
            agent=agent,
            message_id=message_id,
            model=model,
            no_reply=no_reply,
            system=system,
            tools=tools,
            directory=directory,
        )
        spec = RequestSpec.build("POST", "session/{id}/message", {"id": session_id}, params)
        return self._execute(spec, PromptResponse, options)

    def respond_to_permission(
        self,
        session_id: str,
        permission_id: str,
        response: PermissionResponse,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        """Answer a pending permission request."""
        params = PermissionRespondParams(response=response, directory=directory)
        spec = RequestSpec.build(
            "POST",
            "session/{id}/permissions/{permission_id}",
            {"id": session_id, "permission_id": permission_id},
            params,
        )
        return self._execute(spec, bool, options)

    # ==================== Files ====================

    def list_files(
        self,
        path: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> list[FileNode]:
        """List files and directories under ``path``."""
        spec = RequestSpec.build("GET", "file", params=FilePathParams(path, directory))
        return self._execute(spec, list[FileNode], options)

    def read_file(
        self,
        path: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> FileContent:
        spec = RequestSpec.build("GET", "file/content", params=FilePathParams(path, directory))
        return self._execute(spec, FileContent, options)

    def file_status(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> list[File]:
        """Git status of files in the project."""
        spec = RequestSpec.build("GET", "file/status", params=DirectoryParams(directory))
        return self._execute(spec, list[File], options)

    # ==================== Find ====================

    def find_text(
        self,
        pattern: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> list[TextMatch]:
        """Search file contents for ``pattern``."""
        spec = RequestSpec.build("GET", "find", params=FindTextParams(pattern, directory))
        return self._execute(spec, list[TextMatch], options)

    def find_files(
        self,
        query: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> list[str]:
        spec = RequestSpec.build("GET", "find/file", params=FindQueryParams(query, directory))
        return self._execute(spec, list[str], options)

    def find_symbols(
        self,
        query: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> list[Symbol]:
        spec = RequestSpec.build("GET", "find/symbol", params=FindQueryParams(query, directory))
        return self._execute(spec, list[Symbol], options)

    # ==================== Tools ====================

    def list_tool_ids(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> list[str]:
        """IDs of all tools, built-in and dynamically registered."""
        spec = RequestSpec.build("GET", "experimental/tool/ids", params=DirectoryParams(directory))
        return self._execute(spec, list[str], options)

    def list_tools(
        self,
        provider: str,
        model: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> list[ToolListItem]:
        """Tools with their JSON-schema parameters for a provider/model."""
        params = ToolListParams(provider=provider, model=model, directory=directory)
        spec = RequestSpec.build("GET", "experimental/tool", params=params)
        return self._execute(spec, list[ToolListItem], options)

    # ==================== Configuration ====================

    def get_config(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> Config:
        spec = RequestSpec.build("GET", "config", params=DirectoryParams(directory))
        return self._execute(spec, Config, options)

    def update_config(
        self,
        config: dict[str, Any],
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Config:
        """Patch the server configuration; returns the resulting config."""
        params = ConfigUpdateParams(config=config, directory=directory)
        spec = RequestSpec.build("PATCH", "config", params=params)
        return self._execute(spec, Config, options)

    def list_providers(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> ProviderList:
        spec = RequestSpec.build("GET", "config/providers", params=DirectoryParams(directory))
        return self._execute(spec, ProviderList, options)

    # ==================== App ====================

    def log(
        self,
        service: str,
        level: LogLevel,
        message: str,
        extra: Optional[dict[str, Any]] = None,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        """Write an entry to the server log."""
        params = AppLogParams(
            service=service, level=level, message=message, extra=extra, directory=directory
        )
        spec = RequestSpec.build("POST", "log", params=params)
        return self._execute(spec, bool, options)

    def list_agents(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> list[Agent]:
        spec = RequestSpec.build("GET", "agent", params=DirectoryParams(directory))
        return self._execute(spec, list[Agent], options)

    def list_commands(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> list[Command]:
        spec = RequestSpec.build("GET", "command", params=DirectoryParams(directory))
        return self._execute(spec, list[Command], options)

    def get_path(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> PathInfo:
        spec = RequestSpec.build("GET", "path", params=DirectoryParams(directory))
        return self._execute(spec, PathInfo, options)

    def list_projects(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> list[Project]:
        spec = RequestSpec.build("GET", "project", params=DirectoryParams(directory))
        return self._execute(spec, list[Project], options)

    def current_project(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> Project:
        spec = RequestSpec.build("GET", "project/current", params=DirectoryParams(directory))
        return self._execute(spec, Project, options)

    def mcp_status(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> dict[str, McpStatus]:
        """Connection status of each configured MCP server, keyed by name."""
        spec = RequestSpec.build("GET", "mcp", params=DirectoryParams(directory))
        return self._execute(spec, dict[str, McpStatus], options)

    # ==================== Auth ====================

    def set_auth(
        self,
        provider_id: str,
        auth: Auth,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        """Store credentials for a provider."""
        params = AuthSetParams(auth=auth, directory=directory)
        spec = RequestSpec.build("PUT", "auth/{id}", {"id": provider_id}, params)
        return self._execute(spec, bool, options)

    # ==================== TUI control ====================

    def tui_append_prompt(
        self,
        text: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        spec = RequestSpec.build(
            "POST", "tui/append-prompt", params=TuiAppendPromptParams(text, directory)
        )
        return self._execute(spec, bool, options)

    def tui_clear_prompt(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> bool:
        return self._tui_action("clear-prompt", directory, options)

    def tui_execute_command(
        self,
        command: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        spec = RequestSpec.build(
            "POST", "tui/execute-command", params=TuiExecuteCommandParams(command, directory)
        )
        return self._execute(spec, bool, options)

    def tui_open_help(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> bool:
        return self._tui_action("open-help", directory, options)

    def tui_open_models(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> bool:
        return self._tui_action("open-models", directory, options)

    def tui_open_sessions(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> bool:
        return self._tui_action("open-sessions", directory, options)

    def tui_open_themes(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> bool:
        return self._tui_action("open-themes", directory, options)

    def tui_show_toast(
        self,
        message: str,
        variant: ToastVariant,
        title: Optional[str] = None,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        """Show a toast notification in the TUI."""
        params = TuiShowToastParams(
            message=message, variant=variant, title=title, directory=directory
        )
        spec = RequestSpec.build("POST", "tui/show-toast", params=params)
        return self._execute(spec, bool, options)

    def tui_submit_prompt(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> bool:
        return self._tui_action("submit-prompt", directory, options)

    def _tui_action(
        self, action: str, directory: Optional[str], options: Optional[RequestOptions]
    ) -> bool:
        spec = RequestSpec.build("POST", f"tui/{action}", params=DirectoryParams(directory))
        return self._execute(spec, bool, options)

    def close(self) -> None:
        """Close the HTTP client connection if this client created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "OpencodeClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class AsyncOpencodeClient:
    """
    Asynchronous client for the opencode server.

    Example:
        ```python
        async with AsyncOpencodeClient(base_url="http://localhost:54321") as client:
            sessions = await client.list_sessions()
        ```

    Cancelling the awaiting task cancels the call, including during backoff;
    ``asyncio.CancelledError`` propagates unchanged.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        max_retries: Optional[int] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = _resolve_config(
            config,
            base_url=base_url,
            api_key=api_key,
            max_retries=max_retries,
            timeout=timeout,
        )
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=self.config.timeout,
            transport=transport,
            follow_redirects=False,
        )

    # ==================== Request execution ====================

    async def request(
        self,
        method: str,
        path: str,
        *,
        path_params: Optional[dict[str, Any]] = None,
        params: Any = None,
        shape: Any = None,
        settings: Optional[QuerySettings] = None,
        options: Optional[RequestOptions] = None,
    ) -> Any:
        """Call any endpoint. See ``OpencodeClient.request``."""
        spec = RequestSpec.build(method, path, path_params, params, settings)
        return await self._execute(spec, shape, options)

    async def _execute(
        self,
        spec: RequestSpec,
        shape: Any = None,
        options: Optional[RequestOptions] = None,
    ) -> Any:
        options = options or RequestOptions()
        deadline = Deadline.for_call(self.config.timeout, options)
        content = spec.body
        number = 0
        backoff = 0.0

        while True:
            attempt = await self._send(spec, content, number, backoff, deadline, options)
            if attempt.succeeded:
                return decode_response(attempt.content, shape)

            decision = should_retry(attempt, self.config)
            if not decision.retry:
                raise attempt.error from getattr(attempt.error, "cause", None)

            logger.warning(
                "%s %s failed on attempt %d (%s); retrying in %.2fs",
                spec.method,
                spec.path,
                number + 1,
                attempt.error,
                decision.delay,
            )
            if deadline.remaining() <= decision.delay:
                raise _deadline_error(deadline, attempt) from attempt.error
            await asyncio.sleep(decision.delay)
            number += 1
            backoff = decision.delay

    async def _send(
        self,
        spec: RequestSpec,
        content: Optional[bytes],
        number: int,
        backoff: float,
        deadline: Deadline,
        options: RequestOptions,
    ) -> Attempt:
        remaining = deadline.remaining()
        if remaining <= 0:
            return Attempt(
                number,
                backoff,
                error=TransportError("request deadline exceeded", timed_out=True),
            )

        headers = {**self.config.default_headers(), **spec.headers(), **options.extra_headers}
        logger.debug("%s %s attempt %d", spec.method, spec.path, number + 1)
        try:
            response = await asyncio.wait_for(
                self._client.request(
                    spec.method,
                    self.config.base_url + spec.path,
                    params=list(spec.query) or None,
                    content=content,
                    headers=headers,
                    timeout=remaining,
                    follow_redirects=False,
                ),
                timeout=remaining,
            )
        except asyncio.TimeoutError as exc:
            error = TransportError(f"request timed out after {remaining:.2f}s", cause=exc, timed_out=True)
            return Attempt(number, backoff, error=error)
        except httpx.RequestError as exc:
            return Attempt(number, backoff, error=classify_transport_error(exc))

        error = classify_response(response.status_code, response.content, response.headers)
        return Attempt(
            number,
            backoff,
            status_code=response.status_code,
            content=response.content,
            error=error,
        )

    # ==================== Sessions ====================

    async def create_session(
        self,
        title: Optional[str] = None,
        parent_id: Optional[str] = None,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Session:
        """Create a new session."""
        params = SessionCreateParams(parent_id=parent_id, title=title, directory=directory)
        spec = RequestSpec.build("POST", "session", params=params)
        return await self._execute(spec, Session, options)

    async def list_sessions(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> list[Session]:
        spec = RequestSpec.build("GET", "session", params=DirectoryParams(directory))
        return await self._execute(spec, list[Session], options)

    async def get_session(
        self,
        session_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Session:
        spec = RequestSpec.build(
            "GET", "session/{id}", {"id": session_id}, DirectoryParams(directory)
        )
        return await self._execute(spec, Session, options)

    async def update_session(
        self,
        session_id: str,
        title: Optional[str] = None,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Session:
        params = SessionUpdateParams(title=title, directory=directory)
        spec = RequestSpec.build("PATCH", "session/{id}", {"id": session_id}, params)
        return await self._execute(spec, Session, options)

    async def delete_session(
        self,
        session_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> None:
        spec = RequestSpec.build(
            "DELETE", "session/{id}", {"id": session_id}, DirectoryParams(directory)
        )
        await self._execute(spec, None, options)

    async def abort_session(
        self,
        session_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> None:
        spec = RequestSpec.build(
            "POST", "session/{id}/abort", {"id": session_id}, DirectoryParams(directory)
        )
        await self._execute(spec, None, options)

    async def get_session_children(
        self,
        session_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> list[Session]:
        spec = RequestSpec.build(
            "GET", "session/{id}/children", {"id": session_id}, DirectoryParams(directory)
        )
        return await self._execute(spec, list[Session], options)

    async def init_session(
        self,
        session_id: str,
        message_id: str,
        provider_id: str,
        model_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        params = SessionInitParams(
            message_id=message_id,
            model_id=model_id,
            provider_id=provider_id,
            directory=directory,
        )
        spec = RequestSpec.build("POST", "session/{id}/init", {"id": session_id}, params)
        return await self._execute(spec, bool, options)

    async def share_session(
        self,
        session_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Session:
        spec = RequestSpec.build(
            "POST", "session/{id}/share", {"id": session_id}, DirectoryParams(directory)
        )
        return await self._execute(spec, Session, options)

    async def unshare_session(
        self,
        session_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Session:
        spec = RequestSpec.build(
            "DELETE", "session/{id}/share", {"id": session_id}, DirectoryParams(directory)
        )
        return await self._execute(spec, Session, options)

    async def summarize_session(
        self,
        session_id: str,
        provider_id: str,
        model_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        params = SessionSummarizeParams(
            model_id=model_id, provider_id=provider_id, directory=directory
        )
        spec = RequestSpec.build("POST", "session/{id}/summarize", {"id": session_id}, params)
        return await self._execute(spec, bool, options)

    async def revert_session(
        self,
        session_id: str,
        message_id: str,
        part_id: Optional[str] = None,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Session:
        params = SessionRevertParams(message_id=message_id, part_id=part_id, directory=directory)
        spec = RequestSpec.build("POST", "session/{id}/revert", {"id": session_id}, params)
        return await self._execute(spec, Session, options)

    async def unrevert_session(
        self,
        session_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Session:
        spec = RequestSpec.build(
            "POST", "session/{id}/unrevert", {"id": session_id}, DirectoryParams(directory)
        )
        return await self._execute(spec, Session, options)

    async def run_command(
        self,
        session_id: str,
        command: str,
        arguments: str,
        agent: Optional[str] = None,
        message_id: Optional[str] = None,
        model: Optional[str] = None,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> CommandResponse:
        params = SessionCommandParams(
            command=command,
            arguments=arguments,
            agent=agent,
            message_id=message_id,
            model=model,
            directory=directory,
        )
        spec = RequestSpec.build("POST", "session/{id}/command", {"id": session_id}, params)
        return await self._execute(spec, CommandResponse, options)

    async def run_shell(
        self,
        session_id: str,
        command: str,
        agent: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> AssistantMessage:
        params = SessionShellParams(agent=agent, command=command, directory=directory)
        spec = RequestSpec.build("POST", "session/{id}/shell", {"id": session_id}, params)
        return await self._execute(spec, AssistantMessage, options)

    async def list_messages(
        self,
        session_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> list[MessageWithParts]:
        spec = RequestSpec.build(
            "GET", "session/{id}/message", {"id": session_id}, DirectoryParams(directory)
        )
        return await self._execute(spec, list[MessageWithParts], options)

    async def get_message(
        self,
        session_id: str,
        message_id: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> MessageWithParts:
        spec = RequestSpec.build(
            "GET",
            "session/{id}/message/{message_id}",
            {"id": session_id, "message_id": message_id},
            DirectoryParams(directory),
        )
        return await self._execute(spec, MessageWithParts, options)

    async def prompt(
        self,
        session_id: str,
        parts: list[PartInput],
        agent: Optional[str] = None,
        model: Optional[ModelRef] = None,
        system: Optional[str] = None,
        tools: Optional[dict[str, bool]] = None,
        message_id: Optional[str] = None,
        no_reply: Optional[bool] = None,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> PromptResponse:
        """Send a message to the session and wait for the assistant's reply."""
        params = SessionPromptParams(
            parts=parts,
            agent=agent,
            message_id=message_id,
            model=model,
            no_reply=no_reply,
            system=system,
            tools=tools,
            directory=directory,
        )
        spec = RequestSpec.build("POST", "session/{id}/message", {"id": session_id}, params)
        return await self._execute(spec, PromptResponse, options)

    async def respond_to_permission(
        self,
        session_id: str,
        permission_id: str,
        response: PermissionResponse,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        params = PermissionRespondParams(response=response, directory=directory)
        spec = RequestSpec.build(
            "POST",
            "session/{id}/permissions/{permission_id}",
            {"id": session_id, "permission_id": permission_id},
            params,
        )
        return await self._execute(spec, bool, options)

    # ==================== Files ====================

    async def list_files(
        self,
        path: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> list[FileNode]:
        spec = RequestSpec.build("GET", "file", params=FilePathParams(path, directory))
        return await self._execute(spec, list[FileNode], options)

    async def read_file(
        self,
        path: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> FileContent:
        spec = RequestSpec.build("GET", "file/content", params=FilePathParams(path, directory))
        return await self._execute(spec, FileContent, options)

    async def file_status(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> list[File]:
        spec = RequestSpec.build("GET", "file/status", params=DirectoryParams(directory))
        return await self._execute(spec, list[File], options)

    # ==================== Find ====================

    async def find_text(
        self,
        pattern: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> list[TextMatch]:
        spec = RequestSpec.build("GET", "find", params=FindTextParams(pattern, directory))
        return await self._execute(spec, list[TextMatch], options)

    async def find_files(
        self,
        query: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> list[str]:
        spec = RequestSpec.build("GET", "find/file", params=FindQueryParams(query, directory))
        return await self._execute(spec, list[str], options)

    async def find_symbols(
        self,
        query: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> list[Symbol]:
        spec = RequestSpec.build("GET", "find/symbol", params=FindQueryParams(query, directory))
        return await self._execute(spec, list[Symbol], options)

    # ==================== Tools ====================

    async def list_tool_ids(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> list[str]:
        spec = RequestSpec.build("GET", "experimental/tool/ids", params=DirectoryParams(directory))
        return await self._execute(spec, list[str], options)

    async def list_tools(
        self,
        provider: str,
        model: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> list[ToolListItem]:
        params = ToolListParams(provider=provider, model=model, directory=directory)
        spec = RequestSpec.build("GET", "experimental/tool", params=params)
        return await self._execute(spec, list[ToolListItem], options)

    # ==================== Configuration ====================

    async def get_config(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> Config:
        spec = RequestSpec.build("GET", "config", params=DirectoryParams(directory))
        return await self._execute(spec, Config, options)

    async def update_config(
        self,
        config: dict[str, Any],
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> Config:
        params = ConfigUpdateParams(config=config, directory=directory)
        spec = RequestSpec.build("PATCH", "config", params=params)
        return await self._execute(spec, Config, options)

    async def list_providers(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> ProviderList:
        spec = RequestSpec.build("GET", "config/providers", params=DirectoryParams(directory))
        return await self._execute(spec, ProviderList, options)

    # ==================== App ====================

    async def log(
        self,
        service: str,
        level: LogLevel,
        message: str,
        extra: Optional[dict[str, Any]] = None,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        params = AppLogParams(
            service=service, level=level, message=message, extra=extra, directory=directory
        )
        spec = RequestSpec.build("POST", "log", params=params)
        return await self._execute(spec, bool, options)

    async def list_agents(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> list[Agent]:
        spec = RequestSpec.build("GET", "agent", params=DirectoryParams(directory))
        return await self._execute(spec, list[Agent], options)

    async def list_commands(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> list[Command]:
        spec = RequestSpec.build("GET", "command", params=DirectoryParams(directory))
        return await self._execute(spec, list[Command], options)

    async def get_path(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> PathInfo:
        spec = RequestSpec.build("GET", "path", params=DirectoryParams(directory))
        return await self._execute(spec, PathInfo, options)

    async def list_projects(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> list[Project]:
        spec = RequestSpec.build("GET", "project", params=DirectoryParams(directory))
        return await self._execute(spec, list[Project], options)

    async def current_project(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> Project:
        spec = RequestSpec.build("GET", "project/current", params=DirectoryParams(directory))
        return await self._execute(spec, Project, options)

    async def mcp_status(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> dict[str, McpStatus]:
        spec = RequestSpec.build("GET", "mcp", params=DirectoryParams(directory))
        return await self._execute(spec, dict[str, McpStatus], options)

    # ==================== Auth ====================

    async def set_auth(
        self,
        provider_id: str,
        auth: Auth,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        params = AuthSetParams(auth=auth, directory=directory)
        spec = RequestSpec.build("PUT", "auth/{id}", {"id": provider_id}, params)
        return await self._execute(spec, bool, options)

    # ==================== TUI control ====================

    async def tui_append_prompt(
        self,
        text: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        spec = RequestSpec.build(
            "POST", "tui/append-prompt", params=TuiAppendPromptParams(text, directory)
        )
        return await self._execute(spec, bool, options)

    async def tui_clear_prompt(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> bool:
        return await self._tui_action("clear-prompt", directory, options)

    async def tui_execute_command(
        self,
        command: str,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        spec = RequestSpec.build(
            "POST", "tui/execute-command", params=TuiExecuteCommandParams(command, directory)
        )
        return await self._execute(spec, bool, options)

    async def tui_open_help(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> bool:
        return await self._tui_action("open-help", directory, options)

    async def tui_open_models(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> bool:
        return await self._tui_action("open-models", directory, options)

    async def tui_open_sessions(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> bool:
        return await self._tui_action("open-sessions", directory, options)

    async def tui_open_themes(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> bool:
        return await self._tui_action("open-themes", directory, options)

    async def tui_show_toast(
        self,
        message: str,
        variant: ToastVariant,
        title: Optional[str] = None,
        directory: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        params = TuiShowToastParams(
            message=message, variant=variant, title=title, directory=directory
        )
        spec = RequestSpec.build("POST", "tui/show-toast", params=params)
        return await self._execute(spec, bool, options)

    async def tui_submit_prompt(
        self, directory: Optional[str] = None, options: Optional[RequestOptions] = None
    ) -> bool:
        return await self._tui_action("submit-prompt", directory, options)

    async def _tui_action(
        self, action: str, directory: Optional[str], options: Optional[RequestOptions]
    ) -> bool:
        spec = RequestSpec.build("POST", f"tui/{action}", params=DirectoryParams(directory))
        return await self._execute(spec, bool, options)

    async def close(self) -> None:
        """Close the HTTP client connection if this client created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AsyncOpencodeClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

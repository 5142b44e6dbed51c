"""
Tests for Opencode SDK response models and decoding.
"""

import json
from typing import Optional

import pytest

from opencode_sdk.decoding import decode, decode_response, parse_json
from opencode_sdk.exceptions import DecodeError
from opencode_sdk.models import (
    Agent,
    AgentConfig,
    AssistantMessage,
    Config,
    FileContent,
    LspDisabledConfig,
    LspServerConfig,
    McpConfig,
    McpStatus,
    Message,
    MessageWithParts,
    Part,
    PromptResponse,
    ProviderConfig,
    Session,
    ToolPart,
    ToolState,
    ToolStateCompleted,
    ToolStatePending,
    ToolStateRunning,
)


def session_payload(**overrides):
    payload = {
        "id": "ses_1",
        "projectID": "prj_1",
        "directory": "/repo",
        "title": "Refactor",
        "version": "0.15.0",
        "time": {"created": 1700000000, "updated": 1700000100},
    }
    payload.update(overrides)
    return payload


def tool_part_payload(state):
    return {
        "id": "prt_1",
        "messageID": "msg_1",
        "sessionID": "ses_1",
        "type": "tool",
        "tool": "bash",
        "callID": "call_1",
        "state": state,
    }


def assistant_payload():
    return {
        "id": "msg_2",
        "sessionID": "ses_1",
        "role": "assistant",
        "parentID": "msg_1",
        "modelID": "claude",
        "providerID": "anthropic",
        "mode": "build",
        "path": {"cwd": "/repo", "root": "/repo"},
        "system": [],
        "cost": 0.01,
        "tokens": {"input": 10, "output": 20, "reasoning": 0, "cache": {"read": 0, "write": 0}},
        "time": {"created": 1700000000},
    }


class TestSession:
    """Tests for Session decoding."""

    def test_decode(self):
        session = decode(session_payload(), Session)
        assert session.id == "ses_1"
        assert session.project_id == "prj_1"
        assert session.time.created == 1700000000.0
        assert session.parent_id is None
        assert not session.is_shared
        assert not session.has_parent

    def test_optional_nested(self):
        session = decode(
            session_payload(parentID="ses_0", share={"url": "https://opncd.ai/s/1"}),
            Session,
        )
        assert session.has_parent
        assert session.share.url == "https://opncd.ai/s/1"

    def test_unknown_keys_ignored(self):
        session = decode(session_payload(somethingNew={"x": 1}), Session)
        assert session.title == "Refactor"

    def test_missing_required_field(self):
        payload = session_payload()
        del payload["projectID"]
        with pytest.raises(DecodeError) as exc:
            decode(payload, Session)
        assert exc.value.field == "projectID"

    def test_missing_nested_field_names_path(self):
        payload = session_payload(time={"created": 1})
        with pytest.raises(DecodeError) as exc:
            decode(payload, Session)
        assert exc.value.field == "time.updated"

    def test_wrong_type(self):
        with pytest.raises(DecodeError):
            decode(session_payload(title=42), Session)

    def test_list_of_sessions(self):
        sessions = decode([session_payload(), session_payload(id="ses_2")], list[Session])
        assert [s.id for s in sessions] == ["ses_1", "ses_2"]

    def test_list_error_names_index(self):
        with pytest.raises(DecodeError) as exc:
            decode([session_payload(), {"id": "x"}], list[Session])
        assert exc.value.field.startswith("[1]")


class TestToolState:
    """Tests for the ToolState tagged union."""

    def test_pending(self):
        state = decode({"status": "pending"}, ToolState)
        assert state.status == "pending"
        assert isinstance(state.as_pending(), ToolStatePending)
        assert state.as_running() is None
        assert state.as_completed() is None
        assert state.as_error() is None

    def test_running(self):
        state = decode(
            {"status": "running", "input": {"command": "ls"}, "time": {"start": 1.0}},
            ToolState,
        )
        running = state.as_running()
        assert isinstance(running, ToolStateRunning)
        assert running.input == {"command": "ls"}
        assert running.time.start == 1.0
        assert state.as_pending() is None

    def test_completed(self):
        state = decode(
            {
                "status": "completed",
                "input": {"command": "ls"},
                "output": "README.md",
                "title": "ls",
                "metadata": {},
                "time": {"start": 1.0, "end": 2.0},
            },
            ToolState,
        )
        completed = state.as_completed()
        assert isinstance(completed, ToolStateCompleted)
        assert completed.output == "README.md"
        assert completed.attachments == []

    def test_error(self):
        state = decode(
            {"status": "error", "error": "exit 1", "input": {}, "time": {"start": 1, "end": 2}},
            ToolState,
        )
        assert state.as_error().error == "exit 1"

    def test_unknown_status_is_not_an_error(self):
        state = decode({"status": "queued", "position": 3}, ToolState)
        assert state.status == "queued"
        assert not state.is_known
        assert state.as_pending() is None
        assert state.as_running() is None
        assert state.as_completed() is None
        assert state.as_error() is None
        assert state.variant() is None
        assert state.raw == {"status": "queued", "position": 3}

    def test_missing_status(self):
        state = decode({}, ToolState)
        assert state.status is None
        assert state.as_pending() is None
        assert state.as_running() is None
        assert state.as_completed() is None
        assert state.as_error() is None

    def test_matching_tag_with_wrong_shape(self):
        state = decode({"status": "running"}, ToolState)
        assert state.status == "running"
        assert state.as_running() is None

    def test_non_object_is_decode_error(self):
        with pytest.raises(DecodeError):
            decode("running", ToolState)

    def test_immutable(self):
        state = decode({"status": "pending"}, ToolState)
        with pytest.raises(AttributeError):
            state._tag = "running"

    def test_raw_is_a_copy(self):
        payload = {"status": "running", "input": {"a": 1}, "time": {"start": 1}}
        state = decode(payload, ToolState)
        payload["input"]["a"] = 2
        state.raw["input"]["a"] = 3
        assert state.as_running().input == {"a": 1}

    def test_equality(self):
        assert decode({"status": "pending"}, ToolState) == decode({"status": "pending"}, ToolState)
        assert hash(decode({"status": "pending"}, ToolState)) == hash(
            decode({"status": "pending"}, ToolState)
        )


class TestPart:
    """Tests for the Part tagged union."""

    def test_tool_part(self):
        part = decode(tool_part_payload({"status": "pending"}), Part)
        assert part.tag == "tool"
        assert part.id == "prt_1"
        tool = part.as_tool()
        assert isinstance(tool, ToolPart)
        assert tool.call_id == "call_1"
        assert tool.state.as_pending() is not None
        assert part.as_text() is None

    def test_text_part(self):
        part = decode(
            {"id": "p", "messageID": "m", "sessionID": "s", "type": "text", "text": "hello"},
            Part,
        )
        assert part.as_text().text == "hello"
        assert part.as_tool() is None

    def test_step_finish_part(self):
        part = decode(
            {
                "id": "p",
                "messageID": "m",
                "sessionID": "s",
                "type": "step-finish",
                "cost": 0,
                "reason": "stop",
                "tokens": {"input": 1, "output": 2, "reasoning": 0, "cache": {"read": 0, "write": 0}},
            },
            Part,
        )
        assert part.as_step_finish().tokens.output == 2.0

    def test_unknown_part_type(self):
        part = decode({"id": "p", "type": "hologram"}, Part)
        assert not part.is_known
        assert part.as_text() is None
        assert part.as_tool() is None

    def test_tool_part_with_unknown_state_still_decodes(self):
        part = decode(tool_part_payload({"status": "paused"}), Part)
        assert part.as_tool().state.status == "paused"


class TestMessages:
    """Tests for message decoding."""

    def test_message_with_parts(self):
        payload = {
            "info": {"id": "msg_1", "sessionID": "ses_1", "role": "user", "time": {"created": 1}},
            "parts": [tool_part_payload({"status": "pending"})],
        }
        result = decode(payload, MessageWithParts)
        assert isinstance(result.info, Message)
        assert result.info.as_user().id == "msg_1"
        assert result.info.as_assistant() is None
        assert result.parts[0].as_tool().tool == "bash"

    def test_prompt_response(self):
        payload = {"info": assistant_payload(), "parts": []}
        result = decode(payload, PromptResponse)
        assert isinstance(result.info, AssistantMessage)
        assert result.info.tokens.cache.read == 0.0
        assert result.info.summary is False


class TestOtherModels:
    """Tests for smaller response models."""

    def test_file_content_wire_name(self):
        content = decode({"type": "text", "content": "x", "mimeType": "text/plain"}, FileContent)
        assert content.mime_type == "text/plain"

    def test_agent(self):
        agent = decode({"name": "build", "mode": "primary", "builtIn": True}, Agent)
        assert agent.built_in is True
        assert agent.tools == {}

    def test_null_for_defaulted_field_uses_default(self):
        agent = decode({"name": "build", "mode": "primary", "builtIn": True, "tools": None}, Agent)
        assert agent.tools == {}

    def test_mcp_status_map(self):
        status = decode({"fs": {"status": "connected"}}, dict[str, McpStatus])
        assert status["fs"].status == "connected"

    def test_bool_is_not_an_int(self):
        with pytest.raises(DecodeError):
            decode(True, int)


class TestConfig:
    """Tests for the typed server configuration."""

    def test_empty_config_uses_defaults(self):
        config = decode({}, Config)
        assert config.agent == {}
        assert config.mcp == {}
        assert config.permission is None
        assert config.schema is None

    def test_schema_wire_name(self):
        config = decode({"$schema": "https://opencode.ai/config.json", "theme": "dark"}, Config)
        assert config.schema == "https://opencode.ai/config.json"
        assert config.theme == "dark"

    def test_mcp_local_and_remote(self):
        config = decode(
            {
                "mcp": {
                    "fs": {"type": "local", "command": ["mcp-fs", "--root", "."]},
                    "docs": {"type": "remote", "url": "https://mcp.example", "enabled": False},
                }
            },
            Config,
        )
        local = config.mcp["fs"].as_local()
        assert local.command == ["mcp-fs", "--root", "."]
        assert local.enabled is True
        assert config.mcp["fs"].as_remote() is None
        remote = config.mcp["docs"].as_remote()
        assert remote.url == "https://mcp.example"
        assert remote.enabled is False

    def test_mcp_unknown_type_is_kept(self):
        config = decode({"mcp": {"x": {"type": "socket", "path": "/tmp/s"}}}, Config)
        entry = config.mcp["x"]
        assert isinstance(entry, McpConfig)
        assert entry.tag == "socket"
        assert not entry.is_known
        assert entry.variant() is None

    def test_mcp_local_without_command_does_not_match(self):
        config = decode({"mcp": {"fs": {"type": "local"}}}, Config)
        assert config.mcp["fs"].as_local() is None

    def test_bash_permission_single_rule(self):
        config = decode({"permission": {"bash": "ask", "edit": "allow"}}, Config)
        assert config.permission.bash == "ask"
        assert config.permission.bash_rules() == {"*": "ask"}
        assert config.permission.edit == "allow"

    def test_bash_permission_per_pattern(self):
        rules = {"git push": "ask", "*": "allow"}
        config = decode({"permission": {"bash": rules}}, Config)
        assert config.permission.bash == rules
        assert config.permission.bash_rules() == rules

    def test_bash_permission_wrong_type(self):
        with pytest.raises(DecodeError):
            decode({"permission": {"bash": 3}}, Config)

    def test_agent_permission(self):
        config = decode(
            {
                "agent": {
                    "plan": {
                        "model": "anthropic/claude",
                        "permission": {"edit": "deny"},
                        "tools": {"write": False},
                    }
                }
            },
            Config,
        )
        agent = config.agent["plan"]
        assert isinstance(agent, AgentConfig)
        assert agent.permission.edit == "deny"
        assert agent.tools == {"write": False}

    def test_lsp_server_or_disabled(self):
        config = decode(
            {
                "lsp": {
                    "pyright": {"disabled": True},
                    "custom": {"command": ["my-lsp", "--stdio"], "extensions": [".x"]},
                }
            },
            Config,
        )
        assert isinstance(config.lsp["pyright"], LspDisabledConfig)
        assert config.lsp["pyright"].disabled is True
        assert isinstance(config.lsp["custom"], LspServerConfig)
        assert config.lsp["custom"].command == ["my-lsp", "--stdio"]

    def test_provider_options(self):
        config = decode(
            {
                "provider": {
                    "openai": {
                        "options": {"apiKey": "sk", "baseURL": "https://proxy", "timeout": 30000},
                        "models": {"gpt": {"name": "GPT", "limit": {"context": 128000, "output": 4096}}},
                    },
                    "local": {"options": {"timeout": False}},
                }
            },
            Config,
        )
        openai = config.provider["openai"]
        assert isinstance(openai, ProviderConfig)
        assert openai.options.api_key == "sk"
        assert openai.options.base_url == "https://proxy"
        assert openai.options.timeout == 30000
        assert openai.models["gpt"].limit.context == 128000
        assert config.provider["local"].options.timeout is False

    def test_provider_timeout_wrong_type(self):
        with pytest.raises(DecodeError):
            decode({"provider": {"p": {"options": {"timeout": "soon"}}}}, Config)

    def test_command_requires_template(self):
        with pytest.raises(DecodeError) as exc:
            decode({"command": {"review": {"description": "Review"}}}, Config)
        assert exc.value.field == "command.review.template"


class TestDecodeResponse:
    """Tests for decode_response and parse_json."""

    def test_none_shape_discards_body(self):
        assert decode_response(b"not json", None) is None

    def test_invalid_json(self):
        with pytest.raises(DecodeError) as exc:
            decode_response(b"{nope", Session)
        assert exc.value.raw_body == "{nope"
        assert exc.value.cause is not None

    def test_empty_body_for_object(self):
        with pytest.raises(DecodeError):
            decode_response(b"", Session)

    def test_empty_body_for_optional(self):
        assert decode_response(b"", Optional[Session]) is None

    def test_shape_mismatch_keeps_raw_body(self):
        body = json.dumps({"id": "ses_1"}).encode()
        with pytest.raises(DecodeError) as exc:
            decode_response(body, Session)
        assert exc.value.raw_body == '{"id": "ses_1"}'

    def test_bool_body(self):
        assert decode_response(b"true", bool) is True

    def test_parse_json_empty(self):
        assert parse_json(b"  ") is None

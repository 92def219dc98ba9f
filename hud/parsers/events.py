"""Fold decoded transcript records into a SessionState."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import ValidationError

from hud import config
from hud.date_utils import parse_timestamp, utc_now
from hud.models import AgentEntry, SessionState, SkillRecord, TodoEntry, ToolEntry

AGENT_TOOL = "Task"
SKILL_TOOL = "Skill"
TODO_TOOL = "TodoWrite"

# Input field that names what a tool is acting on.
_FILE_TARGET_TOOLS = {"Read", "Write", "Edit"}
_PATTERN_TARGET_TOOLS = {"Glob", "Grep"}
_COMMAND_TARGET_TOOLS = {"Bash"}


def _input_str(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if isinstance(value, str):
        return value
    return None


def extract_target(tool_name: str, tool_input: Any) -> str | None:
    """Return the display target for a tool call, if the tool has one."""
    if not isinstance(tool_input, dict):
        return None

    if tool_name in _FILE_TARGET_TOOLS:
        return _input_str(tool_input, "file_path") or _input_str(tool_input, "path")
    if tool_name in _PATTERN_TARGET_TOOLS:
        return _input_str(tool_input, "pattern")
    if tool_name in _COMMAND_TARGET_TOOLS:
        command = _input_str(tool_input, "command")
        if command is None:
            return None
        limit = config.BASH_TARGET_LENGTH
        return command[:limit] + ("..." if len(command) > limit else "")
    return None


def _parse_todos(raw_todos: list[Any]) -> list[TodoEntry]:
    todos: list[TodoEntry] = []
    for raw in raw_todos:
        if not isinstance(raw, dict):
            continue
        try:
            todos.append(TodoEntry.model_validate(raw))
        except ValidationError:
            continue
    return todos


def _apply_tool_use(block: dict[str, Any], state: SessionState, timestamp: datetime) -> None:
    tool_id = block.get("id")
    tool_name = block.get("name")
    if not tool_id or not tool_name or not isinstance(tool_id, str) or not isinstance(tool_name, str):
        return

    tool_input = block.get("input")
    payload = tool_input if isinstance(tool_input, dict) else {}

    if tool_name == AGENT_TOOL:
        state.agents[tool_id] = AgentEntry(
            type=_input_str(payload, "subagent_type") or "unknown",
            model=_input_str(payload, "model"),
            description=_input_str(payload, "description"),
            status="running",
            startTime=timestamp,
        )
        state.agentCallCount += 1
    elif tool_name == SKILL_TOOL:
        state.lastSkill = SkillRecord(name=_input_str(payload, "skill") or "unknown", timestamp=timestamp)
        state.skillCallCount += 1
    elif tool_name == TODO_TOOL:
        raw_todos = payload.get("todos")
        if isinstance(raw_todos, list):
            state.todos = _parse_todos(raw_todos)
    else:
        state.tools[tool_id] = ToolEntry(
            name=tool_name,
            target=extract_target(tool_name, payload),
            status="running",
            startTime=timestamp,
        )
        state.toolCallCount += 1


def _apply_tool_result(block: dict[str, Any], state: SessionState, timestamp: datetime) -> None:
    tool_use_id = block.get("tool_use_id")
    if not tool_use_id or not isinstance(tool_use_id, str):
        return

    # Ids are normally unique across both maps; a collision updates both.
    tool = state.tools.get(tool_use_id)
    if tool is not None:
        tool.status = "error" if block.get("is_error") else "completed"
        tool.endTime = timestamp

    agent = state.agents.get(tool_use_id)
    if agent is not None:
        agent.status = "completed"
        agent.endTime = timestamp


def apply_entry(entry: Any, state: SessionState, now: datetime | None = None) -> None:
    """Apply one decoded transcript record to `state` in place."""
    if not isinstance(entry, dict):
        return

    entry_ts = parse_timestamp(entry.get("timestamp"))
    timestamp = entry_ts or now or utc_now()
    if state.sessionStart is None and entry_ts is not None:
        state.sessionStart = entry_ts

    message = entry.get("message")
    if not isinstance(message, dict):
        return
    content = message.get("content")
    if not isinstance(content, list):
        return

    for block in content:
        if not isinstance(block, dict):
            continue
        block_type = block.get("type")
        if block_type == "thinking":
            state.isThinking = True
        elif block_type == "text":
            state.isThinking = False
        elif block_type == "tool_use":
            _apply_tool_use(block, state, timestamp)
        elif block_type == "tool_result":
            _apply_tool_result(block, state, timestamp)

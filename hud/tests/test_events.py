import unittest
from datetime import datetime, timezone

from hud.date_utils import parse_timestamp
from hud.models import AgentEntry, SessionState, ToolEntry
from hud.parsers.events import apply_entry, extract_target

T0 = "2026-02-16T10:00:00Z"
T1 = "2026-02-16T10:00:05Z"


def _entry(ts: str | None, *blocks: dict) -> dict:
    entry: dict = {"type": "assistant", "message": {"role": "assistant", "content": list(blocks)}}
    if ts is not None:
        entry["timestamp"] = ts
    return entry


def _todo_write(tool_id: str, todos: list[dict]) -> dict:
    return {"type": "tool_use", "id": tool_id, "name": "TodoWrite", "input": {"todos": todos}}


class ApplyEntryTests(unittest.TestCase):
    def test_session_start_is_first_timestamp(self) -> None:
        state = SessionState()
        apply_entry({"type": "summary"}, state)
        apply_entry(_entry(T0), state)
        apply_entry(_entry(T1), state)

        self.assertEqual(state.sessionStart, datetime(2026, 2, 16, 10, 0, 0, tzinfo=timezone.utc))

    def test_record_without_timestamp_uses_now(self) -> None:
        state = SessionState()
        now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        apply_entry(_entry(None, {"type": "tool_use", "id": "t1", "name": "Read", "input": {}}), state, now=now)

        self.assertIsNone(state.sessionStart)
        self.assertEqual(state.tools["t1"].startTime, now)

    def test_out_of_range_timestamp_is_treated_as_missing(self) -> None:
        state = SessionState()
        now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        apply_entry(
            _entry("9999-12-31T23:59:59-05:00", {"type": "tool_use", "id": "t1", "name": "Read", "input": {}}),
            state,
            now=now,
        )

        self.assertIsNone(state.sessionStart)
        self.assertEqual(state.tools["t1"].startTime, now)
        self.assertIsNone(parse_timestamp("0001-01-01T00:00:00+05:00"))

    def test_thinking_then_text_clears_flag(self) -> None:
        state = SessionState()
        apply_entry(_entry(T0, {"type": "thinking", "thinking": "..."}), state)
        self.assertTrue(state.isThinking)

        apply_entry(_entry(T1, {"type": "text", "text": "done"}), state)
        self.assertFalse(state.isThinking)

    def test_thinking_and_text_in_one_record_ends_false(self) -> None:
        state = SessionState()
        apply_entry(_entry(T0, {"type": "thinking"}, {"type": "text", "text": "hi"}), state)

        self.assertFalse(state.isThinking)

    def test_thinking_without_later_text_stays_true(self) -> None:
        state = SessionState()
        apply_entry(_entry(T0, {"type": "thinking"}), state)
        apply_entry(_entry(T1, {"type": "tool_use", "id": "t1", "name": "Read", "input": {"file_path": "/a"}}), state)

        self.assertTrue(state.isThinking)

    def test_todo_write_replaces_previous_list(self) -> None:
        state = SessionState()
        apply_entry(_entry(T0, _todo_write("w1", [{"id": "1", "content": "first", "status": "pending"}])), state)
        apply_entry(_entry(T1, _todo_write("w2", [{"id": "2", "content": "second", "status": "in_progress"}])), state)

        self.assertEqual([(t.id, t.content, t.status) for t in state.todos], [("2", "second", "in_progress")])
        self.assertEqual(state.tools, {})
        self.assertEqual(state.toolCallCount, 0)

    def test_todo_write_without_list_keeps_todos(self) -> None:
        state = SessionState()
        apply_entry(_entry(T0, _todo_write("w1", [{"id": "1", "content": "first", "status": "pending"}])), state)
        apply_entry(_entry(T1, {"type": "tool_use", "id": "w2", "name": "TodoWrite", "input": {}}), state)

        self.assertEqual([t.id for t in state.todos], ["1"])

    def test_todo_items_tolerate_host_fields(self) -> None:
        state = SessionState()
        apply_entry(
            _entry(T0, _todo_write("w1", [{"content": "ship", "status": "completed", "activeForm": "Shipping"}, "junk", {"id": 3}])),
            state,
        )

        self.assertEqual([(t.id, t.content) for t in state.todos], [("", "ship"), ("3", "")])

    def test_unknown_todo_status_falls_back_to_pending(self) -> None:
        state = SessionState()
        apply_entry(
            _entry(T0, _todo_write("w1", [{"id": "1", "status": "blocked"}, {"id": "2"}, {"id": "3", "status": "completed"}])),
            state,
        )

        self.assertEqual([t.status for t in state.todos], ["pending", "pending", "completed"])

    def test_skill_updates_last_skill_and_is_not_a_tool(self) -> None:
        state = SessionState()
        apply_entry(_entry(T0, {"type": "tool_use", "id": "s1", "name": "Skill", "input": {"skill": "pdf"}}), state)
        apply_entry(_entry(T1, {"type": "tool_use", "id": "s2", "name": "Skill", "input": {"skill": "xlsx"}}), state)

        self.assertEqual(state.lastSkill.name, "xlsx")
        self.assertEqual(state.skillCallCount, 2)
        self.assertEqual(state.tools, {})

    def test_task_creates_agent_with_optional_fields(self) -> None:
        state = SessionState()
        apply_entry(
            _entry(
                T0,
                {
                    "type": "tool_use",
                    "id": "ag",
                    "name": "Task",
                    "input": {"subagent_type": "explorer", "model": "haiku", "description": "Find callers"},
                },
                {"type": "tool_use", "id": "ag2", "name": "Task", "input": {}},
            ),
            state,
        )

        agent = state.agents["ag"]
        self.assertEqual((agent.type, agent.model, agent.description, agent.status), ("explorer", "haiku", "Find callers", "running"))
        self.assertEqual(state.agents["ag2"].type, "unknown")
        self.assertEqual(state.agentCallCount, 2)
        self.assertEqual(state.tools, {})

    def test_tool_result_marks_error(self) -> None:
        state = SessionState()
        apply_entry(_entry(T0, {"type": "tool_use", "id": "t1", "name": "Bash", "input": {"command": "false"}}), state)
        apply_entry(_entry(T1, {"type": "tool_result", "tool_use_id": "t1", "is_error": True}), state)

        self.assertEqual(state.tools["t1"].status, "error")
        self.assertEqual(state.tools["t1"].endTime, datetime(2026, 2, 16, 10, 0, 5, tzinfo=timezone.utc))

    def test_tool_result_for_unknown_id_changes_nothing(self) -> None:
        state = SessionState()
        apply_entry(_entry(T0, {"type": "tool_use", "id": "t1", "name": "Read", "input": {"file_path": "/a"}}), state)
        before = state.model_copy(deep=True)

        apply_entry(_entry(T1, {"type": "tool_result", "tool_use_id": "missing"}), state)

        self.assertEqual(state, before)

    def test_tool_result_updates_both_maps_on_id_collision(self) -> None:
        start = datetime(2026, 2, 16, 9, 0, tzinfo=timezone.utc)
        state = SessionState(
            tools={"dup": ToolEntry(name="Read", startTime=start)},
            agents={"dup": AgentEntry(type="explorer", startTime=start)},
        )

        apply_entry(_entry(T1, {"type": "tool_result", "tool_use_id": "dup"}), state)

        self.assertEqual(state.tools["dup"].status, "completed")
        self.assertEqual(state.agents["dup"].status, "completed")

    def test_malformed_records_are_ignored(self) -> None:
        state = SessionState()
        for entry in (None, [], "text", {"message": "str"}, {"message": {"content": "plain"}}):
            apply_entry(entry, state)
        apply_entry(
            _entry(
                T0,
                "not-a-block",
                {"type": "image"},
                {"type": "tool_use", "name": "Read"},
                {"type": "tool_use", "id": "x"},
                {"type": "tool_result"},
            ),
            state,
        )

        self.assertEqual(state.tools, {})
        self.assertEqual(state.toolCallCount, 0)


class ExtractTargetTests(unittest.TestCase):
    def test_file_tools_use_file_path_then_path(self) -> None:
        self.assertEqual(extract_target("Read", {"file_path": "/x.py"}), "/x.py")
        self.assertEqual(extract_target("Edit", {"path": "/y.py"}), "/y.py")

    def test_search_tools_use_pattern(self) -> None:
        self.assertEqual(extract_target("Grep", {"pattern": "def main"}), "def main")
        self.assertEqual(extract_target("Glob", {"pattern": "**/*.py"}), "**/*.py")

    def test_bash_command_is_truncated(self) -> None:
        self.assertEqual(extract_target("Bash", {"command": "ls -la"}), "ls -la")
        long_command = "pytest tests/test_transcript_parser.py -k resume"
        self.assertEqual(extract_target("Bash", {"command": long_command}), long_command[:30] + "...")

    def test_other_tools_have_no_target(self) -> None:
        self.assertIsNone(extract_target("WebFetch", {"url": "https://example.com"}))
        self.assertIsNone(extract_target("Read", None))
        self.assertIsNone(extract_target("Read", {}))


if __name__ == "__main__":
    unittest.main()

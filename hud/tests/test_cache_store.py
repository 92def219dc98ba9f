import json
import os
import stat
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from hud.cache_store import MemoryCacheStore, TranscriptCacheStore
from hud.models import AgentEntry, SessionState, SkillRecord, TodoEntry, ToolEntry

START = datetime(2026, 2, 16, 10, 0, tzinfo=timezone.utc)


def _state(tool_count: int = 1, agent_count: int = 1) -> SessionState:
    return SessionState(
        tools={f"t{i}": ToolEntry(name="Read", target=f"/f{i}.py", startTime=START) for i in range(tool_count)},
        agents={f"a{i}": AgentEntry(type="explorer", startTime=START) for i in range(agent_count)},
        todos=[TodoEntry(id="1", content="write tests", status="in_progress")],
        sessionStart=START,
        toolCallCount=tool_count,
        agentCallCount=agent_count,
        skillCallCount=1,
        isThinking=True,
        lastSkill=SkillRecord(name="pdf", timestamp=START),
    )


class TranscriptCacheStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.tmp = Path(tmpdir.name)
        self.store = TranscriptCacheStore(self.tmp / "cache" / "transcript.json")

    def test_load_without_file_is_miss(self) -> None:
        self.assertIsNone(self.store.load("/t.jsonl", 100))

    def test_save_then_load_restores_state(self) -> None:
        state = _state()
        self.store.save("/t.jsonl", 500, state)

        entry = self.store.load("/t.jsonl", 500)

        self.assertIsNotNone(entry)
        assert entry is not None
        self.assertEqual(entry.fileSize, 500)
        self.assertEqual(entry.data.to_state(), state)

    def test_cache_file_shape(self) -> None:
        self.store.save("/t.jsonl", 500, _state())

        raw = json.loads(self.store.storage_path.read_text(encoding="utf-8"))

        self.assertEqual(raw["filePath"], "/t.jsonl")
        self.assertEqual(raw["fileSize"], 500)
        self.assertEqual(raw["data"]["tools"][0][0], "t0")
        self.assertEqual(raw["data"]["tools"][0][1]["name"], "Read")
        self.assertEqual(raw["data"]["lastSkill"]["name"], "pdf")

    def test_load_accepts_grown_file(self) -> None:
        self.store.save("/t.jsonl", 500, _state())

        self.assertIsNotNone(self.store.load("/t.jsonl", 900))

    def test_load_rejects_shrunk_file(self) -> None:
        self.store.save("/t.jsonl", 500, _state())

        self.assertIsNone(self.store.load("/t.jsonl", 450))

    def test_load_rejects_other_path(self) -> None:
        self.store.save("/t.jsonl", 500, _state())

        self.assertIsNone(self.store.load("/other.jsonl", 500))

    def test_saving_new_path_overwrites_slot(self) -> None:
        self.store.save("/first.jsonl", 10, _state())
        self.store.save("/second.jsonl", 20, _state())

        self.assertIsNone(self.store.load("/first.jsonl", 10))
        self.assertIsNotNone(self.store.load("/second.jsonl", 20))

    def test_corrupt_or_misshapen_cache_is_miss(self) -> None:
        self.store.storage_path.parent.mkdir(parents=True)
        for payload in ("{not json", "[]", json.dumps({"filePath": "/t.jsonl", "fileSize": "big"})):
            self.store.storage_path.write_text(payload, encoding="utf-8")
            self.assertIsNone(self.store.load("/t.jsonl", 500))

    def test_saved_collections_are_bounded(self) -> None:
        self.store.save("/t.jsonl", 500, _state(tool_count=55, agent_count=25))

        entry = self.store.load("/t.jsonl", 500)

        assert entry is not None
        self.assertEqual(len(entry.data.tools), 40)
        self.assertEqual(entry.data.tools[0][0], "t15")
        self.assertEqual(len(entry.data.agents), 20)
        self.assertEqual(entry.data.toolCallCount, 55)

    @unittest.skipIf(os.name == "nt", "POSIX permissions only")
    def test_cache_file_is_owner_only(self) -> None:
        self.store.save("/t.jsonl", 500, _state())

        mode = stat.S_IMODE(self.store.storage_path.stat().st_mode)
        self.assertEqual(mode, 0o600)

    def test_write_failure_is_logged_not_raised(self) -> None:
        blocker = self.tmp / "blocker"
        blocker.write_text("", encoding="utf-8")
        store = TranscriptCacheStore(blocker / "transcript.json")

        with self.assertLogs("hud.cache", level="DEBUG") as logs:
            store.save("/t.jsonl", 500, _state())

        self.assertIn("write failed", logs.output[0])
        self.assertIsNone(store.load("/t.jsonl", 500))


class MemoryCacheStoreTests(unittest.TestCase):
    def test_load_returns_copy(self) -> None:
        store = MemoryCacheStore()
        store.save("/t.jsonl", 10, _state())

        entry = store.load("/t.jsonl", 10)
        assert entry is not None
        entry.data.toolCallCount = 99

        self.assertEqual(store.load("/t.jsonl", 10).data.toolCallCount, 1)
        self.assertEqual(store.saves, 1)


if __name__ == "__main__":
    unittest.main()

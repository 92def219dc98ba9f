"""Incremental parsing of Claude Code JSONL transcripts.

The host re-runs the status line on every UI tick, so each run resumes from
the byte offset recorded by the previous one instead of rescanning the log.
"""
from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Callable

from hud import config
from hud.cache_store import CacheStore, TranscriptCacheStore
from hud.models import SessionSnapshot, SessionState
from hud.parsers.events import apply_entry

logger = logging.getLogger("hud.transcript")

LineReader = Callable[[Path, int, int], AsyncIterator[tuple[bytes, int, bool]]]


@dataclass
class ReadStats:
    offset: int
    lines: int = 0
    failures: int = 0


async def iter_transcript_lines(path: Path, start: int, end: int) -> AsyncIterator[tuple[bytes, int, bool]]:
    """Yield `(line, end_offset, terminated)` for each record in `[start, end)`.

    Reading stops at `end` so bytes appended mid-read are left for the next
    run. Control returns to the event loop after every line.
    """
    with path.open("rb") as handle:
        handle.seek(start)
        position = start
        while position < end:
            line = handle.readline(end - position)
            if not line:
                break
            position += len(line)
            yield line, position, line.endswith(b"\n")
            await asyncio.sleep(0)


async def read_transcript(
    path: Path,
    start: int,
    end: int,
    state: SessionState,
    reader: LineReader = iter_transcript_lines,
) -> ReadStats:
    """Apply every decodable record between `start` and `end` to `state`.

    Undecodable lines are skipped. An undecodable final line without a
    newline is treated as a write still in progress: it is not consumed,
    so `ReadStats.offset` stops before it and the next run retries it.
    """
    stats = ReadStats(offset=start)
    async for raw_line, line_end, terminated in reader(path, start, end):
        text = raw_line.decode("utf-8", errors="replace").strip()
        if not text:
            stats.offset = line_end
            continue

        stats.lines += 1
        try:
            entry = json.loads(text)
        except (ValueError, RecursionError):
            # Deeply nested arrays exhaust the decoder stack; count them as bad lines.
            stats.failures += 1
            if terminated:
                stats.offset = line_end
            continue

        apply_entry(entry, state)
        stats.offset = line_end

    return stats


class TranscriptParser:
    """Resumable transcript parser backed by a single-slot cache."""

    def __init__(
        self,
        cache_store: CacheStore | None = None,
        reader: LineReader = iter_transcript_lines,
        max_tools: int = config.MAX_TRANSCRIPT_TOOLS,
        max_agents: int = config.MAX_TRANSCRIPT_AGENTS,
    ):
        self.cache_store = cache_store if cache_store is not None else TranscriptCacheStore()
        self.reader = reader
        self.max_tools = max_tools
        self.max_agents = max_agents

    def _snapshot(self, state: SessionState) -> SessionSnapshot:
        return state.snapshot(self.max_tools, self.max_agents)

    async def parse(self, transcript_path: str) -> SessionSnapshot:
        if not transcript_path:
            return SessionSnapshot.empty()
        path = Path(transcript_path)

        try:
            if not path.is_file():
                return SessionSnapshot.empty()
            file_size = path.stat().st_size
        except OSError as e:
            logger.debug("Cannot stat transcript %s: %s", transcript_path, e)
            return SessionSnapshot.empty()

        try:
            cached = self.cache_store.load(transcript_path, file_size)
        except Exception as e:
            logger.debug("Transcript cache load failed for %s: %s", transcript_path, e)
            cached = None

        if cached is not None:
            state = cached.data.to_state()
            start = cached.fileSize
            if start == file_size:
                return self._snapshot(state)
        else:
            state = SessionState()
            start = 0

        try:
            stats = await read_transcript(path, start, file_size, state, self.reader)
        except Exception as e:
            # Records applied before the failure stay in the snapshot.
            logger.debug("Transcript read failed for %s: %s", transcript_path, e, exc_info=True)
            return self._snapshot(state)

        if start == 0 and stats.lines and stats.failures * 2 > stats.lines:
            logger.warning(
                "Transcript %s: %d of %d lines could not be decoded",
                transcript_path,
                stats.failures,
                stats.lines,
            )

        try:
            self.cache_store.save(transcript_path, stats.offset, state)
        except Exception as e:
            logger.debug("Transcript cache save failed for %s: %s", transcript_path, e)
        return self._snapshot(state)

"""Single-slot persistence for the incremental transcript parse cursor."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError

from hud import config
from hud.models import CachedTranscriptState, SessionState, TranscriptCache

logger = logging.getLogger("hud.cache")


class CacheStore(Protocol):
    def load(self, file_path: str, current_size: int) -> Optional[TranscriptCache]: ...

    def save(self, file_path: str, file_size: int, state: SessionState) -> None: ...


def build_cache_entry(file_path: str, file_size: int, state: SessionState) -> TranscriptCache:
    """Serialize `state`, keeping twice the display limits of tools and agents."""
    return TranscriptCache(
        filePath=file_path,
        fileSize=file_size,
        data=CachedTranscriptState.from_state(
            state,
            max_tools=config.MAX_TRANSCRIPT_TOOLS * 2,
            max_agents=config.MAX_TRANSCRIPT_AGENTS * 2,
        ),
    )


def is_usable(entry: TranscriptCache, file_path: str, current_size: int) -> bool:
    # A transcript smaller than the cursor was truncated or replaced.
    return entry.filePath == file_path and entry.fileSize <= current_size


class TranscriptCacheStore:
    """JSON file holding the last parse result for one transcript.

    Only the most recent transcript is remembered; saving a different path
    overwrites the slot.
    """

    def __init__(self, storage_path: Path | None = None):
        self.storage_path = storage_path or config.TRANSCRIPT_CACHE_PATH

    def load(self, file_path: str, current_size: int) -> Optional[TranscriptCache]:
        try:
            entry = TranscriptCache.model_validate_json(self.storage_path.read_bytes())
        except FileNotFoundError:
            return None
        except (OSError, ValidationError) as e:
            logger.debug("Discarding transcript cache %s: %s", self.storage_path, e)
            return None

        if not is_usable(entry, file_path, current_size):
            return None
        return entry

    def save(self, file_path: str, file_size: int, state: SessionState) -> None:
        entry = build_cache_entry(file_path, file_size, state)
        tmp_path = self.storage_path.with_name(f"{self.storage_path.name}.{os.getpid()}.tmp")
        try:
            self.storage_path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(entry.model_dump_json())
            os.replace(tmp_path, self.storage_path)
        except OSError as e:
            logger.debug("Transcript cache write failed for %s: %s", self.storage_path, e)
            try:
                tmp_path.unlink()
            except OSError:
                pass


class MemoryCacheStore:
    """In-process store with the same contract, used by tests and embedders."""

    def __init__(self, entry: TranscriptCache | None = None):
        self.entry = entry
        self.saves = 0

    def load(self, file_path: str, current_size: int) -> Optional[TranscriptCache]:
        if self.entry is None or not is_usable(self.entry, file_path, current_size):
            return None
        # Round-trip so callers never mutate the stored entry.
        return TranscriptCache.model_validate_json(self.entry.model_dump_json())

    def save(self, file_path: str, file_size: int, state: SessionState) -> None:
        self.entry = build_cache_entry(file_path, file_size, state)
        self.saves += 1

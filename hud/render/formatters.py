"""Number, duration and text formatting for status lines."""
from __future__ import annotations

import math
import os
import re
from datetime import datetime
from typing import Optional

from hud.date_utils import parse_timestamp, utc_now
from hud.i18n import Translations

_CLAUDE_PREFIX = re.compile(r"^Claude\s*", re.IGNORECASE)


def format_tokens(n: int) -> str:
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{round(n / 1_000)}K"
    return str(n)


def format_cost(usd: float) -> str:
    return f"${usd:.2f}"


def format_time_remaining(resets_at: str, t: Translations, now: Optional[datetime] = None) -> str:
    reset_time = parse_timestamp(resets_at)
    if reset_time is None:
        return f"0{t.time.shortMinutes}"
    seconds = (reset_time - (now or utc_now())).total_seconds()
    if seconds <= 0:
        return f"0{t.time.shortMinutes}"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    if hours > 0:
        return f"{hours}{t.time.shortHours}{minutes}{t.time.shortMinutes}"
    return f"{minutes}{t.time.shortMinutes}"


def format_session_duration(session_start: Optional[datetime], now: Optional[datetime] = None) -> str:
    if session_start is None:
        return ""
    minutes = math.floor(((now or utc_now()) - session_start).total_seconds() / 60)
    if minutes < 1:
        return "<1m"
    if minutes < 60:
        return f"{minutes}m"
    return f"{minutes // 60}h{minutes % 60}m"


def format_elapsed(start: datetime, end: Optional[datetime] = None, now: Optional[datetime] = None) -> str:
    ms = ((end or now or utc_now()) - start).total_seconds() * 1000
    if ms < 1000:
        return "<1s"
    if ms < 60_000:
        return f"{round(ms / 1000)}s"
    mins = int(ms // 60_000)
    secs = round((ms % 60_000) / 1000)
    return f"{mins}m{secs}s"


def shorten_model_name(name: str) -> str:
    return _CLAUDE_PREFIX.sub("", name).strip()


def truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def truncate_path(file_path: str, max_len: int = 20) -> str:
    if len(file_path) <= max_len:
        return file_path
    filename = re.split(r"[/\\]", file_path)[-1] or file_path
    if len(filename) >= max_len:
        return filename[: max_len - 3] + "..."
    return "..." + os.sep + filename

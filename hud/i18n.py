"""Label sets for the status line."""
from __future__ import annotations

import os

from pydantic import BaseModel

from hud.config import HudConfig


class Labels(BaseModel):
    five_hour: str
    seven_day_all: str
    seven_day_sonnet: str


class TimeUnits(BaseModel):
    hours: str
    minutes: str
    shortHours: str
    shortMinutes: str


class Messages(BaseModel):
    no_context: str
    context_warning: str = "Context {pct}% - consider /compact"
    context_critical: str = "Context {pct}% - /compact recommended!"
    all_todos_complete: str = "All todos complete"


class Translations(BaseModel):
    labels: Labels
    time: TimeUnits
    messages: Messages


EN = Translations(
    labels=Labels(five_hour="5h", seven_day_all="7d", seven_day_sonnet="7d(Sonnet)"),
    time=TimeUnits(hours=" hours", minutes=" minutes", shortHours="h", shortMinutes="m"),
    messages=Messages(no_context="No context data"),
)

KO = Translations(
    labels=Labels(five_hour="5시간", seven_day_all="7일", seven_day_sonnet="7일(소넷만)"),
    time=TimeUnits(hours="시간", minutes="분", shortHours="시간", shortMinutes="분"),
    messages=Messages(
        no_context="컨텍스트 데이터 없음",
        context_warning="컨텍스트 {pct}% - /compact 고려",
        context_critical="컨텍스트 {pct}% - /compact 권장!",
        all_todos_complete="모든 할 일 완료",
    ),
)


def detect_language() -> str:
    lang = os.getenv("LANG") or os.getenv("LANGUAGE") or os.getenv("LC_ALL") or ""
    return "ko" if lang.lower().startswith("ko") else "en"


def get_translations(hud_config: HudConfig) -> Translations:
    language = detect_language() if hud_config.language == "auto" else hud_config.language
    return KO if language == "ko" else EN

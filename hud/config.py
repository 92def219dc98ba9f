"""claude-hud configuration."""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger("hud.config")


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    if not value or not value.strip():
        return default
    return Path(value.strip()).expanduser()


DEBUG = _env_bool("CLAUDE_HUD_DEBUG", False)

# Host data locations
CLAUDE_DIR = _env_path("CLAUDE_HUD_CLAUDE_DIR", Path.home() / ".claude")
TRANSCRIPT_CACHE_PATH = _env_path(
    "CLAUDE_HUD_TRANSCRIPT_CACHE_PATH",
    CLAUDE_DIR / "claude-ultimate-hud-transcript-cache.json",
)
USAGE_CACHE_PATH = _env_path(
    "CLAUDE_HUD_USAGE_CACHE_PATH",
    Path(tempfile.gettempdir()) / "claude-ultimate-hud-cache.json",
)
GIT_CACHE_PATH = _env_path("CLAUDE_HUD_GIT_CACHE_PATH", CLAUDE_DIR / "claude-ultimate-hud-git-cache.json")
CONFIG_PATH = _env_path("CLAUDE_HUD_CONFIG_PATH", CLAUDE_DIR / "claude-ultimate-hud.local.json")
USAGE_URL = os.getenv("CLAUDE_HUD_USAGE_URL", "https://api.anthropic.com/api/oauth/usage")

# Transcript retention (cache keeps twice as many)
MAX_TRANSCRIPT_TOOLS = 20
MAX_TRANSCRIPT_AGENTS = 10

# Display limits
MAX_RUNNING_TOOLS = 2
MAX_COMPLETED_TOOL_TYPES = 4
MAX_AGENTS_DISPLAY = 3
MAX_COMPLETED_AGENTS = 2
MAX_AGENT_DESC_LENGTH = 40
MAX_TODO_CONTENT_LENGTH = 50
BASH_TARGET_LENGTH = 30

# Token buffer added to current usage to account for autocompact overhead
AUTOCOMPACT_BUFFER = 45000
PROGRESS_BAR_WIDTH = 10

# Timeouts
EXEC_TIMEOUT_SECONDS = _env_int("CLAUDE_HUD_EXEC_TIMEOUT_SECONDS", 3)
API_TIMEOUT_SECONDS = _env_int("CLAUDE_HUD_API_TIMEOUT_SECONDS", 5)
GIT_CACHE_TTL_SECONDS = 30


class CacheSettings(BaseModel):
    ttlSeconds: int = 60


class HudConfig(BaseModel):
    """User settings from the optional local JSON config file."""

    language: Literal["en", "ko", "auto"] = "auto"
    plan: Literal["pro", "max", "max10", "max20"] = "max"
    cache: CacheSettings = Field(default_factory=CacheSettings)


def load_config(path: Path | None = None) -> HudConfig:
    """Load the user config, falling back to defaults on any problem."""
    config_path = path or CONFIG_PATH
    if not config_path.exists():
        return HudConfig()

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
        return HudConfig.model_validate(raw)
    except (OSError, ValueError, ValidationError) as e:
        logger.debug("Ignoring config file %s: %s", config_path, e)
        return HudConfig()

"""Rate-limit utilization from the Anthropic OAuth usage endpoint."""
from __future__ import annotations

import json
import logging
import subprocess
import sys
import time
from pathlib import Path
from typing import Any, Optional

import requests
from pydantic import ValidationError

from hud import config
from hud.models import UsageLimits

logger = logging.getLogger("hud.usage")

KEYCHAIN_SERVICE = "Claude Code-credentials"
USER_AGENT = "claude-hud/1.0.0"

_memory_cache: Optional[tuple[UsageLimits, float]] = None


def _token_from_payload(raw: str) -> Optional[str]:
    try:
        creds = json.loads(raw)
    except ValueError:
        return None
    oauth = creds.get("claudeAiOauth") if isinstance(creds, dict) else None
    token = oauth.get("accessToken") if isinstance(oauth, dict) else None
    return token if isinstance(token, str) and token else None


def _credentials_from_file(claude_dir: Path | None = None) -> Optional[str]:
    cred_path = (claude_dir or config.CLAUDE_DIR) / ".credentials.json"
    try:
        return _token_from_payload(cred_path.read_text(encoding="utf-8"))
    except OSError:
        return None


def _credentials_from_keychain() -> Optional[str]:
    try:
        result = subprocess.run(
            ["security", "find-generic-password", "-s", KEYCHAIN_SERVICE, "-w"],
            capture_output=True,
            text=True,
            check=True,
            timeout=config.EXEC_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Keychain lookup failed: %s", e)
        return None
    return _token_from_payload(result.stdout.strip())


def get_access_token() -> Optional[str]:
    """OAuth access token of the logged-in Claude Code user, if any."""
    if sys.platform == "darwin":
        token = _credentials_from_keychain()
        if token:
            return token
    return _credentials_from_file()


def _load_file_cache(ttl_seconds: int, cache_path: Path) -> Optional[UsageLimits]:
    if not cache_path.exists():
        return None
    try:
        content = json.loads(cache_path.read_text(encoding="utf-8"))
        age = time.time() - float(content["timestamp"])
        if age < ttl_seconds:
            return UsageLimits.model_validate(content["data"])
    except (OSError, ValueError, KeyError, TypeError, ValidationError) as e:
        logger.debug("Ignoring usage cache %s: %s", cache_path, e)
    return None


def _save_file_cache(limits: UsageLimits, cache_path: Path) -> None:
    payload = {"data": limits.model_dump(mode="json"), "timestamp": time.time()}
    try:
        cache_path.write_text(json.dumps(payload), encoding="utf-8")
    except OSError as e:
        logger.debug("Usage cache write failed: %s", e)


def _request_limits(token: str) -> Optional[UsageLimits]:
    response = requests.get(
        config.USAGE_URL,
        headers={
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
            "Authorization": f"Bearer {token}",
            "anthropic-beta": "oauth-2025-04-20",
        },
        timeout=config.API_TIMEOUT_SECONDS,
    )
    if not response.ok:
        logger.debug("Usage endpoint returned HTTP %s", response.status_code)
        return None
    data: Any = response.json()
    if not isinstance(data, dict):
        return None
    return UsageLimits.model_validate(
        {key: data.get(key) for key in ("five_hour", "seven_day", "seven_day_sonnet")}
    )


def fetch_usage_limits(ttl_seconds: int = 60, cache_path: Path | None = None) -> Optional[UsageLimits]:
    """Current usage limits, served from cache when younger than `ttl_seconds`."""
    global _memory_cache
    if _memory_cache is not None and time.time() - _memory_cache[1] < ttl_seconds:
        return _memory_cache[0]

    path = cache_path or config.USAGE_CACHE_PATH
    cached = _load_file_cache(ttl_seconds, path)
    if cached is not None:
        _memory_cache = (cached, time.time())
        return cached

    token = get_access_token()
    if not token:
        return None

    try:
        limits = _request_limits(token)
    except (requests.RequestException, ValueError, ValidationError) as e:
        logger.debug("Usage request failed: %s", e)
        return None
    if limits is None:
        return None

    _memory_cache = (limits, time.time())
    _save_file_cache(limits, path)
    return limits


def reset_memory_cache() -> None:
    global _memory_cache
    _memory_cache = None

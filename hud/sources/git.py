"""Current git branch of the session's working directory."""
from __future__ import annotations

import asyncio
import json
import logging
import os
import time
from pathlib import Path
from typing import Optional

from hud import config

logger = logging.getLogger("hud.git")


def _load_cached_branch(cwd: str, cache_path: Path) -> Optional[str]:
    if not cache_path.exists():
        return None
    try:
        content = json.loads(cache_path.read_text(encoding="utf-8"))
        if content.get("cwd") != cwd:
            return None
        if time.time() - float(content.get("timestamp", 0)) > config.GIT_CACHE_TTL_SECONDS:
            return None
        branch = content.get("branch")
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.debug("Ignoring git cache %s: %s", cache_path, e)
        return None
    return branch if isinstance(branch, str) and branch else None


def _save_cached_branch(cwd: str, branch: str, cache_path: Path) -> None:
    payload = json.dumps({"cwd": cwd, "timestamp": time.time(), "branch": branch})
    try:
        fd = os.open(cache_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(payload)
    except OSError as e:
        logger.debug("Git cache write failed: %s", e)


async def get_git_branch(cwd: str | None, cache_path: Path | None = None) -> Optional[str]:
    if not cwd:
        return None
    path = cache_path or config.GIT_CACHE_PATH

    cached = _load_cached_branch(cwd, path)
    if cached:
        return cached

    if not Path(cwd).is_dir():
        return None

    try:
        proc = await asyncio.create_subprocess_exec(
            "git",
            "rev-parse",
            "--abbrev-ref",
            "HEAD",
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except OSError as e:
        logger.debug("git unavailable: %s", e)
        return None

    try:
        stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=config.EXEC_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        logger.debug("git branch lookup timed out in %s", cwd)
        return None

    if proc.returncode != 0:
        return None
    branch = stdout.decode("utf-8", errors="replace").strip()
    if not branch:
        return None
    _save_cached_branch(cwd, branch, path)
    return branch

"""Count CLAUDE.md files, rules, MCP servers and hooks visible to a session."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from hud import config
from hud.models import ConfigCounts

logger = logging.getLogger("hud.config_counter")


def _load_json_dict(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.debug("Skipping unreadable settings file %s: %s", path, e)
        return {}
    return raw if isinstance(raw, dict) else {}


def _mcp_server_names(path: Path) -> set[str]:
    servers = _load_json_dict(path).get("mcpServers")
    if isinstance(servers, dict):
        return set(servers.keys())
    return set()


def count_mcp_servers(path: Path, exclude_from: Path | None = None) -> int:
    servers = _mcp_server_names(path)
    if exclude_from is not None:
        servers -= _mcp_server_names(exclude_from)
    return len(servers)


def count_hooks(path: Path) -> int:
    hooks = _load_json_dict(path).get("hooks")
    if isinstance(hooks, dict):
        return len(hooks)
    return 0


def count_rules(rules_dir: Path) -> int:
    if not rules_dir.is_dir():
        return 0
    count = 0
    try:
        for entry in rules_dir.iterdir():
            if entry.is_dir():
                count += count_rules(entry)
            elif entry.is_file() and entry.name.endswith(".md"):
                count += 1
    except OSError as e:
        logger.debug("Cannot list rules in %s: %s", rules_dir, e)
    return count


def count_configs(cwd: str | None = None, claude_dir: Path | None = None, home_dir: Path | None = None) -> ConfigCounts:
    user_dir = claude_dir or config.CLAUDE_DIR
    home = home_dir or Path.home()
    counts = ConfigCounts()

    if (user_dir / "CLAUDE.md").exists():
        counts.claudeMdCount += 1
    counts.rulesCount += count_rules(user_dir / "rules")

    user_settings = user_dir / "settings.json"
    counts.mcpCount += count_mcp_servers(user_settings)
    counts.hooksCount += count_hooks(user_settings)
    counts.mcpCount += count_mcp_servers(home / ".claude.json", exclude_from=user_settings)

    if not cwd:
        return counts

    project = Path(cwd)
    for candidate in (
        project / "CLAUDE.md",
        project / "CLAUDE.local.md",
        project / ".claude" / "CLAUDE.md",
        project / ".claude" / "CLAUDE.local.md",
    ):
        if candidate.exists():
            counts.claudeMdCount += 1

    counts.rulesCount += count_rules(project / ".claude" / "rules")
    counts.mcpCount += count_mcp_servers(project / ".mcp.json")

    for settings in (project / ".claude" / "settings.json", project / ".claude" / "settings.local.json"):
        counts.mcpCount += count_mcp_servers(settings)
        counts.hooksCount += count_hooks(settings)

    return counts

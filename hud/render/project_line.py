"""Second line: project folder, git branch, config counts, session duration."""
from __future__ import annotations

from pathlib import PurePath

from hud.models import RenderContext
from hud.render.colors import SEP, cyan, dim, magenta, yellow


def render_project_line(ctx: RenderContext) -> str:
    parts: list[str] = []

    cwd = ctx.stdin.cwd
    if cwd:
        project_name = PurePath(cwd).name or cwd
        project_part = f"📁 {yellow(project_name)}"
        if ctx.gitBranch:
            project_part += f" {magenta('git:(')}{cyan(ctx.gitBranch)}{magenta(')')}"
        parts.append(project_part)

    counts = ctx.configCounts
    for count, label in (
        (counts.claudeMdCount, "CLAUDE.md"),
        (counts.rulesCount, "rules"),
        (counts.mcpCount, "MCPs"),
        (counts.hooksCount, "hooks"),
    ):
        if count > 0:
            parts.append(dim(f"{count} {label}"))

    if ctx.sessionDuration:
        parts.append(dim(f"⏱️ {ctx.sessionDuration}"))

    return SEP.join(parts)

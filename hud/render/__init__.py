"""Assemble the status lines for one render context."""
from __future__ import annotations

from hud.i18n import Translations
from hud.models import RenderContext
from hud.render.activity_lines import (
    render_activity_line,
    render_agents_line,
    render_context_warning,
    render_todos_line,
    render_tools_line,
)
from hud.render.colors import RESET
from hud.render.project_line import render_project_line
from hud.render.session_line import context_percent, render_session_line

NBSP = "\u00a0"


def render(ctx: RenderContext, t: Translations) -> list[str]:
    """Return the non-empty status lines in display order."""
    lines = [
        render_session_line(ctx, t),
        render_project_line(ctx),
        render_activity_line(ctx),
        render_tools_line(ctx),
        render_agents_line(ctx),
        render_todos_line(ctx, t),
        render_context_warning(context_percent(ctx), t),
    ]
    return [line for line in lines if line]


def format_for_terminal(line: str) -> str:
    # The host trims runs of regular spaces.
    return f"{RESET}{line.replace(' ', NBSP)}"


__all__ = ["format_for_terminal", "render"]

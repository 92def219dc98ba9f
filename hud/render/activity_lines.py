"""Tool, agent, todo and session-activity lines built from the transcript."""
from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Optional

from hud import config
from hud.i18n import Translations
from hud.models import AgentEntry, RenderContext
from hud.render.colors import CYAN, DIM, MAGENTA, RED, RESET, SEP, YELLOW, colorize, cyan, dim, green, magenta, yellow
from hud.render.formatters import format_elapsed, truncate, truncate_path


def render_tools_line(ctx: RenderContext) -> Optional[str]:
    tools = ctx.transcript.tools
    if not tools:
        return None

    parts: list[str] = []
    running = [tool for tool in tools if tool.status == "running"]
    for tool in running[-config.MAX_RUNNING_TOOLS:]:
        target = dim(f": {truncate_path(tool.target)}") if tool.target else ""
        parts.append(f"{yellow('◐')} {cyan(tool.name)}{target}")

    finished = Counter(tool.name for tool in tools if tool.status in ("completed", "error"))
    for name, count in finished.most_common(config.MAX_COMPLETED_TOOL_TYPES):
        parts.append(f"{green('✓')} {name} {dim(f'×{count}')}")

    return " | ".join(parts) if parts else None


def _format_agent(agent: AgentEntry, now: Optional[datetime] = None) -> str:
    icon = yellow("◐") if agent.status == "running" else green("✓")
    model = f" {dim(f'[{agent.model}]')}" if agent.model else ""
    desc = dim(f": {truncate(agent.description, config.MAX_AGENT_DESC_LENGTH)}") if agent.description else ""
    elapsed = format_elapsed(agent.startTime, agent.endTime, now=now)
    return f"{icon} {magenta(agent.type)}{model}{desc} {dim(f'({elapsed})')}"


def render_agents_line(ctx: RenderContext, now: Optional[datetime] = None) -> Optional[str]:
    agents = ctx.transcript.agents
    running = [agent for agent in agents if agent.status == "running"]
    completed = [agent for agent in agents if agent.status == "completed"][-config.MAX_COMPLETED_AGENTS:]

    to_show = (running + completed)[-config.MAX_AGENTS_DISPLAY:]
    if not to_show:
        return None
    return "\n".join(_format_agent(agent, now=now) for agent in to_show)


def render_todos_line(ctx: RenderContext, t: Translations) -> Optional[str]:
    todos = ctx.transcript.todos
    if not todos:
        return None

    in_progress = next((todo for todo in todos if todo.status == "in_progress"), None)
    completed = sum(1 for todo in todos if todo.status == "completed")
    total = len(todos)

    if in_progress is None:
        if completed == total:
            return f"{green('✓')} {t.messages.all_todos_complete} {dim(f'({completed}/{total})')}"
        return None

    content = truncate(in_progress.content, config.MAX_TODO_CONTENT_LENGTH)
    return f"{yellow('▸')} {content} {dim(f'({completed}/{total})')}"


def render_activity_line(ctx: RenderContext) -> Optional[str]:
    """Thinking flag, last skill and cumulative call counters."""
    transcript = ctx.transcript
    parts: list[str] = []

    if transcript.isThinking:
        parts.append(f"{MAGENTA}💭 thinking{RESET}")
    if transcript.lastSkill:
        parts.append(f"{CYAN}🎯 skill:{transcript.lastSkill.name}{RESET}")
    if transcript.toolCallCount or transcript.agentCallCount or transcript.skillCallCount:
        counts = f"T:{transcript.toolCallCount} A:{transcript.agentCallCount} S:{transcript.skillCallCount}"
        parts.append(colorize(counts, DIM))

    return SEP.join(parts) if parts else None


def render_context_warning(percent: Optional[int], t: Translations) -> Optional[str]:
    if percent is None:
        return None
    if percent >= 90:
        return f"{RED}🔴 {t.messages.context_critical.format(pct=percent)}{RESET}"
    if percent >= 80:
        return f"{YELLOW}⚠️ {t.messages.context_warning.format(pct=percent)}{RESET}"
    return None

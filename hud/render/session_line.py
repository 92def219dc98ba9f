"""First line: model, context usage, cost and rate limits."""
from __future__ import annotations

from typing import Optional

from hud import config
from hud.i18n import Translations
from hud.models import RateLimitInfo, RenderContext
from hud.render.colors import CYAN, RESET, SEP, YELLOW, color_for_percent, colorize, dim, progress_bar
from hud.render.formatters import format_cost, format_time_remaining, format_tokens, shorten_model_name

# Plans that include each weekly limit.
_SEVEN_DAY_PLANS = {"max", "max10", "max20"}
_SEVEN_DAY_SONNET_PLANS = {"max", "max20"}


def current_tokens(ctx: RenderContext) -> Optional[int]:
    usage = ctx.stdin.context_window.current_usage
    if usage is None:
        return None
    base = usage.input_tokens + usage.cache_creation_input_tokens + usage.cache_read_input_tokens
    return base + config.AUTOCOMPACT_BUFFER


def context_percent(ctx: RenderContext) -> Optional[int]:
    """Context window usage including the autocompact buffer, or None."""
    current = current_tokens(ctx)
    window_size = ctx.stdin.context_window.context_window_size
    if current is None or window_size <= 0:
        return None
    return min(100, round(current / window_size * 100))


def _limit_part(label: str, info: RateLimitInfo) -> str:
    pct = round(info.utilization)
    return f"{label}: {colorize(f'{pct}%', color_for_percent(pct))}"


def render_rate_limits(ctx: RenderContext, t: Translations) -> Optional[str]:
    limits = ctx.rateLimits
    if limits is None:
        return colorize("⚠️", YELLOW)

    parts: list[str] = []
    if limits.five_hour:
        text = _limit_part(t.labels.five_hour, limits.five_hour)
        if limits.five_hour.resets_at:
            text += f" ({format_time_remaining(limits.five_hour.resets_at, t)})"
        parts.append(text)

    plan = ctx.config.plan
    if plan in _SEVEN_DAY_PLANS and limits.seven_day:
        parts.append(_limit_part(t.labels.seven_day_all, limits.seven_day))
    if plan in _SEVEN_DAY_SONNET_PLANS and limits.seven_day_sonnet:
        parts.append(_limit_part(t.labels.seven_day_sonnet, limits.seven_day_sonnet))

    return SEP.join(parts) if parts else None


def render_session_line(ctx: RenderContext, t: Translations) -> str:
    parts = [f"{CYAN}🤖 {shorten_model_name(ctx.stdin.model.display_name)}{RESET}"]

    percent = context_percent(ctx)
    if percent is None:
        parts.append(dim(t.messages.no_context))
        return SEP.join(parts)

    current = current_tokens(ctx) or 0
    parts.append(progress_bar(percent))
    parts.append(colorize(f"{percent}%", color_for_percent(percent)))
    parts.append(f"{format_tokens(current)}/{format_tokens(ctx.stdin.context_window.context_window_size)}")
    parts.append(colorize(format_cost(ctx.stdin.cost.total_cost_usd), YELLOW))

    rate_limits = render_rate_limits(ctx, t)
    if rate_limits:
        parts.append(rate_limits)

    return SEP.join(parts)

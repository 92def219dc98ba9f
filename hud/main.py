"""claude-hud entry point: read the host snapshot, gather lookups, print lines."""
from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, Awaitable, Optional, TextIO, TypeVar

from pydantic import ValidationError

from hud import config
from hud.config import HudConfig, load_config
from hud.i18n import get_translations
from hud.models import ConfigCounts, RenderContext, SessionSnapshot, StdinInput
from hud.parsers.transcript import TranscriptParser
from hud.render import format_for_terminal, render
from hud.render.colors import YELLOW, colorize
from hud.render.formatters import format_session_duration
from hud.sources.config_counter import count_configs
from hud.sources.git import get_git_branch
from hud.sources.usage import fetch_usage_limits

logger = logging.getLogger("hud")

T = TypeVar("T")

WARNING_GLYPH = colorize("⚠️", YELLOW)


def configure_logging(debug: bool = config.DEBUG) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        stream=sys.stderr,
        format="[claude-hud] %(name)s: %(message)s",
    )


def read_stdin(stream: Optional[TextIO] = None) -> Optional[StdinInput]:
    source = stream or sys.stdin
    if source.isatty():
        return None
    try:
        raw = json.loads(source.read())
        return StdinInput.model_validate(raw)
    except (OSError, ValueError, ValidationError) as e:
        logger.debug("Invalid stdin payload: %s", e)
        return None


async def _guarded(label: str, awaitable: Awaitable[T], default: Any) -> Any:
    """Await a lookup; a failure only blanks out that part of the status."""
    try:
        return await awaitable
    except Exception as e:
        logger.debug("%s lookup failed: %s", label, e)
        return default


async def gather_context(
    stdin: StdinInput,
    hud_config: HudConfig,
    parser: Optional[TranscriptParser] = None,
) -> RenderContext:
    transcript_parser = parser or TranscriptParser()
    transcript, config_counts, git_branch, rate_limits = await asyncio.gather(
        _guarded("transcript", transcript_parser.parse(stdin.transcript_path or ""), SessionSnapshot.empty()),
        _guarded("config counts", asyncio.to_thread(count_configs, stdin.cwd), ConfigCounts()),
        _guarded("git branch", get_git_branch(stdin.cwd), None),
        _guarded("usage limits", asyncio.to_thread(fetch_usage_limits, hud_config.cache.ttlSeconds), None),
    )

    return RenderContext(
        stdin=stdin,
        config=hud_config,
        transcript=transcript,
        configCounts=config_counts,
        gitBranch=git_branch,
        sessionDuration=format_session_duration(transcript.sessionStart),
        rateLimits=rate_limits,
    )


async def main(stdin_stream: Optional[TextIO] = None, out: Optional[TextIO] = None) -> None:
    output = out or sys.stdout
    hud_config = load_config()
    translations = get_translations(hud_config)

    stdin = read_stdin(stdin_stream)
    if stdin is None:
        print(WARNING_GLYPH, file=output)
        return

    ctx = await gather_context(stdin, hud_config)
    for line in render(ctx, translations):
        print(format_for_terminal(line), file=output)


def run() -> None:
    configure_logging()
    try:
        asyncio.run(main())
    except Exception:
        logger.debug("Status line failed", exc_info=True)
        print(WARNING_GLYPH)


if __name__ == "__main__":
    run()

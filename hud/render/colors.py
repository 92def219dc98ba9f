"""ANSI color helpers."""
from __future__ import annotations

from hud import config

RESET = "\x1b[0m"
DIM = "\x1b[2m"
CYAN = "\x1b[36m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
RED = "\x1b[31m"
MAGENTA = "\x1b[35m"

SEP = f" {DIM}│{RESET} "


def colorize(text: str, color: str) -> str:
    return f"{color}{text}{RESET}"


def dim(text: str) -> str:
    return colorize(text, DIM)


def cyan(text: str) -> str:
    return colorize(text, CYAN)


def green(text: str) -> str:
    return colorize(text, GREEN)


def yellow(text: str) -> str:
    return colorize(text, YELLOW)


def red(text: str) -> str:
    return colorize(text, RED)


def magenta(text: str) -> str:
    return colorize(text, MAGENTA)


def color_for_percent(percent: float) -> str:
    if percent <= 50:
        return GREEN
    if percent <= 80:
        return YELLOW
    return RED


def progress_bar(percent: float, width: int = config.PROGRESS_BAR_WIDTH) -> str:
    filled = max(0, min(width, round(percent / 100 * width)))
    return f"{color_for_percent(percent)}{'█' * filled}{DIM}{'░' * (width - filled)}{RESET}"

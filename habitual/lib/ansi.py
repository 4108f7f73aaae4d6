import re
from collections.abc import Callable
from dataclasses import dataclass, fields, replace

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


@dataclass(frozen=True)
class Theme:
    red: str = "\033[38;5;203m"
    green: str = "\033[38;5;114m"
    gray: str = "\033[38;5;245m"
    white: str = "\033[38;5;252m"
    orange: str = "\033[38;5;208m"
    gold: str = "\033[38;5;220m"
    muted: str = "\033[90m"
    bold: str = "\033[1m"
    dim: str = "\033[2m"
    reset: str = "\033[0m"


DEFAULT = Theme()
# darker foregrounds for light terminal backgrounds
LIGHT = replace(
    DEFAULT,
    white="\033[38;5;236m",
    gray="\033[38;5;240m",
    gold="\033[38;5;130m",
    muted="\033[38;5;244m",
)
THEMES = {"dark": DEFAULT, "light": LIGHT}

_STYLES = {"bold", "dim", "reset"}
_COLORS = frozenset(f.name for f in fields(Theme)) - _STYLES

_active = DEFAULT


def use(theme: Theme) -> None:
    global _active
    _active = theme


def use_named(name: str) -> None:
    """Switch to a theme from THEMES; unknown names get the dark default."""
    use(THEMES.get(name, DEFAULT))


def _paint(code: str, text: str) -> str:
    return f"{code}{text}{_active.reset}"


def __getattr__(name: str) -> Callable[[str], str]:
    if name not in _COLORS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    def colour(text: str) -> str:
        return _paint(getattr(_active, name), text)

    colour.__name__ = name
    return colour


def bold(text: str) -> str:
    return _paint(_active.bold, text)


def dim(text: str) -> str:
    return _paint(_active.dim, text)


def strip(text: str) -> str:
    return _ANSI_RE.sub("", text)

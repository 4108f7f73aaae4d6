import pytest

from habitual.lib import ansi
from habitual.lib.ansi import DEFAULT, LIGHT, THEMES, Theme, bold, dim, strip


@pytest.fixture(autouse=True)
def _reset_theme():
    yield
    ansi.use(DEFAULT)


def test_theme_defaults():
    assert DEFAULT.bold == "\033[1m"
    assert DEFAULT.reset == "\033[0m"
    assert Theme().muted == "\033[90m"


def test_named_themes():
    assert set(THEMES) == {"dark", "light"}
    assert LIGHT.muted != DEFAULT.muted
    assert LIGHT.red == DEFAULT.red


def test_bold_and_dim():
    assert bold("hi") == "\033[1mhi\033[0m"
    assert dim("hi") == "\033[2mhi\033[0m"


def test_color_wrappers_follow_active_theme():
    assert ansi.green("ok") == f"{DEFAULT.green}ok{DEFAULT.reset}"
    ansi.use_named("light")
    assert ansi.muted("ok") == f"{LIGHT.muted}ok{LIGHT.reset}"


def test_unknown_theme_falls_back_to_default():
    ansi.use_named("solarized")
    assert ansi.gray("x") == f"{DEFAULT.gray}x{DEFAULT.reset}"


def test_unknown_color_raises():
    with pytest.raises(AttributeError):
        ansi.magenta("x")


def test_strip():
    assert strip(bold(ansi.red("alert"))) == "alert"
    assert strip("plain") == "plain"

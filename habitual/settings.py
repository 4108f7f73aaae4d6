from fncli import cli

from . import config
from .lib.errors import echo


def _show(value: object) -> str:
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


@cli("habitual", flags={"key": [], "value": []})
def settings(key: str | None = None, value: str | None = None) -> None:
    """Show or change settings"""
    if key is None:
        for name, current in config.get_settings().items():
            echo(f"{name:<14} {_show(current)}")
        return
    if value is None:
        echo(_show(config.get_setting(key)))
        return
    stored = config.set_setting(key, value)
    echo(f"{key} = {_show(stored)}")

import logging
import os
import sys
from pathlib import Path

import fncli

from . import config, db
from .core.errors import HabitError
from .lib import ansi

LOG_LEVEL_ENV = "HABITUAL_LOG_LEVEL"


def _configure_logging() -> None:
    override = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    level = override if override in config.LOG_LEVELS else config.get_log_level()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if override and override != level:
        logging.getLogger(__name__).warning(
            "ignoring %s=%s (expected one of: %s)", LOG_LEVEL_ENV, override, ", ".join(config.LOG_LEVELS)
        )


def main():
    _configure_logging()
    ansi.use_named(config.get_theme())
    try:
        db.init()
    except HabitError as e:
        sys.stderr.write(f"{e}\n")
        sys.exit(1)
    fncli.autodiscover(Path(__file__).parent, "habitual")

    user_args = sys.argv[1:]
    argv = ["habitual", *(user_args or ["today"])]
    try:
        code = fncli.dispatch(argv)
    except HabitError as e:
        sys.stderr.write(f"{e}\n")
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()

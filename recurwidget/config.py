"""Environment configuration for recurwidget.

Values come from the process environment, optionally seeded from a `.env`
file. They are read on each call so tests can monkeypatch the environment.
"""

import logging
import os
from typing import List

from dotenv import load_dotenv

from recurwidget.models.recurrence import Frequency
from recurwidget.models.widget import WidgetSettings

load_dotenv()

VERSION = "0.1.0"


def parse_repeat_types(raw: str) -> List[Frequency]:
    """Parse a comma-separated frequency list ("WEEKLY,MONTHLY").

    An empty value means every frequency is allowed.
    """
    names = [n.strip().upper() for n in (raw or "").split(",") if n.strip()]
    if not names:
        return list(Frequency)
    allowed: List[Frequency] = []
    for name in names:
        try:
            allowed.append(Frequency(name))
        except ValueError:
            raise ValueError(
                f"Unknown repeat type {name!r} in RECURWIDGET_ALLOWED_REPEAT_TYPES"
            ) from None
    return allowed


def get_widget_settings() -> WidgetSettings:
    return WidgetSettings(
        allowed_repeat_types=parse_repeat_types(os.getenv("RECURWIDGET_ALLOWED_REPEAT_TYPES", ""))
    )


def get_log_level() -> int:
    if os.getenv("DEBUG", "False").lower() == "true":
        return logging.DEBUG
    # getLevelName maps known names to ints and echoes unknown ones back as "Level X" strings.
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def get_server_options() -> dict:
    """Return uvicorn host/port options."""
    return {
        "host": os.getenv("HOST", "0.0.0.0"),
        "port": int(os.getenv("PORT", "8000")),
    }

"""
Runtime settings for dynview.

Values come from the process environment (a local ``.env`` file is loaded
first), prefixed with ``DYNVIEW_``:

    DYNVIEW_LOG_LEVEL=DEBUG
    DYNVIEW_ITEMS_KEY=Items
    DYNVIEW_KEEP_ARRAY_SCALARS=true
"""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

ENV_PREFIX = "DYNVIEW_"


class Settings(BaseModel):
    log_level: str = "WARNING"
    # key under which a top-level JSON array is stored
    items_key: str = "Items"
    # keep scalar elements of JSON arrays instead of dropping them
    keep_array_scalars: bool = True

    model_config = {"frozen": True}


_settings: Optional[Settings] = None


def load_settings() -> Settings:
    """Build a fresh Settings from ``.env`` + environment variables."""
    load_dotenv()
    data = {}
    for name in Settings.model_fields:
        raw = os.environ.get(ENV_PREFIX + name.upper())
        if raw is not None:
            data[name] = raw
    return Settings.model_validate(data)


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Forget cached settings; the next get_settings() reloads them."""
    global _settings
    _settings = None

"""
Public surface for dynview.
Importing this module does **not** configure logging; call
`dynview.setup_logging()` to see dynview's log records.
"""

from loguru import logger

from .config import Settings, get_settings
from .core.mirror import ModelViewModel
from .core.properties import MISSING, PropertyBag
from .core.record import DynamicViewModel
from .errors import (
    DynviewError,
    InvalidJsonError,
    MemberNotFoundError,
    PropertyConversionError,
)
from .events import ChangeNotifier, on
from .factory import create, create_from, create_from_json
from .json_import import parse, try_parse
from .logging import setup_logging

logger.disable("dynview")

__all__ = [
    "DynamicViewModel",
    "ModelViewModel",
    "PropertyBag",
    "ChangeNotifier",
    "MISSING",
    "on",
    "parse",
    "try_parse",
    "create",
    "create_from",
    "create_from_json",
    "Settings",
    "get_settings",
    "setup_logging",
    "DynviewError",
    "InvalidJsonError",
    "MemberNotFoundError",
    "PropertyConversionError",
]

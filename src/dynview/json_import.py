"""
Build DynamicViewModel trees from JSON text.

    vm = parse('{"name": "Ada", "address": {"city": "London"}}')
    vm.address.city            # "London"

    vm = parse('[{"x": 1}, {"x": 2}]')
    [i.x for i in vm.Items]    # [1, 2]

Parsing is delegated to ``pydantic_core.from_json``.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple, Type, TypeVar

from loguru import logger
from pydantic_core import from_json

from .config import Settings, get_settings
from .core.record import DynamicViewModel
from .errors import InvalidJsonError

T_ViewModel = TypeVar("T_ViewModel", bound=DynamicViewModel)


def parse(
    text: str | bytes,
    cls: Type[T_ViewModel] = DynamicViewModel,  # type: ignore[assignment]
    settings: Optional[Settings] = None,
) -> T_ViewModel:
    """
    Parse `text` into a new `cls` instance.

    A JSON object populates the instance member by member (through ``set``,
    so declared fields on `cls` are coerced). A JSON array is stored under
    ``settings.items_key``. Anything else raises InvalidJsonError; no
    partially built view model is ever returned.
    """
    settings = settings or get_settings()
    try:
        data = from_json(text)
    except ValueError as exc:
        logger.warning(f"Rejected JSON input: {exc}")
        raise InvalidJsonError(f"not valid JSON: {exc}") from exc

    if isinstance(data, dict):
        return to_dynamic(data, cls(), settings)
    if isinstance(data, list):
        logger.debug(f"JSON root is an array; storing under {settings.items_key!r}")
        result = cls()
        result.set(settings.items_key, to_dynamic_list(data, settings))
        return result

    logger.warning(f"Rejected JSON input: root is {type(data).__name__}")
    raise InvalidJsonError("not valid JSON: expected an object or an array")


def try_parse(
    text: str | bytes,
    cls: Type[T_ViewModel] = DynamicViewModel,  # type: ignore[assignment]
    settings: Optional[Settings] = None,
) -> Tuple[bool, Optional[T_ViewModel]]:
    """Like parse(), but returns ``(False, None)`` instead of raising."""
    try:
        return True, parse(text, cls, settings)
    except InvalidJsonError:
        return False, None


def to_dynamic(
    obj: dict, parent: T_ViewModel, settings: Optional[Settings] = None
) -> T_ViewModel:
    """Copy the members of a decoded JSON object onto `parent`."""
    settings = settings or get_settings()
    for key, value in obj.items():
        parent.set(key, _convert(value, settings))
    return parent


def to_dynamic_list(items: list, settings: Optional[Settings] = None) -> List[Any]:
    """
    Convert a decoded JSON array.

    Objects become view models and nested arrays become lists. Scalar
    elements are kept unless ``keep_array_scalars`` is off.
    """
    settings = settings or get_settings()
    result: List[Any] = []
    for item in items:
        if isinstance(item, (dict, list)):
            result.append(_convert(item, settings))
        elif settings.keep_array_scalars:
            result.append(item)
    return result


def _convert(value: Any, settings: Settings) -> Any:
    if isinstance(value, dict):
        return to_dynamic(value, DynamicViewModel(), settings)
    if isinstance(value, list):
        return to_dynamic_list(value, settings)
    return value

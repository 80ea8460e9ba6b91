"""
Convenience constructors for DynamicViewModel.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .core.mirror import ModelViewModel
from .core.record import DynamicViewModel
from .errors import InvalidJsonError
from .json_import import try_parse


def create() -> DynamicViewModel:
    return DynamicViewModel()


def create_from_json(text: str | bytes) -> DynamicViewModel:
    ok, result = try_parse(text)
    if not ok:
        raise InvalidJsonError("parameter was not a valid JSON string")
    return result  # type: ignore[return-value]


def create_from(source: Any) -> DynamicViewModel:
    """
    Copy every member of `source` into a new DynamicViewModel.

    `source` may be another DynamicViewModel, a ModelViewModel (its current
    snapshot is copied) or any mapping. Values are copied by reference.
    """
    if isinstance(source, (DynamicViewModel, ModelViewModel)):
        pairs = [(name, source.get(name)) for name in source.keys()]
    elif isinstance(source, Mapping):
        pairs = list(source.items())
    else:
        raise TypeError(f"cannot create a view model from {type(source).__name__}")

    result = DynamicViewModel()
    for name, value in pairs:
        result.set(name, value)
    return result

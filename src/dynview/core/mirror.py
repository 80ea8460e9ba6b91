"""
ModelViewModel – exposes a plain model object as a bindable view model.

Reads come from a snapshot of the model's public properties. Every write or
method call through the wrapper re-reads the whole snapshot and raises
``property_changed`` for each property whose value moved, so derived
properties (``full_name`` after ``first_name``) notify too.

The list of public properties / methods is computed once per model type and
shared by all wrappers of that type.
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
from typing import Any, Callable, Dict, Generic, Tuple, TypeVar

from loguru import logger
from pydantic import BaseModel

from ..errors import MemberNotFoundError
from ..events import ChangeNotifier, emit_change
from .properties import MISSING

TModel = TypeVar("TModel")

# members every class (or every pydantic model) has; never mirrored
_SKIP_OWNERS = (object, BaseModel)
# hooks pydantic writes into model subclasses
_SKIP_METHODS = frozenset({"model_post_init"})


class ModelMembers(BaseModel):
    """Public surface of one model type."""

    owner: type
    properties: Tuple[str, ...]
    methods: Tuple[str, ...]

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


# process-wide, keyed by model type, read-only once published
_members_cache: Dict[type, ModelMembers] = {}


def _is_public(name: str) -> bool:
    return not name.startswith("_")


def _defined_on(func, klass: type) -> bool:
    """False for functions injected into the class namespace by a framework."""
    return func.__qualname__.startswith(klass.__qualname__ + ".")


def _collect_members(model_type: type) -> ModelMembers:
    properties: Dict[str, None] = {}
    methods: Dict[str, None] = {}

    if isinstance(model_type, type) and issubclass(model_type, BaseModel):
        properties.update(dict.fromkeys(model_type.model_fields))
        properties.update(dict.fromkeys(model_type.model_computed_fields))
    if dataclasses.is_dataclass(model_type):
        properties.update(
            dict.fromkeys(f.name for f in dataclasses.fields(model_type))
        )

    # walk base-first so the subclass' own ordering wins
    for klass in reversed(model_type.__mro__):
        if klass in _SKIP_OWNERS:
            continue
        for name, annotation in inspect.get_annotations(klass).items():
            if _is_public(name) and "ClassVar" not in str(annotation):
                properties.setdefault(name)
        for name, attr in vars(klass).items():
            if not _is_public(name):
                continue
            if isinstance(attr, (property, functools.cached_property)):
                properties.setdefault(name)
                methods.pop(name, None)
            elif (
                inspect.isfunction(attr)
                and name not in _SKIP_METHODS
                and _defined_on(attr, klass)
            ):
                methods.setdefault(name)
                properties.pop(name, None)

    members = ModelMembers(
        owner=model_type,
        properties=tuple(properties),
        methods=tuple(methods),
    )
    logger.debug(
        f"Reflected {model_type.__name__}: "
        f"{len(members.properties)} properties, {len(members.methods)} methods"
    )
    return members


def members_of(model_type: type) -> ModelMembers:
    """
    Return the cached member table for `model_type`, building it on first use.

    Two threads racing on the first call may both build the table; only the
    first one published is kept, and both are identical anyway.
    """
    members = _members_cache.get(model_type)
    if members is None:
        members = _members_cache.setdefault(
            model_type, _collect_members(model_type)
        )
    return members


class ModelViewModel(Generic[TModel]):
    """
    Wraps one caller-owned model instance.

    Attribute access is forwarded: ``vm.first_name`` reads the snapshot,
    ``vm.first_name = "Jane"`` writes the model, ``vm.rename("Jane")`` calls
    the model method. Each mutation raises change events for every property
    whose value differs afterwards.
    """

    def __init__(self, model: TModel | Callable[[], TModel]):
        if _is_factory(model):
            model = model()  # type: ignore[operator]
        object.__setattr__(self, "_model", model)
        object.__setattr__(self, "_members", members_of(type(model)))
        object.__setattr__(self, "_notifier", ChangeNotifier())
        object.__setattr__(self, "_snapshot", None)
        self._current_snapshot()

    @classmethod
    def from_factory(cls, factory: Callable[[], TModel]) -> "ModelViewModel[TModel]":
        return cls(factory())

    @property
    def model(self) -> TModel:
        return self._model

    @property
    def members(self) -> ModelMembers:
        return self._members

    @property
    def property_changed(self) -> ChangeNotifier:
        return self._notifier

    def raise_property_changed(self, name: str) -> None:
        self._notifier.emit(self, name)
        emit_change(self, name)

    # ------------------------------------------------------------------ #
    # snapshot
    # ------------------------------------------------------------------ #
    def _read_values(self) -> Dict[str, Any]:
        return {
            name: getattr(self._model, name, MISSING)
            for name in self._members.properties
        }

    def _current_snapshot(self) -> Dict[str, Any]:
        snapshot = self._snapshot
        if snapshot is None:
            snapshot = self._read_values()
            object.__setattr__(self, "_snapshot", snapshot)
        return snapshot

    def notify_changed_properties(self) -> None:
        """
        Re-read every public property of the model and raise
        ``property_changed`` for each one that differs from the last read.
        """
        previous = self._current_snapshot()
        current = self._read_values()
        object.__setattr__(self, "_snapshot", current)

        for name, value in current.items():
            old = previous.get(name, MISSING)
            if old is value:
                continue
            if old is MISSING or old != value:
                self.raise_property_changed(name)

    # ------------------------------------------------------------------ #
    # get / set / invoke
    # ------------------------------------------------------------------ #
    def get(self, name: str, default: Any = MISSING) -> Any:
        return self._current_snapshot().get(name, default)

    def set(self, name: str, value: Any) -> None:
        if name not in self._members.properties:
            raise MemberNotFoundError(type(self._model), name, "property")
        setattr(self._model, name, value)
        self.notify_changed_properties()

    def invoke(self, name: str, *args: Any, **kwargs: Any) -> Any:
        if name not in self._members.methods:
            raise MemberNotFoundError(type(self._model), name, "method")
        result = getattr(self._model, name)(*args, **kwargs)
        self.notify_changed_properties()
        return result

    def keys(self):
        return list(self._members.properties)

    # dynamic member access
    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        members = self._members
        if name in members.methods:
            return functools.partial(self.invoke, name)
        if name in members.properties:
            return self.get(name)
        raise MemberNotFoundError(type(self._model), name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        self.set(name, value)

    def __getitem__(self, name: str) -> Any:
        return self.get(name, None)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __contains__(self, name: object) -> bool:
        return name in self._members.properties

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._model!r})"


def _is_factory(obj: Any) -> bool:
    """Classes and plain zero-argument functions are treated as factories."""
    if isinstance(obj, type):
        return True
    if inspect.isfunction(obj) or isinstance(obj, functools.partial):
        try:
            inspect.signature(obj).bind()
        except TypeError:
            return False
        return True
    return False


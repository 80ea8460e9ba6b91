"""
DynamicViewModel kernel – a pydantic model with an open-ended property bag.

* Declared pydantic fields (and Python properties) on a subclass are the
  typed members: writes are validated/coerced through pydantic.
* Any other name lives in the PropertyBag; writes that do not change the
  stored value are no-ops, real changes raise ``property_changed``.
* ``vm[name] = value`` additionally raises ``"[name]"`` on every write so
  indexer bindings refresh even when the value is unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Tuple

from loguru import logger
from pydantic import BaseModel, PrivateAttr, ValidationError
from pydantic_core import to_json

from ..errors import PropertyConversionError
from ..events import ChangeNotifier, emit_change, emit_create
from .properties import MISSING, PropertyBag


def indexer_name(name: str) -> str:
    """Event name raised by indexer writes."""
    return f"[{name}]"


class DynamicViewModel(BaseModel):
    """
    Loosely-typed view model with change notification.

    View models compare by identity (a binding cares *which* object it
    observes); use ``to_dict()`` for structural comparison.
    """

    model_config = {
        "validate_assignment": True,
        "coerce_numbers_to_str": True,
        "arbitrary_types_allowed": True,
    }

    _bag: PropertyBag = PrivateAttr(default_factory=PropertyBag)
    _notifier: ChangeNotifier = PrivateAttr(default_factory=ChangeNotifier)

    def __init__(self, **data: Any) -> None:
        fields = type(self).model_fields
        super().__init__(**{k: v for k, v in data.items() if k in fields})
        for k, v in data.items():
            if k not in fields:
                self._bag.set(k, v)
        emit_create(self)

    __eq__ = object.__eq__
    __hash__ = object.__hash__

    def __copy__(self) -> "DynamicViewModel":
        # own bag (same values), no observers
        clone = super().__copy__()
        private = dict(clone.__pydantic_private__ or {})
        private["_bag"] = self._bag.copy()
        private["_notifier"] = ChangeNotifier()
        object.__setattr__(clone, "__pydantic_private__", private)
        return clone

    # ------------------------------------------------------------------ #
    # notification
    # ------------------------------------------------------------------ #
    @property
    def property_changed(self) -> ChangeNotifier:
        return self._notifier

    def raise_property_changed(self, name: str) -> None:
        self._notifier.emit(self, name)
        emit_change(self, name)

    # ------------------------------------------------------------------ #
    # get / set
    # ------------------------------------------------------------------ #
    @classmethod
    def is_declared(cls, name: str) -> bool:
        """
        True when `name` is a pydantic field or a property defined on a
        subclass. Properties of DynamicViewModel / BaseModel themselves
        (``property_changed``, ``model_extra``...) are not members.
        """
        if name in cls.model_fields:
            return True
        return any(
            isinstance(vars(klass).get(name), property)
            for klass in cls.__mro__
            if klass not in DynamicViewModel.__mro__
        )

    def get(self, name: str, default: Any = MISSING) -> Any:
        if type(self).is_declared(name):
            return getattr(self, name)
        return self._bag.get(name, default)

    def set(self, name: str, value: Any) -> None:
        """
        Write `value` under `name`.

        Declared members are coerced to their annotated type; a value that
        cannot be converted raises PropertyConversionError and leaves the
        view model untouched. Other names go to the bag.
        """
        if type(self).is_declared(name):
            self._set_declared(name, value)
            return
        if self._bag.set(name, value):
            logger.debug(f"{type(self).__name__}.{name} = {value!r}")
            self.raise_property_changed(name)

    def _set_declared(self, name: str, value: Any) -> None:
        old = getattr(self, name, MISSING)
        try:
            super().__setattr__(name, value)
        except ValidationError as exc:
            errors = "; ".join(e["msg"] for e in exc.errors())
            raise PropertyConversionError(name, value, errors) from exc
        new = getattr(self, name, MISSING)
        if old is new or (type(old) is type(new) and old == new):
            return
        self.raise_property_changed(name)

    def has(self, name: str) -> bool:
        return type(self).is_declared(name) or name in self._bag

    def remove(self, name: str) -> bool:
        """Drop a bag property; declared members cannot be removed."""
        if self._bag.remove(name):
            self.raise_property_changed(name)
            return True
        return False

    # dynamic member access
    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            return super().__getattr__(name)
        value = self._bag.get(name)
        if value is MISSING:
            raise AttributeError(
                f"{type(self).__name__!r} object has no property {name!r}"
            )
        return value

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            return super().__setattr__(name, value)
        self.set(name, value)

    # indexer access
    def __getitem__(self, name: str) -> Any:
        return self.get(name, None)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)
        self.raise_property_changed(indexer_name(name))

    def __delitem__(self, name: str) -> None:
        if not self.remove(name):
            raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    # ------------------------------------------------------------------ #
    # mapping-style views (declared members first, then the bag)
    # ------------------------------------------------------------------ #
    def keys(self) -> List[str]:
        return list(type(self).model_fields) + list(self._bag)

    def items(self) -> List[Tuple[str, Any]]:
        return [(k, getattr(self, k)) for k in type(self).model_fields] + list(
            self._bag.items()
        )

    def __iter__(self) -> Iterator[Tuple[str, Any]]:  # type: ignore[override]
        yield from self.items()

    def __len__(self) -> int:
        return len(type(self).model_fields) + len(self._bag)

    # ------------------------------------------------------------------ #
    # merge
    # ------------------------------------------------------------------ #
    def merge_from(self, other: "DynamicViewModel | Mapping[str, Any]") -> None:
        """
        Copy `other`'s bag into this view model.

        Where both sides hold a nested view model the nested one is merged in
        place, so observers attached to it keep working.
        """
        if isinstance(other, DynamicViewModel):
            pairs = other._bag.items()
        else:
            pairs = iter(list(other.items()))
        for key, value in pairs:
            current = self.get(key)
            if isinstance(current, DynamicViewModel) and current is not value:
                if isinstance(value, (DynamicViewModel, Mapping)):
                    current.merge_from(value)
                    continue
            self.set(key, value)

    # ------------------------------------------------------------------ #
    # export
    # ------------------------------------------------------------------ #
    def to_dict(self) -> Dict[str, Any]:
        """Plain python dict of declared members + bag, recursively."""
        return {k: _plain(v) for k, v in self.items()}

    def to_json(self, indent: int | None = None) -> str:
        return to_json(self.to_dict(), indent=indent).decode()

    def __repr_args__(self):
        yield from self.items()


def _plain(value: Any) -> Any:
    if isinstance(value, DynamicViewModel):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value

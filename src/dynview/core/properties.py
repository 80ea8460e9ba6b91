"""
Ordered name ➜ value bag that backs every DynamicViewModel.

* `get` never raises for unknown names; it answers `MISSING` instead.
* `set` reports whether the stored value actually changed.
* `add`, `remove`, `list` helpers mutate / export the bag in place.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Tuple


class _Missing:
    """Marker for "no value stored" (distinct from a stored ``None``)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __reduce__(self):
        return "MISSING"


MISSING: Any = _Missing()


class PropertyBag:
    """Insertion-ordered, case-sensitive property storage."""

    __slots__ = ("_values",)

    def __init__(self, **kv: Any) -> None:
        self._values: Dict[str, Any] = {}
        self.add(**kv)

    def get(self, name: str, default: Any = MISSING) -> Any:
        return self._values.get(name, default)

    def set(self, name: str, value: Any) -> bool:
        """Store `value`; return False when it equals the current value."""
        if name in self._values:
            current = self._values[name]
            # 1 and True (or 1 and 1.0) are different values for a binding
            if current is value or (
                type(current) is type(value) and current == value
            ):
                return False
        self._values[name] = value
        return True

    def contains(self, name: str) -> bool:
        return name in self._values

    # ------------------------------------------------------------------ #
    # convenience helpers
    # ------------------------------------------------------------------ #
    def add(self, **kv: Any) -> None:
        """Add arbitrary key/value pairs."""
        for k, v in kv.items():
            self.set(k, v)

    def remove(self, name: str) -> bool:
        """Remove a key (no error if absent); return True if it existed."""
        return self._values.pop(name, MISSING) is not MISSING

    def copy(self) -> "PropertyBag":
        """New bag holding the same values (not copied themselves)."""
        clone = PropertyBag()
        clone._values = dict(self._values)
        return clone

    def list(self) -> Dict[str, Any]:
        """Return a shallow copy of all keys/values."""
        return dict(self._values)

    def keys(self):
        return self._values.keys()

    def items(self) -> Iterator[Tuple[str, Any]]:
        return iter(list(self._values.items()))

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"PropertyBag({self._values!r})"

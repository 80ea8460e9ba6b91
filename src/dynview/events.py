"""
dynview.events  ──  Property-changed notification for view models

* `ChangeNotifier` is the per-instance event (one per view model).
* `on.create(...)` / `on.change(...)` register class-level hooks that fire
  for every instance of the given view-model classes (subclasses included).
"""

from __future__ import annotations

import weakref
from collections import defaultdict
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Type

from loguru import logger

if TYPE_CHECKING:
    from .core.record import DynamicViewModel

PropertyChangedHandler = Callable[[Any, str], Any]


class _StrongRef:
    """Same call shape as a weakref, for observers held strongly."""

    __slots__ = ("_target",)

    def __init__(self, target: Callable) -> None:
        self._target = target

    def __call__(self) -> Callable:
        return self._target


def _make_ref(callback: Callable, weak: bool):
    if not weak:
        return _StrongRef(callback)
    if hasattr(callback, "__self__") and hasattr(callback, "__func__"):
        return weakref.WeakMethod(callback)
    return weakref.ref(callback)


class ChangeNotifier:
    """
    Synchronous "property changed" event.

    Observers are called as ``callback(source, property_name)`` in the order
    they connected. Emitting iterates over a copy of the observer list, so a
    callback may mutate the source (re-entering ``emit``) or (dis)connect
    observers without disturbing the current round. Observer exceptions
    propagate to whoever triggered the change.
    """

    def __init__(self) -> None:
        self._refs: List[Any] = []

    def connect(self, callback: PropertyChangedHandler, weak: bool = False) -> None:
        """
        Subscribe `callback`; with ``weak=True`` it detaches once collected.

        Connecting the same callback twice keeps a single subscription, so it
        is called once per event.
        """
        if self._index(callback) is None:
            self._refs.append(_make_ref(callback, weak))

    def disconnect(self, callback: PropertyChangedHandler) -> None:
        idx = self._index(callback)
        if idx is not None:
            del self._refs[idx]

    def emit(self, source: Any, name: str) -> None:
        dead = False
        for ref in list(self._refs):
            callback = ref()
            if callback is None:
                dead = True
                continue
            callback(source, name)
        if dead:
            self._refs = [r for r in self._refs if r() is not None]

    def _index(self, callback: Callable):
        for i, ref in enumerate(self._refs):
            if ref() == callback:
                return i
        return None

    # copies of a view model start without observers
    def __deepcopy__(self, memo) -> "ChangeNotifier":
        return type(self)()

    @property
    def observer_count(self) -> int:
        return sum(1 for r in self._refs if r() is not None)


class EventRegistry:
    """Central registry for class-level view-model hooks"""

    def __init__(self):
        # Maps event type -> class name -> handlers (registration order)
        self._handlers: Dict[str, Dict[str, List[Callable]]] = {
            "create": defaultdict(list),
            "change": defaultdict(list),
        }

    def register(
        self,
        event_type: str,
        model_classes: tuple[Type[DynamicViewModel], ...],
        handler: Callable,
    ) -> None:
        """Register a handler for specific view-model classes"""
        for cls in model_classes:
            bucket = self._handlers[event_type][cls.__name__]
            if handler not in bucket:
                bucket.append(handler)
            logger.debug(f"Registered {event_type} hook {handler!r} on {cls.__name__}")

    def unregister(self, event_type: str, handler: Callable) -> None:
        for bucket in self._handlers[event_type].values():
            if handler in bucket:
                bucket.remove(handler)

    def emit(self, event_type: str, instance: Any, *args: Any) -> None:
        """Emit event to all handlers registered on the instance's class or bases"""
        by_class = self._handlers[event_type]
        if not by_class:
            return
        handlers: List[Callable] = []
        for cls in type(instance).__mro__:
            for handler in by_class.get(cls.__name__, ()):
                if handler not in handlers:
                    handlers.append(handler)

        for handler in handlers:
            handler(instance, *args)


# Global registry instance
_registry = EventRegistry()


class OnDecorator:
    """Namespace for event decorators"""

    @staticmethod
    def create(*model_classes: Type[DynamicViewModel]) -> Callable:
        """Decorator for handling view-model construction: ``handler(vm)``"""

        def decorator(func: Callable) -> Callable:
            _registry.register("create", model_classes, func)
            return func

        return decorator

    @staticmethod
    def change(*model_classes: Type[DynamicViewModel]) -> Callable:
        """Decorator for handling property changes: ``handler(vm, name)``"""

        def decorator(func: Callable) -> Callable:
            _registry.register("change", model_classes, func)
            return func

        return decorator


# Export the decorator interface
on = OnDecorator()


# Hook into view-model lifecycle
def emit_create(instance: DynamicViewModel) -> None:
    """Emit create event for new instances"""
    _registry.emit("create", instance)


def emit_change(instance: Any, name: str) -> None:
    """Emit change event for a modified property"""
    _registry.emit("change", instance, name)

"""
dynview.errors  ──  Exceptions raised by view models and importers
"""


class DynviewError(Exception):
    """Base class for every error raised by dynview."""


class PropertyConversionError(DynviewError, ValueError):
    """A value could not be coerced to a declared field's type."""

    def __init__(self, name: str, value, reason: str = ""):
        self.name = name
        self.value = value
        msg = f"cannot convert {value!r} for property '{name}'"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class InvalidJsonError(DynviewError, ValueError):
    """Text was neither a JSON object nor a JSON array."""


class MemberNotFoundError(DynviewError, AttributeError):
    """A mirrored model has no public property or method with that name."""

    def __init__(self, owner: type, name: str, kind: str = "member"):
        self.owner = owner
        self.name = name
        super().__init__(f"{owner.__name__} has no public {kind} '{name}'")

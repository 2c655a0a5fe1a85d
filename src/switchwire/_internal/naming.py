from __future__ import annotations

import keyword

from switchwire.exceptions import SwitchwireInvalidConfigurationError


def validate_member_name(name: str, *, what: str) -> str:
    """Validate a generated member or shard name.

    Args:
        name: Candidate identifier.
        what: Description of the named thing, used in error messages.

    """
    if not isinstance(name, str):
        msg = f"Invalid {what}: expected str, got {type(name).__name__}."
        raise SwitchwireInvalidConfigurationError(msg)
    if not name.isidentifier():
        msg = f"Invalid {what}: '{name}' is not a valid identifier."
        raise SwitchwireInvalidConfigurationError(msg)
    if keyword.iskeyword(name):
        msg = f"Invalid {what}: '{name}' is a Python keyword."
        raise SwitchwireInvalidConfigurationError(msg)
    return name


class NameAllocator:
    """Hand out unique member names within one shard."""

    def __init__(self, reserved: tuple[str, ...] = ()) -> None:
        self._reserved: frozenset[str] = frozenset(reserved)
        self._taken: set[str] = set()

    def reserve(self, name: str) -> str:
        """Claim ``name`` exactly; reserved names may be claimed once, others must be free."""
        if name in self._taken:
            msg = f"Invalid member name: '{name}' is already declared in this shard."
            raise SwitchwireInvalidConfigurationError(msg)
        self._taken.add(name)
        return name

    def allocate(self, stem: str) -> str:
        """Claim ``stem``, or ``stem`` with the smallest free numeric suffix."""
        candidate = stem
        suffix = 2
        while candidate in self._taken or candidate in self._reserved:
            candidate = f"{stem}{suffix}"
            suffix += 1
        self._taken.add(candidate)
        return candidate

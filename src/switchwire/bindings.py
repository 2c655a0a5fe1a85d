from __future__ import annotations

import keyword
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from switchwire.exceptions import SwitchwireBindingNotFoundError, SwitchwireInvalidBindingError
from switchwire.keys import Key
from switchwire.requests import BindingRequest, RequestKind
from switchwire.scope import BaseScope


class BindingType(Enum):
    """How a binding produces its value."""

    PROVISION = auto()
    """Synchronous provision."""

    PRODUCTION = auto()
    """Asynchronous, future-based production."""

    MEMBERS_INJECTION = auto()
    """Injection into the members of an existing instance."""


class BindingKind(Enum):
    """Declaration shape of a binding."""

    INJECTION = auto()
    """Constructor injection."""

    PROVISION = auto()
    """Provision method on a module."""

    DELEGATE = auto()
    """Alias of another key."""

    MULTIBOUND_SET = auto()
    """Set aggregated from contributions."""

    MULTIBOUND_MAP = auto()
    """Map aggregated from contributions."""

    ASSISTED_INJECTION = auto()
    """Constructor with assisted (caller supplied) parameters."""

    ASSISTED_FACTORY = auto()
    """Factory producing assisted-injection instances."""

    BOUND_INSTANCE = auto()
    """Instance handed to the component when it is built."""

    MEMBERS_INJECTOR = auto()
    """Provision of a members injector for a type."""

    MEMBERS_INJECTION = auto()
    """Members-injection binding."""

    PRODUCTION = auto()
    """Producer method."""


_MULTIBOUND_KINDS = frozenset({BindingKind.MULTIBOUND_SET, BindingKind.MULTIBOUND_MAP})


@dataclass(frozen=True, kw_only=True)
class Binding:
    """A node of the resolved binding graph."""

    key: Key
    """The key this binding satisfies."""
    kind: BindingKind
    """The declaration shape of this binding."""
    binding_type: BindingType = BindingType.PROVISION
    """Synchronous, asynchronous or members-injection production."""
    scope: BaseScope | None = None
    """Caching scope, ``None`` for unscoped bindings."""
    dependencies: tuple[BindingRequest, ...] = field(default=())
    """Ordered dependency requests. Bare keys are normalized to instance requests."""
    unresolved: bool = False
    """True for generic bindings whose type parameters are not substituted yet."""
    assisted_parameters: tuple[str, ...] = ()
    """Caller supplied parameter names of an assisted-injection binding."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "dependencies", _normalize_dependencies(self.dependencies))
        self._validate()

    @property
    def is_multibound(self) -> bool:
        return self.kind in _MULTIBOUND_KINDS

    @property
    def delegate_key(self) -> Key:
        """Return the key a delegate binding aliases."""
        if self.kind is not BindingKind.DELEGATE:
            msg = f"Binding for {self.key} is not a delegate binding."
            raise SwitchwireInvalidBindingError(msg)
        return self.dependencies[0].key

    def _validate(self) -> None:
        if not isinstance(self.key, Key):
            msg = f"Binding key must be a Key, got {type(self.key).__name__}."
            raise SwitchwireInvalidBindingError(msg)
        if self.kind is BindingKind.DELEGATE and len(self.dependencies) != 1:
            msg = (
                f"Delegate binding for {self.key} must declare exactly one dependency, "
                f"got {len(self.dependencies)}."
            )
            raise SwitchwireInvalidBindingError(msg)
        if (self.binding_type is BindingType.MEMBERS_INJECTION) != (
            self.kind is BindingKind.MEMBERS_INJECTION
        ):
            msg = (
                f"Binding for {self.key} mixes binding type {self.binding_type.name} with "
                f"kind {self.kind.name}; members injection type and kind go together."
            )
            raise SwitchwireInvalidBindingError(msg)
        if (self.binding_type is BindingType.PRODUCTION) != (self.kind is BindingKind.PRODUCTION):
            msg = (
                f"Binding for {self.key} mixes binding type {self.binding_type.name} with "
                f"kind {self.kind.name}; production type and kind go together."
            )
            raise SwitchwireInvalidBindingError(msg)
        if self.assisted_parameters and self.kind is not BindingKind.ASSISTED_INJECTION:
            msg = (
                "Only assisted-injection bindings take assisted parameters, "
                f"{self.key} is {self.kind.name}."
            )
            raise SwitchwireInvalidBindingError(msg)
        if self.kind is BindingKind.ASSISTED_INJECTION and self.scope is not None:
            msg = f"Assisted-injection binding for {self.key} cannot be scoped."
            raise SwitchwireInvalidBindingError(msg)
        for name in self.assisted_parameters:
            if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
                msg = f"Assisted parameter {name!r} of {self.key} is not a valid identifier."
                raise SwitchwireInvalidBindingError(msg)


def _normalize_dependencies(dependencies: Iterable[Any]) -> tuple[BindingRequest, ...]:
    normalized: list[BindingRequest] = []
    for dependency in dependencies:
        if isinstance(dependency, BindingRequest):
            normalized.append(dependency)
        elif isinstance(dependency, Key):
            normalized.append(BindingRequest(key=dependency, request_kind=RequestKind.INSTANCE))
        else:
            msg = (
                "Binding dependency must be a Key or BindingRequest, "
                f"got {type(dependency).__name__}."
            )
            raise SwitchwireInvalidBindingError(msg)
    return tuple(normalized)


class BindingGraph:
    """Holds all bindings of a resolved component graph, in registration order."""

    def __init__(self, bindings: Iterable[Binding] = ()) -> None:
        self._bindings_by_key: dict[Key, Binding] = {}
        for binding in bindings:
            self.add(binding)

    def add(self, binding: Binding) -> None:
        """Add a binding, replacing any earlier binding for the same key."""
        self._bindings_by_key[binding.key] = binding

    def get(self, key: Key) -> Binding:
        """Get the binding for ``key``.

        Raises:
            SwitchwireBindingNotFoundError: If the graph has no binding for ``key``.

        """
        binding = self._bindings_by_key.get(key)
        if binding is None:
            msg = f"No binding for key {key} in the binding graph."
            raise SwitchwireBindingNotFoundError(msg)
        return binding

    def find(self, key: Key) -> Binding | None:
        """Find the binding for ``key``, returning ``None`` if absent."""
        return self._bindings_by_key.get(key)

    def delegate_binding(self, binding: Binding) -> Binding:
        """Return the binding a delegate binding aliases."""
        return self.get(binding.delegate_key)

    def __contains__(self, key: object) -> bool:
        return key in self._bindings_by_key

    def __iter__(self) -> Iterator[Binding]:
        return iter(self._bindings_by_key.values())

    def __len__(self) -> int:
        return len(self._bindings_by_key)

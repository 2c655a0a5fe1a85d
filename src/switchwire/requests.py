from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

from switchwire.keys import Key

if TYPE_CHECKING:
    from typing_extensions import Self


class FrameworkType(Enum):
    """Framework handle kinds the generated component can hold in a field."""

    PROVIDER = auto()
    """A synchronous deferred producer."""

    PRODUCER_NODE = auto()
    """An asynchronous producer node."""

    @property
    def request_kind(self) -> RequestKind:
        """Return the request kind that asks for this framework handle."""
        if self is FrameworkType.PROVIDER:
            return RequestKind.PROVIDER
        return RequestKind.PRODUCER


class RequestKind(Enum):
    """Shape in which a dependant wants a value."""

    INSTANCE = auto()
    """The value itself."""

    PROVIDER = auto()
    """A deferred producer that yields the value on each call."""

    LAZY = auto()
    """A memoizing handle that computes the value on first access."""

    PROVIDER_OF_LAZY = auto()
    """A deferred producer of lazy handles."""

    PRODUCER = auto()
    """An asynchronous handle."""

    PRODUCED = auto()
    """The resolved result of an asynchronous computation, success or failure."""

    FUTURE = auto()
    """A future of the value."""

    MEMBERS_INJECTION = auto()
    """Injection of members into an existing instance."""

    @property
    def framework_type(self) -> FrameworkType | None:
        """Return the framework handle this kind asks for, if any."""
        if self is RequestKind.PROVIDER:
            return FrameworkType.PROVIDER
        if self is RequestKind.PRODUCER:
            return FrameworkType.PRODUCER_NODE
        return None


@dataclass(frozen=True, slots=True)
class BindingRequest:
    """A request for ``key`` in the shape given by ``request_kind``."""

    key: Key
    request_kind: RequestKind = RequestKind.INSTANCE

    @classmethod
    def instance(cls, key: Key) -> Self:
        return cls(key=key, request_kind=RequestKind.INSTANCE)

    @property
    def framework_type(self) -> FrameworkType | None:
        return self.request_kind.framework_type

    def is_request_kind(self, request_kind: RequestKind) -> bool:
        return self.request_kind is request_kind

    def with_kind(self, request_kind: RequestKind) -> BindingRequest:
        """Return a request for the same key in another shape."""
        return BindingRequest(key=self.key, request_kind=request_kind)

    def __str__(self) -> str:
        return f"{self.request_kind.name}({self.key})"

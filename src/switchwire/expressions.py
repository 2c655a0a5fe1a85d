"""Abstract instantiation expressions produced by the generator.

Expressions describe *what* the generated component does to obtain a value;
turning them into source text is the job of a code-emission collaborator.
Every node is a frozen dataclass so two generation passes over identical
inputs produce structurally equal trees.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, fields
from enum import Enum, auto

from switchwire.bindings import BindingKind
from switchwire.check_mode import CheckMode
from switchwire.keys import Key
from switchwire.requests import BindingRequest, FrameworkType, RequestKind


class Expression:
    """Base class for expression nodes."""

    __slots__ = ()


@dataclass(frozen=True, slots=True)
class DependencyExpression(Expression):
    """The value of another request, obtained through that request's own expression."""

    request: BindingRequest


@dataclass(frozen=True, slots=True)
class DirectInvocation(Expression):
    """Inline construction, provision call, aggregation or assisted factory implementation."""

    key: Key
    binding_kind: BindingKind
    arguments: tuple[Expression, ...] = ()
    assisted_parameters: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ComponentRequirement(Expression):
    """An instance handed to the component when it was built."""

    key: Key


@dataclass(frozen=True, slots=True)
class FactoryCreation(Expression):
    """Default framework creation expression of a binding."""

    key: Key
    binding_kind: BindingKind
    framework_type: FrameworkType
    arguments: tuple[Expression, ...] = ()
    erase_type_arguments: bool = False


@dataclass(frozen=True, slots=True)
class StaticFactoryReference(Expression):
    """Reference to a shared generated factory reusable across call sites."""

    key: Key
    binding_kind: BindingKind


@dataclass(frozen=True, slots=True)
class ScopedCreation(Expression):
    """Caching decorator applied around a creation expression."""

    check_mode: CheckMode
    creation: Expression


@dataclass(frozen=True, slots=True)
class DispatcherInvocation(Expression):
    """Creation through the component dispatcher, selected by entry id."""

    dispatcher_name: str
    entry_id: int


@dataclass(frozen=True, slots=True)
class ProducerFromProvider(Expression):
    """Asynchronous handle completing immediately with the provider's value."""

    provider: Expression


@dataclass(frozen=True, slots=True)
class FrameworkDerivation(Expression):
    """A value of ``request_kind`` derived from a framework handle."""

    source: Expression
    request_kind: RequestKind


@dataclass(frozen=True, slots=True)
class ImmediateFuture(Expression):
    """An already completed future holding an instance."""

    instance: Expression


@dataclass(frozen=True, slots=True)
class MembersInjectionInvocation(Expression):
    """Injection of members into the instance passed to the component method."""

    key: Key
    arguments: tuple[Expression, ...] = ()


@dataclass(frozen=True, slots=True)
class FieldReference(Expression):
    """Read of a component field owned by ``shard_name``."""

    shard_name: str
    field_name: str


@dataclass(frozen=True, slots=True)
class MethodInvocation(Expression):
    """Call of a component method owned by ``shard_name``."""

    shard_name: str
    method_name: str
    arguments: tuple[str, ...] = ()


def walk_expression(expression: Expression) -> Iterator[Expression]:
    """Yield ``expression`` and every nested node, depth first.

    Field and method references are not followed; their bodies live on the
    component declarations.
    """
    pending: list[Expression] = [expression]
    while pending:
        current = pending.pop()
        yield current
        children: list[Expression] = []
        for item in fields(current):  # type: ignore[arg-type]
            value = getattr(current, item.name)
            if isinstance(value, Expression):
                children.append(value)
            elif isinstance(value, tuple):
                children.extend(child for child in value if isinstance(child, Expression))
        pending.extend(reversed(children))


def iter_dependency_requests(expression: Expression) -> Iterator[BindingRequest]:
    """Yield every dependency request inside ``expression``, depth first."""
    for node in walk_expression(expression):
        if isinstance(node, DependencyExpression):
            yield node.request


class BindingExpressionKind(Enum):
    """Strategy that produced a ``BindingExpression``."""

    DIRECT = auto()
    DELEGATE = auto()
    DERIVED_FROM_FRAMEWORK_INSTANCE = auto()
    FRAMEWORK_INSTANCE = auto()
    IMMEDIATE_FUTURE = auto()
    MEMBERS_INJECTION = auto()
    PRIVATE_METHOD = auto()
    ASSISTED_PRIVATE_METHOD = auto()
    COMPONENT_METHOD = auto()


_METHOD_BACKED_KINDS = frozenset(
    {
        BindingExpressionKind.PRIVATE_METHOD,
        BindingExpressionKind.ASSISTED_PRIVATE_METHOD,
        BindingExpressionKind.COMPONENT_METHOD,
    },
)


@dataclass(frozen=True, slots=True)
class BindingExpression:
    """The expression selected for one binding request."""

    kind: BindingExpressionKind
    request: BindingRequest
    expression: Expression
    requires_method_encapsulation: bool = False
    is_framework_instance: bool = False

    @property
    def is_method_backed(self) -> bool:
        """Return whether the expression already calls a generated method."""
        return self.kind in _METHOD_BACKED_KINDS

    @property
    def is_derived_from_framework_instance(self) -> bool:
        return self.kind is BindingExpressionKind.DERIVED_FROM_FRAMEWORK_INSTANCE

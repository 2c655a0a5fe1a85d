from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum, auto

from switchwire._internal.naming import NameAllocator, validate_member_name
from switchwire.bindings import Binding
from switchwire.exceptions import SwitchwireContractViolationError
from switchwire.expressions import BindingExpression, DispatcherInvocation, Expression
from switchwire.keys import Key
from switchwire.requests import BindingRequest, FrameworkType, RequestKind

DISPATCHER_NAME = "switching_provider"

_FIELD_SUFFIX_BY_FRAMEWORK_TYPE = {
    FrameworkType.PROVIDER: "provider",
    FrameworkType.PRODUCER_NODE: "producer",
}


@dataclass(frozen=True, slots=True)
class ComponentMethod:
    """An accessor declared on the component interface."""

    name: str
    request: BindingRequest


@dataclass(frozen=True)
class ComponentDescriptor:
    """Externally declared shape of the component being generated."""

    name: str
    methods: tuple[ComponentMethod, ...] = ()

    def __post_init__(self) -> None:
        validate_member_name(self.name, what="component name")
        for method in self.methods:
            validate_member_name(method.name, what="component method name")

    def first_matching_component_method(self, request: BindingRequest) -> ComponentMethod | None:
        """Return the first declared accessor for exactly ``request``."""
        return next((method for method in self.methods if method.request == request), None)


class FieldInitialization(Enum):
    """When framework fields are initialized by the generated component."""

    EAGER = "eager"
    """Initialize in the component constructor."""

    LAZY = "lazy"
    """Initialize on first access."""


class MethodKind(Enum):
    """Generated method flavours."""

    PRIVATE = auto()
    ASSISTED_PRIVATE = auto()
    COMPONENT = auto()


@dataclass(frozen=True, slots=True)
class FieldDeclaration:
    """A framework field: the single cached holder for a binding within its shard."""

    name: str
    shard_name: str
    key: Key
    framework_type: FrameworkType
    initializer: Expression
    initialization: FieldInitialization


@dataclass(frozen=True, slots=True)
class MethodDeclaration:
    """A generated method holding an expression as its body."""

    name: str
    shard_name: str
    request: BindingRequest
    body: Expression
    kind: MethodKind
    parameters: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DispatcherEntry:
    """A binding multiplexed through the dispatcher under ``entry_id``."""

    entry_id: int
    key: Key
    payload: BindingExpression


class Dispatcher:
    """The single dispatcher of a component, assigning ids by insertion order."""

    def __init__(self, *, name: str, shard_name: str) -> None:
        self.name = name
        self.shard_name = shard_name
        self._entries: list[DispatcherEntry] = []
        self._entry_by_key: dict[Key, DispatcherEntry] = {}

    @property
    def entries(self) -> tuple[DispatcherEntry, ...]:
        return tuple(self._entries)

    def entry_for(self, key: Key) -> DispatcherEntry | None:
        return self._entry_by_key.get(key)

    def register(self, key: Key, payload: BindingExpression) -> DispatcherInvocation:
        """Register ``payload`` for ``key`` and return the invocation that selects it."""
        if key in self._entry_by_key:
            msg = f"Binding {key} is already registered with dispatcher '{self.name}'."
            raise SwitchwireContractViolationError(msg)
        entry = DispatcherEntry(entry_id=len(self._entries), key=key, payload=payload)
        self._entries.append(entry)
        self._entry_by_key[key] = entry
        return DispatcherInvocation(dispatcher_name=self.name, entry_id=entry.entry_id)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dispatcher):
            return NotImplemented
        return (self.name, self.shard_name, self._entries) == (
            other.name,
            other.shard_name,
            other._entries,
        )

    __hash__ = None  # type: ignore[assignment]


class Shard:
    """A sub-unit of the generated component owning its fields and methods."""

    def __init__(
        self,
        name: str,
        *,
        is_component_shard: bool,
        reserved_names: tuple[str, ...] = (),
    ) -> None:
        self.name = validate_member_name(name, what="shard name")
        self.is_component_shard = is_component_shard
        self._fields: dict[str, FieldDeclaration] = {}
        self._methods: dict[str, MethodDeclaration] = {}
        self._names = NameAllocator(reserved=reserved_names)

    @property
    def fields(self) -> tuple[FieldDeclaration, ...]:
        return tuple(self._fields.values())

    @property
    def methods(self) -> tuple[MethodDeclaration, ...]:
        return tuple(self._methods.values())

    def field(self, name: str) -> FieldDeclaration:
        return self._fields[name]

    def method(self, name: str) -> MethodDeclaration:
        return self._methods[name]

    def add_field(
        self,
        *,
        key: Key,
        framework_type: FrameworkType,
        initializer: Expression,
        initialization: FieldInitialization,
    ) -> FieldDeclaration:
        suffix = _FIELD_SUFFIX_BY_FRAMEWORK_TYPE[framework_type]
        name = self._names.allocate(f"{key.identifier}_{suffix}")
        declaration = FieldDeclaration(
            name=name,
            shard_name=self.name,
            key=key,
            framework_type=framework_type,
            initializer=initializer,
            initialization=initialization,
        )
        self._fields[name] = declaration
        return declaration

    def add_method(
        self,
        *,
        request: BindingRequest,
        body: Expression,
        kind: MethodKind,
        parameters: tuple[str, ...] = (),
        name: str | None = None,
    ) -> MethodDeclaration:
        if name is None:
            name = self._names.allocate(_method_stem(request))
        else:
            name = self._names.reserve(validate_member_name(name, what="method name"))
        declaration = MethodDeclaration(
            name=name,
            shard_name=self.name,
            request=request,
            body=body,
            kind=kind,
            parameters=parameters,
        )
        self._methods[name] = declaration
        return declaration

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shard):
            return NotImplemented
        return (self.name, self.is_component_shard, self.fields, self.methods) == (
            other.name,
            other.is_component_shard,
            other.fields,
            other.methods,
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Shard({self.name!r}, fields={len(self._fields)}, methods={len(self._methods)})"


def _method_stem(request: BindingRequest) -> str:
    stem = f"get_{request.key.identifier}"
    if request.request_kind is RequestKind.INSTANCE:
        return stem
    return f"{stem}_{request.request_kind.name.lower()}"


class ComponentImplementation:
    """Generated component model: shards, their members and the dispatcher."""

    def __init__(
        self,
        descriptor: ComponentDescriptor,
        *,
        shard_assignment: Mapping[Key, str] | None = None,
    ) -> None:
        self.descriptor = descriptor
        self.name = descriptor.name
        self.component_shard = Shard(
            descriptor.name,
            is_component_shard=True,
            reserved_names=tuple(method.name for method in descriptor.methods),
        )
        self._shards: dict[str, Shard] = {self.component_shard.name: self.component_shard}
        self._shard_name_by_key: dict[Key, str] = dict(shard_assignment or {})
        for shard_name in self._shard_name_by_key.values():
            self._ensure_shard(shard_name)
        self._dispatcher: Dispatcher | None = None

    @property
    def shards(self) -> tuple[Shard, ...]:
        return tuple(self._shards.values())

    @property
    def dispatcher(self) -> Dispatcher:
        """Return the component dispatcher, declaring it in the component shard on first use."""
        if self._dispatcher is None:
            self._dispatcher = Dispatcher(
                name=DISPATCHER_NAME,
                shard_name=self.component_shard.name,
            )
        return self._dispatcher

    @property
    def has_dispatcher(self) -> bool:
        return self._dispatcher is not None

    def shard(self, name: str) -> Shard:
        return self._shards[name]

    def shard_for(self, binding: Binding | Key) -> Shard:
        """Return the shard owning ``binding``; unassigned bindings live in the component shard."""
        key = binding.key if isinstance(binding, Binding) else binding
        shard_name = self._shard_name_by_key.get(key)
        if shard_name is None:
            return self.component_shard
        return self._shards[shard_name]

    def field(self, reference_shard: str, field_name: str) -> FieldDeclaration:
        return self._shards[reference_shard].field(field_name)

    def method(self, reference_shard: str, method_name: str) -> MethodDeclaration:
        return self._shards[reference_shard].method(method_name)

    def fields(self) -> Iterable[FieldDeclaration]:
        for shard in self._shards.values():
            yield from shard.fields

    def methods(self) -> Iterable[MethodDeclaration]:
        for shard in self._shards.values():
            yield from shard.methods

    def _ensure_shard(self, name: str) -> Shard:
        shard = self._shards.get(name)
        if shard is None:
            shard = Shard(name, is_component_shard=False)
            self._shards[name] = shard
        return shard

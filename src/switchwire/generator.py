from __future__ import annotations

import logging
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

from switchwire._internal.naming import validate_member_name
from switchwire._internal.selector import BindingExpressionSelector
from switchwire.bindings import BindingGraph
from switchwire.component import (
    ComponentDescriptor,
    ComponentImplementation,
    Dispatcher,
    FieldInitialization,
    MethodKind,
    Shard,
)
from switchwire.exceptions import SwitchwireInvalidConfigurationError
from switchwire.expressions import (
    BindingExpression,
    DependencyExpression,
    DispatcherInvocation,
    Expression,
    FieldReference,
    MethodInvocation,
    walk_expression,
)
from switchwire.keys import Key
from switchwire.requests import BindingRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedComponent:
    """Result of one generation pass.

    ``expressions`` maps every resolved request to its expression, in the order
    requests were resolved. ``component_methods`` maps each declared accessor
    name to the expression implementing it.
    """

    component: ComponentImplementation
    expressions: dict[BindingRequest, BindingExpression]
    component_methods: dict[str, BindingExpression]

    @property
    def shards(self) -> tuple[Shard, ...]:
        return self.component.shards

    @property
    def dispatcher(self) -> Dispatcher | None:
        if not self.component.has_dispatcher:
            return None
        return self.component.dispatcher


class ComponentGenerator:
    """Select binding expressions for one component and declare its generated members.

    A generator runs one generation pass: requests are answered from a cache, so
    asking for the same request twice returns the same ``BindingExpression``.
    Build a new generator for a new pass.
    """

    def __init__(
        self,
        graph: BindingGraph,
        descriptor: ComponentDescriptor,
        *,
        fast_init: bool = False,
        field_initialization: FieldInitialization | Literal["auto"] = "auto",
        keys_per_shard: int | None = None,
        shard_assignment: Mapping[Key, str] | None = None,
    ) -> None:
        """Initialize a generator for ``descriptor`` over ``graph``.

        Args:
            graph: Resolved binding graph. It is never mutated.
            descriptor: Component name and declared accessor methods.
            fast_init: Enable the artifact-minimizing mode that multiplexes
                framework instance creation through one dispatcher.
            field_initialization: When framework fields are initialized.
                ``"auto"`` selects lazy fields in fast-init mode and eager
                fields otherwise.
            keys_per_shard: Split bindings into shards of this many keys, in
                graph order. The first chunk stays in the component shard.
            shard_assignment: Explicit shard name per key. Wins over
                ``keys_per_shard``; keys assigned to the component name stay in
                the component shard.

        Raises:
            SwitchwireInvalidConfigurationError: If an option value is invalid.

        Examples:
            .. code-block:: python

                generator = ComponentGenerator(graph, descriptor, fast_init=True)
                generated = generator.generate()

        """
        self._graph = graph
        self._descriptor = descriptor
        self._fast_init = fast_init
        self._field_initialization = self._resolve_field_initialization(field_initialization)
        self._component = ComponentImplementation(
            descriptor,
            shard_assignment=self._resolve_shard_assignment(
                keys_per_shard=keys_per_shard,
                shard_assignment=shard_assignment,
            ),
        )
        self._selector = BindingExpressionSelector(
            graph=graph,
            component=self._component,
            fast_init=fast_init,
            field_initialization=self._field_initialization,
        )

    @property
    def component(self) -> ComponentImplementation:
        return self._component

    @property
    def fast_init(self) -> bool:
        return self._fast_init

    @property
    def field_initialization(self) -> FieldInitialization:
        return self._field_initialization

    def get_binding_expression(self, request: BindingRequest) -> BindingExpression:
        """Return the expression satisfying ``request`` in this generation pass.

        Args:
            request: Key and request kind to satisfy.

        Raises:
            SwitchwireBindingNotFoundError: If the graph has no binding for the key.
            SwitchwireIllegalRequestError: If the binding cannot be requested in
                this shape.
            SwitchwireContractViolationError: If the graph violates generator
                contracts.

        """
        return self._selector.get_binding_expression(request)

    def generate(self) -> GeneratedComponent:
        """Resolve every component method and everything reachable from it.

        Reachability follows dependency requests inside selected expressions,
        field initializers, method bodies and dispatcher payloads until no new
        request appears.
        """
        component_methods: dict[str, BindingExpression] = {}
        pending: deque[BindingRequest] = deque()
        for component_method in self._descriptor.methods:
            expression = self.get_binding_expression(component_method.request)
            component_methods[component_method.name] = expression
            pending.append(component_method.request)

        visited_requests: set[BindingRequest] = set()
        visited_members: set[tuple[str, str, str]] = set()
        visited_entries: set[int] = set()
        while pending:
            request = pending.popleft()
            if request in visited_requests:
                continue
            visited_requests.add(request)
            expression = self.get_binding_expression(request)
            pending.extend(
                self._reachable_requests(
                    expression.expression,
                    visited_members=visited_members,
                    visited_entries=visited_entries,
                ),
            )

        generated = GeneratedComponent(
            component=self._component,
            expressions=self._selector.expressions,
            component_methods=component_methods,
        )
        self._log_generation_strategy(generated)
        return generated

    def _reachable_requests(
        self,
        expression: Expression,
        *,
        visited_members: set[tuple[str, str, str]],
        visited_entries: set[int],
    ) -> list[BindingRequest]:
        requests: list[BindingRequest] = []
        pending: list[Expression] = [expression]
        while pending:
            for node in walk_expression(pending.pop()):
                if isinstance(node, DependencyExpression):
                    requests.append(node.request)
                elif isinstance(node, FieldReference):
                    member = ("field", node.shard_name, node.field_name)
                    if member not in visited_members:
                        visited_members.add(member)
                        field = self._component.field(node.shard_name, node.field_name)
                        pending.append(field.initializer)
                elif isinstance(node, MethodInvocation):
                    member = ("method", node.shard_name, node.method_name)
                    if member not in visited_members:
                        visited_members.add(member)
                        method = self._component.method(node.shard_name, node.method_name)
                        pending.append(method.body)
                elif isinstance(node, DispatcherInvocation):
                    if node.entry_id not in visited_entries:
                        visited_entries.add(node.entry_id)
                        entry = self._component.dispatcher.entries[node.entry_id]
                        pending.append(entry.payload.expression)
        return requests

    def _log_generation_strategy(self, generated: GeneratedComponent) -> None:
        component = generated.component
        private_method_count = sum(
            1 for method in component.methods() if method.kind is not MethodKind.COMPONENT
        )
        dispatcher = generated.dispatcher
        logger.info(
            (
                "Component generation strategy: component=%s fast_init=%s field_initialization=%s "
                "request_count=%d field_count=%d private_method_count=%d "
                "dispatcher_entry_count=%d shard_count=%d"
            ),
            component.name,
            self._fast_init,
            self._field_initialization.value,
            len(generated.expressions),
            sum(1 for _ in component.fields()),
            private_method_count,
            0 if dispatcher is None else len(dispatcher),
            len(component.shards),
        )

    def _resolve_field_initialization(
        self,
        field_initialization: FieldInitialization | Literal["auto"],
    ) -> FieldInitialization:
        if isinstance(field_initialization, FieldInitialization):
            return field_initialization
        if field_initialization == "auto":
            return FieldInitialization.LAZY if self._fast_init else FieldInitialization.EAGER
        msg = (
            "ComponentGenerator() parameter 'field_initialization' must be a FieldInitialization "
            f"or 'auto', got {field_initialization!r}."
        )
        raise SwitchwireInvalidConfigurationError(msg)

    def _resolve_shard_assignment(
        self,
        *,
        keys_per_shard: int | None,
        shard_assignment: Mapping[Key, str] | None,
    ) -> dict[Key, str]:
        assignment: dict[Key, str] = {}
        if keys_per_shard is not None:
            if (
                isinstance(keys_per_shard, bool)
                or not isinstance(keys_per_shard, int)
                or keys_per_shard < 1
            ):
                msg = (
                    "ComponentGenerator() parameter 'keys_per_shard' must be a positive int, "
                    f"got {keys_per_shard!r}."
                )
                raise SwitchwireInvalidConfigurationError(msg)
            for index, binding in enumerate(self._graph):
                chunk = index // keys_per_shard
                if chunk:
                    assignment[binding.key] = f"{self._descriptor.name}_shard{chunk}"

        for key, shard_name in (shard_assignment or {}).items():
            validate_member_name(shard_name, what="shard name")
            if shard_name == self._descriptor.name:
                assignment.pop(key, None)
            else:
                assignment[key] = shard_name
        return assignment


from __future__ import annotations

from collections.abc import Callable, Collection

from switchwire.bindings import Binding, BindingGraph
from switchwire.component import ComponentImplementation
from switchwire.expressions import BindingExpression, DispatcherInvocation
from switchwire.keys import Key
from switchwire.requests import BindingRequest, RequestKind


class DispatcherAllocator:
    """Multiplex framework instance creation through the component's single dispatcher."""

    def __init__(self, graph: BindingGraph, component: ComponentImplementation) -> None:
        self._graph = graph
        self._component = component

    def new_creation_expression(
        self,
        binding: Binding,
        payload: BindingExpression,
    ) -> DispatcherInvocation:
        """Register ``payload`` as the way to create ``binding`` and return the dispatcher call."""
        return self._component.dispatcher.register(binding.key, payload)

    def payload_reenters(
        self,
        binding: Binding,
        *,
        in_progress: Collection[Key],
        inlines_instance: Callable[[Binding], bool],
    ) -> bool:
        """Return whether building ``binding`` inline reaches a framework handle under construction.

        The walk follows instance dependencies that are themselves constructed
        inline. Any other dependency is read through its own field or method and
        stops the walk.

        Args:
            binding: Binding whose inline instance would become the dispatcher payload.
            in_progress: Keys whose framework instance is currently being built,
                ``binding.key`` included.
            inlines_instance: Predicate telling whether a binding's instance
                expression is built inline.

        """
        pending: list[BindingRequest] = list(binding.dependencies)
        visited: set[BindingRequest] = set()
        while pending:
            dependency = pending.pop()
            if dependency.key == binding.key or dependency.key in in_progress:
                return True
            if dependency in visited:
                continue
            visited.add(dependency)
            if not dependency.is_request_kind(RequestKind.INSTANCE):
                continue
            dependency_binding = self._graph.get(dependency.key)
            if inlines_instance(dependency_binding):
                pending.extend(dependency_binding.dependencies)
        return False

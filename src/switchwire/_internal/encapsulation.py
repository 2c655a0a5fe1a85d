from __future__ import annotations

from switchwire.bindings import Binding
from switchwire.component import ComponentImplementation, MethodDeclaration, MethodKind
from switchwire.expressions import BindingExpression, BindingExpressionKind, MethodInvocation
from switchwire.requests import BindingRequest, RequestKind


class MethodWrapper:
    """Hide binding expressions behind component or private methods.

    One method is declared per wrapped request; wrapping the same request again
    reuses it.
    """

    def __init__(self, component: ComponentImplementation) -> None:
        self._component = component
        self._methods: dict[tuple[BindingRequest, MethodKind], MethodDeclaration] = {}

    def wrap_in_method(
        self,
        binding: Binding,
        request_kind: RequestKind,
        binding_expression: BindingExpression,
    ) -> BindingExpression:
        """Return ``binding_expression`` as the body of a component or private method.

        A matching component accessor is implemented directly when the binding
        lives in the component shard. Bindings owned by another shard get a
        private method in that shard, since fields never cross shard boundaries.

        Args:
            binding: Binding the expression belongs to.
            request_kind: Request kind the expression satisfies.
            binding_expression: Expression to wrap. Method-backed expressions are
                returned unchanged.

        """
        if binding_expression.is_method_backed:
            return binding_expression

        request = BindingRequest(key=binding.key, request_kind=request_kind)
        component_method = self._component.descriptor.first_matching_component_method(request)
        shard = self._component.shard_for(binding)
        if component_method is not None and shard.is_component_shard:
            method = self._declare(
                request=request,
                binding=binding,
                binding_expression=binding_expression,
                kind=MethodKind.COMPONENT,
                name=component_method.name,
            )
            return self._invocation(
                method,
                request,
                BindingExpressionKind.COMPONENT_METHOD,
                binding_expression,
            )
        return self.private_method(request, binding, binding_expression)

    def private_method(
        self,
        request: BindingRequest,
        binding: Binding,
        binding_expression: BindingExpression,
    ) -> BindingExpression:
        """Return ``binding_expression`` as the body of a private method in the binding's shard."""
        if binding_expression.is_method_backed:
            return binding_expression
        method = self._declare(
            request=request,
            binding=binding,
            binding_expression=binding_expression,
            kind=MethodKind.PRIVATE,
        )
        return self._invocation(
            method,
            request,
            BindingExpressionKind.PRIVATE_METHOD,
            binding_expression,
        )

    def assisted_private_method(
        self,
        request: BindingRequest,
        binding: Binding,
        binding_expression: BindingExpression,
    ) -> BindingExpression:
        """Return an assisted-injection expression as a private method with assisted parameters."""
        method = self._declare(
            request=request,
            binding=binding,
            binding_expression=binding_expression,
            kind=MethodKind.ASSISTED_PRIVATE,
            parameters=binding.assisted_parameters,
        )
        return self._invocation(
            method,
            request,
            BindingExpressionKind.ASSISTED_PRIVATE_METHOD,
            binding_expression,
        )

    def _declare(
        self,
        *,
        request: BindingRequest,
        binding: Binding,
        binding_expression: BindingExpression,
        kind: MethodKind,
        parameters: tuple[str, ...] = (),
        name: str | None = None,
    ) -> MethodDeclaration:
        method = self._methods.get((request, kind))
        if method is not None:
            return method
        if kind is MethodKind.COMPONENT:
            shard = self._component.component_shard
        else:
            shard = self._component.shard_for(binding)
        method = shard.add_method(
            request=request,
            body=binding_expression.expression,
            kind=kind,
            parameters=parameters,
            name=name,
        )
        self._methods[(request, kind)] = method
        return method

    def _invocation(
        self,
        method: MethodDeclaration,
        request: BindingRequest,
        kind: BindingExpressionKind,
        wrapped: BindingExpression,
    ) -> BindingExpression:
        return BindingExpression(
            kind=kind,
            request=request,
            expression=MethodInvocation(
                shard_name=method.shard_name,
                method_name=method.name,
                arguments=method.parameters,
            ),
            is_framework_instance=wrapped.is_framework_instance,
        )

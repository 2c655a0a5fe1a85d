from __future__ import annotations

from switchwire.bindings import Binding, BindingKind, BindingType
from switchwire.exceptions import SwitchwireContractViolationError
from switchwire.expressions import (
    BindingExpression,
    BindingExpressionKind,
    ComponentRequirement,
    DependencyExpression,
    DirectInvocation,
)
from switchwire.requests import BindingRequest, RequestKind

_INVOCATION_KINDS = frozenset(
    {
        BindingKind.INJECTION,
        BindingKind.PROVISION,
        BindingKind.ASSISTED_INJECTION,
        BindingKind.ASSISTED_FACTORY,
    },
)


class UnscopedDirectInstanceExpressions:
    """Build instance expressions that call a binding's constructor or factory inline.

    The expressions never cache and never go through a framework handle. Some
    binding shapes have no such expression; ``create`` returns ``None`` for them.
    """

    def create(self, binding: Binding) -> BindingExpression | None:
        if binding.binding_type is not BindingType.PROVISION:
            return None

        request = BindingRequest(key=binding.key, request_kind=RequestKind.INSTANCE)
        kind = binding.kind
        if kind in _INVOCATION_KINDS:
            return self._invocation(binding, request)
        if kind is BindingKind.DELEGATE:
            return BindingExpression(
                kind=BindingExpressionKind.DELEGATE,
                request=request,
                expression=DependencyExpression(
                    request=BindingRequest(
                        key=binding.delegate_key,
                        request_kind=RequestKind.INSTANCE,
                    ),
                ),
            )
        if kind is BindingKind.BOUND_INSTANCE:
            return BindingExpression(
                kind=BindingExpressionKind.DIRECT,
                request=request,
                expression=ComponentRequirement(key=binding.key),
            )
        if binding.is_multibound:
            # Collections of framework handles are aggregated by the framework factory.
            if any(
                not dependency.is_request_kind(RequestKind.INSTANCE)
                for dependency in binding.dependencies
            ):
                return None
            return self._invocation(binding, request)
        if kind is BindingKind.MEMBERS_INJECTOR:
            return None

        msg = f"No direct instance strategy for {kind.name} binding {binding.key}."
        raise SwitchwireContractViolationError(msg)

    def _invocation(self, binding: Binding, request: BindingRequest) -> BindingExpression:
        return BindingExpression(
            kind=BindingExpressionKind.DIRECT,
            request=request,
            expression=DirectInvocation(
                key=binding.key,
                binding_kind=binding.kind,
                arguments=tuple(
                    DependencyExpression(request=dependency) for dependency in binding.dependencies
                ),
                assisted_parameters=binding.assisted_parameters,
            ),
            requires_method_encapsulation=bool(binding.dependencies),
        )

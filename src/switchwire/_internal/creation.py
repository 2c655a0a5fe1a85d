from __future__ import annotations

from dataclasses import dataclass

from switchwire.bindings import Binding, BindingKind, BindingType
from switchwire.exceptions import SwitchwireContractViolationError
from switchwire.expressions import (
    ComponentRequirement,
    DependencyExpression,
    Expression,
    FactoryCreation,
    FrameworkDerivation,
    ProducerFromProvider,
    StaticFactoryReference,
)
from switchwire.requests import BindingRequest, FrameworkType, RequestKind

_NO_DISPATCHER_KINDS = frozenset(
    {
        BindingKind.ASSISTED_INJECTION,
        BindingKind.DELEGATE,
        BindingKind.BOUND_INSTANCE,
        BindingKind.MEMBERS_INJECTOR,
        BindingKind.PRODUCTION,
    },
)
_STATIC_FACTORY_INVOCATION_KINDS = frozenset({BindingKind.INJECTION, BindingKind.PROVISION})


@dataclass(frozen=True, slots=True)
class CreationExpression:
    """A framework creation expression and whether it may be multiplexed by the dispatcher."""

    expression: Expression
    use_dispatcher: bool


class FrameworkCreationExpressions:
    """Build the expressions that create a binding's framework handle."""

    def unscoped_creation(self, binding: Binding) -> CreationExpression:
        """Return the default, uncached creation expression for ``binding``.

        Assisted-injection bindings get a framework factory too, so an assisted
        factory can depend on its target's provider; they never go through the
        dispatcher.

        Raises:
            SwitchwireContractViolationError: For members-injection bindings, which
                have no framework handle.

        """
        kind = binding.kind
        if kind is BindingKind.MEMBERS_INJECTION:
            msg = f"Members-injection binding {binding.key} has no framework instance."
            raise SwitchwireContractViolationError(msg)

        framework_request_kind = _framework_request_kind(binding)
        if kind is BindingKind.DELEGATE:
            expression: Expression = DependencyExpression(
                request=BindingRequest(
                    key=binding.delegate_key,
                    request_kind=framework_request_kind,
                ),
            )
        elif kind is BindingKind.BOUND_INSTANCE:
            expression = FactoryCreation(
                key=binding.key,
                binding_kind=kind,
                framework_type=_framework_type(binding),
                arguments=(ComponentRequirement(key=binding.key),),
            )
        else:
            expression = FactoryCreation(
                key=binding.key,
                binding_kind=kind,
                framework_type=_framework_type(binding),
                arguments=tuple(
                    DependencyExpression(request=dependency.with_kind(framework_request_kind))
                    for dependency in binding.dependencies
                ),
                erase_type_arguments=(
                    kind is BindingKind.INJECTION
                    and binding.unresolved
                    and binding.scope is not None
                ),
            )
        return CreationExpression(
            expression=expression,
            use_dispatcher=kind not in _NO_DISPATCHER_KINDS,
        )

    def static_factory(self, binding: Binding) -> StaticFactoryReference | None:
        """Return a shared factory reference for ``binding`` when one can stand in for a field.

        Only unscoped bindings without dependencies qualify: empty collections
        and constructor or provision bindings. Scoped bindings keep their field.
        """
        if binding.dependencies or binding.scope is not None:
            return None
        if binding.is_multibound or binding.kind in _STATIC_FACTORY_INVOCATION_KINDS:
            return StaticFactoryReference(key=binding.key, binding_kind=binding.kind)
        return None

    def producer_from_provider(self, binding: Binding) -> ProducerFromProvider:
        """Return an asynchronous handle adapting the provider of a provision binding."""
        if binding.binding_type is not BindingType.PROVISION:
            msg = f"Only provision bindings adapt a provider into a producer, got {binding.key}."
            raise SwitchwireContractViolationError(msg)
        return ProducerFromProvider(
            provider=DependencyExpression(
                request=BindingRequest(key=binding.key, request_kind=RequestKind.PROVIDER),
            ),
        )


def derive_from_framework_instance(
    request: BindingRequest,
    framework_type: FrameworkType,
) -> FrameworkDerivation:
    """Return the expression obtaining ``request`` through the binding's framework handle."""
    return FrameworkDerivation(
        source=DependencyExpression(request=request.with_kind(framework_type.request_kind)),
        request_kind=request.request_kind,
    )


def _framework_type(binding: Binding) -> FrameworkType:
    if binding.binding_type is BindingType.PRODUCTION:
        return FrameworkType.PRODUCER_NODE
    return FrameworkType.PROVIDER


def _framework_request_kind(binding: Binding) -> RequestKind:
    return _framework_type(binding).request_kind

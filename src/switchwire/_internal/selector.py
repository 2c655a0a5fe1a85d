from __future__ import annotations

# ruff: noqa: PLR0911
import logging

from switchwire._internal.creation import (
    FrameworkCreationExpressions,
    derive_from_framework_instance,
)
from switchwire._internal.direct import UnscopedDirectInstanceExpressions
from switchwire._internal.dispatcher import DispatcherAllocator
from switchwire._internal.encapsulation import MethodWrapper
from switchwire._internal.scoping import check_mode_for, needs_caching
from switchwire.bindings import Binding, BindingGraph, BindingKind, BindingType
from switchwire.component import ComponentImplementation, FieldInitialization
from switchwire.exceptions import SwitchwireContractViolationError, SwitchwireIllegalRequestError
from switchwire.expressions import (
    BindingExpression,
    BindingExpressionKind,
    DependencyExpression,
    Expression,
    FieldReference,
    ImmediateFuture,
    MembersInjectionInvocation,
    ScopedCreation,
)
from switchwire.keys import Key
from switchwire.requests import BindingRequest, FrameworkType, RequestKind

logger = logging.getLogger(__name__)

_DERIVED_PROVISION_REQUEST_KINDS = frozenset(
    {RequestKind.LAZY, RequestKind.PRODUCED, RequestKind.PROVIDER_OF_LAZY},
)


class BindingExpressionSelector:
    """Choose, per binding request, how the generated component obtains the value.

    One selector serves one generation pass over one component. Selected
    expressions are cached per request, so asking twice returns the same object.
    Fields, private methods and dispatcher entries are declared on the
    component as a side effect of selection.
    """

    def __init__(
        self,
        *,
        graph: BindingGraph,
        component: ComponentImplementation,
        fast_init: bool,
        field_initialization: FieldInitialization,
    ) -> None:
        self._graph = graph
        self._component = component
        self._fast_init = fast_init
        self._field_initialization = field_initialization

        self._direct_expressions = UnscopedDirectInstanceExpressions()
        self._creation_expressions = FrameworkCreationExpressions()
        self._dispatcher_allocator = DispatcherAllocator(graph, component)
        self._method_wrapper = MethodWrapper(component)

        self._expressions: dict[BindingRequest, BindingExpression] = {}
        self._framework_expressions: dict[tuple[Key, FrameworkType], BindingExpression] = {}
        self._resolving: list[BindingRequest] = []

    @property
    def expressions(self) -> dict[BindingRequest, BindingExpression]:
        """Return the selected expressions in selection order."""
        return dict(self._expressions)

    def get_binding_expression(self, request: BindingRequest) -> BindingExpression:
        """Return the expression satisfying ``request``.

        Args:
            request: Key and request kind to satisfy.

        Raises:
            SwitchwireBindingNotFoundError: If the graph has no binding for the key.
            SwitchwireIllegalRequestError: If the binding cannot be requested in
                this shape.
            SwitchwireContractViolationError: If the binding type is unsupported or
                the request re-enters its own selection.

        """
        cached = self._expressions.get(request)
        if cached is not None:
            return cached
        if request in self._resolving:
            chain = " -> ".join(str(item) for item in (*self._resolving, request))
            msg = f"Re-entrant binding expression request: {chain}."
            raise SwitchwireContractViolationError(msg)

        binding = self._graph.get(request.key)
        self._resolving.append(request)
        try:
            expression = self._select(binding, request)
        finally:
            self._resolving.pop()
        self._expressions[request] = expression
        return expression

    def _select(self, binding: Binding, request: BindingRequest) -> BindingExpression:
        binding_type = binding.binding_type
        if binding_type is BindingType.MEMBERS_INJECTION:
            if not request.is_request_kind(RequestKind.MEMBERS_INJECTION):
                msg = (
                    f"Members-injection binding {binding.key} cannot be requested as "
                    f"{request.request_kind.name}."
                )
                raise SwitchwireIllegalRequestError(msg)
            return self._members_injection_expression(binding, request)
        if binding_type is BindingType.PROVISION:
            return self._provision_expression(binding, request)
        if binding_type is BindingType.PRODUCTION:
            return self._production_expression(binding, request)

        msg = f"Unsupported binding type {binding_type!r} for {binding.key}."
        raise SwitchwireContractViolationError(msg)

    def _provision_expression(self, binding: Binding, request: BindingRequest) -> BindingExpression:
        request_kind = request.request_kind
        if request_kind is RequestKind.INSTANCE:
            return self._instance_expression(binding)
        if request_kind is RequestKind.PROVIDER:
            return self._provider_expression(binding, request)
        if request_kind in _DERIVED_PROVISION_REQUEST_KINDS:
            return self._derived_expression(request, FrameworkType.PROVIDER)
        if request_kind is RequestKind.PRODUCER:
            return self._producer_from_provider_expression(binding, request)
        if request_kind is RequestKind.FUTURE:
            return BindingExpression(
                kind=BindingExpressionKind.IMMEDIATE_FUTURE,
                request=request,
                expression=ImmediateFuture(
                    instance=DependencyExpression(request=request.with_kind(RequestKind.INSTANCE)),
                ),
            )
        if request_kind is RequestKind.MEMBERS_INJECTION:
            msg = f"Provision binding {binding.key} cannot be requested for members injection."
            raise SwitchwireIllegalRequestError(msg)

        msg = f"Unsupported request kind {request_kind!r} for provision binding {binding.key}."
        raise SwitchwireContractViolationError(msg)

    def _production_expression(
        self,
        binding: Binding,
        request: BindingRequest,
    ) -> BindingExpression:
        if request.is_request_kind(RequestKind.MEMBERS_INJECTION):
            msg = f"Production binding {binding.key} cannot be requested for members injection."
            raise SwitchwireIllegalRequestError(msg)
        if request.framework_type is not None:
            return self._framework_instance_expression(binding, request)
        return self._derived_expression(request, FrameworkType.PRODUCER_NODE)

    def _members_injection_expression(
        self,
        binding: Binding,
        request: BindingRequest,
    ) -> BindingExpression:
        return BindingExpression(
            kind=BindingExpressionKind.MEMBERS_INJECTION,
            request=request,
            expression=MembersInjectionInvocation(
                key=binding.key,
                arguments=tuple(
                    DependencyExpression(request=dependency) for dependency in binding.dependencies
                ),
            ),
            requires_method_encapsulation=bool(binding.dependencies),
        )

    def _instance_expression(self, binding: Binding) -> BindingExpression:
        request = BindingRequest(key=binding.key, request_kind=RequestKind.INSTANCE)
        direct_expression = self._direct_expressions.create(binding)
        if direct_expression is not None:
            if binding.kind is BindingKind.ASSISTED_INJECTION:
                return self._method_wrapper.assisted_private_method(
                    request,
                    binding,
                    direct_expression,
                )

            if self._may_use_direct_instance(binding):
                if direct_expression.requires_method_encapsulation:
                    return self._method_wrapper.wrap_in_method(
                        binding,
                        RequestKind.INSTANCE,
                        direct_expression,
                    )
                return direct_expression
        return self._derived_expression(request, FrameworkType.PROVIDER)

    def _provider_expression(self, binding: Binding, request: BindingRequest) -> BindingExpression:
        if binding.kind is BindingKind.DELEGATE and not needs_caching(binding, self._graph):
            delegate_expression = self.get_binding_expression(
                BindingRequest(key=binding.delegate_key, request_kind=RequestKind.PROVIDER),
            )
            return BindingExpression(
                kind=BindingExpressionKind.DELEGATE,
                request=request,
                expression=delegate_expression.expression,
                is_framework_instance=delegate_expression.is_framework_instance,
            )
        return self._framework_instance_expression(binding, request)

    def _producer_from_provider_expression(
        self,
        binding: Binding,
        request: BindingRequest,
    ) -> BindingExpression:
        cache_key = (binding.key, FrameworkType.PRODUCER_NODE)
        cached = self._framework_expressions.get(cache_key)
        if cached is not None:
            return cached
        field = self._component.shard_for(binding).add_field(
            key=binding.key,
            framework_type=FrameworkType.PRODUCER_NODE,
            initializer=self._creation_expressions.producer_from_provider(binding),
            initialization=self._field_initialization,
        )
        expression = BindingExpression(
            kind=BindingExpressionKind.FRAMEWORK_INSTANCE,
            request=request,
            expression=FieldReference(shard_name=field.shard_name, field_name=field.name),
            is_framework_instance=True,
        )
        self._framework_expressions[cache_key] = expression
        return expression

    def _derived_expression(
        self,
        request: BindingRequest,
        framework_type: FrameworkType,
    ) -> BindingExpression:
        return BindingExpression(
            kind=BindingExpressionKind.DERIVED_FROM_FRAMEWORK_INSTANCE,
            request=request,
            expression=derive_from_framework_instance(request, framework_type),
        )

    def _framework_instance_expression(
        self,
        binding: Binding,
        request: BindingRequest,
    ) -> BindingExpression:
        framework_type = (
            FrameworkType.PRODUCER_NODE
            if binding.binding_type is BindingType.PRODUCTION
            else FrameworkType.PROVIDER
        )
        cache_key = (binding.key, framework_type)
        cached = self._framework_expressions.get(cache_key)
        if cached is not None:
            return cached

        creation = self._creation_expressions.unscoped_creation(binding)
        static_factory = None
        if self._use_static_factory_creation(binding):
            static_factory = self._creation_expressions.static_factory(binding)

        if static_factory is not None:
            reference: Expression = static_factory
        else:
            creation_expression = creation.expression
            if (
                self._fast_init
                and creation.use_dispatcher
                and binding.binding_type is not BindingType.PRODUCTION
            ):
                creation_expression = self._dispatcher_creation_expression(
                    binding,
                    creation_expression,
                )
            if needs_caching(binding, self._graph):
                creation_expression = ScopedCreation(
                    check_mode=check_mode_for(binding),
                    creation=creation_expression,
                )
            field = self._component.shard_for(binding).add_field(
                key=binding.key,
                framework_type=framework_type,
                initializer=creation_expression,
                initialization=self._field_initialization,
            )
            reference = FieldReference(shard_name=field.shard_name, field_name=field.name)

        expression = BindingExpression(
            kind=BindingExpressionKind.FRAMEWORK_INSTANCE,
            request=request,
            expression=reference,
            is_framework_instance=True,
        )
        self._framework_expressions[cache_key] = expression
        return expression

    def _dispatcher_creation_expression(self, binding: Binding, default: Expression) -> Expression:
        instance_request = BindingRequest(key=binding.key, request_kind=RequestKind.INSTANCE)
        in_progress = {item.key for item in self._resolving if item.framework_type is not None}
        in_progress.add(binding.key)

        if self._dispatcher_allocator.payload_reenters(
            binding,
            in_progress=in_progress,
            inlines_instance=self._inlines_instance,
        ):
            logger.debug(
                "Dispatcher opt-in skipped for %s: payload re-enters its framework instance",
                binding.key,
            )
            return default

        instance_expression = self.get_binding_expression(instance_request)
        if instance_expression.is_derived_from_framework_instance:
            # Obtaining the instance would call back into this framework handle.
            unscoped_expression = self._direct_expressions.create(binding)
            if unscoped_expression is None:
                logger.debug(
                    "Dispatcher opt-in skipped for %s: no unscoped direct instance",
                    binding.key,
                )
                return default
            if unscoped_expression.requires_method_encapsulation:
                unscoped_expression = self._method_wrapper.private_method(
                    instance_request,
                    binding,
                    unscoped_expression,
                )
            payload = unscoped_expression
        else:
            payload = instance_expression

        invocation = self._dispatcher_allocator.new_creation_expression(binding, payload)
        logger.debug("Dispatcher entry %d registered for %s", invocation.entry_id, binding.key)
        return invocation

    def _may_use_direct_instance(self, binding: Binding) -> bool:
        # Assisted factories behave like providers, so default mode keeps them in a field.
        # Fast-init mode still inlines them.
        is_default_mode_assisted_factory = (
            binding.kind is BindingKind.ASSISTED_FACTORY and not self._fast_init
        )
        return not needs_caching(binding, self._graph) and not is_default_mode_assisted_factory

    def _inlines_instance(self, binding: Binding) -> bool:
        if binding.binding_type is not BindingType.PROVISION:
            return False
        if self._direct_expressions.create(binding) is None:
            return False
        if binding.kind is BindingKind.ASSISTED_INJECTION:
            return True
        return self._may_use_direct_instance(binding)

    def _use_static_factory_creation(self, binding: Binding) -> bool:
        # Fast-init prefers the dispatcher, except for collection factories shared across bindings.
        return not self._fast_init or binding.is_multibound

from __future__ import annotations

from switchwire import (
    Binding,
    BindingExpressionKind,
    BindingKind,
    BindingRequest,
    ComponentDescriptor,
    ComponentMethod,
    Key,
    RequestKind,
)
from switchwire._internal.encapsulation import MethodWrapper
from switchwire.component import ComponentImplementation, MethodKind
from switchwire.expressions import (
    BindingExpression,
    DependencyExpression,
    DirectInvocation,
    MethodInvocation,
)


class Clock:
    pass


class Service:
    pass


def _binding() -> Binding:
    return Binding(
        key=Key(Service),
        kind=BindingKind.INJECTION,
        dependencies=(BindingRequest(Key(Clock)),),
    )


def _direct(*, is_framework_instance: bool = False) -> BindingExpression:
    return BindingExpression(
        kind=BindingExpressionKind.DIRECT,
        request=BindingRequest(Key(Service)),
        expression=DirectInvocation(
            key=Key(Service),
            binding_kind=BindingKind.INJECTION,
            arguments=(DependencyExpression(request=BindingRequest(Key(Clock))),),
        ),
        requires_method_encapsulation=True,
        is_framework_instance=is_framework_instance,
    )


def _component(
    *methods: ComponentMethod,
    shard_assignment: dict[Key, str] | None = None,
) -> ComponentImplementation:
    return ComponentImplementation(
        ComponentDescriptor(name="AppComponent", methods=methods),
        shard_assignment=shard_assignment,
    )


def test_wrapping_is_idempotent() -> None:
    wrapper = MethodWrapper(_component())

    once = wrapper.wrap_in_method(_binding(), RequestKind.INSTANCE, _direct())
    twice = wrapper.wrap_in_method(_binding(), RequestKind.INSTANCE, once)

    assert twice is once
    assert once.kind is BindingExpressionKind.PRIVATE_METHOD


def test_wrapping_the_same_request_reuses_the_method() -> None:
    component = _component()
    wrapper = MethodWrapper(component)

    first = wrapper.wrap_in_method(_binding(), RequestKind.INSTANCE, _direct())
    second = wrapper.wrap_in_method(_binding(), RequestKind.INSTANCE, _direct())

    assert first == second
    assert [method.name for method in component.methods()] == ["get_service"]


def test_matching_component_method_is_implemented_directly() -> None:
    component = _component(ComponentMethod("service", BindingRequest(Key(Service))))
    wrapper = MethodWrapper(component)

    expression = wrapper.wrap_in_method(_binding(), RequestKind.INSTANCE, _direct())

    assert expression.kind is BindingExpressionKind.COMPONENT_METHOD
    assert expression.expression == MethodInvocation(
        shard_name="AppComponent",
        method_name="service",
    )
    method = component.method("AppComponent", "service")
    assert method.kind is MethodKind.COMPONENT
    assert method.body == _direct().expression


def test_component_method_for_other_request_kind_is_ignored() -> None:
    component = _component(
        ComponentMethod("service", BindingRequest(Key(Service), RequestKind.PROVIDER)),
    )
    wrapper = MethodWrapper(component)

    expression = wrapper.wrap_in_method(_binding(), RequestKind.INSTANCE, _direct())

    assert expression.kind is BindingExpressionKind.PRIVATE_METHOD


def test_binding_in_other_shard_gets_private_method_there() -> None:
    component = _component(
        ComponentMethod("service", BindingRequest(Key(Service))),
        shard_assignment={Key(Service): "ServiceShard"},
    )
    wrapper = MethodWrapper(component)

    expression = wrapper.wrap_in_method(_binding(), RequestKind.INSTANCE, _direct())

    assert expression.kind is BindingExpressionKind.PRIVATE_METHOD
    assert expression.expression == MethodInvocation(
        shard_name="ServiceShard",
        method_name="get_service",
    )
    assert component.component_shard.methods == ()


def test_framework_instance_flag_is_kept() -> None:
    wrapper = MethodWrapper(_component())

    expression = wrapper.private_method(
        BindingRequest(Key(Service)),
        _binding(),
        _direct(is_framework_instance=True),
    )

    assert expression.is_framework_instance

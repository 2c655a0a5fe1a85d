from __future__ import annotations

import logging
from typing import Any, cast

import pytest

from switchwire import (
    Binding,
    BindingGraph,
    BindingKind,
    BindingRequest,
    ComponentDescriptor,
    FieldInitialization,
    Key,
    RequestKind,
)
from switchwire._internal.selector import BindingExpressionSelector
from switchwire.component import ComponentImplementation
from switchwire.exceptions import SwitchwireContractViolationError
from switchwire.expressions import FactoryCreation, FieldReference


class Clock:
    pass


class Plugins:
    pass


class Injector:
    pass


def _selector(*bindings: Binding, fast_init: bool = False) -> BindingExpressionSelector:
    return BindingExpressionSelector(
        graph=BindingGraph(bindings),
        component=ComponentImplementation(ComponentDescriptor(name="AppComponent")),
        fast_init=fast_init,
        field_initialization=FieldInitialization.EAGER,
    )


def test_reentrant_request_is_a_contract_violation() -> None:
    selector = _selector(Binding(key=Key(Clock), kind=BindingKind.INJECTION))
    request = BindingRequest(Key(Clock), RequestKind.PROVIDER)
    selector._resolving.append(request)

    with pytest.raises(
        SwitchwireContractViolationError,
        match=r"Re-entrant binding expression request: PROVIDER\(Clock\) -> PROVIDER\(Clock\)",
    ):
        selector.get_binding_expression(request)


def test_unsupported_binding_type_is_a_contract_violation() -> None:
    binding = Binding(key=Key(Clock), kind=BindingKind.INJECTION)
    object.__setattr__(binding, "binding_type", "bogus")
    selector = _selector(binding)

    with pytest.raises(SwitchwireContractViolationError, match="Unsupported binding type"):
        selector.get_binding_expression(BindingRequest(Key(Clock)))


def test_failed_selection_is_not_cached() -> None:
    binding = Binding(key=Key(Clock), kind=BindingKind.INJECTION)
    object.__setattr__(binding, "binding_type", "bogus")
    selector = _selector(binding)

    with pytest.raises(SwitchwireContractViolationError):
        selector.get_binding_expression(BindingRequest(Key(Clock)))

    assert selector.expressions == {}
    assert selector._resolving == []


def test_expressions_are_kept_in_selection_order() -> None:
    selector = _selector(Binding(key=Key(Clock), kind=BindingKind.INJECTION))
    provider = BindingRequest(Key(Clock), RequestKind.PROVIDER)
    instance = BindingRequest(Key(Clock))

    selector.get_binding_expression(provider)
    selector.get_binding_expression(instance)

    assert list(selector.expressions) == [provider, instance]


def test_dispatcher_skipped_without_unscoped_direct_instance(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.DEBUG, logger="switchwire._internal.selector")
    selector = _selector(
        Binding(key=Key(Clock), kind=BindingKind.INJECTION),
        Binding(
            key=Key(Plugins),
            kind=BindingKind.MULTIBOUND_SET,
            dependencies=cast("Any", (BindingRequest(Key(Clock), RequestKind.PROVIDER),)),
        ),
        fast_init=True,
    )

    expression = selector.get_binding_expression(BindingRequest(Key(Plugins), RequestKind.PROVIDER))

    assert expression.expression == FieldReference(
        shard_name="AppComponent",
        field_name="plugins_provider",
    )
    assert "no unscoped direct instance" in caplog.text
    assert not selector._component.has_dispatcher


def test_members_injector_is_never_dispatched() -> None:
    selector = _selector(
        Binding(key=Key(Injector), kind=BindingKind.MEMBERS_INJECTOR),
        fast_init=True,
    )

    selector.get_binding_expression(BindingRequest(Key(Injector), RequestKind.PROVIDER))

    field = selector._component.field("AppComponent", "injector_provider")
    assert isinstance(field.initializer, FactoryCreation)
    assert not selector._component.has_dispatcher


def test_dispatcher_registration_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="switchwire._internal.selector")
    selector = _selector(Binding(key=Key(Clock), kind=BindingKind.INJECTION), fast_init=True)

    selector.get_binding_expression(BindingRequest(Key(Clock), RequestKind.PROVIDER))

    assert "Dispatcher entry 0 registered for Clock" in caplog.text

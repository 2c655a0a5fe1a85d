"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from switchwire import (
    Binding,
    BindingGraph,
    BindingKind,
    BindingRequest,
    ComponentDescriptor,
    ComponentGenerator,
    Key,
    RequestKind,
    SwitchwireBindingNotFoundError,
    SwitchwireContractViolationError,
    SwitchwireError,
    SwitchwireIllegalRequestError,
    SwitchwireInvalidBindingError,
    SwitchwireInvalidConfigurationError,
)


class Widget:
    pass


@pytest.mark.parametrize(
    "error_type",
    [
        SwitchwireBindingNotFoundError,
        SwitchwireContractViolationError,
        SwitchwireIllegalRequestError,
        SwitchwireInvalidBindingError,
        SwitchwireInvalidConfigurationError,
    ],
)
def test_every_error_is_a_switchwire_error(error_type: type[Exception]) -> None:
    assert issubclass(error_type, SwitchwireError)


def test_contract_violation_is_an_assertion_error() -> None:
    assert issubclass(SwitchwireContractViolationError, AssertionError)


def test_illegal_request_is_a_value_error() -> None:
    generator = ComponentGenerator(
        BindingGraph([Binding(key=Key(Widget), kind=BindingKind.INJECTION)]),
        ComponentDescriptor(name="AppComponent"),
    )

    with pytest.raises(ValueError, match="members injection"):
        generator.get_binding_expression(
            BindingRequest(Key(Widget), RequestKind.MEMBERS_INJECTION),
        )

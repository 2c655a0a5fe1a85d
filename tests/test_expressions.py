from __future__ import annotations

from switchwire import BindingKind, BindingRequest, CheckMode, FrameworkType, Key, RequestKind
from switchwire.expressions import (
    DependencyExpression,
    FactoryCreation,
    FieldReference,
    ScopedCreation,
    iter_dependency_requests,
    walk_expression,
)


class Clock:
    pass


class Service:
    pass


def _creation() -> ScopedCreation:
    return ScopedCreation(
        check_mode=CheckMode.DOUBLE_CHECK,
        creation=FactoryCreation(
            key=Key(Service),
            binding_kind=BindingKind.INJECTION,
            framework_type=FrameworkType.PROVIDER,
            arguments=(
                DependencyExpression(request=BindingRequest(Key(Clock), RequestKind.PROVIDER)),
                FieldReference(shard_name="AppComponent", field_name="service_provider"),
                DependencyExpression(request=BindingRequest(Key(Clock), RequestKind.LAZY)),
            ),
        ),
    )


def test_walk_is_depth_first_in_argument_order() -> None:
    nodes = list(walk_expression(_creation()))

    assert [type(node).__name__ for node in nodes] == [
        "ScopedCreation",
        "FactoryCreation",
        "DependencyExpression",
        "FieldReference",
        "DependencyExpression",
    ]


def test_dependency_requests_do_not_follow_references() -> None:
    assert list(iter_dependency_requests(_creation())) == [
        BindingRequest(Key(Clock), RequestKind.PROVIDER),
        BindingRequest(Key(Clock), RequestKind.LAZY),
    ]


def test_equal_trees_compare_equal() -> None:
    assert _creation() == _creation()
    assert hash(_creation()) == hash(_creation())

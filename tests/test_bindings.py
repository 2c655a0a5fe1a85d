from __future__ import annotations

from typing import Any, cast

import pytest

from switchwire import (
    Binding,
    BindingGraph,
    BindingKind,
    BindingRequest,
    BindingType,
    Key,
    RequestKind,
    Scope,
    SwitchwireBindingNotFoundError,
    SwitchwireInvalidBindingError,
)


class Clock:
    pass


class Repository:
    pass


class SqlRepository:
    pass


def test_bare_key_dependencies_become_instance_requests() -> None:
    binding = Binding(
        key=Key(Repository),
        kind=BindingKind.INJECTION,
        dependencies=cast("Any", (Key(Clock), BindingRequest(Key(Clock), RequestKind.LAZY))),
    )

    assert binding.dependencies == (
        BindingRequest(Key(Clock), RequestKind.INSTANCE),
        BindingRequest(Key(Clock), RequestKind.LAZY),
    )


def test_delegate_key_is_the_single_dependency() -> None:
    binding = Binding(
        key=Key(Repository),
        kind=BindingKind.DELEGATE,
        dependencies=cast("Any", (Key(SqlRepository),)),
    )

    assert binding.delegate_key == Key(SqlRepository)


def test_delegate_key_on_non_delegate_binding_fails() -> None:
    binding = Binding(key=Key(Clock), kind=BindingKind.INJECTION)

    with pytest.raises(SwitchwireInvalidBindingError, match="not a delegate binding"):
        _ = binding.delegate_key


@pytest.mark.parametrize(
    ("kwargs", "match"),
    [
        (
            {"key": Key(Repository), "kind": BindingKind.DELEGATE},
            "exactly one dependency",
        ),
        (
            {
                "key": Key(Repository),
                "kind": BindingKind.INJECTION,
                "binding_type": BindingType.MEMBERS_INJECTION,
            },
            "members injection type and kind go together",
        ),
        (
            {"key": Key(Repository), "kind": BindingKind.PRODUCTION},
            "production type and kind go together",
        ),
        (
            {
                "key": Key(Repository),
                "kind": BindingKind.INJECTION,
                "assisted_parameters": ("size",),
            },
            "Only assisted-injection bindings take assisted parameters",
        ),
        (
            {
                "key": Key(Repository),
                "kind": BindingKind.ASSISTED_INJECTION,
                "scope": Scope.SINGLETON,
            },
            "cannot be scoped",
        ),
        (
            {
                "key": Key(Repository),
                "kind": BindingKind.ASSISTED_INJECTION,
                "assisted_parameters": ("not valid",),
            },
            "not a valid identifier",
        ),
        (
            {"key": Repository, "kind": BindingKind.INJECTION},
            "Binding key must be a Key",
        ),
        (
            {"key": Key(Repository), "kind": BindingKind.INJECTION, "dependencies": (Clock,)},
            "must be a Key or BindingRequest",
        ),
    ],
)
def test_invalid_bindings_are_rejected(kwargs: dict[str, Any], match: str) -> None:
    with pytest.raises(SwitchwireInvalidBindingError, match=match):
        Binding(**kwargs)


def test_graph_lookup_and_override() -> None:
    first = Binding(key=Key(Clock), kind=BindingKind.INJECTION)
    replacement = Binding(key=Key(Clock), kind=BindingKind.PROVISION)
    graph = BindingGraph([first])

    assert graph.get(Key(Clock)) is first
    assert Key(Clock) in graph

    graph.add(replacement)

    assert graph.get(Key(Clock)) is replacement
    assert len(graph) == 1
    assert list(graph) == [replacement]


def test_graph_find_returns_none_for_missing_key() -> None:
    graph = BindingGraph()

    assert graph.find(Key(Clock)) is None
    with pytest.raises(SwitchwireBindingNotFoundError, match="No binding for key Clock"):
        graph.get(Key(Clock))


def test_graph_delegate_binding() -> None:
    target = Binding(key=Key(SqlRepository), kind=BindingKind.INJECTION)
    alias = Binding(
        key=Key(Repository),
        kind=BindingKind.DELEGATE,
        dependencies=cast("Any", (Key(SqlRepository),)),
    )
    graph = BindingGraph([target, alias])

    assert graph.delegate_binding(alias) is target

from __future__ import annotations

from dataclasses import dataclass, field

from switchwire import BaseScope, CheckMode, Scope, Scopes
from switchwire.scope import REUSABLE_STRENGTH, STRONG_STRENGTH, scope_strength


@dataclass(frozen=True)
class _AppScopes(Scopes):
    ACTIVITY: BaseScope = field(default=BaseScope(STRONG_STRENGTH))
    REQUEST: BaseScope = field(default=BaseScope(5))
    SESSION: BaseScope = field(default=BaseScope(REUSABLE_STRENGTH))


def test_scope_strength_order() -> None:
    assert scope_strength(None) < scope_strength(Scope.REUSABLE) < scope_strength(Scope.SINGLETON)


def test_scope_check_modes() -> None:
    assert Scope.REUSABLE.check_mode is CheckMode.SINGLE_CHECK
    assert Scope.SINGLETON.check_mode is CheckMode.DOUBLE_CHECK


def test_scope_repr_uses_declared_name() -> None:
    assert repr(Scope.SINGLETON) == "Scope.SINGLETON(2, reusable=False)"


def test_reusable_subset_is_collected() -> None:
    assert Scope.reusable == (Scope.REUSABLE,)


def test_custom_scopes_are_as_strong_as_singleton() -> None:
    scopes = _AppScopes()

    assert list(scopes) == [
        Scope.REUSABLE,
        Scope.SINGLETON,
        scopes.ACTIVITY,
        scopes.REQUEST,
        scopes.SESSION,
    ]
    assert scope_strength(scopes.ACTIVITY) == scope_strength(Scope.SINGLETON)
    assert scopes.ACTIVITY.check_mode is CheckMode.DOUBLE_CHECK
    assert scopes.ACTIVITY.scope_name == "ACTIVITY"


def test_scope_strength_ignores_declared_value() -> None:
    scopes = _AppScopes()

    assert scope_strength(scopes.REQUEST) == scope_strength(Scope.SINGLETON)
    assert scope_strength(scopes.SESSION) == scope_strength(Scope.SINGLETON)
    assert scope_strength(scopes.SESSION) > scope_strength(Scope.REUSABLE)

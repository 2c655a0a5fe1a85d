from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from switchwire.check_mode import CheckMode

UNSCOPED_STRENGTH = 0
REUSABLE_STRENGTH = 1
STRONG_STRENGTH = 2


class BaseScope(int):
    """Represent a caching scope attached to a binding.

    A scope behaves like an ``int`` carrying its declared ``strength``. Caching
    decisions rank scopes through ``scope_strength`` instead: unscoped bindings
    count as ``0``, reusable scopes as ``1`` and every other scope as ``2``.
    ``reusable`` marks scopes whose cached value may be computed more than once
    under concurrent first access.
    """

    def __new__(cls, *args: Any, **_kwargs: Any) -> BaseScope:  # noqa: PYI034
        return super().__new__(cls, *args)

    def __init__(self, strength: int, *, reusable: bool = False) -> None:
        self.reusable = reusable
        self.strength = strength

    def __set_name__(
        self,
        owner: type[BaseScopes],
        name: str,
    ) -> None:
        self.owner = owner
        self.scope_name = name

    def __repr__(self) -> str:
        return f"Scope.{self.scope_name}({self.strength}, reusable={self.reusable})"

    @property
    def check_mode(self) -> CheckMode:
        """Return the caching decorator used for bindings in this scope."""
        if self.reusable:
            return CheckMode.SINGLE_CHECK
        return CheckMode.DOUBLE_CHECK


@dataclass(frozen=True, kw_only=True)
class BaseScopes:
    """Collect scope constants and derive helper subsets.

    The ``reusable`` tuple is populated automatically from declared scope
    members.
    """

    reusable: tuple[BaseScope, ...] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "reusable",
            tuple(scope for scope in self if scope.reusable),
        )

    def __iter__(self) -> Iterator[BaseScope]:
        for value in self.__dict__.values():
            if isinstance(value, BaseScope):
                yield value


@dataclass(frozen=True)
class Scopes(BaseScopes):
    """Define the built-in caching scopes.

    Subclass to declare custom scopes; any non-reusable scope is as strong as
    ``SINGLETON``.

    Examples:
        .. code-block:: python

            @dataclass(frozen=True)
            class AppScopes(Scopes):
                ACTIVITY: BaseScope = field(default=BaseScope(STRONG_STRENGTH))

    """

    REUSABLE: BaseScope = field(default=BaseScope(REUSABLE_STRENGTH, reusable=True))
    SINGLETON: BaseScope = field(default=BaseScope(STRONG_STRENGTH))


Scope = Scopes()
"""Provide the default scope constants used by bindings.

Examples:
    .. code-block:: python

        binding = Binding(key=Key(Database), kind=BindingKind.INJECTION, scope=Scope.SINGLETON)
"""


def scope_strength(scope: BaseScope | None) -> int:
    """Return the caching strength of ``scope``.

    Only ``reusable`` matters: unscoped is weakest, reusable scopes come next
    and every other scope ranks with ``SINGLETON`` whatever its declared value.
    """
    if scope is None:
        return UNSCOPED_STRENGTH
    if scope.reusable:
        return REUSABLE_STRENGTH
    return STRONG_STRENGTH

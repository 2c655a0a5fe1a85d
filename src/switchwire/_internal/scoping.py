from __future__ import annotations

from switchwire.bindings import Binding, BindingGraph, BindingKind
from switchwire.check_mode import CheckMode
from switchwire.exceptions import SwitchwireContractViolationError
from switchwire.scope import scope_strength


def needs_caching(binding: Binding, graph: BindingGraph) -> bool:
    """Return whether the component must cache the value of ``binding``.

    Scoped bindings are cached, except delegate bindings whose scope is no
    stronger than the scope of the binding they alias: caching those again
    adds nothing.

    Args:
        binding: Binding to inspect.
        graph: Graph used to look up the aliased binding of delegates.

    """
    if binding.scope is None:
        return False
    if binding.kind is BindingKind.DELEGATE:
        return is_delegate_scope_stronger_than_dependency_scope(binding, graph)
    return True


def is_delegate_scope_stronger_than_dependency_scope(binding: Binding, graph: BindingGraph) -> bool:
    delegate = graph.delegate_binding(binding)
    return scope_strength(binding.scope) > scope_strength(delegate.scope)


def check_mode_for(binding: Binding) -> CheckMode:
    """Return the caching decorator for a scoped binding."""
    if binding.scope is None:
        msg = f"Binding {binding.key} is unscoped and has no caching decorator."
        raise SwitchwireContractViolationError(msg)
    return binding.scope.check_mode

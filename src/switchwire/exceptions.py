class SwitchwireError(Exception):
    """Represent a base class for all switchwire-specific failures.

    Catch this type when you want to handle any switchwire error path without
    matching each concrete exception class individually.
    """


class SwitchwireContractViolationError(SwitchwireError, AssertionError):
    """Signal a defect in the binding graph handed to the generator.

    Raised when a binding carries a ``BindingType`` the generator has no case
    for, when a request re-enters its own resolution while it is still being
    built, or when a binding is registered twice with the component
    dispatcher.

    These failures are never recoverable. Fix the graph construction step that
    produced the offending binding.
    """


class SwitchwireIllegalRequestError(SwitchwireError, ValueError):
    """Signal a request kind that the binding shape cannot satisfy.

    Raised by ``ComponentGenerator.get_binding_expression`` when, for example,
    a members-injection binding is requested as an instance, or a provision
    or production binding is requested for members injection.

    Callers usually surface this as a diagnostic against the dependant that
    issued the request.
    """


class SwitchwireBindingNotFoundError(SwitchwireError):
    """Signal that a requested key has no binding in the graph.

    Raised by ``BindingGraph.get`` and, transitively, by expression selection
    when a dependency key is missing.

    Typical fix is adding the binding to the graph before generation.
    """


class SwitchwireInvalidBindingError(SwitchwireError):
    """Signal a malformed binding description.

    Raised while constructing a ``Binding``, for example when a delegate binding
    does not declare exactly one dependency, when binding type and binding kind
    disagree, or when assisted parameters are attached to a non-assisted
    binding.
    """


class SwitchwireInvalidConfigurationError(SwitchwireError):
    """Signal invalid ``ComponentGenerator`` options.

    Raised for unknown field initialization policies, non-positive
    ``keys_per_shard`` values, or shard names that are not valid identifiers.
    """

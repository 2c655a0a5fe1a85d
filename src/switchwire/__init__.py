from switchwire.bindings import Binding, BindingGraph, BindingKind, BindingType
from switchwire.check_mode import CheckMode
from switchwire.component import ComponentDescriptor, ComponentMethod, FieldInitialization
from switchwire.exceptions import (
    SwitchwireBindingNotFoundError,
    SwitchwireContractViolationError,
    SwitchwireError,
    SwitchwireIllegalRequestError,
    SwitchwireInvalidBindingError,
    SwitchwireInvalidConfigurationError,
)
from switchwire.expressions import BindingExpression, BindingExpressionKind
from switchwire.generator import ComponentGenerator, GeneratedComponent
from switchwire.keys import Key, Qualifier
from switchwire.requests import BindingRequest, FrameworkType, RequestKind
from switchwire.scope import BaseScope, Scope, Scopes

__all__ = [
    "BaseScope",
    "Binding",
    "BindingExpression",
    "BindingExpressionKind",
    "BindingGraph",
    "BindingKind",
    "BindingRequest",
    "BindingType",
    "CheckMode",
    "ComponentDescriptor",
    "ComponentGenerator",
    "ComponentMethod",
    "FieldInitialization",
    "FrameworkType",
    "GeneratedComponent",
    "Key",
    "Qualifier",
    "RequestKind",
    "Scope",
    "Scopes",
    "SwitchwireBindingNotFoundError",
    "SwitchwireContractViolationError",
    "SwitchwireError",
    "SwitchwireIllegalRequestError",
    "SwitchwireInvalidBindingError",
    "SwitchwireInvalidConfigurationError",
]

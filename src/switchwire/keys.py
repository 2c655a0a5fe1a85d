from __future__ import annotations

import keyword
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, Any, NamedTuple, get_args, get_origin

if TYPE_CHECKING:
    from typing_extensions import Self

_ANNOTATED_MARKER_MIN_ARGS = 2
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_NON_IDENTIFIER_CHARS = re.compile(r"\W+")


class Qualifier(NamedTuple):
    """Differentiate multiple bindings for the same base type.

    Attach ``Qualifier`` metadata to ``typing.Annotated`` so the annotated type
    and the bare type become distinct keys.

    Examples:
        .. code-block:: python

            from typing import Annotated, TypeAlias


            class Database: ...


            ReplicaDb: TypeAlias = Annotated[Database, Qualifier("replica")]
            key = Key.from_annotation(ReplicaDb)

    """

    value: Any


@dataclass(frozen=True, slots=True)
class Key:
    """Identify a requested dependency by type and optional qualifier."""

    type: Any
    qualifier: Any = None

    @classmethod
    def from_annotation(cls, annotation: Any) -> Self:
        """Build a key from a type or an ``Annotated[T, Qualifier(...)]`` annotation.

        Args:
            annotation: Plain type, or annotated type carrying a ``Qualifier``.

        """
        if get_origin(annotation) is not Annotated:
            return cls(type=annotation)
        annotation_args = get_args(annotation)
        if len(annotation_args) < _ANNOTATED_MARKER_MIN_ARGS:
            return cls(type=annotation)
        qualifier = next(
            (item for item in annotation_args[1:] if isinstance(item, Qualifier)),
            None,
        )
        if qualifier is None:
            return cls(type=annotation)
        return cls(type=annotation_args[0], qualifier=qualifier.value)

    @property
    def identifier(self) -> str:
        """Return a snake_case identifier stem for members generated for this key."""
        stem = _snake_case(getattr(self.type, "__name__", None) or str(self.type))
        if self.qualifier is not None:
            stem = f"{_snake_case(str(self.qualifier))}_{stem}"
        if not stem or not stem.isidentifier():
            stem = f"key_{stem}"
        if keyword.iskeyword(stem):
            stem = f"{stem}_"
        return stem

    def __str__(self) -> str:
        type_name = getattr(self.type, "__qualname__", None) or repr(self.type)
        if self.qualifier is None:
            return type_name
        return f"@{self.qualifier!r} {type_name}"


def _snake_case(value: str) -> str:
    value = _CAMEL_BOUNDARY.sub("_", value)
    value = _NON_IDENTIFIER_CHARS.sub("_", value)
    return value.strip("_").lower()

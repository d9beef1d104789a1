"""
Bound value handling.

Turns the caller's bound-value mapping into tagged parameters and then into
the parameter object a DB-API ``cursor.execute()`` accepts.

Usage:
    bindings = bind_values({"name": "Ann", 5: 10})
    cursor.execute(query, bindings.parameters())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .exceptions import InvalidArgumentError

Placeholder = Union[int, str]
Scalar = Union[None, bool, int, float, str]
BoundValues = Union[Mapping[Any, Scalar], Sequence[Scalar]]


class ParamType(str, Enum):
    """Native bind type of a value."""

    NULL = "null"
    BOOL = "bool"
    INT = "int"
    STR = "str"


def param_type(placeholder: Placeholder, value: Any) -> ParamType:
    """Return the bind type of ``value`` or raise InvalidArgumentError."""
    if value is None:
        return ParamType.NULL
    # bool is a subclass of int, so it must be checked first
    if isinstance(value, bool):
        return ParamType.BOOL
    if isinstance(value, int):
        return ParamType.INT
    if isinstance(value, (float, str)):
        return ParamType.STR
    raise InvalidArgumentError.for_value(placeholder, value)


@dataclass(frozen=True)
class BoundParameter:
    """A value resolved to its placeholder and bind type."""

    placeholder: Placeholder
    value: Scalar
    type: ParamType

    @classmethod
    def create(cls, placeholder: Placeholder, value: Any) -> "BoundParameter":
        return cls(placeholder, value, param_type(placeholder, value))

    @property
    def native(self) -> Scalar:
        """The value converted to its bind type."""
        if self.type is ParamType.NULL:
            return None
        if self.type is ParamType.BOOL:
            return bool(self.value)
        if self.type is ParamType.INT:
            return int(self.value)
        return str(self.value)


@dataclass
class Bindings:
    """Ordered set of bound parameters for one statement."""

    params: List[BoundParameter] = field(default_factory=list)

    def bind(self, placeholder: Placeholder, value: Any) -> None:
        self.params.append(BoundParameter.create(placeholder, value))

    @property
    def has_named(self) -> bool:
        return any(isinstance(p.placeholder, str) for p in self.params)

    def parameters(self) -> Union[List[Scalar], Dict[str, Scalar]]:
        """
        Shape the parameters for ``cursor.execute()``.

        All-positional bindings become a list in placeholder order. As soon as
        one named placeholder is present a dict is returned, with positional
        entries keyed by their number (for ``?1`` / ``:1`` style placeholders).
        """
        if not self.has_named:
            return [p.native for p in self.params]
        return {str(p.placeholder): p.native for p in self.params}

    def __len__(self) -> int:
        return len(self.params)


def _placeholder_name(name: str) -> str:
    return name[1:] if name.startswith(":") else name


def bind_values(values: Optional[BoundValues]) -> Bindings:
    """
    Resolve bound values to placeholders and bind types.

    Args:
        values: mapping of placeholder name or number to value, or a plain
                sequence of positional values. Numeric keys are not trusted:
                the entry's 1-based position in the mapping is used instead.
                Floats are bound as strings: only column affinity turns them
                back into numbers, so ``SELECT ?`` with 1.5 yields "1.5" and
                SQLite compares them as text (``? > 10`` is true for 5.0).

    Raises:
        InvalidArgumentError: a value is not null, bool, int, float or str.
    """
    bindings = Bindings()
    if values is None:
        return bindings

    if isinstance(values, Mapping):
        items = values.items()
    elif isinstance(values, Sequence) and not isinstance(values, (str, bytes)):
        items = enumerate(values)
    else:
        raise InvalidArgumentError(
            f"Bound values expected to be a mapping or a sequence, a {type(values).__name__} given",
            value_type=type(values).__name__,
        )

    for number, (key, value) in enumerate(items, start=1):
        placeholder = _placeholder_name(key) if isinstance(key, str) else number
        bindings.bind(placeholder, value)

    return bindings

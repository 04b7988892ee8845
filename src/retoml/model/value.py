"""Scalar values and the ``Value`` union.

Every value a key can hold is one of seven kinds.  The five scalar kinds
share one wrapper, ``Formatted``, which pairs the Python value with its
source spelling and decor; the two container kinds are ``Array`` and
``InlineTable``.  Code that only needs the shared capabilities of a value
(its decor, a type name for error messages, re-decorating) can use them
through any of the three classes without caring which one it holds.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar, Union

from retoml.encode.strings import scalar_repr
from retoml.model.datetime import Datetime
from retoml.model.repr import Decor, Repr

if TYPE_CHECKING:
    from retoml.model.array import Array
    from retoml.model.inline_table import InlineTable

T = TypeVar("T", str, int, float, bool, Datetime)

Scalar = Union[str, int, float, bool, Datetime]


@dataclass(slots=True)
class Formatted(Generic[T]):
    """A scalar value with its source representation and decor.

    Parameters
    ----------
    value:
        The decoded value: ``str``, ``int``, ``float``, ``bool`` or
        ``Datetime``.
    repr:
        The exact source spelling, or None for programmatic values.
    decor:
        Surrounding whitespace and comments.
    """

    value: T
    repr: Repr | None = None
    decor: Decor = field(default_factory=Decor)

    def type_name(self) -> str:
        """Name of the value's kind, as used in error messages."""
        # bool before int: bool is an int subclass
        if isinstance(self.value, bool):
            return "boolean"
        if isinstance(self.value, str):
            return "string"
        if isinstance(self.value, int):
            return "integer"
        if isinstance(self.value, float):
            return "float"
        return "datetime"

    def to_repr(self) -> Repr:
        """Return the stored representation, or synthesize the canonical one."""
        if self.repr is not None:
            return self.repr
        return Repr(scalar_repr(self.value))

    def display_repr(self) -> str:
        """Return the text the encoder writes for this value."""
        return self.to_repr().as_raw()

    def decorated(self, prefix: str, suffix: str) -> "Formatted[T]":
        """Replace the decor and return ``self``."""
        self.decor = Decor(prefix, suffix)
        return self

    def format(self) -> None:
        """Reset to the canonical representation and clear decor."""
        self.repr = Repr(scalar_repr(self.value))
        self.decor.clear()

    def copy(self) -> "Formatted[T]":
        return Formatted(self.value, self.repr, self.decor.copy())

    def __str__(self) -> str:
        from retoml.encode.encoder import encode_value

        return encode_value(self, ("", ""))


Value = Union["Formatted[Scalar]", "Array", "InlineTable"]


def is_value(obj: object) -> bool:
    """Return True if ``obj`` is one of the seven TOML value kinds."""
    from retoml.model.array import Array
    from retoml.model.inline_table import InlineTable

    return isinstance(obj, (Formatted, Array, InlineTable))

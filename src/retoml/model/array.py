"""TOML arrays: ``[1, 2, 3]``."""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any

from retoml.model.repr import Decor

if TYPE_CHECKING:
    from retoml.model.value import Value


class Array:
    """An ordered list of values with the formatting around them.

    Each element's decor holds the whitespace, newlines and comments
    before and after it; ``trailing`` holds what follows the last element
    (and its optional comma) up to the closing bracket.

    Parameters
    ----------
    values:
        Initial elements.  Plain Python values are converted.
    """

    __slots__ = ("_values", "trailing", "trailing_comma", "decor")

    def __init__(self, values: Iterable[Any] | None = None) -> None:
        from retoml.model.convert import value_from

        self._values: list[Value] = [value_from(v) for v in values or ()]
        self.trailing: str = ""
        self.trailing_comma: bool = False
        self.decor: Decor = Decor()

    @classmethod
    def from_values(cls, values: list["Value"], trailing: str = "", trailing_comma: bool = False) -> "Array":
        """Build an array from already-parsed values without conversion."""
        array = cls()
        array._values = values
        array.trailing = trailing
        array.trailing_comma = trailing_comma
        return array

    def type_name(self) -> str:
        return "array"

    def decorated(self, prefix: str, suffix: str) -> "Array":
        """Replace the decor and return ``self``."""
        self.decor = Decor(prefix, suffix)
        return self

    def format(self) -> None:
        """Reset to the default one-line layout: ``[a, b, c]``."""
        for value in self._values:
            value.decor.clear()
        self.trailing = ""
        self.trailing_comma = False

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator["Value"]:
        return iter(self._values)

    def __getitem__(self, index: int) -> "Value":
        return self._values[index]

    def __setitem__(self, index: int, value: Any) -> None:
        from retoml.model.convert import value_from

        old = self._values[index]
        new = value_from(value)
        new.decor = old.decor.copy()
        self._values[index] = new

    def __delitem__(self, index: int) -> None:
        del self._values[index]
        if not self._values:
            self.trailing_comma = False

    def append(self, value: Any) -> None:
        """Append a value, converting plain Python values."""
        from retoml.model.convert import value_from

        self._values.append(value_from(value))

    def is_empty(self) -> bool:
        return not self._values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Array):
            return NotImplemented
        return self._values == other._values

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Array({self._values!r})"

    def __str__(self) -> str:
        from retoml.encode.encoder import encode_value

        return encode_value(self, ("", ""))

"""retoml encoder module.

Exports the ``TomlEncoder`` class and the ``encode_*`` convenience
functions.  The encoder depends on the model, which itself uses
``retoml.encode.strings``; the names below are therefore resolved on
first access rather than at import time.
"""
from __future__ import annotations

from typing import Any

from retoml.encode.strings import StringStyle, float_repr, scalar_repr, to_string_repr

_ENCODER_NAMES = frozenset(
    {"TomlEncoder", "encode_document", "encode_value", "encode_key_path", "encode_table_body"}
)


def __getattr__(name: str) -> Any:
    if name in _ENCODER_NAMES:
        from retoml.encode import encoder

        return getattr(encoder, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "TomlEncoder",
    "encode_document",
    "encode_value",
    "encode_key_path",
    "encode_table_body",
    "StringStyle",
    "to_string_repr",
    "float_repr",
    "scalar_repr",
]

from __future__ import annotations

from typing import Any

import orjson

__all__ = ["dumps", "loads"]


def dumps(obj: Any, *, indent: bool = False) -> str:
    """Serialize *obj* to a ``str`` using orjson (bytes → str).

    numpy arrays and scalars are serialized natively.
    """
    option = orjson.OPT_SERIALIZE_NUMPY
    if indent:
        option |= orjson.OPT_INDENT_2
    return orjson.dumps(obj, option=option).decode()


loads = orjson.loads

"""
Import JSON-like data as ArgumentValues.

Objects become pair lists with keys sorted by their string form (then by
type name when two keys stringify alike), so the same logical object always
renders the same SQL no matter how its keys were inserted.
"""

import json
import logging
import math
from collections.abc import Mapping
from typing import Any

from querykit.arguments import INT64_MAX, INT64_MIN, ArgumentKind, ArgumentValue
from querykit.exceptions import UnsupportedDynamicType

logger = logging.getLogger(__name__)


def from_dynamic(value: Any) -> ArgumentValue:
    """
    Convert a JSON-like value into an ArgumentValue.

    Args:
        value: dict / list / tuple / str / bool / int / float / None,
            nested arbitrarily

    Returns:
        ArgumentValue mirroring the structure of ``value``

    Raises:
        UnsupportedDynamicType: For any other type, integers outside the
            64-bit range, or non-finite floats
    """
    if isinstance(value, Mapping):
        keys = sorted(value.keys(), key=lambda key: (str(key), type(key).__name__))
        return ArgumentValue(
            ArgumentKind.PAIR_LIST,
            tuple((str(key), from_dynamic(value[key])) for key in keys)
        )
    if value is None:
        return ArgumentValue.null()
    if isinstance(value, (list, tuple)):
        return ArgumentValue(ArgumentKind.LIST, tuple(from_dynamic(item) for item in value))
    if isinstance(value, str):
        return ArgumentValue.string(value)
    if isinstance(value, bool):
        return ArgumentValue.boolean(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise UnsupportedDynamicType(f"Non-finite double {value!r} cannot be imported")
        return ArgumentValue.double(value)
    if isinstance(value, int):
        if not INT64_MIN <= value <= INT64_MAX:
            raise UnsupportedDynamicType(f"Integer {value} does not fit in 64 bits")
        return ArgumentValue.integer(value)
    raise UnsupportedDynamicType(
        f"Dynamic type {type(value).__name__} doesn't match to accepted ones"
    )


def from_json(text: str) -> ArgumentValue:
    """Parse JSON text and import it with from_dynamic()."""
    logger.debug(f"Importing JSON argument ({len(text)} chars)")
    return from_dynamic(json.loads(text))

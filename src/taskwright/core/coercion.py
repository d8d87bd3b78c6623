"""Conversion of raw input values to their declared scalar type."""

from __future__ import annotations

import logging
import re

from taskwright.core.errors import TypeCoercionError
from taskwright.core.models import InputSpec, InputType, ScalarValue

logger = logging.getLogger(__name__)

_DECIMAL = re.compile(r"[+-]?[0-9]+")

_NATIVE_TYPES: dict[InputType, type] = {
    InputType.STRING: str,
    InputType.INTEGER: int,
    InputType.BOOLEAN: bool,
}


def _matches(value: object, target: InputType) -> bool:
    # bool is a subclass of int but never a valid integer input
    if target is InputType.INTEGER and isinstance(value, bool):
        return False
    return isinstance(value, _NATIVE_TYPES[target])


def coerce(raw: object, spec: InputSpec) -> ScalarValue:
    """Convert `raw` to the declared type of `spec`.

    Values whose runtime type already matches are returned unchanged.
    Raises UnsupportedInputType or TypeCoercionError.
    """

    target = spec.input_type()
    if _matches(raw, target):
        return raw  # type: ignore[return-value]

    logger.debug(
        "Converting input value",
        extra={"input": spec.name, "type": target.value, "raw": repr(raw)},
    )

    if target is InputType.STRING:
        if isinstance(raw, bool):
            return "true" if raw else "false"
        if isinstance(raw, int):
            return str(raw)
        raise TypeCoercionError(spec.name, raw, target.value)

    if not isinstance(raw, str):
        raise TypeCoercionError(spec.name, raw, target.value)

    if target is InputType.INTEGER:
        # int() alone would also accept "1_000" and surrounding whitespace
        if not _DECIMAL.fullmatch(raw):
            raise TypeCoercionError(spec.name, raw, target.value)
        return int(raw)

    if raw == "true":
        return True
    if raw == "false":
        return False
    raise TypeCoercionError(spec.name, raw, target.value)

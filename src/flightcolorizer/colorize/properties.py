from __future__ import annotations

from dataclasses import dataclass

from flightcolorizer.telemetry.source import (
    INVALID_PROPERTY_INDEX,
    PROP_CALL_SIGN,
    PROP_COLOR,
    PROP_NAME,
    PROP_PILOT,
    PROP_TYPE,
    TelemetrySource,
)


class MissingPropertyError(LookupError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Could not find telemetry text property: {name}")
        self.name = name


@dataclass(frozen=True)
class PropertyIndices:
    pilot: int
    call_sign: int
    type: int
    color: int
    name: int | None = None


# ---------------------------------------- #


def _required(source: TelemetrySource, name: str) -> int:
    index = source.property_index(name)
    if index == INVALID_PROPERTY_INDEX:
        raise MissingPropertyError(name)
    return index


def resolve_property_indices(
    source: TelemetrySource, require_color: bool = True
) -> PropertyIndices:
    """
    Look up the text properties the passes use. Color is optional for
    read-only scans and comes back as INVALID_PROPERTY_INDEX when absent.
    """
    if require_color:
        color = _required(source, PROP_COLOR)
    else:
        color = source.property_index(PROP_COLOR)
    pilot = _required(source, PROP_PILOT)
    call_sign = _required(source, PROP_CALL_SIGN)
    type_ = _required(source, PROP_TYPE)

    name = source.property_index(PROP_NAME)
    return PropertyIndices(
        pilot=pilot,
        call_sign=call_sign,
        type=type_,
        color=color,
        name=None if name == INVALID_PROPERTY_INDEX else name,
    )

from __future__ import annotations

from dataclasses import dataclass

from flightcolorizer.colorize.callsign import parse_call_sign
from flightcolorizer.colorize.objects import (
    OBJECTS_PER_SLICE,
    Step,
    is_fixed_wing,
    iter_objects,
)
from flightcolorizer.colorize.properties import PropertyIndices
from flightcolorizer.telemetry.source import Handle, TelemetrySource


@dataclass(frozen=True)
class ScannedPilot:
    handle: Handle
    lifetime_begin: float | None
    write_time: float
    pilot: str
    call_sign: str
    flight_key: str
    ship_index: int


# ---------------------------------------- #


def scan_pilots(
    source: TelemetrySource,
    indices: PropertyIndices,
    fixed_wing_only: bool,
    batch_size: int = OBJECTS_PER_SLICE,
) -> Step[list[ScannedPilot]]:
    """
    Collect human-piloted objects (non-empty Pilot) that carry a flight call sign.

    Results are in enumeration order. Objects without a usable call sign are
    left out silently.
    """
    pilots: list[ScannedPilot] = []

    for step, obj in enumerate(iter_objects(source), 1):
        if step % batch_size == 0:
            yield

        if obj.read_time is None or obj.write_time is None:
            continue

        pilot = obj.final_text(source, indices.pilot)
        if pilot == "":
            continue

        if fixed_wing_only and not is_fixed_wing(source, obj, indices.type):
            continue

        call_sign = obj.text(source, indices.call_sign)
        identity = parse_call_sign(call_sign)

        # Some recorders only export the call sign in Name.
        if identity is None and indices.name is not None:
            identity = parse_call_sign(obj.text(source, indices.name))

        if identity is None:
            continue

        pilots.append(
            ScannedPilot(
                handle=obj.handle,
                lifetime_begin=obj.lifetime.begin,
                write_time=obj.write_time,
                pilot=pilot,
                call_sign=call_sign,
                flight_key=identity.flight_key,
                ship_index=identity.ship_index,
            )
        )

    return pilots

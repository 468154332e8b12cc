from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from flightcolorizer.colorize.flights import FlightGroup
from flightcolorizer.colorize.objects import OBJECTS_PER_SLICE, Step
from flightcolorizer.colorize.palette import flight_color
from flightcolorizer.colorize.scanner import ScannedPilot
from flightcolorizer.telemetry.source import TelemetrySource


@dataclass
class ColorAssignment:
    colored: int = 0
    skipped: int = 0
    call_sign_colors: dict[str, str] = field(default_factory=dict)


# ---------------------------------------- #


def assign_colors(
    source: TelemetrySource,
    color_index: int,
    pilots: list[ScannedPilot],
    flights: list[FlightGroup],
    palette: Sequence[str],
    batch_size: int = OBJECTS_PER_SLICE,
) -> Step[ColorAssignment]:
    index_by_key = {f.flight_key: f.index for f in flights}
    result = ColorAssignment()

    for step, pilot in enumerate(pilots, 1):
        if step % batch_size == 0:
            yield

        flight_index = index_by_key.get(pilot.flight_key)
        color = None if flight_index is None else flight_color(flight_index, palette)
        if color is None:
            result.skipped += 1
            continue

        if pilot.call_sign:
            result.call_sign_colors[pilot.call_sign] = color

        # Begin covers the whole track; write time overrides later recorder samples.
        begin = pilot.lifetime_begin if pilot.lifetime_begin is not None else pilot.write_time
        source.set_text_sample(pilot.handle, begin, color_index, color)
        if pilot.write_time != begin:
            source.set_text_sample(pilot.handle, pilot.write_time, color_index, color)
        result.colored += 1

    return result

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Sequence

from flightcolorizer.colorize.flights import FlightGroup
from flightcolorizer.colorize.palette import flight_color

MAX_LEGEND_ENTRIES: Final[int] = 10


@dataclass(frozen=True)
class LegendEntry:
    label: str
    color_id: str | None


LegendModel = tuple[LegendEntry, ...]

EMPTY_LEGEND: LegendModel = ()


def build_legend(
    flights: Sequence[FlightGroup],
    palette: Sequence[str],
    limit: int = MAX_LEGEND_ENTRIES,
) -> LegendModel:
    return tuple(
        LegendEntry(label=f.label, color_id=flight_color(f.index, palette))
        for f in list(flights)[:limit]
    )

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from flightcolorizer.colorize.scanner import ScannedPilot


@dataclass(frozen=True)
class FlightGroup:
    flight_key: str
    index: int  # 1-based, by ascending flight key
    representative_call_sign: str | None = None

    @property
    def label(self) -> str:
        if self.representative_call_sign:
            return self.representative_call_sign
        return self.flight_key + "1"


# ---------------------------------------- #


def sorted_flight_keys(pilots: Iterable[ScannedPilot]) -> list[str]:
    keys = list(dict.fromkeys(p.flight_key for p in pilots))
    keys.sort()
    return keys


def representative_call_signs(pilots: Iterable[ScannedPilot]) -> dict[str, str]:
    """
    Pick the call sign that labels each flight.

    Ship 1 wins; otherwise the smallest ship index seen, first seen on ties.
    Pilots without a call sign (matched through Name) are not candidates.
    """
    best: dict[str, ScannedPilot] = {}

    for pilot in pilots:
        if not pilot.call_sign:
            continue
        existing = best.get(pilot.flight_key)
        if existing is None:
            best[pilot.flight_key] = pilot
        elif existing.ship_index != 1 and pilot.ship_index < existing.ship_index:
            best[pilot.flight_key] = pilot

    return {key: pilot.call_sign for key, pilot in best.items()}


def group_flights(pilots: list[ScannedPilot]) -> list[FlightGroup]:
    representatives = representative_call_signs(pilots)
    return [
        FlightGroup(
            flight_key=key,
            index=i,
            representative_call_sign=representatives.get(key),
        )
        for i, key in enumerate(sorted_flight_keys(pilots), 1)
    ]

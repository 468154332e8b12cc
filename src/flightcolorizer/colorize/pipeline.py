from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Sequence

from flightcolorizer.colorize.assigner import ColorAssignment, assign_colors
from flightcolorizer.colorize.fixups import fix_model_names
from flightcolorizer.colorize.flights import FlightGroup, group_flights
from flightcolorizer.colorize.legend import EMPTY_LEGEND, LegendModel, build_legend
from flightcolorizer.colorize.munitions import (
    BackfillStats,
    PropagationStats,
    backfill_munition_call_signs,
    munition_classifiers,
    propagate_munition_colors,
)
from flightcolorizer.colorize.objects import OBJECTS_PER_SLICE, Step, drain
from flightcolorizer.colorize.palette import DEFAULT_PALETTE, flight_color
from flightcolorizer.colorize.properties import MissingPropertyError, resolve_property_indices
from flightcolorizer.colorize.scanner import scan_pilots
from flightcolorizer.telemetry.source import (
    Capabilities,
    TelemetrySource,
    is_relevant_recording,
    resolve_capabilities,
)
from flightcolorizer.util.settings import Settings

logger = logging.getLogger(__name__)


class Phase(enum.Enum):
    PENDING = "pending"
    FIX_MODEL_NAMES = "fix_model_names"
    BACKFILL_CALL_SIGNS = "backfill_call_signs"
    SCAN = "scan"
    ASSIGN_COLORS = "assign_colors"
    PROPAGATE_COLORS = "propagate_colors"
    DONE = "done"


class Outcome(enum.Enum):
    COMPLETED = "completed"
    NO_PILOTS = "no_pilots"
    SKIPPED = "skipped"  # no data, or not a relevant recording
    ABORTED = "aborted"  # a required property is missing


@dataclass
class ColorizeResult:
    outcome: Outcome
    legend: LegendModel | None = None
    flights: list[FlightGroup] = field(default_factory=list)
    fixed_names: int = 0
    backfill: BackfillStats | None = None
    assignment: ColorAssignment | None = None
    propagation: PropagationStats | None = None

    @property
    def colorized(self) -> bool:
        return self.outcome in (Outcome.COMPLETED, Outcome.NO_PILOTS)


# ---------------------------------------- #


class ColorizeJob:
    """
    One colorization run as a resumable unit of work.

    advance() performs a bounded slice (at most batch_size objects of the
    current pass) and returns True once the run is done; the result is then
    available in `result`. A job runs exactly once.
    """

    def __init__(
        self,
        source: TelemetrySource,
        settings: Settings,
        palette: Sequence[str] = DEFAULT_PALETTE,
        capabilities: Capabilities | None = None,
        batch_size: int = OBJECTS_PER_SLICE,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")

        self._source = source
        self._settings = settings
        self._palette = tuple(palette)
        self._capabilities = capabilities or resolve_capabilities(source)
        self._batch_size = batch_size

        self.phase = Phase.PENDING
        self.result: ColorizeResult | None = None
        self._steps = self._run()

    # ---------------------------------------- #

    @property
    def finished(self) -> bool:
        return self.result is not None

    def advance(self) -> bool:
        if self.finished:
            raise RuntimeError("Colorize job already finished")

        try:
            next(self._steps)
        except StopIteration as stop:
            self.result = stop.value
            self.phase = Phase.DONE
            return True
        return False

    def run_to_completion(self) -> ColorizeResult:
        while not self.advance():
            pass
        assert self.result is not None
        return self.result

    # ---------------------------------------- #

    def _run(self) -> Step[ColorizeResult]:
        source = self._source
        settings = self._settings
        batch = self._batch_size

        if source.is_empty():
            logger.info("No telemetry loaded.")
            return ColorizeResult(Outcome.SKIPPED)

        if not is_relevant_recording(source):
            logger.info("Not a BMS recording (or not loaded yet).")
            return ColorizeResult(Outcome.SKIPPED)

        try:
            indices = resolve_property_indices(source)
        except MissingPropertyError as e:
            logger.warning("%s", e)
            return ColorizeResult(Outcome.ABORTED)

        result = ColorizeResult(Outcome.COMPLETED)
        classifiers = munition_classifiers(self._capabilities, indices)

        self.phase = Phase.FIX_MODEL_NAMES
        result.fixed_names = yield from fix_model_names(
            source, indices, settings.fixed_wing_only, batch_size=batch
        )

        if settings.rename_missiles:
            self.phase = Phase.BACKFILL_CALL_SIGNS
            result.backfill = yield from backfill_munition_call_signs(
                source, indices, classifiers, batch_size=batch
            )

        self.phase = Phase.SCAN
        pilots = yield from scan_pilots(source, indices, settings.fixed_wing_only, batch_size=batch)
        if not pilots:
            logger.info("No human-controlled aircraft found (objects with non-empty Pilot).")
            result.outcome = Outcome.NO_PILOTS
            result.legend = EMPTY_LEGEND
            return result

        result.flights = group_flights(pilots)

        self.phase = Phase.ASSIGN_COLORS
        result.assignment = yield from assign_colors(
            source, indices.color, pilots, result.flights, self._palette, batch_size=batch
        )

        if settings.colorize_missiles:
            self.phase = Phase.PROPAGATE_COLORS
            result.propagation = yield from propagate_munition_colors(
                source,
                indices,
                self._capabilities,
                classifiers,
                result.assignment.call_sign_colors,
                batch_size=batch,
            )

        result.legend = build_legend(result.flights, self._palette)
        _log_summary(result)
        return result


# ---------------------------------------- #


def _log_summary(result: ColorizeResult) -> None:
    if result.fixed_names > 0:
        logger.info("Fixed %d object name(s) for model matching.", result.fixed_names)
    if result.backfill is not None and result.backfill.updated > 0:
        logger.info("Assigned call signs to %d missile(s).", result.backfill.updated)
    if result.propagation is not None and result.propagation.updated > 0:
        logger.info(
            "Colored %d missile(s) to match parent call signs.", result.propagation.updated
        )

    assignment = result.assignment or ColorAssignment()
    logger.info(
        "Colored %d aircraft across %d flight(s); skipped %d.",
        assignment.colored,
        len(result.flights),
        assignment.skipped,
    )


# ---------------------------------------- #


def dump_flights(
    source: TelemetrySource,
    settings: Settings,
    palette: Sequence[str] = DEFAULT_PALETTE,
) -> list[str]:
    """Scan without writing and describe every flight and its color."""
    if source.is_empty():
        logger.info("No telemetry loaded.")
        return []

    try:
        indices = resolve_property_indices(source, require_color=False)
    except MissingPropertyError as e:
        logger.warning("%s", e)
        return []

    pilots = drain(scan_pilots(source, indices, settings.fixed_wing_only))
    flights = group_flights(pilots)

    lines = [f"Humans={len(pilots)} Flights={len(flights)}"]
    for flight in flights:
        color = flight_color(flight.index, palette) or "(none)"
        lines.append(f"{flight.index:02d} {flight.flight_key} -> {flight.label} ({color})")

    for line in lines:
        logger.info(line)
    return lines

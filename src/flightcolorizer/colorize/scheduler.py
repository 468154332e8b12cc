from __future__ import annotations

import enum
import logging
from typing import Sequence

from PySide6 import QtCore

from flightcolorizer.colorize.legend import EMPTY_LEGEND, LegendModel
from flightcolorizer.colorize.objects import OBJECTS_PER_SLICE
from flightcolorizer.colorize.palette import DEFAULT_PALETTE
from flightcolorizer.colorize.pipeline import ColorizeJob, Outcome
from flightcolorizer.telemetry.source import (
    TelemetrySource,
    data_fingerprint,
    is_relevant_recording,
)
from flightcolorizer.util.settings import Settings

logger = logging.getLogger(__name__)


class SchedulerState(enum.Enum):
    IDLE = "idle"
    REQUEST_PENDING = "request_pending"
    STARTING = "starting"
    RUNNING = "running"


# ---------------------------------------- #


class ColorizeScheduler(QtCore.QObject):
    """
    Drives colorization one bounded slice per tick on the caller's thread.

    Idle -> RequestPending -> Starting -> Running -> Idle. At most one run is
    queued; requests while busy are dropped. While idle, each tick checks
    whether a new recording was loaded and requests a run for it when
    auto-assign is enabled.
    """

    processing_changed = QtCore.Signal(bool)
    legend_changed = QtCore.Signal(object)
    run_finished = QtCore.Signal(object)
    info = QtCore.Signal(str)
    error = QtCore.Signal(str)

    def __init__(
        self,
        source: TelemetrySource,
        settings: Settings | None = None,
        palette: Sequence[str] = DEFAULT_PALETTE,
        batch_size: int = OBJECTS_PER_SLICE,
        parent=None,
    ):
        super().__init__(parent)

        if batch_size <= 0:
            raise ValueError("batch_size must be positive")

        self._source = source
        self._settings = settings or Settings()
        self._palette = tuple(palette)
        self._batch_size = batch_size

        self._state = SchedulerState.IDLE
        self._job: ColorizeJob | None = None
        self._processing = False
        self._legend: LegendModel = EMPTY_LEGEND

        self._last_fingerprint: str | None = None
        self._colorized_fingerprint: str | None = None
        self._failed_fingerprint: str | None = None

    # ---------------------------------------- #

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def processing(self) -> bool:
        return self._processing

    @property
    def legend(self) -> LegendModel:
        return self._legend

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def colorized_fingerprint(self) -> str | None:
        return self._colorized_fingerprint

    def set_settings(self, settings: Settings) -> None:
        # Takes effect for the next run; a running job keeps its snapshot.
        self._settings = settings

    def set_source(self, source: TelemetrySource) -> None:
        if self._state is not SchedulerState.IDLE:
            raise RuntimeError("Cannot swap telemetry source while a run is in progress")
        self._source = source

    # ---------------------------------------- #

    @QtCore.Slot()
    def request_run(self) -> None:
        if self._state is not SchedulerState.IDLE:
            logger.debug("Colorize already %s; request coalesced.", self._state.value)
            return
        self._state = SchedulerState.REQUEST_PENDING

    # ---------------------------------------- #

    @QtCore.Slot()
    def tick(self) -> None:
        if self._state is SchedulerState.REQUEST_PENDING:
            self._state = SchedulerState.STARTING
            self._set_processing(True)
            return

        if self._state is SchedulerState.STARTING:
            try:
                self._job = ColorizeJob(
                    self._source,
                    self._settings,
                    palette=self._palette,
                    batch_size=self._batch_size,
                )
            except Exception as e:
                self._fail(e)
                return
            self._state = SchedulerState.RUNNING
            self.info.emit("Colorizing recording...")
            self._advance()
            return

        if self._state is SchedulerState.RUNNING:
            self._advance()
            return

        self._maybe_auto_request()

    # ---------------------------------------- #
    #  Internal                                #
    # ---------------------------------------- #

    def _advance(self) -> None:
        assert self._job is not None
        try:
            finished = self._job.advance()
        except Exception as e:
            self._fail(e)
            return

        if not finished:
            return

        result = self._job.result
        assert result is not None

        if result.legend is not None:
            self._legend = result.legend
            self.legend_changed.emit(self._legend)

        fingerprint = data_fingerprint(self._source)
        self._last_fingerprint = fingerprint
        if result.colorized:
            self._colorized_fingerprint = fingerprint
        elif result.outcome is Outcome.ABORTED:
            self._failed_fingerprint = fingerprint

        self._finish()
        if result.assignment is not None:
            self.info.emit(
                f"Colored {result.assignment.colored} aircraft across "
                f"{len(result.flights)} flight(s)."
            )
        self.run_finished.emit(result)

    def _fail(self, e: Exception) -> None:
        logger.exception("Apply failed")
        self._last_fingerprint = data_fingerprint(self._source)
        self._failed_fingerprint = self._last_fingerprint
        self._finish()
        self.error.emit(f"Colorize failed: {e}")
        self.run_finished.emit(None)

    def _finish(self) -> None:
        self._job = None
        self._state = SchedulerState.IDLE
        self._set_processing(False)

    def _set_processing(self, on: bool) -> None:
        if self._processing == on:
            return
        self._processing = on
        self.processing_changed.emit(on)

    # ---------------------------------------- #

    def _maybe_auto_request(self) -> None:
        fingerprint = data_fingerprint(self._source)
        if fingerprint is None:
            return

        if fingerprint != self._last_fingerprint:
            self._last_fingerprint = fingerprint
            self._colorized_fingerprint = None
            self._failed_fingerprint = None

        if not self._settings.auto_assign_on_load:
            return

        # One automatic attempt per loaded dataset.
        if fingerprint in (self._colorized_fingerprint, self._failed_fingerprint):
            return

        if not is_relevant_recording(self._source):
            return

        logger.info("New recording detected (%s); requesting colorize.", fingerprint)
        self.request_run()

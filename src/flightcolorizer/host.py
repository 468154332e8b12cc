from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from PySide6 import QtCore

from flightcolorizer.colorize.palette import (
    COLOR_DEFINITIONS_FILENAME,
    DEFAULT_PALETTE,
    load_swatch_colors,
)
from flightcolorizer.colorize.pipeline import dump_flights
from flightcolorizer.colorize.scheduler import ColorizeScheduler
from flightcolorizer.telemetry.source import TelemetrySource
from flightcolorizer.util.settings import Settings, toggle

logger = logging.getLogger(__name__)


class ColorizerHost(QtCore.QObject):
    """
    Everything the colorizer keeps between ticks, in one place.

    Owns:
    - the telemetry store being colorized
    - current settings
    - the scheduler and the timer that ticks it
    - swatch colors for the legend
    """

    settings_changed = QtCore.Signal(object)

    def __init__(
        self,
        source: TelemetrySource,
        settings: Settings | None = None,
        palette: Sequence[str] = DEFAULT_PALETTE,
        color_definitions: Path | None = None,
        tick_interval_ms: int = 16,
        parent=None,
    ):
        super().__init__(parent)

        self._source = source
        self._settings = settings or Settings()
        self._palette = tuple(palette)
        self._color_definitions = color_definitions or (
            Path.cwd() / COLOR_DEFINITIONS_FILENAME
        )
        self._swatch_colors: dict[str, int] | None = None

        self.scheduler = ColorizeScheduler(
            source, settings=self._settings, palette=self._palette, parent=self
        )
        self.scheduler.info.connect(self._on_info)

        self._timer = QtCore.QTimer(self)
        self._timer.setInterval(tick_interval_ms)
        self._timer.timeout.connect(self.scheduler.tick)

    # ---------------------------------------- #

    @property
    def source(self) -> TelemetrySource:
        return self._source

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def palette(self) -> tuple[str, ...]:
        return self._palette

    @property
    def running(self) -> bool:
        return self._timer.isActive()

    # ---------------------------------------- #

    @QtCore.Slot()
    def start(self) -> None:
        if not self._timer.isActive():
            self._timer.start()

    @QtCore.Slot()
    def stop(self) -> None:
        self._timer.stop()

    def load_source(self, source: TelemetrySource) -> None:
        self.scheduler.set_source(source)
        self._source = source

    # ---------------------------------------- #
    #  Commands                                #
    # ---------------------------------------- #

    @QtCore.Slot()
    def assign_colors_now(self) -> None:
        self.scheduler.request_run()

    def toggle_setting(self, name: str) -> Settings:
        self._settings = toggle(self._settings, name)
        self.scheduler.set_settings(self._settings)
        self.settings_changed.emit(self._settings)
        return self._settings

    def dump_flights(self) -> list[str]:
        return dump_flights(self._source, self._settings, self._palette)

    def swatch_colors(self) -> dict[str, int]:
        if self._swatch_colors is None:
            self._swatch_colors = load_swatch_colors(self._color_definitions, self._palette)
        return self._swatch_colors

    # ---------------------------------------- #

    @QtCore.Slot(str)
    def _on_info(self, msg: str) -> None:
        logger.info(msg)
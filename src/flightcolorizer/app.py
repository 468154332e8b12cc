# flightcolorizer/app.py

import argparse
import logging
import sys
from pathlib import Path

from PySide6 import QtCore

from flightcolorizer.colorize.pipeline import ColorizeResult, Outcome
from flightcolorizer.host import ColorizerHost
from flightcolorizer.telemetry.recording import load_recording, save_recording
from flightcolorizer.util.log import setup_logger
from flightcolorizer.util.settings import load_settings

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Color human-piloted flights in a telemetry recording"
    )
    parser.add_argument("recording", type=Path, help="JSONL recording to colorize")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to write the colorized recording (default: overwrite input)",
    )
    parser.add_argument("--settings", type=Path, default=None, help="Settings TOML file")
    parser.add_argument(
        "--colors", type=Path, default=None, help="Color definitions XML for legend swatches"
    )
    parser.add_argument("--gui", action="store_true", help="Show the legend overlay window")
    parser.add_argument(
        "--dump-flights", action="store_true", help="Log detected flights and exit"
    )
    parser.add_argument("--log-file", type=Path, default=None)
    return parser.parse_args(argv)


# ---------------------------------------- #


def _run_headless(host: ColorizerHost, output: Path) -> int:
    app = QtCore.QCoreApplication.instance() or QtCore.QCoreApplication(sys.argv)
    exit_code = 0

    def on_finished(result: ColorizeResult | None) -> None:
        nonlocal exit_code
        host.stop()
        if result is None or result.outcome is Outcome.ABORTED:
            exit_code = 1
        elif result.colorized:
            save_recording(host.source, output)
            logger.info("Recording written to: %s", output)
        app.quit()

    host.scheduler.run_finished.connect(on_finished)
    host.assign_colors_now()
    host.start()
    app.exec()
    return exit_code


# ---------------------------------------- #


def _run_gui(host: ColorizerHost, output: Path) -> int:
    from PySide6 import QtWidgets

    from flightcolorizer.ui.legend_overlay import LegendOverlayWidget

    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)
    app.setApplicationName("Flight Colorizer")

    w = LegendOverlayWidget()
    w.setWindowTitle("Flight Colorizer")
    w.set_show_legend(host.settings.show_legend)
    w.set_swatch_colors(host.swatch_colors())
    host.scheduler.legend_changed.connect(w.set_legend)
    host.scheduler.processing_changed.connect(w.set_processing)
    host.settings_changed.connect(lambda s: w.set_show_legend(s.show_legend))

    def on_finished(result: ColorizeResult | None) -> None:
        if result is not None and result.colorized:
            save_recording(host.source, output)

    host.scheduler.run_finished.connect(on_finished)

    # Auto-assign on load picks the recording up on the first idle tick.
    host.start()
    w.resize(480, 320)
    w.show()
    return app.exec()


# ---------------------------------------- #


def main(argv: list[str] | None = None) -> int:
    """
    Application entry point.

    Responsibilities:
    - Configure logging
    - Load settings and the recording
    - Either dump flights, colorize headless, or show the legend window
    """
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    setup_logger(log_file=args.log_file)

    settings = load_settings(args.settings)
    source = load_recording(args.recording)
    host = ColorizerHost(source, settings=settings, color_definitions=args.colors)

    if args.dump_flights:
        host.dump_flights()
        return 0

    output = args.output or args.recording
    if args.gui:
        return _run_gui(host, output)

    return _run_headless(host, output)


if __name__ == "__main__":
    raise SystemExit(main())

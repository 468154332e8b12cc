import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest  # noqa: E402
from PySide6 import QtWidgets  # noqa: E402

from flightcolorizer.colorize.objects import FIXED_WING_TYPE  # noqa: E402
from flightcolorizer.telemetry.memory import MemoryTelemetry  # noqa: E402
from flightcolorizer.telemetry.source import GLOBAL_DATA_RECORDER, Handle  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


# ---------------------------------------- #


class RecordingBuilder:
    """Builds small BMS-looking recordings on a MemoryTelemetry store."""

    def __init__(self, recorder: str = "Falcon BMS 4.37", **kwargs) -> None:
        self.source = MemoryTelemetry(**kwargs)
        self.source.set_global_text(GLOBAL_DATA_RECORDER, recorder)

    def aircraft(
        self,
        call_sign: str | None,
        pilot: str = "Pilot",
        begin: float | None = 0.0,
        end: float | None = 100.0,
        type_name: str = FIXED_WING_TYPE,
        **props: str,
    ) -> Handle:
        values = {"Pilot": pilot, "CallSign": call_sign, "Type": type_name, **props}
        return self.source.add_object(
            begin, end, **{k: v for k, v in values.items() if v is not None}
        )

    def missile(
        self,
        parent: Handle | None = None,
        name: str | None = "AIM-120C",
        begin: float | None = 10.0,
        end: float | None = 20.0,
        type_name: str | None = "Weapon+Missile",
        tags: int = 0,
        **props: str,
    ) -> Handle:
        values = {"Name": name, "Type": type_name, **props}
        return self.source.add_object(
            begin,
            end,
            tags=tags,
            parent=parent,
            **{k: v for k, v in values.items() if v is not None},
        )


@pytest.fixture
def recording() -> RecordingBuilder:
    return RecordingBuilder()


@pytest.fixture
def recording_factory():
    return RecordingBuilder


def run_step(step):
    """Exhaust a pass, returning (result, number of times it yielded)."""
    yields = 0
    while True:
        try:
            next(step)
        except StopIteration as stop:
            return stop.value, yields
        yields += 1


@pytest.fixture
def drive():
    return run_step

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Generator, Iterator, TypeVar

from flightcolorizer.telemetry.source import (
    Handle,
    Lifetime,
    TelemetrySource,
    iter_handles,
    read_text_with_fallback,
    read_time,
)

T = TypeVar("T")

# A pass is a generator that yields to hand control back to the scheduler and
# returns its result when exhausted.
Step = Generator[None, None, T]

OBJECTS_PER_SLICE: Final[int] = 300
FIXED_WING_TYPE: Final[str] = "Air+FixedWing"


@dataclass(frozen=True)
class ObjectView:
    handle: Handle
    lifetime: Lifetime
    read_time: float | None

    @property
    def write_time(self) -> float | None:
        return self.lifetime.write_time

    def text(self, source: TelemetrySource, property_index: int) -> str:
        """Final known value, falling back to the value at lifetime begin."""
        return read_text_with_fallback(
            source, self.handle, property_index, self._require_read_time(), self.lifetime.begin
        )

    def final_text(self, source: TelemetrySource, property_index: int) -> str:
        return source.text_sample(self.handle, self._require_read_time(), property_index)

    def _require_read_time(self) -> float:
        if self.read_time is None:
            raise ValueError(f"object {self.handle} has no known lifetime")
        return self.read_time


# ---------------------------------------- #


def iter_objects(source: TelemetrySource) -> Iterator[ObjectView]:
    for handle in iter_handles(source):
        lifetime = source.lifetime(handle)
        yield ObjectView(handle, lifetime, read_time(source, lifetime))


def is_fixed_wing(source: TelemetrySource, obj: ObjectView, type_index: int) -> bool:
    return obj.final_text(source, type_index) == FIXED_WING_TYPE


def drain(step: Step[T]) -> T:
    """Run a pass to completion without yielding control."""
    while True:
        try:
            next(step)
        except StopIteration as stop:
            return stop.value

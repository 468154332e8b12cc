from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterator, Protocol, runtime_checkable

INVALID_PROPERTY_INDEX: Final[int] = -1

# Object text properties the colorizer reads or writes.
PROP_NAME: Final[str] = "Name"
PROP_TYPE: Final[str] = "Type"
PROP_PILOT: Final[str] = "Pilot"
PROP_CALL_SIGN: Final[str] = "CallSign"
PROP_COLOR: Final[str] = "Color"

# Global text properties describing where the recording came from.
GLOBAL_DATA_RECORDER: Final[str] = "DataRecorder"
GLOBAL_DATA_SOURCE: Final[str] = "DataSource"

RELEVANT_SOURCE_MARKERS: Final[tuple[str, ...]] = ("Falcon BMS", "Falcon 4.0")

Handle = int


@dataclass(frozen=True)
class Lifetime:
    """
    Object lifetime [begin, end).

    begin may be unknown for objects that only report a single timestamp;
    end is None while the object is open-ended.
    """

    begin: float | None
    end: float | None = None

    @property
    def write_time(self) -> float | None:
        return self.end if self.end is not None else self.begin


# ---------------------------------------- #


class TelemetrySource(Protocol):
    """
    Capability surface of a time-indexed telemetry store.

    Text reads follow last-known-value semantics: a read at time T returns the
    latest sample at or before T, or "" when there is none. time_unit is the
    smallest time step of the store; reading one unit past an object's last
    timestamp yields its final known state.
    """

    time_unit: float

    def object_count(self) -> int: ...

    def object_handle(self, index: int) -> Handle | None: ...

    def property_index(self, name: str) -> int: ...

    def text_sample(self, handle: Handle, time: float, property_index: int) -> str: ...

    def set_text_sample(
        self, handle: Handle, time: float, property_index: int, value: str
    ) -> None: ...

    def lifetime(self, handle: Handle) -> Lifetime: ...

    def is_empty(self) -> bool: ...

    def data_time_range(self) -> tuple[float, float] | None: ...

    def global_text(self, name: str) -> str: ...


@runtime_checkable
class SupportsTags(Protocol):
    missile_tag: int

    def current_tags(self, handle: Handle) -> int: ...


@runtime_checkable
class SupportsParents(Protocol):
    def current_parent(self, handle: Handle) -> Handle | None: ...


# ---------------------------------------- #


@dataclass(frozen=True)
class Capabilities:
    """Optional store features, resolved once per run."""

    tags: SupportsTags | None = None
    parents: SupportsParents | None = None


def resolve_capabilities(source: TelemetrySource) -> Capabilities:
    return Capabilities(
        tags=source if isinstance(source, SupportsTags) else None,
        parents=source if isinstance(source, SupportsParents) else None,
    )


# ---------------------------------------- #


def iter_handles(source: TelemetrySource) -> Iterator[Handle]:
    """Yield object handles in ascending enumeration order."""
    count = source.object_count()
    for index in range(max(0, count)):
        handle = source.object_handle(index)
        if handle is not None:
            yield handle


def read_time(source: TelemetrySource, lifetime: Lifetime) -> float | None:
    # One unit past the last known timestamp asks for the final sample.
    write_time = lifetime.write_time
    if write_time is None:
        return None
    return write_time + source.time_unit


def read_text_with_fallback(
    source: TelemetrySource,
    handle: Handle,
    property_index: int,
    at: float,
    fallback: float | None,
) -> str:
    value = source.text_sample(handle, at, property_index)
    if value == "" and fallback is not None:
        value = source.text_sample(handle, fallback, property_index)
    return value


def write_at_lifetime(
    source: TelemetrySource,
    handle: Handle,
    property_index: int,
    lifetime: Lifetime,
    value: str,
) -> None:
    """
    Write value at lifetime begin and again at the write time.

    The begin sample covers the whole track; the later one wins over any
    value the recorder itself wrote afterwards.
    """
    write_time = lifetime.write_time
    if lifetime.begin is not None:
        source.set_text_sample(handle, lifetime.begin, property_index, value)
    if write_time is not None and write_time != lifetime.begin:
        source.set_text_sample(handle, write_time, property_index, value)


# ---------------------------------------- #


def data_fingerprint(source: TelemetrySource) -> str | None:
    if source.is_empty():
        return None

    time_range = source.data_time_range()
    if time_range is None:
        return None

    begin, end = time_range
    return f"{begin}|{end}"


def is_relevant_recording(source: TelemetrySource) -> bool:
    if source.is_empty():
        return False

    haystack = (
        source.global_text(GLOBAL_DATA_RECORDER)
        + " "
        + source.global_text(GLOBAL_DATA_SOURCE)
    )
    return any(marker in haystack for marker in RELEVANT_SOURCE_MARKERS)

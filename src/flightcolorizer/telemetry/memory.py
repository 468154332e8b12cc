from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import Final, Iterable

from flightcolorizer.telemetry.source import (
    INVALID_PROPERTY_INDEX,
    PROP_CALL_SIGN,
    PROP_COLOR,
    PROP_NAME,
    PROP_PILOT,
    PROP_TYPE,
    Handle,
    Lifetime,
)

TAG_MISSILE: Final[int] = 1 << 0

DEFAULT_OBJECT_PROPERTIES: Final[tuple[str, ...]] = (
    PROP_NAME,
    PROP_TYPE,
    PROP_PILOT,
    PROP_CALL_SIGN,
    PROP_COLOR,
)


@dataclass
class TextTrack:
    """Time-ordered text samples of one property."""

    times: list[float] = field(default_factory=list)
    values: list[str] = field(default_factory=list)

    def at(self, time: float) -> str:
        i = bisect.bisect_right(self.times, time)
        if i == 0:
            return ""
        return self.values[i - 1]

    def set(self, time: float, value: str) -> None:
        i = bisect.bisect_left(self.times, time)
        if i < len(self.times) and self.times[i] == time:
            self.values[i] = value
            return
        self.times.insert(i, time)
        self.values.insert(i, value)

    def samples(self) -> list[tuple[float, str]]:
        return list(zip(self.times, self.values))


@dataclass
class MemoryObject:
    handle: Handle
    lifetime: Lifetime
    tags: int = 0
    parent: Handle | None = None
    tracks: dict[int, TextTrack] = field(default_factory=dict)


# ---------------------------------------- #


class MemoryTelemetry:
    """
    In-memory telemetry store.

    Intended for:
    - loading JSONL recordings for headless colorization
    - deterministic fixtures in tests

    time_unit is explicit so callers control which sample counts as "final".
    """

    missile_tag = TAG_MISSILE

    def __init__(
        self,
        properties: Iterable[str] = DEFAULT_OBJECT_PROPERTIES,
        time_unit: float = 1.0,
    ) -> None:
        self.time_unit = time_unit

        self._property_names: list[str] = []
        self._property_indices: dict[str, int] = {}
        for name in properties:
            self.register_property(name)

        self._objects: list[MemoryObject] = []
        self._by_handle: dict[Handle, MemoryObject] = {}
        self._globals: dict[str, str] = {}
        self._next_handle: Handle = 1

    # ---------------------------------------- #
    #  Building                                #
    # ---------------------------------------- #

    def register_property(self, name: str) -> int:
        index = self._property_indices.get(name)
        if index is None:
            index = len(self._property_names)
            self._property_names.append(name)
            self._property_indices[name] = index
        return index

    def set_global_text(self, name: str, value: str) -> None:
        self._globals[name] = value

    def add_object(
        self,
        begin: float | None,
        end: float | None = None,
        *,
        handle: Handle | None = None,
        tags: int = 0,
        parent: Handle | None = None,
        **properties: str,
    ) -> Handle:
        """
        Add an object and seed each keyword property with one sample at
        lifetime begin (or end when begin is unknown).
        """
        if handle is None:
            handle = self._next_handle
        if handle in self._by_handle:
            raise ValueError(f"duplicate object handle {handle}")
        self._next_handle = max(self._next_handle, handle + 1)

        obj = MemoryObject(handle=handle, lifetime=Lifetime(begin, end), tags=tags, parent=parent)
        self._objects.append(obj)
        self._by_handle[handle] = obj

        seed_time = begin if begin is not None else end
        if seed_time is not None:
            for name, value in properties.items():
                self.set_property(handle, name, value, seed_time)
        return handle

    def set_property(self, handle: Handle, name: str, value: str, at: float) -> None:
        self.set_text_sample(handle, at, self.register_property(name), value)

    def samples(self, handle: Handle, name: str) -> list[tuple[float, str]]:
        index = self._property_indices.get(name)
        track = None if index is None else self._object(handle).tracks.get(index)
        return [] if track is None else track.samples()

    def property_names(self) -> list[str]:
        return list(self._property_names)

    def global_texts(self) -> dict[str, str]:
        return dict(self._globals)

    # ---------------------------------------- #
    #  TelemetrySource                         #
    # ---------------------------------------- #

    def object_count(self) -> int:
        return len(self._objects)

    def object_handle(self, index: int) -> Handle | None:
        if 0 <= index < len(self._objects):
            return self._objects[index].handle
        return None

    def property_index(self, name: str) -> int:
        return self._property_indices.get(name, INVALID_PROPERTY_INDEX)

    def text_sample(self, handle: Handle, time: float, property_index: int) -> str:
        track = self._object(handle).tracks.get(property_index)
        if track is None:
            return ""
        return track.at(time)

    def set_text_sample(
        self, handle: Handle, time: float, property_index: int, value: str
    ) -> None:
        if not 0 <= property_index < len(self._property_names):
            raise ValueError(f"invalid property index {property_index}")
        tracks = self._object(handle).tracks
        tracks.setdefault(property_index, TextTrack()).set(time, value)

    def lifetime(self, handle: Handle) -> Lifetime:
        return self._object(handle).lifetime

    def is_empty(self) -> bool:
        return not self._objects

    def data_time_range(self) -> tuple[float, float] | None:
        begins: list[float] = []
        ends: list[float] = []
        for obj in self._objects:
            if obj.lifetime.begin is not None:
                begins.append(obj.lifetime.begin)
            if obj.lifetime.write_time is not None:
                ends.append(obj.lifetime.write_time)
        if not begins and not ends:
            return None
        return min(begins or ends), max(ends or begins)

    def global_text(self, name: str) -> str:
        return self._globals.get(name, "")

    # ---------------------------------------- #
    #  Optional capabilities                   #
    # ---------------------------------------- #

    def current_tags(self, handle: Handle) -> int:
        return self._object(handle).tags

    def current_parent(self, handle: Handle) -> Handle | None:
        parent = self._object(handle).parent
        if parent is None or parent not in self._by_handle:
            return None
        return parent

    # ---------------------------------------- #

    def _object(self, handle: Handle) -> MemoryObject:
        try:
            return self._by_handle[handle]
        except KeyError:
            raise KeyError(f"unknown object handle {handle}") from None

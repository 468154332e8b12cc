from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from flightcolorizer.telemetry.memory import MemoryTelemetry

RECORDING_FORMAT = "flightcolorizer"
RECORDING_VERSION = 1


class RecordingFormatError(ValueError):
    pass


@dataclass
class RecordingHeader:
    format: str = RECORDING_FORMAT
    version: int = RECORDING_VERSION
    time_unit: float = 1.0
    properties: list[str] = field(default_factory=list)
    globals: dict[str, str] = field(default_factory=dict)


# ---------------------------------------- #


def load_recording(path: Path) -> MemoryTelemetry:
    """
    Load a JSONL recording.

    Line 1 is the header; every following line is one object:
    {"id", "lifetime": [begin, end], "tags", "parent", "properties": {name: [[t, v], ...]}}
    """
    with open(path, "r", encoding="utf-8") as f:
        lines = [line for line in (raw.strip() for raw in f) if line]

    if not lines:
        raise RecordingFormatError(f"{path}: empty recording")

    header = _parse_header(_loads(lines[0], path, 1))
    source = MemoryTelemetry(properties=header.properties, time_unit=header.time_unit)
    for name, value in header.globals.items():
        source.set_global_text(name, value)

    for lineno, line in enumerate(lines[1:], start=2):
        _add_object(source, _loads(line, path, lineno), path, lineno)

    return source


# ---------------------------------------- #


def save_recording(source: MemoryTelemetry, path: Path) -> None:
    header = RecordingHeader(
        time_unit=source.time_unit,
        properties=source.property_names(),
        globals=source.global_texts(),
    )

    with open(path, "w", encoding="utf-8") as f:
        f.write(json.dumps(asdict(header), separators=(",", ":")) + "\n")

        for index in range(source.object_count()):
            handle = source.object_handle(index)
            if handle is None:
                continue
            lifetime = source.lifetime(handle)
            record: dict[str, Any] = {
                "id": handle,
                "lifetime": [lifetime.begin, lifetime.end],
                "tags": source.current_tags(handle),
                "parent": source.current_parent(handle),
                "properties": {
                    name: [[t, v] for t, v in samples]
                    for name in source.property_names()
                    if (samples := source.samples(handle, name))
                },
            }
            f.write(json.dumps(record, separators=(",", ":")) + "\n")


# ---------------------------------------- #


def _loads(line: str, path: Path, lineno: int) -> Any:
    try:
        return json.loads(line)
    except json.JSONDecodeError as e:
        raise RecordingFormatError(f"{path}:{lineno}: invalid JSON: {e}") from e


def _parse_header(data: Any) -> RecordingHeader:
    if not isinstance(data, dict) or data.get("format") != RECORDING_FORMAT:
        raise RecordingFormatError("not a flightcolorizer recording")
    if data.get("version") != RECORDING_VERSION:
        raise RecordingFormatError(f"unsupported recording version {data.get('version')!r}")

    time_unit = data.get("time_unit", 1.0)
    if not isinstance(time_unit, (int, float)) or time_unit <= 0:
        raise RecordingFormatError("time_unit must be a positive number")

    return RecordingHeader(
        time_unit=float(time_unit),
        properties=[str(p) for p in data.get("properties") or []],
        globals={str(k): str(v) for k, v in (data.get("globals") or {}).items()},
    )


def _add_object(source: MemoryTelemetry, data: Any, path: Path, lineno: int) -> None:
    if not isinstance(data, dict) or not isinstance(data.get("id"), int):
        raise RecordingFormatError(f"{path}:{lineno}: object line needs an integer id")

    lifetime = data.get("lifetime") or [None, None]
    if not isinstance(lifetime, list) or len(lifetime) != 2:
        raise RecordingFormatError(f"{path}:{lineno}: lifetime must be [begin, end]")
    begin, end = (_optional_time(t, path, lineno) for t in lifetime)

    tags = data.get("tags") or 0
    if not isinstance(tags, int):
        raise RecordingFormatError(f"{path}:{lineno}: tags must be an integer")

    try:
        handle = source.add_object(
            begin, end, handle=data["id"], tags=tags, parent=data.get("parent")
        )
    except ValueError as e:
        raise RecordingFormatError(f"{path}:{lineno}: {e}") from e

    properties = data.get("properties") or {}
    if not isinstance(properties, dict):
        raise RecordingFormatError(f"{path}:{lineno}: properties must be an object")

    for name, samples in properties.items():
        for sample in samples:
            try:
                t, value = sample
                t = float(t)
            except (TypeError, ValueError):
                raise RecordingFormatError(
                    f"{path}:{lineno}: bad sample for {name!r}: {sample!r}"
                ) from None
            source.set_property(handle, name, str(value), t)


def _optional_time(value: Any, path: Path, lineno: int) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RecordingFormatError(f"{path}:{lineno}: lifetime times must be numbers or null")
    return float(value)

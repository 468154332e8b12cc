from __future__ import annotations

from typing import Final, Mapping

from flightcolorizer.colorize.objects import (
    OBJECTS_PER_SLICE,
    Step,
    is_fixed_wing,
    iter_objects,
)
from flightcolorizer.colorize.properties import PropertyIndices
from flightcolorizer.telemetry.source import TelemetrySource, write_at_lifetime

# Short names some exporters write, mapped to what the model database expects.
MODEL_NAME_FIXUPS: Final[Mapping[str, str]] = {
    "F-15C": "F-15C Eagle",
}


def fix_model_names(
    source: TelemetrySource,
    indices: PropertyIndices,
    fixed_wing_only: bool,
    fixups: Mapping[str, str] = MODEL_NAME_FIXUPS,
    batch_size: int = OBJECTS_PER_SLICE,
) -> Step[int]:
    if indices.name is None:
        return 0

    fixed = 0
    for step, obj in enumerate(iter_objects(source), 1):
        if step % batch_size == 0:
            yield

        if obj.read_time is None:
            continue
        if fixed_wing_only and not is_fixed_wing(source, obj, indices.type):
            continue

        current = obj.final_text(source, indices.name)
        desired = fixups.get(current)
        if not current or desired is None or desired == current:
            continue

        write_at_lifetime(source, obj.handle, indices.name, obj.lifetime, desired)
        fixed += 1

    return fixed

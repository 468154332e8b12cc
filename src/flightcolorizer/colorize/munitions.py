from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Final, Protocol, Sequence

from flightcolorizer.colorize.objects import OBJECTS_PER_SLICE, ObjectView, Step, iter_objects
from flightcolorizer.colorize.properties import PropertyIndices
from flightcolorizer.telemetry.source import (
    Capabilities,
    SupportsTags,
    TelemetrySource,
    read_text_with_fallback,
    write_at_lifetime,
)

logger = logging.getLogger(__name__)

MUNITION_TYPE_MARKERS: Final[tuple[str, ...]] = ("Weapon+Missile", "Missile")

MAX_SAMPLES = 3


class MunitionClassifier(Protocol):
    def __call__(self, source: TelemetrySource, obj: ObjectView) -> bool: ...


class TagClassifier:
    """Munition by the store's missile tag bit."""

    def __init__(self, tags: SupportsTags) -> None:
        self._tags = tags

    def __call__(self, source: TelemetrySource, obj: ObjectView) -> bool:
        return bool(self._tags.current_tags(obj.handle) & self._tags.missile_tag)


class TypeTextClassifier:
    """Munition by substring match on the final Type text."""

    def __init__(self, type_index: int, markers: Sequence[str] = MUNITION_TYPE_MARKERS) -> None:
        self._type_index = type_index
        self._markers = tuple(markers)

    def __call__(self, source: TelemetrySource, obj: ObjectView) -> bool:
        type_name = obj.final_text(source, self._type_index)
        return type_name != "" and any(m in type_name for m in self._markers)


def munition_classifiers(
    capabilities: Capabilities, indices: PropertyIndices
) -> list[MunitionClassifier]:
    classifiers: list[MunitionClassifier] = []
    if capabilities.tags is not None:
        classifiers.append(TagClassifier(capabilities.tags))
    classifiers.append(TypeTextClassifier(indices.type))
    return classifiers


def is_munition(
    classifiers: Sequence[MunitionClassifier], source: TelemetrySource, obj: ObjectView
) -> bool:
    return any(classify(source, obj) for classify in classifiers)


# ---------------------------------------- #
#  Pass 1: call sign backfill              #
# ---------------------------------------- #


@dataclass
class BackfillStats:
    total: int = 0
    munitions: int = 0
    updated: int = 0
    missing_name: int = 0
    already_had_call_sign: int = 0
    samples: list[str] = field(default_factory=list)


def backfill_munition_call_signs(
    source: TelemetrySource,
    indices: PropertyIndices,
    classifiers: Sequence[MunitionClassifier],
    batch_size: int = OBJECTS_PER_SLICE,
) -> Step[BackfillStats]:
    """Copy Name into CallSign for munitions that have none."""
    stats = BackfillStats()
    if indices.name is None:
        return stats

    for step, obj in enumerate(iter_objects(source), 1):
        if step % batch_size == 0:
            yield

        stats.total += 1
        if obj.read_time is None or not is_munition(classifiers, source, obj):
            continue
        stats.munitions += 1

        if obj.final_text(source, indices.call_sign) != "":
            stats.already_had_call_sign += 1
            continue

        name = obj.text(source, indices.name)
        if name == "":
            stats.missing_name += 1
            continue

        write_at_lifetime(source, obj.handle, indices.call_sign, obj.lifetime, name)
        stats.updated += 1
        if len(stats.samples) < MAX_SAMPLES:
            stats.samples.append(name)

    logger.info(
        "Missile call sign scan: total=%d missileType=%d updated=%d missingName=%d alreadyHasCallSign=%d",
        stats.total,
        stats.munitions,
        stats.updated,
        stats.missing_name,
        stats.already_had_call_sign,
    )
    if stats.samples:
        logger.info("Missile call sign samples (from Name): %s", ", ".join(stats.samples))
    return stats


# ---------------------------------------- #
#  Pass 2: launcher color propagation      #
# ---------------------------------------- #


@dataclass
class PropagationStats:
    total: int = 0
    munitions: int = 0
    updated: int = 0
    missing_parent: int = 0
    missing_parent_call_sign: int = 0
    missing_parent_color: int = 0
    samples: list[str] = field(default_factory=list)


def propagate_munition_colors(
    source: TelemetrySource,
    indices: PropertyIndices,
    capabilities: Capabilities,
    classifiers: Sequence[MunitionClassifier],
    call_sign_colors: dict[str, str],
    batch_size: int = OBJECTS_PER_SLICE,
) -> Step[PropagationStats]:
    """Give each munition the color assigned to its launcher's call sign."""
    stats = PropagationStats()
    parents = capabilities.parents
    if parents is None:
        logger.warning("Missile color scan: parent resolution not available; skipping.")
        return stats

    for step, obj in enumerate(iter_objects(source), 1):
        if step % batch_size == 0:
            yield

        stats.total += 1
        if obj.read_time is None or not is_munition(classifiers, source, obj):
            continue
        stats.munitions += 1

        parent = parents.current_parent(obj.handle)
        if parent is None:
            stats.missing_parent += 1
            continue

        # The parent is sampled at the munition's own times.
        parent_call_sign = read_text_with_fallback(
            source, parent, indices.call_sign, obj.read_time, obj.lifetime.begin
        )
        if parent_call_sign == "":
            stats.missing_parent_call_sign += 1
            continue

        color = call_sign_colors.get(parent_call_sign)
        if color is None:
            stats.missing_parent_color += 1
            continue

        write_at_lifetime(source, obj.handle, indices.color, obj.lifetime, color)
        stats.updated += 1
        if len(stats.samples) < MAX_SAMPLES:
            stats.samples.append(parent_call_sign)

    logger.info(
        "Missile color scan: total=%d missileType=%d updated=%d missingParent=%d "
        "missingParentCallSign=%d missingParentColor=%d",
        stats.total,
        stats.munitions,
        stats.updated,
        stats.missing_parent,
        stats.missing_parent_call_sign,
        stats.missing_parent_color,
    )
    if stats.samples:
        logger.info(
            "Missile color samples (parent call sign matched): %s", ", ".join(stats.samples)
        )
    return stats

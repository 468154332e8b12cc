from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from functools import lru_cache
from pathlib import Path
from typing import Final, Sequence

logger = logging.getLogger(__name__)

# Color IDs written to the Color property, cycled when there are more flights.
# Each must exist in the viewer's color definitions (Data-ObjectsColors.xml).
DEFAULT_PALETTE: Final[tuple[str, ...]] = (
    "P1",
    "P2",
    "P3",
    "P4",
    "P5",
    "P6",
    "P7",
    "P8",
    "P9",
    "P10",
)

COLOR_DEFINITIONS_FILENAME: Final[str] = "Data-ObjectsColors.xml"

_HEX_RGB_RE = re.compile(r"[0-9a-fA-F]{6}")


def flight_color(flight_index: int, palette: Sequence[str]) -> str | None:
    if not palette:
        return None
    return palette[(flight_index - 1) % len(palette)]


# ---------------------------------------- #
#  Swatch colors                           #
# ---------------------------------------- #


def parse_hex_rgb(text: str | None) -> int | None:
    """
    "#RRGGBB" -> packed 0xAABBGGRR with opaque alpha.
    """
    if not isinstance(text, str):
        return None
    digits = re.sub(r"\s+", "", text).replace("#", "")
    if not _HEX_RGB_RE.fullmatch(digits):
        return None
    r = int(digits[0:2], 16)
    g = int(digits[2:4], 16)
    b = int(digits[4:6], 16)
    return 0xFF000000 | (b << 16) | (g << 8) | r


def swatch_hex(abgr: int | None) -> str | None:
    if abgr is None:
        return None
    b = (abgr >> 16) & 0xFF
    g = (abgr >> 8) & 0xFF
    r = abgr & 0xFF
    return f"#{r:02X}{g:02X}{b:02X}"


# ---------------------------------------- #


@lru_cache(maxsize=None)
def _load_swatch_colors(path: Path, color_ids: tuple[str, ...]) -> dict[str, int]:
    try:
        root = ET.parse(path).getroot()
    except FileNotFoundError:
        logger.info("No color definitions at %s; legend swatches disabled.", path)
        return {}
    except ET.ParseError as e:
        logger.warning("Could not parse color definitions %s: %s", path, e)
        return {}

    wanted = set(color_ids)
    colors: dict[str, int] = {}
    for block in root.iter("Color"):
        color_id = block.get("ID")
        if color_id not in wanted or color_id in colors:
            continue
        side = block.find(".//Side")
        packed = parse_hex_rgb(side.text if side is not None else None)
        if packed is not None:
            colors[color_id] = packed

    missing = [c for c in color_ids if c not in colors]
    if missing:
        logger.info("No swatch color for: %s", ", ".join(missing))
    return colors


def load_swatch_colors(
    path: Path, color_ids: Sequence[str] = DEFAULT_PALETTE
) -> dict[str, int]:
    """
    Look up the display color of each palette ID in the color definitions
    document. Parsed once per (path, ids) for the life of the process; IDs
    that are missing or malformed are simply absent from the result.
    """
    return dict(_load_swatch_colors(Path(path).resolve(), tuple(color_ids)))

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class Settings:
    auto_assign_on_load: bool = True
    show_legend: bool = True
    fixed_wing_only: bool = True
    colorize_missiles: bool = True
    rename_missiles: bool = True


SETTINGS_TABLE = "colorizer"


def _default_path() -> Path:
    return Path.cwd() / "flightcolorizer.toml"


# ---------------------------------------- #


def load_settings(path: Path | None = None) -> Settings:
    if path is None:
        path = _default_path()

    try:
        import tomllib
    except Exception as exc:  # pragma: no cover
        raise RuntimeError("tomllib unavailable; need Python 3.11+ or tomli") from exc

    try:
        data: Any = tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Settings()

    table = data.get(SETTINGS_TABLE)
    if not isinstance(table, dict):
        return Settings()

    values: dict[str, bool] = {}
    for f in fields(Settings):
        value = table.get(f.name)
        # Anything but a real boolean falls back to the default.
        if isinstance(value, bool):
            values[f.name] = value

    return Settings(**values)


# ---------------------------------------- #


def toggle(settings: Settings, name: str) -> Settings:
    if name not in {f.name for f in fields(Settings)}:
        raise ValueError(f"Unknown setting: {name}")
    return replace(settings, **{name: not getattr(settings, name)})

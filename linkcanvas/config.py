"""Settings for canvas generation, loaded from TOML."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .models import LayoutConfig

CONFIG_FILENAME = ".linkcanvas.toml"


@dataclass(frozen=True)
class Settings:
    canvas_width: float = 800
    canvas_height: float = 600
    link_depth: int = 1  # 1 = immediate links only, 2 = links of links, ...
    node_width: float = 300
    node_height: float = 200
    horizontal_spacing: float = 450  # between columns
    vertical_spacing: float = 280  # between nodes in a column

    def layout(self) -> LayoutConfig:
        return LayoutConfig(
            canvas_width=self.canvas_width,
            canvas_height=self.canvas_height,
            node_width=self.node_width,
            node_height=self.node_height,
            horizontal_spacing=self.horizontal_spacing,
            vertical_spacing=self.vertical_spacing,
        )

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with the non-None overrides applied and validated."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return _validated(replace(self, **values))


def load_settings(vault_path: Path, config_path: Path | None = None) -> Settings:
    """
    Load settings from `config_path` or `<vault>/.linkcanvas.toml`.

    Values live under a [canvas] table. A missing file means defaults;
    unknown keys are ignored.
    """
    import tomllib

    path = config_path or (vault_path / CONFIG_FILENAME)
    if not path.exists():
        if config_path is not None:
            raise ConfigError(f"config file not found: {config_path}")
        return Settings()

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}") from e

    table = data.get("canvas", {})
    if not isinstance(table, dict):
        raise ConfigError(f"{path}: [canvas] must be a table")

    known = {f.name for f in fields(Settings)}
    values: dict[str, Any] = {}
    for key, value in table.items():
        key = key.replace("-", "_")
        if key not in known:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"{path}: {key} must be a number")
        values[key] = value

    return _validated(Settings(**values))


def _validated(settings: Settings) -> Settings:
    if not isinstance(settings.link_depth, int) or settings.link_depth < 0:
        raise ConfigError("link_depth must be a non-negative integer")
    for name in (
        "canvas_width",
        "canvas_height",
        "node_width",
        "node_height",
        "horizontal_spacing",
        "vertical_spacing",
    ):
        if getattr(settings, name) <= 0:
            raise ConfigError(f"{name} must be positive")
    return settings

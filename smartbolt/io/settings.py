import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import yaml

logger = logging.getLogger(__name__)

PROJECT_MARKERS: Iterable[str] = (".git", "pyproject.toml", "config")
DEFAULT_SETTINGS_PATH = Path("config/settings.yml")

PathLike = Union[str, os.PathLike]

MIN_PALETTE_SIZE = 4

DEFAULT_PALETTE = ["#3399ff", "#1acc66", "#ff9900", "#8e44ad"]
DEFAULT_STATUS_COLORS = {
    "normal": "#1acc66",
    "warning": "#ff9900",
    "critical": "#e74c3c",
    "maintenance": "#2f6fdb",
    "alert": "#e74c3c",
    "low_battery": "#ff9900",
    "offline": "#8a8a8a",
    "info": "#3399ff",
}


@dataclass
class AppSettings:
    """Typed view over ``settings.yml``; every key has a default."""

    refresh_interval_ms: int = 5000
    splash_duration_ms: int = 3500
    window_size: Tuple[int, int] = (1400, 900)
    seed: Optional[int] = None
    log_level: str = "INFO"
    palette: List[str] = field(default_factory=lambda: list(DEFAULT_PALETTE))
    status_colors: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_STATUS_COLORS))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppSettings":
        ui = data.get("ui", {}) or {}
        theme = data.get("theme", {}) or {}
        mock = data.get("mock", {}) or {}
        logging_cfg = data.get("logging", {}) or {}

        settings = cls()
        if "refresh_interval_ms" in ui:
            settings.refresh_interval_ms = int(ui["refresh_interval_ms"])
        if "splash_duration_ms" in ui:
            settings.splash_duration_ms = int(ui["splash_duration_ms"])
        if "window_size" in ui:
            width, height = ui["window_size"]
            settings.window_size = (int(width), int(height))
        if mock.get("seed") is not None:
            settings.seed = int(mock["seed"])
        if "level" in logging_cfg:
            settings.log_level = str(logging_cfg["level"]).upper()
        if "palette" in theme:
            palette = [str(color) for color in theme["palette"] or []]
            if len(palette) < MIN_PALETTE_SIZE:
                raise ValueError(f"theme.palette needs at least {MIN_PALETTE_SIZE} colors, got {len(palette)}")
            settings.palette = palette
        if "status_colors" in theme:
            settings.status_colors.update({str(k): str(v) for k, v in (theme["status_colors"] or {}).items()})
        if settings.refresh_interval_ms <= 0:
            raise ValueError("ui.refresh_interval_ms must be positive")
        return settings


def find_project_root(markers: Iterable[str] = PROJECT_MARKERS) -> Path:
    """Attempt to locate the repository root by walking up until a marker file/dir appears."""
    start = Path(__file__).resolve().parent
    for candidate in [start] + list(start.parents):
        for marker in markers:
            if (candidate / marker).exists():
                return candidate
    return start


def _resolve(path: PathLike, project_root: Path) -> Path:
    target = Path(path)
    if not target.is_absolute():
        target = project_root / target
    return target


def _load_yaml(target: Path) -> Dict[str, Any]:
    if not target.exists():
        raise FileNotFoundError(f"settings file not found: {target}")
    with open(target, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def load_settings(path: Optional[PathLike] = None) -> Dict[str, Any]:
    """Load the YAML settings file, defaulting to ``config/settings.yml`` under the project root."""
    project_root = find_project_root()
    target = _resolve(path or DEFAULT_SETTINGS_PATH, project_root)
    logger.debug("Loading settings from %s", target)
    return _load_yaml(target)


def load_app_settings(path: Optional[PathLike] = None) -> AppSettings:
    return AppSettings.from_dict(load_settings(path))

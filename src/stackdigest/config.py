"""Settings: discovery, loading, env overrides, path remapping.

Resolution order for the config directory (first match wins):

1. ``STACKDIGEST_CONFIG_DIR`` environment variable.
2. ``<project root>/.stackdigest`` where the project root is the nearest
   ancestor holding a ``.git`` directory (or the current directory).

``config.json`` inside that directory holds the persisted settings;
``templates.json`` (see :mod:`stackdigest.prompt.templates`) lives beside it.
Integer settings can also be overridden per process with environment
variables, which win over the file.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = ".stackdigest"
CONFIG_FILE_NAME = "config.json"
TEMPLATES_FILE_NAME = "templates.json"

ENV_CONFIG_DIR = "STACKDIGEST_CONFIG_DIR"

# env var -> (settings field, minimum)
_ENV_INT_OVERRIDES = {
    "STACKDIGEST_FRAMES": ("frames_to_annotate", 0),
    "STACKDIGEST_MAX_LINES": ("max_source_lines", 1),
    "STACKDIGEST_NEAR_MISS_CHARS": ("near_miss_chars", 0),
}

_INT_MINIMUMS = {
    "frames_to_annotate": 0,
    "max_source_lines": 1,
    "anchor_window_chars": 256,
    "candidate_cutoff_chars": 0,
    "near_miss_chars": 0,
    "header_backtrack_chars": 64,
    "header_max_lines": 1,
    "fallback_radius": 0,
}


@dataclass
class Settings:
    """Tunables for extraction, rendering and prompt assembly."""

    frames_to_annotate: int = 10
    max_source_lines: int = 120
    current_line_marker: str = "==>"
    # +/- window around the target searched for name occurrences
    anchor_window_chars: int = 20000
    # stop enumerating name hits once this far from the target
    candidate_cutoff_chars: int = 6 * 1024
    # accept a body that misses the target line when the name is this close
    near_miss_chars: int = 4096
    header_backtrack_chars: int = 8000
    header_max_lines: int = 30
    fallback_radius: int = 24
    path_remaps: list[dict[str, str]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Settings":
        """Build settings from a config dict, ignoring unknown or bad values."""
        settings = cls()
        if not isinstance(data, dict):
            return settings
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            if f.name in _INT_MINIMUMS:
                setattr(settings, f.name, _parse_int(value, getattr(settings, f.name), _INT_MINIMUMS[f.name]))
            elif f.name == "current_line_marker":
                if isinstance(value, str) and value.strip():
                    settings.current_line_marker = value.strip()
            elif f.name == "path_remaps":
                settings.path_remaps = _parse_remaps(value)
        return settings

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def remap_path(self, path: str) -> str:
        """Rewrite a build-machine path onto the local checkout.

        The first remap whose ``from`` prefix matches (case-insensitive,
        either slash direction) wins.  Unmatched paths are returned as-is.
        """
        if not path:
            return path
        for remap in self.path_remaps:
            src = remap.get("from", "").replace("\\", "/")
            if not src:
                continue
            head = path[: len(src)].replace("\\", "/")
            if head.casefold() == src.casefold():
                dst = remap.get("to", "")
                rest = path[len(src):]
                if "\\" not in dst:
                    rest = rest.replace("\\", "/")
                return dst + rest
        return path


def _parse_int(value: Any, default: int, minimum: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return max(minimum, parsed)


def _parse_remaps(value: Any) -> list[dict[str, str]]:
    remaps: list[dict[str, str]] = []
    if not isinstance(value, list):
        return remaps
    for item in value:
        if isinstance(item, dict) and item.get("from"):
            remaps.append({"from": str(item["from"]), "to": str(item.get("to", ""))})
    return remaps


def parse_remap(spec: str) -> dict[str, str]:
    """Parse a ``FROM=TO`` command-line remap.  Raises ValueError."""
    src, sep, dst = (spec or "").partition("=")
    if not sep or not src.strip():
        raise ValueError(f"remap must look like FROM=TO, got {spec!r}")
    return {"from": src.strip(), "to": dst.strip()}


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def find_project_root(start: str = ".") -> Path:
    """Find the project root by looking for .git directory."""
    current = Path(start).resolve()
    while current != current.parent:
        if (current / ".git").exists():
            return current
        current = current.parent
    return Path(start).resolve()


def get_config_dir(project_root: Path | None = None) -> Path:
    """Return the directory holding config.json and templates.json.

    The directory is not created here; writers create it on demand.
    """
    override = os.environ.get(ENV_CONFIG_DIR)
    if override:
        return Path(override)
    if project_root is None:
        project_root = find_project_root()
    return project_root / DEFAULT_CONFIG_DIR


# ---------------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------------


def load_config(config_dir: Path | None = None) -> dict[str, Any]:
    """Load config.json if it exists.

    Returns an empty dict if the file is missing or malformed.
    """
    if config_dir is None:
        config_dir = get_config_dir()
    config_path = config_dir / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        log.warning("Ignoring unreadable config %s: %s", config_path, exc)
        return {}
    if not isinstance(data, dict):
        log.warning("Ignoring config %s: expected a JSON object", config_path)
        return {}
    return data


def write_config(updates: dict[str, Any], config_dir: Path | None = None) -> Path:
    """Write (or update) config.json.

    Merges *updates* into the existing config so existing keys are preserved.
    Returns the path of the written file.
    """
    if config_dir is None:
        config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / CONFIG_FILE_NAME
    existing = load_config(config_dir)
    existing.update(updates)
    config_path.write_text(json.dumps(existing, indent=2) + "\n", encoding="utf-8")
    return config_path


def load_settings(config_dir: Path | None = None) -> Settings:
    """Load settings from config.json + env vars (env wins)."""
    settings = Settings.from_dict(load_config(config_dir))
    for env_name, (attr, minimum) in _ENV_INT_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if raw:
            setattr(settings, attr, _parse_int(raw, getattr(settings, attr), minimum))
    return settings

"""Prompt templates per mode, persisted as ``templates.json``."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from stackdigest.config import TEMPLATES_FILE_NAME, get_config_dir
from stackdigest.exit_codes import StackDigestError

log = logging.getLogger(__name__)

MODE_EMPTY = "empty"
MODE_EXPLAIN = "explain"
MODE_OPTIMIZE = "optimize"
MODES = (MODE_EMPTY, MODE_EXPLAIN, MODE_OPTIMIZE)

_SYSTEM_LINE = (
    "System: You are a senior engineer expert in Unreal Engine networking "
    "(Iris, NetworkPrediction), C++, and performance."
)

DEFAULT_TEMPLATES = {
    MODE_EMPTY: "",
    MODE_EXPLAIN: (
        f"{_SYSTEM_LINE}\n"
        "\n"
        "Task: Explain what is going on in this callstack.\n"
        "For each frame: briefly explain the key points of the algorithm (1–3 bullets).\n"
        "Then provide one concise paragraph summarizing the overall behavior."
    ),
    MODE_OPTIMIZE: (
        f"{_SYSTEM_LINE}\n"
        "\n"
        "Task: Analyze this callstack for performance and reliability risks.\n"
        "Identify hotspots (esp. serialization/replication), redundant work, and contention points.\n"
        "Propose concrete improvements (quick wins and deeper changes) with trade-offs."
    ),
}


def check_mode(mode: str) -> str:
    mode = (mode or "").strip().lower()
    if mode not in MODES:
        raise ValueError(f"unknown prompt mode {mode!r} (expected one of: {', '.join(MODES)})")
    return mode


class TemplateStore:
    """Thread-safe view of ``templates.json``.

    The file is read lazily on first access.  Keys missing from the file
    fall back to the defaults; an unreadable file is logged and ignored.
    Every change is written straight back.
    """

    def __init__(self, path: Path | None = None):
        if path is None:
            path = get_config_dir() / TEMPLATES_FILE_NAME
        self.path = Path(path)
        self._lock = threading.Lock()
        self._data: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        data = dict(DEFAULT_TEMPLATES)
        if not self.path.exists():
            return data
        try:
            loaded = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning("Ignoring unreadable templates %s: %s", self.path, exc)
            return data
        if not isinstance(loaded, dict):
            log.warning("Ignoring templates %s: expected a JSON object", self.path)
            return data
        for mode in MODES:
            value = loaded.get(mode)
            if isinstance(value, str):
                data[mode] = value
        return data

    def _save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._data, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            raise StackDigestError(f"could not save templates to {self.path}: {exc}") from exc

    def _ensure_loaded(self) -> dict[str, str]:
        if self._data is None:
            self._data = self._load()
        return self._data

    def get(self, mode: str) -> str:
        mode = check_mode(mode)
        with self._lock:
            return self._ensure_loaded()[mode]

    def set(self, mode: str, template: str) -> None:
        """Store *template* for *mode*; a blank template restores the default."""
        mode = check_mode(mode)
        if not template or not template.strip():
            template = DEFAULT_TEMPLATES[mode]
        with self._lock:
            self._ensure_loaded()[mode] = template
            self._save()

    def reset(self, mode: str) -> None:
        self.set(mode, DEFAULT_TEMPLATES[check_mode(mode)])

    def is_default(self, mode: str) -> bool:
        return self.get(mode) == DEFAULT_TEMPLATES[check_mode(mode)]

    def all(self) -> dict[str, str]:
        with self._lock:
            return dict(self._ensure_loaded())

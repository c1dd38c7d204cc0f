from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional

import yaml

from .errors import ParseError
from .modes.parser import parse_mode_spec


def _xdg_dir(env_name: str, fallback: str) -> Path:
    base = os.getenv(env_name)
    if base:
        return Path(base).expanduser()
    return Path.home() / fallback


class AppConfig:
    """Centralized runtime configuration.

    Defaults are overridden by environment variables, then by the optional
    YAML config file.
    """

    def __init__(self, config_file: Optional[Path] = None) -> None:
        self.config_dir = Path(
            os.getenv("DISPLAYMODE_CONFIG_DIR", str(_xdg_dir("XDG_CONFIG_HOME", ".config") / "displaymode"))
        ).expanduser()
        self.logs_dir = Path(
            os.getenv("DISPLAYMODE_LOG_DIR", str(_xdg_dir("XDG_STATE_HOME", ".local/state") / "displaymode"))
        ).expanduser()
        self.config_file = Path(config_file) if config_file else self.config_dir / "config.yaml"

        # X display to connect to; None lets python-xlib read $DISPLAY
        self.display_name: Optional[str] = os.getenv("DISPLAY") or None

        # Output to act on when -o is not given; None means the primary output
        self.default_output: Optional[str] = None

        # ANSI bold/reverse in listings
        self.color = sys.stdout.isatty() and "NO_COLOR" not in os.environ

        # Named shortcuts for mode strings, e.g. {"gaming": "2560x1440@144"}
        self.aliases: Dict[str, str] = {}

        self._load_file()

    def _load_file(self) -> None:
        log = logging.getLogger("config")
        if not self.config_file.exists():
            return
        try:
            with self.config_file.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as exc:
            log.warning("Failed to load %s: %s", self.config_file, exc)
            return
        if not isinstance(data, dict):
            log.warning("Ignoring %s: expected a mapping at top level", self.config_file)
            return

        output = data.get("output")
        if output:
            self.default_output = str(output)
        if "color" in data:
            self.color = bool(data["color"])
        self.aliases = self._parse_aliases(data.get("aliases") or {})

    def _parse_aliases(self, raw: object) -> Dict[str, str]:
        log = logging.getLogger("config")
        aliases: Dict[str, str] = {}
        if not isinstance(raw, dict):
            log.warning("Ignoring aliases in %s: expected a mapping", self.config_file)
            return aliases
        for name, value in raw.items():
            mode = str(value)
            try:
                parse_mode_spec(mode)
            except ParseError:
                log.warning("Bad alias %s in %s: %r is not a mode", name, self.config_file, value)
                continue
            aliases[str(name)] = mode
        return aliases

    def resolve_alias(self, mode: str) -> str:
        """Return the mode string an alias stands for, or ``mode`` unchanged."""
        return self.aliases.get(mode, mode)

    def ensure_data_dirs(self) -> None:
        """Create the log directory if possible."""
        self.logs_dir.mkdir(parents=True, exist_ok=True)

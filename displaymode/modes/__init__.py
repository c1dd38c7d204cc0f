"""Mode resolution: refresh rates, per-output catalogs, parsing and selection."""
from .catalog import ModeCatalog, build_catalog
from .models import ModeDescriptor, ModeSpec, OutputSnapshot, ResolvedModeSpec, ScreenSnapshot
from .parser import parse_mode_spec
from .rate import format_rate, refresh_rate
from .selector import resolve_spec, select_mode

__all__ = [
    "ModeCatalog",
    "ModeDescriptor",
    "ModeSpec",
    "OutputSnapshot",
    "ResolvedModeSpec",
    "ScreenSnapshot",
    "build_catalog",
    "format_rate",
    "parse_mode_spec",
    "refresh_rate",
    "resolve_spec",
    "select_mode",
]

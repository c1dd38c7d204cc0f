"""Plain-text listings of outputs, modes and refresh rates."""
from __future__ import annotations

from typing import List, Tuple

from ..modes.catalog import ModeCatalog
from ..modes.models import ScreenSnapshot
from ..modes.rate import format_rate

CSI = "\x1b["
BOLD = CSI + "1m"
REVERSE = CSI + "7m"
RESET = CSI + "0m"

RESOLUTION_WIDTH = 15
RATE_WIDTH = 6


def _styled(text: str, bold: bool, reverse: bool, color: bool) -> str:
    if not color or not (bold or reverse):
        return text
    start = (REVERSE if reverse else "") + (BOLD if bold else "")
    return f"{start}{text}{RESET}"


def _rate_cell(rate: float, ids: Tuple[int, ...], catalog: ModeCatalog, color: bool) -> str:
    text = format_rate(rate)
    current = catalog.current_mode in ids
    preferred = any(mode_id in catalog.preferred_modes for mode_id in ids)
    return "  " + _styled(text, preferred, current, color) + " " * max(RATE_WIDTH - len(text), 0)


def _resolution_line(width: int, height: int, catalog: ModeCatalog, color: bool) -> str:
    label = f"{width}x{height}@..."
    cells = [_rate_cell(rate, ids, catalog, color) for rate, ids in reversed(catalog.rates(width, height))]
    return "  " + label.ljust(RESOLUTION_WIDTH) + "".join(cells)


def render_rates(output_name: str, catalog: ModeCatalog, color: bool = False) -> str:
    """Refresh rates of the current resolution, highest first."""
    lines: List[str] = [f"Refresh rates for {output_name}:"]
    if catalog.current_resolution is None or catalog.current_resolution not in catalog:
        lines.append("  (no refresh rates)")
    else:
        width, height = catalog.current_resolution
        lines.append(_resolution_line(width, height, catalog, color))
    return "\n".join(lines) + "\n"


def render_modes(output_name: str, catalog: ModeCatalog, color: bool = False) -> str:
    """Every resolution of the output, largest first, each with its rates."""
    lines: List[str] = [f"Modes for {output_name}:"]
    resolutions = sorted(catalog.resolutions(), reverse=True)
    if not resolutions:
        lines.append("  (no modes)")
    for width, height in resolutions:
        lines.append(_resolution_line(width, height, catalog, color))
    return "\n".join(lines) + "\n"


def render_outputs(snapshot: ScreenSnapshot, color: bool = False) -> str:
    lines: List[str] = ["Outputs:"]
    names = snapshot.output_names()
    if not names:
        lines.append("  (no outputs)")
    for name in names:
        lines.append("  " + _styled(name, name == snapshot.primary, False, color))
    return "\n".join(lines) + "\n"

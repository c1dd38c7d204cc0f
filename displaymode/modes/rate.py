from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ModeDescriptor


def refresh_rate(mode: "ModeDescriptor") -> float:
    """Effective refresh rate of a mode in Hz.

    Interlaced modes scan half the lines per field, doublescan modes scan
    every line twice. Returns 0.0 for a degenerate mode (zero totals); callers
    treat that as "rate unknown" and never select it.
    """
    pixels = mode.h_total * mode.v_total
    if pixels <= 0:
        return 0.0
    if mode.interlace:
        pixels >>= 1
    if mode.doublescan:
        pixels <<= 1
    return mode.dot_clock / pixels


def format_rate(rate: float) -> str:
    """Format a rate with two decimals, dropping a trailing '.00'."""
    text = f"{rate:.2f}"
    if text.endswith(".00"):
        text = text[:-3]
    return text

from __future__ import annotations

import logging
from typing import Optional

from ..errors import NoModeMatch, OutputStateUnavailable, ResolutionNotSupported
from .catalog import ModeCatalog
from .models import ModeDescriptor, ModeSpec, ResolvedModeSpec
from .rate import format_rate


def resolve_spec(spec: ModeSpec, current: Optional[ModeDescriptor], output_name: str = "") -> ResolvedModeSpec:
    """Fill what the user left out from the output's current mode.

    A missing resolution becomes the current resolution. A missing rate becomes
    the current rate; a rate the user typed is never replaced.

    Raises:
        OutputStateUnavailable: a default is needed but the output has no current mode
    """
    if spec.width is not None and spec.height is not None and spec.rate is not None:
        return ResolvedModeSpec(spec.width, spec.height, spec.rate)

    if current is None:
        raise OutputStateUnavailable(output_name)

    if spec.width is None or spec.height is None:
        width, height = current.width, current.height
    else:
        width, height = spec.width, spec.height
    rate = spec.rate if spec.rate is not None else current.rate
    return ResolvedModeSpec(width, height, rate)


def select_mode(spec: ModeSpec, catalog: ModeCatalog, current: Optional[ModeDescriptor]) -> int:
    """Pick the supported mode closest to the requested one.

    Args:
        spec: Parsed user request
        catalog: Catalog of the target output
        current: Descriptor of the output's active mode, None if disabled

    Returns:
        The chosen mode id

    Raises:
        OutputStateUnavailable, ResolutionNotSupported, NoModeMatch
    """
    log = logging.getLogger("selector")
    target = resolve_spec(spec, current, catalog.output_name)

    bucket = catalog.bucket(target.width, target.height)
    if bucket is None:
        raise ResolutionNotSupported(target.width, target.height)

    chosen: Optional[int] = None
    chosen_delta = float("inf")
    # Ascending rate order; strict < keeps the first minimum on ties
    for rate, mode_id in bucket.items():
        if rate <= 0:
            continue
        delta = abs(rate - target.rate)
        if delta < chosen_delta:
            chosen_delta = delta
            chosen = mode_id

    if chosen is None:
        raise NoModeMatch()

    log.debug(
        "%s: requested %dx%d@%s, chose mode %#x (delta %.3f)",
        catalog.output_name,
        target.width,
        target.height,
        format_rate(target.rate),
        chosen,
        chosen_delta,
    )
    return chosen

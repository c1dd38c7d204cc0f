"""Per-output mode catalog keyed by width, height and refresh rate."""
from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from .models import OutputSnapshot, ScreenSnapshot

RateBucket = Dict[float, Tuple[int, ...]]


class ModeCatalog:
    """Ordered ``width -> height -> rate -> mode ids`` mapping for one output.

    Every level iterates in ascending key order. Mode ids sharing an identical
    (width, height, rate) are kept together in device order; the first one is
    the selection target.
    """

    def __init__(
        self,
        output_name: str,
        entries: Mapping[int, Mapping[int, Mapping[float, Sequence[int]]]],
        preferred_modes: FrozenSet[int] = frozenset(),
        current_mode: Optional[int] = None,
        current_resolution: Optional[Tuple[int, int]] = None,
    ) -> None:
        self.output_name = output_name
        self.preferred_modes = frozenset(preferred_modes)
        self.current_mode = current_mode
        self.current_resolution = current_resolution
        self._entries: Dict[int, Dict[int, RateBucket]] = {
            width: {
                height: {rate: tuple(entries[width][height][rate]) for rate in sorted(entries[width][height])}
                for height in sorted(entries[width])
            }
            for width in sorted(entries)
        }

    def __contains__(self, resolution: object) -> bool:
        if not isinstance(resolution, tuple) or len(resolution) != 2:
            return False
        width, height = resolution
        return height in self._entries.get(width, {})

    def __len__(self) -> int:
        return sum(len(ids) for _, _, _, ids in self._iter_entries())

    def _iter_entries(self) -> Iterator[Tuple[int, int, float, Tuple[int, ...]]]:
        for width, heights in self._entries.items():
            for height, rates in heights.items():
                for rate, ids in rates.items():
                    yield width, height, rate, ids

    def resolutions(self) -> List[Tuple[int, int]]:
        return [(width, height) for width, heights in self._entries.items() for height in heights]

    def rates(self, width: int, height: int) -> List[Tuple[float, Tuple[int, ...]]]:
        """All rates for a resolution, ascending, each with its mode ids."""
        return list(self._entries.get(width, {}).get(height, {}).items())

    def bucket(self, width: int, height: int) -> Optional[Dict[float, int]]:
        """rate -> mode id for one resolution, or None when it is not offered."""
        rates = self._entries.get(width, {}).get(height)
        if rates is None:
            return None
        return {rate: ids[0] for rate, ids in rates.items() if ids}


def build_catalog(snapshot: ScreenSnapshot, output: Union[str, OutputSnapshot]) -> ModeCatalog:
    """Build the mode catalog for one output of a screen snapshot."""
    if isinstance(output, str):
        output = snapshot.output(output)

    entries: Dict[int, Dict[int, Dict[float, List[int]]]] = {}
    # The device lists its preferred modes first
    preferred = frozenset(output.preferred_modes)
    current_resolution: Optional[Tuple[int, int]] = None

    for mode_id in output.modes:
        mode = snapshot.mode(mode_id)
        ids = entries.setdefault(mode.width, {}).setdefault(mode.height, {}).setdefault(mode.rate, [])
        if mode_id not in ids:
            ids.append(mode_id)
        if mode_id == output.current_mode:
            current_resolution = mode.resolution

    catalog = ModeCatalog(
        output.name,
        entries,
        preferred_modes=preferred,
        current_mode=output.current_mode,
        current_resolution=current_resolution,
    )
    logging.getLogger("catalog").debug(
        "%s: %d modes in %d resolutions, current %s",
        output.name,
        len(catalog),
        len(catalog.resolutions()),
        "x".join(map(str, current_resolution)) if current_resolution else "unknown",
    )
    return catalog

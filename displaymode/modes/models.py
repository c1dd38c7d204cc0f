from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from ..errors import NoPrimaryOutput, SnapshotError, UnknownOutput
from .rate import refresh_rate


@dataclass(frozen=True)
class ModeDescriptor:
    id: int
    width: int
    height: int
    dot_clock: int  # pixel clock in Hz
    h_total: int  # pixels per line including blanking
    v_total: int  # lines per frame including blanking
    interlace: bool = False
    doublescan: bool = False
    name: str = ""  # server-side mode name, informational only

    @property
    def rate(self) -> float:
        return refresh_rate(self)

    @property
    def resolution(self) -> Tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class OutputSnapshot:
    name: str
    modes: Tuple[int, ...] = ()  # device-reported order
    preferred_count: int = 0
    current_mode: Optional[int] = None  # None when the output is disabled
    crtc: Optional[int] = None  # opaque controller handle

    @property
    def preferred_modes(self) -> Tuple[int, ...]:
        """The first ``preferred_count`` modes, as the device reports them."""
        return self.modes[: self.preferred_count]


@dataclass(frozen=True)
class ScreenSnapshot:
    """Immutable view of one display's modes and outputs for a single command.

    Construction checks that every mode id an output refers to is present in
    the mode table, so catalog building and selection never hit a dangling id.
    """

    modes: Mapping[int, ModeDescriptor] = field(default_factory=dict)
    outputs: Mapping[str, OutputSnapshot] = field(default_factory=dict)
    primary: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "modes", MappingProxyType(dict(self.modes)))
        object.__setattr__(self, "outputs", MappingProxyType(dict(self.outputs)))
        for output in self.outputs.values():
            referenced = list(output.modes)
            if output.current_mode is not None:
                referenced.append(output.current_mode)
            missing = [mode_id for mode_id in referenced if mode_id not in self.modes]
            if missing:
                ids = ", ".join(f"{mode_id:#x}" for mode_id in missing)
                raise SnapshotError(f'output "{output.name}" references unknown mode(s) {ids}')
        if self.primary is not None and self.primary not in self.outputs:
            raise SnapshotError(f'primary output "{self.primary}" is not among the outputs')

    @classmethod
    def from_records(
        cls,
        modes: List[ModeDescriptor],
        outputs: List[OutputSnapshot],
        primary: Optional[str] = None,
    ) -> "ScreenSnapshot":
        return cls(
            modes={mode.id: mode for mode in modes},
            outputs={output.name: output for output in outputs},
            primary=primary,
        )

    def output_names(self) -> List[str]:
        return sorted(self.outputs)

    def output(self, name: str) -> OutputSnapshot:
        try:
            return self.outputs[name]
        except KeyError:
            raise UnknownOutput(name) from None

    def primary_output(self) -> OutputSnapshot:
        if not self.primary:
            raise NoPrimaryOutput()
        return self.outputs[self.primary]

    def mode(self, mode_id: int) -> ModeDescriptor:
        return self.modes[mode_id]

    def current_mode_of(self, output: OutputSnapshot) -> Optional[ModeDescriptor]:
        if output.current_mode is None:
            return None
        return self.modes[output.current_mode]


@dataclass(frozen=True)
class ModeSpec:
    """A partially specified mode as typed by the user.

    Width and height come together or not at all; at least one of resolution
    and rate is present.
    """

    width: Optional[int] = None
    height: Optional[int] = None
    rate: Optional[float] = None

    def __post_init__(self) -> None:
        if (self.width is None) != (self.height is None):
            raise ValueError("width and height must be given together")
        if self.width is None and self.rate is None:
            raise ValueError("a mode spec needs a resolution, a rate, or both")

    @property
    def has_resolution(self) -> bool:
        return self.width is not None

    @property
    def has_rate(self) -> bool:
        return self.rate is not None


@dataclass(frozen=True)
class ResolvedModeSpec:
    width: int
    height: int
    rate: float

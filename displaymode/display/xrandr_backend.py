"""XRandR access through python-xlib: read the screen state, apply a mode."""
from __future__ import annotations

import logging
from typing import Any, List, Optional

from Xlib import display as xdisplay
from Xlib.error import ConnectionClosedError, DisplayError, XError
from Xlib.ext import randr

from ..errors import ApplyFailure, DisplayUnavailable, OutputDisabled
from ..modes.models import ModeDescriptor, OutputSnapshot, ScreenSnapshot

# RRSetConfigSuccess
SET_CONFIG_SUCCESS = 0


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class XRandRBackend:
    """Reads modes and outputs from the X server and commits mode changes.

    The connection is opened lazily and closed by ``close()`` or on leaving
    a ``with`` block.
    """

    def __init__(self, display_name: Optional[str] = None) -> None:
        self.display_name = display_name
        self._log = logging.getLogger("xrandr")
        self._display: Optional[xdisplay.Display] = None
        self._config_timestamp: Optional[int] = None

    def __enter__(self) -> "XRandRBackend":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _connect(self) -> xdisplay.Display:
        if self._display is not None:
            return self._display
        try:
            disp = xdisplay.Display(self.display_name)
        except (DisplayError, OSError) as exc:
            raise DisplayUnavailable(f"can't open display {self.display_name or '(default)'}: {exc}") from exc
        if not disp.has_extension("RANDR"):
            disp.close()
            raise DisplayUnavailable("the X server does not support the RANDR extension")
        self._display = disp
        self._log.debug("Connected to X display %s", disp.get_display_name())
        return disp

    def close(self) -> None:
        if self._display is not None:
            try:
                self._display.close()
            finally:
                self._display = None

    def snapshot(self) -> ScreenSnapshot:
        """Read every mode, output and active CRTC mode of the default screen."""
        disp = self._connect()
        try:
            root = disp.screen().root
            resources = root.xrandr_get_screen_resources_current()
            primary_id = root.xrandr_get_output_primary().output
            self._config_timestamp = resources.config_timestamp

            modes = self._read_modes(resources)
            outputs: List[OutputSnapshot] = []
            primary: Optional[str] = None
            for output_id in resources.outputs:
                output = self._read_output(disp, output_id, resources.config_timestamp)
                outputs.append(output)
                if output_id == primary_id:
                    primary = output.name
        except (XError, ConnectionClosedError) as exc:
            raise DisplayUnavailable(f"querying screen resources failed: {exc}") from exc

        self._log.debug("Read %d modes and %d outputs, primary %s", len(modes), len(outputs), primary)
        return ScreenSnapshot.from_records(modes, outputs, primary)

    def _read_modes(self, resources: Any) -> List[ModeDescriptor]:
        names = _text(getattr(resources, "names", ""))
        offset = 0
        modes: List[ModeDescriptor] = []
        for info in resources.modes:
            name_length = getattr(info, "name_length", 0)
            name = names[offset:offset + name_length]
            offset += name_length
            modes.append(
                ModeDescriptor(
                    id=info.id,
                    width=info.width,
                    height=info.height,
                    dot_clock=info.dot_clock,
                    h_total=info.h_total,
                    v_total=info.v_total,
                    interlace=bool(info.flags & randr.Interlace),
                    doublescan=bool(info.flags & randr.DoubleScan),
                    name=name,
                )
            )
        return modes

    def _read_output(self, disp: xdisplay.Display, output_id: int, config_timestamp: int) -> OutputSnapshot:
        info = disp.xrandr_get_output_info(output_id, config_timestamp)
        # Older python-xlib releases expose the preferred modes as a list
        preferred_count = getattr(info, "num_preferred", None)
        if preferred_count is None:
            preferred_count = len(getattr(info, "preferred", ()) or ())

        crtc = info.crtc or None
        current_mode = None
        if crtc:
            crtc_info = disp.xrandr_get_crtc_info(crtc, config_timestamp)
            current_mode = crtc_info.mode or None

        return OutputSnapshot(
            name=_text(info.name),
            modes=tuple(info.modes),
            preferred_count=preferred_count,
            current_mode=current_mode,
            crtc=crtc,
        )

    def apply_mode(self, output: OutputSnapshot, mode_id: int) -> None:
        """Drive ``output``'s CRTC at ``mode_id``, keeping position, rotation and clones.

        Raises:
            OutputDisabled: the output has no CRTC
            ApplyFailure: the server rejected the configuration
        """
        if output.crtc is None:
            raise OutputDisabled(output.name)

        disp = self._connect()
        try:
            if self._config_timestamp is None:
                self._config_timestamp = disp.screen().root.xrandr_get_screen_resources_current().config_timestamp
            crtc_info = disp.xrandr_get_crtc_info(output.crtc, self._config_timestamp)
            reply = disp.xrandr_set_crtc_config(
                crtc=output.crtc,
                config_timestamp=self._config_timestamp,
                x=crtc_info.x,
                y=crtc_info.y,
                mode=mode_id,
                rotation=crtc_info.rotation,
                outputs=crtc_info.outputs,
                timestamp=crtc_info.timestamp,
            )
        except (XError, ConnectionClosedError) as exc:
            raise ApplyFailure(output.name, mode_id, str(exc)) from exc

        if reply.status != SET_CONFIG_SUCCESS:
            raise ApplyFailure(output.name, mode_id, f"server returned status {reply.status}")
        self._log.info("Set %s to mode %#x", output.name, mode_id)

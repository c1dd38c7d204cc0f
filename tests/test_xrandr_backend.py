from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from Xlib.error import ConnectionClosedError
from Xlib.ext import randr

from displaymode.display import xrandr_backend
from displaymode.display.xrandr_backend import XRandRBackend
from displaymode.errors import ApplyFailure, DisplayUnavailable, OutputDisabled


def _mode_info(mode_id, width, height, dot_clock, h_total, v_total, flags=0):
    name = f"{width}x{height}"
    return SimpleNamespace(
        id=mode_id,
        width=width,
        height=height,
        dot_clock=dot_clock,
        h_total=h_total,
        v_total=v_total,
        flags=flags,
        name_length=len(name),
    ), name


@pytest.fixture
def fake_display(monkeypatch):
    infos = [
        _mode_info(0x41, 1920, 1080, 148_500_000, 2200, 1125),
        _mode_info(0x42, 1920, 1080, 74_250_000, 2200, 1125, flags=randr.Interlace),
        _mode_info(0x45, 1280, 720, 74_250_000, 1650, 750),
    ]
    disp = MagicMock()
    disp.has_extension.return_value = True
    root = disp.screen.return_value.root
    root.xrandr_get_screen_resources_current.return_value = SimpleNamespace(
        config_timestamp=7,
        outputs=[0x50, 0x51],
        modes=[info for info, _ in infos],
        names="".join(name for _, name in infos),
    )
    root.xrandr_get_output_primary.return_value = SimpleNamespace(output=0x50)
    outputs = {
        0x50: SimpleNamespace(name="DP-1", crtc=0x3F, modes=[0x41, 0x42, 0x45], num_preferred=1),
        # Older python-xlib: preferred modes come back as a list
        0x51: SimpleNamespace(name=b"HDMI-1", crtc=0, modes=[0x45], preferred=[0x45]),
    }
    disp.xrandr_get_output_info.side_effect = lambda output, timestamp: outputs[output]
    disp.xrandr_get_crtc_info.return_value = SimpleNamespace(
        mode=0x41, x=1920, y=0, rotation=randr.Rotate_0, outputs=[0x50], timestamp=5
    )
    disp.xrandr_set_crtc_config.return_value = SimpleNamespace(status=0)
    factory = MagicMock(return_value=disp)
    monkeypatch.setattr(xrandr_backend.xdisplay, "Display", factory)
    return disp


def test_snapshot(fake_display):
    with XRandRBackend(":0") as backend:
        snapshot = backend.snapshot()

    assert snapshot.primary == "DP-1"
    assert snapshot.output_names() == ["DP-1", "HDMI-1"]

    dp1 = snapshot.output("DP-1")
    assert dp1.modes == (0x41, 0x42, 0x45)
    assert dp1.preferred_modes == (0x41,)
    assert dp1.current_mode == 0x41
    assert dp1.crtc == 0x3F

    hdmi1 = snapshot.output("HDMI-1")
    assert hdmi1.crtc is None
    assert hdmi1.current_mode is None
    assert hdmi1.preferred_count == 1

    assert snapshot.mode(0x42).interlace
    assert snapshot.mode(0x42).rate == 60.0
    assert snapshot.mode(0x45).name == "1280x720"
    fake_display.close.assert_called_once()


def test_missing_randr_extension(fake_display):
    fake_display.has_extension.return_value = False
    with pytest.raises(DisplayUnavailable):
        XRandRBackend().snapshot()


def test_cannot_open_display(monkeypatch):
    monkeypatch.setattr(xrandr_backend.xdisplay, "Display", MagicMock(side_effect=OSError("refused")))
    with pytest.raises(DisplayUnavailable) as excinfo:
        XRandRBackend(":9").snapshot()
    assert ":9" in str(excinfo.value)


def test_apply_mode_keeps_crtc_layout(fake_display):
    backend = XRandRBackend()
    snapshot = backend.snapshot()
    backend.apply_mode(snapshot.output("DP-1"), 0x45)

    fake_display.xrandr_set_crtc_config.assert_called_once_with(
        crtc=0x3F,
        config_timestamp=7,
        x=1920,
        y=0,
        mode=0x45,
        rotation=randr.Rotate_0,
        outputs=[0x50],
        timestamp=5,
    )


def test_apply_mode_on_disabled_output(fake_display):
    backend = XRandRBackend()
    snapshot = backend.snapshot()
    with pytest.raises(OutputDisabled):
        backend.apply_mode(snapshot.output("HDMI-1"), 0x45)
    fake_display.xrandr_set_crtc_config.assert_not_called()


def test_apply_mode_rejected(fake_display):
    fake_display.xrandr_set_crtc_config.return_value = SimpleNamespace(status=2)
    backend = XRandRBackend()
    snapshot = backend.snapshot()
    with pytest.raises(ApplyFailure) as excinfo:
        backend.apply_mode(snapshot.output("DP-1"), 0x45)
    assert excinfo.value.mode_id == 0x45


def test_mode_names_come_from_reply_names(fake_display):
    resources = fake_display.screen.return_value.root.xrandr_get_screen_resources_current.return_value
    resources.names = "1920x1080i1080p720p"
    resources.modes[0].name_length = 10
    resources.modes[1].name_length = 5
    resources.modes[2].name_length = 4
    snapshot = XRandRBackend().snapshot()
    assert [snapshot.mode(mode_id).name for mode_id in (0x41, 0x42, 0x45)] == ["1920x1080i", "1080p", "720p"]


def test_connection_closed_while_reading(fake_display):
    fake_display.xrandr_get_output_info.side_effect = ConnectionClosedError("server")
    with pytest.raises(DisplayUnavailable):
        XRandRBackend().snapshot()


def test_connection_closed_while_applying(fake_display):
    backend = XRandRBackend()
    snapshot = backend.snapshot()
    fake_display.xrandr_set_crtc_config.side_effect = ConnectionClosedError("server")
    with pytest.raises(ApplyFailure):
        backend.apply_mode(snapshot.output("DP-1"), 0x45)

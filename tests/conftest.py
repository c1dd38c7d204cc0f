"""
Shared fixtures: a two-output screen with DP-1 active at 1920x1080@60 and
HDMI-1 connected but disabled.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from displaymode.modes.models import ModeDescriptor, OutputSnapshot, ScreenSnapshot


def make_mode(mode_id: int, width: int, height: int, dot_clock: int, h_total: int, v_total: int, **flags) -> ModeDescriptor:
    return ModeDescriptor(
        id=mode_id,
        width=width,
        height=height,
        dot_clock=dot_clock,
        h_total=h_total,
        v_total=v_total,
        name=f"{width}x{height}",
        **flags,
    )


MODE_1080_60 = make_mode(0x41, 1920, 1080, 148_500_000, 2200, 1125)  # 60.00
MODE_1080_5994 = make_mode(0x42, 1920, 1080, 148_352_000, 2200, 1125)  # 59.94
MODE_1080_7499 = make_mode(0x43, 1920, 1080, 185_600_000, 2200, 1125)  # 74.99
MODE_1440_60 = make_mode(0x44, 2560, 1440, 241_536_000, 2720, 1480)  # 60.00
MODE_720_60 = make_mode(0x45, 1280, 720, 74_250_000, 1650, 750)  # 60.00
MODE_720_50 = make_mode(0x46, 1280, 720, 74_250_000, 1980, 750)  # 50.00

ALL_MODES = [MODE_1080_60, MODE_1080_5994, MODE_1080_7499, MODE_1440_60, MODE_720_60, MODE_720_50]


@pytest.fixture
def dp1() -> OutputSnapshot:
    return OutputSnapshot(
        name="DP-1",
        modes=(0x41, 0x42, 0x43, 0x44, 0x45, 0x46),
        preferred_count=1,
        current_mode=0x41,
        crtc=0x3F,
    )


@pytest.fixture
def hdmi1() -> OutputSnapshot:
    return OutputSnapshot(name="HDMI-1", modes=(0x45, 0x46), preferred_count=1)


@pytest.fixture
def snapshot(dp1: OutputSnapshot, hdmi1: OutputSnapshot) -> ScreenSnapshot:
    return ScreenSnapshot.from_records(ALL_MODES, [hdmi1, dp1], primary="DP-1")


@pytest.fixture
def config_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config and log directories at a temp dir; returns the config dir."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("DISPLAYMODE_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("DISPLAYMODE_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("DISPLAY", raising=False)
    return config_dir

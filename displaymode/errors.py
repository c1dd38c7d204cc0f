"""
Exception hierarchy for displaymode.

Core operations return a value or raise one of these; the command-line
layer is the only place they become messages and exit codes.
"""
from __future__ import annotations


class DisplayModeError(Exception):
    """Base exception for all displaymode errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class DisplayUnavailable(DisplayModeError):
    """The X display or its RANDR extension could not be reached."""

    pass


class SnapshotError(DisplayModeError):
    """An output references a mode id missing from the screen's mode table."""

    pass


class UnknownOutput(DisplayModeError):
    """No output with the requested name."""

    def __init__(self, name: str):
        super().__init__(f'no output named "{name}"')
        self.name = name


class NoPrimaryOutput(DisplayModeError):
    """The display server does not designate a primary output."""

    def __init__(self) -> None:
        super().__init__("cannot determine primary output")


class ModeSetError(DisplayModeError):
    """Any failure that prevents a requested mode from being applied."""

    pass


class ParseError(ModeSetError):
    """Mode string does not match WIDTHxHEIGHT, WIDTHxHEIGHT@RATE or RATE."""

    def __init__(self, text: str):
        super().__init__(f'cannot parse mode "{text}"')
        self.text = text


class ResolutionNotSupported(ModeSetError):
    def __init__(self, width: int, height: int):
        super().__init__(f"invalid resolution: {width}x{height}")
        self.width = width
        self.height = height


class NoModeMatch(ModeSetError):
    def __init__(self, message: str = "no appropriate mode found"):
        super().__init__(message)


class OutputStateUnavailable(ModeSetError):
    """A default was needed but the output has no active mode."""

    def __init__(self, output: str):
        super().__init__(f'output "{output}" has no current mode to take defaults from')
        self.output = output


class OutputDisabled(ModeSetError):
    def __init__(self, output: str):
        super().__init__(f'output "{output}" is disabled')
        self.output = output


class ApplyFailure(ModeSetError):
    def __init__(self, output: str, mode_id: int, reason: str = ""):
        message = f'failed to set mode {mode_id:#x} on "{output}"'
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.output = output
        self.mode_id = mode_id

"""Display server access for reading outputs and applying modes."""
from .xrandr_backend import XRandRBackend

__all__ = ["XRandRBackend"]

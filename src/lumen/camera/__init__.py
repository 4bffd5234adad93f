"""Camera module for view and ray generation.

Components:
    pinhole: Pinhole (perspective) camera with look-at construction

Camera responsibilities:
    - Map pixel coordinates to world-space primary rays
    - Accept fractional pixel coordinates for sub-pixel jitter
    - Enforce valid projection parameters at construction
"""

from .pinhole import Camera

__all__ = ["Camera"]

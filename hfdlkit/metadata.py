"""Metadata attached to received frames."""

from __future__ import annotations

import copy as _copy
from dataclasses import dataclass


@dataclass
class Metadata:
    """Base metadata: the time a frame was received, in seconds since the epoch.

    Subclasses add fields of their own; ``copy`` preserves the concrete type.
    """

    rx_timestamp: float = 0.0

    def copy(self) -> "Metadata":
        """Return an independent copy of this metadata object."""
        return _copy.deepcopy(self)
"""Session-related data models."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class SessionState:
    """Mutable per-session segmentation state."""
    last_fragment_timestamp: Optional[int] = None
    active_line_index: Optional[int] = None

    @property
    def has_open_line(self) -> bool:
        return self.active_line_index is not None

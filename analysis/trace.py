"""
Search Trace for the Multi-Resource Safety Checker.

Defines event types for recording how the safety search explored
configurations.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class TraceEventType(Enum):
    """Types of events in a safety search."""
    EXPAND = "expand"
    GRANT = "grant"
    DEAD_END = "dead_end"
    SKIP_DUPLICATE = "skip_duplicate"
    COMPLETE = "complete"


@dataclass
class TraceEvent:
    """
    Represents a single step of the search.

    Attributes:
        index: Expansion counter when the event occurred
        event_type: Type of event
        free: Free pool of the configuration involved
        owner_id: Owner granted (GRANT events only)
        message: Human-readable description
    """
    index: int
    event_type: TraceEventType
    free: List[int]
    owner_id: Optional[int] = None
    message: str = ""

    def __str__(self) -> str:
        """Format event for logging."""
        base = f"#{self.index} free={self.free}"

        if self.event_type == TraceEventType.EXPAND:
            return f"{base} - EXPAND ({self.message})"
        elif self.event_type == TraceEventType.GRANT:
            return f"{base} - GRANT O{self.owner_id}"
        elif self.event_type == TraceEventType.DEAD_END:
            return f"{base} - DEAD END ({self.message})"
        elif self.event_type == TraceEventType.SKIP_DUPLICATE:
            return f"{base} - already explored"
        else:
            return f"{base} - COMPLETE ({self.message})"


@dataclass
class SearchTrace:
    """Collection of search events."""
    events: list = None

    def __post_init__(self):
        if self.events is None:
            self.events = []

    def add(self, event: TraceEvent) -> None:
        """Add an event to the trace."""
        self.events.append(event)

    def get_events_by_type(self, event_type: TraceEventType) -> list:
        """Get all events of a specific type."""
        return [e for e in self.events if e.event_type == event_type]

    def grants(self) -> List[int]:
        """Owner ids of every grant explored, in exploration order."""
        return [e.owner_id for e in self.get_events_by_type(TraceEventType.GRANT)]

    def __len__(self) -> int:
        return len(self.events)

    def display(self) -> str:
        """Format all events for display."""
        return "\n".join(str(event) for event in self.events)

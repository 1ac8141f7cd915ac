"""
Interfaces to the reporter's external collaborators:

1. Conference session (event source + state queries)
2. Capability probing (optional stats support)
3. Analytics sink (receives averaged events)
"""

from .analytics import (
    AnalyticsSink,
    EventPayload,
)

from .capabilities import (
    StatsCapabilities,
)

from .session import (
    ConferenceSession,
    SessionEvent,
)

__all__ = [
    'AnalyticsSink',
    'EventPayload',
    'StatsCapabilities',
    'ConferenceSession',
    'SessionEvent',
]

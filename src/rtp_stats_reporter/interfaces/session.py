"""
Conference Session Interface

The reporter subscribes to session events and queries a little session
state. Everything else about the conference is out of scope.
"""

from enum import Enum
from typing import Callable, Protocol


class SessionEvent(Enum):
    """Events the reporter listens to (payload in parentheses)"""
    LOCAL_STATS_UPDATED = "local_stats"        # (LocalStats | dict)
    CONNECTION_STATS = "connection_stats"      # (ConnectionStats | dict)
    P2P_STATUS = "p2p_status"                  # (is_p2p)
    USER_JOINED = "user_joined"                # (participant_id)
    USER_LEFT = "user_left"                    # (participant_id)
    REMOTE_STATS_UPDATED = "remote_stats"      # (participant_id, RemoteStats | dict)


class ConferenceSession(Protocol):
    """
    Event source and state for one conference.

    Dispatch contract: listeners are called synchronously, one event at a
    time, in the order the session produces the events. A listener runs to
    completion before the next event is delivered.
    """

    def on(self, event: SessionEvent, listener: Callable) -> None:
        """Subscribe a listener"""
        ...

    def off(self, event: SessionEvent, listener: Callable) -> None:
        """Unsubscribe a listener (no-op if not subscribed)"""
        ...

    def is_p2p_active(self) -> bool:
        """True while media flows over the direct (P2P) connection"""
        ...

    def get_participant_count(self) -> int:
        """Number of remote participants (excluding the local user)"""
        ...

    def my_user_id(self) -> str:
        """Participant id of the local user"""
        ...

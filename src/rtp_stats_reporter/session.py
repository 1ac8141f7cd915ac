"""
In-process conference session

A minimal ConferenceSession with synchronous, ordered dispatch. Used by the
replay CLI and by tests; a real client wires its own conference object to
the same interface.
"""

import logging
from collections import defaultdict
from typing import Callable, Dict, List, Set

from .interfaces.session import SessionEvent

logger = logging.getLogger(__name__)


class EventEmitterSession:
    """
    Conference session state plus an event emitter.

    Dispatch is sequential: emit() calls each listener in registration order
    on the caller's thread and returns once all of them have run. The
    listener list is copied before dispatch, so subscribing or unsubscribing
    from inside a listener takes effect from the next event on.

    Session state is updated before listeners run:
    - P2P_STATUS sets the P2P flag
    - USER_JOINED / USER_LEFT add / remove the remote participant
    """

    def __init__(self, my_user_id: str = 'local', is_p2p: bool = False):
        self._my_user_id = my_user_id
        self._is_p2p = is_p2p
        self._participants: Set[str] = set()
        self._listeners: Dict[SessionEvent, List[Callable]] = defaultdict(list)

    # === ConferenceSession ===

    def on(self, event: SessionEvent, listener: Callable) -> None:
        self._listeners[event].append(listener)
        logger.debug(f"Registered listener for {event.value}")

    def off(self, event: SessionEvent, listener: Callable) -> None:
        listeners = self._listeners.get(event)
        if listeners and listener in listeners:
            listeners.remove(listener)
            logger.debug(f"Unregistered listener for {event.value}")

    def is_p2p_active(self) -> bool:
        return self._is_p2p

    def get_participant_count(self) -> int:
        return len(self._participants)

    def my_user_id(self) -> str:
        return self._my_user_id

    # === Event production ===

    def emit(self, event: SessionEvent, *args) -> None:
        """Update session state for the event, then notify listeners"""
        if event == SessionEvent.P2P_STATUS:
            self._is_p2p = bool(args[0]) if args else not self._is_p2p
        elif event == SessionEvent.USER_JOINED:
            self._participants.add(args[0])
        elif event == SessionEvent.USER_LEFT:
            self._participants.discard(args[0])

        for listener in list(self._listeners.get(event, ())):
            listener(*args)

    def listener_count(self, event: SessionEvent = None) -> int:
        """Number of listeners for one event, or for all events"""
        if event is not None:
            return len(self._listeners.get(event, ()))
        return sum(len(listeners) for listeners in self._listeners.values())

    @property
    def participants(self) -> Set[str]:
        return set(self._participants)

    def set_my_user_id(self, user_id: str) -> None:
        self._my_user_id = user_id

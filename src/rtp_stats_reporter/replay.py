"""
Session event log replay

Feeds a recorded conference event log (JSON Lines) through an
EventEmitterSession so the reporter sees exactly the recorded sequence.

Log format, one object per line:
    {"event": "session", "my_user_id": "abc"}         (optional, first line)
    {"event": "local_stats", "stats": {...}}
    {"event": "connection_stats", "stats": {"isP2P": false, "transport": [...]}}
    {"event": "p2p_status", "p2p": true}
    {"event": "user_joined", "id": "def"}
    {"event": "user_left", "id": "def"}
    {"event": "remote_stats", "id": "def", "stats": {"jvbRTT": 42}}
"""

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable

from .interfaces.session import SessionEvent
from .session import EventEmitterSession

logger = logging.getLogger(__name__)


@dataclass
class ReplaySummary:
    """What a replay went through"""
    lines_read: int = 0
    events_replayed: Counter = field(default_factory=Counter)
    lines_skipped: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'lines_read': self.lines_read,
            'events_replayed': dict(self.events_replayed),
            'lines_skipped': self.lines_skipped,
        }


class EventReplayer:
    """
    Replays event log records into a session.

    Malformed lines are logged and skipped; replay never stops early.
    """

    def __init__(self, session: EventEmitterSession):
        self.session = session
        self.summary = ReplaySummary()

    def replay_record(self, record: Dict[str, Any]) -> bool:
        """
        Replay one decoded record

        Returns:
            True if the record was dispatched
        """
        kind = record.get('event')

        if kind == 'session':
            self.session.set_my_user_id(str(record.get('my_user_id', self.session.my_user_id())))
            return True

        try:
            event = SessionEvent(kind)
        except ValueError:
            logger.warning(f"Unknown event {kind!r} - skipping")
            return False

        if event in (SessionEvent.LOCAL_STATS_UPDATED, SessionEvent.CONNECTION_STATS):
            self.session.emit(event, record.get('stats'))
        elif event == SessionEvent.P2P_STATUS:
            self.session.emit(event, bool(record.get('p2p', False)))
        elif 'id' not in record:
            logger.warning(f"{kind} event without participant id - skipping")
            return False
        elif event == SessionEvent.REMOTE_STATS_UPDATED:
            self.session.emit(event, str(record['id']), record.get('stats'))
        else:
            self.session.emit(event, str(record['id']))

        self.summary.events_replayed[event.value] += 1
        return True

    def replay_lines(self, lines: Iterable[str]) -> ReplaySummary:
        """Replay JSON Lines text"""
        for line_no, line in enumerate(lines, start=1):
            line = line.strip()
            if not line:
                continue
            self.summary.lines_read += 1

            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                logger.error(f"Line {line_no}: invalid JSON ({e}) - skipping")
                self.summary.lines_skipped += 1
                continue

            if not isinstance(record, dict) or not self.replay_record(record):
                self.summary.lines_skipped += 1

        return self.summary

    def replay_file(self, events_file: Path) -> ReplaySummary:
        """Replay an event log file"""
        logger.info(f"Replaying session events from {events_file}")
        with open(events_file, 'r') as f:
            return self.replay_lines(f)

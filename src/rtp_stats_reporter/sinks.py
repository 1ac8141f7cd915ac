"""
Analytics sinks

- LoggingAnalyticsSink: writes every event to the log
- JsonlAnalyticsSink: appends one JSON object per event to a file
"""

import json
import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .config import SinkConfig
from .interfaces.analytics import AnalyticsSink, EventPayload

logger = logging.getLogger(__name__)


def payload_value(payload: EventPayload) -> float:
    """The number carried by a bare or ``{"value": ...}`` payload"""
    if isinstance(payload, dict):
        return payload.get('value')
    return payload


def to_native(v) -> Optional[float]:
    """JSON-safe number: numpy scalars unwrapped, NaN/inf become None"""
    if v is None:
        return None
    if hasattr(v, 'item'):  # numpy scalar
        v = v.item()
    if isinstance(v, float) and not math.isfinite(v):
        return None
    return v


class LoggingAnalyticsSink(AnalyticsSink):
    """Logs events instead of sending them anywhere"""

    def __init__(self, level: int = logging.INFO):
        self.level = level
        self.events_sent = 0

    def send_event(self, name: str, payload: EventPayload) -> None:
        self.events_sent += 1
        logger.log(self.level, f"analytics event {name}: {payload_value(payload)}")


class JsonlAnalyticsSink(AnalyticsSink):
    """
    Appends events to a JSON Lines file.

    Each line: {"timestamp": ISO-8601 UTC, "name": str, "value": number|null}
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.events_sent = 0
        logger.info(f"Analytics events will be written to {self.path}")

    def send_event(self, name: str, payload: EventPayload) -> None:
        record = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'name': name,
            'value': to_native(payload_value(payload)),
        }
        try:
            with open(self.path, 'a') as f:
                f.write(json.dumps(record) + '\n')
        except OSError as e:
            # Fire-and-forget: a failed write loses the event
            logger.error(f"Failed to write analytics event {name} to {self.path}: {e}")
            return
        self.events_sent += 1


def create_sink(config: SinkConfig) -> AnalyticsSink:
    """Build the sink described by the configuration"""
    if config.type == 'jsonl':
        return JsonlAnalyticsSink(config.path)
    return LoggingAnalyticsSink()

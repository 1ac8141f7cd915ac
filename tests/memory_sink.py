"""
In-memory analytics sink and sample builders shared by the tests
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

src_path = str(Path(__file__).parent.parent / 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from rtp_stats_reporter.interfaces.analytics import AnalyticsSink
from rtp_stats_reporter.sinks import payload_value


class MemorySink(AnalyticsSink):
    """Stores every event so tests can inspect them"""

    def __init__(self):
        self.events: List[Tuple[str, Any]] = []

    def send_event(self, name: str, payload) -> None:
        self.events.append((name, payload))

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def value(self, name: str) -> Optional[float]:
        """Value of the last event with this name"""
        for event_name, payload in reversed(self.events):
            if event_name == name:
                return payload_value(payload)
        return None

    def clear(self) -> None:
        self.events.clear()


def local_stats(upload: float = 100, download: float = 200,
                framerate: Optional[Dict[str, Dict[str, Any]]] = None,
                connection_quality: float = 100.0, **overrides) -> Dict[str, Any]:
    """A complete LOCAL_STATS_UPDATED payload"""
    stats = {
        'bitrate': {'upload': upload, 'download': download},
        'bandwidth': {'upload': 1000, 'download': 2000},
        'packetLoss': {'upload': 1, 'download': 2, 'total': 3},
        'framerate': framerate if framerate is not None else {'me': {'1': 30}, 'peer': {'2': 24}},
        'connectionQuality': connection_quality,
    }
    stats.update(overrides)
    return stats


def connection_stats(is_p2p: bool, rtt: Optional[float] = None) -> Dict[str, Any]:
    """A CONNECTION_STATS payload; rtt None means no candidate pair"""
    transport = [] if rtt is None else [{'rtt': rtt}]
    return {'isP2P': is_p2p, 'transport': transport}

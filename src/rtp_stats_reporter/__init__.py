"""
RTP Stats Reporter - windowed averages of conference connection stats

Consumes the periodic connection quality samples of a conference session,
averages them over windows of N samples and submits one event per metric
per window to an analytics sink. JVB (relayed) and P2P (direct) modes are
tracked separately and every mode switch restarts all averages.

Quick Start:
    from rtp_stats_reporter import (
        AvgRTPStatsReporter, EventEmitterSession, LoggingAnalyticsSink,
        SessionEvent, StaticCapabilities,
    )

    session = EventEmitterSession(my_user_id='me')
    reporter = AvgRTPStatsReporter(
        session, n=15,
        sink=LoggingAnalyticsSink(),
        capabilities=StaticCapabilities(),
    )
    session.emit(SessionEvent.LOCAL_STATS_UPDATED, stats)
"""

__version__ = "1.0.0"

from .average_stat import AverageStatReport, DEFAULT_P2P_PREFIX
from .connection_avg_stats import ConnectionAvgStats, END_TO_END_RTT_EVENT
from .avg_rtp_stats_reporter import AvgRTPStatsReporter
from .data_models import (
    LocalStats, UpDown, PacketLoss,
    ConnectionStats, TransportStats, RemoteStats,
)
from .errors import StatsError, MissingStatsFieldError, MalformedStatsError, ConfigurationError
from .interfaces import AnalyticsSink, StatsCapabilities, ConferenceSession, SessionEvent
from .session import EventEmitterSession
from .capabilities import StaticCapabilities
from .sinks import LoggingAnalyticsSink, JsonlAnalyticsSink, create_sink
from .config import ReporterConfig, SinkConfig, load_config

__all__ = [
    # === Reporter ===
    "AvgRTPStatsReporter",
    "ConnectionAvgStats",
    "AverageStatReport",
    "DEFAULT_P2P_PREFIX",
    "END_TO_END_RTT_EVENT",
    # === Payloads ===
    "LocalStats",
    "UpDown",
    "PacketLoss",
    "ConnectionStats",
    "TransportStats",
    "RemoteStats",
    # === Errors ===
    "StatsError",
    "MissingStatsFieldError",
    "MalformedStatsError",
    "ConfigurationError",
    # === Collaborators ===
    "AnalyticsSink",
    "StatsCapabilities",
    "ConferenceSession",
    "SessionEvent",
    "EventEmitterSession",
    "StaticCapabilities",
    "LoggingAnalyticsSink",
    "JsonlAnalyticsSink",
    "create_sink",
    # === Configuration ===
    "ReporterConfig",
    "SinkConfig",
    "load_config",
]

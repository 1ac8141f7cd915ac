#!/usr/bin/env python3
"""
Average RTP Stats Reporter

Reports average RTP statistics (arithmetic mean) to the analytics sink for
bit rate, bandwidth, packet loss, frame rate, connection quality and RTT.

Architecture:
    session events → AvgRTPStatsReporter (local stats, every N samples)
                   → ConnectionAvgStats x2 (JVB + P2P RTT, every N samples)
                   → AnalyticsSink

P2P vs JVB:
    Events reported in P2P mode carry the 'p2p.' prefix. Every switch
    between modes resets everything collected so far; the averages are
    calculated from scratch, so a window never mixes the two modes.
"""

import logging
from typing import Any, Dict, Optional

import numpy as np

from .average_stat import AverageStatReport, DEFAULT_P2P_PREFIX
from .connection_avg_stats import ConnectionAvgStats
from .data_models import LocalStats
from .errors import StatsError
from .interfaces.analytics import AnalyticsSink
from .interfaces.capabilities import StatsCapabilities
from .interfaces.session import ConferenceSession, SessionEvent

logger = logging.getLogger(__name__)


def _parse_fps(value) -> float:
    """Integer part of a frame rate value, NaN if it is not a number"""
    try:
        return float(int(value))
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return float(int(float(value)))
    except (TypeError, ValueError, OverflowError):
        return float(np.nan)


class AvgRTPStatsReporter:
    """
    Averages local stats over windows of N samples and reports them.

    Example:
        reporter = AvgRTPStatsReporter(
            session=session,
            n=15,
            sink=JsonlAnalyticsSink(Path('analytics.jsonl')),
            capabilities=StaticCapabilities(),
        )
        ...
        reporter.dispose()

    With n <= 0 the reporter is disabled: it subscribes to nothing and
    never reports.
    """

    def __init__(
        self,
        session: ConferenceSession,
        n: int,
        sink: AnalyticsSink,
        capabilities: StatsCapabilities,
        p2p_prefix: str = DEFAULT_P2P_PREFIX,
    ):
        """
        Initialize reporter

        Args:
            session: Conference whose stats are averaged
            n: Number of local stats samples per window
            sink: Analytics sink for reports
            capabilities: Environment capability probe
            p2p_prefix: Event name prefix used in P2P mode
        """
        self.n = n
        self.sample_idx = 0
        self.jvb_stats_monitor: Optional[ConnectionAvgStats] = None
        self.p2p_stats_monitor: Optional[ConnectionAvgStats] = None

        if n > 0:
            logger.info(f"Avg RTP stats will be calculated every {n} samples")
        else:
            logger.info("Avg RTP stats reports are disabled.")
            return

        self.sink = sink
        self.capabilities = capabilities
        self._session = session

        def avg(name: str) -> AverageStatReport:
            return AverageStatReport(name, sink, p2p_prefix)

        self.avg_bitrate_up = avg('stat.avg.bitrate.upload')
        self.avg_bitrate_down = avg('stat.avg.bitrate.download')
        self.avg_bandwidth_up = avg('stat.avg.bandwidth.upload')
        self.avg_bandwidth_down = avg('stat.avg.bandwidth.download')
        self.avg_packet_loss_total = avg('stat.avg.packetloss.total')
        self.avg_packet_loss_up = avg('stat.avg.packetloss.upload')
        self.avg_packet_loss_down = avg('stat.avg.packetloss.download')
        self.avg_remote_fps = avg('stat.avg.framerate.remote')
        self.avg_local_fps = avg('stat.avg.framerate.local')
        # Connection quality as computed by the session
        self.avg_cq = avg('stat.avg.cq')

        self._session.on(SessionEvent.LOCAL_STATS_UPDATED, self._on_local_stats_updated)
        self._session.on(SessionEvent.P2P_STATUS, self._on_p2p_status_changed)

        self.jvb_stats_monitor = ConnectionAvgStats(
            session, False, n, sink, capabilities, p2p_prefix)
        self.p2p_stats_monitor = ConnectionAvgStats(
            session, True, n, sink, capabilities, p2p_prefix)

    @property
    def enabled(self) -> bool:
        return self.n > 0

    @property
    def averages(self) -> Dict[str, AverageStatReport]:
        """All local stat averages keyed by event name"""
        if not self.enabled:
            return {}
        reports = (
            self.avg_bitrate_up, self.avg_bitrate_down,
            self.avg_bandwidth_up, self.avg_bandwidth_down,
            self.avg_packet_loss_up, self.avg_packet_loss_down, self.avg_packet_loss_total,
            self.avg_remote_fps, self.avg_local_fps,
            self.avg_cq,
        )
        return {r.name: r for r in reports}

    def _on_local_stats_updated(self, data: Any) -> None:
        self._calculate_avg_stats(data)

    def _on_p2p_status_changed(self, *args) -> None:
        logger.debug("Resetting average stats calculation")
        self.reset_avg_stats()
        self.jvb_stats_monitor.reset_avg_stats()
        self.p2p_stats_monitor.reset_avg_stats()

    def _calculate_avg_stats(self, data: Any) -> None:
        """Process the next local stats sample"""
        is_p2p = self._session.is_p2p_active()
        peer_count = self._session.get_participant_count()

        if is_p2p and peer_count < 1:
            # A P2P session with nobody on the other end only exists
            # briefly while the session is torn down
            return

        if data is None:
            logger.error("No stats")
            return

        if isinstance(data, LocalStats):
            stats = data
        else:
            try:
                stats = LocalStats.from_dict(data)
            except StatsError as e:
                logger.error(str(e))
                return

        self.avg_bitrate_up.add_next(stats.bitrate.upload)
        self.avg_bitrate_down.add_next(stats.bitrate.download)

        if self.capabilities.supports_bandwidth_statistics():
            self.avg_bandwidth_up.add_next(stats.bandwidth.upload)
            self.avg_bandwidth_down.add_next(stats.bandwidth.download)

        self.avg_packet_loss_up.add_next(stats.packet_loss.upload)
        self.avg_packet_loss_down.add_next(stats.packet_loss.download)
        self.avg_packet_loss_total.add_next(stats.packet_loss.total)
        self.avg_cq.add_next(stats.connection_quality)

        # NaN when nobody (or only we) is sending video
        remote_fps = self.calculate_avg_video_fps(stats.framerate, is_local=False)
        if not np.isnan(remote_fps):
            self.avg_remote_fps.add_next(remote_fps)
        local_fps = self.calculate_avg_video_fps(stats.framerate, is_local=True)
        if not np.isnan(local_fps):
            self.avg_local_fps.add_next(local_fps)

        self.sample_idx += 1

        if self.sample_idx >= self.n:
            self.avg_bitrate_up.report(is_p2p)
            self.avg_bitrate_down.report(is_p2p)
            if self.capabilities.supports_bandwidth_statistics():
                self.avg_bandwidth_up.report(is_p2p)
                self.avg_bandwidth_down.report(is_p2p)
            self.avg_packet_loss_up.report(is_p2p)
            self.avg_packet_loss_down.report(is_p2p)
            self.avg_packet_loss_total.report(is_p2p)
            self.avg_remote_fps.report(is_p2p)
            self.avg_local_fps.report(is_p2p)
            self.avg_cq.report(is_p2p)

            self.reset_avg_stats()

    def calculate_avg_video_fps(self, frame_rate: Dict[str, Dict[str, Any]], is_local: bool) -> float:
        """
        Average FPS across participants.

        Each participant's streams are averaged first, then the participant
        averages are averaged.

        Args:
            frame_rate: participant id -> stream id -> FPS
            is_local: Average the local user's video, else everyone else's

        Returns:
            Average FPS, or NaN if no stream qualifies
        """
        my_id = self._session.my_user_id()
        peer_avgs = []

        for peer_id, videos in frame_rate.items():
            if (peer_id == my_id) != is_local:
                continue
            if not videos:
                continue
            peer_avgs.append(np.mean([_parse_fps(fps) for fps in videos.values()]))

        if not peer_avgs:
            return float(np.nan)
        return float(np.mean(peer_avgs))

    def reset_avg_stats(self) -> None:
        """Reset all local stat averages and the sample index"""
        for report in self.averages.values():
            report.reset()
        self.sample_idx = 0

    def dispose(self) -> None:
        """Unregister all event listeners and stop working"""
        if not self.enabled:
            return

        self._session.off(SessionEvent.P2P_STATUS, self._on_p2p_status_changed)
        self._session.off(SessionEvent.LOCAL_STATS_UPDATED, self._on_local_stats_updated)
        self.jvb_stats_monitor.dispose()
        self.p2p_stats_monitor.dispose()

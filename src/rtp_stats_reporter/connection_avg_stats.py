"""
Per-connection average stats

Gathers the stats calculated for one peer connection (JVB or P2P) even
while it is not the active one. For example RTT towards the JVB keeps
being monitored while the conference is in P2P mode.
"""

import logging
from typing import Dict, Optional

from .average_stat import AverageStatReport, DEFAULT_P2P_PREFIX, is_valid_sample
from .data_models import ConnectionStats, RemoteStats
from .errors import StatsError
from .interfaces.analytics import AnalyticsSink
from .interfaces.capabilities import StatsCapabilities
from .interfaces.session import ConferenceSession, SessionEvent

logger = logging.getLogger(__name__)

END_TO_END_RTT_EVENT = 'stat.avg.end2endrtt'


class ConnectionAvgStats:
    """
    RTT averages for one transport mode.

    The JVB instance additionally keeps, per remote participant, the average
    RTT towards the JVB that participant reports. At every window boundary
    those are folded into a single cross-participant average and added to
    the local RTT to give the end-to-end RTT.
    """

    def __init__(
        self,
        session: ConferenceSession,
        is_p2p: bool,
        n: int,
        sink: AnalyticsSink,
        capabilities: StatsCapabilities,
        p2p_prefix: str = DEFAULT_P2P_PREFIX,
    ):
        """
        Args:
            session: Conference to collect stats for
            is_p2p: True for the P2P connection, False for the JVB one
            n: Samples per window, before the mean is reported
            sink: Analytics sink for reports
            capabilities: Environment capability probe
            p2p_prefix: Event name prefix used in P2P mode
        """
        self.is_p2p = is_p2p
        self.n = n
        self.sample_idx = 0
        self.sink = sink
        self.capabilities = capabilities
        self.p2p_prefix = p2p_prefix

        # RTT reported by the active ICE candidate pair
        self.avg_rtt = AverageStatReport('stat.avg.rtt', sink, p2p_prefix)

        # participant id -> average RTT to the JVB reported by that participant
        # (JVB instance only)
        self.avg_remote_rtt_map: Dict[str, AverageStatReport] = {}

        self._session = session

        self._session.on(SessionEvent.CONNECTION_STATS, self._on_connection_stats)
        if not self.is_p2p:
            self._session.on(SessionEvent.USER_LEFT, self._on_user_left)
            self._session.on(SessionEvent.REMOTE_STATS_UPDATED, self._on_remote_stats_updated)

    @property
    def mode_name(self) -> str:
        return 'P2P' if self.is_p2p else 'JVB'

    def _on_connection_stats(self, stats) -> None:
        if stats is None:
            logger.error(f"{self.mode_name}: No stats")
            return

        if not isinstance(stats, ConnectionStats):
            try:
                stats = ConnectionStats.from_dict(stats)
            except StatsError as e:
                logger.error(f"{self.mode_name}: {e}")
                return

        if stats.is_p2p == self.is_p2p:
            self._calculate_avg_stats(stats)

    def _calculate_avg_stats(self, stats: ConnectionStats) -> None:
        """Process the next stats sample for this connection"""
        if self.capabilities.supports_rtt_statistics():
            if stats.transport:
                self.avg_rtt.add_next(stats.transport[0].rtt)
            else:
                # No active candidate pair, the running average is stale
                self.avg_rtt.reset()

        self.sample_idx += 1

        if self.sample_idx >= self.n:
            if self.capabilities.supports_rtt_statistics():
                self.avg_rtt.report(self.is_p2p)

                # End to end RTT only makes sense through the JVB
                if not self.is_p2p:
                    avg_remote_rtt = self.calculate_avg_remote_rtt()
                    avg_local_rtt = self.avg_rtt.calculate()

                    if is_valid_sample(avg_local_rtt) and is_valid_sample(avg_remote_rtt):
                        self.sink.send_event(END_TO_END_RTT_EVENT, avg_local_rtt + avg_remote_rtt)

            self.reset_avg_stats()

    def calculate_avg_remote_rtt(self) -> float:
        """
        Arithmetic mean of the RTTs towards the JVB reported by participants.

        Every participant average that contributes is reset.

        Returns:
            The mean, or NaN if no participant has reported yet
        """
        count = 0
        total = 0.0

        for remote_avg in self.avg_remote_rtt_map.values():
            avg = remote_avg.calculate()

            if is_valid_sample(avg):
                total += avg
                count += 1
                remote_avg.reset()

        if count == 0:
            return float('nan')
        return total / count

    def _on_remote_stats_updated(self, participant_id: str, stats) -> None:
        if not isinstance(stats, RemoteStats):
            try:
                stats = RemoteStats.from_dict(stats)
            except StatsError as e:
                # Unusable report, same as an invalid RTT value
                logger.error(f"Remote stats from {participant_id}: {e}")
                stats = RemoteStats()
        self.process_remote_stats(participant_id, stats.jvb_rtt)

    def process_remote_stats(self, participant_id: str, jvb_rtt: Optional[float]) -> None:
        """
        Record the RTT towards the JVB reported by a participant.

        An invalid value drops whatever was collected for that participant.
        """
        valid_data = is_valid_sample(jvb_rtt)
        rtt_avg = self.avg_remote_rtt_map.get(participant_id)

        if rtt_avg is None and valid_data:
            rtt_avg = AverageStatReport(f"{participant_id}.stat.rtt", self.sink, self.p2p_prefix)
            self.avg_remote_rtt_map[participant_id] = rtt_avg

        if valid_data:
            rtt_avg.add_next(jvb_rtt)
        elif rtt_avg is not None:
            del self.avg_remote_rtt_map[participant_id]

    def _on_user_left(self, participant_id: str) -> None:
        self.avg_remote_rtt_map.pop(participant_id, None)

    def reset_avg_stats(self) -> None:
        """Reset all averages and the sample index"""
        self.avg_rtt.reset()
        self.avg_remote_rtt_map.clear()
        self.sample_idx = 0

    def dispose(self) -> None:
        """Unregister all event listeners"""
        self._session.off(SessionEvent.CONNECTION_STATS, self._on_connection_stats)
        if not self.is_p2p:
            self._session.off(SessionEvent.REMOTE_STATS_UPDATED, self._on_remote_stats_updated)
            self._session.off(SessionEvent.USER_LEFT, self._on_user_left)

"""
Tests for the per-connection RTT averages and end-to-end RTT
"""

import math
import unittest

from memory_sink import MemorySink, connection_stats

from rtp_stats_reporter.capabilities import StaticCapabilities
from rtp_stats_reporter.connection_avg_stats import ConnectionAvgStats, END_TO_END_RTT_EVENT
from rtp_stats_reporter.data_models import ConnectionStats, TransportStats
from rtp_stats_reporter.interfaces.session import SessionEvent
from rtp_stats_reporter.session import EventEmitterSession


class ConnectionAvgStatsTestCase(unittest.TestCase):
    def setUp(self):
        self.session = EventEmitterSession(my_user_id='me')
        self.sink = MemorySink()
        self.capabilities = StaticCapabilities()
        self.jvb = ConnectionAvgStats(self.session, False, 2, self.sink, self.capabilities)
        self.p2p = ConnectionAvgStats(self.session, True, 2, self.sink, self.capabilities)

    def tearDown(self):
        self.jvb.dispose()
        self.p2p.dispose()

    def emit_stats(self, is_p2p, rtt=None):
        self.session.emit(SessionEvent.CONNECTION_STATS, connection_stats(is_p2p, rtt))

    def remote(self, participant_id, jvb_rtt):
        self.session.emit(SessionEvent.REMOTE_STATS_UPDATED, participant_id, {'jvbRTT': jvb_rtt})


class TestModeTagging(ConnectionAvgStatsTestCase):

    def test_other_mode_samples_are_ignored(self):
        self.emit_stats(is_p2p=True, rtt=10)
        self.assertEqual(self.jvb.sample_idx, 0)
        self.assertEqual(self.jvb.avg_rtt.count, 0)
        self.assertEqual(self.p2p.sample_idx, 1)
        self.assertEqual(self.p2p.avg_rtt.count, 1)

    def test_typed_stats_accepted(self):
        self.session.emit(SessionEvent.CONNECTION_STATS,
                          ConnectionStats(is_p2p=False, transport=[TransportStats(rtt=33)]))
        self.assertEqual(self.jvb.avg_rtt.calculate(), 33)

    def test_none_stats_logged(self):
        with self.assertLogs('rtp_stats_reporter.connection_avg_stats', level='ERROR'):
            self.session.emit(SessionEvent.CONNECTION_STATS, None)
        self.assertEqual(self.jvb.sample_idx, 0)

    def test_malformed_stats_logged(self):
        malformed = [
            {'isP2P': False, 'transport': [5]},
            {'isP2P': False, 'transport': 'candidate'},
            {'isP2P': False, 'transport': {'rtt': 10}},
            [False, 10],
        ]
        for stats in malformed:
            with self.assertLogs('rtp_stats_reporter.connection_avg_stats', level='ERROR') as cm:
                self.session.emit(SessionEvent.CONNECTION_STATS, stats)
            self.assertIn('Malformed', cm.output[0])
        self.assertEqual(self.jvb.sample_idx, 0)
        self.assertEqual(self.p2p.sample_idx, 0)

        self.emit_stats(False, 10)
        self.assertEqual(self.jvb.avg_rtt.calculate(), 10)


class TestWindow(ConnectionAvgStatsTestCase):

    def test_p2p_report(self):
        self.emit_stats(True, 20)
        self.assertEqual(self.sink.events, [])
        self.emit_stats(True, 40)
        self.assertEqual(self.sink.events, [('p2p.stat.avg.rtt', {'value': 30.0})])
        self.assertEqual(self.p2p.sample_idx, 0)
        self.assertEqual(self.p2p.avg_rtt.count, 0)

    def test_end_to_end_rtt(self):
        self.remote('a', 40)
        self.remote('b', 60)
        self.emit_stats(False, 40)
        self.emit_stats(False, 60)

        self.assertEqual(self.sink.value('stat.avg.rtt'), 50)
        self.assertEqual(self.sink.value(END_TO_END_RTT_EVENT), 100)
        # end to end RTT is a bare number without mode prefix
        self.assertIn((END_TO_END_RTT_EVENT, 100.0), self.sink.events)

    def test_no_end_to_end_without_remote_reports(self):
        self.emit_stats(False, 40)
        self.emit_stats(False, 60)
        self.assertEqual(self.sink.names, ['stat.avg.rtt'])

    def test_no_end_to_end_for_p2p(self):
        self.remote('a', 40)
        self.emit_stats(True, 40)
        self.emit_stats(True, 60)
        self.assertNotIn(END_TO_END_RTT_EVENT, self.sink.names)

    def test_empty_transport_resets_average(self):
        self.emit_stats(False, 500)
        self.emit_stats(False, None)
        self.assertEqual(self.sink.names, ['stat.avg.rtt'])
        self.assertTrue(math.isnan(self.sink.value('stat.avg.rtt')))

    def test_rtt_unsupported(self):
        self.capabilities.rtt_statistics = False
        self.remote('a', 40)
        self.emit_stats(False, 40)
        self.assertEqual(self.jvb.avg_rtt.count, 0)
        self.assertEqual(self.jvb.sample_idx, 1)
        self.emit_stats(False, 40)
        self.assertEqual(self.sink.events, [])
        # window still closes and everything is reset
        self.assertEqual(self.jvb.sample_idx, 0)
        self.assertEqual(self.jvb.avg_remote_rtt_map, {})

    def test_capability_change_takes_effect_immediately(self):
        self.capabilities.rtt_statistics = False
        self.emit_stats(False, 40)
        self.capabilities.rtt_statistics = True
        self.emit_stats(False, 60)
        self.assertEqual(self.sink.value('stat.avg.rtt'), 60)


class TestRemoteRTT(ConnectionAvgStatsTestCase):

    def test_entries_created_lazily(self):
        self.assertEqual(self.jvb.avg_remote_rtt_map, {})
        self.remote('a', 10)
        self.remote('a', 30)
        self.assertEqual(list(self.jvb.avg_remote_rtt_map), ['a'])
        self.assertEqual(self.jvb.avg_remote_rtt_map['a'].calculate(), 20)

    def test_p2p_instance_has_no_remote_map(self):
        self.remote('a', 10)
        self.assertEqual(self.p2p.avg_remote_rtt_map, {})

    def test_invalid_report_drops_participant(self):
        self.remote('a', 10)
        self.remote('b', 10)
        self.remote('a', None)
        self.assertEqual(list(self.jvb.avg_remote_rtt_map), ['b'])

    def test_invalid_first_report_creates_nothing(self):
        self.remote('a', 'n/a')
        self.session.emit(SessionEvent.REMOTE_STATS_UPDATED, 'b', None)
        self.assertEqual(self.jvb.avg_remote_rtt_map, {})

    def test_malformed_report_drops_participant(self):
        self.remote('a', 10)
        with self.assertLogs('rtp_stats_reporter.connection_avg_stats', level='ERROR'):
            self.session.emit(SessionEvent.REMOTE_STATS_UPDATED, 'a', [1])
        with self.assertLogs('rtp_stats_reporter.connection_avg_stats', level='ERROR'):
            self.session.emit(SessionEvent.REMOTE_STATS_UPDATED, 'b', 42)
        self.assertEqual(self.jvb.avg_remote_rtt_map, {})

    def test_user_left_removes_only_that_participant(self):
        self.session.emit(SessionEvent.USER_JOINED, 'a')
        self.session.emit(SessionEvent.USER_JOINED, 'b')
        self.remote('a', 100)
        self.remote('b', 20)
        self.session.emit(SessionEvent.USER_LEFT, 'a')
        self.assertEqual(list(self.jvb.avg_remote_rtt_map), ['b'])

        self.emit_stats(False, 30)
        self.emit_stats(False, 30)
        self.assertEqual(self.sink.value(END_TO_END_RTT_EVENT), 50)

    def test_user_left_unknown_participant(self):
        self.session.emit(SessionEvent.USER_LEFT, 'ghost')
        self.assertEqual(self.jvb.avg_remote_rtt_map, {})

    def test_cross_participant_average_resets_contributors(self):
        self.remote('a', 40)
        self.remote('b', 60)
        self.assertEqual(self.jvb.calculate_avg_remote_rtt(), 50)
        self.assertEqual(self.jvb.avg_remote_rtt_map['a'].count, 0)
        self.assertTrue(math.isnan(self.jvb.calculate_avg_remote_rtt()))

    def test_reset_clears_map(self):
        self.remote('a', 40)
        self.emit_stats(False, 40)
        self.jvb.reset_avg_stats()
        self.assertEqual(self.jvb.avg_remote_rtt_map, {})
        self.assertEqual(self.jvb.sample_idx, 0)
        self.assertEqual(self.jvb.avg_rtt.count, 0)


class TestDispose(unittest.TestCase):

    def test_dispose_detaches_listeners(self):
        session = EventEmitterSession()
        sink = MemorySink()
        jvb = ConnectionAvgStats(session, False, 1, sink, StaticCapabilities())
        p2p = ConnectionAvgStats(session, True, 1, sink, StaticCapabilities())
        self.assertEqual(session.listener_count(), 4)

        jvb.dispose()
        p2p.dispose()
        self.assertEqual(session.listener_count(), 0)

        session.emit(SessionEvent.CONNECTION_STATS, connection_stats(False, 10))
        self.assertEqual(sink.events, [])


if __name__ == '__main__':
    unittest.main()

#!/usr/bin/env python3
"""
Command Line Interface for the RTP stats reporter
"""

import sys
import logging
import argparse
from pathlib import Path

from .avg_rtp_stats_reporter import AvgRTPStatsReporter
from .capabilities import StaticCapabilities
from .config import ReporterConfig, load_config
from .errors import StatsError
from .replay import EventReplayer
from .session import EventEmitterSession
from .sinks import create_sink

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Average RTP stats reporter',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    replay_parser = subparsers.add_parser('replay', help='Replay a recorded session event log')
    replay_parser.add_argument('events', type=Path, help='Event log (JSON Lines)')
    replay_parser.add_argument('--config', '-c', type=Path, help='Configuration file path')
    replay_parser.add_argument('--window', '-n', type=int,
                               help='Samples per window (overrides config, <= 0 disables)')
    replay_parser.add_argument('--debug', '-d', action='store_true', help='Enable DEBUG logging')

    return parser


def run_replay(args) -> int:
    """Replay an event log through a reporter and print a summary"""
    try:
        config = load_config(args.config) if args.config else ReporterConfig()
    except FileNotFoundError:
        print(f"❌ Configuration file not found: {args.config}", file=sys.stderr)
        return 1
    except (StatsError, ValueError) as e:
        print(f"❌ Error loading configuration: {e}", file=sys.stderr)
        return 1

    setup_logging('DEBUG' if args.debug else config.log_level)

    window_size = args.window if args.window is not None else config.window_size
    logger.debug(f"Replaying {args.events} with window size {window_size}, sink {config.sink.type}")

    session = EventEmitterSession()
    sink = create_sink(config.sink)
    reporter = AvgRTPStatsReporter(
        session=session,
        n=window_size,
        sink=sink,
        capabilities=StaticCapabilities(
            rtt_statistics=config.rtt_statistics,
            bandwidth_statistics=config.bandwidth_statistics,
        ),
        p2p_prefix=config.p2p_prefix,
    )

    replayer = EventReplayer(session)
    try:
        summary = replayer.replay_file(args.events)
    except OSError as e:
        print(f"❌ Cannot read event log {args.events}: {e}", file=sys.stderr)
        return 1
    finally:
        reporter.dispose()

    print(f"Replayed {summary.lines_read} lines ({summary.lines_skipped} skipped)")
    for event, count in sorted(summary.events_replayed.items()):
        print(f"  {event:<20} {count}")
    print(f"Analytics events sent: {sink.events_sent}")
    return 0


def main(argv=None):
    """Main entry point for rtp-stats-reporter command"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == 'replay':
        sys.exit(run_replay(args))


if __name__ == '__main__':
    main()

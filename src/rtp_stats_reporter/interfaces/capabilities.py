"""
Capability Probing Interface

Which optional statistics the running environment can produce.
"""

from typing import Protocol


class StatsCapabilities(Protocol):
    """
    Queried on every sample and every report, never cached, so that a
    change in the environment takes effect on the next tick.
    """

    def supports_rtt_statistics(self) -> bool:
        """True if candidate pair round trip time is reported"""
        ...

    def supports_bandwidth_statistics(self) -> bool:
        """True if available bandwidth is reported"""
        ...

"""
Fixed capability probe
"""

from dataclasses import dataclass


@dataclass
class StaticCapabilities:
    """
    Capability flags set from configuration.

    The flags may be flipped at runtime; the reporter re-reads them on
    every sample.
    """
    rtt_statistics: bool = True
    bandwidth_statistics: bool = True

    def supports_rtt_statistics(self) -> bool:
        return self.rtt_statistics

    def supports_bandwidth_statistics(self) -> bool:
        return self.bandwidth_statistics

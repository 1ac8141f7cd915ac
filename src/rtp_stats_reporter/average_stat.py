"""
Running arithmetic mean for one named stat
"""

import logging
import numbers

import numpy as np

from .interfaces.analytics import AnalyticsSink

logger = logging.getLogger(__name__)

# Namespace for events reported while the conference is in P2P mode
DEFAULT_P2P_PREFIX = 'p2p.'


def is_valid_sample(value) -> bool:
    """True for a finite real number (bools excluded)"""
    if isinstance(value, (bool, np.bool_)):
        return False
    if not isinstance(value, numbers.Real):
        return False
    return bool(np.isfinite(value))


class AverageStatReport:
    """
    Calculates an average for one named stat and submits it to the
    analytics sink when requested. Samples are counted automatically.
    """

    def __init__(self, name: str, sink: AnalyticsSink, p2p_prefix: str = DEFAULT_P2P_PREFIX):
        """
        Args:
            name: Event name reported to the analytics sink
            sink: Where reports are sent
            p2p_prefix: Prepended to the name for P2P mode reports
        """
        self.name = name
        self.sink = sink
        self.p2p_prefix = p2p_prefix
        self.count = 0
        self.sum = 0.0

    def add_next(self, next_value) -> None:
        """Include the next value in the average; invalid values are dropped"""
        if not is_valid_sample(next_value):
            logger.error(f"{self.name} - invalid value for idx: {self.count} {next_value!r}")
            return

        self.sum += float(next_value)
        self.count += 1

    def calculate(self) -> float:
        """
        Returns:
            Mean of the collected samples, or NaN if none were collected
        """
        if self.count == 0:
            return float(np.nan)
        return self.sum / self.count

    def report(self, is_p2p: bool) -> None:
        """
        Submit the current average to the sink. Does not reset.

        Args:
            is_p2p: Report under the P2P namespace. All averages are cleared
                whenever the conference switches between P2P and JVB, so a
                window never mixes modes.
        """
        prefix = self.p2p_prefix if is_p2p else ''
        self.sink.send_event(f"{prefix}{self.name}", {'value': self.calculate()})

    def reset(self) -> None:
        """Forget all collected samples"""
        self.sum = 0.0
        self.count = 0

    def __repr__(self) -> str:
        return f"AverageStatReport({self.name!r}, count={self.count}, sum={self.sum})"

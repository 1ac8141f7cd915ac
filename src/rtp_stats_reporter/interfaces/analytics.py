"""
Analytics Sink Interface

Defines the contract for the module that receives averaged stats.
The reporter never talks to a concrete analytics backend directly.
"""

from abc import ABC, abstractmethod
from typing import Dict, Union

# Either a bare number or {"value": number}
EventPayload = Union[float, Dict[str, float]]


class AnalyticsSink(ABC):
    """
    Receives named numeric events from the reporter.

    Event names look like ``[p2p.]stat.avg.<metric>``. Values may be NaN
    (no samples collected in the window) and must be accepted without error.

    Delivery is fire-and-forget: the reporter does not retry and does not
    expect an acknowledgement.
    """

    @abstractmethod
    def send_event(self, name: str, payload: EventPayload) -> None:
        """
        Submit one event.

        Args:
            name: Event name, including the mode prefix when applicable
            payload: Bare number or ``{"value": number}``
        """
        pass

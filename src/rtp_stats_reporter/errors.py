"""
Exception types raised by rtp_stats_reporter
"""


class StatsError(Exception):
    """Base class for all reporter errors"""


class MissingStatsFieldError(StatsError):
    """A composite stats sample is missing one of its required fields"""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f'No "{field_name}"')


class MalformedStatsError(StatsError):
    """A stats payload (or one of its fields) does not have the expected shape"""

    def __init__(self, field_name: str, value):
        self.field_name = field_name
        self.value = value
        super().__init__(f'Malformed "{field_name}": {value!r}')


class ConfigurationError(StatsError):
    """Invalid reporter configuration"""

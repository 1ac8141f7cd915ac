"""
Reporter configuration

Loads the TOML configuration and applies defaults for anything missing.

Example config.toml:
    [reporter]
    window_size = 15
    p2p_prefix = "p2p."

    [capabilities]
    rtt_statistics = true
    bandwidth_statistics = true

    [sink]
    type = "jsonl"
    path = "./analytics.jsonl"

    [logging]
    level = "INFO"
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import toml

from .average_stat import DEFAULT_P2P_PREFIX
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 15
SINK_TYPES = ('log', 'jsonl')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class SinkConfig:
    """Where analytics events go"""
    type: str = 'log'
    path: Optional[Path] = None

    def __post_init__(self):
        if self.type not in SINK_TYPES:
            raise ConfigurationError(f"Unknown sink type {self.type!r} (expected one of {SINK_TYPES})")
        if self.type == 'jsonl' and self.path is None:
            raise ConfigurationError("sink.path is required for the jsonl sink")


@dataclass
class ReporterConfig:
    """Complete reporter configuration"""
    # Samples per window; <= 0 disables reporting
    window_size: int = DEFAULT_WINDOW_SIZE
    p2p_prefix: str = DEFAULT_P2P_PREFIX

    rtt_statistics: bool = True
    bandwidth_statistics: bool = True

    sink: SinkConfig = field(default_factory=SinkConfig)
    log_level: str = 'INFO'

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'ReporterConfig':
        """
        Build from a parsed TOML document

        Raises:
            ConfigurationError: on wrong value types or unknown options
        """
        reporter_config = config.get('reporter', {})
        capabilities_config = config.get('capabilities', {})
        sink_config = config.get('sink', {})
        logging_config = config.get('logging', {})

        window_size = reporter_config.get('window_size', DEFAULT_WINDOW_SIZE)
        if isinstance(window_size, bool) or not isinstance(window_size, int):
            raise ConfigurationError(f"reporter.window_size must be an integer, got {window_size!r}")

        p2p_prefix = reporter_config.get('p2p_prefix', DEFAULT_P2P_PREFIX)
        if not isinstance(p2p_prefix, str):
            raise ConfigurationError(f"reporter.p2p_prefix must be a string, got {p2p_prefix!r}")

        flags = {}
        for key in ('rtt_statistics', 'bandwidth_statistics'):
            value = capabilities_config.get(key, True)
            if not isinstance(value, bool):
                raise ConfigurationError(f"capabilities.{key} must be true or false, got {value!r}")
            flags[key] = value

        sink_path = sink_config.get('path')
        sink = SinkConfig(
            type=sink_config.get('type', 'log'),
            path=Path(sink_path).expanduser() if sink_path else None,
        )

        log_level = str(logging_config.get('level', 'INFO')).upper()
        if log_level not in LOG_LEVELS:
            raise ConfigurationError(f"Unknown logging.level {log_level!r}")

        return cls(
            window_size=window_size,
            p2p_prefix=p2p_prefix,
            sink=sink,
            log_level=log_level,
            **flags,
        )


def load_config(config_file: Path) -> ReporterConfig:
    """
    Load configuration from a TOML file

    Args:
        config_file: Path to TOML configuration file

    Returns:
        ReporterConfig with defaults applied
    """
    with open(config_file, 'r') as f:
        config = toml.load(f)

    logger.info(f"Loaded configuration from {config_file}")
    return ReporterConfig.from_dict(config)

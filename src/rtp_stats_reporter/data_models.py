"""
Typed stats payloads delivered by the conference session

The session hands the reporter plain mappings shaped like the connection
quality module's output (camelCase keys). These dataclasses validate the
payload shape once, at the boundary, so the aggregators never have to
probe it themselves. A payload with a missing or wrongly shaped composite
field raises a StatsError and is dropped as a whole.

Leaf values (``upload``, ``rtt``, ``jvbRTT``...) are kept as received and
validated by ``AverageStatReport.add_next`` when they are fed in.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .errors import MalformedStatsError, MissingStatsFieldError


def _mapping(value, field_name: str) -> Mapping[str, Any]:
    """The value itself if it is a mapping, else MalformedStatsError"""
    if not isinstance(value, Mapping):
        raise MalformedStatsError(field_name, value)
    return value


@dataclass
class UpDown:
    """An upload/download value pair (bitrate or bandwidth)"""
    upload: Any = None
    download: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], field_name: str = 'bitrate') -> 'UpDown':
        data = _mapping(data, field_name)
        return cls(upload=data.get('upload'), download=data.get('download'))


@dataclass
class PacketLoss:
    """Packet loss percentages"""
    upload: Any = None
    download: Any = None
    total: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'PacketLoss':
        data = _mapping(data, 'packetLoss')
        return cls(
            upload=data.get('upload'),
            download=data.get('download'),
            total=data.get('total'),
        )


@dataclass
class LocalStats:
    """
    One local stats sample (fired on every measurement tick).

    framerate maps participant id -> stream id (SSRC) -> frames per second.
    """
    bitrate: UpDown
    bandwidth: UpDown
    packet_loss: PacketLoss
    framerate: Dict[str, Dict[str, Any]]
    connection_quality: Any = None

    # Wire names, in validation order
    REQUIRED_FIELDS = ('bitrate', 'bandwidth', 'packetLoss', 'framerate')

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'LocalStats':
        """
        Build a sample from the session's payload.

        Raises:
            MissingStatsFieldError: if any required top-level field is absent
            MalformedStatsError: if the payload or a composite field is not
                a mapping
        """
        data = _mapping(data, 'stats')
        for name in cls.REQUIRED_FIELDS:
            if data.get(name) is None:
                raise MissingStatsFieldError(name)

        framerate = {}
        for peer_id, streams in _mapping(data['framerate'], 'framerate').items():
            framerate[str(peer_id)] = dict(_mapping(streams or {}, f"framerate.{peer_id}"))

        return cls(
            bitrate=UpDown.from_dict(data['bitrate'], 'bitrate'),
            bandwidth=UpDown.from_dict(data['bandwidth'], 'bandwidth'),
            packet_loss=PacketLoss.from_dict(data['packetLoss']),
            framerate=framerate,
            connection_quality=data.get('connectionQuality'),
        )


@dataclass
class TransportStats:
    """A single ICE candidate pair entry"""
    rtt: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'TransportStats':
        data = _mapping(data, 'transport[]')
        return cls(rtt=data.get('rtt'))


@dataclass
class ConnectionStats:
    """
    Stats produced by one peer connection, tagged with its transport mode.

    The first transport entry is the active candidate pair.
    """
    is_p2p: bool
    transport: List[TransportStats] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ConnectionStats':
        """
        Raises:
            MalformedStatsError: if the payload is not a mapping, transport
                is not a list or a transport entry is not a mapping
        """
        data = _mapping(data, 'stats')
        is_p2p = data.get('isP2P', data.get('isDirect', False))

        transport = data.get('transport') or []
        if not isinstance(transport, (list, tuple)):
            raise MalformedStatsError('transport', transport)

        return cls(
            is_p2p=bool(is_p2p),
            transport=[TransportStats.from_dict(t) for t in transport],
        )


@dataclass
class RemoteStats:
    """Stats a remote participant reports about its own connection"""
    jvb_rtt: Optional[Any] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'RemoteStats':
        """
        Raises:
            MalformedStatsError: if the payload is neither empty nor a mapping
        """
        if not data:
            return cls()
        data = _mapping(data, 'stats')
        return cls(jvb_rtt=data.get('jvbRTT'))

"""Snapshot records produced by the network collectors."""

import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

WARNING = "warning"
ERROR = "error"


@dataclass
class InterfaceStats:
    """Counters and addresses of one interface at one point in time."""

    name: str
    ipv4_address: str = ""
    ipv6_address: str = ""
    speed_mbps: int = 0
    tx_bytes: int = 0
    tx_packets: int = 0
    tx_errors: int = 0
    tx_dropped: int = 0
    rx_bytes: int = 0
    rx_packets: int = 0
    rx_errors: int = 0
    rx_dropped: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Diagnostic:
    """A problem reported while taking a snapshot."""

    severity: str
    message: str
    interface: Optional[str] = None
    path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class DiagnosticLog:
    """
    Collects diagnostics for one poll and mirrors them to the logger.

    Warnings mark a field that fell back to its zero value; errors mark a
    poll that could not produce any records.
    """

    def __init__(self):
        self.entries: List[Diagnostic] = []

    def warning(self, message: str, interface: Optional[str] = None, path: Optional[str] = None) -> None:
        logger.warning(message)
        self.entries.append(Diagnostic(WARNING, message, interface, path))

    def error(self, message: str, interface: Optional[str] = None, path: Optional[str] = None) -> None:
        logger.error(message)
        self.entries.append(Diagnostic(ERROR, message, interface, path))

    def __len__(self) -> int:
        return len(self.entries)


def utc_timestamp() -> str:
    """ISO 8601 UTC timestamp with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'


@dataclass
class NetworkSnapshot:
    """
    Result of one poll.

    Iterating a snapshot yields its InterfaceStats records, so callers that
    only want the records can use it as a plain sequence.
    """

    interfaces: List[InterfaceStats] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    collected_at: str = field(default_factory=utc_timestamp)

    def __iter__(self) -> Iterator[InterfaceStats]:
        return iter(self.interfaces)

    def __len__(self) -> int:
        return len(self.interfaces)

    def __getitem__(self, index):
        return self.interfaces[index]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == WARNING]

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == ERROR]

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ts": self.collected_at,
            "network_ifaces": [iface.to_dict() for iface in self.interfaces],
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }

"""Network statistics collectors."""

from .counters import (
    COUNTERS,
    RX_COUNTERS,
    SPEED,
    SYSFS_NET_ROOT,
    TX_COUNTERS,
    counter_path,
    parse_counter,
    read_counter,
    read_counters,
)
from .network import (
    AddressEntry,
    EnumerationError,
    NetinfoError,
    build_interface_stats,
    collect,
    collect_network_interfaces,
    enumerate_addresses,
    resolve_numeric,
)

__all__ = [
    "COUNTERS",
    "RX_COUNTERS",
    "SPEED",
    "SYSFS_NET_ROOT",
    "TX_COUNTERS",
    "counter_path",
    "parse_counter",
    "read_counter",
    "read_counters",
    "AddressEntry",
    "EnumerationError",
    "NetinfoError",
    "build_interface_stats",
    "collect",
    "collect_network_interfaces",
    "enumerate_addresses",
    "resolve_numeric",
]

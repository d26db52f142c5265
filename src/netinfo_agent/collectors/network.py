"""Network interface collector."""

import ipaddress
import logging
import socket
from typing import Any, Dict, List, NamedTuple, Optional

import psutil

from ..snapshot import DiagnosticLog, InterfaceStats, NetworkSnapshot
from .counters import SPEED, SYSFS_NET_ROOT, read_counters

logger = logging.getLogger(__name__)


class NetinfoError(Exception):
    """Base exception for collector errors."""
    pass


class EnumerationError(NetinfoError):
    """The interface list could not be obtained at all."""
    pass


class AddressEntry(NamedTuple):
    interface: str
    family: int
    address: str


def resolve_numeric(address: str) -> str:
    """
    Convert an address to its numeric text form without any name lookup.

    Raises ValueError if the text is not an IPv4 or IPv6 address.
    """
    # IPv6 link-local entries carry a zone, e.g. "fe80::1%eth0"
    host = address.split("%", 1)[0]
    return str(ipaddress.ip_address(host))


def enumerate_addresses(diagnostics: Optional[DiagnosticLog] = None) -> List[AddressEntry]:
    """
    List the IPv4 and IPv6 address entries of every local interface.

    An interface appears once per address entry, in the order the OS
    reports them. Entries that fail to resolve are reported and kept with
    an empty address.

    Raises:
        EnumerationError: If the interface list itself cannot be obtained
    """
    if diagnostics is None:
        diagnostics = DiagnosticLog()

    try:
        addrs = psutil.net_if_addrs()
    except (OSError, psutil.Error) as e:
        raise EnumerationError(f"Failed to get network interfaces: {e}") from e

    entries = []

    for iface_name, addresses in addrs.items():
        for addr in addresses:
            # Structural entry without address data
            if not addr.address:
                continue

            if addr.family not in (socket.AF_INET, socket.AF_INET6):
                continue

            try:
                numeric = resolve_numeric(addr.address)
            except ValueError as e:
                diagnostics.warning(
                    f"Failed to resolve address of {iface_name}: {e}",
                    interface=iface_name,
                )
                numeric = ""

            entries.append(AddressEntry(iface_name, addr.family, numeric))

    return entries


def build_interface_stats(
    name: str,
    ipv4_address: str = "",
    ipv6_address: str = "",
    root: str = SYSFS_NET_ROOT,
    diagnostics: Optional[DiagnosticLog] = None,
) -> InterfaceStats:
    """Read all counters of one interface into a fresh record."""
    values = read_counters(name, root, diagnostics)

    return InterfaceStats(
        name=name,
        ipv4_address=ipv4_address,
        ipv6_address=ipv6_address,
        speed_mbps=values[SPEED],
        tx_bytes=values["tx_bytes"],
        tx_packets=values["tx_packets"],
        tx_errors=values["tx_errors"],
        tx_dropped=values["tx_dropped"],
        rx_bytes=values["rx_bytes"],
        rx_packets=values["rx_packets"],
        rx_errors=values["rx_errors"],
        rx_dropped=values["rx_dropped"],
    )


def collect(root: str = SYSFS_NET_ROOT) -> NetworkSnapshot:
    """
    Take one snapshot of all interfaces that have an IPv4 address.

    Each interface yields exactly one record carrying its first IPv4
    address and, when it has one, its first IPv6 address. Interfaces with
    only IPv6 or link-layer entries produce no record.

    A failure to list the interfaces is recorded as a single error and the
    snapshot comes back empty; per-counter and per-address problems are
    recorded as warnings and the affected fields stay at zero.
    """
    diagnostics = DiagnosticLog()

    try:
        entries = enumerate_addresses(diagnostics)
    except EnumerationError as e:
        diagnostics.error(str(e))
        return NetworkSnapshot(diagnostics=diagnostics.entries)

    ipv4: Dict[str, str] = {}
    ipv6: Dict[str, str] = {}
    for entry in entries:
        found = ipv4 if entry.family == socket.AF_INET else ipv6
        # First resolved address wins; an unresolved one still claims the slot
        if not found.get(entry.interface):
            found[entry.interface] = entry.address

    interfaces = [
        build_interface_stats(name, ipv4_address, ipv6.get(name, ""), root, diagnostics)
        for name, ipv4_address in ipv4.items()
    ]

    logger.debug(f"Collected {len(interfaces)} interfaces with {len(diagnostics)} diagnostics")

    return NetworkSnapshot(interfaces=interfaces, diagnostics=diagnostics.entries)


def collect_network_interfaces(root: str = SYSFS_NET_ROOT) -> List[Dict[str, Any]]:
    """
    Collect network interface information.

    Returns list of network interfaces with addresses, link speed, and traffic counters.
    """
    return [iface.to_dict() for iface in collect(root)]

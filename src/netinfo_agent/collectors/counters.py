"""Per-interface counters read from sysfs pseudo-files."""

import logging
import os
import re
from typing import Dict, Optional

from ..snapshot import DiagnosticLog

logger = logging.getLogger(__name__)

SYSFS_NET_ROOT = "/sys/class/net"

SPEED = "speed"
RX_COUNTERS = ("rx_bytes", "rx_packets", "rx_errors", "rx_dropped")
TX_COUNTERS = ("tx_bytes", "tx_packets", "tx_errors", "tx_dropped")
COUNTERS = RX_COUNTERS + TX_COUNTERS

UINT64_MAX = 2 ** 64 - 1

# Leading integer, the way atoll() reads it: trailing text is ignored
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def counter_path(interface_name: str, counter_name: str, root: str = SYSFS_NET_ROOT) -> str:
    """
    Map an interface and counter name to its pseudo-file.

    Traffic counters live under ``<root>/<iface>/statistics/``; link speed
    is ``<root>/<iface>/speed``.
    """
    if counter_name == SPEED:
        return os.path.join(root, interface_name, SPEED)
    return os.path.join(root, interface_name, "statistics", counter_name)


def _leading_int(line: str) -> Optional[int]:
    match = _LEADING_INT.match(line)
    if not match:
        return None
    text = match.group(1)
    # Over 20 significant digits is past the 64-bit range
    if len(text.lstrip("+-").lstrip("0")) > 20:
        return -1 if text.startswith("-") else UINT64_MAX
    return int(text, 10)


def _clamp(value: int) -> int:
    if value < 0:
        return 0
    return min(value, UINT64_MAX)


def parse_counter(line: str) -> int:
    """
    Parse the first line of a counter file.

    Returns 0 when the line holds no number. Negative values (sysfs reports
    a speed of -1 when there is no carrier) are clamped to 0 and values are
    capped to the unsigned 64-bit range.
    """
    value = _leading_int(line)
    if value is None:
        return 0
    return _clamp(value)


def read_counter(
    interface_name: str,
    counter_name: str,
    root: str = SYSFS_NET_ROOT,
    diagnostics: Optional[DiagnosticLog] = None,
) -> int:
    """
    Read one counter for an interface.

    Any failure to open or read the file is reported as a single warning
    and yields 0. Only the first line of the file is parsed.
    """
    if diagnostics is None:
        diagnostics = DiagnosticLog()

    path = counter_path(interface_name, counter_name, root)

    try:
        with open(path, "r", encoding="ascii", errors="replace") as f:
            line = f.readline()
    except OSError as e:
        # Virtual interfaces have no statistics dir; down links fail reading speed
        diagnostics.warning(
            f"can not read {path} for network statistics: {e.strerror or e}",
            interface=interface_name,
            path=path,
        )
        return 0

    value = _leading_int(line)
    if value is None:
        if line.strip():
            diagnostics.warning(
                f"unparsable content in {path}: {line.strip()[:40]!r}",
                interface=interface_name,
                path=path,
            )
        return 0

    value = _clamp(value)
    logger.debug(f"{path} = {value}")
    return value


def read_counters(
    interface_name: str,
    root: str = SYSFS_NET_ROOT,
    diagnostics: Optional[DiagnosticLog] = None,
) -> Dict[str, int]:
    """Read link speed and the eight rx/tx counters, one read each."""
    if diagnostics is None:
        diagnostics = DiagnosticLog()

    values = {SPEED: read_counter(interface_name, SPEED, root, diagnostics)}
    for counter_name in COUNTERS:
        values[counter_name] = read_counter(interface_name, counter_name, root, diagnostics)
    return values

"""Test fixtures."""

import socket
from collections import namedtuple

import psutil
import pytest

from netinfo_agent.collectors import counters, network

snicaddr = namedtuple("snicaddr", ["family", "address", "netmask", "broadcast", "ptp"])


def inet(address):
    return snicaddr(socket.AF_INET, address, "255.255.255.0", None, None)


def inet6(address):
    return snicaddr(socket.AF_INET6, address, "ffff:ffff:ffff:ffff::", None, None)


def link(address):
    return snicaddr(psutil.AF_LINK, address, None, "ff:ff:ff:ff:ff:ff", None)


class FakeSysfs:
    """A /sys/class/net look-alike under a temporary directory."""

    def __init__(self, root):
        self.root = root

    def add_interface(self, name, speed=None, **stats):
        iface_dir = self.root / name
        iface_dir.mkdir(parents=True, exist_ok=True)
        if speed is not None:
            (iface_dir / "speed").write_text(f"{speed}\n")
        if stats:
            stats_dir = iface_dir / "statistics"
            stats_dir.mkdir(exist_ok=True)
            for counter_name, value in stats.items():
                (stats_dir / counter_name).write_text(f"{value}\n")
        return iface_dir

    def add_full_interface(self, name, speed=1000, base=1):
        """Interface with every counter present, valued base, base+1, ..."""
        values = {c: base + i for i, c in enumerate(counters.COUNTERS)}
        return self.add_interface(name, speed=speed, **values)


@pytest.fixture
def sysfs(tmp_path):
    return FakeSysfs(tmp_path / "net")


@pytest.fixture
def fake_addrs(monkeypatch):
    """Replace psutil.net_if_addrs with a fixed interface table."""
    table = {}
    monkeypatch.setattr(network.psutil, "net_if_addrs", lambda: table)
    return table

"""Command-line interface for the netinfo agent."""

import argparse
import json
import logging
import sys
import time
from dataclasses import replace
from typing import Iterable

from . import __version__
from .config import AgentConfig, ConfigManager, DEFAULT_CONFIG_PATH
from .snapshot import NetworkSnapshot
from .transport import SnapshotClient, TransportError
from .collectors import NetinfoError, collect

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("netinfo-agent")

TABLE_COLUMNS = [
    ("name", "INTERFACE", 12),
    ("ipv4_address", "IPV4", 15),
    ("ipv6_address", "IPV6", 25),
    ("speed_mbps", "SPEED", 6),
    ("rx_bytes", "RX_BYTES", 14),
    ("rx_packets", "RX_PKTS", 11),
    ("rx_errors", "RX_ERR", 7),
    ("rx_dropped", "RX_DROP", 8),
    ("tx_bytes", "TX_BYTES", 14),
    ("tx_packets", "TX_PKTS", 11),
    ("tx_errors", "TX_ERR", 7),
    ("tx_dropped", "TX_DROP", 8),
]


def _load_config(path: str) -> AgentConfig:
    return ConfigManager(path).load_or_default()


def _exclude(snapshot: NetworkSnapshot, names: Iterable[str]) -> NetworkSnapshot:
    """Drop excluded interfaces from a snapshot."""
    excluded = set(names)
    if not excluded:
        return snapshot
    return replace(
        snapshot,
        interfaces=[iface for iface in snapshot.interfaces if iface.name not in excluded],
    )


def take_snapshot(config: AgentConfig) -> NetworkSnapshot:
    """Collect one snapshot and apply the configured exclusions."""
    return _exclude(collect(config.sysfs_root), config.exclude_interfaces)


def format_table(snapshot: NetworkSnapshot) -> str:
    """Render a snapshot as a fixed-width table."""
    lines = [" ".join(f"{title:<{width}}" for _, title, width in TABLE_COLUMNS)]
    for iface in snapshot:
        row = iface.to_dict()
        lines.append(" ".join(f"{str(row[key]) or '-':<{width}}" for key, _, width in TABLE_COLUMNS))
    return "\n".join(line.rstrip() for line in lines)


def _print_snapshot(snapshot: NetworkSnapshot, as_json: bool) -> None:
    if as_json:
        print(json.dumps(snapshot.to_dict(), indent=2))
    else:
        print(format_table(snapshot))


def cmd_collect(args: argparse.Namespace) -> int:
    """Take one snapshot and print it."""
    try:
        config = _load_config(args.config)
        snapshot = take_snapshot(config)
        _print_snapshot(snapshot, args.json)

        if snapshot.warnings:
            logger.info(f"{len(snapshot.warnings)} counters or addresses could not be read")

        return 0 if snapshot.ok else 1

    except (NetinfoError, OSError, ValueError) as e:
        logger.error(f"Collection failed: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        return 1


def cmd_watch(args: argparse.Namespace) -> int:
    """Poll repeatedly, printing each snapshot."""
    try:
        config = _load_config(args.config)
        interval = args.interval or config.poll_interval
        polls = 0

        while args.count is None or polls < args.count:
            if polls:
                time.sleep(interval)
            snapshot = take_snapshot(config)
            if not args.json:
                print(f"# {snapshot.collected_at}")
            _print_snapshot(snapshot, args.json)
            polls += 1

        return 0

    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        return 1


def cmd_send(args: argparse.Namespace) -> int:
    """Collect a snapshot and send it to the collector."""
    try:
        config = _load_config(args.config)
        url = args.url or config.collector_url
        if not url and not args.dry_run:
            logger.error(f"No collector URL. Pass --url or set collector_url in {args.config}.")
            return 1

        logger.info("Collecting network statistics...")
        snapshot = take_snapshot(config)
        payload = snapshot.to_dict()

        # Dry run mode - just print payload
        if args.dry_run:
            print(json.dumps(payload, indent=2))
            return 0

        logger.info(f"Sending snapshot to {url}...")
        response = SnapshotClient(url, config).send(payload)
        logger.info(f"Snapshot sent successfully: {response}")
        return 0 if snapshot.ok else 1

    except TransportError as e:
        logger.error(f"Failed to send snapshot: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="netinfo-agent",
        description="Netinfo Agent - network interface statistics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--version", action="version", version=f"netinfo-agent {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    config_parent = argparse.ArgumentParser(add_help=False)
    config_parent.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to config file (default: {DEFAULT_CONFIG_PATH})",
    )

    # Collect command
    collect_parser = subparsers.add_parser("collect", parents=[config_parent], help="Print one snapshot")
    collect_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    # Watch command
    watch_parser = subparsers.add_parser("watch", parents=[config_parent], help="Poll repeatedly")
    watch_parser.add_argument("--interval", type=int, help="Seconds between polls (default: from config)")
    watch_parser.add_argument("--count", type=int, help="Stop after this many polls")
    watch_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    # Send command
    send_parser = subparsers.add_parser("send", parents=[config_parent], help="Send one snapshot to the collector")
    send_parser.add_argument("--url", help="Collector URL (default: from config)")
    send_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Collect but don't send (prints JSON)",
    )

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if not args.command:
        parser.print_help()
        return 1

    # Route to command handler
    if args.command == "collect":
        return cmd_collect(args)
    elif args.command == "watch":
        return cmd_watch(args)
    elif args.command == "send":
        return cmd_send(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())

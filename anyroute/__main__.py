"""
Entry point for anyroute.

Run with: python -m anyroute --topology net.yaml --switch sw1 --to abc
"""

from __future__ import annotations

import argparse
import sys

from .config import (
    CONFIG_FILE,
    RuntimeConfig,
    apply_config_file,
    load_config_file,
    save_default_config,
)
from .exceptions import AnyrouteError
from .logging_setup import format_block, log, setup_logging
from .stats import get_stats_collector
from .topology import Topology


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="anyroute",
        description="anyroute - route a packet through a declared topology",
    )
    ap.add_argument(
        "--topology",
        help="Path to topology YAML file",
    )
    ap.add_argument(
        "--switch",
        help="Name of the switch to inject the packet at",
    )
    ap.add_argument(
        "--to",
        dest="destination",
        help="Destination address",
    )
    ap.add_argument(
        "--payload",
        default="",
        help="Packet payload (string)",
    )
    ap.add_argument(
        "--hop-limit",
        type=int,
        help="Hop budget for the packet (default: unlimited)",
    )
    ap.add_argument(
        "--stats",
        action="store_true",
        help="Print routing statistics after sending",
    )
    ap.add_argument(
        "--log-file",
        action="store_true",
        help="Also log to the rotating log file",
    )
    ap.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING)",
    )
    ap.add_argument(
        "--config",
        help=f"Path to config file (default: {CONFIG_FILE})",
    )
    ap.add_argument(
        "--init-config",
        action="store_true",
        help="Generate default configuration file and exit",
    )
    return ap


def main(argv=None) -> int:
    """Main entry point for anyroute."""
    ap = build_parser()
    args = ap.parse_args(argv)

    if args.init_config:
        config_path = args.config or CONFIG_FILE
        if save_default_config(config_path):
            print(f"Default configuration saved to: {config_path}")
            return 0
        print(f"Failed to save configuration to: {config_path}")
        return 1

    file_config = load_config_file(args.config)

    # CLI args take precedence over file
    config = RuntimeConfig(
        topology=args.topology or "",
        log_to_file=args.log_file,
        log_level=args.log_level,
        default_hop_limit=args.hop_limit,
    )
    apply_config_file(config, file_config)

    if not config.topology:
        ap.error("--topology is required (or set 'topology' in config file)")
    if not args.switch or args.destination is None:
        ap.error("--switch and --to are required")

    setup_logging(
        log_to_file=config.log_to_file,
        log_to_console=True,
        log_level=config.log_level,
    )

    try:
        topo = Topology.from_file(config.topology)
        packet = topo.send(
            args.switch,
            args.destination,
            args.payload,
            hop_limit=config.default_hop_limit,
        )
    except AnyrouteError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    delivered = topo.deliveries()
    if delivered:
        for name, packets in delivered.items():
            print(f"{name}: {len(packets)} packet(s)")
    else:
        print(f"dropped: no route to {packet.destination!r}")

    log(format_block("SEND", [
        f"switch      : {args.switch}",
        f"destination : {packet.destination!r}",
        f"delivered   : {', '.join(delivered) or '-'}",
    ]))

    if args.stats:
        print(get_stats_collector().format_summary())

    return 0


if __name__ == "__main__":
    sys.exit(main())

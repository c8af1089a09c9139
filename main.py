"""
    Main entry point for the asset-info tool

    asset-info                      print the asset report
    asset-info report --json out    also write the report as JSON
    asset-info prefer-wifi          move Wi-Fi to the top of the service order
    asset-info toggle-interfaces    enable every disabled network service
    asset-info toggle-interfaces X  disable every service not containing X
"""
import argparse
import logging
import sys

import yaml

from core.config import load_config
from helpers.log import configure_logging
from shared.system import get_system_info

logger = logging.getLogger("asset_info")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="asset-info", description="macOS asset inventory")
    parser.add_argument("--config", help="YAML config file (default: $ASSET_INFO_CFG)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")

    sub = parser.add_subparsers(dest="command")

    report = sub.add_parser("report", help="print asset fields (default)")
    report.add_argument("--json", metavar="PATH", help="also write the report as JSON")
    report.add_argument("--no-lookup", action="store_true", help="skip the description lookup")

    prefer = sub.add_parser("prefer-wifi", help="move a service to the top of the order")
    prefer.add_argument("service", nargs="?", default="Wi-Fi")

    toggle = sub.add_parser("toggle-interfaces",
                            help="no argument: enable all services; with NAME: disable all others")
    toggle.add_argument("name", nargs="?")
    return parser


def run_report(cfg: dict, json_path: str | None, no_lookup: bool) -> int:
    from collectors.mac.asset_info import build_generator
    from core.report import write_json_report
    from reports.formatter import print_report

    if no_lookup:
        cfg["lookup"]["enabled"] = False

    if get_system_info()["os"] != "Darwin":
        logger.warning("Not running on macOS; most fields will be missing")

    try:
        generator = build_generator(cfg)
    except (ImportError, OSError) as e:
        logger.error("Cannot access sysctl/IOKit: %s", e)
        return 1

    report = generator.collect()
    print_report(report)

    if json_path:
        path = write_json_report(report, json_path)
        logger.info("Wrote %s", path)
    return 0


def run_prefer(service: str) -> int:
    from collectors.mac.mac_network import prefer_network_service

    result = prefer_network_service(service)
    if result["not_checked"]:
        print(f"Error: {result['error']}", file=sys.stderr)
        return 1
    if result["changed"]:
        print("Service order: " + ", ".join(result["order"]))
    return 0


def run_toggle(name: str | None) -> int:
    from collectors.mac.mac_network import set_network_services_enabled

    if name is None:
        print("No argument provided.  All interfaces will be enabled.")
    else:
        print(f"All interfaces except those containing \"{name}\" will be disabled.")

    result = set_network_services_enabled(name)
    if result["not_checked"]:
        print(f"Error: {result['error']}", file=sys.stderr)
        return 1

    for item in result["switched"]:
        print(f"Turning {item['state']} {item['name']}")
    if result["error"]:
        print(f"Error: {result['error']}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: cannot load config: {e}", file=sys.stderr)
        return 1
    configure_logging(logging.DEBUG if args.verbose else cfg["logging"]["level"])

    if args.command == "prefer-wifi":
        return run_prefer(args.service)
    if args.command == "toggle-interfaces":
        return run_toggle(args.name)
    return run_report(cfg, getattr(args, "json", None), getattr(args, "no_lookup", False))


if __name__ == "__main__":
    sys.exit(main())

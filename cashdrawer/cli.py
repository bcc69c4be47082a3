#!/usr/bin/env python3

"""CLI tool to open a cash drawer and find its serial port"""

import argparse
import importlib.metadata
import logging
import re

import ok_logging_setup

import cashdrawer

ok_logging_setup.skip_traceback_for(cashdrawer.CashDrawerException)
ok_logging_setup.skip_traceback_for(cashdrawer.DrawerMatcherInvalid)

MAIN_KEYS = ("kind", "manufacturer", "product", "serial_number")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cashdrawer", description="BT-100U style cash drawer trigger."
    )
    subparsers = parser.add_subparsers(title="actions", dest="command")

    open_parser = subparsers.add_parser("open", help="Open the cash drawer")
    open_parser.add_argument(
        "--port", "-p", default="/dev/ttyUSB0", help="TTY port"
    )
    open_parser.add_argument(
        "--baud", "-b", default=9600, type=int, help="baud rate"
    )
    open_parser.add_argument(
        "--auto", "-a", action="store_true", help="find the port by USB info"
    )
    open_parser.add_argument(
        "--match",
        "-m",
        action="append",
        default=[],
        metavar="ATTR=VALUE",
        help="device rule for --auto (repeatable, implies --auto)",
    )

    list_parser = subparsers.add_parser("list", help="List drawer devices")
    list_parser.add_argument(
        "--match",
        "-m",
        action="append",
        default=[],
        metavar="ATTR=VALUE",
        help="device rule (repeatable, replaces the default rules)",
    )
    list_parser.add_argument(
        "--all", action="store_true", help="list every serial device"
    )

    subparsers.add_parser("version", help="Print version number")
    return parser


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return

    level = "warning" if args.command == "version" else "info"
    ok_logging_setup.install({"OK_LOGGING_LEVEL": level})
    run(args)


def run(args: argparse.Namespace):
    try:
        if args.command == "open":
            open_drawer(args)
        elif args.command == "list":
            list_devices(args)
        elif args.command == "version":
            print(version_string())
    except (
        cashdrawer.CashDrawerException,
        cashdrawer.DrawerMatcherInvalid,
    ) as exc:
        ok_logging_setup.exit(f"❌ {exc}")


def open_drawer(args: argparse.Namespace):
    if args.auto or args.match:
        port = cashdrawer.discover_port(match_rules(args.match))
        logging.info("🔎 Found cash drawer at %s", port)
    else:
        port = args.port

    with cashdrawer.CashDrawer(port, args.baud) as drawer:
        drawer.trigger()
    logging.info("💸 Cash drawer opened (%s)", port)


def list_devices(args: argparse.Namespace):
    rules = match_rules(args.match)
    if not (discovery := cashdrawer.get_port_discovery(rules)):
        ok_logging_setup.exit("🚫 Device discovery is only supported on Linux")

    if args.all:
        found = cashdrawer.scan_devices()
    else:
        found = discovery.find()

    num = len(found)
    if num == 0:
        ok_logging_setup.exit(f"🚫 No serial devices match {rules}")
    logging.info("🔌 %d device%s found", num, "" if num == 1 else "s")
    for device in found:
        print(format_line(discovery, device))


def match_rules(texts: list[str]) -> cashdrawer.MatchSet:
    if not texts:
        return cashdrawer.DEFAULT_RULES
    return cashdrawer.MatchSet(
        rules=tuple(cashdrawer.MatchRule.parse(t) for t in texts)
    )


def format_line(
    discovery: cashdrawer.PortDiscovery, device: cashdrawer.DeviceRecord
) -> str:
    hits = {r.attr for r in discovery.rules.rules if r.matches(device)}
    words = [discovery.port_path(device)]
    for k in MAIN_KEYS:
        if v := device.attr.get(k, ""):
            v = repr(v) if re.search(r"""[\s!"'*=?\\]""", v) else v
            words.append(v + ("✅" if k in hits else ""))
    words.extend(
        f"{k}={device.attr[k]!r}✅"
        for k in sorted(hits)
        if k not in MAIN_KEYS
    )
    return " ".join(words)


def version_string() -> str:
    try:
        return f"cashdrawer {importlib.metadata.version('cashdrawer')}"
    except importlib.metadata.PackageNotFoundError:
        return "unknown version"


if __name__ == "__main__":
    main()

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Tuple

from .constants import DEFAULT_TIMEOUT_MS
from .errors import QueryError
from .registry import ProtocolRegistry, default_registry


def parse_port(text: str) -> int:
    if not text.isascii() or not text.isdigit() or not 0 < int(text) < 65536:
        raise argparse.ArgumentTypeError(f"invalid port: {text!r}")
    return int(text)


def split_host_port(target: str) -> Tuple[str, Optional[int]]:
    if target.startswith("["):
        host, _, rest = target[1:].partition("]")
        port = rest[1:] if rest.startswith(":") else ""
    elif target.count(":") == 1:
        host, _, port = target.partition(":")
    else:
        host, port = target, ""
    if not port:
        return host, None
    return host, parse_port(port)


def cmd_list(registry: ProtocolRegistry) -> int:
    for proto in registry.candidates():
        print(f"{', '.join(proto.names)}\tport={proto.default_port}\tpriority={proto.priority}\t{proto.network}")
    return 0


def cmd_query(args: argparse.Namespace, registry: ProtocolRegistry) -> int:
    host, port = split_host_port(args.target)
    if args.port is not None:
        port = args.port

    try:
        result = registry.query(host, port, protocol=args.protocol, timeout_ms=args.timeout_ms)
    except (QueryError, OSError) as e:
        print(f"mcquery: {host}: {e}", file=sys.stderr)
        return 1

    payload = result.to_dict()
    print(json.dumps(payload, indent=2) if args.json else payload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mcquery", description="Query a Minecraft server's full stat over UDP.")
    p.add_argument("target", nargs="?", help="HOST or HOST:PORT")
    p.add_argument("--port", type=parse_port, default=None)
    p.add_argument("--protocol", default=None, help="protocol name (default: best match for the port)")
    p.add_argument("--timeout-ms", type=int, default=DEFAULT_TIMEOUT_MS)
    p.add_argument("--json", action="store_true")
    p.add_argument("--list", action="store_true", help="list known protocols and exit")
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s [%(levelname)s] %(message)s")

    registry = default_registry()
    if args.list:
        return cmd_list(registry)
    if not args.target:
        p.error("the following arguments are required: target")

    try:
        return cmd_query(args, registry)
    except argparse.ArgumentTypeError as e:
        p.error(str(e))


if __name__ == "__main__":
    raise SystemExit(main())

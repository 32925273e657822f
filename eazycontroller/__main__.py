# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Command-line entry point: ``python -m eazycontroller`` or ``eazycontroller``."""

import argparse
import asyncio
import logging

from .lib.config import PROVIDER_TYPES, cfg
from .providers import create_provider
from .server import ControllerServer

logger = logging.getLogger("eazycontroller")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="eazycontroller",
        description="Control this computer's audio mixer and media players from a browser.")
    parser.add_argument("--host", help="address to bind (default: config or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="TCP port (default: config or 8800)")
    parser.add_argument("--static-dir", help="directory holding the web UI build")
    parser.add_argument("--provider", choices=PROVIDER_TYPES, help="state provider backend")
    parser.add_argument("--no-discovery", action="store_true",
                        help="don't advertise the service over mDNS")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    return parser.parse_args(argv)


def setup_logging(level: str | None = None):
    level_name = str(level or cfg("logging", "level", default="INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


async def main(args: argparse.Namespace):
    server = ControllerServer(
        host=args.host,
        port=args.port,
        provider=create_provider(args.provider),
        static_dir=args.static_dir,
        discovery=False if args.no_discovery else None,
    )
    await server.run()


def run(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level)
    logger.info("Starting eazycontroller")
    try:
        asyncio.run(main(args))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()

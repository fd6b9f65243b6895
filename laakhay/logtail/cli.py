"""Command-line entry point: ``laakhay-logtail``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence

from .clients.tailer import Tailer
from .constants import (
    DEFAULT_API_BASE_URL,
    ENV_API_BASE,
    ENV_API_KEY,
    ENV_DEVICE_NAME,
    REQUEST_LOGS_FEATURE,
    default_device_name,
)
from .core.config import TailerConfig
from .core.enums import OutputFormat
from .core.exceptions import AuthorizationError, TransportError
from .io.console import ConsoleSink

logger = logging.getLogger("laakhay.logtail")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="laakhay-logtail",
        description="Tail API request logs in real time",
    )
    p.add_argument(
        "--api-key",
        default=os.environ.get(ENV_API_KEY),
        help=f"API key (default: ${ENV_API_KEY})",
    )
    p.add_argument(
        "--api-base",
        default=os.environ.get(ENV_API_BASE, DEFAULT_API_BASE_URL),
        help="Control-plane base URL",
    )
    p.add_argument(
        "--device-name",
        default=os.environ.get(ENV_DEVICE_NAME) or default_device_name(),
        help="Device name reported to the control plane (default: hostname)",
    )
    p.add_argument(
        "--format",
        dest="output_format",
        default=OutputFormat.HUMAN.value,
        choices=[f.value for f in OutputFormat],
        help="Output format for request logs",
    )
    p.add_argument("--feature", default=REQUEST_LOGS_FEATURE, help=argparse.SUPPRESS)
    p.add_argument(
        "--no-wss",
        action="store_true",
        help="Force unencrypted ws:// instead of wss://",
    )
    p.add_argument("--no-color", action="store_true", help="Disable colored output")
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log verbosity (logs go to stderr)",
    )
    return p.parse_args(argv)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    if not args.api_key:
        logger.error(f"No API key provided; pass --api-key or set {ENV_API_KEY}")
        return 2

    config = TailerConfig(
        api_key=args.api_key,
        api_base_url=args.api_base,
        device_name=args.device_name,
        output_format=OutputFormat(args.output_format),
        no_wss=args.no_wss,
        websocket_feature=args.feature,
        log=logger,
    )
    tailer = Tailer(config, sink=ConsoleSink(no_color=args.no_color))

    try:
        asyncio.run(tailer.run())
    except AuthorizationError:
        # Already reported by the tailer
        return 1
    except TransportError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        # Signal handlers unavailable on this platform
        return 0
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Command line entry point.

By default the gateway runs inside the status API served by uvicorn.  With
``--headless`` only the listen/forward loop runs and every processed QSO is
written to the log.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import List, Optional

import uvicorn

from wavegate import __version__
from wavegate.errors import BindError, ConfigError
from wavegate.gateway import Gateway
from wavegate.main import create_app
from wavegate.middleware.logging import log_error, log_info, log_warning, set_level
from wavegate.models import GatewayEvent, RecordProcessed
from wavegate.settings import Settings, load_settings


def log_sink(event: GatewayEvent) -> None:
    """Event sink for headless mode."""
    if isinstance(event, RecordProcessed):
        log = log_info if event.status.ok else log_warning
        log(
            "qso_processed",
            call=event.qso.call,
            band=event.qso.band,
            mode=event.qso.mode,
            status=event.status.display,
            detail=event.status.detail,
        )
    else:
        log_info("listener_ready", **event.model_dump())


async def run_headless(settings: Settings) -> None:
    gateway = Gateway(settings, log_sink)
    try:
        await gateway.run()
    finally:
        await gateway.drain()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="wavegate",
        description="Forward ADIF QSOs received over UDP to Wavelog.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-c", "--config", help="configuration file (default: ./config.*)")
    parser.add_argument("--log-level", default="INFO", help="log level (default: INFO)")
    parser.add_argument("--headless", action="store_true", help="run without the status API")
    parser.add_argument("--http-host", default="127.0.0.1", help="status API address")
    parser.add_argument("--http-port", type=int, default=8233, help="status API port")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    set_level(args.log_level)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        log_error("settings_load_failed", error=str(e))
        print(f"Configuration loading failed: {e}", file=sys.stderr)
        return 2

    if args.headless:
        try:
            asyncio.run(run_headless(settings))
        except BindError as e:
            print(e, file=sys.stderr)
            return 1
        except KeyboardInterrupt:
            pass
        return 0

    uvicorn.run(
        create_app(settings=settings),
        host=args.http_host,
        port=args.http_port,
        log_level=args.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
PBX Exporter CLI entry point.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence, Tuple

import uvicorn

from pbx_exporter.client import PBXClient
from pbx_exporter.config.settings import ConfigError, PBXExporterConfig
from pbx_exporter.logging_config import setup_logging
from pbx_exporter.server import create_app
from pbx_exporter.telemetry.orchestrator import ScrapeOrchestrator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "/etc/pbx-exporter/config.yml"


def parse_listen_address(value: str) -> Tuple[str, int]:
    """Split HOST:PORT (IPv6 hosts in brackets) into its parts."""
    host, sep, port = value.rpartition(":")
    if not sep or not port.isdigit():
        raise argparse.ArgumentTypeError(f"expected HOST:PORT, got {value!r}")
    return host.strip("[]") or "0.0.0.0", int(port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="PBX Exporter - Prometheus metrics for a PBX management API"
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument(
        "--listen",
        type=parse_listen_address,
        default=None,
        metavar="HOST:PORT",
        help="Address to serve metrics on (overrides the configuration file)",
    )
    parser.add_argument(
        "--generate-config",
        action="store_true",
        help="Generate default configuration file and exit",
    )
    parser.add_argument(
        "--validate-config", action="store_true", help="Validate configuration file and exit"
    )
    return parser


async def serve(config: PBXExporterConfig) -> None:
    """Serve metrics until the server is stopped."""
    async with PBXClient(
        base_url=config.pbx.base_url,
        username=config.pbx.username,
        password=config.pbx.password,
        timeout_seconds=config.pbx.timeout_seconds,
        verify_tls=config.pbx.verify_tls,
    ) as client:
        orchestrator = ScrapeOrchestrator(
            source=client, fetch_timeout_seconds=config.exporter.fetch_timeout_seconds
        )
        app = create_app(orchestrator)

        server = uvicorn.Server(
            uvicorn.Config(
                app,
                host=config.exporter.host,
                port=config.exporter.port,
                log_level="info",
                log_config=None,
            )
        )
        logger.info(
            f"Serving metrics for {config.pbx.base_url} on "
            f"{config.exporter.host}:{config.exporter.port}"
        )
        await server.serve()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging("DEBUG" if args.verbose else "INFO")

    if args.generate_config:
        PBXExporterConfig().save(args.config)
        print(f"Generated default configuration at: {args.config}")
        return 0

    try:
        config = PBXExporterConfig.from_file(args.config)
    except ConfigError as e:
        if args.validate_config:
            print(f"Configuration invalid: {e}")
        else:
            logger.error(f"Cannot start: {e}")
        return 1

    if args.validate_config:
        print(f"Configuration valid: {args.config}")
        return 0

    if args.listen:
        config.exporter.host, config.exporter.port = args.listen

    setup_logging(
        "DEBUG" if args.verbose else config.logging.level,
        log_dir=config.logging.log_dir,
        use_json=config.logging.use_json,
    )

    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        print(f"Error running PBX exporter: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Command-line entry point: connect, tune, stream samples to a file, stop."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import dotenv

logger = logging.getLogger("netsdr_client.main")


def parse_cli(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="NetSDR IQ streaming client")
    _ = parser.add_argument("--host", default=None, help="Receiver address (default: NETSDR_HOST)")
    _ = parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Control TCP port (default: NETSDR_CONTROL_PORT)",
    )
    _ = parser.add_argument(
        "--data-port",
        type=int,
        default=None,
        help="Local UDP port for sample data (default: NETSDR_DATA_PORT)",
    )
    _ = parser.add_argument(
        "--frequency",
        type=int,
        default=None,
        help="Receiver frequency in Hz; left unchanged when omitted",
    )
    _ = parser.add_argument("--channel", type=int, default=0, help="Receiver channel (default: 0)")
    _ = parser.add_argument(
        "--duration",
        type=float,
        default=5.0,
        help="Seconds to stream before stopping (default: 5)",
    )
    _ = parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Sample file, appended to (default: NETSDR_SAMPLES_FILE)",
    )
    _ = parser.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help="Start the Prometheus exporter on this port",
    )
    _ = parser.add_argument("-D", "--debug", action="store_true", help="Enable debug mode")
    _ = parser.add_argument("--env", help="Path to the environment file", default=None, type=Path)
    return parser.parse_args(argv)


def load_env_file(env_file: Path | None) -> bool:
    """Load a .env file into the process environment."""
    if env_file is None:
        return False
    env_path = env_file.expanduser().resolve()
    if not env_path.exists():
        print(f"Environment file not found: {env_path}", file=sys.stderr)
        return False
    return dotenv.load_dotenv(env_path, override=True)


async def main_async(args: argparse.Namespace) -> int:
    """Async main entry point."""
    # Imported after the .env file is loaded so configuration picks it up
    from netsdr_client import const
    from netsdr_client.metrics import start_metrics_server
    from netsdr_client.protocol.exceptions import NetSdrProtocolError
    from netsdr_client.session import NetSdrClient
    from netsdr_client.sink import FileSampleSink, SampleSinkAdapter
    from netsdr_client.transport import TcpControlChannel, TimeoutConfig, UdpStreamChannel

    metrics_port = args.metrics_port
    if metrics_port is None and const.ENABLE_EXPORTER:
        metrics_port = const.NETSDR_METRICS_PORT
    if metrics_port is not None:
        try:
            start_metrics_server(metrics_port)
            logger.info("Metrics server started on port %d", metrics_port)
        except OSError as e:
            logger.error("Failed to start metrics server: %s", e)
            return 1

    timeouts = TimeoutConfig()
    control = TcpControlChannel(
        args.host or const.NETSDR_HOST,
        args.port or const.NETSDR_CONTROL_PORT,
        connect_timeout=timeouts.connect_timeout_seconds,
        io_timeout=timeouts.io_timeout_seconds,
    )
    stream = UdpStreamChannel(const.NETSDR_DATA_HOST, args.data_port or const.NETSDR_DATA_PORT)
    adapter = SampleSinkAdapter(FileSampleSink(args.output or const.NETSDR_SAMPLES_FILE))
    client = NetSdrClient(control, stream, adapter, timeout_config=timeouts)

    try:
        if not await client.connect():
            logger.error("Could not connect to %s", control)
            return 1
        if args.frequency is not None:
            _ = await client.change_frequency(args.frequency, args.channel)
        _ = await client.start_streaming()
        logger.info("Streaming for %.1fs", args.duration, extra={"output": str(adapter.sink)})
        await asyncio.sleep(args.duration)
        _ = await client.stop_streaming()
    except (NetSdrProtocolError, ValueError, OSError) as e:
        logger.error(
            "Session failed: %s",
            e,
            extra={"error_type": type(e).__name__, "state": repr(client)},
        )
        return 1
    finally:
        await client.aclose()

    logger.info("Done")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_cli(argv)
    _ = load_env_file(args.env)

    from netsdr_client import const
    from netsdr_client.logging_abstraction import configure_logging

    debug = args.debug or const.NETSDR_DEBUG
    _ = configure_logging(
        log_format=const.NETSDR_LOG_FORMAT,
        json_file=const.NETSDR_LOG_JSON_FILE or None,
        human_output=const.NETSDR_LOG_HUMAN_OUTPUT,
        level=logging.DEBUG if debug else logging.INFO,
    )
    logger.info("Starting NetSDR client", extra={"version": const.NETSDR_VERSION})

    try:
        return asyncio.run(main_async(args))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 1


if __name__ == "__main__":
    sys.exit(main())

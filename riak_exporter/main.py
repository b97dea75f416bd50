"""Main application entry point for the Riak Prometheus exporter."""

import argparse
import os
import signal
import sys
from typing import List, Optional, TextIO

import httpx
from prometheus_client import CollectorRegistry, generate_latest

from .config.loader import ConfigLoader
from .config.models import ExporterConfig
from .collectors.riak_collector import RiakCollector
from .server import ThreadedWSGIServer, create_server
from .utils.logger import setup_logger


class ExporterApp:
    """
    Main exporter application.

    Wires the Riak collector into a private registry and serves it over
    HTTP until interrupted.
    """

    def __init__(
        self,
        config: ExporterConfig,
        transport: Optional[httpx.BaseTransport] = None,
        log_stream: Optional[TextIO] = None
    ):
        """
        Initialize exporter application.

        Args:
            config: Validated exporter configuration
            transport: Optional httpx transport passed to the collector
            log_stream: Log output stream, stdout by default
        """
        self.config = config
        self.logger = setup_logger("riak_exporter", config.log_level, log_stream)
        self.server: Optional[ThreadedWSGIServer] = None

        self.registry = CollectorRegistry()
        self.collector = RiakCollector(config, self.logger, transport=transport)
        self.registry.register(self.collector)

    def run_once(self) -> str:
        """
        Perform a single collection.

        Returns:
            str: Metrics in the Prometheus text exposition format
        """
        return generate_latest(self.registry).decode("utf-8")

    def serve(self):
        """
        Bind the listen address and serve scrapes until SIGINT/SIGTERM.

        Exits the process with status 1 if the socket cannot be bound.
        """
        web = self.config.web

        try:
            self.server = create_server(self.registry, web.host, web.port, web.telemetry_path)
        except OSError as e:
            self.logger.error(f"Failed to listen on {web.listen_address}: {e}")
            sys.exit(1)

        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

        self.logger.info(f"Scraping Riak node at {self.config.riak.uri}")
        self.logger.info(f"Listening on {web.listen_address}{web.telemetry_path}")

        try:
            self.server.serve_forever()
        finally:
            self.server.server_close()
            self.logger.info("Server stopped")

    def _signal_handler(self, signum, frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received {signal_name}, shutting down")
        sys.exit(0)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        description='Prometheus exporter for Riak node statistics',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve metrics on :9203 for a local node
  riak-exporter

  # Scrape a remote node and listen on a custom port
  riak-exporter --riak.uri http://riak-1:8098 --web.listen-address :9300

  # Collect once and print the exposition text
  riak-exporter --run-once

  # Use a configuration file
  riak-exporter --config /etc/riak-exporter/config.yaml
        """
    )

    parser.add_argument(
        '--config',
        default=None,
        help='Path to an optional YAML configuration file'
    )

    parser.add_argument(
        '--web.listen-address',
        dest='listen_address',
        default=None,
        help='Address to listen on for web interface and telemetry (default: :9203)'
    )

    parser.add_argument(
        '--web.telemetry-path',
        dest='telemetry_path',
        default=None,
        help='Path under which to expose metrics (default: /metrics)'
    )

    parser.add_argument(
        '--riak.uri',
        dest='riak_uri',
        default=None,
        help='The URI which the Riak HTTP API listens on (default: http://localhost:8098)'
    )

    parser.add_argument(
        '--riak.timeout-ms',
        dest='timeout_ms',
        type=int,
        default=None,
        help='Timeout for each request to the Riak node in milliseconds (default: 5000)'
    )

    parser.add_argument(
        '--log-level',
        default=os.getenv('LOG_LEVEL'),
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: INFO or LOG_LEVEL env var)'
    )

    parser.add_argument(
        '--run-once',
        action='store_true',
        help='Collect once, print the metrics and exit'
    )

    return parser


def build_config(args: argparse.Namespace) -> ExporterConfig:
    """
    Merge the optional configuration file with command-line flags.

    Raises:
        FileNotFoundError: If --config points to a missing file
        pydantic.ValidationError: If the merged configuration is invalid
    """
    return ConfigLoader.load(
        args.config,
        overrides={
            "web": {
                "listen_address": args.listen_address,
                "telemetry_path": args.telemetry_path,
            },
            "riak": {
                "uri": args.riak_uri,
                "timeout_ms": args.timeout_ms,
            },
            "": {
                "log_level": args.log_level,
            },
        }
    )


def main(argv: Optional[List[str]] = None):
    """
    CLI entry point.

    Parses command-line arguments and starts the exporter.
    """
    args = build_parser().parse_args(argv)

    try:
        config = build_config(args)
    except Exception as e:
        setup_logger("riak_exporter").error(f"Failed to load configuration: {e}")
        sys.exit(1)

    if args.run_once:
        # Keep stdout for the exposition text
        app = ExporterApp(config, log_stream=sys.stderr)
        sys.stdout.write(app.run_once())
        sys.stdout.flush()
        sys.exit(0)

    ExporterApp(config).serve()


if __name__ == '__main__':
    main()

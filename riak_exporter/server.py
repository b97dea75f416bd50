"""Threaded WSGI server exposing the Prometheus scrape endpoint."""

import socket
from socketserver import ThreadingMixIn
from typing import Any, Callable
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from prometheus_client import CollectorRegistry, make_wsgi_app


class ThreadedWSGIServer(ThreadingMixIn, WSGIServer):
    """WSGI server handling each scrape on its own thread."""

    daemon_threads = True
    allow_reuse_address = True


class ThreadedWSGIServerV6(ThreadedWSGIServer):
    """IPv6 variant, picked when the listen host is an IPv6 address."""

    address_family = socket.AF_INET6


class QuietRequestHandler(WSGIRequestHandler):
    """Request handler that leaves access logging to the scraper."""

    def log_message(self, format, *args):
        pass


def make_metrics_app(
    registry: CollectorRegistry,
    telemetry_path: str = "/metrics"
) -> Callable[[dict, Callable[..., Any]], Any]:
    """
    Build a WSGI app serving the registry on a single path.

    Args:
        registry: Registry holding the exporter's collectors
        telemetry_path: Path answering scrapes; every other path is a 404

    Returns:
        WSGI application
    """
    application = make_wsgi_app(registry)

    def _wrapped(environ: dict, start_response: Callable[..., Any]) -> Any:
        if environ.get("PATH_INFO", "") == telemetry_path:
            environ = dict(environ)
            environ["PATH_INFO"] = "/"
            return application(environ, start_response)

        start_response(
            "404 Not Found",
            [("Content-Type", "text/plain; charset=utf-8")],
        )
        return [b"Not Found"]

    return _wrapped


def create_server(
    registry: CollectorRegistry,
    host: str,
    port: int,
    telemetry_path: str = "/metrics"
) -> ThreadedWSGIServer:
    """
    Bind the metrics server.

    Raises:
        OSError: If the listening socket cannot be bound
    """
    server_class = ThreadedWSGIServerV6 if ":" in host else ThreadedWSGIServer
    return make_server(
        host,
        port,
        make_metrics_app(registry, telemetry_path),
        server_class=server_class,
        handler_class=QuietRequestHandler,
    )

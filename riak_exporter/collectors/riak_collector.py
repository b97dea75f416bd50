"""Riak node stats collector."""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from ..config.models import ExporterConfig
from ..utils.metrics import ScrapeCycle
from ..utils.stats import classify_stats
from .base import BaseCollector, safe_scrape
from .translator import StatsTranslator


class RiakCollector(BaseCollector):
    """Collector that pings a Riak node and republishes its /stats fields."""

    target_name = "Riak"

    def __init__(
        self,
        config: ExporterConfig,
        logger: logging.Logger,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Initialize Riak collector.

        Args:
            config: Exporter configuration
            logger: Logger instance
            transport: Optional httpx transport, used to stub the node in tests
        """
        super().__init__(config, logger)
        self.transport = transport
        self.translator = StatsTranslator(
            self.namespace,
            self.logger,
            reserved_names=self.reserved_names()
        )

    @safe_scrape
    def scrape(self, cycle: ScrapeCycle) -> None:
        """
        Ping the node, fetch its stats and translate them.

        Any failure flags the cycle and ends it early with no stats-derived
        samples. A failed ping also marks the node down.

        Args:
            cycle: Per-scrape result owned by the calling collect()
        """
        with self._client() as client:
            if not self._ping(client):
                cycle.up = 0
                cycle.error = 1
                return

            cycle.up = 1
            cycle.error = 0

            stats = self._fetch_stats(client)

        if stats is None:
            cycle.error = 1
            return

        cycle.samples = self.translator.translate(classify_stats(stats))
        self.logger.debug(f"Translated {len(stats)} stats into {len(cycle.samples)} samples")

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.config.riak.uri,
            timeout=self.config.riak.timeout_ms / 1000.0,
            transport=self.transport,
            follow_redirects=True
        )

    def _ping(self, client: httpx.Client) -> bool:
        """
        Check node liveness.

        Returns:
            bool: True if /ping answered 200
        """
        try:
            response = client.get("/ping")
        except httpx.HTTPError as e:
            self.logger.error(f"Error trying to ping the Riak node: {e}")
            return False

        if response.status_code != 200:
            self.logger.error(f"Riak node is down (HTTP {response.status_code})")
            return False
        return True

    def _fetch_stats(self, client: httpx.Client) -> Optional[Dict[str, Any]]:
        """
        Fetch and decode the /stats document.

        Returns:
            Optional[Dict[str, Any]]: Decoded JSON object, or None on failure
        """
        try:
            with client.stream("GET", "/stats") as response:
                if response.status_code != 200:
                    self.logger.error(
                        f"Error when fetching the stats for the Riak node (HTTP {response.status_code})"
                    )
                    return None

                try:
                    body = response.read()
                except httpx.HTTPError as e:
                    self.logger.error(f"Error reading the response body for the /stats endpoint: {e}")
                    return None
        except httpx.HTTPError as e:
            self.logger.error(f"Error trying to fetch the stats for the Riak node: {e}")
            return None

        try:
            stats = json.loads(body, parse_constant=_reject_constant)
        except ValueError as e:
            self.logger.error(f"Error parsing the Riak metrics: {e}")
            return None

        if not isinstance(stats, dict):
            self.logger.error(
                f"Error parsing the Riak metrics: expected a JSON object, got {type(stats).__name__}"
            )
            return None
        return stats


def _reject_constant(token: str):
    """NaN and Infinity are not JSON; treat them like any other syntax error."""
    raise ValueError(f"Invalid JSON constant: {token}")

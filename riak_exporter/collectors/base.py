"""Base collector abstract class for scrape-on-demand exporters."""

from abc import ABC, abstractmethod
from typing import Iterator, Optional
import logging
import time
from functools import wraps

from prometheus_client import Counter
from prometheus_client.core import GaugeMetricFamily, Metric

from ..config.models import ExporterConfig
from ..utils.metrics import ScrapeCycle, build_fq_name, to_metric_families


class BaseCollector(ABC):
    """
    Abstract base class for collectors registered with a Prometheus registry.

    Each call to ``collect`` runs one scrape of the target and yields the
    derived gauge families followed by the collector's own bookkeeping
    metrics (duration, scrape count, liveness, error flag). Only the scrape
    counter outlives a cycle; the other bookkeeping values come from the
    cycle itself, so overlapping scrapes never see each other's flags.
    """

    target_name = "target"

    def __init__(self, config: ExporterConfig, logger: logging.Logger):
        """
        Initialize base collector.

        Args:
            config: Exporter configuration
            logger: Logger instance
        """
        self.config = config
        self.namespace = config.namespace
        self.logger = logger.getChild(self.__class__.__name__)

        # Not registered anywhere: exposed through collect()
        self.total_scrapes = Counter(
            "scrapes_total",
            f"Total number of times {self.target_name} was scraped for metrics.",
            namespace=self.namespace,
            registry=None
        )

    @abstractmethod
    def scrape(self, cycle: ScrapeCycle) -> None:
        """
        Fetch the target and record the outcome on the cycle.

        Args:
            cycle: Per-scrape result to fill with samples, liveness and error

        Note:
            Implementations should use the @safe_scrape decorator so that no
            exception escapes to the registry.
        """
        pass

    def collect(self) -> Iterator[Metric]:
        """Run one scrape and yield every metric family for it."""
        cycle = ScrapeCycle()
        start_time = time.time()
        try:
            self.scrape(cycle)
        finally:
            cycle.duration = time.time() - start_time
            self.total_scrapes.inc()

        yield from to_metric_families(cycle.samples, self.namespace)
        yield from self._bookkeeping_families(cycle)

    def describe(self) -> Iterator[Metric]:
        """Describe the static metrics only, so registration never scrapes."""
        yield from self._bookkeeping_families()

    def reserved_names(self) -> set:
        """Unprefixed names already used by the bookkeeping metrics."""
        return {
            "last_scrape_duration_seconds",
            "scrapes",
            "scrapes_total",
            "scrapes_created",
            "up",
            "last_scrape_error",
        }

    def _bookkeeping_families(self, cycle: Optional[ScrapeCycle] = None) -> Iterator[Metric]:
        """Duration, scrape count, liveness and error; valued only when a cycle is given."""
        yield self._gauge_family(
            "last_scrape_duration_seconds",
            f"Duration of the last scrape of metrics from {self.target_name}.",
            cycle.duration if cycle else None
        )
        yield from self.total_scrapes.collect()
        yield self._gauge_family(
            "up",
            f"Whether the {self.target_name} node is up.",
            cycle.up if cycle else None
        )
        yield self._gauge_family(
            "last_scrape_error",
            f"Whether the last scrape of metrics from {self.target_name} resulted "
            "in an error (1 for error, 0 for success).",
            cycle.error if cycle else None
        )

    def _gauge_family(self, name: str, documentation: str, value: Optional[float]) -> GaugeMetricFamily:
        family = GaugeMetricFamily(build_fq_name(self.namespace, name), documentation)
        if value is not None:
            family.add_metric([], value)
        return family


def safe_scrape(func):
    """
    Decorator to contain scrape exceptions.

    Any unexpected exception is logged with its traceback and turned into a
    failed cycle: the error flag is set and no samples are kept.

    Args:
        func: Collector scrape method to wrap

    Returns:
        Wrapped function that never raises
    """
    @wraps(func)
    def wrapper(self, cycle: ScrapeCycle, *args, **kwargs):
        try:
            return func(self, cycle, *args, **kwargs)
        except Exception as e:
            self.logger.error(f"Scrape failed: {e}", exc_info=True)
            cycle.fail()
    return wrapper

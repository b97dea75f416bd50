"""Shared pytest configuration and fixtures."""

import pytest
import httpx

from riak_exporter.config.models import ExporterConfig, RiakConfig
from riak_exporter.collectors.riak_collector import RiakCollector
from riak_exporter.utils.logger import setup_logger


# Trimmed-down /stats payload of a three-node cluster
RIAK_STATS = {
    "vnode_gets": 1204,
    "vnode_puts": 77,
    "node_get_fsm_time_mean": 1503.25,
    "memory_total": 61503928,
    "cpu_avg1": 0,
    "storage_backend": "riak_kv_bitcask_backend",
    "sys_driver_version": "3.3",
    "sys_global_heaps_size": "deprecated",
    "sys_heap_type": "private",
    "sys_otp_release": "R16B02_basho10",
    "sys_system_version": "Erlang R16B02_basho10 (erts-5.10.3) [smp:8:8]",
    "nodename": "riak@10.0.0.1",
    "connected_nodes": ["riak@10.0.0.2", "riak@10.0.0.3"],
    "ring_members": ["riak@10.0.0.1", "riak@10.0.0.2", "riak@10.0.0.3"],
    "riak_kv_stat_ts": 1700000000,
    "sys_smp_support": True,
    "disk": [{"id": "/", "size": 1000, "used": 20}],
    "ring_ownership": "[{'riak@10.0.0.1',22}]",
}


class FakeRiakNode:
    """httpx MockTransport handler standing in for a Riak HTTP API."""

    def __init__(
        self,
        stats=None,
        ping_status=200,
        stats_status=200,
        stats_body=None,
        stats_stream=None,
        ping_error=None,
        stats_error=None
    ):
        self.stats = RIAK_STATS if stats is None else stats
        self.ping_status = ping_status
        self.stats_status = stats_status
        self.stats_body = stats_body
        self.stats_stream = stats_stream
        self.ping_error = ping_error
        self.stats_error = stats_error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.endswith("/ping"):
            if self.ping_error is not None:
                raise self.ping_error("ping failed", request=request)
            return httpx.Response(self.ping_status, text="OK")

        if path.endswith("/stats"):
            if self.stats_error is not None:
                raise self.stats_error("stats failed", request=request)
            if self.stats_stream is not None:
                return httpx.Response(self.stats_status, stream=self.stats_stream)
            if self.stats_body is not None:
                return httpx.Response(self.stats_status, content=self.stats_body)
            return httpx.Response(self.stats_status, json=self.stats)

        return httpx.Response(404)

    @property
    def paths(self):
        return [request.url.path for request in self.requests]


class ScrapeResult:
    """Metric families from one collect() call, with sample lookups."""

    SELF_FAMILIES = {
        "riak_last_scrape_duration_seconds",
        "riak_scrapes",
        "riak_up",
        "riak_last_scrape_error",
    }

    def __init__(self, families):
        self.families = families
        self.samples = [sample for family in families for sample in family.samples]

    def value(self, name, **labels):
        """Value of the sample with this name and exact label set, or None."""
        for sample in self.samples:
            if sample.name == name and sample.labels == labels:
                return sample.value
        return None

    def samples_named(self, name):
        return [sample for sample in self.samples if sample.name == name]

    @property
    def family_names(self):
        return [family.name for family in self.families]

    @property
    def stats_family_names(self):
        return [name for name in self.family_names if name not in self.SELF_FAMILIES]


@pytest.fixture
def logger():
    """Create logger for tests."""
    return setup_logger("test")


@pytest.fixture
def config():
    """Default exporter configuration."""
    return ExporterConfig()


@pytest.fixture
def riak_stats():
    """A copy of the sample /stats payload."""
    return dict(RIAK_STATS)


@pytest.fixture
def riak_node():
    """Factory for fake Riak nodes."""
    return FakeRiakNode


@pytest.fixture
def make_collector(config, logger):
    """Build a RiakCollector talking to a fake node."""
    def _make(node, riak_uri=None, timeout_ms=None):
        collector_config = config
        if riak_uri is not None or timeout_ms is not None:
            collector_config = config.model_copy(update={
                "riak": RiakConfig(
                    uri=riak_uri or config.riak.uri,
                    timeout_ms=timeout_ms or config.riak.timeout_ms
                )
            })
        return RiakCollector(collector_config, logger, transport=httpx.MockTransport(node))
    return _make


@pytest.fixture
def scrape():
    """Run one collection and wrap the resulting families."""
    def _scrape(collector):
        return ScrapeResult(list(collector.collect()))
    return _scrape

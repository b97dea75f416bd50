"""Metric data structures for collectors."""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from prometheus_client.core import GaugeMetricFamily


METRIC_NAME_RE = re.compile(r'^[a-zA-Z_:][a-zA-Z0-9_:]*$')


def build_fq_name(namespace: str, name: str) -> str:
    """Join namespace and metric name the way Prometheus client libraries do."""
    if namespace:
        return f"{namespace}_{name}"
    return name


def is_valid_metric_name(name: str) -> bool:
    """Check a fully-qualified name against the exposition format rules."""
    return bool(METRIC_NAME_RE.match(name))


@dataclass(frozen=True)
class GaugeSample:
    """A named gauge with at most one label, built on demand per scrape."""

    name: str
    documentation: str
    value: float
    label_name: Optional[str] = None
    label_value: Optional[str] = None

    @property
    def label_names(self) -> list:
        return [self.label_name] if self.label_name else []

    @property
    def label_values(self) -> list:
        return [self.label_value] if self.label_name else []


@dataclass
class ScrapeCycle:
    """Outcome of one scrape, owned by the collect() call that started it."""

    samples: List[GaugeSample] = field(default_factory=list)
    up: float = 0
    error: float = 0
    duration: float = 0

    def fail(self):
        """Mark the cycle failed and drop anything gathered from the stats."""
        self.error = 1
        self.samples = []


def to_metric_families(
    samples: Iterable[GaugeSample],
    namespace: str
) -> Iterator[GaugeMetricFamily]:
    """
    Group gauge samples into one metric family per name.

    Families are yielded in the order their name was first seen. The help
    text and label names of the first sample win for the whole family.

    Args:
        samples: Gauge samples from one scrape
        namespace: Metric name prefix

    Yields:
        GaugeMetricFamily: One family per distinct sample name
    """
    families: Dict[str, GaugeMetricFamily] = {}
    for sample in samples:
        family = families.get(sample.name)
        if family is None:
            family = GaugeMetricFamily(
                build_fq_name(namespace, sample.name),
                sample.documentation,
                labels=sample.label_names
            )
            families[sample.name] = family
        family.add_metric(sample.label_values, sample.value)

    yield from families.values()

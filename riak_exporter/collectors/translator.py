"""Translation of classified Riak stats fields into gauge samples."""

import logging
from typing import Dict, Iterable, List, Set

from ..utils.metrics import GaugeSample, build_fq_name, is_valid_metric_name
from ..utils.stats import FieldKind, StatField


# Textual configuration exposed as a labeled gauge of value 1
STRING_METRICS: Dict[str, str] = {
    "storage_backend": "Configuration storage backend of Riak",
    "sys_driver_version": "Driver version of Riak system",
    "sys_global_heaps_size": "Global heaps size of Riak system",
    "sys_heap_type": "Heap type of Riak system",
    "sys_otp_release": "OTP release of Riak system",
    "sys_system_version": "System version of Riak",
}

NODE_METRICS = ("connected_nodes", "ring_members")


class StatsTranslator:
    """Apply the string, node-list and numeric rules to classified fields."""

    def __init__(
        self,
        namespace: str,
        logger: logging.Logger,
        reserved_names: Iterable[str] = ()
    ):
        """
        Initialize translator.

        Args:
            namespace: Metric name prefix, used for name validation
            logger: Logger instance
            reserved_names: Unprefixed names numeric fields must not take
        """
        self.namespace = namespace
        self.logger = logger
        self.reserved_names = set(reserved_names)

    def translate(self, fields: List[StatField]) -> List[GaugeSample]:
        """
        Translate classified fields into gauge samples.

        Args:
            fields: Classified top-level fields of one stats document

        Returns:
            List[GaugeSample]: String samples, then node samples, then numeric
        """
        by_name = {field.name: field for field in fields}

        samples = self._string_samples(by_name)
        samples.extend(self._node_samples(by_name))

        taken = self.reserved_names | {sample.name for sample in samples}
        samples.extend(self._numeric_samples(fields, taken))
        return samples

    def _string_samples(self, by_name: Dict[str, StatField]) -> List[GaugeSample]:
        samples = []
        for metric_name, description in STRING_METRICS.items():
            field = by_name.get(metric_name)
            if field is None or field.kind is not FieldKind.STRING:
                continue
            self.logger.debug(f"Creating metric {metric_name} with value {field.value}")
            samples.append(GaugeSample(
                name=metric_name,
                documentation=description,
                value=1,
                label_name="value",
                label_value=field.value
            ))
        return samples

    def _node_samples(self, by_name: Dict[str, StatField]) -> List[GaugeSample]:
        samples = []
        for metric_name in NODE_METRICS:
            field = by_name.get(metric_name)
            if field is None or field.kind is not FieldKind.LIST:
                continue

            nodes = field.value
            samples.append(GaugeSample(
                name=f"{metric_name}_total",
                documentation=f"Total count of {metric_name}",
                value=len(nodes)
            ))

            seen: Set[str] = set()
            for node in nodes:
                if not isinstance(node, str) or node in seen:
                    continue
                seen.add(node)
                samples.append(GaugeSample(
                    name=metric_name,
                    documentation=metric_name,
                    value=1,
                    label_name="node",
                    label_value=node
                ))
        return samples

    def _numeric_samples(self, fields: List[StatField], taken: Set[str]) -> List[GaugeSample]:
        samples = []
        for field in fields:
            if field.kind is not FieldKind.NUMBER:
                continue

            if field.name in taken:
                self.logger.warning(f"Skipping stat {field.name}: name already in use")
                continue
            if not is_valid_metric_name(build_fq_name(self.namespace, field.name)):
                self.logger.warning(f"Skipping stat {field.name}: invalid metric name")
                continue

            samples.append(GaugeSample(
                name=field.name,
                documentation=field.name,
                value=float(field.value)
            ))
        return samples

import logging
from typing import Dict, Iterable, List, Union

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily

from c4000xg_models import LabeledSample, MetricDescriptor, MetricType

logger = logging.getLogger(__name__)

MetricFamily = Union[CounterMetricFamily, GaugeMetricFamily]


def new_metric_family(name: str, documentation: str, metric_type: MetricType, label_keys) -> MetricFamily:
    if metric_type == MetricType.COUNTER:
        return CounterMetricFamily(name, documentation, labels=list(label_keys))
    return GaugeMetricFamily(name, documentation, labels=list(label_keys))


def describe_families(descriptors: Iterable[MetricDescriptor]) -> List[MetricFamily]:
    return [
        new_metric_family(d.name, d.documentation, d.metric_type, d.label_keys)
        for d in descriptors
    ]


def group_samples(samples: Iterable[LabeledSample]) -> List[MetricFamily]:
    """Fold samples into one family per metric name, keeping first-seen order."""
    families: Dict[str, MetricFamily] = {}
    label_keys: Dict[str, tuple] = {}
    for sample in samples:
        family = families.get(sample.name)
        if family is None:
            family = new_metric_family(sample.name, sample.documentation or sample.name,
                                       sample.metric_type, sample.label_keys)
            families[sample.name] = family
            label_keys[sample.name] = sample.label_keys
        elif label_keys[sample.name] != sample.label_keys:
            logger.warning(f"Dropping {sample.name} sample with labels {sample.label_keys}, "
                           f"expected {label_keys[sample.name]}")
            continue
        family.add_metric(sample.label_values, sample.value)
    return list(families.values())

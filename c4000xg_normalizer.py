"""
Join C4000XG record sets and turn them into labeled samples.

Each collection pass filters one record set to its active entries, resolves
label values by looking related records up in the other record sets, and
emits every numeric field as a sample whose name is derived from the vendor
field name.
"""

from __future__ import annotations

import logging
import re
import threading
from typing import Dict, List, Optional, Sequence, Tuple

from c4000xg_models import (
    DeviceSnapshot,
    LabeledSample,
    MetricDescriptor,
    MetricType,
    Record,
    RecordSet,
)
from c4000xg_utils import safe_float, strip_suffix, strip_trailing_dot

logger = logging.getLogger(__name__)

COUNTER_SUFFIXES = ("Failures", "Total", "Received", "Sent", "Time", "Count", "Packets")

CLIENT_PREFIX = "client_"

ETHERNET_INTERFACE_PATH = "Device.Ethernet.Interface."

CLIENT_MATCHER = re.compile(r"\.AssociatedDevice.\d+$")
NETWORK_MATCHER = re.compile(r"^Device\.([^.]+)\.([^.]+)\.\d+$")

CLIENT_LABELS = ("mac_address", "hostname", "ssid")
HOST_INFO_LABELS = ("mac_address", "ip", "hostname", "ssid", "frequency_band", "wifi_standard", "vendor")
NETWORK_LABELS = ("type", "name", "alias", "mac_address", "ssid")
TEMPERATURE_LABELS = ("name", "alias")


def get_metric_type(metric: str) -> MetricType:
    if metric.endswith(COUNTER_SUFFIXES):
        return MetricType.COUNTER
    return MetricType.GAUGE


def parse_metric_value(metric: str, value: str) -> Optional[float]:
    """Return the numeric value of a field, or None if it is not a metric."""
    if metric.endswith("ID"):
        return None
    return safe_float(strip_suffix(value, "MHz"))


class MetricNameConverter:
    """Converts CamelCase vendor field names to namespaced snake_case."""

    def __init__(self, namespace: str):
        self.namespace = namespace
        self.matchers = [
            re.compile(r"([^_A-Z])([A-Z])"),
            re.compile(r"([A-Z]+)([A-Z][a-z])"),
            re.compile(r"([A-Za-z])([0-9]+)"),
        ]

    def snake(self, s: str) -> str:
        for matcher in self.matchers:
            s = matcher.sub(r"\1_\2", s)
        return s.lower()

    def convert(self, prefix: str, s: str) -> str:
        return f"{self.namespace}_{prefix}{self.snake(s)}"


class MetricDescriptorCache:
    """
    Process-wide, append-only store of metric descriptors.

    Keyed by (prefix, vendor field name). The first lookup fixes the
    descriptor; later lookups return the very same object, so every pull
    declares the metric with identical name, help text and label keys.
    """

    def __init__(self, converter: MetricNameConverter):
        self.converter = converter
        self._descriptors: Dict[Tuple[str, str], MetricDescriptor] = {}
        self._lock = threading.Lock()

    def get(self, prefix: str, metric: str, documentation: str,
            label_keys: Sequence[str]) -> MetricDescriptor:
        key = (prefix, metric)
        with self._lock:
            desc = self._descriptors.get(key)
            if desc is None:
                desc = MetricDescriptor(
                    name=self.converter.convert(prefix, metric),
                    documentation=documentation,
                    label_keys=tuple(label_keys),
                    metric_type=get_metric_type(metric),
                )
                self._descriptors[key] = desc
            return desc

    def descriptors(self) -> List[MetricDescriptor]:
        with self._lock:
            return list(self._descriptors.values())

    def __len__(self):
        with self._lock:
            return len(self._descriptors)


class MetricNormalizer:
    """Runs the collection passes over one device snapshot."""

    def __init__(self, namespace: str, cache: Optional[MetricDescriptorCache] = None):
        self.converter = MetricNameConverter(namespace)
        self.cache = cache if cache is not None else MetricDescriptorCache(self.converter)

    def collect_metrics(self, prefix: str, stats: Optional[Record],
                        tag_keys: Sequence[str], tag_values: Sequence[str]) -> List[LabeledSample]:
        """Emit one sample per numeric field of ``stats``."""
        if not stats:
            return []
        labels = tuple(zip(tag_keys, tag_values))
        samples = []
        for metric, value in stats.items():
            float_value = parse_metric_value(metric, value)
            if float_value is None:
                continue
            desc = self.cache.get(prefix, metric, metric, tag_keys)
            samples.append(LabeledSample(
                name=desc.name,
                value=float_value,
                metric_type=desc.metric_type,
                labels=labels,
                documentation=desc.documentation,
            ))
        return samples

    def collect_client_metrics(self, hosts: RecordSet, aps: RecordSet,
                               ssids: RecordSet) -> Tuple[List[LabeledSample], Dict[str, Record]]:
        samples: List[LabeledSample] = []
        mac_to_associated_device: Dict[str, Record] = {}
        for key, associated_device in aps.items():
            if not CLIENT_MATCHER.search(key) or associated_device.get("Active") != "true":
                continue
            mac_address = associated_device.get("MACAddress", "")
            mac_to_associated_device[mac_address] = associated_device
            host_info = hosts.get(mac_address, {})
            ssid_info = ssids.get(host_info.get("Layer1Interface", ""), {})

            tag_values = [
                mac_address,
                host_info.get("HostName", ""),
                ssid_info.get("SSID", ""),
            ]
            samples += self.collect_metrics(CLIENT_PREFIX, associated_device, CLIENT_LABELS, tag_values)
            samples += self.collect_metrics(CLIENT_PREFIX, aps.get(f"{key}.Stats"), CLIENT_LABELS, tag_values)
        logger.debug(f"Client metrics: {len(mac_to_associated_device)} active clients")
        return samples, mac_to_associated_device

    def collect_host_info(self, hosts: RecordSet, mac_to_associated_device: Dict[str, Record],
                          ssids: RecordSet, radios: RecordSet) -> List[LabeledSample]:
        samples: List[LabeledSample] = []
        for host_info in hosts.values():
            if host_info.get("Active") != "1":
                continue
            mac_address = host_info.get("PhysAddress", "")
            layer1_interface = host_info.get("Layer1Interface", "")
            ssid_info = ssids.get(layer1_interface, {})
            associated_device = mac_to_associated_device.get(mac_address, {})
            ssid = ssid_info.get("SSID")
            if ssid is None:
                # Wired hosts have no SSID record
                ssid = layer1_interface.replace(ETHERNET_INTERFACE_PATH, "Ethernet ", 1)
            radio = radios.get(strip_trailing_dot(ssid_info.get("LowerLayers", "")), {})

            tag_values = [
                mac_address,
                host_info.get("IPAddress", ""),
                host_info.get("HostName", ""),
                ssid,
                radio.get("OperatingFrequencyBand", ""),
                associated_device.get("OperatingStandard", ""),
                associated_device.get("X_GWS_VendorId", ""),
            ]
            samples += self.collect_metrics(CLIENT_PREFIX, {"info": "1"}, HOST_INFO_LABELS, tag_values)
        return samples

    def collect_network_metrics(self, metrics: RecordSet) -> List[LabeledSample]:
        samples: List[LabeledSample] = []
        for key, entry in metrics.items():
            match = NETWORK_MATCHER.match(key)
            if match is None or entry.get("Enable") != "true":
                continue
            kind = f"{match.group(1).lower()}_{match.group(2).lower()}"
            tag_values = [
                kind,
                entry.get("Name", ""),
                entry.get("Alias", ""),
                entry.get("MACAddress", ""),
                entry.get("SSID", ""),
            ]
            samples += self.collect_metrics("", entry, NETWORK_LABELS, tag_values)
            samples += self.collect_metrics("", metrics.get(f"{key}.Stats"), NETWORK_LABELS, tag_values)
        return samples

    def collect_temperature_metrics(self, metrics: RecordSet) -> List[LabeledSample]:
        samples: List[LabeledSample] = []
        for entry in metrics.values():
            value = safe_float(entry.get("Value"))
            if value is None or entry.get("Enable") != "true":
                continue
            desc = self.cache.get("", "temperature", "TemperatureSensor (number)", TEMPERATURE_LABELS)
            samples.append(LabeledSample(
                name=desc.name,
                value=value,
                metric_type=MetricType.GAUGE,
                labels=tuple(zip(TEMPERATURE_LABELS, (entry.get("Name", ""), entry.get("Alias", "")))),
                documentation=desc.documentation,
            ))
        return samples

    def normalize(self, snapshot: DeviceSnapshot) -> List[LabeledSample]:
        """Run every pass over a complete snapshot, in dependency order."""
        samples, mac_to_associated_device = self.collect_client_metrics(
            snapshot.hosts, snapshot.access_points, snapshot.ssids)
        samples += self.collect_host_info(
            snapshot.hosts, mac_to_associated_device, snapshot.ssids, snapshot.radios)
        samples += self.collect_network_metrics(snapshot.ethernet)
        samples += self.collect_temperature_metrics(snapshot.temperature_sensors)
        return samples

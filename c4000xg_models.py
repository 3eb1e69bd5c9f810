from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

Record = Dict[str, str]
"""One vendor object instance, field name to string value."""

RecordSet = Dict[str, Record]
"""Records keyed by object path or by a designated field value."""


@dataclass
class DeviceParam:
    name: str
    value: str


@dataclass
class DeviceObject:
    obj_name: str
    params: list[DeviceParam] = field(default_factory=list)

    def to_record(self) -> Record:
        return {p.name: p.value for p in self.params}


@dataclass(frozen=True)
class ObjectQuery:
    object_path: str
    """Value of the ``Object=`` selector."""
    fields: Tuple[str, ...] = ()
    """Field filters, sent as empty query parameters in this order."""
    key_field: str = ""
    """Field whose value keys the record set; empty keys by object path."""
    description: str = ""


class ObjectDomain(Enum):
    HOSTS = ObjectQuery(
        object_path="Device.Hosts.Host",
        fields=("PhysAddress", "HostName", "Layer1Interface", "Active", "IPAddress"),
        key_field="PhysAddress",
        description="Hosts",
    )
    ACCESS_POINT = ObjectQuery(
        object_path="Device.WiFi.AccessPoint",
        description="WiFi AccessPoint",
    )
    SSID = ObjectQuery(
        object_path="Device.WiFi.SSID.",
        description="WiFi SSID",
    )
    RADIO = ObjectQuery(
        object_path="Device.WiFi.Radio",
        fields=("Channel", "OperatingFrequencyBand"),
        description="WiFi Radio",
    )
    ETHERNET = ObjectQuery(
        object_path="Device.Ethernet.",
        description="Ethernet Interfaces",
    )
    TEMPERATURE_STATUS = ObjectQuery(
        object_path="Device.DeviceInfo.TemperatureStatus.TemperatureSensor.",
        description="Temperature Sensors",
    )


@dataclass
class DeviceSnapshot:
    """All record sets fetched during one scrape."""
    hosts: RecordSet
    access_points: RecordSet
    ssids: RecordSet
    radios: RecordSet
    ethernet: RecordSet
    temperature_sensors: RecordSet


class MetricType(Enum):
    COUNTER = "counter"
    GAUGE = "gauge"


@dataclass(frozen=True)
class MetricDescriptor:
    name: str
    documentation: str
    label_keys: Tuple[str, ...]
    metric_type: MetricType


@dataclass(frozen=True)
class LabeledSample:
    name: str
    value: float
    metric_type: MetricType
    labels: Tuple[Tuple[str, str], ...]
    """Ordered (label name, label value) pairs."""
    documentation: str = ""

    @property
    def label_keys(self) -> Tuple[str, ...]:
        return tuple(k for k, _ in self.labels)

    @property
    def label_values(self) -> list[str]:
        return [v for _, v in self.labels]

    def label(self, key: str) -> Optional[str]:
        return dict(self.labels).get(key)


@dataclass
class ExporterConfig:
    modem_host: str
    modem_user: str
    modem_password: str
    metrics_namespace: str
    port: int
    log_level: str = "INFO"

"""Shared fixtures: a fake C4000XG management API served through `responses`."""

import json
from urllib.parse import parse_qsl, urlsplit

import pytest
import responses

MODEM_HOST = "192.168.0.1"
BASE_URL = f"https://{MODEM_HOST}"

WIFI_MAC = "AA:BB:CC:DD:EE:FF"
WIRED_MAC = "11:22:33:44:55:66"


def objects_payload(records):
    """Build a cgi_get body from {ObjName: {ParamName: ParamValue}}."""
    return {
        "Objects": [
            {
                "ObjName": name,
                "Param": [{"ParamName": k, "ParamValue": v} for k, v in params.items()],
            }
            for name, params in records.items()
        ]
    }


HOSTS = {
    "Device.Hosts.Host.1": {
        "PhysAddress": WIFI_MAC,
        "HostName": "laptop",
        "Layer1Interface": "Device.WiFi.SSID.1",
        "Active": "1",
        "IPAddress": "192.168.0.10",
    },
    "Device.Hosts.Host.2": {
        "PhysAddress": WIRED_MAC,
        "HostName": "desktop",
        "Layer1Interface": "Device.Ethernet.Interface.2",
        "Active": "1",
        "IPAddress": "192.168.0.11",
    },
    "Device.Hosts.Host.3": {
        "PhysAddress": "00:00:00:00:00:01",
        "HostName": "gone",
        "Layer1Interface": "Device.WiFi.SSID.1",
        "Active": "0",
        "IPAddress": "192.168.0.12",
    },
}

ACCESS_POINTS = {
    "Device.WiFi.AccessPoint.1": {
        "Enable": "true",
        "SSIDReference": "Device.WiFi.SSID.1",
        "AssociatedDeviceNumberOfEntries": "1",
    },
    "Device.WiFi.AccessPoint.1.AssociatedDevice.1": {
        "MACAddress": WIFI_MAC,
        "Active": "true",
        "OperatingStandard": "ax",
        "X_GWS_VendorId": "Apple",
        "SignalStrength": "-51",
        "ParentID": "7",
    },
    "Device.WiFi.AccessPoint.1.AssociatedDevice.1.Stats": {
        "TxPackets": "42",
        "BytesSent": "1000",
        "BytesReceived": "2000",
    },
    "Device.WiFi.AccessPoint.1.AssociatedDevice.2": {
        "MACAddress": "00:00:00:00:00:02",
        "Active": "false",
        "SignalStrength": "-80",
    },
}

SSIDS = {
    "Device.WiFi.SSID.1": {
        "SSID": "HomeNet",
        "LowerLayers": "Device.WiFi.Radio.1.",
        "Enable": "true",
    },
}

RADIOS = {
    "Device.WiFi.Radio.1": {
        "Channel": "36",
        "OperatingFrequencyBand": "5GHz",
    },
}

ETHERNET = {
    "Device.Ethernet.Interface.1": {
        "Enable": "true",
        "Name": "eth0",
        "Alias": "LAN1",
        "MACAddress": "F0:F0:F0:F0:F0:F0",
        "Status": "Up",
        "MaxBitRate": "1000",
    },
    "Device.Ethernet.Interface.1.Stats": {
        "BytesSent": "123",
        "BytesReceived": "456",
    },
    "Device.Ethernet.Interface.2": {
        "Enable": "false",
        "Name": "eth1",
        "MaxBitRate": "1000",
    },
}

TEMPERATURES = {
    "Device.DeviceInfo.TemperatureStatus.TemperatureSensor.1": {
        "Enable": "true",
        "Name": "CPU",
        "Alias": "cpu",
        "Value": "55",
    },
    "Device.DeviceInfo.TemperatureStatus.TemperatureSensor.2": {
        "Enable": "false",
        "Name": "WiFi",
        "Alias": "wifi",
        "Value": "48",
    },
    "Device.DeviceInfo.TemperatureStatus.TemperatureSensor.3": {
        "Enable": "true",
        "Name": "Broken",
        "Alias": "broken",
        "Value": "",
    },
}


class FakeModem:
    """Answers cgi_get requests by their ``Object=`` selector."""

    def __init__(self):
        self.payloads = {
            "Device.Hosts.Host": objects_payload(HOSTS),
            "Device.WiFi.AccessPoint": objects_payload(ACCESS_POINTS),
            "Device.WiFi.SSID.": objects_payload(SSIDS),
            "Device.WiFi.Radio": objects_payload(RADIOS),
            "Device.Ethernet.": objects_payload(ETHERNET),
            "Device.DeviceInfo.TemperatureStatus.TemperatureSensor.": objects_payload(TEMPERATURES),
        }
        self.queries = []

    def __call__(self, request):
        query = parse_qsl(urlsplit(request.url).query, keep_blank_values=True)
        self.queries.append(query)
        obj = dict(query).get("Object")
        payload = self.payloads.get(obj)
        if payload is None:
            return 404, {}, "not found"
        if isinstance(payload, str):
            return 200, {"Content-Type": "application/json"}, payload
        return 200, {"Content-Type": "application/json"}, json.dumps(payload)


@pytest.fixture
def mock_responses():
    """Enable responses mock for HTTP requests."""
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def modem(mock_responses):
    """A fake modem accepting logins and serving all six object collections."""
    fake = FakeModem()
    mock_responses.add(
        responses.POST,
        f"{BASE_URL}/cgi/cgi_action",
        body="",
        status=200,
        headers={"Set-Cookie": "session=abc123; Path=/"},
    )
    mock_responses.add_callback(
        responses.GET,
        f"{BASE_URL}/cgi/cgi_get",
        callback=fake,
    )
    return fake

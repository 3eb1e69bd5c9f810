from __future__ import annotations

import logging
from dataclasses import dataclass

import requests
import urllib3

from c4000xg_client_exceptions import *
from c4000xg_models import *
from c4000xg_utils import *

C4000XG_CLIENT_DEFAULT_HEADERS = {
    "X-Requested-With": "XMLHttpRequest"
}

DEFAULT_TIMEOUT = 10

logger = logging.getLogger(__name__)


def parse_objects(data) -> list[DeviceObject]:
    """
    Decode a ``cgi_get`` payload into device objects.

    The expected shape is::

        {"Objects": [{"ObjName": "Device.WiFi.SSID.1",
                      "Param": [{"ParamName": "SSID", "ParamValue": "HomeNet"}]}]}

    Missing or null ``Objects``/``Param`` lists are read as empty.
    """
    if not isinstance(data, dict):
        raise DecodeException(f"Expected a JSON object, got {type(data).__name__}")
    raw_objects = data.get("Objects") or []
    if not isinstance(raw_objects, list):
        raise DecodeException("'Objects' is not a list")

    objects: list[DeviceObject] = []
    for raw in raw_objects:
        if not isinstance(raw, dict):
            raise DecodeException("Object entry is not a JSON object")
        obj_name = raw.get("ObjName", "")
        raw_params = raw.get("Param") or []
        if not isinstance(obj_name, str) or not isinstance(raw_params, list):
            raise DecodeException(f"Malformed object {obj_name!r}")
        params = []
        for p in raw_params:
            if not isinstance(p, dict):
                raise DecodeException(f"Malformed parameter in {obj_name}")
            name = p.get("ParamName", "")
            value = p.get("ParamValue", "")
            if value is None:
                value = ""
            if not isinstance(name, str) or not isinstance(value, str):
                raise DecodeException(f"Non-string parameter {name!r} in {obj_name}")
            params.append(DeviceParam(name=name, value=value))
        objects.append(DeviceObject(obj_name=obj_name, params=params))
    return objects


def data_to_map(objects: list[DeviceObject], key_field: str = "") -> RecordSet:
    records: RecordSet = {}
    for obj in objects:
        record = obj.to_record()
        key = obj.obj_name if key_field == "" else record.get(key_field, "")
        records[key] = record
    return records


@dataclass
class DeviceClient:
    host: str
    session: requests.Session

    @staticmethod
    def __decode_response(response: requests.Response, what: str) -> list[DeviceObject]:
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise TransportException(f"Unable to get {what}: {e}") from e
        try:
            data = response.json()
        except ValueError as e:
            raise DecodeException(f"Cannot parse {what} as JSON: {e}") from e
        return parse_objects(data)

    def get_objects(self, domain: ObjectDomain) -> list[DeviceObject]:
        query = domain.value
        params = [("Object", query.object_path)] + [(f, "") for f in query.fields]
        try:
            response = self.session.get(f"{self.host}/cgi/cgi_get",
                                        params=params,
                                        headers=C4000XG_CLIENT_DEFAULT_HEADERS,
                                        verify=False,
                                        timeout=DEFAULT_TIMEOUT)
        except requests.RequestException as e:
            raise TransportException(f"Unable to get {query.description}: {e}") from e
        objects = self.__decode_response(response, query.description)
        logger.debug(f"Fetched {len(objects)} objects for {query.object_path}")
        return objects

    def fetch(self, domain: ObjectDomain) -> RecordSet:
        return data_to_map(self.get_objects(domain), domain.value.key_field)

    def get_hosts(self) -> RecordSet:
        return self.fetch(ObjectDomain.HOSTS)

    def get_access_point(self) -> RecordSet:
        return self.fetch(ObjectDomain.ACCESS_POINT)

    def get_ssid(self) -> RecordSet:
        return self.fetch(ObjectDomain.SSID)

    def get_radio(self) -> RecordSet:
        return self.fetch(ObjectDomain.RADIO)

    def get_ethernet(self) -> RecordSet:
        return self.fetch(ObjectDomain.ETHERNET)

    def get_temperature_status(self) -> RecordSet:
        return self.fetch(ObjectDomain.TEMPERATURE_STATUS)

    def scrape(self) -> DeviceSnapshot:
        return DeviceSnapshot(
            hosts=self.get_hosts(),
            access_points=self.get_access_point(),
            ssids=self.get_ssid(),
            radios=self.get_radio(),
            ethernet=self.get_ethernet(),
            temperature_sensors=self.get_temperature_status(),
        )

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class DeviceClientFactory:

    def __init__(self, host):
        if not host.startswith(("http://", "https://")):
            host = f"https://{host}"

        self.host = host.rstrip("/")

    def auth(self, username: str, password: str) -> DeviceClient:
        headers = {
            "Content-Type": "application/x-www-form-urlencoded"
        }
        payload = encode_ordered_form([("username", username), ("password", password)])
        session = requests.Session()
        # Self-signed certificate. Per-request verify=False outranks REQUESTS_CA_BUNDLE
        session.verify = False
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
        try:
            response = session.post(f"{self.host}/cgi/cgi_action",
                                    headers=headers,
                                    data=payload,
                                    verify=False,
                                    timeout=DEFAULT_TIMEOUT)
        except requests.RequestException as e:
            session.close()
            raise AuthenticationException(f"Unable to log in to {self.host}: {e}") from e

        if not response.ok:
            logger.warning(f"Login to {self.host} answered HTTP {response.status_code}, continuing")
        return DeviceClient(self.host, session)

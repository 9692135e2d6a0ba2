"""Result types for CNI spec versions 1.0.0 and 1.1.0."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from . import convert as _convert
from . import types040
from .types import (
    DNS,
    Route,
    _cidr_from_value,
    _get_str,
    _ip_from_value,
    _IPAddr,
    _IPNet,
    _json_kind,
    _require_dict,
)
from .types import Result as _BaseResult

# The result types did not change between 1.0.0 and 1.1.0.
IMPLEMENTED_SPEC_VERSION = "1.1.0"

SUPPORTED_VERSIONS = ("1.0.0", "1.1.0")


def _get_list(data: dict, key: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"field {key!r} must be a list, got {_json_kind(value)}")
    return value


@dataclass
class Interface:
    """An interface created by a plugin."""

    name: str = ""
    mac: str = ""
    sandbox: str = ""

    def copy(self) -> Interface:
        return Interface(name=self.name, mac=self.mac, sandbox=self.sandbox)

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"name": self.name}
        if self.mac:
            out["mac"] = self.mac
        if self.sandbox:
            out["sandbox"] = self.sandbox
        return out

    @classmethod
    def from_dict(cls, data: Any) -> Interface:
        data = _require_dict(data, "interface")
        return cls(
            name=_get_str(data, "name"),
            mac=_get_str(data, "mac"),
            sandbox=_get_str(data, "sandbox"),
        )


@dataclass
class IPConfig:
    """An IP address to configure on an interface.

    ``interface`` indexes the result's interfaces.
    """

    address: _IPNet
    interface: Optional[int] = None
    gateway: Optional[_IPAddr] = None

    def copy(self) -> IPConfig:
        return IPConfig(
            address=self.address, interface=self.interface, gateway=self.gateway
        )

    def to_dict(self) -> dict:
        out: dict[str, Any] = {}
        if self.interface is not None:
            out["interface"] = self.interface
        out["address"] = str(self.address)
        if self.gateway is not None:
            out["gateway"] = str(self.gateway)
        return out

    @classmethod
    def from_dict(cls, data: Any) -> IPConfig:
        data = _require_dict(data, "IP configuration")
        if "address" not in data:
            raise ValueError("IP configuration is missing address")
        interface = data.get("interface")
        if interface is not None and (
            isinstance(interface, bool) or not isinstance(interface, int)
        ):
            raise ValueError(
                f"cannot unmarshal {_json_kind(interface)} into an interface index"
            )
        return cls(
            address=_cidr_from_value(data["address"]),
            interface=interface,
            gateway=_ip_from_value(data.get("gateway")),
        )


@dataclass
class Result(_BaseResult):
    """A plugin result in the 1.x format."""

    cni_version: str = ""
    interfaces: list[Interface] = field(default_factory=list)
    ips: list[IPConfig] = field(default_factory=list)
    routes: list[Route] = field(default_factory=list)
    dns: DNS = field(default_factory=DNS)

    def version(self) -> str:
        return self.cni_version

    def get_as_version(self, version: str) -> _BaseResult:
        if self.cni_version == "":
            self.cni_version = IMPLEMENTED_SPEC_VERSION
        return _convert.convert(self, version)

    def to_dict(self) -> dict:
        out: dict[str, Any] = {}
        if self.cni_version:
            out["cniVersion"] = self.cni_version
        if self.interfaces:
            out["interfaces"] = [i.to_dict() for i in self.interfaces]
        if self.ips:
            out["ips"] = [ip.to_dict() for ip in self.ips]
        if self.routes:
            out["routes"] = [r.to_dict() for r in self.routes]
        out["dns"] = self.dns.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Any) -> Result:
        data = _require_dict(data, "result")
        return cls(
            cni_version=_get_str(data, "cniVersion"),
            interfaces=[Interface.from_dict(i) for i in _get_list(data, "interfaces")],
            ips=[IPConfig.from_dict(ip) for ip in _get_list(data, "ips")],
            routes=[Route.from_dict(r) for r in _get_list(data, "routes")],
            dns=DNS.from_dict(data.get("dns")),
        )


def new_result(data: Union[str, bytes]) -> Result:
    """Parse a 1.x result from JSON."""
    result = Result.from_dict(json.loads(data))
    if result.cni_version not in SUPPORTED_VERSIONS:
        raise ValueError(
            f"result type supports [{' '.join(SUPPORTED_VERSIONS)}] but unmarshalled "
            f"CNIVersion is {json.dumps(result.cni_version, ensure_ascii=False)}"
        )
    return result


def get_result(result: _BaseResult) -> Result:
    """Convert any result to the 1.1.0 format via its own conversion."""
    converted = result.get_as_version(IMPLEMENTED_SPEC_VERSION)
    if not isinstance(converted, Result):
        raise ValueError("failed to convert result")
    return converted


def new_result_from_result(result: _BaseResult) -> Result:
    """Convert any result to the 1.1.0 format through the converter registry."""
    converted = _convert.convert(result, IMPLEMENTED_SPEC_VERSION)
    if not isinstance(converted, Result):
        raise ValueError("failed to convert result")
    return converted


def _as_100(source: _BaseResult) -> Result:
    if not isinstance(source, Result):
        raise TypeError("expected a 1.x result")
    return source


def _convert_from_100(source: _BaseResult, to_version: str) -> _BaseResult:
    src = _as_100(source)
    return Result(
        cni_version=to_version,
        interfaces=list(src.interfaces),
        ips=list(src.ips),
        routes=list(src.routes),
        dns=src.dns,
    )


def _convert_from_02x(source: _BaseResult, to_version: str) -> _BaseResult:
    result040 = _convert.convert(source, types040.IMPLEMENTED_SPEC_VERSION)
    return _convert_from_04x(result040, to_version)


def _convert_from_04x(source: _BaseResult, to_version: str) -> _BaseResult:
    if not isinstance(source, types040.Result):
        raise TypeError("expected a 0.3.x/0.4.0 result")
    return Result(
        cni_version=to_version,
        interfaces=[
            Interface(name=i.name, mac=i.mac, sandbox=i.sandbox)
            for i in source.interfaces
        ],
        ips=[
            IPConfig(address=ip.address, interface=ip.interface, gateway=ip.gateway)
            for ip in source.ips
        ],
        routes=[r.copy() for r in source.routes],
        dns=source.dns.copy(),
    )


def _ip_version(address: _IPNet) -> str:
    ip = address.ip
    if ip.version == 4 or ip.ipv4_mapped is not None:
        return "4"
    return "6"


def _convert_to_04x(source: _BaseResult, to_version: str) -> _BaseResult:
    src = _as_100(source)
    return types040.Result(
        cni_version=to_version,
        interfaces=[
            types040.Interface(name=i.name, mac=i.mac, sandbox=i.sandbox)
            for i in src.interfaces
        ],
        ips=[
            types040.IPConfig(
                address=ip.address,
                version=_ip_version(ip.address),
                interface=ip.interface,
                gateway=ip.gateway,
            )
            for ip in src.ips
        ],
        routes=[r.copy() for r in src.routes],
        dns=src.dns.copy(),
    )


def _convert_to_02x(source: _BaseResult, to_version: str) -> _BaseResult:
    result040 = _convert_to_04x(source, types040.IMPLEMENTED_SPEC_VERSION)
    return _convert.convert(result040, to_version)


_convert.register_converter("0.1.0", SUPPORTED_VERSIONS, _convert_from_02x)
_convert.register_converter("0.2.0", SUPPORTED_VERSIONS, _convert_from_02x)
_convert.register_converter("0.3.0", SUPPORTED_VERSIONS, _convert_from_04x)
_convert.register_converter("0.3.1", SUPPORTED_VERSIONS, _convert_from_04x)
_convert.register_converter("0.4.0", SUPPORTED_VERSIONS, _convert_from_04x)
_convert.register_converter("1.0.0", ["1.1.0"], _convert_from_100)

_convert.register_converter("1.0.0", ["0.3.0", "0.3.1", "0.4.0"], _convert_to_04x)
_convert.register_converter("1.0.0", ["0.1.0", "0.2.0"], _convert_to_02x)
_convert.register_converter("1.1.0", ["0.3.0", "0.3.1", "0.4.0"], _convert_to_04x)
_convert.register_converter("1.1.0", ["0.1.0", "0.2.0"], _convert_to_02x)
_convert.register_converter("1.1.0", ["1.0.0"], _convert_from_100)

_convert.register_creator(list(SUPPORTED_VERSIONS), new_result)
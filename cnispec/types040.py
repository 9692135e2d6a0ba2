"""Result types for CNI spec versions 0.3.0, 0.3.1 and 0.4.0."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from . import convert as _convert
from . import types020
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

IMPLEMENTED_SPEC_VERSION = "0.4.0"

SUPPORTED_VERSIONS = ("0.3.0", "0.3.1", IMPLEMENTED_SPEC_VERSION)


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

    ``version`` is "4" or "6"; ``interface`` indexes the result's interfaces.
    """

    address: _IPNet
    version: str = ""
    interface: Optional[int] = None
    gateway: Optional[_IPAddr] = None

    def copy(self) -> IPConfig:
        return IPConfig(
            address=self.address,
            version=self.version,
            interface=self.interface,
            gateway=self.gateway,
        )

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"version": self.version}
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
            version=_get_str(data, "version"),
            interface=interface,
            gateway=_ip_from_value(data.get("gateway")),
        )


@dataclass
class Result(_BaseResult):
    """A plugin result in the 0.3.x/0.4.0 format."""

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
    """Parse a 0.3.x/0.4.0 result from JSON."""
    result = Result.from_dict(json.loads(data))
    if result.cni_version not in SUPPORTED_VERSIONS:
        raise ValueError(
            f"result type supports [{' '.join(SUPPORTED_VERSIONS)}] but unmarshalled "
            f"CNIVersion is {json.dumps(result.cni_version, ensure_ascii=False)}"
        )
    return result


def get_result(result: _BaseResult) -> Result:
    """Convert any result to the 0.4.0 format via its own conversion."""
    converted = result.get_as_version(IMPLEMENTED_SPEC_VERSION)
    if not isinstance(converted, Result):
        raise ValueError("failed to convert result")
    return converted


def new_result_from_result(result: _BaseResult) -> Result:
    """Convert any result to the 0.4.0 format through the converter registry."""
    converted = _convert.convert(result, IMPLEMENTED_SPEC_VERSION)
    if not isinstance(converted, Result):
        raise ValueError("failed to convert result")
    return converted


def _as_040(source: _BaseResult) -> Result:
    if not isinstance(source, Result):
        raise TypeError("expected a 0.3.x/0.4.0 result")
    return source


def _ipconfig_from_020(source: types020.IPConfig, ip_version: str) -> IPConfig:
    return IPConfig(address=source.ip, version=ip_version, gateway=source.gateway)


def _convert_from_02x(source: _BaseResult, to_version: str) -> _BaseResult:
    if not isinstance(source, types020.Result):
        raise TypeError("expected a 0.1.0/0.2.0 result")
    out = Result(cni_version=to_version, dns=source.dns.copy())
    for ip_version, ipc in (("4", source.ip4), ("6", source.ip6)):
        if ipc is None:
            continue
        out.ips.append(_ipconfig_from_020(ipc, ip_version))
        out.routes.extend(r.copy() for r in ipc.routes)
    return out


def _convert_internal(source: _BaseResult, to_version: str) -> _BaseResult:
    src = _as_040(source)
    return Result(
        cni_version=to_version,
        interfaces=[i.copy() for i in src.interfaces],
        ips=[ip.copy() for ip in src.ips],
        routes=[r.copy() for r in src.routes],
        dns=src.dns.copy(),
    )


def _convert_to_02x(source: _BaseResult, to_version: str) -> _BaseResult:
    src = _as_040(source)
    out = types020.Result(cni_version=to_version, dns=src.dns.copy())

    # Versions 0.2.0 and earlier hold only one address of each IP version.
    for ipc in src.ips:
        if ipc.version == "4" and out.ip4 is None:
            out.ip4 = types020.IPConfig(ip=ipc.address, gateway=ipc.gateway)
        elif ipc.version == "6" and out.ip6 is None:
            out.ip6 = types020.IPConfig(ip=ipc.address, gateway=ipc.gateway)
        if out.ip4 is not None and out.ip6 is not None:
            break

    for route in src.routes:
        target = out.ip4 if route.dst.version == 4 else out.ip6
        if target is not None:
            target.routes.append(Route(dst=route.dst, gw=route.gw))

    if out.ip4 is None and out.ip6 is None:
        raise ValueError("cannot convert: no valid IP addresses")
    return out


_convert.register_converter("0.1.0", SUPPORTED_VERSIONS, _convert_from_02x)
_convert.register_converter("0.2.0", SUPPORTED_VERSIONS, _convert_from_02x)
_convert.register_converter("0.3.0", SUPPORTED_VERSIONS, _convert_internal)
_convert.register_converter("0.3.1", SUPPORTED_VERSIONS, _convert_internal)

_convert.register_converter("0.4.0", ["0.3.0", "0.3.1"], _convert_internal)
_convert.register_converter("0.4.0", ["0.1.0", "0.2.0"], _convert_to_02x)
_convert.register_converter("0.3.1", ["0.1.0", "0.2.0"], _convert_to_02x)
_convert.register_converter("0.3.0", ["0.1.0", "0.2.0"], _convert_to_02x)

_convert.register_creator(list(SUPPORTED_VERSIONS), new_result)
"""Core CNI data types: network configuration, DNS, routes, errors and results."""

from __future__ import annotations

import enum
import ipaddress
import json
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, TextIO, Union

_IPNet = Union[ipaddress.IPv4Interface, ipaddress.IPv6Interface]
_IPAddr = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class ErrorCode(enum.IntEnum):
    """Well-known CNI error codes."""

    UNKNOWN = 0
    INCOMPATIBLE_CNI_VERSION = 1
    UNSUPPORTED_FIELD = 2
    UNKNOWN_CONTAINER = 3
    INVALID_ENVIRONMENT_VARIABLES = 4
    IO_FAILURE = 5
    DECODING_FAILURE = 6
    INVALID_NETWORK_CONFIG = 7
    INVALID_NETNS = 8
    TRY_AGAIN_LATER = 11
    INTERNAL = 999


def parse_cidr(s: str) -> _IPNet:
    """Parse "10.2.3.1/24" into an interface that keeps the host address."""
    addr, sep, prefix = s.partition("/")
    if not sep or not prefix.isascii() or not prefix.isdigit() or "%" in addr:
        raise ValueError(f"invalid CIDR address: {s}")
    try:
        return ipaddress.ip_interface(s)
    except ValueError:
        raise ValueError(f"invalid CIDR address: {s}") from None


def _parse_ip(text: str) -> Optional[_IPAddr]:
    if text == "":
        return None
    if "%" in text:
        raise ValueError(f"invalid IP address: {text}")
    try:
        return ipaddress.ip_address(text)
    except ValueError:
        raise ValueError(f"invalid IP address: {text}") from None


def _json_kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return "string"


def _cidr_from_value(value: Any) -> _IPNet:
    if not isinstance(value, str):
        raise ValueError(f"cannot unmarshal {_json_kind(value)} into a CIDR string")
    return parse_cidr(value)


def _ip_from_value(value: Any) -> Optional[_IPAddr]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"cannot unmarshal {_json_kind(value)} into an IP address string")
    return _parse_ip(value)


def _get_str(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, got {_json_kind(value)}")
    return value


def _get_str_list(data: dict, key: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"field {key!r} must be a list of strings")
    return list(value)


def _get_dict(data: dict, key: str) -> Optional[dict]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValueError(f"field {key!r} must be an object, got {_json_kind(value)}")
    return value


def _require_dict(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise ValueError(f"cannot unmarshal {_json_kind(data)} into {what}")
    return data


def ipnet_to_json(net: _IPNet) -> str:
    """Encode an IP network with its host address as a JSON string."""
    return json.dumps(str(net))


def ipnet_from_json(data: Union[str, bytes]) -> _IPNet:
    """Decode a JSON string such as '"1.2.3.4/24"' into an IP interface."""
    return _cidr_from_value(json.loads(data))


class CNIError(Exception):
    """An error with a CNI error code, message and optional details."""

    def __init__(self, code: int, msg: str, details: str = "") -> None:
        super().__init__(code, msg, details)
        self.code = code
        self.msg = msg
        self.details = details

    def __str__(self) -> str:
        return f"{self.msg}; {self.details}" if self.details else self.msg

    def __repr__(self) -> str:
        return f"CNIError(code={self.code!r}, msg={self.msg!r}, details={self.details!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CNIError):
            return NotImplemented
        return (self.code, self.msg, self.details) == (other.code, other.msg, other.details)

    def __hash__(self) -> int:
        return hash((self.code, self.msg, self.details))

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"code": int(self.code), "msg": self.msg}
        if self.details:
            out["details"] = self.details
        return out

    def print(self) -> None:
        """Write the error as indented JSON to standard output."""
        sys.stdout.write(json.dumps(self.to_dict(), indent=4))


def new_error(code: int, msg: str, details: str) -> CNIError:
    return CNIError(code, msg, details)


@dataclass
class DNS:
    """Values of interest to DNS resolvers."""

    nameservers: list[str] = field(default_factory=list)
    domain: str = ""
    search: list[str] = field(default_factory=list)
    options: list[str] = field(default_factory=list)

    def copy(self) -> DNS:
        return DNS(
            nameservers=list(self.nameservers),
            domain=self.domain,
            search=list(self.search),
            options=list(self.options),
        )

    def to_dict(self) -> dict:
        out: dict[str, Any] = {}
        if self.nameservers:
            out["nameservers"] = list(self.nameservers)
        if self.domain:
            out["domain"] = self.domain
        if self.search:
            out["search"] = list(self.search)
        if self.options:
            out["options"] = list(self.options)
        return out

    @classmethod
    def from_dict(cls, data: Any) -> DNS:
        if data is None:
            return cls()
        data = _require_dict(data, "DNS")
        return cls(
            nameservers=_get_str_list(data, "nameservers"),
            domain=_get_str(data, "domain"),
            search=_get_str_list(data, "search"),
            options=_get_str_list(data, "options"),
        )


@dataclass
class Route:
    """A route to a destination network, optionally through a gateway."""

    dst: _IPNet
    gw: Optional[_IPAddr] = None

    def __str__(self) -> str:
        mask = self.dst.network.netmask.packed.hex()
        gw = str(self.gw) if self.gw is not None else "<nil>"
        return f"{{Dst:{{IP:{self.dst.ip} Mask:{mask}}} GW:{gw}}}"

    def copy(self) -> Route:
        return Route(dst=self.dst, gw=self.gw)

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"dst": str(self.dst)}
        if self.gw is not None:
            out["gw"] = str(self.gw)
        return out

    @classmethod
    def from_dict(cls, data: Any) -> Route:
        data = _require_dict(data, "route")
        if "dst" not in data:
            raise ValueError("route is missing dst")
        return cls(dst=_cidr_from_value(data["dst"]), gw=_ip_from_value(data.get("gw")))


@dataclass
class IPAM:
    """The IPAM plugin selection of a network configuration."""

    type: str = ""


class Result(ABC):
    """The result of a plugin execution, in some CNI spec version."""

    @abstractmethod
    def version(self) -> str:
        """The highest spec version this result supports without conversion."""

    @abstractmethod
    def get_as_version(self, version: str) -> Result:
        """Return the result converted to the requested spec version."""

    @abstractmethod
    def to_dict(self) -> dict:
        """Return the JSON-ready representation of the result."""

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=4)

    def print(self) -> None:
        self.print_to(sys.stdout)

    def print_to(self, writer: TextIO) -> None:
        writer.write(self.to_json())


def print_result(result: Result, version: str) -> None:
    """Convert a result to the given version and print it to standard output."""
    result.get_as_version(version).print()


@dataclass
class NetConf:
    """Describes a network."""

    cni_version: str = ""
    name: str = ""
    type: str = ""
    capabilities: dict[str, bool] = field(default_factory=dict)
    ipam: IPAM = field(default_factory=IPAM)
    dns: DNS = field(default_factory=DNS)
    raw_prev_result: Optional[dict] = None
    prev_result: Optional[Result] = None

    def to_dict(self) -> dict:
        out: dict[str, Any] = {}
        if self.cni_version:
            out["cniVersion"] = self.cni_version
        if self.name:
            out["name"] = self.name
        if self.type:
            out["type"] = self.type
        if self.capabilities:
            out["capabilities"] = dict(self.capabilities)
        out["ipam"] = {"type": self.ipam.type} if self.ipam.type else {}
        out["dns"] = self.dns.to_dict()
        if self.raw_prev_result:
            out["prevResult"] = self.raw_prev_result
        return out

    @classmethod
    def from_dict(cls, data: Any) -> NetConf:
        data = _require_dict(data, "network configuration")
        capabilities = _get_dict(data, "capabilities") or {}
        if not all(isinstance(v, bool) for v in capabilities.values()):
            raise ValueError("field 'capabilities' must map names to booleans")
        ipam = _get_dict(data, "ipam") or {}
        return cls(
            cni_version=_get_str(data, "cniVersion"),
            name=_get_str(data, "name"),
            type=_get_str(data, "type"),
            capabilities=dict(capabilities),
            ipam=IPAM(type=_get_str(ipam, "type")),
            dns=DNS.from_dict(data.get("dns")),
            raw_prev_result=_get_dict(data, "prevResult"),
        )


@dataclass
class NetConfList:
    """Describes an ordered list of networks."""

    cni_version: str = ""
    name: str = ""
    disable_check: bool = False
    plugins: list[NetConf] = field(default_factory=list)

    def to_dict(self) -> dict:
        out: dict[str, Any] = {}
        if self.cni_version:
            out["cniVersion"] = self.cni_version
        if self.name:
            out["name"] = self.name
        if self.disable_check:
            out["disableCheck"] = True
        if self.plugins:
            out["plugins"] = [p.to_dict() for p in self.plugins]
        return out

    @classmethod
    def from_dict(cls, data: Any) -> NetConfList:
        data = _require_dict(data, "network configuration list")
        disable_check = data.get("disableCheck", False)
        if not isinstance(disable_check, bool):
            raise ValueError("field 'disableCheck' must be a boolean")
        plugins = data.get("plugins") or []
        if not isinstance(plugins, list):
            raise ValueError("field 'plugins' must be a list")
        return cls(
            cni_version=_get_str(data, "cniVersion"),
            name=_get_str(data, "name"),
            disable_check=disable_check,
            plugins=[NetConf.from_dict(p) for p in plugins],
        )
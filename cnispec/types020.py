"""Result types for CNI spec versions 0.1.0 and 0.2.0."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from . import convert as _convert
from .types import (
    DNS,
    Route,
    _cidr_from_value,
    _IPAddr,
    _IPNet,
    _ip_from_value,
    _require_dict,
    _get_dict,
    _get_str,
)
from .types import Result as _BaseResult

IMPLEMENTED_SPEC_VERSION = "0.2.0"

SUPPORTED_VERSIONS = ("", "0.1.0", IMPLEMENTED_SPEC_VERSION)


@dataclass
class IPConfig:
    """Values needed to configure an interface."""

    ip: _IPNet
    gateway: Optional[_IPAddr] = None
    routes: list[Route] = field(default_factory=list)

    def copy(self) -> IPConfig:
        return IPConfig(
            ip=self.ip,
            gateway=self.gateway,
            routes=[r.copy() for r in self.routes],
        )

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"ip": str(self.ip)}
        if self.gateway is not None:
            out["gateway"] = str(self.gateway)
        if self.routes:
            out["routes"] = [r.to_dict() for r in self.routes]
        return out

    @classmethod
    def from_dict(cls, data: Any) -> IPConfig:
        data = _require_dict(data, "IP configuration")
        if "ip" not in data:
            raise ValueError("IP configuration is missing ip")
        routes = data.get("routes") or []
        if not isinstance(routes, list):
            raise ValueError("field 'routes' must be a list")
        return cls(
            ip=_cidr_from_value(data["ip"]),
            gateway=_ip_from_value(data.get("gateway")),
            routes=[Route.from_dict(r) for r in routes],
        )


@dataclass
class Result(_BaseResult):
    """A plugin result in the 0.1.0/0.2.0 format."""

    cni_version: str = ""
    ip4: Optional[IPConfig] = None
    ip6: Optional[IPConfig] = None
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
        if self.ip4 is not None:
            out["ip4"] = self.ip4.to_dict()
        if self.ip6 is not None:
            out["ip6"] = self.ip6.to_dict()
        out["dns"] = self.dns.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Any) -> Result:
        data = _require_dict(data, "result")
        ip4 = _get_dict(data, "ip4")
        ip6 = _get_dict(data, "ip6")
        return cls(
            cni_version=_get_str(data, "cniVersion"),
            ip4=IPConfig.from_dict(ip4) if ip4 is not None else None,
            ip6=IPConfig.from_dict(ip6) if ip6 is not None else None,
            dns=DNS.from_dict(data.get("dns")),
        )


def new_result(data: Union[str, bytes]) -> Result:
    """Parse a 0.1.0/0.2.0 result from JSON; an empty version means 0.1.0."""
    result = Result.from_dict(json.loads(data))
    if result.cni_version not in SUPPORTED_VERSIONS:
        raise ValueError(
            f"result type supports [{' '.join(SUPPORTED_VERSIONS)}] but unmarshalled "
            f"CNIVersion is {json.dumps(result.cni_version, ensure_ascii=False)}"
        )
    if result.cni_version == "":
        result.cni_version = "0.1.0"
    return result


def get_result(result: _BaseResult) -> Result:
    """Convert any result to the 0.2.0 format."""
    converted = _convert.convert(result, IMPLEMENTED_SPEC_VERSION)
    if not isinstance(converted, Result):
        raise ValueError("failed to convert result")
    return converted


def _as_020(source: _BaseResult) -> Result:
    if not isinstance(source, Result):
        raise TypeError("expected a 0.1.0/0.2.0 result")
    return source


def _convert_from_010(source: _BaseResult, to_version: str) -> _BaseResult:
    if to_version != IMPLEMENTED_SPEC_VERSION:
        raise ValueError("only converts to version 0.2.0")
    src = _as_020(source)
    return Result(
        cni_version=IMPLEMENTED_SPEC_VERSION,
        ip4=src.ip4.copy() if src.ip4 is not None else None,
        ip6=src.ip6.copy() if src.ip6 is not None else None,
        dns=src.dns.copy(),
    )


def _convert_to_010(source: _BaseResult, to_version: str) -> _BaseResult:
    if to_version != "0.1.0":
        raise ValueError("only converts to version 0.1.0")
    src = _as_020(source)
    return Result(
        cni_version="0.1.0",
        ip4=src.ip4.copy() if src.ip4 is not None else None,
        ip6=src.ip6.copy() if src.ip6 is not None else None,
        dns=src.dns.copy(),
    )


_convert.register_converter("0.1.0", [IMPLEMENTED_SPEC_VERSION], _convert_from_010)
_convert.register_converter(IMPLEMENTED_SPEC_VERSION, ["0.1.0"], _convert_to_010)
_convert.register_creator(list(SUPPORTED_VERSIONS), new_result)
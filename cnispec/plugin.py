"""Version information reported by plugins, and spec version parsing."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, TextIO, Union

from .create import decode_version

CURRENT_VERSION = "1.1.0"

_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass
class PluginInfo:
    """The CNI spec versions a plugin supports."""

    cni_version: str = CURRENT_VERSION
    supported_versions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"cniVersion": self.cni_version}
        if self.supported_versions:
            out["supportedVersions"] = list(self.supported_versions)
        return out

    def encode(self, writer: TextIO) -> None:
        """Write the version information as one line of JSON."""
        writer.write(json.dumps(self.to_dict(), separators=(",", ":")) + "\n")


def plugin_supports(*args: str) -> PluginInfo:
    """Return a PluginInfo that reports the given versions as supported."""
    if not args:
        raise ValueError("you must support at least one version")
    return PluginInfo(cni_version=CURRENT_VERSION, supported_versions=list(args))


def decode_plugin_info(data: Union[str, bytes]) -> PluginInfo:
    """Decode the output of a plugin's VERSION command."""
    try:
        parsed = json.loads(data)
    except ValueError as err:
        raise ValueError(f"decoding version info: {err}") from err
    if not isinstance(parsed, dict):
        raise ValueError("decoding version info: expected a JSON object")

    cni_version = parsed.get("cniVersion") or ""
    if not isinstance(cni_version, str):
        raise ValueError("decoding version info: cniVersion must be a string")
    supported = parsed.get("supportedVersions") or []
    if not isinstance(supported, list) or not all(isinstance(v, str) for v in supported):
        raise ValueError("decoding version info: supportedVersions must be a list of strings")

    if cni_version == "":
        raise ValueError("decoding version info: missing field cniVersion")
    if not supported:
        if cni_version == "0.2.0":
            return plugin_supports("0.1.0", "0.2.0")
        raise ValueError("decoding version info: missing field supportedVersions")
    return PluginInfo(cni_version=cni_version, supported_versions=list(supported))


def decode_config_version(data: Union[str, bytes]) -> str:
    """Return the CNI version declared by network configuration JSON."""
    return decode_version(data)


def _to_int(part: str, which: str) -> int:
    if not _INTEGER.fullmatch(part):
        raise ValueError(
            f"failed to convert {which} version part {json.dumps(part)}: invalid syntax"
        )
    return int(part)


def parse_version(version: str) -> tuple[int, int, int]:
    """Parse "1.2.3" into (major, minor, micro); an empty string means 0.1.0."""
    if version == "":
        return 0, 1, 0
    parts = version.split(".")
    if len(parts) >= 4:
        raise ValueError(f"invalid version {json.dumps(version)}: too many parts")
    major = _to_int(parts[0], "major")
    minor = _to_int(parts[1], "minor") if len(parts) >= 2 else 0
    micro = _to_int(parts[2], "micro") if len(parts) >= 3 else 0
    return major, minor, micro


def greater_than_or_equal_to(version: str, other_version: str) -> bool:
    """Whether the first version is greater than or equal to the second."""
    return parse_version(version) >= parse_version(other_version)
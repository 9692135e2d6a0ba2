"""Reconciliation of a configuration's version with a plugin's versions."""

from __future__ import annotations

import json
from typing import Sequence

from .plugin import PluginInfo


def _quote(s: str) -> str:
    return json.dumps(s, ensure_ascii=False)


class ErrorIncompatible(Exception):
    """The configuration version is not among those a plugin supports."""

    def __init__(self, config: str, supported: Sequence[str]) -> None:
        super().__init__(config, list(supported))
        self.config = config
        self.supported = list(supported)

    def details(self) -> str:
        versions = " ".join(_quote(v) for v in self.supported)
        return f"config is {_quote(self.config)}, plugin supports [{versions}]"

    def __str__(self) -> str:
        return f"incompatible CNI versions: {self.details()}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ErrorIncompatible):
            return NotImplemented
        return (self.config, self.supported) == (other.config, other.supported)

    def __hash__(self) -> int:
        return hash((self.config, tuple(self.supported)))


def check_raw(config_version: str, supported_versions: Sequence[str]) -> str:
    """Return the config version if supported, else raise ErrorIncompatible."""
    if config_version in supported_versions:
        return config_version
    raise ErrorIncompatible(config_version, supported_versions)


def check(config_version: str, plugin_info: PluginInfo) -> str:
    """Check a config version against the versions a plugin reports."""
    return check_raw(config_version, plugin_info.supported_versions)
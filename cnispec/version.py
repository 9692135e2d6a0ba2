"""The implemented spec version, known version sets and result parsing."""

from __future__ import annotations

import json
from typing import Union

from . import create as _create
from .plugin import CURRENT_VERSION, PluginInfo, plugin_supports
from .types import NetConf, Result

LEGACY = plugin_supports("0.1.0", "0.2.0")
ALL = plugin_supports("0.1.0", "0.2.0", "0.3.0", "0.3.1", "0.4.0", "1.0.0", "1.1.0")


def current() -> str:
    """The CNI spec version implemented by this library."""
    return CURRENT_VERSION


def versions_starting_from(minimum: str) -> PluginInfo:
    """Return the known versions from ``minimum`` onwards, inclusive."""
    versions = ALL.supported_versions
    if minimum not in versions:
        return plugin_supports()
    return plugin_supports(*versions[versions.index(minimum):])


def new_result(version: str, data: Union[str, bytes]) -> Result:
    """Parse a plugin result of the given spec version."""
    return _create.create(version, data)


def parse_prev_result(conf: NetConf) -> None:
    """Parse ``conf.raw_prev_result`` into ``conf.prev_result``.

    Results from before 1.0.0 may carry no version; the configuration's
    version is used for them.
    """
    if conf.raw_prev_result is None:
        return
    raw = conf.raw_prev_result
    if "cniVersion" not in raw:
        raw["cniVersion"] = conf.cni_version
    try:
        data = json.dumps(raw)
    except (TypeError, ValueError) as err:
        raise ValueError(f"could not serialize prevResult: {err}") from err

    conf.raw_prev_result = None
    try:
        conf.prev_result = _create.create(conf.cni_version, data)
    except ValueError as err:
        raise ValueError(f"could not parse prevResult: {err}") from err
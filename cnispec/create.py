"""Creation of results from JSON with a known or detected spec version."""

from __future__ import annotations

import json
from typing import Union

from . import convert as _convert
from . import types020, types040, types100  # noqa: F401  (registers result types)
from .types import Result


def decode_version(data: Union[str, bytes]) -> str:
    """Return the cniVersion of configuration or result JSON; absent means 0.1.0."""
    try:
        parsed = json.loads(data)
    except ValueError as err:
        raise ValueError(f"decoding version from network config: {err}") from err
    if not isinstance(parsed, dict):
        raise ValueError(
            "decoding version from network config: expected a JSON object"
        )
    version = parsed.get("cniVersion")
    if version is None:
        version = ""
    if not isinstance(version, str):
        raise ValueError(
            "decoding version from network config: cniVersion must be a string"
        )
    return version or "0.1.0"


def create(version: str, data: Union[str, bytes]) -> Result:
    """Create a result of the expected spec version from JSON."""
    return _convert.create(version, data)


def create_from_bytes(data: Union[str, bytes]) -> Result:
    """Create a result from JSON, detecting its spec version."""
    return _convert.create(decode_version(data), data)
"""Validation of container IDs, network names and interface names."""

from __future__ import annotations

import re
import unicodedata

from .types import CNIError, ErrorCode

_VALID_NAME = re.compile(r"[a-zA-Z0-9][a-zA-Z0-9_.\-]*")

_MAX_INTERFACE_NAME_LENGTH = 15


def validate_container_id(container_id: str) -> str:
    """Return the container ID, or raise CNIError if it is empty or malformed."""
    if container_id == "":
        raise CNIError(ErrorCode.UNKNOWN_CONTAINER, "missing containerID", "")
    if not _VALID_NAME.fullmatch(container_id):
        raise CNIError(
            ErrorCode.INVALID_ENVIRONMENT_VARIABLES,
            "invalid characters in containerID",
            container_id,
        )
    return container_id


def validate_network_name(network_name: str) -> str:
    """Return the network name, or raise CNIError if it is empty or malformed."""
    if network_name == "":
        raise CNIError(ErrorCode.INVALID_NETWORK_CONFIG, "missing network name:", "")
    if not _VALID_NAME.fullmatch(network_name):
        raise CNIError(
            ErrorCode.INVALID_NETWORK_CONFIG,
            "invalid characters found in network name",
            network_name,
        )
    return network_name


def _is_space(ch: str) -> bool:
    if ch in "\t\n\v\f\r \x85\xa0":
        return True
    return unicodedata.category(ch) in ("Zs", "Zl", "Zp")


def validate_interface_name(if_name: str) -> str:
    """Return the interface name, or raise CNIError if the kernel would reject it."""
    code = ErrorCode.INVALID_ENVIRONMENT_VARIABLES
    length = len(if_name.encode("utf-8"))
    if length == 0:
        raise CNIError(code, "interface name is empty", "")
    if length > _MAX_INTERFACE_NAME_LENGTH:
        raise CNIError(
            code,
            "interface name is too long",
            f"interface name should be less than {_MAX_INTERFACE_NAME_LENGTH + 1} characters",
        )
    if if_name in (".", ".."):
        raise CNIError(code, "interface name is . or ..", "")
    if any(ch in "/:" or _is_space(ch) for ch in if_name):
        raise CNIError(
            code, "interface name contains / or : or whitespace characters", ""
        )
    return if_name
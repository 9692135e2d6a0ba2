"""Registries of result converters and result creators, keyed by spec version."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

from .types import Result

ConvertFn = Callable[[Result, str], Result]
ResultFactory = Callable[[Union[str, bytes]], Result]


@dataclass(frozen=True)
class _Converter:
    from_version: str
    to_versions: tuple[str, ...]
    convert_fn: ConvertFn


@dataclass(frozen=True)
class _Creator:
    versions: tuple[str, ...]
    create_fn: ResultFactory


_converters: list[_Converter] = []
_creators: list[_Creator] = []


def _find_converter(from_version: str, to_version: str) -> Optional[_Converter]:
    return next(
        (
            c
            for c in _converters
            if c.from_version == from_version and to_version in c.to_versions
        ),
        None,
    )


def _find_creator(version: str) -> Optional[_Creator]:
    return next((c for c in _creators if version in c.versions), None)


def convert(result: Result, to_version: str) -> Result:
    """Convert a result to the requested spec version.

    An empty target version means "0.1.0". A result already at the target
    version is returned unchanged.
    """
    if to_version == "":
        to_version = "0.1.0"
    from_version = result.version()
    if from_version == to_version:
        return result
    converter = _find_converter(from_version, to_version)
    if converter is None:
        raise ValueError(
            f"no converter for CNI result version {from_version} to {to_version}"
        )
    return converter.convert_fn(result, to_version)


def register_converter(
    from_version: str, to_versions: Sequence[str], convert_fn: ConvertFn
) -> None:
    """Register a function converting results of one version to several others."""
    for version in to_versions:
        if _find_converter(from_version, version) is not None:
            raise ValueError(
                f"converter already registered for {from_version} to {version}"
            )
    _converters.append(_Converter(from_version, tuple(to_versions), convert_fn))


def create(version: str, data: Union[str, bytes]) -> Result:
    """Build a result of the given spec version from its JSON text."""
    creator = _find_creator(version)
    if creator is None:
        raise ValueError(
            f"unsupported CNI result version {json.dumps(version, ensure_ascii=False)}"
        )
    return creator.create_fn(data)


def register_creator(versions: Sequence[str], create_fn: ResultFactory) -> None:
    """Register a factory that parses results of the given spec versions."""
    for version in versions:
        if _find_creator(version) is not None:
            raise ValueError(f"creator already registered for {version}")
    _creators.append(_Creator(tuple(versions), create_fn))
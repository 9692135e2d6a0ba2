"""Loading of "K=V;K2=V2" argument strings into dataclass containers."""

import dataclasses
import ipaddress
import json
import types
import typing
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union


class UnmarshallableBool(int):
    """A boolean that can be parsed from "1", "0", "true" or "false"."""

    def __new__(cls, value: Any = False) -> "UnmarshallableBool":
        return super().__new__(cls, bool(value))

    def __repr__(self) -> str:
        return f"UnmarshallableBool({bool(self)})"

    @classmethod
    def from_text(cls, data: Union[str, bytes]) -> "UnmarshallableBool":
        text = data.decode() if isinstance(data, bytes) else data
        s = text.lower()
        if s in ("1", "true"):
            return cls(True)
        if s in ("0", "false"):
            return cls(False)
        raise ValueError(f"boolean unmarshal error: invalid input {s}")


class UnmarshallableString(str):
    """A string that can be parsed from argument text unchanged."""

    @classmethod
    def from_text(cls, data: Union[str, bytes]) -> "UnmarshallableString":
        return cls(data.decode() if isinstance(data, bytes) else data)


@dataclass
class CommonArgs:
    """Arguments shared by every argument container."""

    ignore_unknown: UnmarshallableBool = field(
        default=UnmarshallableBool(False), metadata={"arg": "IgnoreUnknown"}
    )


class UnmarshalableArgsError(ValueError):
    """A container field cannot be parsed from argument text."""


def _quote(s: str) -> str:
    return json.dumps(s, ensure_ascii=False)


def get_key_field(key: str, container: Any) -> Optional[dataclasses.Field]:
    """Return the container field whose argument key is ``key``, or None."""
    if not dataclasses.is_dataclass(container) or isinstance(container, type):
        raise TypeError("argument container must be a dataclass instance")
    for f in dataclasses.fields(container):
        if f.metadata.get("arg", f.name) == key:
            return f
    return None


def _members(hint: Any) -> tuple:
    origin = typing.get_origin(hint)
    if origin is Union or origin is types.UnionType:
        return tuple(a for a in typing.get_args(hint) if a is not type(None))
    return (hint,)


_ADDRESS_TYPES = (ipaddress.IPv4Address, ipaddress.IPv6Address)


def _address_parser(kinds: tuple) -> Callable[[str], Any]:
    def parse(text: str) -> Any:
        try:
            addr = ipaddress.ip_address(text) if "%" not in text else None
        except ValueError:
            addr = None
        if addr is None or not isinstance(addr, kinds):
            raise ValueError(f"invalid IP address: {text}")
        return addr

    return parse


def _parser_for(key: str, hint: Any) -> Callable[[str], Any]:
    if isinstance(hint, str):
        raise UnmarshalableArgsError(
            f"ARGS: cannot unmarshal into field '{key}' - type '{hint}' is not a resolved type"
        )
    members = _members(hint)
    if len(members) == 1:
        from_text = getattr(members[0], "from_text", None)
        if callable(from_text):
            return from_text
    if members and all(m in _ADDRESS_TYPES for m in members):
        return _address_parser(members)
    name = getattr(members[0], "__name__", repr(hint)) if len(members) == 1 else repr(hint)
    raise UnmarshalableArgsError(
        f"ARGS: cannot unmarshal into field '{key}' - type '{name}' does not implement from_text"
    )


def load_args(args: str, container: Any) -> None:
    """Parse "K=V;K2=V2;..." and set the matching fields of ``container``."""
    if not args:
        return
    unknown: list = []
    for pair in args.split(";"):
        kv = pair.split("=")
        if len(kv) != 2:
            raise ValueError(f"ARGS: invalid pair {_quote(pair)}")
        key, value = kv
        f = get_key_field(key, container)
        if f is None:
            unknown.append(pair)
            continue
        parse = _parser_for(key, f.type)
        try:
            parsed = parse(value)
        except ValueError as err:
            raise ValueError(f"ARGS: error parsing value of pair {_quote(pair)}: {err}") from err
        setattr(container, f.name, parsed)

    ignore_field = get_key_field("IgnoreUnknown", container)
    ignore_unknown = bool(getattr(container, ignore_field.name)) if ignore_field else False
    if unknown and not ignore_unknown:
        raise ValueError(f"ARGS: unknown args [{' '.join(_quote(a) for a in unknown)}]")
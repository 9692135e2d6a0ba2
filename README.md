# cnispec

`cnispec` models the data a Container Network Interface (CNI) plugin and its
runtime exchange: network configurations, plugin results in every spec
version from 0.1.0 to 1.1.0, the conversions between those versions, and the
version negotiation between a runtime and a plugin.

It has no dependencies outside the standard library.

## What is in it

| Module | Purpose |
| --- | --- |
| `cnispec.types` | `NetConf`, `NetConfList`, `IPAM`, `DNS`, `Route`, `CNIError`, the well-known `ErrorCode` values, the abstract `Result`; `parse_cidr`, `ipnet_to_json`, `ipnet_from_json`, `new_error`, `print_result` |
| `cnispec.args` | `load_args` for `K=V;K2=V2` argument strings, with `CommonArgs`, `UnmarshallableBool`, `UnmarshallableString` and `get_key_field` |
| `cnispec.utils` | `validate_container_id`, `validate_network_name`, `validate_interface_name` |
| `cnispec.types020` | results for spec versions 0.1.0 and 0.2.0 (`ip4` / `ip6`) |
| `cnispec.types040` | results for spec versions 0.3.0, 0.3.1 and 0.4.0 |
| `cnispec.types100` | results for spec versions 1.0.0 and 1.1.0 |
| `cnispec.convert` | the registry of converters and result creators: `convert`, `create`, `register_converter`, `register_creator` |
| `cnispec.create` | `decode_version`, `create`, `create_from_bytes` |
| `cnispec.plugin` | `PluginInfo`, `plugin_supports`, `decode_plugin_info`, `decode_config_version`, `parse_version`, `greater_than_or_equal_to` |
| `cnispec.reconcile` | `check` / `check_raw`, raising `ErrorIncompatible` |
| `cnispec.version` | `current()`, `LEGACY`, `ALL`, `versions_starting_from`, `new_result`, `parse_prev_result` |

Errors are raised as exceptions: `ValueError` for malformed JSON, unknown
versions and failed conversions, `CNIError` from the validators and
`ErrorIncompatible` from the version checks.

## Reading a plugin result

```python
from cnispec.create import create_from_bytes

data = b"""{
    "cniVersion": "1.0.0",
    "interfaces": [{"name": "eth0", "mac": "00:11:22:33:44:55"}],
    "ips": [{"interface": 0, "address": "10.1.2.3/24", "gateway": "10.1.2.1"}]
}"""

result = create_from_bytes(data)
print(result.version())          # 1.0.0
```

A document without `cniVersion` is read as version 0.1.0. Addresses are kept
as `ipaddress` interface objects, so `10.1.2.3/24` keeps its host address.

## Converting between spec versions

Every result can be turned into any other supported version with
`get_as_version`. Going down to 0.2.0 or earlier keeps only the first IPv4
and the first IPv6 address, attaches each route to the address of its IP
family, and fails with `ValueError` if there are no addresses.

```python
old = result.get_as_version("0.2.0")
print(old.to_json())             # indented JSON
old.print()                      # the same, written to standard output
```

An empty version string stands for 0.1.0. `to_dict()` gives the
JSON-ready dictionary, and `print_to(writer)` writes to any text stream.

## Previous results in a network configuration

```python
from cnispec.types import NetConf
from cnispec.version import parse_prev_result

conf = NetConf.from_dict({
    "cniVersion": "1.0.0",
    "name": "mynet",
    "type": "bridge",
    "prevResult": {
        "cniVersion": "1.0.0",
        "ips": [{"address": "10.1.2.3/24"}],
    },
})
parse_prev_result(conf)
print(conf.prev_result.version())   # 1.0.0
```

If the raw previous result has no `cniVersion`, the configuration's version
is used for it. The result must be of a version the configuration's version
can create, otherwise `ValueError` is raised.

## Negotiating versions

```python
from cnispec.plugin import plugin_supports, greater_than_or_equal_to
from cnispec.reconcile import check, ErrorIncompatible

info = plugin_supports("0.4.0", "1.0.0")
try:
    check("0.3.1", info)
except ErrorIncompatible as exc:
    print(exc)   # incompatible CNI versions: config is "0.3.1", plugin supports ["0.4.0" "1.0.0"]

greater_than_or_equal_to("1.1.0", "0.4.0")   # True
```

`PluginInfo.encode(writer)` writes the version information as one line of
JSON, and `decode_plugin_info` reads it back; a plugin that reports
`cniVersion` 0.2.0 without `supportedVersions` is taken to support 0.1.0 and
0.2.0. `versions_starting_from("0.3.1")` lists the known versions from 0.3.1
onwards.

## Loading argument strings

`load_args` fills the fields of a dataclass instance from `K=V;K2=V2`. A key
matches a field's `"arg"` metadata, or else its name. A field's type must have
a `from_text` class method or be an IP address type.

```python
from dataclasses import dataclass, field
from cnispec.args import CommonArgs, UnmarshallableString, load_args

@dataclass
class MyArgs(CommonArgs):
    pod: UnmarshallableString = field(
        default=UnmarshallableString(""), metadata={"arg": "K8S_POD_NAME"}
    )

args = MyArgs()
load_args("IgnoreUnknown=1;K8S_POD_NAME=web;OTHER=x", args)
print(args.pod)   # web
```

Unknown keys raise `ValueError` unless `IgnoreUnknown` is set to a true value.

## Validating runtime input

The validators in `cnispec.utils` return their argument when it is valid and
raise `CNIError`, carrying one of the well-known `ErrorCode` values, when a
container ID, network name or interface name is empty or malformed.

```python
from cnispec.utils import validate_interface_name
from cnispec.types import CNIError

try:
    validate_interface_name("eth0 bad")
except CNIError as exc:
    print(int(exc.code), exc)   # 4 interface name contains / or : or whitespace characters
```

## What it does not do

`cnispec` is a library of data types and version logic only. It has no
command-line program, does not run as a CNI plugin, and does not find,
execute or time out plugin binaries; the caller invokes plugins and passes
their output to these functions.
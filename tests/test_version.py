import ipaddress
import json

import pytest

from cnispec import types040, types100
from cnispec.types import NetConf
from cnispec.version import (
    ALL,
    LEGACY,
    current,
    new_result,
    parse_prev_result,
    versions_starting_from,
)


def test_current():
    assert current() == "1.1.0"


def test_known_version_sets():
    assert LEGACY.supported_versions == ["0.1.0", "0.2.0"]
    assert ALL.supported_versions[-1] == current()


def test_versions_starting_from():
    actual = versions_starting_from("0.3.1")
    assert actual.supported_versions == ["0.3.1", "0.4.0", "1.0.0", "1.1.0"]


def test_versions_starting_from_unknown():
    with pytest.raises(ValueError):
        versions_starting_from("9.9.9")


def test_parse_prev_result():
    raw = json.loads(
        """{
            "cniVersion": "1.0.0",
            "interfaces": [
                {"name": "eth0", "mac": "00:00:5e:00:53:01", "sandbox": "/proc/3553/ns/net"}
            ],
            "ips": [
                {"version": "4", "interface": 0, "address": "1.2.3.30/24", "gateway": "1.2.3.1"}
            ]
        }"""
    )
    conf = NetConf(cni_version="1.0.0", name="foobar", type="baz", raw_prev_result=raw)
    parse_prev_result(conf)

    expected = types100.Result(
        cni_version="1.0.0",
        interfaces=[
            types100.Interface(
                name="eth0", mac="00:00:5e:00:53:01", sandbox="/proc/3553/ns/net"
            )
        ],
        ips=[
            types100.IPConfig(
                address=ipaddress.ip_interface("1.2.3.30/24"),
                interface=0,
                gateway=ipaddress.ip_address("1.2.3.1"),
            )
        ],
    )
    assert conf.prev_result == expected
    assert conf.raw_prev_result is None


def test_parse_prev_result_unknown_version():
    conf = NetConf(
        cni_version=current(),
        name="foobar",
        type="baz",
        raw_prev_result={"cniVersion": "5678.456"},
    )
    with pytest.raises(ValueError) as excinfo:
        parse_prev_result(conf)
    assert str(excinfo.value) == (
        'could not parse prevResult: result type supports [1.0.0 1.1.0] '
        'but unmarshalled CNIVersion is "5678.456"'
    )


def test_parse_prev_result_version_mismatch():
    conf = NetConf(
        cni_version=current(),
        name="foobar",
        type="baz",
        raw_prev_result={
            "cniVersion": "0.2.0",
            "ip4": {"ip": "1.2.3.30/24", "gateway": "1.2.3.1"},
        },
    )
    with pytest.raises(ValueError) as excinfo:
        parse_prev_result(conf)
    assert str(excinfo.value) == (
        'could not parse prevResult: result type supports [1.0.0 1.1.0] '
        'but unmarshalled CNIVersion is "0.2.0"'
    )


def test_parse_prev_result_injects_config_version():
    conf = NetConf(
        cni_version="0.4.0",
        raw_prev_result={"ips": [{"version": "4", "address": "10.1.2.15/24"}]},
    )
    parse_prev_result(conf)
    assert isinstance(conf.prev_result, types040.Result)
    assert conf.prev_result.cni_version == "0.4.0"
    assert str(conf.prev_result.ips[0].address) == "10.1.2.15/24"


def test_parse_prev_result_absent():
    conf = NetConf(cni_version=current(), name="foobar", type="baz")
    parse_prev_result(conf)
    assert conf.prev_result is None
    assert conf.raw_prev_result is None


def test_new_result():
    result = new_result(
        "0.4.0",
        '{"cniVersion": "0.4.0", "ips": [{"version": "4", "address": "10.1.2.3/24"}]}',
    )
    assert isinstance(result, types040.Result)
    assert result.to_dict() == {
        "cniVersion": "0.4.0",
        "ips": [{"version": "4", "address": "10.1.2.3/24"}],
        "dns": {},
    }


def test_new_result_unsupported_version():
    with pytest.raises(ValueError) as excinfo:
        new_result("7.7.7", "{}")
    assert str(excinfo.value) == 'unsupported CNI result version "7.7.7"'
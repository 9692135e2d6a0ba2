from __future__ import annotations

import io
import ipaddress
import json

import pytest

from cnispec import convert as cv
from cnispec import types020
from cnispec.types import DNS, Route, parse_cidr


def make_result(result_version: str, json_version: str):
    res = types020.Result(
        cni_version=result_version,
        ip4=types020.IPConfig(
            ip=parse_cidr("1.2.3.30/24"),
            gateway=ipaddress.ip_address("1.2.3.1"),
            routes=[
                Route(
                    dst=ipaddress.ip_interface("15.5.6.0/24"),
                    gw=ipaddress.ip_address("15.5.6.8"),
                )
            ],
        ),
        ip6=types020.IPConfig(
            ip=parse_cidr("abcd:1234:ffff::cdde/64"),
            gateway=ipaddress.ip_address("abcd:1234:ffff::1"),
            routes=[
                Route(
                    dst=ipaddress.ip_interface("1111:dddd::/80"),
                    gw=ipaddress.ip_address("1111:dddd::aaaa"),
                )
            ],
        ),
        dns=DNS(
            nameservers=["1.2.3.4", "1::cafe"],
            domain="acompany.com",
            search=["somedomain.com", "otherdomain.net"],
            options=["foo", "bar"],
        ),
    )
    expected = """{
    "cniVersion": "%s",
    "ip4": {
        "ip": "1.2.3.30/24",
        "gateway": "1.2.3.1",
        "routes": [{"dst": "15.5.6.0/24", "gw": "15.5.6.8"}]
    },
    "ip6": {
        "ip": "abcd:1234:ffff::cdde/64",
        "gateway": "abcd:1234:ffff::1",
        "routes": [{"dst": "1111:dddd::/80", "gw": "1111:dddd::aaaa"}]
    },
    "dns": {
        "nameservers": ["1.2.3.4", "1::cafe"],
        "domain": "acompany.com",
        "search": ["somedomain.com", "otherdomain.net"],
        "options": ["foo", "bar"]
    }
}""" % json_version
    return res, expected


def test_encodes_020_result():
    res, expected = make_result("0.2.0", "0.2.0")
    assert json.loads(res.to_json()) == json.loads(expected)


def test_encodes_010_result():
    res, expected = make_result("0.1.0", "0.1.0")
    assert res.to_dict() == json.loads(expected)


def test_converts_020_to_010():
    res, expected = make_result("0.2.0", "0.1.0")
    res010 = res.get_as_version("0.1.0")
    assert res010.to_dict() == json.loads(expected)


def test_converts_010_to_020():
    res, expected = make_result("0.1.0", "0.2.0")
    res020 = res.get_as_version("0.2.0")
    assert res020.to_dict() == json.loads(expected)


def test_creates_010_result_for_empty_version():
    _, expected = make_result("", "")
    res = cv.create("", expected.encode())
    assert isinstance(res, types020.Result)
    assert res.cni_version == "0.1.0"


def test_unset_version_defaults_to_020_on_conversion():
    res, _ = make_result("", "")
    out = res.get_as_version("0.2.0")
    assert out is res
    assert res.version() == "0.2.0"


def test_new_result_round_trip():
    res, expected = make_result("0.2.0", "0.2.0")
    parsed = types020.new_result(expected)
    assert parsed == res


def test_new_result_rejects_unsupported_version():
    with pytest.raises(ValueError) as info:
        types020.new_result('{"cniVersion": "0.4.0"}')
    assert str(info.value) == (
        'result type supports [ 0.1.0 0.2.0] but unmarshalled CNIVersion is "0.4.0"'
    )


def test_new_result_rejects_bad_json():
    with pytest.raises(ValueError):
        types020.new_result("{{{")


def test_ipconfig_rejects_bad_gateway():
    with pytest.raises(ValueError, match="invalid IP address: 1.2.3.x"):
        types020.IPConfig.from_dict({"ip": "1.2.3.4/24", "gateway": "1.2.3.x"})


def test_ipconfig_copy_is_independent():
    res, _ = make_result("0.2.0", "0.2.0")
    copied = res.ip4.copy()
    assert copied == res.ip4
    copied.routes.append(Route(dst=parse_cidr("10.0.0.0/8")))
    assert len(res.ip4.routes) == 1


def test_ipconfig_minimal_dict_omits_empty_fields():
    ipc = types020.IPConfig(ip=parse_cidr("10.1.2.3/24"))
    assert ipc.to_dict() == {"ip": "10.1.2.3/24"}
    assert types020.IPConfig.from_dict(ipc.to_dict()) == ipc


def test_get_result_converts_010():
    res, expected = make_result("0.1.0", "0.2.0")
    out = types020.get_result(res)
    assert isinstance(out, types020.Result)
    assert out.to_dict() == json.loads(expected)


def test_conversion_to_unknown_version_fails():
    res, _ = make_result("0.2.0", "0.2.0")
    with pytest.raises(ValueError, match="no converter for CNI result version 0.2.0 to 9.9.9"):
        res.get_as_version("9.9.9")


def test_print_to_writes_json():
    res, expected = make_result("0.2.0", "0.2.0")
    buf = io.StringIO()
    res.print_to(buf)
    assert json.loads(buf.getvalue()) == json.loads(expected)
import json

import pytest

from cnispec import create, types020, types040, types100

_RESULT_040 = json.dumps(
    {
        "cniVersion": "0.4.0",
        "ips": [{"version": "4", "address": "10.1.2.15/24"}],
        "dns": {},
    }
)

_RESULT_020_UNVERSIONED = json.dumps(
    {
        "ip4": {"ip": "1.2.3.30/24", "gateway": "1.2.3.1"},
        "dns": {},
    }
)


def test_decode_version_explicit():
    assert create.decode_version('{ "cniVersion": "4.3.2" }') == "4.3.2"


def test_decode_version_missing_defaults_to_0_1_0():
    assert create.decode_version('{ "not-a-version-field": "foo" }') == "0.1.0"


def test_decode_version_accepts_bytes():
    assert create.decode_version(b'{"cniVersion": "1.0.0"}') == "1.0.0"


def test_decode_version_malformed():
    with pytest.raises(ValueError) as excinfo:
        create.decode_version("{{{")
    assert str(excinfo.value).startswith("decoding version from network config: ")


def test_decode_version_rejects_non_string_version():
    with pytest.raises(ValueError, match="decoding version from network config"):
        create.decode_version('{"cniVersion": 1}')


def test_create_with_empty_version_gives_0_1_0_result():
    res = create.create("", _RESULT_020_UNVERSIONED)
    assert isinstance(res, types020.Result)
    assert res.cni_version == "0.1.0"


def test_create_unsupported_version():
    with pytest.raises(ValueError, match="unsupported CNI result version"):
        create.create("5678.456", _RESULT_040)


def test_create_from_bytes_detects_040():
    res = create.create_from_bytes(_RESULT_040)
    assert isinstance(res, types040.Result)
    assert res.to_dict() == json.loads(_RESULT_040)


def test_create_from_bytes_detects_100():
    data = json.dumps(
        {"cniVersion": "1.1.0", "ips": [{"address": "10.1.2.15/24"}], "dns": {}}
    )
    res = create.create_from_bytes(data.encode())
    assert isinstance(res, types100.Result)
    assert res.to_dict() == json.loads(data)


def test_create_from_bytes_without_version_is_0_1_0():
    res = create.create_from_bytes(_RESULT_020_UNVERSIONED)
    assert isinstance(res, types020.Result)
    assert res.version() == "0.1.0"


def test_create_from_bytes_propagates_decode_errors():
    with pytest.raises(ValueError, match="decoding version from network config"):
        create.create_from_bytes("{{{")
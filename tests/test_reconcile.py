import pytest

from cnispec.plugin import plugin_supports
from cnispec.reconcile import ErrorIncompatible, check, check_raw


@pytest.fixture
def plugin_info():
    return plugin_supports("1.2.3", "4.3.2")


def test_supported_version_passes(plugin_info):
    assert check("4.3.2", plugin_info) == "4.3.2"


def test_unsupported_version_raises(plugin_info):
    with pytest.raises(ErrorIncompatible) as excinfo:
        check("0.1.0", plugin_info)
    err = excinfo.value
    assert err == ErrorIncompatible("0.1.0", ["1.2.3", "4.3.2"])
    assert str(err) == (
        'incompatible CNI versions: config is "0.1.0", plugin supports ["1.2.3" "4.3.2"]'
    )


def test_details():
    err = ErrorIncompatible("0.4.0", ["1.0.0"])
    assert err.details() == 'config is "0.4.0", plugin supports ["1.0.0"]'


def test_check_raw_empty_list():
    with pytest.raises(ErrorIncompatible) as excinfo:
        check_raw("1.0.0", [])
    assert excinfo.value.supported == []


def test_check_raw_match():
    assert check_raw("0.3.1", ["0.3.0", "0.3.1"]) == "0.3.1"
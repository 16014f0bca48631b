import pytest

from gnsslocutils.device import (
    format_mac,
    init_msm_properties,
    read_raw_id,
    wlan_address_from_nv,
)


def write_id(tmp_path, text):
    path = tmp_path / "raw_id"
    path.write_text(text)
    return path


def platform_props():
    return {"ro.board.platform": "msm8226"}


def test_lte_model_for_raw_id_2328(tmp_path):
    props = platform_props()
    assert init_msm_properties(props, write_id(tmp_path, "2328\n")) is True
    assert props["ro.product.model"] == "HM NOTE 1LTE"


def test_hex_raw_id_is_parsed(tmp_path):
    path = write_id(tmp_path, "0x918\n")
    assert read_raw_id(path) == 2328
    props = platform_props()
    init_msm_properties(props, path)
    assert props["ro.product.model"] == "HM NOTE 1LTE"


def test_other_raw_id_gives_td_model(tmp_path):
    props = platform_props()
    init_msm_properties(props, write_id(tmp_path, "12345"))
    assert props["ro.product.model"] == "HM NOTE 1LTE TD"


def test_missing_raw_id_file(tmp_path):
    missing = tmp_path / "absent"
    assert read_raw_id(missing) is None
    props = platform_props()
    assert init_msm_properties(props, missing) is True
    assert props["ro.product.model"] == "HM NOTE 1LTE TD"


def test_common_properties(tmp_path):
    props = platform_props()
    init_msm_properties(props, write_id(tmp_path, "1"))
    assert props["ro.product.device"] == "dior"
    assert props["ro.build.product"] == "dior"
    assert props["ro.build.description"] == "dior-user 4.4.4 KTU84P 5.9.16 release-keys"
    assert (
        props["ro.build.fingerprint"]
        == "Xiaomi/dior/dior:4.4.4/KTU84P/5.9.16:user/release-keys"
    )


def test_other_platform_is_left_alone(tmp_path):
    props = {"ro.board.platform": "msm8974"}
    assert init_msm_properties(props, write_id(tmp_path, "2328")) is False
    assert props == {"ro.board.platform": "msm8974"}


def test_missing_platform_is_left_alone(tmp_path):
    props = {}
    assert init_msm_properties(props, write_id(tmp_path, "2328")) is False
    assert props == {}


def test_read_raw_id_parsing(tmp_path):
    assert read_raw_id(write_id(tmp_path, "  42abc")) == 42
    assert read_raw_id(write_id(tmp_path, "")) == 0
    assert read_raw_id(write_id(tmp_path, "010")) == 8


def test_wlan_address_is_reversed():
    nv = bytes([1, 2, 3, 4, 5, 6, 7, 8])
    assert wlan_address_from_nv(nv) == bytes([6, 5, 4, 3, 2, 1])


def test_wlan_address_short_buffer():
    with pytest.raises(ValueError):
        wlan_address_from_nv(b"\x01\x02\x03")


def test_format_mac():
    address = bytes([0x02, 0x00, 0x00, 0xAB, 0xCD, 0x01])
    text = format_mac(address)
    assert text == "02:00:00:ab:cd:01"
    assert bytes(int(part, 16) for part in text.split(":")) == address
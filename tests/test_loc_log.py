import re
import time

from gnsslocutils.loc_log import (
    TARGET_NAMES,
    UNKNOWN_STR,
    get_msg_q_status,
    get_name_from_mask,
    get_name_from_val,
    get_target_name,
    get_time,
    succ_fail_string,
)
from gnsslocutils.loc_target import (
    TARGET_APQ_SA,
    TARGET_MDM,
    TARGET_UNKNOWN,
    GnssTarget,
    SscType,
    target_set,
)
from gnsslocutils.msg_q import MsgQueueStatus

TABLE = [("ONE", 1), ("TWO", 2), ("FOUR", 4)]


def test_name_from_val():
    assert get_name_from_val(TABLE, 2) == "TWO"
    assert get_name_from_val(TABLE, 3) == UNKNOWN_STR


def test_name_from_mask_first_match():
    assert get_name_from_mask(TABLE, 6) == "TWO"
    assert get_name_from_mask(TABLE, 8) == UNKNOWN_STR


def test_msg_q_status_names():
    assert get_msg_q_status(MsgQueueStatus.SUCCESS) == "eMSG_Q_SUCCESS"
    assert (
        get_msg_q_status(MsgQueueStatus.UNAVAILABLE_RESOURCE)
        == "eMSG_Q_UNAVAILABLE_RESOURCE"
    )
    assert get_msg_q_status(-42) == UNKNOWN_STR


def test_succ_fail_string():
    assert succ_fail_string(1) == "successful"
    assert succ_fail_string(0) == "failed"


def test_target_name_with_ssc():
    assert get_target_name(TARGET_MDM) == " GNSS_MDM with SSC"


def test_target_name_without_ssc():
    assert get_target_name(TARGET_APQ_SA) == " GNSS_GSS  without SSC"
    assert get_target_name(TARGET_UNKNOWN) == " GNSS_UNKNOWN  without SSC"


def test_target_name_out_of_range_is_unknown():
    assert get_target_name(0xFFFFFFFF) == " GNSS_UNKNOWN with SSC"


def test_every_target_named():
    for gnss in GnssTarget:
        name = get_target_name(target_set(gnss, SscType.NO_SSC))
        assert name.strip().startswith("GNSS_" + gnss.name)
    assert len(TARGET_NAMES) == len(GnssTarget)


def test_get_time_format_and_millis():
    now = 1_000_000.25
    text = get_time(now)
    assert re.fullmatch(r"\d{2}:\d{2}:\d{2}\.\d{3}", text)
    assert text.endswith(".250")
    assert text[:8] == time.strftime("%H:%M:%S", time.localtime(1_000_000))


def test_get_time_current():
    before = time.time()
    text = get_time()
    after = time.time()
    assert len(text) == 12
    allowed = {
        time.strftime("%H:%M:%S", time.localtime(before)),
        time.strftime("%H:%M:%S", time.localtime(after)),
    }
    assert text[:8] in allowed
    assert text[8] == "."
    assert 0 <= int(text[9:]) < 1000
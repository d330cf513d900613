import threading

from unittest import mock

import pytest

from logitech_hidpp import device
from logitech_hidpp import exceptions
from logitech_hidpp import hidpp10_constants
from logitech_hidpp.base import Message
from logitech_hidpp.hidpp20 import Battery
from logitech_hidpp.hidpp20_constants import BatteryLevel
from logitech_hidpp.hidpp20_constants import BatteryStatus
from logitech_hidpp.hidpp20_constants import ErrorCode
from logitech_hidpp.hidpp20_constants import SupportedFeature
from logitech_hidpp.transport import RetryPolicy

from . import fake_hidpp

VENDOR_ID = 0x046D
PRODUCT_ID = 0xC547


def _device(low_level, **kwargs):
    return device.Device(VENDOR_ID, PRODUCT_ID, low_level=low_level, **kwargs)


def test_create_opens_device(low_level):
    test_device = _device(low_level)

    assert test_device.number == device.DEFAULT_DEVICE_NUMBER
    assert test_device.transport.handle == low_level.opened[0]
    assert low_level.written == []
    assert str(test_device) == "<Device 046D:C547 #1>"


def test_create_fails_when_device_cannot_be_opened():
    low_level = fake_hidpp.FakeLowLevel(open_errors=[IOError("no device")] * 10)

    with pytest.raises(exceptions.TransportOpenFailure):
        _device(low_level)

    assert low_level.open_calls == 6


def test_create_uses_policies():
    low_level = fake_hidpp.FakeLowLevel(open_errors=[IOError("no device")] * 10)

    with pytest.raises(exceptions.TransportOpenFailure):
        _device(low_level, open_policy=RetryPolicy(1, 1))

    assert low_level.open_calls == 2


@pytest.mark.parametrize("number", [0x00, 0xFF])
def test_create_with_bad_number(low_level, number):
    with pytest.raises(AssertionError):
        _device(low_level, number=number)


def test_native_low_level_is_loaded_lazily(mocker):
    hidapi = mock.Mock()
    hidapi.open.return_value = 0x33
    mocker.patch.dict("sys.modules", {"hidapi": hidapi})

    test_device = device.Device(VENDOR_ID, PRODUCT_ID)

    assert test_device.low_level is hidapi
    hidapi.open.assert_called_once_with(VENDOR_ID, PRODUCT_ID)


def test_context_manager_closes(low_level):
    with _device(low_level) as test_device:
        handle = test_device.transport.handle

    assert low_level.closed == [handle]


def test_features_empty_before_init(low_level):
    test_device = _device(low_level)

    assert test_device.index_for(SupportedFeature.ROOT) == 0
    with pytest.raises(exceptions.FeatureNotFound):
        test_device.index_for(SupportedFeature.UNIFIED_BATTERY)


def test_send_feature_before_init(low_level):
    test_device = _device(low_level)

    with pytest.raises(exceptions.FeatureNotFound) as context:
        test_device.send_feature(SupportedFeature.UNIFIED_BATTERY, 0x01)

    assert context.value.feature == SupportedFeature.UNIFIED_BATTERY
    assert low_level.written == []


def test_init(low_level):
    test_device = _device(low_level)

    test_device.init()

    assert dict(test_device.features.items()) == {
        SupportedFeature.ROOT: 0,
        SupportedFeature.FEATURE_SET: 1,
        SupportedFeature.FEATURE_INFO: 2,
        SupportedFeature.FIRMWARE_INFO: 3,
        SupportedFeature.DEVICE_UNIT_ID: 4,
        SupportedFeature.DEVICE_NAME_TYPE: 5,
        SupportedFeature.UNIFIED_BATTERY: 6,
    }
    assert len(low_level.written) == 7
    assert low_level.written[-1] == bytes([0x10, 0x01, 0x00, 0x01, 0x10, 0x04, 0x00])


def test_lookups_after_init_do_not_query(low_level):
    test_device = _device(low_level)
    test_device.init()
    written = len(low_level.written)

    for _ in range(3):
        assert test_device.index_for(SupportedFeature.UNIFIED_BATTERY) == 6

    assert len(low_level.written) == written


def test_unsupported_feature(low_level):
    test_device = _device(low_level)
    test_device.init()

    with pytest.raises(exceptions.FeatureNotFound):
        test_device.send_feature(SupportedFeature.BATTERY_LEVEL_STATUS, 0x00)


def test_init_twice_resolves_again(low_level):
    test_device = _device(low_level)
    test_device.init()
    low_level.responses[6] = fake_hidpp.r_feature(0x1004, 0x08)

    test_device.init()

    assert test_device.index_for(SupportedFeature.UNIFIED_BATTERY) == 8
    assert len(low_level.written) == 14


def test_get_feature_index_queries_every_time(low_level):
    test_device = _device(low_level)

    assert test_device.get_feature_index(SupportedFeature.UNIFIED_BATTERY) == 6
    assert test_device.get_feature_index(SupportedFeature.UNIFIED_BATTERY) == 6
    assert len(low_level.written) == 2


def test_send_feature(low_level):
    test_device = _device(low_level)
    test_device.init()

    reply = test_device.send_feature(SupportedFeature.UNIFIED_BATTERY, 0x01)

    assert low_level.written[-1] == bytes([0x10, 0x01, 0x06, 0x11, 0x00, 0x00, 0x00])
    assert reply.feature_index == 0x06
    assert reply.function_index == 0x01
    assert reply.data == b"\x37\x04\x01"


def test_send_feature_uses_device_number():
    low_level = fake_hidpp.FakeLowLevel(responses=[fake_hidpp.r_feature(0x1004, 0x04, devnumber=0x03)])
    test_device = _device(low_level, number=0x03)

    assert test_device.get_feature_index(SupportedFeature.UNIFIED_BATTERY) == 4
    assert low_level.written[0][1] == 0x03


def test_get_battery(low_level):
    test_device = _device(low_level)
    test_device.init()

    battery = test_device.get_battery()

    assert battery == Battery(55, BatteryLevel.GOOD, BatteryStatus.RECHARGING)
    assert battery.charging()


def test_get_battery_from_raw_reply():
    low_level = fake_hidpp.FakeLowLevel(responses=list(fake_hidpp.r_battery_raw))
    test_device = _device(low_level)
    test_device.init()

    battery = test_device.get_battery()

    assert battery.percentage == 55
    assert battery.level == BatteryLevel.GOOD
    assert battery.status == BatteryStatus.RECHARGING


def test_get_battery_before_init(low_level):
    test_device = _device(low_level)

    with pytest.raises(exceptions.FeatureNotFound):
        test_device.get_battery()


def test_get_battery_capabilities(low_level):
    test_device = _device(low_level)
    test_device.init()

    capabilities = test_device.get_battery_capabilities()

    assert capabilities.levels == (BatteryLevel.CRITICAL, BatteryLevel.LOW, BatteryLevel.GOOD, BatteryLevel.FULL)
    assert capabilities.rechargeable
    assert capabilities.state_of_charge


def test_get_battery_does_not_ask_for_capabilities(low_level):
    test_device = _device(low_level)
    test_device.init()
    written = len(low_level.written)

    test_device.get_battery()

    assert low_level.written[written:] == [bytes([0x10, 0x01, 0x06, 0x11, 0x00, 0x00, 0x00])]


def test_error_reply():
    low_level = fake_hidpp.FakeLowLevel(responses=list(fake_hidpp.r_battery_error))
    test_device = _device(low_level)
    test_device.init()

    with pytest.raises(exceptions.FeatureCallError) as context:
        test_device.get_battery()

    assert context.value.number == 0x01
    assert context.value.feature_index == 0x06
    assert context.value.function == 0x01
    assert context.value.error == ErrorCode.INVALID_FUNCTION


def test_no_reply_times_out(low_level):
    low_level.responses = []
    test_device = _device(low_level)

    with pytest.raises(exceptions.TransportReadTimeout):
        test_device.init()


def test_garbage_reply():
    low_level = fake_hidpp.FakeLowLevel(read_replies=[b"\x20\x01\x00\x01\x06\x00\x00"])
    test_device = _device(low_level)

    with pytest.raises(exceptions.UnknownReportId):
        test_device.get_feature_index(SupportedFeature.UNIFIED_BATTERY)


def test_bad_battery_reply():
    low_level = fake_hidpp.FakeLowLevel(
        responses=[fake_hidpp.r_feature(0x1004, 0x06), fake_hidpp.Response("370907", 0x06, 0x1), fake_hidpp.r_unsupported]
    )
    test_device = _device(low_level)
    test_device.init()

    with pytest.raises(exceptions.InvalidBatteryLevel):
        test_device.get_battery()


def test_ping(low_level, mocker):
    mocker.patch("logitech_hidpp.hidpp20.getrandbits", return_value=0xAA)
    test_device = _device(low_level)

    assert test_device.ping() == pytest.approx(4.2)
    assert low_level.written == [bytes([0x10, 0x01, 0x00, 0x11, 0x00, 0x00, 0xAA])]


def test_reconnect(low_level):
    test_device = _device(low_level)
    first = test_device.transport.handle

    test_device.reconnect()

    assert low_level.closed == [first]
    assert test_device.transport.handle != first


def test_requests_are_serialized(low_level, mocker):
    test_device = _device(low_level)
    test_device.init()
    transfer = test_device.transport.transfer
    active = []
    overlaps = []

    def _transfer(data):
        active.append(data)
        if len(active) > 1:
            overlaps.append(data)
        try:
            return transfer(data)
        finally:
            active.remove(data)

    mocker.patch.object(test_device.transport, "transfer", side_effect=_transfer)
    args = (SupportedFeature.UNIFIED_BATTERY, 0x01)
    threads = [threading.Thread(target=test_device.send_feature, args=args) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert overlaps == []


def test_request_decodes_reply(low_level):
    test_device = _device(low_level)

    reply = test_device.request(Message.short(0x00, 0x0, b"\x00\x03", device_index=0x01))

    assert reply.data == b"\x03\x00\x00"


def test_receiver_error_on_init():
    low_level = fake_hidpp.FakeLowLevel(responses=list(fake_hidpp.r_asleep))
    test_device = _device(low_level)

    with pytest.raises(exceptions.FeatureCallError) as context:
        test_device.init()

    assert context.value.feature_index == 0x00
    assert context.value.function == 0x0
    assert context.value.error == hidpp10_constants.ErrorCode.RESOURCE_ERROR
    assert test_device.features.get(SupportedFeature.UNIFIED_BATTERY) is None


def test_receiver_error_on_battery(low_level):
    test_device = _device(low_level)
    test_device.init()
    low_level.responses = [fake_hidpp.ReceiverError("04", 0x00, 0x0)]

    with pytest.raises(exceptions.FeatureCallError) as context:
        test_device.get_battery()

    assert context.value.number == 0x01
    assert context.value.feature_index == 0x06
    assert context.value.function == 0x1
    assert context.value.error == hidpp10_constants.ErrorCode.CONNECTION_REQUEST_FAILED


def test_receiver_error_for_another_request_is_a_reply(low_level):
    low_level.responses = [fake_hidpp.Response("", 0x06, 0x1, raw="10018F05110900")]
    test_device = _device(low_level)

    reply = test_device.request(Message.short(0x06, 0x1, device_index=0x01))

    assert reply.feature_index == 0x8F

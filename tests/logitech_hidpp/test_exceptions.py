import pytest

from logitech_hidpp import exceptions
from logitech_hidpp.hidpp20_constants import ErrorCode
from logitech_hidpp.hidpp20_constants import SupportedFeature


@pytest.mark.parametrize(
    "exception, base",
    [
        (exceptions.TransportOpenFailure, exceptions.TransportError),
        (exceptions.TransportWriteFailure, exceptions.TransportError),
        (exceptions.TransportReadTimeout, exceptions.TransportError),
        (exceptions.UnknownReportId, exceptions.ProtocolError),
        (exceptions.InvalidMessageLength, exceptions.ProtocolError),
        (exceptions.InvalidBatteryLevel, exceptions.ProtocolError),
        (exceptions.InvalidBatteryStatus, exceptions.ProtocolError),
        (exceptions.FeatureNotFound, exceptions.HidppError),
        (exceptions.FeatureCallError, exceptions.HidppError),
        (exceptions.RetryError, exceptions.HidppError),
        (exceptions.TransportError, exceptions.HidppError),
        (exceptions.ProtocolError, exceptions.HidppError),
    ],
)
def test_exception_hierarchy(exception, base):
    assert issubclass(exception, base)


def test_kwargs_are_attributes():
    e = exceptions.TransportOpenFailure(vendor_id=0x046D, product_id=0xC547, attempts=6, reason="busy")

    assert e.vendor_id == 0x046D
    assert e.product_id == 0xC547
    assert e.attempts == 6
    assert e.reason == "busy"
    assert e.missing is None


@pytest.mark.parametrize(
    "exception, expected",
    [
        (exceptions.InvalidBatteryLevel(level=9), "InvalidBatteryLevel(level=9)"),
        (exceptions.FeatureNotFound(feature=SupportedFeature.UNIFIED_BATTERY), "FeatureNotFound(feature=UNIFIED_BATTERY)"),
        (
            exceptions.FeatureCallError(number=1, feature_index=6, function=1, error=ErrorCode.INVALID_FUNCTION),
            "FeatureCallError(number=1, feature_index=6, function=1, error=INVALID_FUNCTION)",
        ),
        (
            exceptions.TransportReadTimeout(expected=7, received=b"\x10\x01", timeout=100, reason=None),
            "TransportReadTimeout(expected=7, received=1001, timeout=100, reason=None)",
        ),
    ],
)
def test_str(exception, expected):
    assert str(exception) == expected

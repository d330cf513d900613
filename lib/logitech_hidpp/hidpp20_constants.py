## Copyright (C) 2012-2013  Daniel Pavel
## Copyright (C) 2014-2024  Solaar Contributors https://pwr-solaar.github.io/Solaar/
##
## This program is free software; you can redistribute it and/or modify
## it under the terms of the GNU General Public License as published by
## the Free Software Foundation; either version 2 of the License, or
## (at your option) any later version.
##
## This program is distributed in the hope that it will be useful,
## but WITHOUT ANY WARRANTY; without even the implied warranty of
## MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
## GNU General Public License for more details.
##
## You should have received a copy of the GNU General Public License along
## with this program; if not, write to the Free Software Foundation, Inc.,
## 51 Franklin Street, Fifth Floor, Boston, MA 02110-1301 USA.

"""Features known to this client and their protocol identifiers.

A particular device might not support all these features, and may support other
unknown features as well.
"""

from enum import IntEnum


def _camel_case(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_"))


class SupportedFeature(IntEnum):
    ROOT = 0x0000
    FEATURE_SET = 0x0001
    FEATURE_INFO = 0x0002
    FIRMWARE_INFO = 0x0003
    DEVICE_UNIT_ID = 0x0004
    DEVICE_NAME_TYPE = 0x0005
    BATTERY_LEVEL_STATUS = 0x1000
    UNIFIED_BATTERY = 0x1004

    def __str__(self):
        return self.name.replace("_", " ")


# resolved by Device.init, in this order
KNOWN_FEATURES = (
    SupportedFeature.ROOT,
    SupportedFeature.FEATURE_SET,
    SupportedFeature.FEATURE_INFO,
    SupportedFeature.FIRMWARE_INFO,
    SupportedFeature.DEVICE_UNIT_ID,
    SupportedFeature.DEVICE_NAME_TYPE,
    SupportedFeature.BATTERY_LEVEL_STATUS,
    SupportedFeature.UNIFIED_BATTERY,
)

# ROOT is always at index 0 and is never looked up
ROOT_FEATURE_INDEX = 0x00
# replies with this feature index are HID++ 2.0 error reports
ERROR_FEATURE_INDEX = 0xFF


class RootFunction(IntEnum):
    GET_FEATURE = 0x00
    GET_PROTOCOL_VERSION = 0x01


class UnifiedBatteryFunction(IntEnum):
    GET_CAPABILITIES = 0x00
    GET_STATUS = 0x01


class BatteryLevel(IntEnum):
    """Approximate charge as reported by UNIFIED_BATTERY.

    The values are the capability bits of each level."""

    EMPTY = 0x00
    CRITICAL = 0x01
    LOW = 0x02
    GOOD = 0x04
    FULL = 0x08

    def __str__(self):
        return _camel_case(self.name)


class BatteryStatus(IntEnum):
    DISCHARGING = 0x00
    RECHARGING = 0x01
    ALMOST_FULL = 0x02
    FULL = 0x03
    SLOW_RECHARGE = 0x04
    INVALID_BATTERY = 0x05
    THERMAL_ERROR = 0x06

    def __str__(self):
        return _camel_case(self.name)


class BatteryCapabilityFlag(IntEnum):
    RECHARGEABLE = 0x01
    STATE_OF_CHARGE = 0x02


class ErrorCode(IntEnum):
    NO_ERROR = 0x00
    UNKNOWN = 0x01
    INVALID_ARGUMENT = 0x02
    OUT_OF_RANGE = 0x03
    HARDWARE_ERROR = 0x04
    LOGITECH_ERROR = 0x05
    INVALID_FEATURE_INDEX = 0x06
    INVALID_FUNCTION = 0x07
    BUSY = 0x08
    UNSUPPORTED = 0x09

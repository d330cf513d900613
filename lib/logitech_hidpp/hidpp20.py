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
from __future__ import annotations

import dataclasses
import logging
import struct
import typing

from random import getrandbits
from typing import Dict
from typing import Iterable
from typing import Tuple

from typing_extensions import Protocol

from . import exceptions
from .base import Message
from .hidpp20_constants import KNOWN_FEATURES
from .hidpp20_constants import ROOT_FEATURE_INDEX
from .hidpp20_constants import BatteryCapabilityFlag
from .hidpp20_constants import BatteryLevel
from .hidpp20_constants import BatteryStatus
from .hidpp20_constants import RootFunction
from .hidpp20_constants import SupportedFeature
from .hidpp20_constants import UnifiedBatteryFunction

logger = logging.getLogger(__name__)

# the fixed software id of this client; replies echo it back
SOFTWARE_ID = 0x01


class Device(Protocol):
    number: int

    def request(self, message: Message) -> Message:
        ...

    def send_feature(self, feature, function, *params) -> Message:
        ...


class Battery(typing.NamedTuple):
    percentage: int
    level: BatteryLevel
    status: BatteryStatus

    def charging(self) -> bool:
        return self.status in (
            BatteryStatus.RECHARGING,
            BatteryStatus.ALMOST_FULL,
            BatteryStatus.FULL,
            BatteryStatus.SLOW_RECHARGE,
        )


@dataclasses.dataclass(frozen=True)
class BatteryCapabilities:
    levels: Tuple[BatteryLevel, ...]
    rechargeable: bool
    state_of_charge: bool


class FeatureIndexTable:
    """Runtime indices of the features of one device, for one session.

    ROOT is always present at index 0. The table is filled once, by ``resolve``,
    and not changed afterwards; unresolved or unsupported features raise
    ``FeatureNotFound``.
    """

    def __init__(self, indices: Dict[SupportedFeature, int] | None = None):
        self._indices = {SupportedFeature.ROOT: ROOT_FEATURE_INDEX}
        if indices:
            self._indices.update(indices)

    @classmethod
    def resolve(cls, device: Device, features: Iterable[SupportedFeature] = KNOWN_FEATURES) -> FeatureIndexTable:
        indices = {}
        for feature in features:
            if feature == SupportedFeature.ROOT:
                continue
            index = _hidpp20.get_feature_index(device, feature)
            if index:
                indices[feature] = index
            elif logger.isEnabledFor(logging.INFO):
                logger.info("%s: feature %s not supported", device, feature)
        return cls(indices)

    def __getitem__(self, feature: SupportedFeature) -> int:
        try:
            return self._indices[feature]
        except KeyError:
            raise exceptions.FeatureNotFound(feature=feature) from None

    def get(self, feature: SupportedFeature, default=None):
        return self._indices.get(feature, default)

    def __contains__(self, feature) -> bool:
        return feature in self._indices

    def __iter__(self):
        return iter(self._indices)

    def __len__(self) -> int:
        return len(self._indices)

    def items(self):
        return self._indices.items()

    def __repr__(self):
        entries = ", ".join(f"{feature.name}={index}" for feature, index in self._indices.items())
        return f"FeatureIndexTable({entries})"


class Hidpp20:
    def get_feature_index(self, device: Device, feature: SupportedFeature) -> int:
        """Asks ROOT for the runtime index of a feature.

        :returns: the index, or 0 if the device does not support the feature.
        """
        if feature == SupportedFeature.ROOT:
            return ROOT_FEATURE_INDEX
        request = Message.short(
            ROOT_FEATURE_INDEX,
            RootFunction.GET_FEATURE,
            struct.pack("!H", feature),
            device_index=device.number,
            software_id=SOFTWARE_ID,
        )
        reply = device.request(request)
        if not reply.data:
            raise exceptions.InvalidMessageLength(report_id=reply.report_type, expected=1, length=0)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s: feature %s at index %d", device, feature, reply.data[0])
        return reply.data[0]

    def get_protocol_version(self, device: Device) -> float:
        """Pings the device through ROOT.

        :returns: the HID++ protocol version, e.g. 4.2.
        """
        mark = getrandbits(8)
        request = Message.short(
            ROOT_FEATURE_INDEX,
            RootFunction.GET_PROTOCOL_VERSION,
            0,
            0,
            mark,
            device_index=device.number,
            software_id=SOFTWARE_ID,
        )
        reply = device.request(request)
        if len(reply.data) < 3:
            raise exceptions.InvalidMessageLength(report_id=reply.report_type, expected=3, length=len(reply.data))
        if reply.data[2] != mark:
            logger.warning("%s: ping reply mark %02X does not match %02X", device, reply.data[2], mark)
        return reply.data[0] + reply.data[1] / 10.0

    def get_battery_unified(self, device: Device) -> Battery:
        reply = device.send_feature(SupportedFeature.UNIFIED_BATTERY, UnifiedBatteryFunction.GET_STATUS)
        return decipher_battery_unified(reply.data)

    def get_battery_capabilities(self, device: Device) -> BatteryCapabilities:
        reply = device.send_feature(SupportedFeature.UNIFIED_BATTERY, UnifiedBatteryFunction.GET_CAPABILITIES)
        return decipher_battery_capabilities(reply.data)


_hidpp20 = Hidpp20()


def decipher_battery_level(value: int) -> BatteryLevel:
    if value == 0:
        return BatteryLevel.EMPTY
    elif value == 1:
        return BatteryLevel.CRITICAL
    elif 2 <= value <= 3:
        return BatteryLevel.LOW
    elif 4 <= value <= 7:
        return BatteryLevel.GOOD
    elif value == 8:
        return BatteryLevel.FULL
    raise exceptions.InvalidBatteryLevel(level=value)


def decipher_battery_status(value: int) -> BatteryStatus:
    try:
        return BatteryStatus(value)
    except ValueError:
        raise exceptions.InvalidBatteryStatus(status=value) from None


def decipher_battery_unified(report: bytes) -> Battery:
    if len(report) < 3:
        raise exceptions.InvalidMessageLength(report_id=None, expected=3, length=len(report))
    percentage, level_byte, status_byte = struct.unpack("!BBB", report[:3])
    level = decipher_battery_level(level_byte)
    status = decipher_battery_status(status_byte)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("battery unified %s%% charged, level %s, status %s", percentage, level, status)
    return Battery(percentage, level, status)


def decipher_battery_capabilities(report: bytes) -> BatteryCapabilities:
    if len(report) < 2:
        raise exceptions.InvalidMessageLength(report_id=None, expected=2, length=len(report))
    supported, flags = struct.unpack("!BB", report[:2])
    levels = tuple(level for level in BatteryLevel if level and supported & level)
    return BatteryCapabilities(
        levels=levels,
        rechargeable=bool(flags & BatteryCapabilityFlag.RECHARGEABLE),
        state_of_charge=bool(flags & BatteryCapabilityFlag.STATE_OF_CHARGE),
    )

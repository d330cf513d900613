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

"""A HID++ 2.0 device reached through one HID handle."""

from __future__ import annotations

import logging
import threading

from typing import Optional

from . import exceptions
from . import hidpp10_constants
from . import hidpp20
from .base import Message
from .hidpp20_constants import ERROR_FEATURE_INDEX
from .hidpp20_constants import ErrorCode
from .hidpp20_constants import SupportedFeature
from .transport import DEFAULT_OPEN_POLICY
from .transport import DEFAULT_WRITE_POLICY
from .transport import READ_TIMEOUT
from .transport import LowLevelInterface
from .transport import RetryingTransport
from .transport import RetryPolicy

logger = logging.getLogger(__name__)

_hidpp20 = hidpp20.Hidpp20()

# the first device paired with a receiver
DEFAULT_DEVICE_NUMBER = 0x01


def native_low_level() -> LowLevelInterface:
    """The hidapi binding, loaded on first use since it needs the native library."""
    import hidapi

    return hidapi


class Device:
    def __init__(
        self,
        vendor_id: int,
        product_id: int,
        number: int = DEFAULT_DEVICE_NUMBER,
        low_level: Optional[LowLevelInterface] = None,
        open_policy: RetryPolicy = DEFAULT_OPEN_POLICY,
        write_policy: RetryPolicy = DEFAULT_WRITE_POLICY,
        read_timeout: int = READ_TIMEOUT,
    ):
        assert 0 < number < 0xFF
        self.vendor_id = vendor_id
        self.product_id = product_id
        self.number = number
        self.low_level = low_level if low_level is not None else native_low_level()
        self.transport = RetryingTransport(
            self.low_level,
            vendor_id,
            product_id,
            open_policy=open_policy,
            write_policy=write_policy,
            read_timeout=read_timeout,
        )
        self.features = hidpp20.FeatureIndexTable()
        self._request_lock = threading.Lock()
        self.transport.open()

    def init(self):
        """Resolves the runtime index of every known feature, replacing any earlier table."""
        features = hidpp20.FeatureIndexTable.resolve(self)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s: %r", self, features)
        self.features = features

    def reconnect(self):
        self.transport.reconnect()

    def close(self):
        return self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, *_exc):
        self.close()

    def request(self, message: Message) -> Message:
        """Sends a request and returns the decoded reply.

        :raises FeatureCallError: if the device, or the receiver on its behalf, replied with an error report.
        """
        request = message.to_bytes()
        with self._request_lock:
            data = self.transport.transfer(request)
        reply = Message.from_bytes(data)

        if reply.feature_index == hidpp10_constants.ERROR_SUB_ID and data[3:5] == request[2:4]:
            # the receiver could not reach the device, e.g. it is asleep or out of range
            try:
                error = hidpp10_constants.ErrorCode(data[5])
            except ValueError:
                error = data[5]
            logger.error("%s: receiver error on request %02X/%X: %s", self, request[2], request[3] >> 4, error)
            raise exceptions.FeatureCallError(
                number=self.number, feature_index=request[2], function=request[3] >> 4, error=error
            )

        if reply.feature_index == ERROR_FEATURE_INDEX:
            # error reports shift the failed request right by one byte: FF <feature index> <function> <error>
            feature_index = (reply.function_index << 4) | reply.software_id
            function = reply.data[0] >> 4
            try:
                error = ErrorCode(reply.data[1])
            except ValueError:
                error = reply.data[1]
            logger.error("%s: error on feature request %02X/%X: %s", self, feature_index, function, error)
            raise exceptions.FeatureCallError(number=self.number, feature_index=feature_index, function=function, error=error)
        return reply

    def get_feature_index(self, feature: SupportedFeature) -> int:
        return _hidpp20.get_feature_index(self, feature)

    def index_for(self, feature: SupportedFeature) -> int:
        return self.features[feature]

    def send_feature(self, feature: SupportedFeature, function, *params) -> Message:
        """Calls a function of a resolved feature.

        :raises FeatureNotFound: if the feature was not resolved by ``init``.
        """
        request = Message.short(
            self.index_for(feature),
            function,
            *params,
            device_index=self.number,
            software_id=hidpp20.SOFTWARE_ID,
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s: %s request %s", self, feature, request)
        reply = self.request(request)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s: %s reply %s", self, feature, reply)
        return reply

    def get_battery(self) -> hidpp20.Battery:
        return _hidpp20.get_battery_unified(self)

    def get_battery_capabilities(self) -> hidpp20.BatteryCapabilities:
        return _hidpp20.get_battery_capabilities(self)

    def ping(self) -> float:
        return _hidpp20.get_protocol_version(self)

    def __str__(self):
        return f"<Device {self.vendor_id:04X}:{self.product_id:04X} #{self.number}>"

    __repr__ = __str__

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

"""HID++ report frames.

A frame is a report id, a device index, a feature index, a byte holding the
function index (high nibble) and the software id (low nibble), and the payload:

    10 01 06 11 00 00 00
    |  |  |  |  `------- payload, 3 bytes in a short report
    |  |  |  `---------- function 0x1, software id 0x1
    |  |  `------------- feature index, as assigned by the device
    |  `---------------- device index, 0xFF until the device is known
    `------------------- report id
"""

from __future__ import annotations

import dataclasses
import struct

from enum import IntEnum

from . import common
from . import exceptions

SHORT_MESSAGE_SIZE = 7
LONG_MESSAGE_SIZE = 20
VERY_LONG_MESSAGE_SIZE = 64
HEADER_SIZE = 4

DEFAULT_DEVICE_INDEX = 0xFF
DEFAULT_SOFTWARE_ID = 0x01


class ReportType(IntEnum):
    SHORT = 0x10
    LONG = 0x11
    VERY_LONG = 0x12

    @property
    def size(self) -> int:
        return _REPORT_SIZES[self]

    @property
    def payload_size(self) -> int:
        return _REPORT_SIZES[self] - HEADER_SIZE


_REPORT_SIZES = {
    ReportType.SHORT: SHORT_MESSAGE_SIZE,
    ReportType.LONG: LONG_MESSAGE_SIZE,
    ReportType.VERY_LONG: VERY_LONG_MESSAGE_SIZE,
}


@dataclasses.dataclass
class Message:
    feature_index: int
    function_index: int
    data: bytes = b""
    device_index: int = DEFAULT_DEVICE_INDEX
    software_id: int = DEFAULT_SOFTWARE_ID
    report_type: ReportType = ReportType.SHORT

    @classmethod
    def short(
        cls,
        feature_index: int,
        function: int,
        *params,
        device_index: int = DEFAULT_DEVICE_INDEX,
        software_id: int = DEFAULT_SOFTWARE_ID,
    ) -> Message:
        """Builds a short request; params are ints (one byte each) or byte strings."""
        return cls(feature_index, int(function), common.pack_params(*params), device_index, software_id)

    def to_bytes(self) -> bytes:
        """Encodes the message as a full report, padding or truncating the payload to the report size."""
        payload_size = self.report_type.payload_size
        payload = bytes(self.data[:payload_size]).ljust(payload_size, b"\x00")
        function_byte = ((self.function_index << 4) & 0xF0) | (self.software_id & 0x0F)
        header = struct.pack("!BBBB", self.report_type, self.device_index, self.feature_index, function_byte)
        return header + payload

    @classmethod
    def from_bytes(cls, data: bytes) -> Message:
        """Decodes a full report.

        :raises UnknownReportId: if the first byte is not a HID++ report id.
        :raises InvalidMessageLength: if the report is not as long as its id requires.
        """
        data = bytes(data)
        if not data:
            raise exceptions.InvalidMessageLength(report_id=None, expected=SHORT_MESSAGE_SIZE, length=0)
        try:
            report_type = ReportType(data[0])
        except ValueError:
            raise exceptions.UnknownReportId(report_id=data[0]) from None
        if len(data) != report_type.size:
            raise exceptions.InvalidMessageLength(report_id=report_type, expected=report_type.size, length=len(data))

        device_index, feature_index, function_byte = struct.unpack("!BBB", data[1:HEADER_SIZE])
        return cls(
            feature_index,
            function_byte >> 4,
            data[HEADER_SIZE:],
            device_index,
            function_byte & 0x0F,
            report_type,
        )

    def __str__(self):
        return (
            f"Message({self.report_type:02X},{self.device_index:02X},{self.feature_index:02X},"
            f"{self.function_index:X},{self.software_id:X},{common.strhex(self.data)})"
        )

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

"""Small helpers shared by the HID++ modules."""

from __future__ import annotations

import binascii
import struct

from enum import Enum

LOGITECH_VENDOR_ID = 0x046D


def strhex(x):
    """Produce a hex-string representation of a sequence of bytes."""
    assert x is not None
    return binascii.hexlify(x).decode("ascii").upper()


def pack_params(*params) -> bytes:
    """Join request parameters, packing ints as single bytes and keeping byte strings as they are."""
    return b"".join(struct.pack("B", p) if isinstance(p, int) else bytes(p) for p in params)


def _format_value(value) -> str:
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (bytes, bytearray)):
        return strhex(value)
    return str(value)


class KwException(Exception):
    """An exception that remembers all arguments passed to the constructor.
    They can be later accessed by simple member access.
    """

    def __init__(self, **kwargs):
        super().__init__(kwargs)

    def __getattr__(self, k):
        try:
            return super().__getattr__(k)
        except AttributeError:
            return self.args[0].get(k)

    def __str__(self):
        details = ", ".join(f"{k}={_format_value(v)}" for k, v in self.args[0].items())
        return f"{type(self).__name__}({details})"

## Copyright (C) 2012-2013  Daniel Pavel
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
"""HID device access through libusb's hidapi library.

See https://github.com/libusb/hidapi for how to obtain binaries.

Parts of this code are adapted from https://github.com/apmorton/pyhidapi
which is MIT licensed.
"""

from __future__ import annotations

import atexit
import ctypes
import logging
import platform

logger = logging.getLogger(__name__)

# Global handle to hidapi
_hidapi = None

# hidapi binary names for various platforms
_library_paths = (
    "libhidapi-hidraw.so",
    "libhidapi-hidraw.so.0",
    "libhidapi-libusb.so",
    "libhidapi-libusb.so.0",
    "libhidapi-iohidmanager.so",
    "libhidapi-iohidmanager.so.0",
    "libhidapi.dylib",
    "hidapi.dll",
    "libhidapi-0.dll",
)

for lib in _library_paths:
    try:
        _hidapi = ctypes.CDLL(lib, use_errno=True)
        break
    except OSError:
        pass
else:
    raise ImportError(f"Unable to load hidapi library, tried: {' '.join(_library_paths)}")


class _cHidApiVersion(ctypes.Structure):
    _fields_ = [
        ("major", ctypes.c_int),
        ("minor", ctypes.c_int),
        ("patch", ctypes.c_int),
    ]


_hidapi.hid_version.argtypes = []
_hidapi.hid_version.restype = ctypes.POINTER(_cHidApiVersion)
_hid_version = _hidapi.hid_version()

_hidapi.hid_init.argtypes = []
_hidapi.hid_init.restype = ctypes.c_int
_hidapi.hid_exit.argtypes = []
_hidapi.hid_exit.restype = ctypes.c_int
_hidapi.hid_open.argtypes = [ctypes.c_ushort, ctypes.c_ushort, ctypes.c_wchar_p]
_hidapi.hid_open.restype = ctypes.c_void_p
_hidapi.hid_write.argtypes = [ctypes.c_void_p, ctypes.c_char_p, ctypes.c_size_t]
_hidapi.hid_write.restype = ctypes.c_int
_hidapi.hid_read_timeout.argtypes = [ctypes.c_void_p, ctypes.c_char_p, ctypes.c_size_t, ctypes.c_int]
_hidapi.hid_read_timeout.restype = ctypes.c_int
_hidapi.hid_read.argtypes = [ctypes.c_void_p, ctypes.c_char_p, ctypes.c_size_t]
_hidapi.hid_read.restype = ctypes.c_int
_hidapi.hid_close.argtypes = [ctypes.c_void_p]
_hidapi.hid_close.restype = None
_hidapi.hid_error.argtypes = [ctypes.c_void_p]
_hidapi.hid_error.restype = ctypes.c_wchar_p

_hidapi.hid_init()
atexit.register(_hidapi.hid_exit)

if logger.isEnabledFor(logging.INFO):
    _v = _hid_version.contents
    logger.info("using hidapi %d.%d.%d", _v.major, _v.minor, _v.patch)

# A reconnect opens the device again before the old handle is gone on some
# platforms. On windows opening with shared access is the default, for macOS
# we need to set it explicitly.
if platform.system() == "Darwin":
    _hidapi.hid_darwin_set_open_exclusive.argtypes = [ctypes.c_int]
    _hidapi.hid_darwin_set_open_exclusive.restype = None
    _hidapi.hid_darwin_set_open_exclusive(0)


class HIDError(OSError):
    pass


def open(vendor_id, product_id, serial=None):
    """Open a HID device by its Vendor ID, Product ID and optional serial number.

    If no serial is provided, the first device with the specified IDs is opened.

    :returns: an opaque device handle.
    :raises HIDError: if the device cannot be opened, with the errno of the failed
    system call where there is one (EACCES without permission on the device node).
    """
    if serial is not None:
        serial = ctypes.create_unicode_buffer(serial)

    ctypes.set_errno(0)
    device_handle = _hidapi.hid_open(vendor_id, product_id, serial)
    if device_handle is None:
        raise HIDError(ctypes.get_errno(), _hidapi.hid_error(None))
    return device_handle


def close(device_handle) -> None:
    """Close a HID device.

    :param device_handle: a device handle returned by open().
    """
    assert device_handle
    _hidapi.hid_close(device_handle)


def write(device_handle: int, data: bytes) -> int:
    """Write an Output report to a HID device.

    :param device_handle: a device handle returned by open().
    :param data: the data bytes to send including the report number as the
    first byte.

    HID++ reports are numbered, so data[0] is the HID++ report id (0x10 for
    a short report) and the length passed is the full report length.
    """
    assert device_handle
    assert data
    assert isinstance(data, bytes), (repr(data), type(data))

    bytes_written = _hidapi.hid_write(device_handle, data, len(data))
    if bytes_written < 0:
        raise HIDError(_hidapi.hid_error(device_handle))
    return bytes_written


def read(device_handle, bytes_count, timeout_ms=None):
    """Read an Input report from a HID device.

    :param device_handle: a device handle returned by open().
    :param bytes_count: maximum number of bytes to read.
    :param timeout_ms: can be -1 (default) to wait for data indefinitely, 0 to
    read whatever is in the device's input buffer, or a positive integer to
    wait that many milliseconds.

    :returns: the data packet read, or an empty bytes string if a timeout was
    reached.
    :raises HIDError: if there was an error while reading.
    """
    assert device_handle

    data = ctypes.create_string_buffer(bytes_count)
    if timeout_ms is None or timeout_ms < 0:
        bytes_read = _hidapi.hid_read(device_handle, data, bytes_count)
    else:
        bytes_read = _hidapi.hid_read_timeout(device_handle, data, bytes_count, timeout_ms)

    if bytes_read < 0:
        raise HIDError(_hidapi.hid_error(device_handle))

    return data.raw[:bytes_read]

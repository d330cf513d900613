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

"""Exceptions that may be raised by this API.

Transport errors mean the link to the device is broken; protocol errors
mean the device answered with something this client cannot interpret.
"""

from .common import KwException


class HidppError(KwException):
    """Base class of every error raised by this package."""

    pass


class TransportError(HidppError):
    pass


class TransportOpenFailure(TransportError):
    """Raised when the device could not be opened within the retry bound.
    Carries ``vendor_id``, ``product_id``, ``attempts`` and the last ``reason``."""

    pass


class TransportWriteFailure(TransportError):
    """Raised when a frame could not be written, even after reconnecting.
    Carries ``attempts`` and the last ``reason``."""

    pass


class TransportReadTimeout(TransportError):
    """Raised when no complete reply frame arrived within the read timeout."""

    pass


class RetryError(HidppError):
    """Raised by a retry policy that gave up; carries ``attempts`` and ``reason``."""

    pass


class ProtocolError(HidppError):
    pass


class UnknownReportId(ProtocolError):
    """Raised when a frame starts with a report id that is not HID++."""

    pass


class InvalidMessageLength(ProtocolError):
    """Raised when a frame or payload is not as long as its report type requires."""

    pass


class InvalidBatteryLevel(ProtocolError):
    pass


class InvalidBatteryStatus(ProtocolError):
    pass


class FeatureNotFound(HidppError):
    """Raised when looking up a feature that was not resolved, either because
    the device was not initialized or because it does not support it."""

    pass


class FeatureCallError(HidppError):
    """Raised if the device replied to a feature call with an error."""

    pass

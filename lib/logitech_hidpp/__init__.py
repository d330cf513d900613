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
"""Client for Logitech HID++ 2.0 devices.

Feature indices are resolved once per session through the ROOT feature,
requests go out as short HID++ reports over a retrying HID transport, and
UNIFIED_BATTERY replies are decoded into battery level and status.

References:
https://github.com/Logitech/cpg-docs/tree/master/hidpp20
"""

from .base import Message  # noqa: F401
from .base import ReportType  # noqa: F401
from .device import Device  # noqa: F401
from .exceptions import FeatureNotFound  # noqa: F401
from .exceptions import HidppError  # noqa: F401
from .hidpp20 import Battery  # noqa: F401
from .hidpp20_constants import BatteryLevel  # noqa: F401
from .hidpp20_constants import BatteryStatus  # noqa: F401
from .hidpp20_constants import SupportedFeature  # noqa: F401

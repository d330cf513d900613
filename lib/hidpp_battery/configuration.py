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

"""Optional settings file.

Settings are read from a YAML mapping, by default
``$XDG_CONFIG_HOME/hidpp-battery/config.yaml``. Nothing is ever written back.
"""

from __future__ import annotations

import logging
import os

from typing import Any
from typing import Dict
from typing import Optional

import yaml

from logitech_hidpp import transport
from logitech_hidpp.common import LOGITECH_VENDOR_ID
from logitech_hidpp.device import DEFAULT_DEVICE_NUMBER

logger = logging.getLogger(__name__)

_XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME") or os.path.expanduser(os.path.join("~", ".config"))
_yaml_file_path = os.path.join(_XDG_CONFIG_HOME, "hidpp-battery", "config.yaml")

# a Logitech Lightspeed receiver
DEFAULT_PRODUCT_ID = 0xC547

DEFAULTS = {
    "vendor_id": LOGITECH_VENDOR_ID,
    "product_id": DEFAULT_PRODUCT_ID,
    "device_number": DEFAULT_DEVICE_NUMBER,
    "open_delay": transport.OPEN_DELAY,
    "open_retries": transport.OPEN_RETRIES,
    "write_delay": transport.WRITE_DELAY,
    "write_retries": transport.WRITE_RETRIES,
    "read_timeout": transport.READ_TIMEOUT,
}


def parse_int(value) -> int:
    """Accepts ints and decimal or 0x-prefixed strings, as used for USB ids."""
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, int):
        return value
    return int(str(value).strip(), 0)


def _cleanup_load(loaded: Any) -> Dict[str, int]:
    settings = dict(DEFAULTS)
    if loaded is None:
        return settings
    if not isinstance(loaded, dict):
        logger.error("configuration is not a mapping, ignoring it: %r", loaded)
        return settings
    for key, value in loaded.items():
        if key not in DEFAULTS:
            logger.warning("unknown configuration key %r ignored", key)
            continue
        try:
            settings[key] = parse_int(value)
        except ValueError:
            logger.error("bad value %r for configuration key %r, using %r", value, key, DEFAULTS[key])
    return settings


def load(path: Optional[str] = None) -> Dict[str, int]:
    """Returns the settings, with defaults for anything the file does not set."""
    path = path or _yaml_file_path
    loaded = None
    if os.path.isfile(path):
        try:
            with open(path) as config_file:
                loaded = yaml.safe_load(config_file)
        except Exception as e:
            logger.error("failed to load from %s: %s", path, e)
    elif path != _yaml_file_path:
        logger.warning("configuration file %s not found", path)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("load %s => %s", path, loaded)
    return _cleanup_load(loaded)


def retry_policies(settings: Dict[str, int]):
    """Builds the open and write retry policies for a settings mapping."""
    return (
        transport.RetryPolicy(settings["open_delay"], settings["open_retries"]),
        transport.RetryPolicy(settings["write_delay"], settings["write_retries"]),
    )

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

from __future__ import annotations

import argparse
import logging
import sys

from importlib import import_module
from traceback import extract_tb
from traceback import format_exc

from logitech_hidpp import exceptions

from hidpp_battery import NAME
from hidpp_battery import configuration

logger = logging.getLogger(__name__)

DEFAULT_ACTION = "battery"


def _create_parser():
    parser = argparse.ArgumentParser(
        prog=NAME,
        add_help=False,
        epilog=f"For details on individual actions, run `{NAME} <action> --help`.",
    )
    subparsers = parser.add_subparsers(title="actions", help="optional action to perform")

    sp = subparsers.add_parser("battery", help="show battery charge, level and status (the default)")
    sp.add_argument("--capabilities", action="store_true", help="also show which levels and flags the battery reports")
    sp.set_defaults(action="battery")

    sp = subparsers.add_parser("features", help="show the runtime index of every known feature")
    sp.set_defaults(action="features")

    sp = subparsers.add_parser("ping", help="show the HID++ protocol version of the device")
    sp.set_defaults(action="ping")

    return parser, subparsers.choices


_cli_parser, actions = _create_parser()
print_help = _cli_parser.print_help


def _open_device(settings, low_level=None):
    from logitech_hidpp import Device

    open_policy, write_policy = configuration.retry_policies(settings)
    return Device(
        settings["vendor_id"],
        settings["product_id"],
        number=settings["device_number"],
        low_level=low_level,
        open_policy=open_policy,
        write_policy=write_policy,
        read_timeout=settings["read_timeout"],
    )


def run(cli_args=None, settings=None, low_level=None):
    args = _cli_parser.parse_args(cli_args or [DEFAULT_ACTION])
    action = args.action
    assert action in actions
    settings = settings or dict(configuration.DEFAULTS)

    try:
        m = import_module("." + action, package=__name__)
        with _open_device(settings, low_level) as device:
            m.run(device, args)
    except exceptions.HidppError as e:
        logger.error("%s failed: %s", action, e)
        sys.exit(f"{NAME}: error: {e}")
    except AssertionError:
        tb_last = extract_tb(sys.exc_info()[2])[-1]
        sys.exit(f"{NAME}: assertion failed: {tb_last[0]} line {tb_last[1]}")
    except Exception:
        sys.exit(f"{NAME}: error: {format_exc()}")

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

import argparse
import logging
import sys

from hidpp_battery import NAME
from hidpp_battery import __version__
from hidpp_battery import cli
from hidpp_battery import configuration

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s,%(msecs)03d %(levelname)8s [%(threadName)s] %(name)s: %(message)s"


def create_parser():
    arg_parser = argparse.ArgumentParser(prog=NAME, description="Read the battery state of a Logitech HID++ 2.0 device.")
    arg_parser.add_argument(
        "-d",
        "--debug",
        action="count",
        default=0,
        help="print logging messages, for debugging purposes (may be repeated for extra verbosity)",
    )
    arg_parser.add_argument("-c", "--config", metavar="PATH", help="settings file to use instead of the default one")
    arg_parser.add_argument(
        "--vendor-id", type=configuration.parse_int, metavar="ID", help="USB vendor id of the device, e.g. 0x046d"
    )
    arg_parser.add_argument(
        "--product-id", type=configuration.parse_int, metavar="ID", help="USB product id of the device, e.g. 0xc547"
    )
    arg_parser.add_argument(
        "--device-number", type=configuration.parse_int, metavar="N", help="device index behind the receiver (default 1)"
    )
    arg_parser.add_argument("-V", "--version", action="version", version="%(prog)s " + __version__)
    arg_parser.add_argument("--help-actions", action="store_true", help="describe the command-line actions")
    arg_parser.add_argument(
        "action",
        nargs=argparse.REMAINDER,
        help=f"action to perform, '{cli.DEFAULT_ACTION}' if not given; append ' --help' to show args",
    )
    return arg_parser


def _setup_logging(debug: int):
    log_level = logging.ERROR - 10 * debug
    root = logging.getLogger("")
    root.setLevel(max(log_level, logging.DEBUG))
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    stream_handler.setLevel(log_level)
    root.addHandler(stream_handler)


def _parse_arguments(argv=None):
    args = create_parser().parse_args(argv)

    if args.help_actions:
        cli.print_help()
        return

    _setup_logging(args.debug)
    if logger.isEnabledFor(logging.INFO):
        logger.info("%s version %s", NAME, __version__)
    return args


def settings_from(args):
    settings = configuration.load(args.config)
    for key in ("vendor_id", "product_id", "device_number"):
        value = getattr(args, key)
        if value is not None:
            settings[key] = value
    return settings


def main(argv=None):
    args = _parse_arguments(argv)
    if not args:
        return
    return cli.run(args.action, settings_from(args))


if __name__ == "__main__":
    sys.exit(main())

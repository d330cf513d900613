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


def run(device, args):
    device.init()

    battery = device.get_battery()
    print(f"Battery: {battery.percentage}%")
    print(f"Level: {battery.level}")
    print(f"Status: {battery.status}")

    if args.capabilities:
        capabilities = device.get_battery_capabilities()
        print(f"Reported levels: {', '.join(str(level) for level in capabilities.levels) or 'none'}")
        print(f"Rechargeable: {'yes' if capabilities.rechargeable else 'no'}")
        print(f"State of charge: {'yes' if capabilities.state_of_charge else 'no'}")

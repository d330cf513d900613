import textwrap

from glob import glob
from pathlib import Path

from setuptools import find_packages
from setuptools import setup

NAME = "hidpp-battery"
version = Path("lib/hidpp_battery/version").read_text().strip()

setup(
    name=NAME,
    version=version,
    description="Battery status for Logitech HID++ 2.0 wireless devices.",
    long_description=textwrap.dedent(
        """
        hidpp-battery talks HID++ 2.0 to a Logitech wireless mouse or keyboard,
        through its receiver or directly over USB. It resolves the device's
        feature indices through the ROOT feature and reads the battery charge,
        level and status from the UNIFIED_BATTERY feature."""
    ),
    license="GPLv2",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: GNU General Public License v2 (GPLv2)",
        "Natural Language :: English",
        "Programming Language :: Python :: 3 :: Only",
        "Operating System :: POSIX :: Linux",
        "Topic :: Utilities",
    ],
    python_requires=">=3.8",
    install_requires=[
        "PyYAML (>= 3.12)",
        "typing_extensions",
    ],
    extras_require={
        "test": ["pytest", "pytest-mock", "pytest-cov"],
        "dev": ["ruff"],
    },
    package_dir={"": "lib"},
    packages=find_packages(where="lib"),
    package_data={"hidpp_battery": ["version"]},
    include_package_data=True,
    scripts=glob("bin/*"),
)

#!/usr/bin/python3
# Copyright (C) 2024 Jelmer Vernooij
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA 02110-1301 USA

from setuptools import find_packages, setup

setup(
    name="spdx-to-dep5",
    version="0.7.0",
    description="Generate debian/copyright files from SPDX summaries",
    license="GPL-2.0-or-later",
    python_requires=">=3.7",
    packages=find_packages(include=["spdx_to_dep5", "spdx_to_dep5.*"]),
    install_requires=[
        "python-debian",
        "tomlkit>=0.11",
    ],
    extras_require={
        "testing": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "spdx-to-dep5=spdx_to_dep5.__main__:main",
            "dep5-from-wildcards=spdx_to_dep5.from_wildcards:main",
        ],
    },
    test_suite="spdx_to_dep5.tests.test_suite",
)

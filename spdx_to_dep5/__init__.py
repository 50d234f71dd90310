#!/usr/bin/python
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

"""Generate debian/copyright files from SPDX tag-value summaries."""

__version__ = (0, 7, 0)
version_string = ".".join(map(str, __version__))

DEFAULT_SPDX_INPUT = "summary.spdx"
DEFAULT_WILDCARD_INPUT = "wildcards.toml"

# Values REUSE and other scanners use for "no information".
NO_INFORMATION = ("NONE", "NOASSERTION")

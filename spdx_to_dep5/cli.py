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

"""Command-line options shared by the spdx-to-dep5 tools."""

import argparse
import logging
import sys

from . import version_string
from .years import YearNormalization


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--omit-no-copyright', action='store_true', default=False,
        help='leave out files without any copyright information')
    parser.add_argument(
        '--allow-century-guess', action='store_true', default=False,
        help='interpret two-digit years by guessing the century')
    parser.add_argument(
        '--allow-assuming-y2k-span', action='store_true', default=False,
        help='read descending two-digit ranges such as 98-02 as '
             'spanning the year 2000')
    parser.add_argument(
        '--allow-mixed-size-implied-century-rollover', action='store_true',
        default=False,
        help='allow ranges such as 1995-02 to roll over into the next '
             'century')
    parser.add_argument(
        '-o', '--output', type=str, metavar='OUTPUT',
        help='write to OUTPUT rather than standard output')
    parser.add_argument(
        '--verbose', action='store_true', help='be verbose')
    parser.add_argument(
        '--version', action='version', version='%(prog)s ' + version_string)


def year_normalization(args) -> YearNormalization:
    return YearNormalization(
        allow_century_guess=args.allow_century_guess,
        allow_assuming_y2k_span=args.allow_assuming_y2k_span,
        allow_mixed_size_implied_century_rollover=(
            args.allow_mixed_size_implied_century_rollover))


def setup_logging(args) -> None:
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(message)s')
    else:
        logging.basicConfig(level=logging.INFO, format='%(message)s')


def write_output(text: str, path=None) -> None:
    if path is None:
        sys.stdout.write(text)
    else:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(text)

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

"""Generate a debian/copyright file from an SPDX tag-value summary."""

import argparse
import logging
import sys

from . import DEFAULT_SPDX_INPUT
from .atoms import Atoms
from .cli import (
    add_common_arguments,
    setup_logging,
    write_output,
    year_normalization,
    )
from .dep5 import render
from .records import Report, build_file_records, filter_files
from .tagvalue import TagValueError, load_spdx
from .tree import CopyrightDataTree, DuplicatePath, make_paragraphs


def main(argv=None):  # noqa: C901
    parser = argparse.ArgumentParser(prog='spdx-to-dep5')
    parser.add_argument(
        'input', metavar='INPUT', type=str, nargs='?',
        default=DEFAULT_SPDX_INPUT,
        help='SPDX tag-value file (default: %(default)s)')
    filters = parser.add_mutually_exclusive_group()
    filters.add_argument(
        '-x', '--exclude', type=str, action='append', metavar='SUFFIX',
        help='leave out files ending in SUFFIX')
    filters.add_argument(
        '-i', '--include', type=str, action='append', metavar='SUFFIX',
        help='only consider files ending in SUFFIX')
    add_common_arguments(parser)
    args = parser.parse_args(argv)

    setup_logging(args)

    options = year_normalization(args)
    report = Report()
    atoms = Atoms()
    try:
        infos = load_spdx(args.input)
    except OSError as e:
        logging.error('Unable to read %s: %s', args.input, e)
        return 1
    except TagValueError as e:
        logging.error('%s: %s', args.input, e)
        return 1

    infos = filter_files(
        infos, exclude=args.exclude, include=args.include,
        omit_no_copyright=args.omit_no_copyright)
    records = build_file_records(infos, atoms, options, report)
    logging.debug('Found %d files.', len(records))

    try:
        tree = CopyrightDataTree.from_records(records)
    except DuplicatePath as e:
        logging.error('%s: %s', args.input, e)
        return 1

    paragraphs = list(make_paragraphs(tree))
    logging.debug('Collapsed into %d paragraphs.', len(paragraphs))
    try:
        write_output(render(paragraphs, atoms), args.output)
    except OSError as e:
        logging.error('Unable to write output: %s', e)
        return 1
    report.log_summary()
    return 0


if __name__ == '__main__':
    sys.exit(main())

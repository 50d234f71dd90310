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

"""Generate a debian/copyright file from declared wildcards.

The declared wildcard paragraphs are kept as they are; files whose
license differs from what the declarations say get their own paragraph.
"""

import argparse
import logging
import sys

from . import DEFAULT_SPDX_INPUT, DEFAULT_WILDCARD_INPUT
from .atoms import Atoms
from .cli import (
    add_common_arguments,
    setup_logging,
    write_output,
    year_normalization,
    )
from .config import ConfigError, load_declarations
from .dep5 import render
from .records import Report, build_file_records, filter_files
from .tagvalue import TagValueError, load_spdx
from .tree import CopyrightDataTree, DuplicatePath
from .wildcards import reconcile


def main(argv=None):  # noqa: C901
    parser = argparse.ArgumentParser(prog='dep5-from-wildcards')
    parser.add_argument(
        'spdx_input', metavar='SPDX_INPUT', type=str, nargs='?',
        default=DEFAULT_SPDX_INPUT,
        help='SPDX tag-value file (default: %(default)s)')
    parser.add_argument(
        'wildcard_input', metavar='WILDCARD_INPUT', type=str, nargs='?',
        default=DEFAULT_WILDCARD_INPUT,
        help='declared wildcards, as TOML or DEP-5 '
             '(default: %(default)s)')
    add_common_arguments(parser)
    args = parser.parse_args(argv)

    setup_logging(args)

    options = year_normalization(args)
    report = Report()
    atoms = Atoms()
    try:
        declarations = load_declarations(args.wildcard_input, options)
        infos = load_spdx(args.spdx_input)
    except OSError as e:
        logging.error('Unable to read input: %s', e)
        return 1
    except ConfigError as e:
        logging.error('%s', e)
        return 1
    except TagValueError as e:
        logging.error('%s: %s', args.spdx_input, e)
        return 1

    records = build_file_records(
        filter_files(infos, omit_no_copyright=args.omit_no_copyright),
        atoms, options, report)

    try:
        # Only used to check for duplicate paths.
        CopyrightDataTree.from_records(records)
    except DuplicatePath as e:
        logging.error('%s: %s', args.spdx_input, e)
        return 1

    reconciliation = reconcile(
        declarations.declarations, records, atoms, report)
    logging.debug(
        '%d declared paragraphs, %d overrides.',
        len(reconciliation.declared), len(reconciliation.overrides))
    text = render(
        reconciliation.paragraphs(), atoms, intro=declarations.intro,
        license_texts=declarations.license_texts)
    try:
        write_output(text, args.output)
    except OSError as e:
        logging.error('Unable to write output: %s', e)
        return 1
    report.log_summary()
    return 0


if __name__ == '__main__':
    sys.exit(main())

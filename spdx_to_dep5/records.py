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

"""Per-file attribution records."""

from collections import namedtuple
import logging
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .atoms import Atoms
from .statements import (
    cleanup_copyright_text,
    normalize_statements,
    )
from .tagvalue import FileInformation
from .years import YearNormalization

__all__ = [
    'Attribution',
    'FileRecord',
    'Paragraph',
    'Report',
    'build_file_records',
    'filter_files',
    'split_path',
    ]

logger = logging.getLogger(__name__)


class Attribution(namedtuple('Attribution', ['license', 'copyrights'])):
    """License handle and set of copyright statement handles."""

    __slots__ = ()

    def mergeable(self, other: 'Attribution') -> bool:
        return self.license == other.license

    def merge(self, other: 'Attribution') -> 'Attribution':
        if not self.mergeable(other):
            raise ValueError('can not merge attributions with different '
                             'licenses')
        return Attribution(self.license, self.copyrights | other.copyrights)


class FileRecord(namedtuple('FileRecord', ['path', 'license', 'copyrights'])):

    __slots__ = ()

    @property
    def attribution(self) -> Attribution:
        return Attribution(self.license, self.copyrights)

    @property
    def filename(self) -> str:
        return '/'.join(self.path)


class Paragraph(namedtuple('Paragraph', ['pattern', 'attribution', 'comment'],
                           defaults=(None, ))):
    """A Files paragraph to emit.

    Attributes:
      pattern: value of the Files field; one DEP-5 pattern, or several
        separated by spaces
      attribution: Attribution of the matching files
      comment: optional comment
    """

    __slots__ = ()


def split_path(path: str) -> Tuple[str, ...]:
    """Split a file name from an SPDX document into path segments."""
    if path.startswith('./'):
        path = path[2:]
    return tuple(s for s in path.split('/') if s not in ('', '.'))


class Report:
    """Non-fatal problems found during a run.

    These are collected rather than raised, so that they can all be shown
    together at the end of the run.
    """

    def __init__(self):
        self.unparseable = []
        self.unmatched = []

    def add_unparseable(self, filename, error):
        logger.debug('%s: %s', filename, error)
        self.unparseable.append((filename, error))

    def add_unmatched(self, error):
        logger.debug('%s', error)
        self.unmatched.append(error)

    def __bool__(self):
        return bool(self.unparseable or self.unmatched)

    def log_summary(self):
        for filename, error in self.unparseable:
            logger.warning('%s: skipped copyright statement: %s',
                           filename, error)
        for error in self.unmatched:
            logger.warning('%s', error)
        if self.unparseable:
            logger.warning(
                '%d copyright statements could not be parsed.',
                len(self.unparseable))
        if self.unmatched:
            logger.warning(
                '%d declared patterns did not match any file.',
                len(self.unmatched))


def filter_files(
        infos: Iterable[FileInformation],
        exclude: Optional[Sequence[str]] = None,
        include: Optional[Sequence[str]] = None,
        omit_no_copyright: bool = False) -> Iterator[FileInformation]:
    """Filter file information by file name suffix.

    Args:
      infos: file information to filter
      exclude: suffixes of files to leave out
      include: suffixes of the only files to keep
      omit_no_copyright: leave out files without any copyright text
    Raises:
      ValueError: if both exclude and include are given
    """
    if exclude and include:
        raise ValueError('cannot specify both include and exclude')
    for info in infos:
        if exclude and info.file_name.endswith(tuple(exclude)):
            continue
        if include and not info.file_name.endswith(tuple(include)):
            continue
        if omit_no_copyright and not info.has_copyright():
            logger.debug('%s: omitting, no copyright information',
                         info.file_name)
            continue
        yield info


def build_file_records(
        infos: Iterable[FileInformation], atoms: Atoms,
        options: Optional[YearNormalization] = None,
        report: Optional[Report] = None) -> List[FileRecord]:
    """Turn SPDX file information into interned file records.

    Copyright statements that can not be parsed are left out and added to
    the report.
    """
    if report is None:
        report = Report()
    records = []
    for info in infos:
        path = split_path(info.file_name)
        if not path:
            logger.debug('ignoring entry with empty file name %r',
                         info.file_name)
            continue
        statements, errors = normalize_statements(
            cleanup_copyright_text(info.copyright_text), options)
        for error in errors:
            report.add_unparseable('/'.join(path), error)
        records.append(FileRecord(
            path,
            atoms.licenses.intern(info.license_expression()),
            frozenset(atoms.statements.intern(s) for s in statements)))
    return records

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

"""Reading file information from SPDX tag-value documents."""

from collections import namedtuple
import logging
from typing import Iterable, Iterator, List, Tuple

from . import NO_INFORMATION

__all__ = [
    'FileInformation',
    'TagValueError',
    'iter_tag_values',
    'load_spdx',
    'parse_tag_value',
    ]


OPEN_TEXT = '<text>'
CLOSE_TEXT = '</text>'

# Tags that start a section other than a file.
_SECTION_TAGS = frozenset(['PackageName', 'SnippetSPDXID', 'LicenseID'])

logger = logging.getLogger(__name__)


class TagValueError(Exception):
    """The SPDX tag-value input is malformed."""

    def __init__(self, lineno, reason):
        super(TagValueError, self).__init__(lineno, reason)
        self.lineno = lineno
        self.reason = reason

    def __str__(self):
        return 'line %d: %s' % (self.lineno, self.reason)


class FileInformation(namedtuple('FileInformation', [
        'file_name', 'spdx_id', 'license_concluded',
        'license_info_in_file', 'copyright_text'])):
    """The fields of an SPDX file information section that we use."""

    __slots__ = ()

    def license_expression(self) -> str:
        """Return the license expression to attribute this file with.

        The concluded license wins; if there is none, the licenses found
        in the file are OR-ed together.
        """
        if (self.license_concluded
                and self.license_concluded not in NO_INFORMATION):
            return self.license_concluded
        found = sorted(set(
            lic for lic in self.license_info_in_file
            if lic and lic not in NO_INFORMATION))
        if not found:
            return 'NOASSERTION'
        return ' OR '.join(found)

    def has_copyright(self) -> bool:
        return bool(self.copyright_text
                    and self.copyright_text.strip() not in NO_INFORMATION)


def _strip_text_markup(value: str) -> str:
    if value.startswith(OPEN_TEXT) and value.endswith(CLOSE_TEXT):
        return value[len(OPEN_TEXT):-len(CLOSE_TEXT)]
    return value


def iter_tag_values(lines: Iterable[str]) -> Iterator[Tuple[int, str, str]]:
    """Iterate over the tag/value pairs in a tag-value document.

    Args:
      lines: iterable over lines of text
    Returns:
      iterator over (line number, tag, value) tuples; multi-line
      <text> values are joined with newlines and stripped of markup
    Raises:
      TagValueError: for lines that are not tag/value pairs, or an
        unterminated <text> value
    """
    pending = None
    for lineno, line in enumerate(lines, 1):
        line = line.rstrip('\r\n')
        if pending is not None:
            start, tag, value_lines = pending
            value_lines.append(line)
            if CLOSE_TEXT in line:
                pending = None
                yield start, tag, _strip_text_markup(
                    '\n'.join(value_lines).strip())
            continue
        if not line.strip() or line.lstrip().startswith('#'):
            continue
        tag, sep, value = line.partition(':')
        if not sep or not tag.strip():
            raise TagValueError(lineno, 'expected "Tag: value", got %r' % line)
        tag = tag.strip()
        value = value.strip()
        if OPEN_TEXT in value and CLOSE_TEXT not in value:
            pending = (lineno, tag, [value])
            continue
        yield lineno, tag, _strip_text_markup(value)
    if pending is not None:
        raise TagValueError(
            pending[0], 'unterminated %s value for %s' % (
                OPEN_TEXT, pending[1]))


def parse_tag_value(lines: Iterable[str]) -> Iterator[FileInformation]:
    """Parse the file information sections of a tag-value document."""
    current = None
    for lineno, tag, value in iter_tag_values(lines):
        if tag == 'FileName':
            if current is not None:
                yield _finish(current)
            current = {
                'file_name': value,
                'spdx_id': None,
                'license_concluded': None,
                'license_info_in_file': [],
                'copyright_text': None,
            }
        elif tag in _SECTION_TAGS:
            if current is not None:
                yield _finish(current)
                current = None
        elif current is None:
            continue
        elif tag == 'SPDXID':
            current['spdx_id'] = value
        elif tag == 'LicenseConcluded':
            current['license_concluded'] = value
        elif tag == 'LicenseInfoInFile':
            current['license_info_in_file'].append(value)
        elif tag == 'FileCopyrightText':
            if current['copyright_text'] is not None:
                raise TagValueError(
                    lineno, 'duplicate FileCopyrightText for %s' % (
                        current['file_name']))
            current['copyright_text'] = value
    if current is not None:
        yield _finish(current)


def _finish(fields) -> FileInformation:
    fields['license_info_in_file'] = tuple(fields['license_info_in_file'])
    return FileInformation(**fields)


def _decode_lines(f) -> Iterator[str]:
    for lineno, line in enumerate(f, 1):
        try:
            yield line.decode('utf-8')
        except UnicodeDecodeError as e:
            raise TagValueError(
                lineno, 'not valid UTF-8 at byte %d' % (e.start + 1))


def load_spdx(path: str) -> List[FileInformation]:
    """Read the file information from a tag-value file.

    Raises:
      TagValueError: if the file is malformed or not valid UTF-8
    """
    logger.info('Opening %s', path)
    with open(path, 'rb') as f:
        return list(parse_tag_value(_decode_lines(f)))

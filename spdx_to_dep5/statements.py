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

"""Parsing and normalization of copyright statements."""

from collections import namedtuple
import re
from typing import Iterable, List, Optional, Tuple

from . import NO_INFORMATION
from .years import (
    YEAR_SPEC_RE,
    YearNormalization,
    YearRange,
    parse_year_spec,
    )

__all__ = [
    'CopyrightStatement',
    'UnparseableStatement',
    'cleanup_copyright_text',
    'normalize_statements',
    'parse_statement',
    'statement_sort_key',
    ]


_MARKER_RE = re.compile(
    r'(?:SPDX-FileCopyrightText\s*:|copyright\b\s*:?|\(c\)|©)\s*',
    re.IGNORECASE)
_YEAR_SEPARATOR_RE = re.compile(r'\s*,\s*|\s+')
_RIGHTS_RESERVED_RE = re.compile(
    r'[\s,.;]*all rights reserved\.?$', re.IGNORECASE)
_LEADING_BY_RE = re.compile(r'by\s+', re.IGNORECASE)
_HOLDER_NOISE = ' \t,;:'


class UnparseableStatement(Exception):
    """A copyright statement did not contain recognizable years and holder."""

    def __init__(self, text, reason=None):
        super(UnparseableStatement, self).__init__(text, reason)
        self.text = text
        self.reason = reason

    def __str__(self):
        if self.reason:
            return 'unable to parse copyright statement %r: %s' % (
                self.text, self.reason)
        return 'unable to parse copyright statement %r' % self.text


class CopyrightStatement(namedtuple('CopyrightStatement',
                                    ['years', 'holder'])):
    """A normalized copyright statement: a year range and a holder."""

    __slots__ = ()

    def sort_key(self):
        return (self.years.begin, self.holder, self.years.end)

    def __str__(self):
        return '%s %s' % (self.years, self.holder)


def statement_sort_key(statement):
    """Sort key for statements; verbatim text sorts after parsed ones."""
    if isinstance(statement, CopyrightStatement):
        return statement.sort_key()
    return (float('inf'), statement, 0)


def strip_markers(text: str) -> str:
    """Strip leading "Copyright", "(c)" and similar markers."""
    text = text.strip()
    while True:
        m = _MARKER_RE.match(text)
        if m is None or not m.group(0):
            return text
        text = text[m.end():]


def _parse_years(text: str, options: YearNormalization
                 ) -> Tuple[List[YearRange], int]:
    ranges = []
    pos = 0
    start = 0
    while True:
        m = YEAR_SPEC_RE.match(text, start)
        if m is None:
            break
        end = m.end()
        # Open ranges such as "2020-" or "2020-present" have no end
        # year, and are not accepted.
        if end < len(text) and (text[end].isalnum() or text[end] in '-–'):
            break
        year_range = parse_year_spec(
            m.group('begin'), m.group('end'), options)
        if year_range is None:
            break
        ranges.append(year_range)
        pos = end
        sep = _YEAR_SEPARATOR_RE.match(text, pos)
        if sep is None:
            break
        start = sep.end()
    return ranges, pos


def _clean_holder(text: str) -> str:
    holder = ' '.join(text.split())
    holder = _RIGHTS_RESERVED_RE.sub('', holder)
    holder = holder.strip(_HOLDER_NOISE)
    holder = _LEADING_BY_RE.sub('', holder, count=1)
    return holder.rstrip(_HOLDER_NOISE)


def parse_statement(text: str,
                    options: Optional[YearNormalization] = None
                    ) -> CopyrightStatement:
    """Parse a single line of copyright text.

    Args:
      text: the raw line, e.g. "Copyright (C) 2019-2021 Jane Doe"
      options: YearNormalization policy for two-digit years
    Returns:
      a CopyrightStatement; a list of years is folded into the smallest
      range covering all of them
    Raises:
      UnparseableStatement: if no years followed by a holder were found
    """
    if options is None:
        options = YearNormalization()
    body = strip_markers(text)
    ranges, pos = _parse_years(body, options)
    if not ranges:
        raise UnparseableStatement(text, 'no years found')
    rest = body[pos:]
    if rest and rest[0] not in ' \t,;:.':
        raise UnparseableStatement(text, 'no separator after years')
    holder = _clean_holder(rest.lstrip('.'))
    if not holder:
        raise UnparseableStatement(text, 'no copyright holder found')
    return CopyrightStatement(YearRange.covering(ranges), holder)


def cleanup_copyright_text(text: Optional[str]) -> List[str]:
    """Split SPDX copyright text into individual statement lines.

    Drops <text> markup, blank lines, NONE/NOASSERTION placeholders and
    license identifier lines that REUSE sometimes includes.
    """
    if text is None:
        return []
    text = text.replace('<text>', '').replace('</text>', '')
    lines = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line in NO_INFORMATION:
            continue
        if line.startswith('SPDX-License-Identifier:'):
            continue
        lines.append(line)
    return lines


def normalize_statements(
        lines: Iterable[str], options: Optional[YearNormalization] = None
        ) -> Tuple[List[CopyrightStatement], List[UnparseableStatement]]:
    """Normalize and deduplicate a set of copyright lines.

    Returns:
      tuple with the sorted distinct statements and the errors for the
      lines that could not be parsed
    """
    statements = set()
    errors = []
    for line in lines:
        try:
            statements.add(parse_statement(line, options))
        except UnparseableStatement as e:
            errors.append(e)
    return sorted(statements, key=CopyrightStatement.sort_key), errors

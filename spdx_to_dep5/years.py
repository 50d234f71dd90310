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

"""Years and year ranges as they appear in copyright statements."""

from collections import namedtuple
import re
from typing import Iterable, Optional

__all__ = [
    'YearRange',
    'YearNormalization',
    'parse_year_spec',
    'YEAR_SPEC_RE',
    ]


_YEAR = r'(?:\d{4}|\d{2})(?!\d)'

# One year or one range of years, e.g. "2019", "2019-2021", "1995 - 98".
YEAR_SPEC_RE = re.compile(
    r'(?P<begin>%s)(?:\s*[-–]\s*(?P<end>%s))?' % (_YEAR, _YEAR))

CENTURY_GUESS_PIVOT = 60


class YearRange(namedtuple('YearRange', ['begin', 'end'])):
    """A closed range of four-digit years.

    A single year is a range whose begin and end are equal.
    """

    __slots__ = ()

    def __new__(cls, begin: int, end: Optional[int] = None):
        if end is None:
            end = begin
        if end < begin:
            raise ValueError('year range %d-%d is inverted' % (begin, end))
        return super(YearRange, cls).__new__(cls, begin, end)

    def is_single_year(self) -> bool:
        return self.begin == self.end

    def contains(self, other: 'YearRange') -> bool:
        return self.begin <= other.begin and other.end <= self.end

    def merge(self, other: 'YearRange') -> 'YearRange':
        return YearRange(min(self.begin, other.begin),
                         max(self.end, other.end))

    @classmethod
    def covering(cls, ranges: Iterable['YearRange']) -> 'YearRange':
        """Return the smallest range covering all of ranges."""
        ranges = list(ranges)
        if not ranges:
            raise ValueError('no year ranges given')
        return cls(min(r.begin for r in ranges), max(r.end for r in ranges))

    def __str__(self):
        if self.is_single_year():
            return '%d' % self.begin
        return '%d-%d' % (self.begin, self.end)


class YearNormalization(namedtuple(
        'YearNormalization', [
            'allow_century_guess',
            'allow_assuming_y2k_span',
            'allow_mixed_size_implied_century_rollover'],
        defaults=(False, False, False))):
    """Policy for interpreting two-digit years.

    Attributes:
      allow_century_guess: whether a year with no four-digit year next to
        it may have its century guessed
      allow_assuming_y2k_span: whether a descending range of two two-digit
        years (98-02) may be read as spanning the year 2000
      allow_mixed_size_implied_century_rollover: whether the two-digit
        end of a range may be placed in the century after the four-digit
        begin (1995-02), and vice versa
    """

    __slots__ = ()


def guess_four_digit_year(two_digit: int) -> int:
    if two_digit < CENTURY_GUESS_PIVOT:
        return 2000 + two_digit
    return 1900 + two_digit


def _in_century_of(two_digit: int, year: int) -> int:
    return (year // 100) * 100 + two_digit


def parse_year_spec(begin: str, end: Optional[str] = None,
                    options: Optional[YearNormalization] = None
                    ) -> Optional[YearRange]:
    """Turn the textual begin and end of a year spec into a YearRange.

    Args:
      begin: first year, as two or four digits
      end: optional last year, as two or four digits
      options: YearNormalization policy for two-digit years
    Returns:
      a YearRange, or None if the years can not be interpreted under
      the given policy
    """
    if options is None:
        options = YearNormalization()
    b = int(begin)
    if end is None or end == begin:
        if len(begin) == 4:
            return YearRange(b)
        if not options.allow_century_guess:
            return None
        return YearRange(guess_four_digit_year(b))
    e = int(end)
    if len(begin) == 4 and len(end) == 4:
        if e < b:
            return None
        return YearRange(b, e)
    if len(begin) == 4:
        e = _in_century_of(e, b)
        if e < b:
            if not options.allow_mixed_size_implied_century_rollover:
                return None
            e += 100
        return YearRange(b, e)
    if len(end) == 4:
        b = _in_century_of(b, e)
        if b > e:
            if not options.allow_mixed_size_implied_century_rollover:
                return None
            b -= 100
        return YearRange(b, e)
    if not options.allow_century_guess:
        return None
    if e < b:
        if not options.allow_assuming_y2k_span:
            return None
        return YearRange(1900 + b, 2000 + e)
    b = guess_four_digit_year(b)
    return YearRange(b, _in_century_of(e, b))

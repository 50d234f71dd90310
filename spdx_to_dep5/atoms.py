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

"""Interning of license expressions and copyright statements."""

from typing import Dict, Generic, Hashable, List, Optional, TypeVar

from .statements import statement_sort_key

T = TypeVar('T', bound=Hashable)


class AtomTable(Generic[T]):
    """Two-way mapping between values and small integer handles.

    Handles are only meaningful for the table that issued them.
    """

    def __init__(self):
        self._values: List[T] = []
        self._handles: Dict[T, int] = {}

    def intern(self, value: T) -> int:
        try:
            return self._handles[value]
        except KeyError:
            handle = len(self._values)
            self._values.append(value)
            self._handles[value] = handle
            return handle

    def lookup(self, value: T) -> Optional[int]:
        return self._handles.get(value)

    def resolve(self, handle: int) -> T:
        if handle < 0:
            raise KeyError(handle)
        try:
            return self._values[handle]
        except IndexError as e:
            raise KeyError(handle) from e

    def __len__(self):
        return len(self._values)

    def __contains__(self, value):
        return value in self._handles

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self._values)


class Atoms:
    """The atom tables used during a single run."""

    def __init__(self):
        self.licenses: AtomTable[str] = AtomTable()
        self.statements = AtomTable()

    def license(self, handle):
        return self.licenses.resolve(handle)

    def statements_for(self, handles):
        """Resolve a set of statement handles, in sorted order."""
        return sorted(
            (self.statements.resolve(h) for h in handles),
            key=statement_sort_key)

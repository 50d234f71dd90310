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

"""Tests for spdx_to_dep5.atoms."""

from unittest import TestCase

from ..atoms import AtomTable, Atoms
from ..statements import CopyrightStatement
from ..years import YearRange


class AtomTableTests(TestCase):

    def test_intern_idempotent(self):
        table = AtomTable()
        a = table.intern('MIT')
        b = table.intern('GPL-2.0')
        self.assertNotEqual(a, b)
        self.assertEqual(a, table.intern('MIT'))
        self.assertEqual(2, len(table))

    def test_resolve(self):
        table = AtomTable()
        handle = table.intern('MIT')
        self.assertEqual('MIT', table.resolve(handle))
        self.assertRaises(KeyError, table.resolve, handle + 1)
        self.assertRaises(KeyError, table.resolve, -1)

    def test_lookup(self):
        table = AtomTable()
        self.assertIsNone(table.lookup('MIT'))
        handle = table.intern('MIT')
        self.assertEqual(handle, table.lookup('MIT'))
        self.assertIn('MIT', table)
        self.assertNotIn('BSD', table)

    def test_repr(self):
        table = AtomTable()
        table.intern('MIT')
        self.assertEqual("AtomTable(['MIT'])", repr(table))


class AtomsTests(TestCase):

    def test_statements_for(self):
        atoms = Atoms()
        bob = atoms.statements.intern(
            CopyrightStatement(YearRange(2021), 'Bob'))
        alice = atoms.statements.intern(
            CopyrightStatement(YearRange(2020), 'Alice'))
        self.assertEqual(
            ['2020 Alice', '2021 Bob'],
            [str(s) for s in atoms.statements_for(frozenset([bob, alice]))])

    def test_license(self):
        atoms = Atoms()
        self.assertEqual('MIT', atoms.license(atoms.licenses.intern('MIT')))

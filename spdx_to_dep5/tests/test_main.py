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

"""Tests for the spdx-to-dep5 and dep5-from-wildcards commands."""

import os
import shutil
import tempfile
from unittest import TestCase

from debian.copyright import Copyright

from ..__main__ import main
from ..from_wildcards import main as from_wildcards_main


SUMMARY = """\
SPDXVersion: SPDX-2.1
DataLicense: CC0-1.0

FileName: ./src/a.c
SPDXID: SPDXRef-1
LicenseConcluded: MIT
FileCopyrightText: <text>Copyright 2020 Alice</text>

FileName: ./src/b.c
SPDXID: SPDXRef-2
LicenseConcluded: MIT
FileCopyrightText: <text>Copyright 2020 Alice</text>

FileName: ./src/c.c
SPDXID: SPDXRef-3
LicenseConcluded: MIT
FileCopyrightText: <text>Copyright (C) 2021 Bob</text>
"""

VENDOR = """\
FileName: ./vendor/lib.c
SPDXID: SPDXRef-4
LicenseConcluded: GPL-2.0
FileCopyrightText: <text>2010 Carol
random text</text>
"""


class MainTestCase(TestCase):

    def setUp(self):
        super(MainTestCase, self).setUp()
        self.test_dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.test_dir)
        self.addCleanup(os.chdir, os.getcwd())
        os.chdir(self.test_dir)

    def write(self, path, contents):
        with open(path, 'w') as f:
            f.write(contents)

    def read(self, path):
        with open(path, 'r') as f:
            return f.read()


class SpdxToDep5Tests(MainTestCase):

    def test_collapse(self):
        self.write('summary.spdx', SUMMARY)
        self.assertEqual(0, main(['-o', 'copyright']))
        self.assertEqual("""\
Format: https://www.debian.org/doc/packaging-manuals/copyright-format/1.0/

Files: src/*
Copyright: 2020 Alice
 2021 Bob
License: MIT
""", self.read('copyright'))

    def test_mixed(self):
        self.write('in.spdx', SUMMARY + '\n' + VENDOR)
        with self.assertLogs(level='WARNING') as cm:
            self.assertEqual(0, main(['in.spdx', '-o', 'copyright']))
        self.assertIn(
            'WARNING:spdx_to_dep5.records:1 copyright statements could not '
            'be parsed.', cm.output)
        copyright = Copyright(self.read('copyright').splitlines(True))
        self.assertEqual(
            [(('src/*', ), 'MIT'), (('vendor/*', ), 'GPL-2.0')],
            [(p.files, p.license.synopsis)
             for p in copyright.all_files_paragraphs()])

    def test_exclude(self):
        self.write('summary.spdx', SUMMARY + '\n' + VENDOR)
        self.assertEqual(0, main(['-x', '.c', '-o', 'copyright']))
        copyright = Copyright(self.read('copyright').splitlines(True))
        self.assertEqual([], list(copyright.all_files_paragraphs()))

    def test_include_exclude_conflict(self):
        self.write('summary.spdx', SUMMARY)
        with self.assertRaises(SystemExit):
            main(['-x', '.c', '-i', '.h'])

    def test_deterministic(self):
        self.write('summary.spdx', SUMMARY + '\n' + VENDOR)
        self.assertEqual(0, main(['-o', 'copyright1']))
        self.assertEqual(0, main(['-o', 'copyright2']))
        self.assertEqual(self.read('copyright1'), self.read('copyright2'))

    def test_missing_input(self):
        with self.assertLogs(level='ERROR'):
            self.assertEqual(1, main(['-o', 'copyright']))
        self.assertFalse(os.path.exists('copyright'))

    def test_duplicate_path(self):
        self.write('summary.spdx', SUMMARY + '\n' + SUMMARY)
        with self.assertLogs(level='ERROR') as cm:
            self.assertEqual(1, main(['-o', 'copyright']))
        self.assertIn('duplicate entry for path src/a.c', cm.output[0])

    def test_malformed_input(self):
        self.write('summary.spdx', 'FileName: foo\nnonsense\n')
        with self.assertLogs(level='ERROR') as cm:
            self.assertEqual(1, main(['-o', 'copyright']))
        self.assertIn('line 2', cm.output[0])

    def test_invalid_utf8(self):
        with open('summary.spdx', 'wb') as f:
            f.write(b'FileName: ./a\xff.c\nLicenseConcluded: MIT\n')
        with self.assertLogs(level='ERROR') as cm:
            self.assertEqual(1, main(['-o', 'copyright']))
        self.assertIn('line 1: not valid UTF-8', cm.output[0])
        self.assertFalse(os.path.exists('copyright'))


class FromWildcardsTests(MainTestCase):

    def test_override(self):
        self.write('summary.spdx', SUMMARY + '\n' + VENDOR)
        self.write('wildcards.toml', """\
[intro]
upstream_name = "foo"

[[wildcards]]
pattern = "*"
license = "MIT"
copyright = ["2020 Alice", "2021 Bob"]

[[license_texts]]
license = "MIT"
text = "Permission is hereby granted."
""")
        self.assertEqual(0, from_wildcards_main(['-o', 'copyright']))
        copyright = Copyright(self.read('copyright').splitlines(True))
        self.assertEqual('foo', copyright.header.upstream_name)
        self.assertEqual(
            [(('*', ), 'MIT'), (('vendor/lib.c', ), 'GPL-2.0')],
            [(p.files, p.license.synopsis)
             for p in copyright.all_files_paragraphs()])
        self.assertEqual(
            ['MIT'],
            [p.license.synopsis for p in copyright.all_license_paragraphs()])

    def test_unmatched_declaration(self):
        self.write('summary.spdx', SUMMARY)
        self.write('wildcards.toml', """\
[[wildcards]]
pattern = "*"
license = "MIT"

[[wildcards]]
pattern = "debian/*"
license = "GPL-2.0+"
""")
        with self.assertLogs(level='WARNING') as cm:
            self.assertEqual(0, from_wildcards_main(['-o', 'copyright']))
        self.assertIn(
            'WARNING:spdx_to_dep5.records:declared pattern debian/* '
            '(GPL-2.0+) does not match any file', cm.output)

    def test_config_error(self):
        self.write('summary.spdx', SUMMARY)
        self.write('wildcards.toml', '[[wildcards]]\npattern = "*"\n')
        with self.assertLogs(level='ERROR'):
            self.assertEqual(1, from_wildcards_main(['-o', 'copyright']))

    def test_dep5_declarations(self):
        self.write('summary.spdx', SUMMARY + '\n' + VENDOR)
        self.write('declared', """\
Format: https://www.debian.org/doc/packaging-manuals/copyright-format/1.0/

Files: *
Copyright: 2020 Alice
License: MIT

Files: vendor/*
Copyright: 2010 Carol
License: GPL-2.0
""")
        self.assertEqual(
            0, from_wildcards_main(['summary.spdx', 'declared',
                                    '-o', 'copyright']))
        copyright = Copyright(self.read('copyright').splitlines(True))
        self.assertEqual(
            [('*', ), ('vendor/*', )],
            [p.files for p in copyright.all_files_paragraphs()])

    def test_invalid_utf8_declarations(self):
        self.write('summary.spdx', SUMMARY)
        with open('wildcards.toml', 'wb') as f:
            f.write(b'[[wildcards]]\npattern = "*"\nlicense = "MIT\xff"\n')
        with self.assertLogs(level='ERROR') as cm:
            self.assertEqual(1, from_wildcards_main(['-o', 'copyright']))
        self.assertIn('not valid UTF-8', cm.output[0])

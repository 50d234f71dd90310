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

"""Reconciling declared wildcard licensing with per-file information."""

from collections import namedtuple
import logging
from typing import Iterable, List, Optional, Sequence

from debian.copyright import globs_to_re

from .atoms import Atoms
from .records import (
    Attribution,
    FileRecord,
    Paragraph,
    Report,
    )
from .tree import escape_path, unshadow

__all__ = [
    'Reconciliation',
    'UnmatchedLicenseDeclaration',
    'WildcardDeclaration',
    'reconcile',
    'specificity',
    ]

logger = logging.getLogger(__name__)


class UnmatchedLicenseDeclaration(Exception):
    """A declared pattern does not match any file."""

    def __init__(self, pattern, license):
        super(UnmatchedLicenseDeclaration, self).__init__(pattern, license)
        self.pattern = pattern
        self.license = license

    def __str__(self):
        return 'declared pattern %s (%s) does not match any file' % (
            self.pattern, self.license)


class WildcardDeclaration(namedtuple(
        'WildcardDeclaration',
        ['pattern', 'license', 'copyright', 'comment', 'entry'],
        defaults=((), None, None))):
    """A maintainer's declaration of the license of files matching a pattern.

    Attributes:
      pattern: DEP-5 glob pattern
      license: license expression
      copyright: sequence of CopyrightStatement objects, or of verbatim
        strings for statements that could not be parsed
      comment: optional comment for the generated paragraph
      entry: identifies the entry in the declaration file this pattern
        came from; patterns of one entry share a paragraph where possible
    """

    __slots__ = ()


def specificity(pattern: str) -> int:
    """Length of the literal prefix of a pattern, before any wildcard."""
    i = 0
    while i < len(pattern):
        if pattern[i] == '\\':
            i += 2
            continue
        if pattern[i] in '*?':
            return i
        i += 1
    return len(pattern)


class Reconciliation(namedtuple('Reconciliation', ['declared', 'overrides'])):
    """Paragraphs for the declared patterns and the files that differ."""

    __slots__ = ()

    def paragraphs(self) -> List[Paragraph]:
        # Overrides have to come last, since the last matching
        # paragraph wins.
        return list(self.declared) + list(self.overrides)


def _group_declared(paragraphs: List[Paragraph],
                    declarations: Sequence[WildcardDeclaration],
                    specificities: List[int]) -> List[Paragraph]:
    # Patterns from one entry with equal specificity end up next to each
    # other after sorting, and can share a Files paragraph.
    order = sorted(range(len(paragraphs)), key=lambda i: specificities[i])
    ret = []
    last_key = None
    for i in order:
        entry = declarations[i].entry
        key = (entry, specificities[i]) if entry is not None else None
        if key is not None and key == last_key:
            previous = ret[-1]
            ret[-1] = previous._replace(
                pattern=previous.pattern + ' ' + paragraphs[i].pattern)
        else:
            ret.append(paragraphs[i])
        last_key = key
    return ret


def reconcile(declarations: Sequence[WildcardDeclaration],
              records: Iterable[FileRecord], atoms: Atoms,
              report: Optional[Report] = None) -> Reconciliation:
    """Work out which files are not covered correctly by the declarations.

    For each file the most specific matching declaration applies (ties go
    to the one declared last).  Files whose license differs from that
    declaration, or that no declaration matches, get an override paragraph
    with their own attribution.

    Args:
      declarations: declarations, in the order they were declared
      records: file records to check
      atoms: atom tables the records were interned in
      report: Report to add unmatched declarations to
    Returns:
      a Reconciliation
    """
    if report is None:
        report = Report()
    records = list(records)
    declared = []
    compiled = []
    for decl in declarations:
        attribution = Attribution(
            atoms.licenses.intern(decl.license),
            frozenset(atoms.statements.intern(s) for s in decl.copyright))
        declared.append(
            Paragraph(decl.pattern, attribution, decl.comment))
        compiled.append(globs_to_re([decl.pattern]))
    specificities = [specificity(decl.pattern) for decl in declarations]
    matched = [False] * len(declarations)

    overrides = []
    for record in records:
        filename = record.filename
        best = None
        for i, regex in enumerate(compiled):
            if regex.match(filename) is None:
                continue
            matched[i] = True
            if best is None or specificities[i] >= specificities[best]:
                best = i
        if best is not None and (
                declared[best].attribution.license == record.license):
            continue
        if best is None:
            logger.debug('%s: not covered by any declared pattern', filename)
        else:
            logger.debug('%s: license %s differs from %s declared for %s',
                         filename, atoms.license(record.license),
                         declarations[best].license,
                         declarations[best].pattern)
        overrides.append(
            Paragraph(escape_path(record.path), record.attribution))

    for decl, was_matched in zip(declarations, matched):
        if not was_matched:
            report.add_unmatched(
                UnmatchedLicenseDeclaration(decl.pattern, decl.license))

    overrides.sort(key=lambda p: p.pattern)
    overrides.extend(
        unshadow(overrides, [(r.path, r.attribution) for r in records]))
    return Reconciliation(
        _group_declared(declared, declarations, specificities), overrides)

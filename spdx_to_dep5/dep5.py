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

"""Rendering paragraphs as a machine-readable debian/copyright file."""

from collections import namedtuple
from typing import Iterable, Optional

from debian.copyright import (
    Copyright,
    FilesParagraph,
    License,
    LicenseParagraph,
    )

from .atoms import Atoms
from .records import Paragraph

__all__ = [
    'Intro',
    'LicenseText',
    'build_copyright',
    'format_copyright',
    'render',
    ]


NO_COPYRIGHT = 'NOASSERTION'


class Intro(namedtuple('Intro', [
        'format', 'upstream_name', 'source', 'upstream_contact'],
        defaults=(None, None, None, None))):
    """Fields for the header paragraph."""

    __slots__ = ()


class LicenseText(namedtuple('LicenseText', ['license', 'text', 'comment'],
                             defaults=('', None))):
    """A stand-alone License paragraph."""

    __slots__ = ()


def format_multiline(text: str) -> str:
    """Format text as the value of a multi-line deb822 field."""
    lines = text.strip().splitlines()
    return '\n '.join(line.rstrip() if line.strip() else '.'
                      for line in lines)


def format_copyright(statements) -> str:
    """Format copyright statements as the value of a Copyright field."""
    lines = [str(s) for s in statements]
    if not lines:
        return NO_COPYRIGHT
    return '\n '.join(lines)


def files_paragraph(paragraph: Paragraph, atoms: Atoms) -> FilesParagraph:
    attribution = paragraph.attribution
    ret = FilesParagraph.create(
        paragraph.pattern.split(),
        format_copyright(atoms.statements_for(attribution.copyrights)),
        License(atoms.license(attribution.license)))
    if paragraph.comment:
        ret.comment = format_multiline(paragraph.comment)
    return ret


def build_copyright(paragraphs: Iterable[Paragraph], atoms: Atoms,
                    intro: Optional[Intro] = None,
                    license_texts: Iterable[LicenseText] = ()
                    ) -> Copyright:
    """Build a Copyright object.

    Args:
      paragraphs: Files paragraphs, in the order they should appear
      atoms: atom tables the paragraph attributions refer to
      intro: optional header fields
      license_texts: stand-alone license paragraphs to add at the end
    Returns:
      a debian.copyright.Copyright
    """
    c = Copyright()
    if intro is not None:
        if intro.format:
            c.header.format = intro.format
        if intro.upstream_name:
            c.header.upstream_name = intro.upstream_name
        if intro.upstream_contact:
            c.header.upstream_contact = [intro.upstream_contact]
        if intro.source:
            c.header.source = intro.source
    for paragraph in paragraphs:
        c.add_files_paragraph(files_paragraph(paragraph, atoms))
    for license_text in license_texts:
        lp = LicenseParagraph.create(
            License(license_text.license, license_text.text or ''))
        if license_text.comment:
            lp.comment = format_multiline(license_text.comment)
        c.add_license_paragraph(lp)
    return c


def render(paragraphs: Iterable[Paragraph], atoms: Atoms,
           intro: Optional[Intro] = None,
           license_texts: Iterable[LicenseText] = ()) -> str:
    return build_copyright(
        paragraphs, atoms, intro=intro, license_texts=license_texts).dump()

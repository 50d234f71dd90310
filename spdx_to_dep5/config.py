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

"""Loading of wildcard license declarations.

Declarations are read either from a TOML file::

    [intro]
    upstream_name = "foo"

    [[wildcards]]
    patterns = ["*"]
    license = "MIT"
    copyright = ["2020 Alice"]

    [[license_texts]]
    license = "MIT"
    text = "..."

or from an existing machine-readable debian/copyright file.
"""

from collections import namedtuple
import logging
import os
from typing import List, Optional
import warnings

from debian.copyright import (
    Copyright,
    MachineReadableFormatError,
    NotMachineReadableError,
    globs_to_re,
    )
import tomlkit
from tomlkit.exceptions import TOMLKitError

from .dep5 import Intro, LicenseText
from .statements import UnparseableStatement, parse_statement
from .wildcards import WildcardDeclaration
from .years import YearNormalization

__all__ = [
    'ConfigError',
    'Declarations',
    'load_declarations',
    ]

logger = logging.getLogger(__name__)


INTRO_KEYS = ['format', 'upstream_name', 'source', 'upstream_contact']
WILDCARD_KEYS = ['pattern', 'patterns', 'license', 'copyright', 'comment']
LICENSE_TEXT_KEYS = ['license', 'text', 'comment']
TOP_LEVEL_KEYS = ['intro', 'wildcards', 'license_texts']


class ConfigError(Exception):
    """A declaration file could not be loaded."""

    def __init__(self, path, reason):
        super(ConfigError, self).__init__(path, reason)
        self.path = path
        self.reason = reason

    def __str__(self):
        return '%s: %s' % (self.path, self.reason)


class Declarations(namedtuple(
        'Declarations', ['intro', 'declarations', 'license_texts'])):
    """Contents of a declaration file."""

    __slots__ = ()


def _check_keys(path, section, value, supported):
    for k in value:
        if k not in supported:
            warnings.warn(f"unknown setting {k} in {section} in {path}")


def _check_pattern(path, pattern):
    if not isinstance(pattern, str) or not pattern:
        raise ConfigError(path, 'invalid pattern %r' % (pattern, ))
    if any(c.isspace() for c in pattern):
        raise ConfigError(path, 'pattern %r contains whitespace' % pattern)
    try:
        globs_to_re([pattern])
    except MachineReadableFormatError as e:
        raise ConfigError(path, 'invalid pattern %r: %s' % (pattern, e))


def _copyright_lines(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.splitlines()
    return [line.strip() for line in value if line.strip()]


def parse_declared_copyright(lines, options=None):
    """Parse declared copyright lines.

    Lines that can not be parsed are kept verbatim, so that they still end
    up in the output.
    """
    ret = []
    for line in lines:
        try:
            statement = parse_statement(line, options)
        except UnparseableStatement as e:
            logger.warning('keeping declared copyright verbatim: %s', e)
            statement = line
        if statement not in ret:
            ret.append(statement)
    return tuple(ret)


def _load_toml(path, f, options):
    try:
        data = tomlkit.load(f).unwrap()
    except TOMLKitError as e:
        raise ConfigError(path, str(e))
    _check_keys(path, 'top level', data, TOP_LEVEL_KEYS)

    intro_data = data.get('intro', {})
    if not isinstance(intro_data, dict):
        raise ConfigError(path, 'intro is not a table')
    _check_keys(path, 'intro', intro_data, INTRO_KEYS)
    intro = Intro(**{k: intro_data.get(k) for k in INTRO_KEYS})

    declarations = []
    for i, entry in enumerate(data.get('wildcards', [])):
        if not isinstance(entry, dict):
            raise ConfigError(path, 'wildcard %d is not a table' % i)
        _check_keys(path, 'wildcard %d' % i, entry, WILDCARD_KEYS)
        try:
            license = entry['license']
        except KeyError:
            raise ConfigError(path, 'wildcard %d has no license' % i)
        patterns = entry.get('patterns')
        if patterns is None:
            patterns = [entry['pattern']] if 'pattern' in entry else []
        elif isinstance(patterns, str):
            patterns = [patterns]
        if not patterns:
            raise ConfigError(path, 'wildcard %d has no patterns' % i)
        copyright = parse_declared_copyright(
            _copyright_lines(entry.get('copyright')), options)
        for pattern in patterns:
            _check_pattern(path, pattern)
            declarations.append(WildcardDeclaration(
                pattern, license, copyright, entry.get('comment'), i))

    license_texts = []
    for i, entry in enumerate(data.get('license_texts', [])):
        if not isinstance(entry, dict):
            raise ConfigError(path, 'license text %d is not a table' % i)
        _check_keys(path, 'license text %d' % i, entry, LICENSE_TEXT_KEYS)
        try:
            license = entry['license']
        except KeyError:
            raise ConfigError(path, 'license text %d has no license' % i)
        license_texts.append(LicenseText(
            license, entry.get('text') or '', entry.get('comment')))
    return Declarations(intro, declarations, license_texts)


def _load_dep5(path, f, options):
    try:
        copyright = Copyright(f, strict=False)
    except (NotMachineReadableError, MachineReadableFormatError) as e:
        raise ConfigError(path, str(e))
    header = copyright.header
    contact = header.upstream_contact
    intro = Intro(
        format=header.format,
        upstream_name=header.upstream_name,
        source=header.source,
        upstream_contact=('\n'.join(contact) if contact else None))

    declarations = []
    for i, paragraph in enumerate(copyright.all_files_paragraphs()):
        if paragraph.license is None:
            raise ConfigError(
                path, 'paragraph for %s has no license' %
                ' '.join(paragraph.files))
        statements = parse_declared_copyright(
            _copyright_lines(paragraph.copyright), options)
        for pattern in paragraph.files:
            _check_pattern(path, pattern)
            declarations.append(WildcardDeclaration(
                pattern, paragraph.license.synopsis, statements,
                paragraph.comment, i))

    license_texts = []
    for paragraph in copyright.all_license_paragraphs():
        license_texts.append(LicenseText(
            paragraph.license.synopsis, paragraph.license.text,
            paragraph.comment))
    return Declarations(intro, declarations, license_texts)


def load_declarations(path: str,
                      options: Optional[YearNormalization] = None
                      ) -> Declarations:
    """Load wildcard declarations.

    Args:
      path: path to a .toml file, or to a debian/copyright file
      options: YearNormalization for declared copyright statements
    Returns:
      a Declarations object
    Raises:
      ConfigError: if the file is malformed or not valid UTF-8
      FileNotFoundError: if the file does not exist
    """
    logger.debug('Loading declarations from %s', path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            if os.path.splitext(path)[1] == '.toml':
                return _load_toml(path, f, options)
            return _load_dep5(path, f, options)
    except UnicodeDecodeError as e:
        raise ConfigError(path, 'not valid UTF-8: %s' % e)

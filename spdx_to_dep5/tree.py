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

"""Tree of files with their attribution, and collapsing it into patterns.

The tree is folded bottom-up: a directory whose files all share a license
is covered by a single "dir/*" pattern, with the union of their copyright
statements.  Directories with mixed licenses are split, and each child is
emitted on its own.
"""

import logging
import re
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from debian.copyright import globs_to_re

from .records import (
    Attribution,
    FileRecord,
    Paragraph,
    split_path,
    )

__all__ = [
    'CopyrightDataTree',
    'DuplicatePath',
    'PathNode',
    'escape_path',
    'make_paragraphs',
    'unshadow',
    ]

logger = logging.getLogger(__name__)


class DuplicatePath(Exception):
    """The same path was added to the tree twice."""

    def __init__(self, path):
        super(DuplicatePath, self).__init__(path)
        self.path = path

    def __str__(self):
        return 'duplicate entry for path %s' % self.path


def escape_segment(segment: str) -> str:
    """Escape a path segment for use in a DEP-5 Files field.

    Glob characters are escaped; whitespace can not appear in a Files
    field, so it is matched with "?" instead.
    """
    segment = segment.replace('\\', '\\\\')
    segment = segment.replace('*', '\\*').replace('?', '\\?')
    return re.sub(r'\s', '?', segment)


def escape_path(path: Tuple[str, ...]) -> str:
    return '/'.join(escape_segment(s) for s in path)


def subtree_pattern(path: Tuple[str, ...]) -> str:
    if not path:
        return '*'
    return escape_path(path) + '/*'


class PathNode:
    """A node in the tree, named after a single path segment."""

    __slots__ = ('segment', 'children', 'attribution', 'collapsed')

    def __init__(self, segment: str):
        self.segment = segment
        self.children: Dict[str, 'PathNode'] = {}
        # Attribution of the file at this path, if there is one.
        self.attribution: Optional[Attribution] = None
        # Attribution covering this whole subtree, set by merging.
        self.collapsed: Optional[Attribution] = None

    def get_or_create_child(self, segment: str) -> 'PathNode':
        try:
            return self.children[segment]
        except KeyError:
            child = self.children[segment] = PathNode(segment)
            return child

    def is_leaf(self) -> bool:
        return not self.children

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self.segment)


def _collapse(node: PathNode) -> Optional[Attribution]:
    result = node.attribution
    uniform = True
    for child in node.children.values():
        # Always recurse, so that every subtree is merged.
        child_result = _collapse(child)
        if not uniform:
            continue
        if child_result is None:
            uniform = False
        elif result is None:
            result = child_result
        elif result.mergeable(child_result):
            result = result.merge(child_result)
        else:
            uniform = False
    node.collapsed = result if uniform else None
    return node.collapsed


class CopyrightDataTree:
    """Files and their attribution, indexed by path."""

    def __init__(self):
        self.root = PathNode('.')
        self._count = 0
        self._merged = False

    @classmethod
    def from_records(cls, records: Iterable[FileRecord]
                     ) -> 'CopyrightDataTree':
        tree = cls()
        for record in records:
            tree.insert(record.path, record.attribution)
        return tree

    def insert(self, path: Union[str, Tuple[str, ...]],
               attribution: Attribution) -> None:
        """Add a file.

        Raises:
          DuplicatePath: if there already is a file at path
        """
        if isinstance(path, str):
            path = split_path(path)
        if not path:
            raise ValueError('empty path')
        node = self.root
        for segment in path:
            node = node.get_or_create_child(segment)
        if node.attribution is not None:
            raise DuplicatePath('/'.join(path))
        node.attribution = attribution
        self._count += 1
        self._merged = False

    def __len__(self):
        return self._count

    def merge(self) -> Optional[Attribution]:
        """Collapse uniformly licensed subtrees.

        Returns:
          the attribution covering the whole tree, or None if the
          tree could not be collapsed entirely
        """
        result = _collapse(self.root)
        self._merged = True
        return result

    def files(self) -> Iterator[Tuple[Tuple[str, ...], Attribution]]:
        """Iterate over (path, attribution) for every file in the tree."""
        return _iter_files(self.root, ())

    def paragraphs(self) -> List[Paragraph]:
        if not self._merged:
            self.merge()
        paragraphs = list(_finalize(self.root, ()))
        return paragraphs + unshadow(paragraphs, self.files())


def _iter_files(node: PathNode, path: Tuple[str, ...]
                ) -> Iterator[Tuple[Tuple[str, ...], Attribution]]:
    if node.attribution is not None:
        yield path, node.attribution
    for segment in sorted(node.children):
        yield from _iter_files(node.children[segment], path + (segment, ))


def _finalize(node: PathNode, path: Tuple[str, ...]) -> Iterator[Paragraph]:
    if node.collapsed is not None:
        if node.attribution is None and len(node.children) == 1:
            [(segment, child)] = node.children.items()
            if child.children:
                # Narrow the pattern to the only directory with files.
                yield from _finalize(child, path + (segment, ))
                return
        if node.attribution is not None and path:
            yield Paragraph(escape_path(path), node.collapsed)
        if node.children:
            yield Paragraph(subtree_pattern(path), node.collapsed)
        return
    if node.attribution is not None:
        yield Paragraph(escape_path(path), node.attribution)
    for segment in sorted(node.children):
        yield from _finalize(node.children[segment], path + (segment, ))


def _has_unescaped(pattern: str, chars: str) -> bool:
    i = 0
    while i < len(pattern):
        if pattern[i] == '\\':
            i += 2
            continue
        if pattern[i] in chars:
            return True
        i += 1
    return False


def _covers(paragraph: Paragraph, attribution: Attribution) -> bool:
    return (paragraph.attribution.license == attribution.license
            and attribution.copyrights <= paragraph.attribution.copyrights)


def unshadow(paragraphs: List[Paragraph],
             files: Iterable[Tuple[Tuple[str, ...], Attribution]]
             ) -> List[Paragraph]:
    """Find files that a generated paragraph covers by accident.

    Whitespace in literal paths is written as "?", so the pattern for
    "my file.c" also matches "my_file.c".  When such a pattern is the last
    one to match a file it was not generated for, and it does not carry
    that file's license and copyright, the file needs a literal paragraph
    of its own after it.

    Only files matched by a pattern with a "?" are checked; the other
    patterns match exactly the files they were generated for.

    Args:
      paragraphs: generated paragraphs, in output order
      files: (path, attribution) tuples for every file
    Returns:
      the extra paragraphs to append, in order
    """
    files = list(files)
    extra = []
    current = list(paragraphs)
    while current:
        compiled = [(p, globs_to_re([p.pattern])) for p in current]
        suspects = [regex for (p, regex) in compiled
                    if _has_unescaped(p.pattern, '?')]
        if not suspects:
            break
        added = []
        for path, attribution in files:
            filename = '/'.join(path)
            if not any(regex.match(filename) for regex in suspects):
                continue
            last = None
            for p, regex in compiled:
                if regex.match(filename):
                    last = p
            if last is None or _covers(last, attribution):
                continue
            pattern = escape_path(path)
            if pattern == last.pattern:
                logger.warning(
                    '%s: can not be told apart from other files matching '
                    '%s', filename, pattern)
                continue
            logger.debug('%s: shadowed by %s, adding literal paragraph',
                         filename, last.pattern)
            added.append(Paragraph(pattern, attribution))
        added.sort(key=lambda p: p.pattern)
        extra.extend(added)
        current = added
    return extra


def make_paragraphs(tree: CopyrightDataTree) -> List[Paragraph]:
    """Merge a tree and return the Files paragraphs covering it."""
    tree.merge()
    return tree.paragraphs()

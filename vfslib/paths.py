# -*- coding: utf-8 -*-
# Copyright (c) 2010-2013 Raphaël Barrois
# This software is distributed under the two-clause BSD license.

"""Path representation and resolution.

Resolution is shared by every backend: a backend only provides a
``lookup`` callable telling what (if anything) lives at a canonical path.
"""

import collections
import os

from . import exceptions
from . import helpers
from .entry import EntryKind

SEP = '/'
DEFAULT_MAX_SYMLINK_DEPTH = 40


class VPath(collections.namedtuple('VPath', ['parts', 'absolute'])):
    """A path, as a tuple of components and an absoluteness flag.

    >>> str(VPath(('tmp', 'x'), True))
    '/tmp/x'
    """
    __slots__ = ()

    def __new__(cls, parts=(), absolute=True):
        return super(VPath, cls).__new__(cls, tuple(parts), bool(absolute))

    def __str__(self):
        text = SEP.join(self.parts)
        if self.absolute:
            return SEP + text
        return text or '.'

    def __fspath__(self):
        return str(self)

    def __repr__(self):
        return 'VPath(%r)' % str(self)

    @property
    def name(self):
        """Last component; '' for the root."""
        return self.parts[-1] if self.parts else ''

    @property
    def parent(self):
        if not self.parts:
            return self
        return VPath(self.parts[:-1], self.absolute)

    @property
    def is_root(self):
        return self.absolute and not self.parts

    def child(self, name):
        return VPath(self.parts + (name,), self.absolute)

    def ancestors(self):
        """All strict ancestors, from the root down.

        >>> [str(p) for p in VPath(('a', 'b', 'c')).ancestors()]
        ['/', '/a', '/a/b']
        """
        return [VPath(self.parts[:i], self.absolute) for i in range(len(self.parts))]

    def is_parent_of(self, other):
        """Whether ``other`` lies strictly below this path."""
        return (
            len(other.parts) > len(self.parts)
            and other.parts[:len(self.parts)] == self.parts
        )

    def relative_to(self, other):
        if self != other and not other.is_parent_of(self):
            raise ValueError("%s is not below %s" % (self, other))
        return VPath(self.parts[len(other.parts):], absolute=False)


ROOT_PATH = VPath()


class PathResolver(object):
    """Turns raw paths into canonical absolute VPath objects.

    Args:
        lookup: callable(VPath) => (EntryKind, target) or None; must not
            follow symlinks itself.
        max_depth: int, the maximum number of symlink substitutions for a
            single resolution.
    """

    def __init__(self, lookup, max_depth=DEFAULT_MAX_SYMLINK_DEPTH):
        self.lookup = lookup
        self.max_depth = max_depth

    @staticmethod
    def split(raw):
        """Lexically split a path into a (non-normalized) VPath."""
        if isinstance(raw, VPath):
            return raw
        try:
            text = os.fspath(raw)
        except TypeError:
            raise exceptions.InvalidPath(repr(raw))
        if isinstance(text, bytes):
            text = os.fsdecode(text)
        if not text or '\0' in text:
            raise exceptions.InvalidPath(repr(text))
        text = helpers.expand_user(text)
        return VPath(
            [part for part in text.split(SEP) if part],
            absolute=text.startswith(SEP),
        )

    def normalize(self, raw, cwd=ROOT_PATH):
        """Make a path absolute and drop '.' and '..', lexically.

        Never queries the backend.

        Raises:
            InvalidPath if a '..' would climb above the root.
        """
        path = self.split(raw)
        parts = [] if path.absolute else list(cwd.parts)
        for part in path.parts:
            if part == '.':
                continue
            elif part == '..':
                if not parts:
                    raise exceptions.InvalidPath(raw)
                parts.pop()
            else:
                parts.append(part)
        return VPath(parts, absolute=True)

    def resolve(self, raw, cwd=ROOT_PATH, follow_final_symlink=True):
        """Resolve a path to its canonical form.

        Symlinks in directory position are always substituted; the final
        component is substituted only with ``follow_final_symlink``.

        Raises:
            InvalidPath: the path is malformed or escapes the root
            NotADirectory: an existing intermediate component is not a dir
            SymlinkLoop: more than ``max_depth`` symlinks were followed
        """
        parts = self.normalize(raw, cwd).parts
        hops = 0
        index = 0
        while index < len(parts):
            current = VPath(parts[:index + 1])
            is_last = index == len(parts) - 1
            found = self.lookup(current)
            if found is None:
                # Nothing below a missing component can be a symlink.
                break

            kind, target = found
            if kind is EntryKind.SYMLINK and (follow_final_symlink or not is_last):
                hops += 1
                if hops > self.max_depth:
                    raise exceptions.SymlinkLoop(raw)
                base = self.normalize(target, current.parent)
                parts = base.parts + parts[index + 1:]
                index = 0
                continue

            if not is_last and kind is not EntryKind.DIRECTORY:
                raise exceptions.NotADirectory(current)
            index += 1

        return VPath(parts)

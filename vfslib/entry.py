# -*- coding: utf-8 -*-
# Copyright (c) 2010-2013 Raphaël Barrois
# This software is distributed under the two-clause BSD license.

"""Backend-independent description of a filesystem node."""

import collections
import enum
import stat

from . import helpers


class EntryKind(enum.Enum):
    FILE = 'file'
    DIRECTORY = 'directory'
    SYMLINK = 'symlink'

    @classmethod
    def from_mode(cls, st_mode):
        """Map a ``st_mode`` value to a kind.

        Devices, fifos and sockets are reported as files.
        """
        if stat.S_ISLNK(st_mode):
            return cls.SYMLINK
        elif stat.S_ISDIR(st_mode):
            return cls.DIRECTORY
        return cls.FILE


_EntryFields = collections.namedtuple('_EntryFields', [
    'path',
    'kind',
    'mode',
    'size',
    'mtime',
    'atime',
    'uid',
    'gid',
    'target',
    'backend',
])


class EntryRecord(_EntryFields):
    """A snapshot of a node's metadata.

    Attributes:
        path (VPath): the canonical path of the entry
        kind (EntryKind): file, directory or symlink
        mode (int): permission bits, as ``stat.S_IMODE`` returns them
        size (int): size in bytes
        mtime, atime (float): timestamps, in seconds since the epoch
        uid, gid (int): numeric owner
        target (str): verbatim symlink target, None for other kinds
        backend (BaseFS): the backend the entry was read from

    Records are immutable snapshots: use ``_replace`` to derive a modified
    copy, this never touches the filesystem.
    """
    __slots__ = ()

    @classmethod
    def from_stat(cls, path, st, backend, target=None):
        return cls(
            path=path,
            kind=EntryKind.from_mode(st.st_mode),
            mode=stat.S_IMODE(st.st_mode),
            size=st.st_size,
            mtime=st.st_mtime,
            atime=st.st_atime,
            uid=st.st_uid,
            gid=st.st_gid,
            target=target,
            backend=backend,
        )

    def __repr__(self):
        return '<EntryRecord: %s %s %o>' % (self.kind.value, self.path, self.mode)

    @property
    def name(self):
        return self.path.name

    @property
    def is_file(self):
        return self.kind is EntryKind.FILE

    @property
    def is_dir(self):
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_symlink(self):
        return self.kind is EntryKind.SYMLINK

    def owner_names(self):
        """Render the owner as (user name, group name)."""
        return helpers.user_name(self.uid), helpers.group_name(self.gid)

# -*- coding: utf-8 -*-
# Copyright (c) 2010-2013 Raphaël Barrois
# This software is distributed under the two-clause BSD license.

"""In-memory filesystem backend.

The whole tree lives in a single dict keyed by canonical VPath; nodes
never reference each other (directories only hold child names, symlinks
only hold their target text).
"""

import logging
import os
import stat
import time

from . import base
from . import exceptions
from . import paths
from .entry import EntryKind, EntryRecord

logger = logging.getLogger(__name__)


def _has_access(mode, uid, gid, target_mode, target_uid, target_gid):
    if uid == 0:
        return True
    if uid == target_uid:
        return bool(mode & target_mode & stat.S_IRWXU)
    if gid == target_gid:
        return bool((mode >> 3) & target_mode & stat.S_IRWXG)
    return bool((mode >> 6) & target_mode & stat.S_IRWXO)


class MemoryNode(object):
    kind = None

    def __init__(self, mode, uid, gid):
        self.mode = stat.S_IMODE(mode)
        self.uid = uid
        self.gid = gid
        now = time.time()
        self.atime = now
        self.mtime = now

    def access(self, mode, uid, gid):
        """Whether uid:gid may access the node in a os.*_OK mode."""
        if mode == os.F_OK:
            return True

        target_mode = 0
        if mode & os.R_OK:
            target_mode |= stat.S_IRUSR
        if mode & os.W_OK:
            target_mode |= stat.S_IWUSR
        if mode & os.X_OK:
            target_mode |= stat.S_IXUSR
        return _has_access(target_mode, uid, gid, self.mode, self.uid, self.gid)

    @property
    def size(self):
        return 0

    @property
    def target(self):
        return None

    def touch(self):
        self.mtime = time.time()

    def to_entry(self, path, backend):
        return EntryRecord(
            path=path,
            kind=self.kind,
            mode=self.mode,
            size=self.size,
            mtime=self.mtime,
            atime=self.atime,
            uid=self.uid,
            gid=self.gid,
            target=self.target,
            backend=backend,
        )


class MemoryFile(MemoryNode):
    kind = EntryKind.FILE

    def __init__(self, **kwargs):
        super(MemoryFile, self).__init__(**kwargs)
        self.content = b''

    @property
    def size(self):
        return len(self.content)

    def read(self):
        self.atime = time.time()
        return self.content

    def write(self, data, append=False):
        if append:
            self.content += data
        else:
            self.content = data
        self.touch()


class MemoryDir(MemoryNode):
    """A directory.

    Attributes:
        children (str list): names of the children, in insertion order
    """
    kind = EntryKind.DIRECTORY

    def __init__(self, **kwargs):
        super(MemoryDir, self).__init__(**kwargs)
        self.children = []

    def __contains__(self, name):
        return name in self.children

    def __iter__(self):
        return iter(self.children)

    def __len__(self):
        return len(self.children)

    def add(self, name):
        self.children.append(name)
        self.touch()

    def remove(self, name):
        self.children.remove(name)
        self.touch()


class MemorySymlink(MemoryNode):
    kind = EntryKind.SYMLINK

    def __init__(self, target, **kwargs):
        super(MemorySymlink, self).__init__(**kwargs)
        self._target = target

    @property
    def target(self):
        return self._target

    @property
    def size(self):
        return len(os.fsencode(self._target))


class MemoryFS(base.BaseFS):
    """A volatile filesystem, held in memory.

    Permission bits are enforced against the ``default_uid`` and
    ``default_gid`` identity (uid 0 bypasses them, as on a real system).
    """

    def __init__(self, **kwargs):
        super(MemoryFS, self).__init__(**kwargs)
        self._tree = {
            paths.ROOT_PATH: MemoryDir(
                mode=self.default_dir_mode,
                uid=self.default_uid,
                gid=self.default_gid,
            ),
        }

    def __repr__(self):
        return '<MemoryFS: %d entries>' % len(self._tree)

    def _get(self, path):
        try:
            return self._tree[path]
        except KeyError:
            raise exceptions.NotFound(path)

    def _check_access(self, node, path, mode):
        if not node.access(mode, self.default_uid, self.default_gid):
            raise exceptions.PermissionDenied(path)

    def _check_owner(self, node, path):
        if self.default_uid != 0 and self.default_uid != node.uid:
            raise exceptions.PermissionDenied(path)

    def _require_access(self, path, mode):
        self._check_access(self._get(path), path, mode)

    def _require_owner(self, path):
        self._check_owner(self._get(path), path)

    def _writable_parent(self, path):
        parent = self._get(path.parent)
        self._check_access(parent, path.parent, os.W_OK)
        return parent

    def _subtree(self, path):
        """Paths of path and everything below it, children before parents."""
        node = self._tree[path]
        result = []
        if node.kind is EntryKind.DIRECTORY:
            for name in node:
                result.extend(self._subtree(path.child(name)))
        result.append(path)
        return result

    def _add(self, path, node):
        parent = self._writable_parent(path)
        # Handle g+s mode
        if parent.mode & stat.S_ISGID:
            node.gid = parent.gid
        self._tree[path] = node
        parent.add(path.name)
        return parent

    # Read
    # ----

    def _probe(self, path):
        node = self._tree.get(path)
        if node is None:
            return None
        return node.kind, node.target

    def _entry(self, path):
        return self._get(path).to_entry(path, self)

    def _listdir(self, path):
        node = self._get(path)
        if node.kind is not EntryKind.DIRECTORY:
            raise exceptions.NotADirectory(path)
        self._check_access(node, path, os.R_OK)
        return list(node.children)

    def _is_empty_dir(self, path):
        return not self._get(path).children

    def _read(self, path):
        node = self._get(path)
        self._check_access(node, path, os.R_OK)
        return node.read()

    # Write
    # -----

    def _write(self, path, data, append):
        node = self._get(path)
        self._check_access(node, path, os.W_OK)
        node.write(data, append=append)

    def _create_file(self, path, mode):
        self._add(path, MemoryFile(
            mode=mode,
            uid=self.default_uid,
            gid=self.default_gid,
        ))

    def _mkdir(self, path, mode):
        new_dir = MemoryDir(
            mode=mode,
            uid=self.default_uid,
            gid=self.default_gid,
        )
        parent = self._add(path, new_dir)
        if parent.mode & stat.S_ISGID:
            new_dir.mode |= stat.S_ISGID

    def _symlink(self, target, link_path):
        self._add(link_path, MemorySymlink(target,
            mode=self.default_symlink_mode,
            uid=self.default_uid,
            gid=self.default_gid,
        ))

    def _rename(self, source, destination):
        src_parent = self._writable_parent(source)
        dst_parent = self._writable_parent(destination)

        moved = self._subtree(source)
        if destination in self._tree:
            del self._tree[destination]
            dst_parent.remove(destination.name)

        logger.debug("%r: rekeying %d entries from %s", self, len(moved), source)
        nodes = [(path, self._tree.pop(path)) for path in moved]
        for path, node in nodes:
            new_path = paths.VPath(destination.parts + path.parts[len(source.parts):])
            self._tree[new_path] = node
        src_parent.remove(source.name)
        dst_parent.add(destination.name)

    def _chmod(self, path, mode):
        node = self._get(path)
        self._check_owner(node, path)
        node.mode = mode

    def _chown(self, path, uid, gid):
        node = self._get(path)
        self._check_owner(node, path)
        if self.default_uid != 0 and uid != node.uid:
            raise exceptions.PermissionDenied(path)
        node.uid = uid
        node.gid = gid

    # Delete
    # ------

    def _rmdir(self, path):
        parent = self._writable_parent(path)
        if self._tree[path].children:
            raise exceptions.DirectoryNotEmpty(path)
        del self._tree[path]
        parent.remove(path.name)

    def _unlink(self, path):
        parent = self._writable_parent(path)
        if self._tree[path].kind is EntryKind.DIRECTORY:
            raise exceptions.IsADirectory(path)
        del self._tree[path]
        parent.remove(path.name)

    def _remove_tree(self, path):
        doomed = self._subtree(path)
        # Check every directory we are about to empty before deleting anything.
        self._writable_parent(path)
        for sub_path in doomed:
            node = self._tree[sub_path]
            if node.kind is EntryKind.DIRECTORY and node.children:
                self._check_access(node, sub_path, os.W_OK)

        logger.debug("%r: dropping %d entries below %s", self, len(doomed), path)
        for sub_path in doomed:
            del self._tree[sub_path]
        self._tree[path.parent].remove(path.name)

# -*- coding: utf-8 -*-
# Copyright (c) 2010-2013 Raphaël Barrois
# This software is distributed under the two-clause BSD license.

import contextlib
import logging
import os
import stat

from . import exceptions
from . import helpers
from . import paths
from .entry import EntryKind, EntryRecord

ROOT = paths.SEP

logger = logging.getLogger(__name__)


class FileSystem(object):
    """Single entry point for callers, whatever the active backend.

    Every call is forwarded unchanged to ``self.backend``; the facade
    never resolves a path nor touches any state itself.
    """
    def __init__(self, backend, files_encoding='utf-8', **kwargs):
        super(FileSystem, self).__init__(**kwargs)
        self.files_encoding = files_encoding
        self.backend = backend

    def __repr__(self):
        return '<FileSystem: %r>' % (self.backend,)

    def swap_backend(self, backend):
        """Replace the active backend; returns the previous one."""
        previous, self.backend = self.backend, backend
        return previous

    # Paths
    # -----

    def resolve(self, path, follow_symlinks=True):
        return self.backend.resolve(path, follow_symlinks=follow_symlinks)

    def get_cwd(self):
        return self.backend.get_cwd()

    def set_cwd(self, path):
        return self.backend.set_cwd(path)

    # Read
    # ----

    def metadata(self, path, follow_symlinks=True):
        return self.backend.metadata(path, follow_symlinks=follow_symlinks)

    def exists(self, path):
        return self.backend.exists(path)

    def is_file(self, path):
        return self.backend.is_file(path)

    def is_dir(self, path):
        return self.backend.is_dir(path)

    def is_symlink(self, path):
        return self.backend.is_symlink(path)

    def is_symlink_dir(self, path):
        return self.backend.is_symlink_dir(path)

    def is_symlink_file(self, path):
        return self.backend.is_symlink_file(path)

    def is_exec(self, path):
        return self.backend.is_exec(path)

    def is_readonly(self, path):
        return self.backend.is_readonly(path)

    def mode(self, path):
        return self.backend.mode(path)

    def readlink(self, path):
        return self.backend.readlink(path)

    def readlink_abs(self, path):
        return self.backend.readlink_abs(path)

    def list_dir(self, path, sort=False):
        return self.backend.list_dir(path, sort=sort)

    def listdir(self, path, sort=False):
        return self.backend.listdir(path, sort=sort)

    def walk(self, path, min_depth=1, max_depth=None, follow=False, sort=False,
            dirs_first=False, files_first=False, contents_first=False):
        return self.backend.walk(path, min_depth=min_depth, max_depth=max_depth,
            follow=follow, sort=sort, dirs_first=dirs_first,
            files_first=files_first, contents_first=contents_first)

    def paths(self, path):
        return self.backend.paths(path)

    def dirs(self, path):
        return self.backend.dirs(path)

    def files(self, path):
        return self.backend.files(path)

    def all_paths(self, path):
        return self.backend.all_paths(path)

    def all_dirs(self, path):
        return self.backend.all_dirs(path)

    def all_files(self, path):
        return self.backend.all_files(path)

    def read(self, path):
        return self.backend.read(path)

    def read_text(self, path, encoding=None):
        return self.backend.read_text(path, encoding=encoding or self.files_encoding)

    # Write
    # -----

    def create_file(self, path, mode=None):
        return self.backend.create_file(path, mode=mode)

    def write(self, path, data, append=False):
        return self.backend.write(path, data, append=append)

    def write_text(self, path, text, encoding=None, append=False):
        return self.backend.write_text(path, text,
            encoding=encoding or self.files_encoding, append=append)

    def copy(self, source, destination):
        return self.backend.copy(source, destination)

    def copy_tree(self, source, destination, dirs_mode=None, files_mode=None,
            follow=False):
        return self.backend.copy_tree(source, destination, dirs_mode=dirs_mode,
            files_mode=files_mode, follow=follow)

    def mkdir(self, path, recursive=False, mode=None):
        return self.backend.mkdir(path, recursive=recursive, mode=mode)

    def makedirs(self, path):
        return self.backend.makedirs(path)

    def rename(self, source, destination):
        return self.backend.rename(source, destination)

    def symlink(self, target, link_path):
        return self.backend.symlink(target, link_path)

    def chmod(self, path, mode):
        return self.backend.chmod(path, mode)

    def chmod_tree(self, path, dirs_mode=None, files_mode=None, recursive=True,
            follow=False):
        return self.backend.chmod_tree(path, dirs_mode=dirs_mode,
            files_mode=files_mode, recursive=recursive, follow=follow)

    def chown(self, path, uid, gid):
        return self.backend.chown(path, uid, gid)

    # Delete
    # ------

    def remove(self, path, recursive=False):
        return self.backend.remove(path, recursive=recursive)


class BaseFS(object):
    """A filesystem backend.

    Public methods accept any path-like input and resolve it against the
    backend's own cwd; they then call the matching ``_xxx`` primitive with
    a canonical ``VPath``. Checks shared by every backend (existence,
    entry kinds, non-empty directories) happen here, before any primitive
    mutates anything.
    """

    def __init__(self, default_umask=None, default_uid=None, default_gid=None,
            max_symlink_depth=paths.DEFAULT_MAX_SYMLINK_DEPTH, **kwargs):
        super(BaseFS, self).__init__(**kwargs)
        if default_umask is None:
            default_umask = helpers.get_active_umask()
        if default_uid is None:
            default_uid = os.getuid()
        if default_gid is None:
            default_gid = os.getgid()

        self.default_umask = default_umask
        self.default_uid = default_uid
        self.default_gid = default_gid
        self.resolver = paths.PathResolver(self._probe, max_depth=max_symlink_depth)
        self.cwd = paths.ROOT_PATH

    # umask & co
    # ----------

    @property
    def default_dir_mode(self):
        """Default dir mode, drwxrwxrwx & ~umask."""
        return (stat.S_IRWXU | stat.S_IRWXG | stat.S_IRWXO) & ~self.default_umask

    @property
    def default_file_mode(self):
        """Default file mode, -rw-rw-rw- & ~umask."""
        return (
            stat.S_IRUSR | stat.S_IWUSR
            | stat.S_IRGRP | stat.S_IWGRP
            | stat.S_IROTH | stat.S_IWOTH
        ) & ~self.default_umask

    @property
    def default_symlink_mode(self):
        """Default symlink mode, lrwxrwxrwx."""
        return stat.S_IRWXU | stat.S_IRWXG | stat.S_IRWXO

    # Path utilities
    # --------------

    def resolve(self, path, follow_symlinks=True):
        return self.resolver.resolve(path, self.cwd,
            follow_final_symlink=follow_symlinks)

    def normalize(self, path):
        """Absolute, '..'-free version of path; no symlink handling."""
        return self.resolver.normalize(path, self.cwd)

    def get_cwd(self):
        return self.cwd

    def set_cwd(self, path):
        target = self.resolve(path)
        if not self._entry(target).is_dir:
            raise exceptions.NotADirectory(target)
        logger.debug("%r: cwd %s => %s", self, self.cwd, target)
        self.cwd = target
        return target

    def _check_parent(self, path):
        """Ensure the parent of a (resolved) path is an existing directory."""
        found = self._probe(path.parent)
        if found is None:
            raise exceptions.NotFound(path)
        if found[0] is not EntryKind.DIRECTORY:
            raise exceptions.NotADirectory(path.parent)

    # Primitives
    # ----------

    def _probe(self, path):
        """What lives at a canonical path, without following it.

        Returns:
            (EntryKind, symlink target or None), or None if nothing is there.
        """
        raise NotImplementedError()

    def _entry(self, path):
        """Build the EntryRecord for a canonical path (lstat-like).

        Raises:
            NotFound if nothing is there.
        """
        raise NotImplementedError()

    def _listdir(self, path):
        """Names of the children of a canonical directory."""
        raise NotImplementedError()

    def _is_empty_dir(self, path):
        return not self._listdir(path)

    def _read(self, path):
        raise NotImplementedError()

    def _write(self, path, data, append):
        raise NotImplementedError()

    def _create_file(self, path, mode):
        raise NotImplementedError()

    def _mkdir(self, path, mode):
        raise NotImplementedError()

    def _symlink(self, target, link_path):
        """Create a symbolic link at `link_path` holding `target` verbatim."""
        raise NotImplementedError()

    def _rename(self, source, destination):
        """Move an entry; kinds and emptiness have been checked already."""
        raise NotImplementedError()

    def _chmod(self, path, mode):
        raise NotImplementedError()

    def _chown(self, path, uid, gid):
        raise NotImplementedError()

    def _rmdir(self, path):
        """Remove an empty directory."""
        raise NotImplementedError()

    def _unlink(self, path):
        """Remove a file or symlink."""
        raise NotImplementedError()

    def _require_access(self, path, mode):
        """Raise PermissionDenied unless path may be accessed in a os.*_OK mode.

        Only used to validate multi-step operations up front; the base
        implementation leaves the checks to the primitives.
        """

    def _require_owner(self, path):
        """Raise PermissionDenied unless the caller may chmod path."""

    def _remove_tree(self, path):
        """Remove a directory and its contents, children first."""
        for name in self._listdir(path):
            child = path.child(name)
            found = self._probe(child)
            if found is None:
                continue
            if found[0] is EntryKind.DIRECTORY:
                self._remove_tree(child)
            else:
                self._unlink(child)
        self._rmdir(path)

    # Read
    # ----

    def metadata(self, path, follow_symlinks=True):
        return self._entry(self.resolve(path, follow_symlinks=follow_symlinks))

    def _safe_metadata(self, path, follow_symlinks=True):
        try:
            return self.metadata(path, follow_symlinks=follow_symlinks)
        except exceptions.FSError:
            return None

    def exists(self, path):
        """Whether the path exists; dangling symlinks don't."""
        return self._safe_metadata(path) is not None

    def is_file(self, path):
        entry = self._safe_metadata(path)
        return entry is not None and entry.is_file

    def is_dir(self, path):
        entry = self._safe_metadata(path)
        return entry is not None and entry.is_dir

    def is_symlink(self, path):
        entry = self._safe_metadata(path, follow_symlinks=False)
        return entry is not None and entry.is_symlink

    def is_symlink_dir(self, path):
        return self.is_symlink(path) and self.is_dir(path)

    def is_symlink_file(self, path):
        return self.is_symlink(path) and self.is_file(path)

    def is_exec(self, path):
        entry = self._safe_metadata(path)
        return entry is not None and entry.is_file and bool(
            entry.mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))

    def is_readonly(self, path):
        entry = self._safe_metadata(path)
        return entry is not None and not (
            entry.mode & (stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH))

    def mode(self, path):
        return self.metadata(path).mode

    def readlink(self, path):
        entry = self.metadata(path, follow_symlinks=False)
        if not entry.is_symlink:
            raise exceptions.InvalidPath(entry.path)
        return entry.target

    def readlink_abs(self, path):
        """Absolute path a symlink points to, '..' removed lexically."""
        entry = self.metadata(path, follow_symlinks=False)
        if not entry.is_symlink:
            raise exceptions.InvalidPath(entry.path)
        return self.resolver.normalize(entry.target, entry.path.parent)

    def _dir_names(self, path, sort):
        target = self.resolve(path)
        if not self._entry(target).is_dir:
            raise exceptions.NotADirectory(target)
        names = list(self._listdir(target))
        if sort:
            names.sort()
        return target, names

    def listdir(self, path, sort=False):
        """Names of a directory's children, in listing order."""
        _target, names = self._dir_names(path, sort)
        return names

    def list_dir(self, path, sort=False):
        """EntryRecords of a directory's children.

        MemoryFS lists children in insertion order, OSFS in host order;
        ``sort=True`` sorts by name on every backend.
        """
        target, names = self._dir_names(path, sort)
        return [self._entry(target.child(name)) for name in names]

    def _walk_entry(self, path, follow):
        """EntryRecord for path; with follow, a symlink reports its target.

        The record keeps the walked path, so that children of a followed
        link are listed below the link.
        """
        if not follow:
            return self._entry(path)
        entry = self._entry(self.resolve(path, follow_symlinks=False))
        if entry.is_symlink:
            try:
                entry = self._entry(self.resolve(path))
            except (exceptions.NotFound, exceptions.SymlinkLoop):
                pass
        return entry._replace(path=path)

    def _walk_children(self, path, follow, sort, dirs_first, files_first):
        _target, names = self._dir_names(path, sort)
        children = [self._walk_entry(path.child(name), follow) for name in names]
        if dirs_first:
            children.sort(key=lambda entry: not entry.is_dir)
        elif files_first:
            children.sort(key=lambda entry: entry.is_dir)
        return children

    def walk(self, path, min_depth=1, max_depth=None, follow=False, sort=False,
            dirs_first=False, files_first=False, contents_first=False):
        """Yield the entries of the tree below path, depth-first.

        Args:
            min_depth (int): skip entries above this depth; path itself is
                depth 0, its children depth 1.
            max_depth (int): don't yield (nor list) entries deeper than this.
            follow (bool): descend into symlinked directories; followed
                links are reported with their target's metadata.
            sort (bool): visit siblings by name instead of listing order.
            dirs_first, files_first (bool): visit sibling directories before
                (or after) other entries.
            contents_first (bool): yield a directory after its contents.

        A directory already being visited higher up the same branch is
        yielded but not entered again.

        Raises:
            NotADirectory if path is not a directory and min_depth > 0.
        """
        top = self._entry(self.resolve(path))
        if min_depth > 0 and not top.is_dir:
            raise exceptions.NotADirectory(top.path)
        return self._walk(top, 0, (), min_depth, max_depth,
            follow, sort, dirs_first, files_first, contents_first)

    def _walk(self, entry, depth, visiting, min_depth, max_depth, follow, sort,
            dirs_first, files_first, contents_first):
        wanted = depth >= min_depth
        if wanted and not contents_first:
            yield entry

        if entry.is_dir and (max_depth is None or depth < max_depth):
            real = self.resolve(entry.path) if follow else entry.path
            if real in visiting:
                logger.debug("%r: not walking %s again (%s)", self, entry.path, real)
            else:
                children = self._walk_children(entry.path, follow, sort,
                    dirs_first, files_first)
                for child in children:
                    for sub_entry in self._walk(child, depth + 1, visiting + (real,),
                            min_depth, max_depth, follow, sort,
                            dirs_first, files_first, contents_first):
                        yield sub_entry

        if wanted and contents_first:
            yield entry

    def paths(self, path):
        """Paths of the direct children of a directory, sorted by name."""
        return [entry.path for entry in self.walk(path, max_depth=1, sort=True)]

    def dirs(self, path):
        return [entry.path for entry in self.walk(path, max_depth=1, sort=True)
            if entry.is_dir]

    def files(self, path):
        return [entry.path for entry in self.walk(path, max_depth=1, sort=True)
            if entry.is_file]

    def all_paths(self, path):
        return [entry.path for entry in self.walk(path)]

    def all_dirs(self, path):
        return [entry.path for entry in self.walk(path) if entry.is_dir]

    def all_files(self, path):
        return [entry.path for entry in self.walk(path) if entry.is_file]

    def _existing_file(self, path):
        target = self.resolve(path)
        if self._entry(target).is_dir:
            raise exceptions.IsADirectory(target)
        return target

    def read(self, path):
        return self._read(self._existing_file(path))

    def read_text(self, path, encoding='utf-8'):
        return self.read(path).decode(encoding)

    # Write
    # -----

    def create_file(self, path, mode=None):
        """Create an empty file; the parent directory must exist."""
        target = self.resolve(path, follow_symlinks=False)
        if self._probe(target) is not None:
            raise exceptions.AlreadyExists(target)
        self._check_parent(target)
        if mode is None:
            mode = self.default_file_mode
        logger.debug("%r: create %s (%o)", self, target, mode)
        self._create_file(target, stat.S_IMODE(mode))
        return target

    def write(self, path, data, append=False):
        """Replace (or extend) the content of an existing file."""
        target = self._existing_file(path)
        data = bytes(data)
        logger.debug("%r: write %d bytes to %s (append=%s)", self, len(data), target, append)
        self._write(target, data, append)
        return target

    def write_text(self, path, text, encoding='utf-8', append=False):
        return self.write(path, text.encode(encoding), append=append)

    def copy(self, source, destination):
        """Copy a file's content and permission bits.

        The destination is created if needed, and overwritten otherwise.
        """
        src = self._existing_file(source)
        return self._copy_file(src, self.resolve(destination), self._entry(src).mode)

    def _copy_file(self, src, dst, mode):
        if src == dst:
            return dst

        found = self._probe(dst)
        if found is None:
            self._check_parent(dst)
            self._require_access(dst.parent, os.W_OK)
        elif found[0] is EntryKind.DIRECTORY:
            raise exceptions.IsADirectory(dst)
        else:
            self._require_access(dst, os.W_OK)
            if self._entry(dst).mode != mode:
                self._require_owner(dst)
        data = self._read(src)

        logger.debug("%r: copy %s => %s (%o)", self, src, dst, mode)
        if found is not None:
            self._write(dst, data, False)
            if self._entry(dst).mode != mode:
                self._chmod(dst, mode)
            return dst

        # Private until the content is in place.
        self._create_file(dst, stat.S_IRUSR | stat.S_IWUSR)
        try:
            self._write(dst, data, False)
            self._chmod(dst, mode)
        except exceptions.FSError:
            self._undo([dst])
            raise
        return dst

    def _copied_link_target(self, link, destination, copied_root):
        """Target for a copy of the link entry placed at destination.

        Relative targets leaving the copied tree are rewritten to reach
        the same place from the new location; other targets are kept
        verbatim.
        """
        if link.target.startswith(paths.SEP):
            return link.target
        absolute = self.resolver.normalize(link.target, link.path.parent)
        if absolute == copied_root or copied_root.is_parent_of(absolute):
            return link.target
        return os.path.relpath(str(absolute), str(destination.parent))

    def copy_tree(self, source, destination, dirs_mode=None, files_mode=None,
            follow=False):
        """Copy a file, symlink or directory tree.

        If destination is an existing directory, source is copied inside
        it; otherwise it is copied as destination, missing parents being
        created. A file source onto an existing file overwrites it, as
        ``copy`` does.

        Args:
            dirs_mode, files_mode (int): modes for the copied directories
                and files; the source modes are kept when None.
            follow (bool): copy what symlinks point to instead of
                recreating the links.

        On failure, every entry created so far is removed again.
        """
        src = self.resolve(source, follow_symlinks=follow)
        top = self._entry(src)
        dst = self.resolve(destination)
        if src == dst:
            return dst
        if top.is_dir and (src.is_root or src.is_parent_of(dst)):
            raise exceptions.InvalidPath(dst)
        if self.is_dir(dst):
            dst = dst.child(src.name)

        found = self._probe(dst)
        if top.is_file and found is not None:
            mode = top.mode if files_mode is None else stat.S_IMODE(files_mode)
            return self._copy_file(src, dst, mode)
        if found is not None:
            raise exceptions.AlreadyExists(dst)

        if top.is_symlink:
            entries = [top]
        else:
            entries = self.walk(src, min_depth=0, follow=follow)

        logger.debug("%r: copy tree %s => %s (follow=%s)", self, src, dst, follow)
        created = []
        final_modes = []
        try:
            for ancestor in dst.ancestors():
                found = self._probe(ancestor)
                if found is None:
                    self._mkdir(ancestor, self.default_dir_mode)
                    created.append(ancestor)
                elif found[0] is not EntryKind.DIRECTORY:
                    raise exceptions.NotADirectory(ancestor)

            # Copies stay private and writable until every entry is in place.
            for entry in entries:
                target = paths.VPath(dst.parts + entry.path.relative_to(src).parts)
                if entry.is_symlink:
                    self._symlink(self._copied_link_target(entry, target, src), target)
                    created.append(target)
                elif entry.is_dir:
                    self._mkdir(target, stat.S_IRWXU)
                    created.append(target)
                    final_modes.append((target, entry.mode if dirs_mode is None else dirs_mode))
                else:
                    self._create_file(target, stat.S_IRUSR | stat.S_IWUSR)
                    created.append(target)
                    self._write(target, self._read(self.resolve(entry.path)), False)
                    final_modes.append((target, entry.mode if files_mode is None else files_mode))

            for target, mode in reversed(final_modes):
                self._chmod(target, stat.S_IMODE(mode))
        except exceptions.FSError:
            self._undo(created)
            raise
        return dst

    def _undo(self, created):
        """Remove freshly created entries, deepest first."""
        for path in reversed(created):
            found = self._probe(path)
            if found is None:
                continue
            try:
                if found[0] is EntryKind.DIRECTORY:
                    self._rmdir(path)
                else:
                    self._unlink(path)
            except exceptions.FSError as e:
                logger.warning("%r: could not roll back %s: %s", self, path, e)

    def chmod_tree(self, path, dirs_mode=None, files_mode=None, recursive=True,
            follow=False):
        """chmod the directories and files of a tree, with a mode for each kind.

        Symlinks are skipped unless ``follow`` is set, in which case their
        targets are changed (and symlinked directories entered). A None
        mode leaves that kind unchanged.

        Every entry is listed and checked for ownership before any mode
        changes; modes are then applied children first, so that a
        directory never loses access before its contents are done.
        """
        changes = []
        for entry in self.walk(path, min_depth=0, max_depth=None if recursive else 0,
                follow=follow):
            if entry.is_dir:
                mode = dirs_mode
            elif entry.is_file:
                mode = files_mode
            else:
                mode = None
            if mode is None or stat.S_IMODE(mode) == entry.mode:
                continue
            target = self.resolve(entry.path)
            self._require_owner(target)
            changes.append((target, stat.S_IMODE(mode)))

        logger.debug("%r: chmod tree %s (%d changes)", self, path, len(changes))
        for target, mode in reversed(changes):
            self._chmod(target, mode)

    def mkdir(self, path, recursive=False, mode=None):
        """Create a directory.

        With ``recursive``, missing parents are created first (see
        ``mkdir -p``); the leaf itself must not exist in either case.
        Parents created by a failed call are removed again.
        """
        target = self.resolve(path, follow_symlinks=False)
        if self._probe(target) is not None:
            raise exceptions.AlreadyExists(target)
        if mode is None:
            mode = self.default_dir_mode

        if not recursive:
            self._check_parent(target)
            logger.debug("%r: mkdir %s (%o)", self, target, mode)
            self._mkdir(target, stat.S_IMODE(mode))
            return target

        missing = []
        for ancestor in target.ancestors():
            found = self._probe(ancestor)
            if found is None:
                missing.append(ancestor)
            elif found[0] is not EntryKind.DIRECTORY:
                raise exceptions.NotADirectory(ancestor)
        first = missing[0] if missing else target
        self._require_access(first.parent, os.W_OK)

        created = []
        try:
            for ancestor in missing:
                logger.debug("%r: mkdir %s", self, ancestor)
                self._mkdir(ancestor, self.default_dir_mode)
                created.append(ancestor)
            logger.debug("%r: mkdir %s (%o)", self, target, mode)
            self._mkdir(target, stat.S_IMODE(mode))
        except exceptions.FSError:
            self._undo(created)
            raise
        return target

    def makedirs(self, path):
        """Create a directory and its parents, unless it already exists."""
        if self.is_dir(path):
            return self.resolve(path)
        return self.mkdir(path, recursive=True)

    def rename(self, source, destination):
        """Move source to destination, replacing a same-kind destination.

        Symlinks are moved themselves, never their targets.
        """
        src = self.resolve(source, follow_symlinks=False)
        dst = self.resolve(destination, follow_symlinks=False)
        src_kind = self._entry(src).kind
        if src == dst:
            return dst
        if src.is_root or src.is_parent_of(dst):
            raise exceptions.InvalidPath(dst)
        self._check_parent(dst)

        found = self._probe(dst)
        if found is not None:
            if found[0] is not src_kind:
                raise exceptions.AlreadyExists(dst)
            if found[0] is EntryKind.DIRECTORY and not self._is_empty_dir(dst):
                raise exceptions.DirectoryNotEmpty(dst)

        logger.debug("%r: rename %s => %s", self, src, dst)
        self._rename(src, dst)
        return dst

    def symlink(self, target, link_path):
        """Create link_path, pointing to target (which may not exist)."""
        link = self.resolve(link_path, follow_symlinks=False)
        target = os.fsdecode(os.fspath(target))
        if not target or '\0' in target:
            raise exceptions.InvalidPath(repr(target))
        if self._probe(link) is not None:
            raise exceptions.AlreadyExists(link)
        self._check_parent(link)
        logger.debug("%r: symlink %s -> %s", self, link, target)
        self._symlink(target, link)
        return link

    def chmod(self, path, mode):
        """Update the permission bits of a file (following symlinks).

        Example:

        >>> obj.chmod('/tmp/blah', stat.S_IRUSR)  # Switch to -r--------
        """
        target = self.resolve(path)
        self._entry(target)
        logger.debug("%r: chmod %s %o", self, target, stat.S_IMODE(mode))
        self._chmod(target, stat.S_IMODE(mode))

    def chown(self, path, uid, gid):
        target = self.resolve(path)
        self._entry(target)
        logger.debug("%r: chown %s %d:%d", self, target, uid, gid)
        self._chown(target, uid, gid)

    # Delete
    # ------

    def remove(self, path, recursive=False):
        """Remove a file, symlink or directory.

        A final symlink is removed itself, not its target.
        """
        target = self.resolve(path, follow_symlinks=False)
        if target.is_root:
            raise exceptions.PermissionDenied(target)
        entry = self._entry(target)

        logger.debug("%r: remove %s (recursive=%s)", self, target, recursive)
        if not entry.is_dir:
            self._unlink(target)
        elif self._is_empty_dir(target):
            self._rmdir(target)
        elif recursive:
            self._remove_tree(target)
        else:
            raise exceptions.DirectoryNotEmpty(target)


class OSFS(BaseFS):
    """Actual filesystem backend.

    Virtual paths are mapped below ``mapped_root``; every path is resolved
    by vfslib before reaching the host, so that host calls never have to
    follow a symlink.
    """

    def __init__(self, mapped_root=ROOT, **kwargs):
        super(OSFS, self).__init__(**kwargs)
        self.mapped_root = os.path.realpath(mapped_root)
        self.cwd = self._initial_cwd()

    def __repr__(self):
        return '<OSFS: %r>' % (self.mapped_root,)

    def _initial_cwd(self):
        try:
            host_cwd = os.path.realpath(os.getcwd())
        except OSError:
            return paths.ROOT_PATH
        if not helpers.is_parent(self.mapped_root, host_cwd):
            return paths.ROOT_PATH
        relpath = os.path.relpath(host_cwd, self.mapped_root)
        return self.resolver.normalize(helpers.join(ROOT, relpath))

    def convert_path_in(self, path):
        """Host location of a canonical VPath."""
        return os.path.join(self.mapped_root, *path.parts)

    @contextlib.contextmanager
    def _host_errors(self, path):
        try:
            yield
        except exceptions.FSError:
            raise
        except OSError as e:
            raise exceptions.translate(e, path)

    def _require_access(self, path, mode):
        if not os.access(self.convert_path_in(path), mode):
            raise exceptions.PermissionDenied(path)

    def _require_owner(self, path):
        euid = os.geteuid()
        with self._host_errors(path):
            owner = os.lstat(self.convert_path_in(path)).st_uid
        if euid != 0 and euid != owner:
            raise exceptions.PermissionDenied(path)

    # Read
    # ----

    def _probe(self, path):
        host_path = self.convert_path_in(path)
        try:
            st = os.lstat(host_path)
        except (FileNotFoundError, NotADirectoryError):
            return None
        except OSError as e:
            raise exceptions.translate(e, path)

        kind = EntryKind.from_mode(st.st_mode)
        if kind is EntryKind.SYMLINK:
            with self._host_errors(path):
                return kind, os.readlink(host_path)
        return kind, None

    def _entry(self, path):
        host_path = self.convert_path_in(path)
        with self._host_errors(path):
            st = os.lstat(host_path)
            target = os.readlink(host_path) if stat.S_ISLNK(st.st_mode) else None
        return EntryRecord.from_stat(path, st, self, target=target)

    def _listdir(self, path):
        with self._host_errors(path):
            return os.listdir(self.convert_path_in(path))

    def _read(self, path):
        with self._host_errors(path):
            with open(self.convert_path_in(path), 'rb') as f:
                return f.read()

    # Write
    # -----

    def _write(self, path, data, append):
        with self._host_errors(path):
            with open(self.convert_path_in(path), 'ab' if append else 'wb') as f:
                f.write(data)

    def _create_file(self, path, mode):
        host_path = self.convert_path_in(path)
        with self._host_errors(path):
            fd = os.open(host_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, mode)
            os.close(fd)
            # The process umask applies on top of mode; enforce the exact bits.
            os.chmod(host_path, mode)

    def _mkdir(self, path, mode):
        host_path = self.convert_path_in(path)
        with self._host_errors(path):
            os.mkdir(host_path, mode)
            os.chmod(host_path, mode)

    def _symlink(self, target, link_path):
        with self._host_errors(link_path):
            os.symlink(target, self.convert_path_in(link_path))

    def _rename(self, source, destination):
        with self._host_errors(source):
            os.rename(
                self.convert_path_in(source),
                self.convert_path_in(destination),
            )

    def _chmod(self, path, mode):
        with self._host_errors(path):
            os.chmod(self.convert_path_in(path), mode)

    def _chown(self, path, uid, gid):
        if not hasattr(os, 'chown'):
            raise exceptions.Unsupported(path)
        with self._host_errors(path):
            os.chown(self.convert_path_in(path), uid, gid)

    # Delete
    # ------

    def _rmdir(self, path):
        with self._host_errors(path):
            os.rmdir(self.convert_path_in(path))

    def _unlink(self, path):
        with self._host_errors(path):
            os.unlink(self.convert_path_in(path))

# -*- coding: utf-8 -*-
# Copyright (c) 2010-2013 Raphaël Barrois
# This software is distributed under the two-clause BSD license.

"""Common exceptions for vfslib.

Both backends raise the same classes; host errors are mapped onto them by
``translate()``.
"""

import errno
import logging

logger = logging.getLogger(__name__)


class FSError(OSError):
    """Base class of all vfslib errors.

    Subclasses set ``code`` and ``message``; instances carry the offending
    path in ``filename``.
    """
    code = None
    message = "Filesystem error"

    def __init__(self, path, code=None, message=None):
        super(FSError, self).__init__(
            code if code is not None else self.code,
            message or self.message,
            str(path),
        )


class NotFound(FSError, FileNotFoundError):
    code = errno.ENOENT
    message = "No such file or directory"


class AlreadyExists(FSError, FileExistsError):
    code = errno.EEXIST
    message = "File exists"


class NotADirectory(FSError, NotADirectoryError):
    code = errno.ENOTDIR
    message = "Not a directory"


class IsADirectory(FSError, IsADirectoryError):
    code = errno.EISDIR
    message = "Is a directory"


class DirectoryNotEmpty(FSError):
    code = errno.ENOTEMPTY
    message = "Directory not empty"


class PermissionDenied(FSError, PermissionError):
    code = errno.EACCES
    message = "Permission denied"


class InvalidPath(FSError):
    code = errno.EINVAL
    message = "Invalid path"


class SymlinkLoop(FSError):
    code = errno.ELOOP
    message = "Too many levels of symbolic links"


class Unsupported(FSError):
    code = errno.ENOTSUP
    message = "Operation not supported"


_ERRNO_MAP = {
    errno.ENOENT: NotFound,
    errno.EEXIST: AlreadyExists,
    errno.ENOTDIR: NotADirectory,
    errno.EISDIR: IsADirectory,
    errno.ENOTEMPTY: DirectoryNotEmpty,
    errno.EACCES: PermissionDenied,
    errno.EPERM: PermissionDenied,
    errno.EROFS: PermissionDenied,
    errno.EINVAL: InvalidPath,
    errno.ENAMETOOLONG: InvalidPath,
    errno.ELOOP: SymlinkLoop,
    errno.EXDEV: Unsupported,
    errno.ENOTSUP: Unsupported,
    errno.EOPNOTSUPP: Unsupported,
}


def translate(error, path):
    """Convert a host OSError into the matching FSError.

    ``path`` is the virtual path the caller asked for, so that messages
    never leak the host location of a mapped root.
    """
    if isinstance(error, FSError):
        return error
    cls = _ERRNO_MAP.get(error.errno)
    logger.debug("Translating host error %r for %s into %s",
        error, path, cls.__name__ if cls else 'FSError')
    if cls is None:
        return FSError(path, code=error.errno, message=error.strerror)
    return cls(path)

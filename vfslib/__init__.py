# -*- coding: utf-8 -*-
# Copyright (c) 2011-2020 Raphaël Barrois
# This code is distributed under the two-clause BSD License.

__version__ = '0.4.0'
__author__ = 'Raphaël Barrois <raphael.barrois+fslib@polytechnique.org>'


from .base import FileSystem, BaseFS, OSFS, ROOT
from .builders import make_memory_fs, make_os_fs
from .entry import EntryKind, EntryRecord
from .exceptions import (
    FSError,
    NotFound,
    AlreadyExists,
    NotADirectory,
    IsADirectory,
    DirectoryNotEmpty,
    PermissionDenied,
    InvalidPath,
    SymlinkLoop,
    Unsupported,
)
from .memory import MemoryFS
from .paths import PathResolver, VPath

# -*- coding: utf-8 -*-
# Copyright (c) 2010-2013 Raphaël Barrois
# This software is distributed under the two-clause BSD license.

from . import base
from . import memory


def make_memory_fs(files_encoding='utf-8', **common_flags):
    """A FileSystem over a fresh, empty MemoryFS."""
    return base.FileSystem(
        backend=memory.MemoryFS(**common_flags),
        files_encoding=files_encoding,
    )


def make_os_fs(mapped_root=base.ROOT, files_encoding='utf-8', **common_flags):
    """A FileSystem over the host, with mapped_root as its '/'."""
    return base.FileSystem(
        backend=base.OSFS(mapped_root=mapped_root, **common_flags),
        files_encoding=files_encoding,
    )

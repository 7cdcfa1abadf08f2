# -*- coding: utf-8 -*-
# Copyright (c) 2010-2013 Raphaël Barrois
# This software is distributed under the two-clause BSD license.

"""Stateless helpers used around the core.

None of these touch a vfslib backend: they work on strings, the process
environment, or the host identity databases.
"""

import grp
import os
import pwd


def get_active_umask():
    """Find the currently (OS) umask."""
    umask = os.umask(0)
    os.umask(umask)
    return umask


def is_parent(dir1, dir2):
    relpath = os.path.relpath(dir2, start=dir1)
    # If dir2 == os.path.join(dir1, x), os.path.relpath(dir2, start=dir1) == x
    return not (relpath == os.pardir or relpath.startswith(os.pardir + os.sep))


# Path strings
# ------------

def join(*parts):
    """Join path strings with '/', an absolute part restarting the path.

    >>> join('/foo', 'bar', 'baz')
    '/foo/bar/baz'
    """
    result = ''
    for part in parts:
        part = os.fspath(part)
        if part.startswith('/') or not result:
            result = part
        elif result.endswith('/'):
            result += part
        else:
            result = result + '/' + part
    return result


def strip_ext(path):
    """Remove the last extension of the final component.

    >>> strip_ext('/tmp/archive.tar.gz')
    '/tmp/archive.tar'
    >>> strip_ext('/tmp/.bashrc')
    '/tmp/.bashrc'
    """
    path = os.fspath(path)
    head, sep, base = path.rpartition('/')
    stem, dot, _ext = base.rpartition('.')
    if not dot or not stem:
        return path
    return head + sep + stem


def expand_user(path):
    """Expand a leading '~' into the user's home directory."""
    path = os.fspath(path)
    if not path.startswith('~'):
        return path
    return os.path.expanduser(path)


# XDG base directories
# --------------------

def _xdg_dir(env_var, default):
    value = os.environ.get(env_var)
    if value and os.path.isabs(value):
        return value
    return os.path.join(os.path.expanduser('~'), default)


def xdg_config_dir():
    return _xdg_dir('XDG_CONFIG_HOME', '.config')


def xdg_cache_dir():
    return _xdg_dir('XDG_CACHE_HOME', '.cache')


def xdg_data_dir():
    return _xdg_dir('XDG_DATA_HOME', os.path.join('.local', 'share'))


# Identity
# --------

def user_name(uid):
    """Name of the user with the given uid; the uid as text if unknown."""
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return str(uid)


def group_name(gid):
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return str(gid)


def uid_for(name):
    """Numeric uid for a user name.

    Raises:
        KeyError if the user is unknown.
    """
    return pwd.getpwnam(name).pw_uid


def gid_for(name):
    return grp.getgrnam(name).gr_gid

# -*- coding: utf-8 -*-
# Copyright (c) 2010-2013 Raphaël Barrois
# This software is distributed under the two-clause BSD license.

import grp
import os
import pwd
import unittest
from unittest import mock

from vfslib import helpers
from vfslib.memory import MemoryFS


class PathStringsTestCase(unittest.TestCase):

    def test_join(self):
        self.assertEqual('/foo/bar/baz', helpers.join('/foo', 'bar', 'baz'))
        self.assertEqual('/foo/bar', helpers.join('/foo/', 'bar'))
        self.assertEqual('/etc/x', helpers.join('/foo', '/etc', 'x'))
        self.assertEqual('a/b', helpers.join('a', 'b'))

    def test_strip_ext(self):
        self.assertEqual('/tmp/archive.tar', helpers.strip_ext('/tmp/archive.tar.gz'))
        self.assertEqual('/tmp/.bashrc', helpers.strip_ext('/tmp/.bashrc'))
        self.assertEqual('/tmp.d/file', helpers.strip_ext('/tmp.d/file'))
        self.assertEqual('notes', helpers.strip_ext('notes.txt'))

    def test_expand_user(self):
        with mock.patch.dict(os.environ, {'HOME': '/home/alice'}):
            self.assertEqual('/home/alice/x', helpers.expand_user('~/x'))
            self.assertEqual('/home/alice', helpers.expand_user('~'))
        self.assertEqual('/no/tilde', helpers.expand_user('/no/tilde'))

    def test_is_parent(self):
        self.assertTrue(helpers.is_parent('/a', '/a/b'))
        self.assertTrue(helpers.is_parent('/a', '/a'))
        self.assertFalse(helpers.is_parent('/a', '/b'))
        self.assertFalse(helpers.is_parent('/a/b', '/a'))

    def test_is_parent_dotted_names(self):
        self.assertTrue(helpers.is_parent('/a', '/a/..foo'))
        self.assertTrue(helpers.is_parent('/a', '/a/...'))
        self.assertFalse(helpers.is_parent('/a', '/a/../b'))


class XDGTestCase(unittest.TestCase):

    def test_from_environment(self):
        with mock.patch.dict(os.environ, {'XDG_CONFIG_HOME': '/cfg'}):
            self.assertEqual('/cfg', helpers.xdg_config_dir())

    def test_defaults(self):
        env = {'HOME': '/home/alice'}
        with mock.patch.dict(os.environ, env):
            for var in ('XDG_CONFIG_HOME', 'XDG_CACHE_HOME', 'XDG_DATA_HOME'):
                os.environ.pop(var, None)
            self.assertEqual('/home/alice/.config', helpers.xdg_config_dir())
            self.assertEqual('/home/alice/.cache', helpers.xdg_cache_dir())
            self.assertEqual('/home/alice/.local/share', helpers.xdg_data_dir())

    def test_relative_values_are_ignored(self):
        with mock.patch.dict(os.environ, {'HOME': '/home/alice', 'XDG_CACHE_HOME': 'rel'}):
            self.assertEqual('/home/alice/.cache', helpers.xdg_cache_dir())

    def test_as_vfs_input(self):
        fs = MemoryFS()
        with mock.patch.dict(os.environ, {'XDG_CONFIG_HOME': '/cfg'}):
            fs.mkdir(helpers.join(helpers.xdg_config_dir(), 'app'), recursive=True)
        self.assertTrue(fs.is_dir('/cfg/app'))


class IdentityTestCase(unittest.TestCase):

    def test_current_user(self):
        uid = os.getuid()
        name = pwd.getpwuid(uid).pw_name
        self.assertEqual(name, helpers.user_name(uid))
        self.assertEqual(uid, helpers.uid_for(name))

    def test_current_group(self):
        gid = os.getgid()
        name = grp.getgrgid(gid).gr_name
        self.assertEqual(name, helpers.group_name(gid))
        self.assertEqual(gid, helpers.gid_for(name))

    def test_unknown_ids(self):
        with mock.patch.object(pwd, 'getpwuid', side_effect=KeyError(4242)):
            self.assertEqual('4242', helpers.user_name(4242))
        with mock.patch.object(grp, 'getgrgid', side_effect=KeyError(4242)):
            self.assertEqual('4242', helpers.group_name(4242))

    def test_entry_owner_names(self):
        fs = MemoryFS()
        fs.create_file('/f')
        entry = fs.metadata('/f')
        self.assertEqual(
            (helpers.user_name(entry.uid), helpers.group_name(entry.gid)),
            entry.owner_names(),
        )

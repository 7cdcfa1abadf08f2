# -*- coding: utf-8 -*-
# Copyright (c) 2010-2013 Raphaël Barrois
# This software is distributed under the two-clause BSD license.

import os
import unittest
from unittest import mock

from vfslib import exceptions
from vfslib.entry import EntryKind
from vfslib.paths import PathResolver, VPath, ROOT_PATH


def P(text):
    return PathResolver.split(text)


class VPathTestCase(unittest.TestCase):

    def test_str(self):
        self.assertEqual('/', str(ROOT_PATH))
        self.assertEqual('/a/b', str(VPath(('a', 'b'))))
        self.assertEqual('a/b', str(VPath(('a', 'b'), absolute=False)))
        self.assertEqual('.', str(VPath((), absolute=False)))

    def test_fspath(self):
        self.assertEqual('/tmp/x', os.fspath(VPath(('tmp', 'x'))))

    def test_hashable(self):
        self.assertEqual({VPath(('a',)): 1}[P('/a')], 1)

    def test_family(self):
        path = P('/a/b/c')
        self.assertEqual('c', path.name)
        self.assertEqual(P('/a/b'), path.parent)
        self.assertEqual(P('/a/b/c/d'), path.child('d'))
        self.assertEqual([P('/'), P('/a'), P('/a/b')], path.ancestors())
        self.assertEqual(ROOT_PATH, ROOT_PATH.parent)
        self.assertTrue(ROOT_PATH.is_root)
        self.assertEqual('', ROOT_PATH.name)

    def test_is_parent_of(self):
        self.assertTrue(P('/a').is_parent_of(P('/a/b')))
        self.assertTrue(ROOT_PATH.is_parent_of(P('/a')))
        self.assertFalse(P('/a').is_parent_of(P('/a')))
        self.assertFalse(P('/a').is_parent_of(P('/ab')))

    def test_relative_to(self):
        self.assertEqual('b/c', str(P('/a/b/c').relative_to(P('/a'))))
        with self.assertRaises(ValueError):
            P('/x').relative_to(P('/a'))


class SplitTestCase(unittest.TestCase):

    def test_split_keeps_dots(self):
        path = PathResolver.split('a/./../b/')
        self.assertEqual(('a', '.', '..', 'b'), path.parts)
        self.assertFalse(path.absolute)

    def test_empty(self):
        with self.assertRaises(exceptions.InvalidPath):
            PathResolver.split('')

    def test_nul_byte(self):
        with self.assertRaises(exceptions.InvalidPath):
            PathResolver.split('/a\0b')

    def test_not_a_path(self):
        with self.assertRaises(exceptions.InvalidPath):
            PathResolver.split(42)

    def test_bytes(self):
        self.assertEqual(P('/a/b'), PathResolver.split(b'/a/b'))

    def test_tilde(self):
        with mock.patch.dict(os.environ, {'HOME': '/home/alice'}):
            self.assertEqual(P('/home/alice/notes'), PathResolver.split('~/notes'))


class NormalizeTestCase(unittest.TestCase):

    def setUp(self):
        def lookup(path):
            raise AssertionError("normalize() must not query the backend")
        self.resolver = PathResolver(lookup)

    def test_dot_dot(self):
        self.assertEqual(P('/x/z'), self.resolver.normalize('/x/y/../z'))

    def test_escape_root(self):
        with self.assertRaises(exceptions.InvalidPath):
            self.resolver.normalize('/x/../../y')

    def test_escape_root_from_cwd(self):
        with self.assertRaises(exceptions.InvalidPath):
            self.resolver.normalize('../../..', P('/a/b'))

    def test_relative(self):
        self.assertEqual(P('/home/a/b'), self.resolver.normalize('./b', P('/home/a')))
        self.assertEqual(P('/home/b'), self.resolver.normalize('../b', P('/home/a')))

    def test_root(self):
        self.assertEqual(ROOT_PATH, self.resolver.normalize('/'))
        self.assertEqual(ROOT_PATH, self.resolver.normalize('//./'))


class ResolveTestCase(unittest.TestCase):
    """Resolution against a plain dict standing for a backend."""

    def setUp(self):
        self.nodes = {
            P('/'): (EntryKind.DIRECTORY, None),
        }
        self.resolver = PathResolver(self.nodes.get, max_depth=40)

    def add_dir(self, text):
        self.nodes[P(text)] = (EntryKind.DIRECTORY, None)

    def add_file(self, text):
        self.nodes[P(text)] = (EntryKind.FILE, None)

    def add_link(self, text, target):
        self.nodes[P(text)] = (EntryKind.SYMLINK, target)

    def test_missing_components(self):
        self.assertEqual(P('/x/z'), self.resolver.resolve('/x/y/../z'))

    def test_relative_to_cwd(self):
        self.add_dir('/home')
        self.assertEqual(P('/home/f'), self.resolver.resolve('f', P('/home')))

    def test_intermediate_symlink(self):
        self.add_dir('/real')
        self.add_link('/link', '/real')
        self.assertEqual(P('/real/f'), self.resolver.resolve('/link/f'))

    def test_relative_symlink(self):
        self.add_dir('/a')
        self.add_dir('/a/b')
        self.add_link('/a/link', 'b')
        self.add_link('/a/up', '../a/b')
        self.assertEqual(P('/a/b/f'), self.resolver.resolve('/a/link/f'))
        self.assertEqual(P('/a/b'), self.resolver.resolve('/a/up'))

    def test_final_symlink(self):
        self.add_file('/f')
        self.add_link('/l', 'f')
        self.assertEqual(P('/f'), self.resolver.resolve('/l'))
        self.assertEqual(P('/l'), self.resolver.resolve('/l', follow_final_symlink=False))

    def test_intermediate_symlink_followed_without_final(self):
        self.add_dir('/d')
        self.add_link('/l', '/d')
        self.add_link('/d/inner', '/nowhere')
        self.assertEqual(
            P('/d/inner'),
            self.resolver.resolve('/l/inner', follow_final_symlink=False),
        )

    def test_dangling_symlink(self):
        self.add_link('/l', '/missing/file')
        self.assertEqual(P('/missing/file'), self.resolver.resolve('/l'))

    def test_loop(self):
        self.add_link('/a', 'b')
        self.add_link('/b', 'a')
        with self.assertRaises(exceptions.SymlinkLoop):
            self.resolver.resolve('/a')

    def test_self_loop(self):
        self.add_link('/a', '/a')
        with self.assertRaises(exceptions.SymlinkLoop):
            self.resolver.resolve('/a/b', follow_final_symlink=False)

    def test_depth_limit(self):
        self.add_file('/f')
        self.add_link('/l1', 'f')
        self.add_link('/l2', 'l1')
        self.add_link('/l3', 'l2')
        self.assertEqual(P('/f'), self.resolver.resolve('/l3'))

        short = PathResolver(self.nodes.get, max_depth=2)
        with self.assertRaises(exceptions.SymlinkLoop):
            short.resolve('/l3')

    def test_symlink_escaping_root(self):
        self.add_link('/l', '../../etc')
        with self.assertRaises(exceptions.InvalidPath):
            self.resolver.resolve('/l')

    def test_file_in_directory_position(self):
        self.add_file('/f')
        with self.assertRaises(exceptions.NotADirectory):
            self.resolver.resolve('/f/x')

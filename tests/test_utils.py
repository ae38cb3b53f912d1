########################################################################
# File name: test_utils.py
# This file is part of: mucfirstn
#
# LICENSE
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Lesser General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.
#
# This program is distributed in the hope that it will be useful, but
# WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this program.  If not, see
# <http://www.gnu.org/licenses/>.
#
########################################################################
import unittest

import mucfirstn.utils as utils


class TestNamespaces(unittest.TestCase):
    def setUp(self):
        self.namespaces = utils.Namespaces()

    def test_define(self):
        self.namespaces.foo = "urn:example:foo"
        self.assertEqual("urn:example:foo", self.namespaces.foo)

    def test_same_value_twice_is_ok(self):
        self.namespaces.foo = "urn:example:foo"
        self.namespaces.foo = "urn:example:foo"

    def test_no_duplicate_short_hands(self):
        self.namespaces.foo = "urn:example:foo"
        with self.assertRaisesRegex(ValueError, "already defined"):
            self.namespaces.bar = "urn:example:foo"

    def test_no_redefinition(self):
        self.namespaces.foo = "urn:example:foo"
        with self.assertRaisesRegex(ValueError, "redefinition"):
            self.namespaces.foo = "urn:example:bar"

    def test_no_deletion(self):
        self.namespaces.foo = "urn:example:foo"
        with self.assertRaises(AttributeError):
            del self.namespaces.foo

    def test_global_namespaces(self):
        self.assertEqual("jabber:client", utils.namespaces.client)
        self.assertEqual(
            "http://jabber.org/protocol/muc#user",
            utils.namespaces.xep0045_muc_user,
        )


class Testsplit_list(unittest.TestCase):
    def test_whitespace_and_commas(self):
        self.assertEqual(
            ["a", "b", "c", "d"],
            utils.split_list(" a, b,,c\n\td "),
        )

    def test_empty(self):
        self.assertEqual([], utils.split_list(""))
        self.assertEqual([], utils.split_list(" , "))

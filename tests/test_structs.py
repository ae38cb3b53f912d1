########################################################################
# File name: test_structs.py
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

import mucfirstn.structs as structs


class TestPresenceType(unittest.TestCase):
    def test_available_is_none(self):
        self.assertIsNone(structs.PresenceType.AVAILABLE.value)
        self.assertEqual(
            structs.PresenceType.AVAILABLE,
            structs.PresenceType(None),
        )

    def test_is_error(self):
        for member in structs.PresenceType:
            self.assertEqual(
                member == structs.PresenceType.ERROR,
                member.is_error,
            )

    def test_is_presence_state(self):
        self.assertTrue(structs.PresenceType.AVAILABLE.is_presence_state)
        self.assertTrue(structs.PresenceType.UNAVAILABLE.is_presence_state)
        self.assertFalse(structs.PresenceType.ERROR.is_presence_state)
        self.assertFalse(structs.PresenceType.SUBSCRIBE.is_presence_state)


class TestIQType(unittest.TestCase):
    def test_is_request(self):
        self.assertTrue(structs.IQType.GET.is_request)
        self.assertTrue(structs.IQType.SET.is_request)
        self.assertFalse(structs.IQType.RESULT.is_request)
        self.assertFalse(structs.IQType.ERROR.is_request)

    def test_is_response(self):
        self.assertFalse(structs.IQType.GET.is_response)
        self.assertFalse(structs.IQType.SET.is_response)
        self.assertTrue(structs.IQType.RESULT.is_response)
        self.assertTrue(structs.IQType.ERROR.is_response)

    def test_is_error(self):
        self.assertTrue(structs.IQType.ERROR.is_error)
        self.assertFalse(structs.IQType.RESULT.is_error)


class TestJID(unittest.TestCase):
    def test_init_full(self):
        j = structs.JID("foo", "example.com", "bar")
        self.assertEqual("foo", j.localpart)
        self.assertEqual("example.com", j.domain)
        self.assertEqual("bar", j.resource)

    def test_init_nodeprep_and_nameprep(self):
        j = structs.JID("Foo", "EXAMPLE.com", "Bar")
        self.assertEqual("foo", j.localpart)
        self.assertEqual("example.com", j.domain)
        self.assertEqual("Bar", j.resource)

    def test_init_rejects_empty_domain(self):
        with self.assertRaisesRegex(ValueError, "domain"):
            structs.JID("foo", "", "bar")
        with self.assertRaisesRegex(ValueError, "domain"):
            structs.JID("foo", None, "bar")

    def test_init_rejects_prohibited_localpart_characters(self):
        with self.assertRaises(ValueError):
            structs.JID("foo bar", "example.com", None)
        with self.assertRaises(ValueError):
            structs.JID("foo@bar", "example.com", None)

    def test_init_rejects_too_long_parts(self):
        with self.assertRaisesRegex(ValueError, "too long"):
            structs.JID("x" * 1024, "example.com", None)

    def test_brackets_are_valid_in_localpart(self):
        j = structs.JID("[team1]standup", "conference.example.com", None)
        self.assertEqual("[team1]standup", j.localpart)

    def test_fromstr_full(self):
        j = structs.JID.fromstr("foo@example.com/bar/baz")
        self.assertEqual(
            structs.JID("foo", "example.com", "bar/baz"),
            j,
        )

    def test_fromstr_domain_only(self):
        j = structs.JID.fromstr("example.com")
        self.assertIsNone(j.localpart)
        self.assertIsNone(j.resource)
        self.assertTrue(j.is_domain)

    def test_fromstr_bare(self):
        j = structs.JID.fromstr("foo@example.com")
        self.assertTrue(j.is_bare)
        self.assertFalse(j.is_domain)

    def test_str_roundtrip(self):
        for s in ["foo@example.com/bar", "example.com", "foo@example.com",
                  "example.com/res"]:
            self.assertEqual(s, str(structs.JID.fromstr(s)))

    def test_bare_strips_resource(self):
        j = structs.JID.fromstr("foo@example.com/bar")
        self.assertEqual(
            structs.JID.fromstr("foo@example.com"),
            j.bare(),
        )

    def test_bare_returns_self_if_already_bare(self):
        j = structs.JID.fromstr("foo@example.com")
        self.assertIs(j, j.bare())

    def test_replace(self):
        j = structs.JID.fromstr("foo@example.com/bar")
        self.assertEqual(
            structs.JID.fromstr("foo@example.org/bar"),
            j.replace(domain="example.org"),
        )

    def test_replace_preps(self):
        j = structs.JID.fromstr("foo@example.com")
        self.assertEqual("baz", j.replace(localpart="BAZ").localpart)

    def test_replace_rejects_unknown_keyword(self):
        j = structs.JID.fromstr("foo@example.com")
        with self.assertRaises(TypeError):
            j.replace(foo="bar")

    def test_hashable_and_comparable(self):
        j1 = structs.JID.fromstr("Foo@example.com")
        j2 = structs.JID.fromstr("foo@example.com")
        self.assertEqual(j1, j2)
        self.assertEqual(hash(j1), hash(j2))
        self.assertIn(j2, {j1})

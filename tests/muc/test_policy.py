########################################################################
# File name: test_policy.py
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

import mucfirstn.muc.policy as policy

from mucfirstn.config import ModerationSpec
from mucfirstn.structs import JID
from mucfirstn.testutils import make_session


TEST_SUBDOMAIN_ROOM = JID.fromstr("[team1]standup@conference.example.com")
TEST_OTHER_SUBDOMAIN_ROOM = JID.fromstr(
    "[team3]standup@conference.example.com"
)
TEST_PLAIN_ROOM = JID.fromstr("retro@conference.example.com")
TEST_OTHER_ROOM = JID.fromstr("lunch@conference.example.com")

TEST_SPEC = ModerationSpec(
    moderated_subdomains={"team1", "team2"},
    moderated_rooms={"retro"},
)


class Testextract_subdomain(unittest.TestCase):
    def test_with_subdomain(self):
        self.assertEqual(
            ("team1", "standup"),
            policy.extract_subdomain("[team1]standup"),
        )

    def test_without_subdomain(self):
        self.assertEqual((None, "standup"),
                         policy.extract_subdomain("standup"))

    def test_unterminated_prefix(self):
        self.assertEqual((None, "[team1standup"),
                         policy.extract_subdomain("[team1standup"))

    def test_bracket_not_at_start(self):
        self.assertEqual((None, "stand[up]"),
                         policy.extract_subdomain("stand[up]"))

    def test_empty_parts(self):
        self.assertEqual(("", "room"), policy.extract_subdomain("[]room"))
        self.assertEqual(("team1", ""), policy.extract_subdomain("[team1]"))


class Testclassify(unittest.TestCase):
    def test_inactive_spec_never_moderates(self):
        for spec in [ModerationSpec(),
                     ModerationSpec(disable_revoke_owners=True)]:
            for jid in [TEST_SUBDOMAIN_ROOM, TEST_PLAIN_ROOM,
                        TEST_OTHER_ROOM]:
                self.assertIs(policy.NOT_MODERATED,
                              policy.classify(spec, jid))

    def test_moderated_subdomain(self):
        result = policy.classify(TEST_SPEC, TEST_SUBDOMAIN_ROOM)
        self.assertTrue(result)
        self.assertEqual(
            policy.RoomClassification(True, "standup", "team1"),
            result,
        )

    def test_other_subdomain_is_not_moderated(self):
        result = policy.classify(TEST_SPEC, TEST_OTHER_SUBDOMAIN_ROOM)
        self.assertFalse(result)
        self.assertIsNone(result.room_name)

    def test_subdomain_room_ignores_room_names(self):
        spec = ModerationSpec(moderated_rooms={"standup"})
        self.assertFalse(policy.classify(spec, TEST_OTHER_SUBDOMAIN_ROOM))

    def test_moderated_room_name(self):
        self.assertEqual(
            policy.RoomClassification(True, "retro", None),
            policy.classify(TEST_SPEC, TEST_PLAIN_ROOM),
        )

    def test_room_name_depends_only_on_room_set(self):
        spec = ModerationSpec(moderated_subdomains={"lunch"})
        self.assertFalse(policy.classify(spec, TEST_OTHER_ROOM))
        self.assertFalse(policy.classify(TEST_SPEC, TEST_OTHER_ROOM))

    def test_domain_jid_is_not_moderated(self):
        self.assertFalse(policy.classify(
            TEST_SPEC,
            JID.fromstr("conference.example.com"),
        ))

    def test_uses_localpart_only(self):
        self.assertTrue(policy.classify(
            TEST_SPEC,
            JID.fromstr("retro@conference.other.example/nick"),
        ))


class Testauthorize(unittest.TestCase):
    def test_no_session(self):
        result = policy.authorize(None, "standup", "team1")
        self.assertFalse(result)
        self.assertEqual(policy.DenialReason.NO_TOKEN, result.reason)

    def test_no_token(self):
        for token in [None, ""]:
            session = make_session(auth_token=token, room_name="standup",
                                   context_group="team1")
            self.assertEqual(
                policy.Authorization(False, policy.DenialReason.NO_TOKEN),
                policy.authorize(session, "standup", "team1"),
            )

    def test_room_mismatch(self):
        session = make_session(auth_token="t", room_name="retro",
                               context_group="team1")
        self.assertEqual(
            policy.DenialReason.ROOM_MISMATCH,
            policy.authorize(session, "standup", "team1").reason,
        )

    def test_missing_room_claim_is_mismatch(self):
        session = make_session(auth_token="t", context_group="team1")
        self.assertEqual(
            policy.DenialReason.ROOM_MISMATCH,
            policy.authorize(session, "standup", "team1").reason,
        )

    def test_wildcard_room(self):
        session = make_session(auth_token="t", room_name="*",
                               context_group="team1")
        self.assertIs(policy.ALLOWED,
                      policy.authorize(session, "standup", "team1"))

    def test_subdomain_mismatch(self):
        session = make_session(auth_token="t", room_name="standup",
                               context_group="team2")
        self.assertEqual(
            policy.DenialReason.SUBDOMAIN_MISMATCH,
            policy.authorize(session, "standup", "team1").reason,
        )

    def test_subdomain_claim_for_room_without_subdomain(self):
        session = make_session(auth_token="t", room_name="retro",
                               context_group="team1")
        self.assertFalse(policy.authorize(session, "retro", None))

    def test_both_subdomains_absent(self):
        session = make_session(auth_token="t", room_name="retro")
        result = policy.authorize(session, "retro", None)
        self.assertTrue(result)
        self.assertIsNone(result.reason)

    def test_token_is_checked_first(self):
        session = make_session(room_name="other", context_group="other")
        self.assertEqual(
            policy.DenialReason.NO_TOKEN,
            policy.authorize(session, "standup", "team1").reason,
        )

    def test_denial_is_logged(self):
        session = make_session(auth_token="t", room_name="retro")
        with self.assertLogs("mucfirstn.muc.policy", "DEBUG") as ctx:
            policy.authorize(session, "standup", None)
        self.assertEqual(1, len(ctx.output))
        self.assertIn("'retro'", ctx.output[0])

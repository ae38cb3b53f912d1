########################################################################
# File name: test_tracker.py
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
import threading
import unittest
import unittest.mock

from mucfirstn.muc.tracker import PromotionState, PromotionTracker
from mucfirstn.structs import JID
from mucfirstn.testutils import make_listener


TEST_A = JID.fromstr("a@example.com/res1")
TEST_B = JID.fromstr("b@example.com/res2")


class TestPromotionTracker(unittest.TestCase):
    def setUp(self):
        self.t = PromotionTracker()
        self.listener = make_listener(self.t)

    def tearDown(self):
        del self.t

    def test_initially_empty(self):
        self.assertTrue(self.t.is_empty())
        self.assertEqual(0, len(self.t))
        self.assertEqual(PromotionState.NONE, self.t.state(TEST_A))

    def test_mark_pending(self):
        self.t.mark_pending(TEST_A)

        self.assertFalse(self.t.is_empty())
        self.assertTrue(self.t.is_pending(TEST_A))
        self.assertIn(TEST_A, self.t)
        self.assertNotIn(TEST_B, self.t)
        self.assertEqual(PromotionState.PENDING, self.t.state(TEST_A))
        self.listener.on_state_changed.assert_called_once_with(
            TEST_A.bare(),
            PromotionState.NONE,
            PromotionState.PENDING,
        )

    def test_keys_are_bare(self):
        self.t.mark_pending(TEST_A)
        self.assertTrue(self.t.is_pending(TEST_A.bare()))
        self.assertTrue(self.t.is_pending(TEST_A.replace(resource="other")))

    def test_mark_pending_twice(self):
        self.t.mark_pending(TEST_A)
        self.t.mark_pending(TEST_A)
        self.assertEqual(1, len(self.t))
        self.assertEqual(1, len(self.listener.on_state_changed.mock_calls))

    def test_take_if_pending_is_idempotent(self):
        self.t.mark_pending(TEST_A)

        self.assertTrue(self.t.take_if_pending(TEST_A))
        self.assertFalse(self.t.take_if_pending(TEST_A))
        self.assertTrue(self.t.is_empty())

        self.assertSequenceEqual(
            [
                unittest.mock.call(TEST_A.bare(),
                                   PromotionState.NONE,
                                   PromotionState.PENDING),
                unittest.mock.call(TEST_A.bare(),
                                   PromotionState.PENDING,
                                   PromotionState.PROMOTED),
            ],
            self.listener.on_state_changed.mock_calls
        )

    def test_take_if_pending_unknown(self):
        self.assertFalse(self.t.take_if_pending(TEST_A))
        self.listener.on_state_changed.assert_not_called()

    def test_take_only_affects_given_occupant(self):
        self.t.mark_pending(TEST_A)
        self.t.mark_pending(TEST_B)

        self.assertTrue(self.t.take_if_pending(TEST_B))
        self.assertTrue(self.t.is_pending(TEST_A))
        self.assertFalse(self.t.is_pending(TEST_B))

    def test_clear_if_present(self):
        self.t.mark_pending(TEST_A)
        self.listener.on_state_changed.reset_mock()

        self.assertTrue(self.t.clear_if_present(TEST_A))
        self.assertFalse(self.t.clear_if_present(TEST_A))
        self.assertFalse(self.t.take_if_pending(TEST_A))

        self.listener.on_state_changed.assert_called_once_with(
            TEST_A.bare(),
            PromotionState.PENDING,
            PromotionState.NONE,
        )

    def test_rejoin_after_promotion(self):
        self.t.mark_pending(TEST_A)
        self.t.take_if_pending(TEST_A)
        self.t.mark_pending(TEST_A)
        self.assertTrue(self.t.take_if_pending(TEST_A))

    def test_trackers_are_independent(self):
        other = PromotionTracker()
        self.t.mark_pending(TEST_A)
        self.assertTrue(other.is_empty())

    def test_concurrent_take_yields_single_winner(self):
        jids = [JID("user{}".format(i), "example.com", None)
                for i in range(200)]
        for jid in jids:
            self.t.mark_pending(jid)

        results = []
        results_lock = threading.Lock()
        barrier = threading.Barrier(4)

        def worker():
            barrier.wait()
            taken = [jid for jid in jids if self.t.take_if_pending(jid)]
            with results_lock:
                results.extend(taken)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertCountEqual(jids, results)
        self.assertTrue(self.t.is_empty())

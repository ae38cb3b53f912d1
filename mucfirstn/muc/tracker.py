########################################################################
# File name: tracker.py
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
import enum
import threading

import mucfirstn.callbacks


class PromotionState(enum.Enum):
    """
    State of one occupant with respect to the automatic promotion.

    .. attribute:: NONE

       Not selected for promotion (or the join failed).

    .. attribute:: PENDING

       Selected during pre-join; the joined event has not been processed
       yet. Presence about the occupant is suppressed in this state.

    .. attribute:: PROMOTED

       The joined event consumed the pending mark and the owner affiliation
       is being granted. This state is not stored; it is only reported via
       :meth:`PromotionTracker.on_state_changed`.
    """

    NONE = "none"
    PENDING = "pending"
    PROMOTED = "promoted"


class PromotionTracker:
    """
    The set of occupants which passed pre-join, will be promoted and have
    not been consumed by their joined event yet.

    One tracker is shared by the join handlers and the presence filters of
    all sessions. All keys are normalised to bare JIDs. Mutations are
    serialised by a lock so that hooks and filters may run on different
    threads.

    Under normal operation the tracker holds only the occupants which are
    in the middle of joining.

    .. automethod:: mark_pending

    .. automethod:: take_if_pending

    .. automethod:: clear_if_present

    .. automethod:: is_empty

    .. automethod:: is_pending

    .. automethod:: state

    .. signal:: on_state_changed(jid, old_state, new_state)

       Fired after each transition, outside of the lock.
    """

    on_state_changed = mucfirstn.callbacks.Signal()

    def __init__(self):
        super().__init__()
        self._lock = threading.Lock()
        self._pending = {}

    def mark_pending(self, jid):
        """
        Select the bare form of `jid` for promotion.
        """
        jid = jid.bare()
        with self._lock:
            was_pending = jid in self._pending
            self._pending[jid] = True
        if not was_pending:
            self.on_state_changed(jid,
                                  PromotionState.NONE,
                                  PromotionState.PENDING)

    def take_if_pending(self, jid):
        """
        Remove the mark of `jid` and return whether it was set.

        Read and removal are atomic; a second call for the same `jid`
        returns false.
        """
        jid = jid.bare()
        with self._lock:
            taken = self._pending.pop(jid, None) is not None
        if taken:
            self.on_state_changed(jid,
                                  PromotionState.PENDING,
                                  PromotionState.PROMOTED)
        return taken

    def clear_if_present(self, jid):
        """
        Drop the mark of `jid` because its join failed. Return whether a
        mark was removed.
        """
        jid = jid.bare()
        with self._lock:
            cleared = self._pending.pop(jid, None) is not None
        if cleared:
            self.on_state_changed(jid,
                                  PromotionState.PENDING,
                                  PromotionState.NONE)
        return cleared

    def is_empty(self):
        """
        Return true if no occupant is pending. Does not take the lock.
        """
        return not self._pending

    def is_pending(self, jid):
        return jid.bare() in self._pending

    def state(self, jid):
        if self.is_pending(jid):
            return PromotionState.PENDING
        return PromotionState.NONE

    def __contains__(self, jid):
        return self.is_pending(jid)

    def __len__(self):
        return len(self._pending)

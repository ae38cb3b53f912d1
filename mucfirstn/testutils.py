########################################################################
# File name: testutils.py
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
"""
This module contains utilities used for testing mucfirstn code and code
which embeds it.
"""
import unittest.mock

import mucfirstn.callbacks as callbacks
import mucfirstn.host
import mucfirstn.muc.xso as muc_xso
import mucfirstn.stanza
import mucfirstn.structs


def make_listener(instance):
    """
    Return a :class:`unittest.mock.Mock` which has children connected to each
    :class:`mucfirstn.callbacks.Signal` of `instance`.

    The children are named exactly like the signals.
    """
    result = unittest.mock.Mock([])
    names = {
        name
        for type_ in type(instance).__mro__
        for name in type_.__dict__
    }
    for name in names:
        signal = getattr(instance, name)
        if not isinstance(signal, callbacks.AdHocSignal):
            continue
        cb = unittest.mock.Mock()
        setattr(result, name, cb)
        cb.return_value = None
        signal.connect(cb)
    return result


class RoomMock(unittest.mock.Mock):
    """
    Mock of a :class:`mucfirstn.host.AbstractRoom` which keeps a settable
    :attr:`occupant_count`.
    """

    def __init__(self, jid, occupant_count=0):
        super().__init__([
            "jid",
            "occupant_count",
            "set_affiliation",
        ])
        self.jid = jid
        self.occupant_count = occupant_count
        self.set_affiliation.return_value = None

    def _get_child_mock(self, **kw):
        return unittest.mock.Mock(**kw)


def make_room(jid, occupant_count=0):
    if isinstance(jid, str):
        jid = mucfirstn.structs.JID.fromstr(jid)
    return RoomMock(jid, occupant_count)


def make_session(*, auth_token=None, room_name=None, context_group=None,
                 jid=None, transport=None):
    """
    Create a :class:`mucfirstn.host.Session` whose transport is a
    :class:`unittest.mock.Mock` (available as the return value's
    ``transport`` attribute) unless `transport` is given.
    """
    if transport is None:
        transport = unittest.mock.Mock()
    session = mucfirstn.host.Session(
        transport,
        auth_token=auth_token,
        room_name=room_name,
        context_group=context_group,
        jid=jid,
    )
    session.transport = transport
    return session


def make_muc_presence(*, from_, to, item_jids=(), status_codes=(),
                      type_=mucfirstn.structs.PresenceType.AVAILABLE,
                      affiliation="none", role="participant"):
    """
    Create a presence stanza as broadcast by a room: sent from the occupant
    JID `from_` to `to`, with a ``muc#user`` extension carrying one item per
    JID in `item_jids` and the given `status_codes`.
    """
    presence = mucfirstn.stanza.Presence(type_=type_, from_=from_, to=to)
    presence.xep0045_muc_user = muc_xso.UserExt(
        status_codes=status_codes,
        items=[
            muc_xso.UserItem(affiliation=affiliation, jid=jid, role=role)
            for jid in item_jids
        ],
    )
    return presence


def make_admin_request(*, from_, to, affiliation, jid,
                       id_="admin-request"):
    """
    Create a ``muc#admin`` request setting the affiliation of `jid` to
    `affiliation`.
    """
    return mucfirstn.stanza.IQ(
        mucfirstn.structs.IQType.SET,
        from_=from_,
        to=to,
        id_=id_,
        payload=muc_xso.AdminQuery(items=[
            muc_xso.AdminItem(affiliation=affiliation, jid=jid),
        ]),
    )

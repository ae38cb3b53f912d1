########################################################################
# File name: host.py
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
:mod:`~mucfirstn.host` --- Contracts with the hosting chat service
##################################################################

The moderation policy does not store rooms, parse network input or
authenticate users. It reaches the chat service which does through the
objects in this module.

Events
======

.. autodata:: PRE_JOIN

.. autodata:: JOINED

.. autodata:: IQ_SET_BARE_ADMIN_QUERY

.. autodata:: IQ_SET_HOST_ADMIN_QUERY

.. autoclass:: PreJoinEvent

.. autoclass:: JoinedEvent

.. autoclass:: IQEvent

Rooms, occupants and sessions
=============================

.. autoclass:: AbstractRoom

.. autoclass:: Occupant

.. autoclass:: Session

.. autoclass:: Host
"""
import abc
import collections
import logging

from . import callbacks, structs
from .hooks import HookBus


logger = logging.getLogger(__name__)


#: Local part prefix of the rooms used by the focus component for health
#: checks.
HEALTHCHECK_ROOM_PREFIX = "__jicofo-health-check"

#: Fired synchronously before an occupant is added to a room.
PRE_JOIN = "muc-occupant-pre-join"

#: Fired synchronously right after an occupant was added to a room.
JOINED = "muc-occupant-joined"

#: ``muc#admin`` set requests addressed to a room.
IQ_SET_BARE_ADMIN_QUERY = \
    "iq-set/bare/http://jabber.org/protocol/muc#admin:query"

#: ``muc#admin`` set requests addressed to the service host.
IQ_SET_HOST_ADMIN_QUERY = \
    "iq-set/host/http://jabber.org/protocol/muc#admin:query"


PreJoinEvent = collections.namedtuple(
    "PreJoinEvent", ["room", "occupant", "origin"]
)

JoinedEvent = collections.namedtuple(
    "JoinedEvent", ["room", "occupant"]
)

IQEvent = collections.namedtuple(
    "IQEvent", ["origin", "stanza"]
)


class Occupant(collections.namedtuple("Occupant", ["bare_jid", "nick"])):
    """
    An occupant which is joining or has joined a room.

    .. attribute:: bare_jid

       The real, bare :class:`~mucfirstn.JID` of the occupant.

    .. attribute:: nick

       The nickname in the room or :data:`None`.
    """

    __slots__ = []

    def __new__(cls, bare_jid, nick=None):
        return super().__new__(cls, bare_jid.bare(), nick)


class AbstractRoom(metaclass=abc.ABCMeta):
    """
    The view of a room the policy needs.

    .. autoattribute:: jid

    .. autoattribute:: occupant_count

    .. automethod:: set_affiliation
    """

    @property
    @abc.abstractmethod
    def jid(self):
        """
        The bare :class:`~mucfirstn.JID` of the room.
        """

    @property
    @abc.abstractmethod
    def occupant_count(self):
        """
        The number of occupants currently in the room.
        """

    @abc.abstractmethod
    def set_affiliation(self, privileged, jid, affiliation):
        """
        Change the affiliation of the bare `jid` to `affiliation`.

        If `privileged` is true, the change is performed with the authority
        of the service itself and bypasses permission checks. Failures are
        reported by raising; the policy does not catch them.
        """


class Session:
    """
    A client connection as seen by the policy.

    :param transport: Callable receiving each outbound stanza which passed
        the filter chain.
    :param auth_token: The verified authentication token, if any.
    :param room_name: The room name claimed by the token; ``"*"`` for any
        room.
    :param context_group: The subdomain claimed by the token or
        :data:`None`.
    :param jid: The full :class:`~mucfirstn.JID` of the connection.

    .. attribute:: filters_out

       The :class:`~mucfirstn.callbacks.Filter` every outbound stanza passes
       through in :meth:`send`. Lower orders run first.

    .. automethod:: send
    """

    def __init__(self, transport, *,
                 auth_token=None,
                 room_name=None,
                 context_group=None,
                 jid=None):
        super().__init__()
        self._transport = transport
        self.auth_token = auth_token
        self.room_name = room_name
        self.context_group = context_group
        self.jid = jid
        self.filters_out = callbacks.Filter()

    def send(self, stanza):
        """
        Run `stanza` through :attr:`filters_out` and hand the result to the
        transport. Return false if a filter dropped the stanza.
        """
        stanza = self.filters_out.filter(stanza)
        if stanza is None:
            return False
        self._transport(stanza)
        return True

    def __repr__(self):
        return "<{} jid={} room_name={!r} context_group={!r}>".format(
            type(self).__qualname__,
            self.jid,
            self.room_name,
            self.context_group,
        )


class Host:
    """
    The chat service component hosting the rooms.

    :param host: The domain of the component, e.g.
        ``"conference.example.com"``.
    :param admins: Bare JIDs of the server administrators.

    .. attribute:: host

    .. attribute:: events

       The :class:`~mucfirstn.hooks.HookBus` on which room events and
       administrative requests are fired.

    .. signal:: on_session_filters(session)

       Fired by :meth:`new_session` while the filter chain of a new session
       is being assembled.

    .. automethod:: new_session

    .. automethod:: is_admin

    .. automethod:: is_healthcheck_room
    """

    on_session_filters = callbacks.Signal()

    def __init__(self, host, *, admins=()):
        super().__init__()
        self.host = host
        self.events = HookBus()
        self._admins = frozenset(jid.bare() for jid in admins)

    def new_session(self, transport, **kwargs):
        """
        Create a :class:`Session` for `transport` and let the registered
        components install their filters. Keyword arguments are passed to
        :class:`Session`.
        """
        session = Session(transport, **kwargs)
        logger.debug("assembling filters for %r", session)
        self.on_session_filters(session)
        return session

    def is_admin(self, jid):
        """
        Return true if the bare form of `jid` is a server administrator.
        """
        if not isinstance(jid, structs.JID):
            return False
        return jid.bare() in self._admins

    def is_healthcheck_room(self, room_jid):
        """
        Return true if `room_jid` is the room used by the focus component
        for health checks.
        """
        return is_healthcheck_room(room_jid)


def is_healthcheck_room(room_jid):
    """
    Return true if the local part of `room_jid` starts with
    :data:`HEALTHCHECK_ROOM_PREFIX`.
    """
    localpart = getattr(room_jid, "localpart", None)
    return bool(localpart) and localpart.startswith(HEALTHCHECK_ROOM_PREFIX)

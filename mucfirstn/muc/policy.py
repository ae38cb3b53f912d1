########################################################################
# File name: policy.py
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
Pure decisions of the moderation policy: which rooms are moderated, and
which joining sessions may take part in the automatic promotion.
"""
import collections
import enum
import logging


logger = logging.getLogger(__name__)


#: Value of a session's claimed room name which matches every room.
ANY_ROOM = "*"


class RoomClassification(collections.namedtuple(
        "RoomClassification",
        ["moderated", "room_name", "subdomain"])):
    """
    Result of :func:`classify`. Truthy iff the room is moderated.

    .. attribute:: moderated

    .. attribute:: room_name

       The room name without subdomain prefix, or :data:`None` if the room
       is not moderated.

    .. attribute:: subdomain

       The decoded subdomain or :data:`None`.
    """

    __slots__ = []

    def __bool__(self):
        return self.moderated


NOT_MODERATED = RoomClassification(False, None, None)


def extract_subdomain(node):
    """
    Split a room local part of the form ``[subdomain]roomname``.

    Return ``(subdomain, room_name)``; `subdomain` is :data:`None` if `node`
    carries no bracketed prefix.
    """
    if not node.startswith("["):
        return None, node
    end = node.find("]")
    if end < 0:
        return None, node
    return node[1:end], node[end+1:]


def classify(spec, room_jid):
    """
    Decide whether the room `room_jid` is moderated according to the
    :class:`~mucfirstn.config.ModerationSpec` `spec`.

    :rtype: :class:`RoomClassification`
    """
    if not spec.is_active:
        return NOT_MODERATED

    node = room_jid.localpart
    if not node:
        return NOT_MODERATED

    subdomain, room_name = extract_subdomain(node)
    if subdomain is not None:
        if subdomain in spec.moderated_subdomains:
            return RoomClassification(True, room_name, subdomain)
    elif room_name in spec.moderated_rooms:
        return RoomClassification(True, room_name, None)

    return NOT_MODERATED


class DenialReason(enum.Enum):
    NO_TOKEN = "no-token"
    ROOM_MISMATCH = "room-mismatch"
    SUBDOMAIN_MISMATCH = "subdomain-mismatch"


class Authorization(collections.namedtuple(
        "Authorization",
        ["allowed", "reason"])):
    """
    Result of :func:`authorize`. Truthy iff allowed; :attr:`reason` is a
    :class:`DenialReason` member for denials and :data:`None` otherwise.
    """

    __slots__ = []

    def __bool__(self):
        return self.allowed


ALLOWED = Authorization(True, None)


def authorize(session, room_name, subdomain):
    """
    Check whether the `session` which is joining the moderated room
    `room_name` in `subdomain` takes part in the automatic promotion.

    Denial is not an error; the occupant simply joins without promotion.

    :rtype: :class:`Authorization`
    """
    if session is None or not getattr(session, "auth_token", None):
        logger.debug("no promotion without auth token (room %r, "
                     "subdomain %r)", room_name, subdomain)
        return Authorization(False, DenialReason.NO_TOKEN)

    claimed_room = getattr(session, "room_name", None)
    if not (claimed_room == room_name or claimed_room == ANY_ROOM):
        logger.debug("no promotion, token room %r does not match room %r",
                     claimed_room, room_name)
        return Authorization(False, DenialReason.ROOM_MISMATCH)

    claimed_subdomain = getattr(session, "context_group", None)
    if claimed_subdomain != subdomain:
        logger.debug("no promotion, token subdomain %r does not match "
                     "subdomain %r", claimed_subdomain, subdomain)
        return Authorization(False, DenialReason.SUBDOMAIN_MISMATCH)

    return ALLOWED

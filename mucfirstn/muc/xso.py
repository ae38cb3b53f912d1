########################################################################
# File name: xso.py
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

import mucfirstn.stanza
import mucfirstn.xso as xso

from mucfirstn.utils import etree, namespaces


namespaces.xep0045_muc = "http://jabber.org/protocol/muc"
namespaces.xep0045_muc_user = "http://jabber.org/protocol/muc#user"
namespaces.xep0045_muc_admin = "http://jabber.org/protocol/muc#admin"


AFFILIATIONS = frozenset({
    "admin",
    "member",
    "none",
    "outcast",
    "owner",
})

ROLES = frozenset({
    "moderator",
    "none",
    "participant",
    "visitor",
})


class StatusCode(enum.IntEnum):
    """
    This integer enumeration is used for the status codes defined in
    :xep:`45`. Members compare equal to their numeric codes.

    .. attribute:: SELF
        :annotation: = 110

        Inform that the stanza refers to the addressee themselves.
    """

    NON_ANONYMOUS = 100
    AFFILIATION_CHANGE = 101
    SHOWING_UNAVAILABLE = 102
    NOT_SHOWING_UNAVAILABLE = 103
    CONFIG_NON_PRIVACY_RELATED = 104
    SELF = 110
    CONFIG_ROOM_LOGGING = 170
    CONFIG_NO_ROOM_LOGGING = 171
    CONFIG_NON_ANONYMOUS = 172
    CONFIG_SEMI_ANONYMOUS = 173
    CREATED = 201
    REMOVED_BANNED = 301
    NICKNAME_CHANGE = 303
    REMOVED_KICKED = 307
    REMOVED_AFFILIATION_CHANGE = 321
    REMOVED_NONMEMBER_IN_MEMBERS_ONLY = 322
    REMOVED_SERVICE_SHUTDOWN = 332
    REMOVED_ERROR = 333


def _parse_status_code(value):
    try:
        code = int(value)
    except (TypeError, ValueError):
        return None
    try:
        return StatusCode(code)
    except ValueError:
        return code


def _restricted(value, allowed):
    if value in allowed:
        return value
    return None


class ItemBase(xso.XSO):
    """
    Common part of the ``item`` elements of the ``muc#user`` and
    ``muc#admin`` namespaces.

    Values outside the :xep:`45` affiliation and role sets are read as
    :data:`None`; so are ``jid`` attributes which are not valid JIDs.
    """

    def __init__(self,
                 affiliation=None,
                 jid=None,
                 nick=None,
                 role=None,
                 reason=None):
        super().__init__()
        self.affiliation = affiliation
        self.jid = jid
        self.nick = nick
        self.role = role
        self.reason = reason

    @property
    def bare_jid(self):
        """
        Return the bare jid of the item or :data:`None` if no JID is
        given.
        """
        if self.jid:
            return self.jid.bare()
        return None

    @classmethod
    def from_etree(cls, el):
        reason = None
        reason_tag = xso.tag_to_str((cls.TAG[0], "reason"))
        for child in el:
            if child.tag == reason_tag:
                reason = child.text
        return cls(
            affiliation=_restricted(el.get("affiliation"), AFFILIATIONS),
            jid=xso.jid_attr(el, "jid"),
            nick=el.get("nick"),
            role=_restricted(el.get("role"), ROLES),
            reason=reason,
        )

    def _unparse_into(self, el):
        xso.set_attr(el, "affiliation", self.affiliation)
        xso.set_attr(el, "jid", self.jid)
        xso.set_attr(el, "nick", self.nick)
        xso.set_attr(el, "role", self.role)
        if self.reason is not None:
            reason_tag = xso.tag_to_str((self.TAG[0], "reason"))
            etree.SubElement(el, reason_tag).text = self.reason

    def __repr__(self):
        return "<{} affiliation={!r} jid={} role={!r}>".format(
            type(self).__name__,
            self.affiliation,
            self.jid,
            self.role,
        )


class UserItem(ItemBase):
    TAG = (namespaces.xep0045_muc_user, "item")


class UserExt(xso.XSO):
    """
    The ``muc#user`` extension of presence stanzas.

    .. attribute:: status_codes

       :class:`set` of :class:`StatusCode` members (or plain integers for
       codes unknown to :class:`StatusCode`).

    .. attribute:: items

       :class:`list` of :class:`UserItem`.
    """

    TAG = (namespaces.xep0045_muc_user, "x")

    STATUS_TAG = (namespaces.xep0045_muc_user, "status")

    def __init__(self, status_codes=(), items=()):
        super().__init__()
        self.status_codes = set(status_codes)
        self.items = list(items)

    @classmethod
    def from_etree(cls, el):
        obj = cls()
        status_tag = xso.tag_to_str(cls.STATUS_TAG)
        for child in el:
            if child.tag == status_tag:
                code = _parse_status_code(child.get("code"))
                if code is not None:
                    obj.status_codes.add(code)
            elif UserItem.matches(child):
                obj.items.append(UserItem.from_etree(child))
        return obj

    def _unparse_into(self, el):
        for item in self.items:
            item.unparse_to_node(el)
        for code in sorted(self.status_codes):
            status = etree.SubElement(el, xso.tag_to_str(self.STATUS_TAG))
            status.set("code", str(int(code)))

    def has_status(self, code):
        """
        Return true if `code` is among :attr:`status_codes`.
        """
        return code in self.status_codes


mucfirstn.stanza.Presence.register_child("xep0045_muc_user", UserExt)


class AdminItem(ItemBase):
    TAG = (namespaces.xep0045_muc_admin, "item")


@mucfirstn.stanza.IQ.as_payload_class
class AdminQuery(xso.XSO):
    """
    The ``muc#admin`` query payload of affiliation and role change requests.

    .. attribute:: items

       :class:`list` of :class:`AdminItem`.
    """

    TAG = (namespaces.xep0045_muc_admin, "query")

    def __init__(self, *, items=()):
        super().__init__()
        self.items = list(items)

    @classmethod
    def from_etree(cls, el):
        return cls(items=[
            AdminItem.from_etree(child)
            for child in el
            if AdminItem.matches(child)
        ])

    def _unparse_into(self, el):
        for item in self.items:
            item.unparse_to_node(el)

########################################################################
# File name: structs.py
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
:mod:`~mucfirstn.structs` --- Simple data holders for common data types
#######################################################################

Stanza types
============

.. currentmodule:: mucfirstn

.. autoclass:: IQType

.. autoclass:: PresenceType

.. autoclass:: ErrorType

Jabber IDs
==========

.. autoclass:: JID(localpart, domain, resource)
"""
import collections
import enum

from .stringprep import nodeprep, resourceprep, nameprep


class ErrorType(enum.Enum):
    """
    Enumeration for the :rfc:`6120` specified stanza error types.

    .. attribute:: AUTH

       retry after providing credentials; converts to
       :exc:`~.XMPPAuthError`.

    .. attribute:: CANCEL

       do not retry; converts to :exc:`~.XMPPCancelError`.

    .. attribute:: CONTINUE

       proceed, the condition was only a warning; converts to
       :exc:`~.XMPPContinueError`.

    .. attribute:: MODIFY

       retry after changing the data sent; converts to
       :exc:`~.XMPPModifyError`.

    .. attribute:: WAIT

       retry after waiting; converts to :exc:`~.XMPPWaitError`.
    """

    AUTH = "auth"
    CANCEL = "cancel"
    CONTINUE = "continue"
    MODIFY = "modify"
    WAIT = "wait"


class PresenceType(enum.Enum):
    """
    Enumeration for the :rfc:`6121` specified Presence stanza types.

    :attr:`AVAILABLE` maps to the absence of the ``type`` attribute.

    .. autoattribute:: is_error

    .. autoattribute:: is_presence_state
    """

    ERROR = "error"
    PROBE = "probe"
    SUBSCRIBE = "subscribe"
    SUBSCRIBED = "subscribed"
    UNAVAILABLE = "unavailable"
    UNSUBSCRIBE = "unsubscribe"
    UNSUBSCRIBED = "unsubscribed"
    AVAILABLE = None

    @property
    def is_error(self):
        """
        True for the :attr:`ERROR` type, false otherwise.
        """
        return self == PresenceType.ERROR

    @property
    def is_presence_state(self):
        """
        True for the :attr:`AVAILABLE` and :attr:`UNAVAILABLE` types, false
        otherwise.
        """
        return (self == PresenceType.AVAILABLE or
                self == PresenceType.UNAVAILABLE)


class IQType(enum.Enum):
    """
    Enumeration for the :rfc:`6120` specified IQ stanza types.

    .. autoattribute:: is_error

    .. autoattribute:: is_request

    .. autoattribute:: is_response
    """

    GET = "get"
    SET = "set"
    ERROR = "error"
    RESULT = "result"

    @property
    def is_error(self):
        """
        True for the :attr:`ERROR` type, false otherwise.
        """
        return self == IQType.ERROR

    @property
    def is_request(self):
        """
        True for request types (:attr:`GET` and :attr:`SET`), false otherwise.
        """
        return self == IQType.GET or self == IQType.SET

    @property
    def is_response(self):
        """
        True for the response types (:attr:`RESULT` and :attr:`ERROR`), false
        otherwise.
        """
        return self == IQType.RESULT or self == IQType.ERROR


class JID(collections.namedtuple("JID", ["localpart", "domain", "resource"])):
    """
    Represent a :term:`Jabber ID (JID) <Jabber ID>`.

    :param localpart: The part in front of the ``@`` of the JID, or
        :data:`None` if the localpart shall be omitted.
    :type localpart: :class:`str` or :data:`None`
    :param domain: The domain of the JID. This is the only mandatory part of
        a JID.
    :type domain: :class:`str`
    :param resource: The resource part of the JID or :data:`None` to omit the
        resource part.
    :type resource: :class:`str` or :data:`None`
    :param strict: Enable strict validation
    :type strict: :class:`bool`
    :raises ValueError: if the JID composed of the given parts is invalid

    If `strict` is false, unassigned codepoints are allowed in any of the
    parts. Use non-`strict` for addresses received from the outside.

    The room names used by the moderation policy live in the localpart,
    including an optional ``[subdomain]`` prefix; brackets are valid
    localpart characters.

    .. automethod:: fromstr

    .. autoattribute:: is_bare

    .. autoattribute:: is_domain

    .. automethod:: bare

    .. automethod:: replace(*, [localpart], [domain], [resource])
    """

    __slots__ = []

    def __new__(cls, localpart, domain, resource, *, strict=True):
        if localpart:
            localpart = nodeprep(localpart, allow_unassigned=not strict)
        if domain is not None:
            domain = nameprep(domain, allow_unassigned=not strict)
        if resource:
            resource = resourceprep(resource, allow_unassigned=not strict)

        if not domain:
            raise ValueError("domain must not be empty or None")
        for name, part in (("domain", domain),
                           ("localpart", localpart),
                           ("resource", resource)):
            if part is None:
                continue
            if not part:
                raise ValueError("{} must not be empty".format(name))
            if len(part.encode("utf-8")) > 1023:
                raise ValueError("{} too long".format(name))

        return super().__new__(cls, localpart, domain, resource)

    def replace(self, **kwargs):
        """
        Construct a new :class:`JID` object, using the values of the current
        JID. Use the keyword arguments `localpart`, `domain` and `resource`
        to override specific attributes on the new object; `strict` is
        passed on to the constructor.
        """
        strict = kwargs.pop("strict", True)
        unknown = set(kwargs) - {"localpart", "domain", "resource"}
        if unknown:
            raise TypeError("replace() got an unexpected keyword argument"
                            " {!r}".format(next(iter(unknown))))

        parts = self._asdict()
        parts.update(kwargs)
        return type(self)(parts["localpart"] or None,
                          parts["domain"],
                          parts["resource"] or None,
                          strict=strict)

    def __str__(self):
        result = self.domain
        if self.localpart:
            result = self.localpart + "@" + result
        if self.resource:
            result += "/" + self.resource
        return result

    def bare(self):
        """
        Return this JID with the :attr:`resource` set to :data:`None`.
        """
        if self.resource is None:
            return self
        return super()._replace(resource=None)

    @property
    def is_bare(self):
        """
        :data:`True` if the JID is bare, i.e. has an empty :attr:`resource`
        part.
        """
        return not self.resource

    @property
    def is_domain(self):
        """
        :data:`True` if the JID is a domain, i.e. if both the :attr:`localpart`
        and the :attr:`resource` are empty.
        """
        return not self.resource and not self.localpart

    @classmethod
    def fromstr(cls, s, *, strict=True):
        """
        Construct a JID out of a string containing it.

        :param s: The string to parse.
        :type s: :class:`str`
        :param strict: Whether to enable strict parsing.
        :type strict: :class:`bool`
        :raises: See :class:`JID`
        :return: The parsed JID
        :rtype: :class:`JID`
        """
        nodedomain, sep, resource = s.partition("/")
        if not sep:
            resource = None

        localpart, sep, domain = nodedomain.partition("@")
        if not sep:
            domain = localpart
            localpart = None
        return cls(localpart, domain, resource, strict=strict)

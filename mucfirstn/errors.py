########################################################################
# File name: errors.py
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
:mod:`~mucfirstn.errors` --- Exception classes
##############################################

Exception classes mapping to XMPP stanza errors
===============================================

.. autoclass:: StanzaError

.. autoclass:: XMPPError

.. currentmodule:: mucfirstn

.. autoclass:: ErrorCondition

.. autoclass:: XMPPAuthError

.. autoclass:: XMPPModifyError

.. autoclass:: XMPPCancelError

.. autoclass:: XMPPWaitError

.. autoclass:: XMPPContinueError

.. currentmodule:: mucfirstn.errors

Parsing
=======

.. autoclass:: StanzaParseError
"""
import enum

from . import structs

from .utils import namespaces
from .xso import tag_to_str


def format_error_text(condition, text=None):
    error_tag = tag_to_str(condition.value)
    if text:
        error_tag += " ({!r})".format(text)
    return error_tag


class ErrorCondition(enum.Enum):
    """
    Enumeration to represent a :rfc:`6120` stanza error condition. Please
    see :rfc:`6120`, section 8.3.3, for the semantics of the individual
    conditions.

    The value of each member is the ``(namespace, localname)`` tag of the
    condition element.
    """

    BAD_REQUEST = (namespaces.stanzas, "bad-request")
    CONFLICT = (namespaces.stanzas, "conflict")
    FEATURE_NOT_IMPLEMENTED = (namespaces.stanzas, "feature-not-implemented")
    FORBIDDEN = (namespaces.stanzas, "forbidden")
    GONE = (namespaces.stanzas, "gone")
    INTERNAL_SERVER_ERROR = (namespaces.stanzas, "internal-server-error")
    ITEM_NOT_FOUND = (namespaces.stanzas, "item-not-found")
    JID_MALFORMED = (namespaces.stanzas, "jid-malformed")
    NOT_ACCEPTABLE = (namespaces.stanzas, "not-acceptable")
    NOT_ALLOWED = (namespaces.stanzas, "not-allowed")
    NOT_AUTHORIZED = (namespaces.stanzas, "not-authorized")
    POLICY_VIOLATION = (namespaces.stanzas, "policy-violation")
    RECIPIENT_UNAVAILABLE = (namespaces.stanzas, "recipient-unavailable")
    REDIRECT = (namespaces.stanzas, "redirect")
    REGISTRATION_REQUIRED = (namespaces.stanzas, "registration-required")
    REMOTE_SERVER_NOT_FOUND = (namespaces.stanzas, "remote-server-not-found")
    REMOTE_SERVER_TIMEOUT = (namespaces.stanzas, "remote-server-timeout")
    RESOURCE_CONSTRAINT = (namespaces.stanzas, "resource-constraint")
    SERVICE_UNAVAILABLE = (namespaces.stanzas, "service-unavailable")
    SUBSCRIPTION_REQUIRED = (namespaces.stanzas, "subscription-required")
    UNDEFINED_CONDITION = (namespaces.stanzas, "undefined-condition")
    UNEXPECTED_REQUEST = (namespaces.stanzas, "unexpected-request")


class StanzaError(Exception):
    pass


class XMPPError(StanzaError):
    """
    Exception representing an error defined in the XMPP protocol.

    :param condition: The :rfc:`6120` defined error condition
    :type condition: :class:`mucfirstn.ErrorCondition`
    :param text: Optional human-readable text explaining the error
    :type text: :class:`str`

    .. attribute:: condition

       The :class:`~mucfirstn.ErrorCondition` member.

    .. attribute:: text

       Optional human-readable text describing the error further.

       This is :data:`None` if the text is omitted.

    The :attr:`TYPE` class attribute determines the error type which is used
    when the exception is converted to a stanza error payload.
    """

    TYPE = structs.ErrorType.CANCEL

    def __init__(self, condition, text=None):
        if not isinstance(condition, ErrorCondition):
            condition = ErrorCondition(condition)
        super().__init__(format_error_text(condition, text=text))
        self.condition = condition
        self.text = text


class XMPPWarning(XMPPError, UserWarning):
    TYPE = structs.ErrorType.CONTINUE


class XMPPAuthError(XMPPError, PermissionError):
    TYPE = structs.ErrorType.AUTH


class XMPPModifyError(XMPPError, ValueError):
    TYPE = structs.ErrorType.MODIFY


class XMPPCancelError(XMPPError):
    TYPE = structs.ErrorType.CANCEL


class XMPPWaitError(XMPPError):
    TYPE = structs.ErrorType.WAIT


class XMPPContinueError(XMPPWarning):
    TYPE = structs.ErrorType.CONTINUE


EXCEPTION_CLS_MAP = {
    structs.ErrorType.AUTH: XMPPAuthError,
    structs.ErrorType.CANCEL: XMPPCancelError,
    structs.ErrorType.CONTINUE: XMPPContinueError,
    structs.ErrorType.MODIFY: XMPPModifyError,
    structs.ErrorType.WAIT: XMPPWaitError,
}


class StanzaParseError(StanzaError):
    """
    Raised by :func:`mucfirstn.stanza.fromstring` and friends if the input is
    not a stanza this package knows how to model.

    .. attribute:: element

       The offending :class:`lxml.etree._Element` or :data:`None` if the
       input was not well-formed XML.
    """

    def __init__(self, msg, element=None):
        super().__init__(msg)
        self.element = element

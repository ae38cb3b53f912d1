########################################################################
# File name: stanza.py
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
:mod:`~mucfirstn.stanza` --- XSOs for dealing with stanzas
##########################################################

This module provides :class:`~.xso.XSO` subclasses which model the stanzas
the moderation policy inspects.

Top-level classes
=================

.. autoclass:: StanzaBase

.. currentmodule:: mucfirstn

.. autoclass:: IQ

.. autoclass:: Presence

.. currentmodule:: mucfirstn.stanza

.. autoclass:: Error

Parsing and serialisation
=========================

.. autofunction:: from_etree

.. autofunction:: fromstring

.. autofunction:: tostring
"""
import copy

from . import errors, structs, xso

from .utils import etree, namespaces


def _safe_format_attr(obj, attr_name):
    value = getattr(obj, attr_name, None)
    if value is None:
        return "None"
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


class Error(xso.XSO):
    """
    An XMPP stanza error.

    :param condition: The error condition.
    :type condition: :class:`mucfirstn.ErrorCondition`
    :param type_: The type of the error
    :type type_: :class:`mucfirstn.ErrorType`
    :param text: The optional error text
    :type text: :class:`str` or :data:`None`

    .. automethod:: from_exception

    .. automethod:: to_exception
    """

    TAG = (namespaces.client, "error")

    TEXT_TAG = (namespaces.stanzas, "text")

    def __init__(self,
                 condition=errors.ErrorCondition.UNDEFINED_CONDITION,
                 type_=structs.ErrorType.CANCEL,
                 text=None):
        super().__init__()
        self.condition = errors.ErrorCondition(condition)
        self.type_ = type_
        self.text = text

    @classmethod
    def from_etree(cls, el):
        try:
            type_ = structs.ErrorType(el.get("type"))
        except ValueError:
            type_ = structs.ErrorType.CANCEL

        condition = errors.ErrorCondition.UNDEFINED_CONDITION
        text = None
        for child in el:
            if not isinstance(child.tag, str):
                continue
            tag = xso.normalize_tag(child.tag)
            if tag == cls.TEXT_TAG:
                text = child.text
                continue
            try:
                condition = errors.ErrorCondition(tag)
            except ValueError:
                pass

        return cls(condition=condition, type_=type_, text=text)

    def _unparse_into(self, el):
        el.set("type", self.type_.value)
        etree.SubElement(el, xso.tag_to_str(self.condition.value))
        if self.text is not None:
            etree.SubElement(el, xso.tag_to_str(self.TEXT_TAG)).text = \
                self.text

    @classmethod
    def from_exception(cls, exc):
        """
        Construct a new :class:`Error` payload from the attributes of the
        :class:`~mucfirstn.errors.XMPPError` `exc`.
        """
        return cls(
            condition=exc.condition,
            type_=exc.TYPE,
            text=exc.text
        )

    def to_exception(self):
        """
        Convert the error payload to the
        :class:`~mucfirstn.errors.XMPPError` subclass matching
        :attr:`type_`.
        """
        return errors.EXCEPTION_CLS_MAP[self.type_](
            condition=self.condition,
            text=self.text,
        )

    def __repr__(self):
        payload = ""
        if self.text:
            payload = " text={!r}".format(self.text)

        return "<{} type={!r}{}>".format(
            self.condition.value[1],
            self.type_,
            payload)


class StanzaBase(xso.XSO):
    """
    Base for all stanza classes.

    .. attribute:: from_

       The :class:`~mucfirstn.JID` of the sending entity or :data:`None`.

    .. attribute:: to

       The :class:`~mucfirstn.JID` of the receiving entity or :data:`None`.

    .. attribute:: id_

       The stanza ID or :data:`None`.

    .. attribute:: type_

       Member of :attr:`TYPE_ENUM`.

    .. attribute:: error

       Either :data:`None` or an :class:`Error` instance.

    .. attribute:: unhandled_children

       List of child elements which have no typed representation. They are
       written back verbatim by :meth:`unparse_to_node`.

    Typed children are declared with :meth:`register_child`; until a child
    is present, the corresponding attribute is :data:`None`.

    .. automethod:: register_child

    .. automethod:: make_error
    """

    TYPE_ENUM = None
    DEFAULT_TYPE = None
    CHILD_MAP = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.CHILD_MAP = dict(cls.CHILD_MAP)

    def __init__(self, type_=None, *, from_=None, to=None, id_=None,
                 error=None):
        super().__init__()
        self.type_ = self.DEFAULT_TYPE if type_ is None else type_
        self.from_ = from_
        self.to = to
        self.id_ = id_
        self.error = error
        self.unhandled_children = []

    @classmethod
    def register_child(cls, attr_name, child_cls):
        """
        Declare `child_cls` as typed child of this stanza class, reachable as
        the attribute `attr_name`. Return `child_cls`.
        """
        cls.CHILD_MAP[xso.tag_to_str(child_cls.TAG)] = (attr_name, child_cls)
        if not hasattr(cls, attr_name):
            setattr(cls, attr_name, None)
        return child_cls

    @classmethod
    def _parse_type(cls, value):
        if value is None and cls.DEFAULT_TYPE is not None:
            return cls.DEFAULT_TYPE
        try:
            return cls.TYPE_ENUM(value)
        except ValueError:
            raise errors.StanzaParseError(
                "invalid {} type: {!r}".format(cls.TAG[1], value)
            ) from None

    @classmethod
    def from_etree(cls, el):
        obj = cls(
            type_=cls._parse_type(el.get("type")),
            from_=xso.jid_attr(el, "from"),
            to=xso.jid_attr(el, "to"),
            id_=el.get("id"),
        )

        error_tag = xso.tag_to_str(Error.TAG)
        for child in el:
            if not isinstance(child.tag, str):
                continue
            if child.tag == error_tag and obj.error is None:
                obj.error = Error.from_etree(child)
                continue
            try:
                attr_name, child_cls = cls.CHILD_MAP[child.tag]
            except KeyError:
                obj.unhandled_children.append(child)
                continue
            if getattr(obj, attr_name) is not None:
                obj.unhandled_children.append(child)
                continue
            setattr(obj, attr_name, child_cls.from_etree(child))

        return obj

    def _unparse_into(self, el):
        xso.set_attr(el, "from", self.from_)
        xso.set_attr(el, "to", self.to)
        xso.set_attr(el, "id", self.id_)
        if self.type_ is not None:
            xso.set_attr(el, "type", self.type_.value)

        # several classes may share one attribute, e.g. IQ payloads
        attr_names = dict.fromkeys(
            attr_name for attr_name, _ in self.CHILD_MAP.values()
        )
        for attr_name in attr_names:
            value = getattr(self, attr_name)
            if value is not None:
                value.unparse_to_node(el)

        for child in self.unhandled_children:
            el.append(copy.deepcopy(child))

        if self.error is not None:
            self.error.unparse_to_node(el)

    @property
    def is_error(self):
        """
        True if the stanza has the ``error`` type or carries an error
        payload.
        """
        return self.type_ == self.TYPE_ENUM.ERROR or self.error is not None

    def make_error(self, error):
        """
        Create a new instance of this stanza class which has the given
        `error` value set as :attr:`error`.

        The :attr:`id_` is copied, :attr:`from_` and :attr:`to` are swapped
        and :attr:`type_` is set to ``"error"``.
        """
        return type(self)(
            type_=self.TYPE_ENUM.ERROR,
            from_=self.to,
            to=self.from_,
            id_=self.id_,
            error=error,
        )


class Presence(StanzaBase):
    """
    An XMPP presence stanza.

    The :attr:`type_` is a :class:`~mucfirstn.PresenceType`; the absence of
    the ``type`` attribute is :attr:`~mucfirstn.PresenceType.AVAILABLE`.

    :mod:`mucfirstn.muc.xso` registers the ``muc#user`` extension as
    :attr:`xep0045_muc_user`.
    """

    TAG = (namespaces.client, "presence")

    TYPE_ENUM = structs.PresenceType
    DEFAULT_TYPE = structs.PresenceType.AVAILABLE

    def __repr__(self):
        return "<presence from={} to={} id={} type={}>".format(
            _safe_format_attr(self, "from_"),
            _safe_format_attr(self, "to"),
            _safe_format_attr(self, "id_"),
            _safe_format_attr(self, "type_"),
        )


class IQ(StanzaBase):
    """
    An XMPP IQ stanza with a single typed :attr:`payload`.

    New payload classes are registered using :meth:`as_payload_class`.

    .. automethod:: as_payload_class

    .. automethod:: make_reply
    """

    TAG = (namespaces.client, "iq")

    TYPE_ENUM = structs.IQType

    payload = None

    def __init__(self, type_, *, payload=None, **kwargs):
        super().__init__(type_, **kwargs)
        self.payload = payload

    @classmethod
    def as_payload_class(cls, other_cls):
        """
        Register `other_cls` as possible :attr:`payload`. Usable as
        decorator.
        """
        return cls.register_child("payload", other_cls)

    def make_reply(self, type_):
        if not self.type_.is_request:
            raise ValueError("make_reply requires request IQ")
        return type(self)(
            type_,
            from_=self.to,
            to=self.from_,
            id_=self.id_,
        )

    def __repr__(self):
        return "<iq from={} to={} id={} type={} payload={!r}>".format(
            _safe_format_attr(self, "from_"),
            _safe_format_attr(self, "to"),
            _safe_format_attr(self, "id_"),
            _safe_format_attr(self, "type_"),
            self.payload,
        )


_STANZA_CLASSES = {
    xso.tag_to_str(cls.TAG): cls
    for cls in (Presence, IQ)
}


def from_etree(el):
    """
    Construct the stanza object matching the element `el`.

    :raises mucfirstn.errors.StanzaParseError: if `el` is not a presence or
        IQ stanza, or if it is malformed.
    """
    try:
        cls = _STANZA_CLASSES[el.tag]
    except (KeyError, TypeError):
        raise errors.StanzaParseError(
            "not a supported stanza: {!r}".format(el.tag),
            el,
        ) from None
    return cls.from_etree(el)


def fromstring(data):
    """
    Parse the serialised stanza `data` (:class:`bytes` or :class:`str`).

    :raises mucfirstn.errors.StanzaParseError: if `data` is not well-formed
        or not a supported stanza.
    """
    try:
        el = etree.fromstring(data)
    except etree.XMLSyntaxError as exc:
        raise errors.StanzaParseError(
            "malformed XML: {}".format(exc)
        ) from exc
    return from_etree(el)


def tostring(stanza):
    """
    Serialise `stanza` to :class:`bytes`.
    """
    return etree.tostring(stanza.unparse_to_node())

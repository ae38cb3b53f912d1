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
"""
:mod:`~mucfirstn.xso` --- Typed XML stream objects
##################################################

The stanza model of :mod:`mucfirstn` is made of small classes which know how
to read themselves from an :mod:`lxml` element and how to write themselves
back. Each class declares its qualified :attr:`XSO.TAG`; optional children
and attributes are modelled as :data:`None` rather than being looked up
dynamically by consumers.

.. autoclass:: XSO

Helpers
=======

.. autofunction:: tag_to_str

.. autofunction:: normalize_tag

.. autofunction:: jid_attr
"""
from . import structs

from .utils import etree


def tag_to_str(tag):
    """
    `tag` must be a tuple ``(namespace_uri, localname)``. Return a tag string
    conforming to the ElementTree specification. Example::

         tag_to_str(("jabber:client", "iq")) == "{jabber:client}iq"
    """
    return "{{{:s}}}{:s}".format(*tag) if tag[0] else tag[1]


def normalize_tag(tag):
    """
    Normalize an ElementTree tag string (``{uri}local`` or ``local``) or a
    two-tuple into the ``(namespace_uri, localname)`` format.
    """
    if isinstance(tag, str):
        namespace_uri, sep, localname = tag.partition("}")
        if sep:
            if not namespace_uri.startswith("{"):
                raise ValueError("not a valid etree-format tag")
            namespace_uri = namespace_uri[1:]
        else:
            localname = namespace_uri
            namespace_uri = None
        return (namespace_uri, localname)
    elif len(tag) != 2:
        raise ValueError("not a valid tuple-format tag")
    return tuple(tag)


def jid_attr(el, name):
    """
    Return the attribute `name` of `el` parsed as non-strict
    :class:`~mucfirstn.JID`.

    Absent attributes and attributes which do not parse as JID both yield
    :data:`None`.
    """
    value = el.get(name)
    if not value:
        return None
    try:
        return structs.JID.fromstr(value, strict=False)
    except ValueError:
        return None


def set_attr(el, name, value):
    if value is not None:
        el.set(name, str(value))


class XSO:
    """
    Base class for the XML objects of the stanza model.

    .. attribute:: TAG

       The ``(namespace_uri, localname)`` tuple of the element.

    .. automethod:: from_etree

    .. automethod:: unparse_to_node
    """

    TAG = None

    @classmethod
    def from_etree(cls, el):
        """
        Construct an instance from the :mod:`lxml` element `el`, which must
        carry :attr:`TAG`.
        """
        raise NotImplementedError

    def _unparse_into(self, el):
        pass

    def unparse_to_node(self, parent=None):
        """
        Serialise the object into a new element. If `parent` is given, the
        element is appended to it. Return the new element.
        """
        if parent is None:
            el = etree.Element(tag_to_str(self.TAG))
        else:
            el = etree.SubElement(parent, tag_to_str(self.TAG))
        self._unparse_into(el)
        return el

    @classmethod
    def matches(cls, el):
        return isinstance(el.tag, str) and el.tag == tag_to_str(cls.TAG)

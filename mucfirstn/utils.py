########################################################################
# File name: utils.py
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
:mod:`~mucfirstn.utils` --- Internal utils
==========================================

.. data:: namespaces

   Collects the XML namespaces used throughout :mod:`mucfirstn`. Each
   namespace is given a shortname and its value is the namespace string.

.. autoclass:: Namespaces

.. autofunction:: split_list
"""

import re

import lxml.etree as etree

__all__ = [
    "etree",
    "namespaces",
]


class Namespaces:
    """
    Manage short-hands for XML namespaces.

    Instances of this class may be used to assign mnemonic short-hands
    to XML namespaces, for example:

    .. code-block:: python

        namespaces = Namespaces()
        namespaces.foo = "urn:example:foo"

    Each namespace may be bound to only one short-hand, a short-hand may not
    be rebound to a different namespace, and short-hands cannot be deleted.
    Violations raise :class:`ValueError` and :class:`AttributeError`
    respectively.
    """

    def __init__(self):
        self._all_namespaces = {}

    def __setattr__(self, attr, value):
        if not attr.startswith("_"):
            existing_attr = self._all_namespaces.get(value)
            if existing_attr is not None and existing_attr != attr:
                raise ValueError(
                    "namespace {} already defined as {}".format(
                        value,
                        existing_attr,
                    )
                )
            if getattr(self, attr, value) != value:
                raise ValueError("inconsistent namespace redefinition")
            self._all_namespaces[value] = attr
        super().__setattr__(attr, value)

    def __delattr__(self, attr):
        if not attr.startswith("_"):
            raise AttributeError("deleting short-hands is prohibited")
        super().__delattr__(attr)


namespaces = Namespaces()
namespaces.client = "jabber:client"
namespaces.stanzas = "urn:ietf:params:xml:ns:xmpp-stanzas"
namespaces.xml = "http://www.w3.org/XML/1998/namespace"


_LIST_SEPARATOR = re.compile(r"[\s,]+")


def split_list(value):
    """
    Split a configuration list value at commas and whitespace.

    Empty items are dropped, so ``"a, b,,c"`` yields ``["a", "b", "c"]``.
    """
    return [item for item in _LIST_SEPARATOR.split(value) if item]

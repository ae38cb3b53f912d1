########################################################################
# File name: stringprep.py
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
Stringprep support
##################

The Nodeprep, Resourceprep (`RFC 6122`_) and Nameprep (`RFC 3491`_) profiles
used to normalise the parts of a :class:`~mucfirstn.JID`. Occupant tracking
compares bare JIDs, so two spellings of the same address must prepare to the
same string.

.. autofunction:: nodeprep

.. autofunction:: resourceprep

.. autofunction:: nameprep

.. _RFC 3491: https://tools.ietf.org/html/rfc3491
.. _RFC 6122: https://tools.ietf.org/html/rfc6122
"""

import stringprep

from unicodedata import ucd_3_2_0 as unicodedata

_nodeprep_prohibited = frozenset("\"&'/:<>@")

_COMMON_PROHIBITED = (
    stringprep.in_table_c12,
    stringprep.in_table_c22,
    stringprep.in_table_c3,
    stringprep.in_table_c4,
    stringprep.in_table_c5,
    stringprep.in_table_c6,
    stringprep.in_table_c7,
    stringprep.in_table_c8,
    stringprep.in_table_c9,
)

_NODEPREP_PROHIBITED = _COMMON_PROHIBITED + (
    stringprep.in_table_c11,
    stringprep.in_table_c21,
    lambda c: c in _nodeprep_prohibited,
)

_RESOURCEPREP_PROHIBITED = _COMMON_PROHIBITED + (
    stringprep.in_table_c21,
)


def _map_case_folding(chars):
    result = []
    for c in chars:
        if stringprep.in_table_b1(c):
            continue
        result.extend(stringprep.map_table_b2(c))
    return result


def _map_nothing(chars):
    return [c for c in chars if not stringprep.in_table_b1(c)]


def _check_bidi(chars):
    if not chars:
        return

    def is_randal(c):
        return unicodedata.bidirectional(c) in ("R", "AL")

    if not any(is_randal(c) for c in chars):
        return

    if any(unicodedata.bidirectional(c) == "L" for c in chars):
        raise ValueError("L and R/AL characters must not occur in the same"
                         " string")

    if not is_randal(chars[0]) or not is_randal(chars[-1]):
        raise ValueError("R/AL string must start and end with R/AL character.")


def _prepare(string, mapping, prohibited, allow_unassigned):
    chars = list(unicodedata.normalize("NFKC", "".join(mapping(string))))

    for c in chars:
        if any(in_table(c) for in_table in prohibited):
            raise ValueError("Input contains invalid unicode codepoint: "
                             "U+{:04x}".format(ord(c)))

    _check_bidi(chars)

    if not allow_unassigned:
        for c in chars:
            if stringprep.in_table_a1(c):
                raise ValueError("Input contains unassigned code point: "
                                 "U+{:04x}".format(ord(c)))

    return "".join(chars)


def nodeprep(string, allow_unassigned=False):
    """
    Process the given `string` using the Nodeprep profile. In the error cases
    defined by stringprep, a :class:`ValueError` is raised.
    """
    return _prepare(string, _map_case_folding, _NODEPREP_PROHIBITED,
                    allow_unassigned)


def resourceprep(string, allow_unassigned=False):
    """
    Process the given `string` using the Resourceprep profile. In the error
    cases defined by stringprep, a :class:`ValueError` is raised.
    """
    return _prepare(string, _map_nothing, _RESOURCEPREP_PROHIBITED,
                    allow_unassigned)


def nameprep(string, allow_unassigned=False):
    """
    Process the given `string` using the Nameprep profile. In the error cases
    defined by stringprep, a :class:`ValueError` is raised.
    """
    return _prepare(string, _map_case_folding, _COMMON_PROHIBITED,
                    allow_unassigned)

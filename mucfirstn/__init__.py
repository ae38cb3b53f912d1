########################################################################
# File name: __init__.py
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
Version information
###################

.. autodata:: __version__

.. data:: version

   Alias of :data:`__version__`.

.. autodata:: version_info

Overview
########

:mod:`mucfirstn` implements a policy for multi-user chat (:xep:`45`)
services: the first occupants of a moderated room are promoted to owners
without their clients ever seeing them as plain participants, and owner
affiliations in other rooms cannot be revoked.

The policy is installed into a :class:`~mucfirstn.host.Host` using
:class:`~mucfirstn.muc.FirstModeratorsModule`:

.. code-block:: python

   config = mucfirstn.ModerationConfig.from_file("/etc/mucfirstn.ini")
   host = mucfirstn.host.Host("conference.example.com")
   module = mucfirstn.FirstModeratorsModule(host, config).install()

Shorthands
##########

.. currentmodule:: mucfirstn

The most commonly used classes are available directly from this package:
:class:`JID`, :class:`Presence`, :class:`IQ`, :class:`ModerationConfig`,
:class:`ModerationSpec` and :class:`FirstModeratorsModule`.
"""
from ._version import version_info, __version__, version  # NOQA: F401

#: The imported :mod:`mucfirstn` version as a tuple.
#:
#: The components of the tuple are, in order: `major version`, `minor version`,
#: `patch level`, and `pre-release identifier`.
version_info = version_info

#: The imported :mod:`mucfirstn` version as a string.
__version__ = __version__

from .errors import (  # NOQA: F401,E402
    XMPPAuthError,
    XMPPCancelError,
    XMPPContinueError,
    XMPPModifyError,
    XMPPWaitError,
    ErrorCondition,
)
from .stanza import Presence, IQ  # NOQA: F401,E402
from .structs import (  # NOQA: F401,E402
    JID,
    PresenceType,
    IQType,
    ErrorType,
)
from .config import ModerationConfig, ModerationSpec  # NOQA: F401,E402

from .muc import FirstModeratorsModule  # NOQA: F401,E402

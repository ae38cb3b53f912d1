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
:mod:`~mucfirstn.muc` --- First occupants become owners (:xep:`45`)
###################################################################

This subpackage implements the moderation policy on top of the
:mod:`mucfirstn.host` contracts.

Installing the policy
=====================

.. currentmodule:: mucfirstn

.. autoclass:: FirstModeratorsModule

.. currentmodule:: mucfirstn.muc

The module combines the following parts, which may also be used on their
own:

.. autoclass:: JoinPolicyEngine

.. autoclass:: PresenceStreamFilter

.. autoclass:: AffiliationRevocationGuard

.. autoclass:: PromotionTracker

.. autoclass:: PromotionState

Policy decisions
================

.. autofunction:: mucfirstn.muc.policy.classify

.. autofunction:: mucfirstn.muc.policy.authorize

Constants
=========

.. autodata:: mucfirstn.muc.service.AUTO_MODERATOR_LIMIT

.. autodata:: mucfirstn.muc.service.PRESENCE_FILTER_ORDER

XSOs
====

.. currentmodule:: mucfirstn.muc.xso

.. autoclass:: StatusCode

.. autoclass:: UserExt

.. autoclass:: UserItem

.. autoclass:: AdminQuery

.. autoclass:: AdminItem
"""
from . import xso  # NOQA: F401
from .xso import StatusCode  # NOQA: F401
from .tracker import PromotionState, PromotionTracker  # NOQA: F401
from .service import (  # NOQA: F401
    AUTO_MODERATOR_LIMIT,
    AffiliationRevocationGuard,
    FirstModeratorsModule,
    JoinPolicyEngine,
    PresenceStreamFilter,
)

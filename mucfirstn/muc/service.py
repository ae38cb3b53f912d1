########################################################################
# File name: service.py
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
import contextlib
import logging
import weakref

import mucfirstn.errors
import mucfirstn.host
import mucfirstn.stanza
import mucfirstn.structs

from . import policy
from .tracker import PromotionTracker
from .xso import StatusCode


#: Room size up to which joining occupants are promoted. The comparison is
#: inclusive: an occupant joining a room which already holds this many
#: occupants is still promoted.
AUTO_MODERATOR_LIMIT = 3

#: Filter order of the component which rewrites stanza addresses into their
#: final form. Lower orders run first.
DOMAIN_MAPPER_ORDER = 0

#: Filter order of the :class:`PresenceStreamFilter`; it sees the addresses
#: as rewritten by the domain mapper.
PRESENCE_FILTER_ORDER = DOMAIN_MAPPER_ORDER + 1

JOIN_HOOK_PRIORITY = 2

#: Priority of the :class:`AffiliationRevocationGuard`; the room engine's own
#: handler for affiliation changes runs at -2.
ADMIN_QUERY_HOOK_PRIORITY = 5

#: Affiliations below admin; requesting one of them revokes ownership.
REVOKING_AFFILIATIONS = frozenset({
    "none",
    "outcast",
    "member",
})

OWNER = "owner"


class JoinPolicyEngine:
    """
    Handlers for the occupant lifecycle events of a room.

    :param host: The :class:`~mucfirstn.host.Host` of the rooms.
    :param config: The :class:`~mucfirstn.config.ModerationConfig` whose
        current spec is used for each event.
    :param tracker: The :class:`~.PromotionTracker` shared with the
        :class:`PresenceStreamFilter`.
    :param logger: The :class:`logging.Logger` to use.

    .. automethod:: handle_pre_join

    .. automethod:: handle_joined
    """

    def __init__(self, host, config, tracker, *, logger):
        super().__init__()
        self._host = host
        self._config = config
        self._tracker = tracker
        self._logger = logger

    def handle_pre_join(self, event):
        """
        Decide whether the occupant of the
        :class:`~mucfirstn.host.PreJoinEvent` `event` will be promoted.

        The room's occupant count is read before the occupant is added.
        """
        room, occupant = event.room, event.occupant

        if (self._host.is_healthcheck_room(room.jid) or
                self._host.is_admin(occupant.bare_jid)):
            return

        classification = policy.classify(self._config.spec, room.jid)
        if classification:
            authorization = policy.authorize(
                event.origin,
                classification.room_name,
                classification.subdomain,
            )
            if not authorization:
                self._logger.debug("%s joins %s without promotion: %s",
                                   occupant.bare_jid, room.jid,
                                   authorization.reason.value)
                return

        count = room.occupant_count
        if count <= AUTO_MODERATOR_LIMIT:
            self._logger.debug(
                "%s joins %s with %d occupant(s), promotion pending",
                occupant.bare_jid, room.jid, count,
            )
            self._tracker.mark_pending(occupant.bare_jid)

    def handle_joined(self, event):
        """
        Grant the owner affiliation to the occupant of the
        :class:`~mucfirstn.host.JoinedEvent` `event` if it was selected
        during pre-join.

        Exceptions raised by the room are not caught.
        """
        room, occupant = event.room, event.occupant
        if not self._tracker.take_if_pending(occupant.bare_jid):
            return

        self._logger.info("promoting %s to %s in %s",
                          occupant.bare_jid, OWNER, room.jid)
        room.set_affiliation(True, occupant.bare_jid, OWNER)


class PresenceStreamFilter:
    """
    Outbound filter hiding the intermediate presence of occupants whose
    promotion is pending.

    :param host_name: Domain of the chat service; presence from other
        domains is never touched.
    :param tracker: The :class:`~.PromotionTracker` shared with the
        :class:`JoinPolicyEngine`.

    Instances are callables suitable for
    :meth:`mucfirstn.callbacks.Filter.register`. A stanza is returned
    unmodified or, if it has to be suppressed, :data:`None` is returned.

    If an error presence is sent to a pending occupant, the join has failed
    and the pending mark is cleared.
    """

    def __init__(self, host_name, tracker, *, logger=None):
        super().__init__()
        self.host_name = host_name
        self._tracker = tracker
        self._logger = logger or logging.getLogger(__name__)

    def __call__(self, stanza):
        tracker = self._tracker
        if (tracker.is_empty() or
                not isinstance(stanza, mucfirstn.stanza.Presence) or
                stanza.to is None):
            return stanza

        if stanza.from_ is None or stanza.from_.domain != self.host_name:
            return stanza

        bare_to = stanza.to.bare()
        if stanza.is_error and tracker.clear_if_present(bare_to):
            self._logger.debug("join of %s failed, promotion dropped",
                               bare_to)
            return stanza

        muc_user = stanza.xep0045_muc_user
        if muc_user is None:
            return stanza

        if (tracker.is_pending(bare_to) and
                muc_user.has_status(StatusCode.SELF)):
            self._logger.debug("suppressed self-presence to %s", bare_to)
            return None

        for item in muc_user.items:
            item_jid = item.bare_jid
            if item_jid is not None and tracker.is_pending(item_jid):
                self._logger.debug("suppressed presence of %s to %s",
                                   item_jid, stanza.to)
                return None

        return stanza


class AffiliationRevocationGuard:
    """
    Handler for ``muc#admin`` affiliation change requests which rejects
    revocations of ownership in rooms which are not moderated.

    :param config: The :class:`~mucfirstn.config.ModerationConfig`. While
        the current spec has
        :attr:`~mucfirstn.config.ModerationSpec.disable_revoke_owners` set,
        the guard lets all requests pass.

    .. automethod:: handle_admin_set
    """

    def __init__(self, config, *, logger=None):
        super().__init__()
        self._config = config
        self._logger = logger or logging.getLogger(__name__)

    def handle_admin_set(self, event):
        """
        Inspect the request of the :class:`~mucfirstn.host.IQEvent` `event`.

        Return :data:`True` after replying with a ``forbidden`` error to the
        origin, which stops further processing of the request. Return
        :data:`None` to let the request pass.
        """
        spec = self._config.spec
        if spec.disable_revoke_owners:
            return None

        stanza = event.stanza
        if stanza.to is None:
            return None

        if policy.classify(spec, stanza.to.bare()):
            return None

        query = stanza.payload
        items = getattr(query, "items", None)
        if not items:
            return None

        affiliation = items[0].affiliation
        if affiliation not in REVOKING_AFFILIATIONS:
            return None

        self._logger.debug("rejecting change to %r in %s requested by %s",
                           affiliation, stanza.to, stanza.from_)
        event.origin.send(stanza.make_error(mucfirstn.stanza.Error(
            condition=mucfirstn.errors.ErrorCondition.FORBIDDEN,
            type_=mucfirstn.structs.ErrorType.AUTH,
        )))
        return True


class FirstModeratorsModule:
    """
    Install the first-occupants-become-owners policy on a chat service.

    :param host: The :class:`~mucfirstn.host.Host` to install into.
    :param config: The :class:`~mucfirstn.config.ModerationConfig`. Its spec
        is read on every event, so that reloads take effect immediately.
    :param tracker: The :class:`~.PromotionTracker` to use; a new one is
        created if omitted.
    :param logger_base: Optional :class:`logging.Logger` of which a child is
        used as :attr:`logger`.

    .. attribute:: tracker

    .. attribute:: join_engine

       The :class:`JoinPolicyEngine`.

    .. attribute:: guard

       The :class:`AffiliationRevocationGuard`.

    .. attribute:: logger

    .. automethod:: install

    .. automethod:: uninstall

    .. automethod:: make_presence_filter

    The module is also a context manager which installs on entry and
    uninstalls on exit.
    """

    def __init__(self, host, config, *, tracker=None, logger_base=None):
        super().__init__()
        if logger_base is None:
            self.logger = logging.getLogger(".".join([
                type(self).__module__, type(self).__qualname__
            ]))
        else:
            self.logger = self.derive_logger(logger_base)

        self.host = host
        self.config = config
        self.tracker = tracker if tracker is not None else PromotionTracker()
        self.join_engine = JoinPolicyEngine(
            host, config, self.tracker,
            logger=self.logger,
        )
        self.guard = AffiliationRevocationGuard(config, logger=self.logger)
        self._exit_stack = None
        self._session_filters = weakref.WeakKeyDictionary()

    def derive_logger(self, logger):
        return logger.getChild(type(self).__qualname__)

    @property
    def installed(self):
        return self._exit_stack is not None

    def make_presence_filter(self):
        """
        Return a new :class:`PresenceStreamFilter` bound to the
        :attr:`tracker` of this module.
        """
        return PresenceStreamFilter(self.host.host, self.tracker,
                                    logger=self.logger)

    def _on_session_filters(self, session):
        self._session_filters[session] = session.filters_out.register(
            self.make_presence_filter(),
            PRESENCE_FILTER_ORDER,
        )

    def _unregister_session_filters(self):
        for session, token in list(self._session_filters.items()):
            session.filters_out.unregister(token)
        self._session_filters.clear()

    def install(self):
        """
        Hook the handlers into :attr:`host` and return this module.

        Sessions created after this call get a :class:`PresenceStreamFilter`.

        :raises RuntimeError: if the module is already installed
        """
        if self._exit_stack is not None:
            raise RuntimeError("already installed")

        events = self.host.events
        with contextlib.ExitStack() as stack:
            stack.enter_context(events.context_hook(
                mucfirstn.host.PRE_JOIN,
                self.join_engine.handle_pre_join,
                JOIN_HOOK_PRIORITY,
            ))
            stack.enter_context(events.context_hook(
                mucfirstn.host.JOINED,
                self.join_engine.handle_joined,
                JOIN_HOOK_PRIORITY,
            ))
            for event_name in (mucfirstn.host.IQ_SET_BARE_ADMIN_QUERY,
                               mucfirstn.host.IQ_SET_HOST_ADMIN_QUERY):
                stack.enter_context(events.context_hook(
                    event_name,
                    self.guard.handle_admin_set,
                    ADMIN_QUERY_HOOK_PRIORITY,
                ))
            stack.enter_context(self.host.on_session_filters.context_connect(
                self._on_session_filters,
            ))
            stack.callback(self._unregister_session_filters)
            self._exit_stack = stack.pop_all()

        self.logger.info("installed on %s", self.host.host)
        return self

    def uninstall(self):
        """
        Remove all hooks and the presence filters of existing sessions.
        The :attr:`tracker` is left as is.
        """
        if self._exit_stack is None:
            return
        stack, self._exit_stack = self._exit_stack, None
        stack.close()
        self.logger.info("uninstalled from %s", self.host.host)

    def __enter__(self):
        return self.install()

    def __exit__(self, exc_type, exc_value, tb):
        self.uninstall()

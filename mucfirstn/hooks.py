########################################################################
# File name: hooks.py
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
:mod:`~mucfirstn.hooks` --- Priority ordered event dispatch
###########################################################

The room engine announces occupant lifecycle events and administrative
requests by name. Several independent handlers may be attached to the same
event; they run in a deterministic order given by their priority.

.. autoclass:: HookBus
"""
import contextlib
import logging


logger = logging.getLogger(__name__)


class HookBus:
    """
    Dispatch named events to handlers ordered by priority.

    Handlers with a higher priority run first; handlers with equal priority
    run in the order of their registration. A handler which returns anything
    but :data:`None` stops the dispatch and its return value is returned by
    :meth:`fire`. Exceptions raised by handlers are not caught.

    .. automethod:: hook

    .. automethod:: unhook

    .. automethod:: context_hook

    .. automethod:: fire

    .. automethod:: handlers
    """

    class Token:
        def __str__(self):
            return "<{}.{} 0x{:x}>".format(
                type(self).__module__,
                type(self).__qualname__,
                id(self))

    def __init__(self):
        super().__init__()
        self._handlers = {}

    def hook(self, event_name, handler, priority=0):
        """
        Register `handler` for `event_name` and return a token for
        :meth:`unhook`.
        """
        token = self.Token()
        handlers = self._handlers.setdefault(event_name, [])
        handlers.append((priority, token, handler))
        handlers.sort(key=lambda x: -x[0])
        logger.debug("hooked %r to %r at priority %d",
                     handler, event_name, priority)
        return token

    def unhook(self, event_name, token_to_remove):
        """
        Remove the handler registered under `token_to_remove`.

        :raises ValueError: if the token is not registered for `event_name`
        """
        handlers = self._handlers.get(event_name, [])
        for i, (_, token, _) in enumerate(handlers):
            if token == token_to_remove:
                break
        else:
            raise ValueError("unregistered token: {!r}".format(
                token_to_remove))
        del handlers[i]

    @contextlib.contextmanager
    def context_hook(self, event_name, handler, priority=0):
        """
        :term:`Context manager <context manager>` which temporarily hooks
        `handler`.
        """
        token = self.hook(event_name, handler, priority)
        try:
            yield token
        finally:
            self.unhook(event_name, token)

    def handlers(self, event_name):
        """
        Return the handlers of `event_name` in dispatch order.
        """
        return [handler for _, _, handler in self._handlers.get(event_name,
                                                                 [])]

    def fire(self, event_name, event):
        """
        Pass `event` to the handlers of `event_name` and return the first
        non-:data:`None` result, or :data:`None`.
        """
        for _, _, handler in list(self._handlers.get(event_name, [])):
            result = handler(event)
            if result is not None:
                return result
        return None

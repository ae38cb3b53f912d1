########################################################################
# File name: callbacks.py
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
:mod:`~mucfirstn.callbacks` -- Synchronous callbacks and filter chains
######################################################################

This module provides facilities for objects to provide signals to which other
objects can connect, and the :class:`Filter` chain used for outbound stanza
processing of sessions.

Descriptors can be used as class attributes and will create ad-hoc signals
dynamically for each instance:

.. code-block:: python

   class Emitter:
       on_event = callbacks.Signal()

   emitter = Emitter()
   emitter.on_event.connect(handler)
   emitter.on_event()  # calls `handler`

.. autoclass:: Signal

.. autoclass:: AdHocSignal

.. autoclass:: Filter
"""

import collections
import contextlib
import functools
import logging
import types
import weakref


logger = logging.getLogger(__name__)


class AdHocSignal:
    """
    An ad-hoc signal is a single emitter. Callables are connected to it using
    :meth:`connect` and called in registration order by :meth:`fire`.

    .. attribute:: STRONG

       Keep a strong reference to the callable.

    .. attribute:: WEAK

       Keep a weak reference to the callable. Bound methods are referenced
       using :class:`weakref.WeakMethod`. Dead references are removed
       automatically.

    For both modes: if the callable returns a true value, it is disconnected
    from the signal.

    .. attribute:: logger

       The :class:`logging.Logger` used to report listeners which raised.

    .. automethod:: connect

    .. automethod:: context_connect

    .. automethod:: disconnect

    .. automethod:: fire
    """

    def __init__(self):
        super().__init__()
        self._connections = collections.OrderedDict()
        self.logger = logger

    @classmethod
    def STRONG(cls, f):
        if not hasattr(f, "__call__"):
            raise TypeError("must be callable, got {!r}".format(f))
        return functools.partial(cls._strong_wrapper, f)

    @classmethod
    def WEAK(cls, f):
        if not hasattr(f, "__call__"):
            raise TypeError("must be callable, got {!r}".format(f))
        if isinstance(f, types.MethodType):
            ref = weakref.WeakMethod(f)
        else:
            ref = weakref.ref(f)
        return functools.partial(cls._weakref_wrapper, ref)

    @staticmethod
    def _weakref_wrapper(fref, args, kwargs):
        f = fref()
        if f is None:
            return False
        return not f(*args, **kwargs)

    @staticmethod
    def _strong_wrapper(f, args, kwargs):
        return not f(*args, **kwargs)

    def connect(self, f, mode=None):
        """
        Connect `f` to the signal using `mode` (default :attr:`STRONG`) and
        return an opaque token for :meth:`disconnect`.
        """
        mode = mode or self.STRONG
        self.logger.debug("connecting %r with mode %r", f, mode)
        token = object()
        self._connections[token] = mode(f)
        return token

    @contextlib.contextmanager
    def context_connect(self, f, mode=None):
        """
        Context manager which connects `f` on entry and disconnects it on
        exit.
        """
        token = self.connect(f, mode=mode)
        try:
            yield token
        finally:
            self.disconnect(token)

    def disconnect(self, token):
        """
        Disconnect the connection identified by `token`. This never raises,
        even if an invalid `token` is passed.
        """
        try:
            del self._connections[token]
        except KeyError:
            pass

    def fire(self, *args, **kwargs):
        """
        Emit the signal, calling all connected objects in-line with the given
        arguments and in the order they were registered.

        If a listener raises, the exception is logged, the listener is
        removed and the other listeners are executed as normal.
        """
        for token, wrapper in list(self._connections.items()):
            try:
                keep = wrapper(args, kwargs)
            except Exception:
                self.logger.exception("listener attached to signal raised")
                keep = False
            if not keep:
                self._connections.pop(token, None)

    __call__ = fire


class Signal:
    """
    A descriptor which returns per-instance :class:`AdHocSignal` objects on
    attribute access.
    """

    def __init__(self, *, doc=None):
        super().__init__()
        self.__doc__ = doc
        self._instances = weakref.WeakKeyDictionary()

    def __get__(self, instance, owner):
        if instance is None:
            return self
        try:
            return self._instances[instance]
        except KeyError:
            new = AdHocSignal()
            self._instances[instance] = new
            return new

    def __set__(self, instance, value):
        raise AttributeError("cannot override Signal attribute")

    def __delete__(self, instance):
        raise AttributeError("cannot override Signal attribute")


class Filter:
    """
    A filter chain for arbitrary data.

    This is used by :class:`~mucfirstn.host.Session` to let the policy module
    and other components filter outbound stanzas.

    Each function registered with the filter receives the object to filter
    and must return the object, a replacement or :data:`None`. If
    :data:`None` is returned, the filter chain aborts and further functions
    are not called.

    Functions are called in ascending `order`; functions with the same order
    are called in the order of their registration.

    .. automethod:: register

    .. automethod:: filter

    .. automethod:: unregister

    .. automethod:: context_register
    """

    class Token:
        def __str__(self):
            return "<{}.{} 0x{:x}>".format(
                type(self).__module__,
                type(self).__qualname__,
                id(self))

    def __init__(self):
        super().__init__()
        self._filter_order = []

    def register(self, func, order):
        """
        Add `func` to the filter chain, sorted by `order`. Return a token for
        :meth:`unregister`.
        """
        token = self.Token()
        self._filter_order.append((order, token, func))
        self._filter_order.sort(key=lambda x: x[0])
        return token

    def filter(self, obj, *args, **kwargs):
        """
        Filter `obj` through the chain and return the result, or
        :data:`None` if any function dropped it. Extra arguments are passed
        unmodified to each function.
        """
        for _, _, func in self._filter_order:
            obj = func(obj, *args, **kwargs)
            if obj is None:
                return None
        return obj

    def unregister(self, token_to_remove):
        """
        Unregister a filter function using the token returned by
        :meth:`register`.

        :raises ValueError: if the token is not registered
        """
        for i, (_, token, _) in enumerate(self._filter_order):
            if token == token_to_remove:
                break
        else:
            raise ValueError("unregistered token: {!r}".format(
                token_to_remove))
        del self._filter_order[i]

    @contextlib.contextmanager
    def context_register(self, func, *args):
        """
        :term:`Context manager <context manager>` which temporarily registers a
        filter function.
        """
        token = self.register(func, *args)
        try:
            yield
        finally:
            self.unregister(token)

    def __len__(self):
        return len(self._filter_order)

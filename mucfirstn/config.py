########################################################################
# File name: config.py
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
:mod:`~mucfirstn.config` --- Moderation configuration
#####################################################

The policy is configured in an INI file section:

.. code-block:: ini

   [muc_first_n_moderator]
   allowners_moderated_subdomains = team1 team2
   allowners_moderated_rooms = standup, retro
   allowners_disable_revoke_owners = false

List options are separated by whitespace and/or commas.

.. autoclass:: ModerationSpec

.. autoclass:: Options

.. autoclass:: ModerationConfig
"""
import collections
import configparser
import logging
import threading

from . import callbacks

from .utils import split_list


logger = logging.getLogger(__name__)


#: Name of the configuration section read by :class:`Options`.
SECTION = "muc_first_n_moderator"

MODERATED_SUBDOMAINS = "allowners_moderated_subdomains"
MODERATED_ROOMS = "allowners_moderated_rooms"
DISABLE_REVOKE_OWNERS = "allowners_disable_revoke_owners"


class ModerationSpec(collections.namedtuple(
        "ModerationSpec",
        [
            "moderated_subdomains",
            "moderated_rooms",
            "disable_revoke_owners",
        ])):
    """
    Immutable snapshot of the moderation configuration.

    .. attribute:: moderated_subdomains

       :class:`frozenset` of subdomains all of whose rooms are moderated.

    .. attribute:: moderated_rooms

       :class:`frozenset` of room names (without subdomain) which are
       moderated.

    .. attribute:: disable_revoke_owners

       If true, attempts to revoke owner affiliation are not intercepted.

    .. autoattribute:: is_active

    .. automethod:: from_options
    """

    __slots__ = []

    def __new__(cls, moderated_subdomains=(), moderated_rooms=(),
                disable_revoke_owners=False):
        return super().__new__(
            cls,
            frozenset(moderated_subdomains),
            frozenset(moderated_rooms),
            bool(disable_revoke_owners),
        )

    @property
    def is_active(self):
        """
        False if neither subdomains nor rooms are moderated.
        """
        return bool(self.moderated_subdomains or self.moderated_rooms)

    @classmethod
    def from_options(cls, options):
        """
        Build a spec from an :class:`Options` accessor.
        """
        return cls(
            moderated_subdomains=options.get_option_set(MODERATED_SUBDOMAINS),
            moderated_rooms=options.get_option_set(MODERATED_ROOMS),
            disable_revoke_owners=options.get_option_boolean(
                DISABLE_REVOKE_OWNERS,
                False,
            ),
        )


ModerationSpec.EMPTY = ModerationSpec()


class Options:
    """
    Typed access to one section of a :class:`configparser.ConfigParser`.

    A missing section or option yields the defaults.

    .. automethod:: get_option_set

    .. automethod:: get_option_boolean
    """

    def __init__(self, parser, section=SECTION):
        super().__init__()
        self._parser = parser
        self._section = section

    def get_option_set(self, name):
        """
        Return the list option `name` as :class:`frozenset`.
        """
        value = self._parser.get(self._section, name, fallback="")
        return frozenset(split_list(value))

    def get_option_boolean(self, name, default=False):
        """
        Return the boolean option `name`.

        :raises ValueError: if the value is not a recognised boolean
        """
        return self._parser.getboolean(self._section, name, fallback=default)


class ModerationConfig:
    """
    Holder of the current :class:`ModerationSpec`.

    :param loader: Callable returning a fresh :class:`ModerationSpec`; it is
        called once on construction and again on every :meth:`reload`.

    Readers access :attr:`spec` and always get a complete snapshot, either
    the one from before or the one from after a concurrent reload.

    .. autoattribute:: spec

    .. automethod:: reload

    .. signal:: on_reloaded(old_spec, new_spec)

       Fired after :attr:`spec` was replaced.

    .. automethod:: from_file

    .. automethod:: from_mapping
    """

    on_reloaded = callbacks.Signal()

    def __init__(self, loader):
        super().__init__()
        self._loader = loader
        self._lock = threading.Lock()
        self._spec = loader()

    @property
    def spec(self):
        """
        The current :class:`ModerationSpec`.
        """
        return self._spec

    def reload(self):
        """
        Load a new spec and replace the current one.

        If the loader raises, the current spec stays in place and the
        exception propagates.
        """
        new_spec = self._loader()
        with self._lock:
            old_spec = self._spec
            self._spec = new_spec
        logger.info(
            "moderation config reloaded: %d subdomain(s), %d room(s), "
            "revoke guard %s",
            len(new_spec.moderated_subdomains),
            len(new_spec.moderated_rooms),
            "disabled" if new_spec.disable_revoke_owners else "enabled",
        )
        self.on_reloaded(old_spec, new_spec)
        return new_spec

    @classmethod
    def from_file(cls, path, section=SECTION):
        """
        Read the spec from the INI file at `path`; :meth:`reload` re-reads
        the file.
        """
        def load():
            parser = configparser.ConfigParser()
            with open(path, "r") as f:
                parser.read_file(f)
            return ModerationSpec.from_options(Options(parser, section))

        return cls(load)

    @classmethod
    def from_mapping(cls, mapping, section=SECTION):
        """
        Read the spec from a mapping of option names to string values, as
        produced by an embedding application.

        The mapping is read again on every :meth:`reload`, so changes to a
        mutable mapping are picked up.
        """
        def load():
            parser = configparser.ConfigParser()
            parser.read_dict({section: mapping})
            return ModerationSpec.from_options(Options(parser, section))

        return cls(load)

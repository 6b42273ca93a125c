"""
=======
Manager
=======

A base Manager class used to create the managers that own ``sortition``
subsystems.

"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from layered_config_tree import LayeredConfigTree


class Manager(ABC):
    CONFIGURATION_DEFAULTS: dict[str, Any] = {}
    """A dictionary containing the defaults for any configurations managed by this
    manager. An empty dictionary indicates no managed configurations.

    """

    ##############
    # Properties #
    ##############

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    def configuration_defaults(self) -> dict[str, Any]:
        """Provides a dictionary containing the defaults for any configurations
        managed by this manager.

        These default values are stored at the `base` layer of the
        LayeredConfigTree built by
        :func:`sortition.framework.configuration.build_configuration`.
        """
        return self.CONFIGURATION_DEFAULTS

    #####################
    # Lifecycle methods #
    #####################

    def setup(self, configuration: LayeredConfigTree) -> None:
        """Defines custom actions this manager needs to run before it is used.

        This method is intended to be overridden by subclasses to perform any
        necessary setup operations specific to the manager. By default, it
        does nothing.

        Parameters
        ----------
        configuration
            The configuration tree holding this manager's settings.
        """
        pass


class Interface:
    """An interface class handed to consumers of a ``sortition`` subsystem."""

    pass

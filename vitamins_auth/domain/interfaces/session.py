"""Session host interface."""

from abc import ABC, abstractmethod


class ISessionHost(ABC):
    """Owner of the authentication flow.

    Receives the terminal signal of the flow and switches to the
    authenticated part of the app.
    """

    @abstractmethod
    def proceed_to_home(self) -> None:
        raise NotImplementedError

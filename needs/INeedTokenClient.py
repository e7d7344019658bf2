"""
Interface indicating that a class requires an OAuth token client.
"""

import abc
from typing import Any


class INeedTokenClientInterface(abc.ABC):
    """
    Interface indicating that a class requires an OAuth token client.
    """

    @property
    def token_client(self) -> Any:
        return getattr(self, "_token_client", None)

    @token_client.setter
    def token_client(self, value: Any) -> None:
        setattr(self, "_token_client", value)

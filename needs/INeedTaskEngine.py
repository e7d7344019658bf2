"""
Interface indicating that a class requires a task engine client.
"""

import abc
from typing import Any


class INeedTaskEngineInterface(abc.ABC):
    """
    Interface indicating that a class requires a task engine client.
    """

    @property
    def task_engine(self) -> Any:
        """
        Property to get the task engine instance.
        Default implementation returns the stored `_task_engine` attribute or None.
        """
        return getattr(self, "_task_engine", None)

    @task_engine.setter
    def task_engine(self, value: Any) -> None:
        """
        Property setter to set the task engine instance (tests assign a double here).
        """
        setattr(self, "_task_engine", value)

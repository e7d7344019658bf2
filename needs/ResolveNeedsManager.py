"""
Contains the manager to resolve needs for needy objects.
"""

from needs.INeedTaskEngine import INeedTaskEngineInterface
from needs.INeedTokenClient import INeedTokenClientInterface
from worker_clients.oauth_token_client import OAuthTokenClient
from worker_clients.task_engine_client import TaskEngineClient


class ResolveNeedsManager:
    """
    Manager to resolve needs for needy objects.
    """

    @staticmethod
    def resolve_needs(needy_instance: object):
        """
        Resolve needs for the given needy object (instance of a class).
        Only works with instances, not classes.
        """
        if isinstance(needy_instance, type):
            raise ValueError(
                "resolve_needs() only works with instances, not classes. "
                f"Received class: {needy_instance.__name__}"
            )

        if INeedTaskEngineInterface in needy_instance.__class__.__mro__:
            needy_instance.task_engine = TaskEngineClient()

        if INeedTokenClientInterface in needy_instance.__class__.__mro__:
            needy_instance.token_client = OAuthTokenClient()

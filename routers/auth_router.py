"""
Router for the OAuth PKCE login flow and logout.
"""
from fastapi import APIRouter

from needs.ResolveNeedsManager import ResolveNeedsManager
from views.auth_views import AuthViewsManager


router = APIRouter(
    tags=["auth"],
)

views_manager = AuthViewsManager(router)
ResolveNeedsManager.resolve_needs(views_manager)

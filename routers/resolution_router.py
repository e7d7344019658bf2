"""
Router for the resolution job endpoints.
"""
from fastapi import APIRouter

from needs.ResolveNeedsManager import ResolveNeedsManager
from views.resolution_views import ResolutionViewsManager


router = APIRouter(
    tags=["resolution"],
)

views_manager = ResolutionViewsManager(router)
ResolveNeedsManager.resolve_needs(views_manager)

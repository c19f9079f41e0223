"""
API Routes for Open Douban

Route modules:
- movies: metadata resolution, search, celebrities, photos, images
"""

from opendouban.api.routes.movies import router as movies_router

__all__ = [
    "movies_router",
]

"""Router exports."""

# Routers included by create_app
from .progress_router import router as progress_router
from .routine_router import router as routine_router
from .stats_router import router as stats_router
from .theme_router import router as theme_router

__all__ = [
    "progress_router",
    "routine_router",
    "stats_router",
    "theme_router",
]

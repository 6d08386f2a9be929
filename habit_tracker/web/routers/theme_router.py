"""Theme preference routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from habit_tracker.services.theme_service import ThemeController
from habit_tracker.web import handlers as web_handlers
from habit_tracker.web.dependencies import get_theme_controller

router = APIRouter()


@router.get("/api/theme", name="api_theme")
def api_theme(controller: ThemeController = Depends(get_theme_controller)):
    return web_handlers.api_theme(controller)


@router.put("/api/theme", name="save_theme")
async def save_theme(request: Request, controller: ThemeController = Depends(get_theme_controller)):
    return await web_handlers.save_theme(request, controller)

# API Routers

from api.routers.health import router as health_router
from api.routers.layout import router as layout_router
from api.routers.navigation import router as navigation_router
from api.routers.sidebar import router as sidebar_router
from api.routers.tenants import router as tenants_router
from api.routers.ui_settings import router as ui_settings_router

__all__ = [
    "health_router",
    "navigation_router",
    "layout_router",
    "sidebar_router",
    "ui_settings_router",
    "tenants_router",
]

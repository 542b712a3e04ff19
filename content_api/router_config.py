# content_api/router_config.py
"""
Router configuration for the Content API
Centralized router management separated from main.py
"""
from .config import ContentAPISettings


def setup_routers(app, settings: ContentAPISettings):
    """Configure all application routers"""
    from .src.resources.routes import build_resource_router
    from .src.resources.schema import RESOURCES, ResourceType
    from .src.dashboard.routes import router as dashboard_router
    from .src.auth.routes import router as auth_router

    # Site content
    for resource_type in (ResourceType.SERVICE, ResourceType.BANNER, ResourceType.FAQ, ResourceType.GALLERY):
        app.include_router(build_resource_router(RESOURCES[resource_type], settings))

    # Admin dashboard
    app.include_router(dashboard_router)

    # Authentication
    app.include_router(auth_router)

    return app

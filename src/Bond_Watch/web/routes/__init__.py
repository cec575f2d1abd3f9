"""FastAPI route modules for Bond Watch.

Re-exports all routers so the application factory can import them:
    from Bond_Watch.web.routes import bonds_router
"""

from Bond_Watch.web.routes.bonds import router as bonds_router

__all__ = ["bonds_router"]

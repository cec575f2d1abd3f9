"""FastAPI web layer for Bond Watch.

Re-exports the application factory so consumers can import directly:
    from Bond_Watch.web import create_app
"""

from Bond_Watch.web.app import create_app

__all__ = ["create_app"]

"""
Web — FastAPI surface for the ordering funnel.

Usage:
    from fiberorder.web import create_app

    app = create_app()
    # uvicorn --factory fiberorder.web:create_app
"""

from fiberorder.web._app import SessionRegistry, create_app

__all__ = (
    "SessionRegistry",
    "create_app",
)

"""FastAPI dependencies for ip4p-redirect routes."""

from __future__ import annotations

from fastapi import Request

from ip4p_redirect.router import Router


def get_router(request: Request) -> Router:
    """Get the redirect router from app state."""
    return request.app.state.router

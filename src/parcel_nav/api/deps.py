"""Request dependencies shared by the routers."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from ..services.navigation.session import NavigationSession


def get_session(request: Request) -> NavigationSession:
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Navigation session is not initialised.",
        )
    return session

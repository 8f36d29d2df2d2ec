"""Endpoints returning the rendered graph"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from netcircle.api.auth import current_user_id
from netcircle.api.sessions import SessionRegistry


def get_views_router(sessions: SessionRegistry) -> APIRouter:
    router = APIRouter()

    @router.get("/graph.svg")
    async def graph(
        hovered: str | None = None,
        user_id: str = Depends(current_user_id),  # noqa: B008
    ) -> Response:
        session = sessions.get(user_id)
        if hovered is not None:
            if session.model.person(hovered) is None:
                raise HTTPException(status_code=404, detail=f"Person {hovered} not found")
            session.surface.pointer_enter(hovered)
        try:
            svg = session.render_svg()
        finally:
            if hovered is not None:
                session.surface.pointer_leave(hovered)
        return Response(
            content=svg,
            media_type="image/svg+xml",
            headers={"Cache-Control": "no-cache"},
        )

    return router

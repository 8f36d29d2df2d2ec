from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from loguru import logger

from netcircle.api.auth import current_user_id
from netcircle.api.schemas import (
    BulkPeopleCreate,
    CategoryCreate,
    CategoryUpdate,
    CenterUpdate,
    ContactedUpdate,
    LinkCreate,
    LinkUpdate,
    PersonCreate,
    PersonUpdate,
    SelectionUpdate,
)
from netcircle.api.sessions import SessionRegistry
from netcircle.network.schemas import MutationResult
from netcircle.session import NetworkSession


async def _save_in_background(session: NetworkSession) -> None:
    # runs on the event loop so the snapshot never overlaps a request mutating the model
    if not session.save():
        logger.warning(f"Changes for {session.user_id} are kept in memory only")


def _commit(
    result: MutationResult, session: NetworkSession, background_tasks: BackgroundTasks
) -> MutationResult:
    """Turn a rejected mutation into an HTTP error, schedule a save otherwise."""
    if not result.ok:
        status_code = 404 if result.error and result.error.endswith("not found") else 400
        raise HTTPException(status_code=status_code, detail=result.error)
    background_tasks.add_task(_save_in_background, session)
    return result


def _layout_payload(session: NetworkSession) -> dict:
    return {
        "centerId": session.center_id,
        "width": session.engine.width,
        "height": session.engine.height,
        "positions": {
            node_id: position.model_dump()
            for node_id, position in session.current_layout().items()
        },
    }


def get_endpoints_router(*, sessions: SessionRegistry) -> APIRouter:  # noqa: C901
    router = APIRouter()

    async def current_session(
        user_id: str = Depends(current_user_id),  # noqa: B008
    ) -> NetworkSession:
        return sessions.get(user_id)

    @router.get("/health")
    async def health_check():
        return {"status": "healthy"}

    # Network

    @router.get("/api/network")
    async def get_network(session: NetworkSession = Depends(current_session)):  # noqa: B008
        return session.model.snapshot().model_dump(mode="json", by_alias=True)

    @router.post("/api/network/save")
    async def save_network(session: NetworkSession = Depends(current_session)):  # noqa: B008
        saved = session.save()
        if not saved:
            logger.error(f"Explicit save failed for {session.user_id}")
        return {"saved": saved}

    @router.post("/api/network/reset")
    async def reset_network(
        background_tasks: BackgroundTasks,
        session: NetworkSession = Depends(current_session),  # noqa: B008
    ):
        session.reset()
        background_tasks.add_task(_save_in_background, session)
        return _layout_payload(session)

    @router.get("/api/layout")
    async def get_layout(session: NetworkSession = Depends(current_session)):  # noqa: B008
        return _layout_payload(session)

    @router.put("/api/center")
    async def set_center(
        body: CenterUpdate,
        session: NetworkSession = Depends(current_session),  # noqa: B008
    ):
        result = session.recenter(body.person_id)
        if not result.ok:
            raise HTTPException(status_code=404, detail=result.error)
        return _layout_payload(session)

    @router.put("/api/selection")
    async def set_selection(
        body: SelectionUpdate,
        session: NetworkSession = Depends(current_session),  # noqa: B008
    ):
        if body.person_id is not None and session.model.person(body.person_id) is None:
            raise HTTPException(status_code=404, detail=f"Person {body.person_id} not found")
        session.surface.select(body.person_id)
        return {"selectedId": session.surface.selected_id}

    @router.get("/api/metrics")
    async def get_metrics(session: NetworkSession = Depends(current_session)):  # noqa: B008
        return session.metrics_snapshot().model_dump(mode="json", by_alias=True)

    @router.get("/api/legend")
    async def get_legend(session: NetworkSession = Depends(current_session)):  # noqa: B008
        return [entry.model_dump(by_alias=True) for entry in session.legend()]

    # People

    @router.post("/api/people", status_code=201)
    async def add_person(
        body: PersonCreate,
        background_tasks: BackgroundTasks,
        session: NetworkSession = Depends(current_session),  # noqa: B008
    ) -> MutationResult:
        result = session.add_person(
            body.name, body.group, details=body.details, last_contacted=body.last_contacted
        )
        return _commit(result, session, background_tasks)

    @router.post("/api/people/bulk", status_code=201)
    async def bulk_add_people(
        body: BulkPeopleCreate,
        background_tasks: BackgroundTasks,
        session: NetworkSession = Depends(current_session),  # noqa: B008
    ) -> MutationResult:
        result = session.bulk_add_people(
            body.names,
            body.group,
            connect_to_me=body.connect_to_me,
            connection_strength=body.connection_strength,
        )
        return _commit(result, session, background_tasks)

    @router.patch("/api/people/{person_id}")
    async def update_person(
        person_id: str,
        body: PersonUpdate,
        background_tasks: BackgroundTasks,
        session: NetworkSession = Depends(current_session),  # noqa: B008
    ) -> MutationResult:
        result = session.update_person(person_id, **body.model_dump(exclude_unset=True))
        return _commit(result, session, background_tasks)

    @router.post("/api/people/{person_id}/contacted")
    async def mark_contacted(
        person_id: str,
        background_tasks: BackgroundTasks,
        body: ContactedUpdate | None = None,
        session: NetworkSession = Depends(current_session),  # noqa: B008
    ) -> MutationResult:
        result = session.mark_contacted(person_id, body.when if body else None)
        return _commit(result, session, background_tasks)

    @router.delete("/api/people/{person_id}")
    async def delete_person(
        person_id: str,
        background_tasks: BackgroundTasks,
        session: NetworkSession = Depends(current_session),  # noqa: B008
    ) -> MutationResult:
        return _commit(session.delete_person(person_id), session, background_tasks)

    @router.get("/api/people/{person_id}/connections")
    async def get_connections(
        person_id: str,
        session: NetworkSession = Depends(current_session),  # noqa: B008
    ):
        if session.model.person(person_id) is None:
            raise HTTPException(status_code=404, detail=f"Person {person_id} not found")
        return [
            connection.model_dump(mode="json", by_alias=True)
            for connection in session.connections(person_id)
        ]

    @router.get("/api/groups/{group}/people")
    async def get_people_in_group(
        group: str,
        session: NetworkSession = Depends(current_session),  # noqa: B008
    ):
        return [
            person.model_dump(mode="json", by_alias=True)
            for person in session.people_in_group(group)
        ]

    # Links

    @router.post("/api/links", status_code=201)
    async def add_link(
        body: LinkCreate,
        background_tasks: BackgroundTasks,
        session: NetworkSession = Depends(current_session),  # noqa: B008
    ) -> MutationResult:
        result = session.add_link(body.source, body.target, body.strength)
        return _commit(result, session, background_tasks)

    @router.patch("/api/links/{source}/{target}")
    async def update_link(
        source: str,
        target: str,
        body: LinkUpdate,
        background_tasks: BackgroundTasks,
        session: NetworkSession = Depends(current_session),  # noqa: B008
    ) -> MutationResult:
        result = session.update_link(source, target, body.strength)
        return _commit(result, session, background_tasks)

    @router.delete("/api/links/{source}/{target}")
    async def delete_link(
        source: str,
        target: str,
        background_tasks: BackgroundTasks,
        session: NetworkSession = Depends(current_session),  # noqa: B008
    ) -> MutationResult:
        return _commit(session.delete_link(source, target), session, background_tasks)

    # Categories

    @router.get("/api/categories")
    async def get_categories(session: NetworkSession = Depends(current_session)):  # noqa: B008
        return [
            category.model_dump(by_alias=True)
            for category in session.model.categories().values()
        ]

    @router.post("/api/categories", status_code=201)
    async def add_category(
        body: CategoryCreate,
        background_tasks: BackgroundTasks,
        session: NetworkSession = Depends(current_session),  # noqa: B008
    ) -> MutationResult:
        result = session.add_category(body.key, body.label, body.color)
        return _commit(result, session, background_tasks)

    @router.patch("/api/categories/{key}")
    async def update_category(
        key: str,
        body: CategoryUpdate,
        background_tasks: BackgroundTasks,
        session: NetworkSession = Depends(current_session),  # noqa: B008
    ) -> MutationResult:
        category = session.model.categories().get(key)
        if category is not None and category.kind == "default":
            if body.label is not None:
                raise HTTPException(status_code=400, detail="Default categories can't be renamed")
            if body.color is None:
                raise HTTPException(status_code=400, detail="Nothing to update")
            result = session.set_default_category_color(key, body.color)
        else:
            result = session.update_category(key, label=body.label, color=body.color)
        return _commit(result, session, background_tasks)

    @router.delete("/api/categories/{key}")
    async def delete_category(
        key: str,
        background_tasks: BackgroundTasks,
        session: NetworkSession = Depends(current_session),  # noqa: B008
    ) -> MutationResult:
        category = session.model.categories().get(key)
        if category is not None and category.kind == "default":
            result = session.delete_default_category(key)
        else:
            result = session.delete_category(key)
        return _commit(result, session, background_tasks)

    @router.post("/api/categories/{key}/restore")
    async def restore_category(
        key: str,
        background_tasks: BackgroundTasks,
        session: NetworkSession = Depends(current_session),  # noqa: B008
    ) -> MutationResult:
        return _commit(session.restore_default_category(key), session, background_tasks)

    return router

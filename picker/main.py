"""Entry point for the FastAPI-powered movie night picker."""

from __future__ import annotations

import logging
import random
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .catalog import MovieCatalog
from .config import settings
from .controller import (
    EventDispatcher,
    PickerController,
    PickerEvent,
    ballots_from_form,
)
from .database import Database
from .models import (
    ActionRequest,
    DrawRequest,
    RemovedRequest,
    SelectionRequest,
    TallyRequest,
    WatchedRequest,
)
from .selection import select_movies
from .services.api_client import PickerApiClient
from .services.store import MovieStore
from .state import state_from_snapshot
from .voting import InvalidBallotError, tally_votes
from .web import render_page

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI

STORE_ERROR_MESSAGE = "Database operation failed"
SUCCESS = {"success": True}


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    database = Database(settings.database_url)
    await database.create_all()
    catalog = MovieCatalog.from_file(settings.catalog_path)
    logger.info("Using database %s", settings.database_url)

    fastapi_app.state.database = database
    fastapi_app.state.store = MovieStore(database)
    fastapi_app.state.catalog = catalog

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await database.dispose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Household movie night picker with weighted draws and Borda votes",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_store(app: FastAPI) -> MovieStore:
    store = getattr(app.state, "store", None)
    if not isinstance(store, MovieStore):
        raise RuntimeError("Movie store not initialised")
    return store


def get_catalog(app: FastAPI) -> MovieCatalog:
    catalog = getattr(app.state, "catalog", None)
    if not isinstance(catalog, MovieCatalog):
        raise RuntimeError("Movie catalog not initialised")
    return catalog


@asynccontextmanager
async def loopback_controller(fastapi_app: FastAPI) -> AsyncIterator[PickerController]:
    """Yield a controller talking to ``fastapi_app``'s own JSON API in-process."""

    transport = httpx.ASGITransport(app=fastapi_app)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://picker"
    ) as http_client:
        controller = PickerController(
            get_catalog(fastapi_app),
            PickerApiClient(http_client),
            selection_size=settings.selection_size,
            rng=getattr(fastapi_app.state, "rng", None),
        )
        await controller.load_state()
        yield controller


def register_error_handlers(fastapi_app: FastAPI) -> None:
    @fastapi_app.exception_handler(SQLAlchemyError)
    async def store_failure(_: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error("Store operation failed", exc_info=exc)
        return JSONResponse({"error": STORE_ERROR_MESSAGE}, status_code=500)

    @fastapi_app.exception_handler(RequestValidationError)
    async def invalid_request(_: Request, exc: RequestValidationError) -> JSONResponse:
        messages = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        return JSONResponse({"error": "; ".join(messages)}, status_code=400)


def register_routes(fastapi_app: FastAPI) -> None:
    register_error_handlers(fastapi_app)

    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/api/state")
    async def read_state() -> JSONResponse:
        snapshot = await get_store(fastapi_app).get_state()
        return JSONResponse(snapshot.to_payload())

    @fastapi_app.get("/api/movies")
    async def list_movies() -> JSONResponse:
        catalog = get_catalog(fastapi_app)
        return JSONResponse(
            [movie.model_dump(mode="json", by_alias=True) for movie in catalog]
        )

    @fastapi_app.post("/api/selection")
    async def set_selection(payload: SelectionRequest) -> dict[str, bool]:
        await get_store(fastapi_app).set_selection(payload.movie_ids)
        return SUCCESS

    @fastapi_app.post("/api/selection/draw")
    async def draw_selection(payload: DrawRequest | None = None) -> dict[str, list[int]]:
        store = get_store(fastapi_app)
        state = state_from_snapshot(get_catalog(fastapi_app), await store.get_state())
        count = payload.count if payload and payload.count else settings.selection_size
        rng: random.Random | None = getattr(fastapi_app.state, "rng", None)
        drawn = select_movies(state.available, state.watched, count, rng=rng)
        movie_ids = [movie.id for movie in drawn]
        await store.set_selection(movie_ids)
        return {"movieIds": movie_ids}

    @fastapi_app.post("/api/watched")
    async def mark_watched(payload: WatchedRequest) -> dict[str, bool]:
        await get_store(fastapi_app).mark_watched(payload.movie_id, payload.score)
        return SUCCESS

    @fastapi_app.delete("/api/watched/{movie_id}")
    async def unwatch(movie_id: int) -> dict[str, bool]:
        await get_store(fastapi_app).unwatch(movie_id)
        return SUCCESS

    @fastapi_app.post("/api/removed")
    async def remove(payload: RemovedRequest) -> dict[str, bool]:
        await get_store(fastapi_app).remove(payload.movie_id)
        return SUCCESS

    @fastapi_app.delete("/api/removed/{movie_id}")
    async def restore(movie_id: int) -> dict[str, bool]:
        await get_store(fastapi_app).restore(movie_id)
        return SUCCESS

    @fastapi_app.post("/api/tally")
    async def tally(payload: TallyRequest) -> JSONResponse:
        snapshot = await get_store(fastapi_app).get_state()
        try:
            result = tally_votes(snapshot.current_selection, payload.ballots)
        except InvalidBallotError as exc:
            return JSONResponse({"error": str(exc)}, status_code=400)
        return JSONResponse(result.to_payload())

    @fastapi_app.post("/actions/{event}")
    async def run_action(event: str, payload: ActionRequest | None = None) -> JSONResponse:
        try:
            picker_event = PickerEvent(event)
        except ValueError:
            return JSONResponse({"error": f"Unknown action {event!r}"}, status_code=404)
        payload = payload or ActionRequest()

        async with loopback_controller(fastapi_app) as controller:
            dispatcher = controller.bind(EventDispatcher())

            if picker_event is PickerEvent.NEW_SELECTION:
                drawn = await dispatcher.dispatch(picker_event)
                return JSONResponse({"movieIds": [movie.id for movie in drawn]})

            if picker_event is PickerEvent.CALCULATE_WINNER:
                try:
                    result = await dispatcher.dispatch(picker_event, payload.ballots)
                except InvalidBallotError as exc:
                    return JSONResponse({"error": str(exc)}, status_code=400)
                return JSONResponse(result.to_payload())

            if payload.movie_id is None:
                return JSONResponse({"error": "movieId is required"}, status_code=400)
            if picker_event is PickerEvent.MARK_WATCHED:
                done = await dispatcher.dispatch(
                    picker_event, payload.movie_id, payload.score
                )
            else:
                done = await dispatcher.dispatch(picker_event, payload.movie_id)

        if not done:
            return JSONResponse(
                {"error": f"Could not {picker_event.value} movie {payload.movie_id}"},
                status_code=400,
            )
        return JSONResponse(SUCCESS)

    @fastapi_app.get("/", response_class=HTMLResponse)
    async def picker_page(request: Request) -> HTMLResponse:
        params = request.query_params
        async with loopback_controller(fastapi_app) as controller:
            state = controller.state
        dispatcher = controller.bind(EventDispatcher())

        error: str | None = None
        if any(key.startswith("voter-") for key in params.keys()):
            movie_ids = [movie.id for movie in state.current_selection]
            ballots = ballots_from_form(params, movie_ids, settings.voter_count)
            try:
                await dispatcher.dispatch(PickerEvent.CALCULATE_WINNER, ballots)
            except InvalidBallotError:
                error = (
                    "Please make sure all voters have ranked all movies with "
                    f"unique rankings (1-{len(movie_ids)})"
                )

        search = params.get("search", "")
        genre = params.get("genre", "")
        status = params.get("status", "")
        return HTMLResponse(
            render_page(
                controller.state,
                app_name=settings.app_name,
                tab=params.get("tab", "pick"),
                voter_count=settings.voter_count,
                error=error,
                all_movies=controller.filter_catalog(
                    search=search, genre=genre, status=status
                ),
                genres=controller.genres(),
                search=search,
                genre=genre,
                status=status,
            )
        )


app = create_app()

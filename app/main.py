"""Entry point for the FastAPI-powered catalog and watch-list service."""

from __future__ import annotations

import json
import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any, cast

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .database import Database
from .models import ContentType, WatchListItem
from .services.catalog_store import CatalogRepository
from .services.detail import merge_detail
from .services.omdb import OMDbClient
from .services.watchlist import DuplicateItemError, ItemNotFoundError, WatchListService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    settings.require_credentials()
    database_url = cast(str, settings.database_url)

    exit_stack = AsyncExitStack()
    omdb_http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(timeout=httpx.Timeout(15.0, connect=5.0))
    )
    database = Database(database_url)
    try:
        await database.connect()
    except Exception:
        logger.exception("Database connection failed; refusing to start")
        await database.dispose()
        await exit_stack.aclose()
        raise
    logger.info("Database connected successfully.")

    fastapi_app.state.database = database
    fastapi_app.state.catalog_repository = CatalogRepository(database.session_factory)
    fastapi_app.state.watchlist_service = WatchListService(database.session_factory)
    fastapi_app.state.omdb_client = OMDbClient(settings, omdb_http_client)

    try:
        yield
    finally:
        await database.dispose()
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Curated film and series catalog with per-user watch lists",
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


def get_catalog_repository(app: FastAPI) -> CatalogRepository:
    repository = getattr(app.state, "catalog_repository", None)
    if not isinstance(repository, CatalogRepository):
        raise RuntimeError("Catalog repository not initialised")
    return repository


def get_watchlist_service(app: FastAPI) -> WatchListService:
    service = getattr(app.state, "watchlist_service", None)
    if not isinstance(service, WatchListService):
        raise RuntimeError("Watch-list service not initialised")
    return service


def get_omdb_client(app: FastAPI) -> OMDbClient:
    client = getattr(app.state, "omdb_client", None)
    if not isinstance(client, OMDbClient):
        raise RuntimeError("OMDb client not initialised")
    return client


def _server_error(context: str, exc: Exception, *, include_reason: bool = True) -> HTTPException:
    """Log ``exc`` and build the 500 response surfaced to the client."""

    logger.exception("%s", context)
    detail = f"{context} {exc}" if include_reason else context
    return HTTPException(status_code=500, detail=detail)


def register_routes(fastapi_app: FastAPI) -> None:
    @fastapi_app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(
        _: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse({"message": str(exc.detail)}, status_code=exc.status_code)

    async def _list_catalog(kind: ContentType, *, limit: int | None = None) -> list[dict[str, Any]]:
        label = "movies" if kind == "movie" else "series"
        try:
            entries = await get_catalog_repository(fastapi_app).list_by_kind(
                kind, limit=limit
            )
        except Exception as exc:
            raise _server_error(f"Failed to fetch {label}.", exc) from exc
        return [entry.to_payload() for entry in entries]

    @fastapi_app.get("/")
    async def root() -> dict[str, str]:
        return {"message": f"{settings.app_name} backend is running"}

    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/api/movies")
    async def list_movies() -> list[dict[str, Any]]:
        return await _list_catalog("movie")

    @fastapi_app.get("/api/series")
    async def list_series() -> list[dict[str, Any]]:
        return await _list_catalog("series")

    @fastapi_app.get("/api/trending-movies")
    async def trending_movies() -> list[dict[str, Any]]:
        return await _list_catalog("movie", limit=settings.trending_limit)

    @fastapi_app.get("/api/trending-series")
    async def trending_series() -> list[dict[str, Any]]:
        return await _list_catalog("series", limit=settings.trending_limit)

    @fastapi_app.get("/api/genres")
    async def list_genres() -> list[dict[str, Any]]:
        try:
            genres = await get_catalog_repository(fastapi_app).genres()
        except Exception as exc:
            raise _server_error("Failed to fetch genres.", exc) from exc
        return [genre.model_dump() for genre in genres]

    @fastapi_app.get("/api/detail/{external_id}")
    async def detail(external_id: str) -> dict[str, Any]:
        try:
            entry = await get_catalog_repository(fastapi_app).find_detail(external_id)
        except Exception as exc:
            raise _server_error("Failed to fetch detailed content.", exc) from exc
        if entry is None:
            raise HTTPException(status_code=404, detail="Content not found.")
        return entry.to_payload()

    @fastapi_app.get("/api/detail/{external_id}/live")
    async def live_detail(external_id: str) -> dict[str, Any]:
        try:
            provider = await get_omdb_client(fastapi_app).fetch_detail(external_id)
            local = await get_catalog_repository(fastapi_app).find_detail(external_id)
        except Exception as exc:
            raise _server_error("Failed to fetch detailed content.", exc) from exc

        payload = merge_detail(provider, local)
        if payload is None:
            raise HTTPException(status_code=404, detail="Content not found.")
        return payload

    @fastapi_app.get("/api/episodes/{external_id}/{season}")
    async def episodes(external_id: str, season: int) -> list[dict[str, Any]]:
        try:
            result = await get_omdb_client(fastapi_app).fetch_season(external_id, season)
        except Exception as exc:
            raise _server_error("Failed to fetch episodes.", exc) from exc
        if result is None:
            raise HTTPException(status_code=404, detail="Season not found.")
        return result

    @fastapi_app.get("/api/mylist/{user_id}")
    async def get_my_list(user_id: str) -> dict[str, Any]:
        try:
            items = await get_watchlist_service(fastapi_app).get_items(user_id)
        except Exception as exc:
            raise _server_error(
                "Failed to fetch My List.", exc, include_reason=False
            ) from exc
        return {"items": items}

    @fastapi_app.post("/api/mylist/{user_id}/{external_id}", status_code=201)
    async def add_to_my_list(
        request: Request, user_id: str, external_id: str
    ) -> dict[str, Any]:
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            payload = {}
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Invalid payload.")

        body_id = payload.get("externalId") or payload.get("imdbID")
        if body_id is not None and str(body_id) != external_id:
            raise HTTPException(
                status_code=400,
                detail="externalId in the body does not match the URL.",
            )
        try:
            item = WatchListItem.model_validate({**payload, "externalId": external_id})
        except ValidationError as exc:
            raise HTTPException(
                status_code=400,
                detail="Missing required fields: externalId, title, kind ('movie' or 'series').",
            ) from exc

        try:
            items = await get_watchlist_service(fastapi_app).add_item(user_id, item)
        except DuplicateItemError as exc:
            raise HTTPException(status_code=409, detail="Item already in My List.") from exc
        except Exception as exc:
            raise _server_error(
                "Failed to add item to My List.", exc, include_reason=False
            ) from exc
        return {"message": "Item added to My List.", "items": items}

    @fastapi_app.delete("/api/mylist/{user_id}/{external_id}")
    async def remove_from_my_list(user_id: str, external_id: str) -> dict[str, Any]:
        try:
            items = await get_watchlist_service(fastapi_app).remove_item(
                user_id, external_id
            )
        except ItemNotFoundError as exc:
            raise HTTPException(status_code=404, detail="Item not found in My List.") from exc
        except Exception as exc:
            raise _server_error(
                "Failed to remove item from My List.", exc, include_reason=False
            ) from exc
        return {"message": "Item removed from My List.", "items": items}


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )

"""
This module is the main entry point for the FastAPI application.
It builds the app, wires the MongoDB-backed MovieService into it and
defines the /api/movies endpoints for creating, listing, fetching,
updating and deleting movies.
movies_api.main.py
"""
import logging
import sys
from contextlib import asynccontextmanager
from typing import List, Optional

from bson.errors import InvalidId
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError, WriteError

from movies_api.config import ConfigurationError, configure_logging, load_settings
from movies_api.db import connect, get_movie_collection
from movies_api.errors import MovieAPIError, not_found, register_error_handlers
from movies_api.movie_service import (
    MessageResponse,
    Movie,
    MovieCreate,
    MovieService,
    MovieUpdate,
    parse_limit,
)

logger = logging.getLogger(__name__)

# failures of a single store call, including ids that are not ObjectIds
STORE_ERRORS = (InvalidId, PyMongoError)

router = APIRouter(prefix="/api/movies", tags=["movies"])


def get_movie_service(request: Request) -> MovieService:
    return request.app.state.movie_service


@router.post("", status_code=201, response_model=Movie)
def create(movie: MovieCreate, service: MovieService = Depends(get_movie_service)):
    try:
        return service.create_movie_doc(movie)
    except WriteError as e:
        # document rejected by the collection validator
        logger.info("Movie rejected by the store: %s", e)
        raise MovieAPIError(400, "Error creating new movie", str(e))
    except PyMongoError as e:
        logger.exception("Error creating new movie")
        raise MovieAPIError(500, "Error creating new movie", str(e))


@router.get("", response_model=List[Movie])
def list_movies(limit: Optional[str] = None, service: MovieService = Depends(get_movie_service)):
    try:
        return service.list_movie_docs(parse_limit(limit))
    except STORE_ERRORS as e:
        logger.exception("Error fetching movies")
        raise MovieAPIError(500, "Error fetching movies", str(e))


@router.get("/{movie_id}", response_model=Movie)
def get(movie_id: str, service: MovieService = Depends(get_movie_service)):
    try:
        movie = service.get_movie_doc(movie_id)
    except STORE_ERRORS as e:
        logger.exception("Error fetching movie %s", movie_id)
        raise MovieAPIError(500, "Error fetching movie", str(e))
    if not movie:
        raise not_found(movie_id)
    return movie


@router.put("/{movie_id}", response_model=Movie)
def update(movie_id: str, patch: MovieUpdate, service: MovieService = Depends(get_movie_service)):
    try:
        movie = service.update_movie_doc(movie_id, patch)
    except STORE_ERRORS as e:
        logger.exception("Error updating movie %s", movie_id)
        raise MovieAPIError(500, "Error updating movie", str(e))
    if not movie:
        raise not_found(movie_id)
    return movie


@router.delete("/{movie_id}", response_model=MessageResponse)
def delete(movie_id: str, service: MovieService = Depends(get_movie_service)):
    try:
        deleted = service.delete_movie_doc(movie_id)
    except STORE_ERRORS as e:
        logger.exception("Error deleting movie %s", movie_id)
        raise MovieAPIError(500, "Error deleting movie", str(e))
    if not deleted:
        raise not_found(movie_id)
    return {"message": f"Movie with ID {movie_id} deleted successfully"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = getattr(app.state, "mongo_client", None)
    if getattr(app.state, "movie_service", None) is None:
        # started by an external server such as `uvicorn movies_api.main:app`
        settings = load_settings()
        configure_logging(settings.log_level)
        client = connect(settings)
        app.state.movie_service = MovieService(get_movie_collection(client, settings))
    try:
        yield
    finally:
        if client is not None:
            client.close()


def create_app(service: Optional[MovieService] = None, client=None) -> FastAPI:
    app = FastAPI(title="Movies API", lifespan=lifespan)
    app.state.movie_service = service
    app.state.mongo_client = client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(router)
    return app


app = create_app()


def main():
    try:
        settings = load_settings()
    except ConfigurationError as e:
        configure_logging()
        logger.error("%s", e)
        sys.exit(1)
    configure_logging(settings.log_level)

    try:
        client = connect(settings)
        collection = get_movie_collection(client, settings)
    except PyMongoError as e:
        logger.error("MongoDB connection error: %s", e)
        sys.exit(1)

    import uvicorn

    logger.info("Server running on http://%s:%s", settings.host, settings.port)
    uvicorn.run(create_app(MovieService(collection), client), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

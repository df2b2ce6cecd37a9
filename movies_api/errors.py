"""
Error responses for the movie API.
Every failure is rendered as {"message": ..., "error": ...} with the
error key present only when there is an underlying cause to report.
movies_api.errors.py
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class MovieAPIError(Exception):
    def __init__(self, status_code: int, message: str, error=None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.error = error


def not_found(movie_id: str) -> MovieAPIError:
    return MovieAPIError(404, f"Movie with ID {movie_id} not found")


def build_error_body(message: str, error=None) -> dict:
    body = {"message": message}
    if error is not None:
        body["error"] = error
    return body


async def movie_api_error_handler(request: Request, exc: MovieAPIError):
    if exc.status_code == 404:
        logger.info("%s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=build_error_body(exc.message, exc.error))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    message = "Error creating new movie" if request.method == "POST" else "Invalid request"
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    logger.info("%s %s rejected: %s", request.method, request.url.path, errors)
    return JSONResponse(status_code=400, content=build_error_body(message, errors))


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(MovieAPIError, movie_api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

"""
This module loads the service configuration from the environment.
A .env file in the working directory is read first if present.
movies_api.config.py
"""
import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


class ConfigurationError(Exception):
    """Raised when the environment does not describe a usable service."""


class Settings(BaseModel):
    mongo_uri: str = Field(min_length=1)
    db_name: str = "movies_db"
    collection_name: str = "movies"
    host: str = "0.0.0.0"
    port: int = Field(3000, ge=1, le=65535)
    mongo_timeout_ms: int = Field(5000, ge=1)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level


def load_settings() -> Settings:
    load_dotenv()

    mongo_uri = (os.getenv("MONGO_URI") or "").strip()
    if not mongo_uri:
        raise ConfigurationError("MONGO_URI is not defined in the environment or .env file")

    values = {"mongo_uri": mongo_uri}
    for key, env in (
        ("db_name", "DB_NAME"),
        ("collection_name", "COLLECTION_NAME"),
        ("host", "HOST"),
        ("port", "PORT"),
        ("mongo_timeout_ms", "MONGO_TIMEOUT_MS"),
        ("log_level", "LOG_LEVEL"),
    ):
        value = os.getenv(env)
        if value:
            values[key] = value

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def configure_logging(level="INFO"):
    logging.basicConfig(level=str(level).upper(), format=LOG_FORMAT, force=True)

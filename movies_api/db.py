"""
This module handles the connection to the MongoDB database.
It opens the client, checks that the server answers and
returns the movie collection, creating it with a schema validator
the first time the service runs against a database.
movies_api.db.py
"""
import logging

from pymongo import MongoClient
from pymongo.errors import CollectionInvalid

from movies_api.config import Settings

logger = logging.getLogger(__name__)

MOVIE_SCHEMA = {
    "$jsonSchema": {
        "bsonType": "object",
        "required": ["title", "description"],
        "properties": {
            "title": {"bsonType": "string", "minLength": 1},
            "description": {"bsonType": "string", "minLength": 1},
            "image": {"bsonType": ["string", "null"]},
        },
    }
}


def connect(settings: Settings) -> MongoClient:
    client = MongoClient(settings.mongo_uri, serverSelectionTimeoutMS=settings.mongo_timeout_ms)
    try:
        # MongoClient connects lazily, ping forces the first round trip
        client.admin.command("ping")
    except Exception:
        client.close()
        raise
    logger.info("MongoDB connected")
    return client


def get_movie_collection(client: MongoClient, settings: Settings):
    db = client[settings.db_name]
    try:
        db.create_collection(settings.collection_name, validator=MOVIE_SCHEMA)
        logger.info("Created collection %s.%s", settings.db_name, settings.collection_name)
    except CollectionInvalid:
        logger.warning(
            "Collection %s.%s already exists, its schema validator was left unchanged",
            settings.db_name,
            settings.collection_name,
        )
    return db[settings.collection_name]

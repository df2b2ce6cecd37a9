"""This module serves as a service layer for the movie database, providing
the request/response models and a MovieService that creates, reads, updates
and deletes movie documents in a MongoDB collection.
movies_api.movie_service.py
"""
import math
from typing import List, Optional

from bson import ObjectId
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pymongo import ReturnDocument

# largest limit a BSON int64 can carry
MAX_LIMIT = 2**63 - 1


class MovieCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # "movie" is the key older clients send for the title
    title: str = Field(min_length=1, validation_alias=AliasChoices("title", "movie"))
    description: str = Field(min_length=1)
    image: Optional[str] = None


class MovieUpdate(BaseModel):
    """Partial update: only the fields present in the request body are written."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(None, min_length=1, validation_alias=AliasChoices("title", "movie"))
    description: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = None

    @field_validator("title", "description")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("field is required and cannot be null")
        return value


class Movie(BaseModel):
    id: str
    title: str
    description: str
    image: Optional[str] = None

    @classmethod
    def from_doc(cls, doc) -> "Movie":
        return cls(
            id=str(doc["_id"]),
            title=doc.get("title", ""),
            description=doc.get("description", ""),
            image=doc.get("image"),
        )


class MessageResponse(BaseModel):
    message: str


def parse_limit(raw: Optional[str]) -> int:
    """Coerce the raw ``limit`` query value; 0 means no limit."""
    if raw is None:
        return 0
    try:
        value = float(raw)
    except ValueError:
        return 0
    if not math.isfinite(value) or value <= 0:
        return 0
    return min(int(value), MAX_LIMIT)


class MovieService:
    """Data access for the movie collection.

    Lookups by an id that matches nothing return ``None`` (or ``False`` for
    delete) instead of raising. A malformed id raises ``bson.errors.InvalidId``
    and server problems surface as ``pymongo.errors.PyMongoError``.
    """

    def __init__(self, collection):
        self.collection = collection

    def create_movie_doc(self, movie: MovieCreate) -> Movie:
        doc = movie.model_dump()
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return Movie.from_doc(doc)

    def list_movie_docs(self, limit: int = 0) -> List[Movie]:
        cursor = self.collection.find().limit(limit)
        return [Movie.from_doc(doc) for doc in cursor]

    def get_movie_doc(self, movie_id: str) -> Optional[Movie]:
        doc = self.collection.find_one({"_id": ObjectId(movie_id)})
        if not doc:
            return None
        return Movie.from_doc(doc)

    def update_movie_doc(self, movie_id: str, patch: MovieUpdate) -> Optional[Movie]:
        update_data = patch.model_dump(exclude_unset=True)
        if not update_data:
            # MongoDB rejects an empty $set
            return self.get_movie_doc(movie_id)
        doc = self.collection.find_one_and_update(
            {"_id": ObjectId(movie_id)},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None
        return Movie.from_doc(doc)

    def delete_movie_doc(self, movie_id: str) -> bool:
        result = self.collection.delete_one({"_id": ObjectId(movie_id)})
        return result.deleted_count > 0

"""MongoDB connection helpers (client, collection handles, id parsing)."""
import logging

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection

from cities_api.config import Settings
from cities_api.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def mongo_client(settings: Settings) -> AsyncMongoClient:
    """Build an async client from ``MONGO_URI``.

    The client connects lazily, so building it never blocks or fails on an
    unreachable server; the first operation does.
    """
    logger.info("Creating MongoDB client for database '%s'", settings.MONGO_DB)
    return AsyncMongoClient(
        settings.MONGO_URI,
        serverSelectionTimeoutMS=settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
    )


def get_cities_collection(client: AsyncMongoClient, settings: Settings) -> AsyncCollection:
    """Return a handle to the cities collection under the configured DB."""
    return client[settings.MONGO_DB][settings.MONGO_CITIES_COLLECTION]


def to_object_id(city_id: str) -> ObjectId:
    """Parse a client-supplied id.

    Raises:
        ValidationError: if the id is not a 24-character hex ObjectId
    """
    try:
        return ObjectId(city_id)
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid city id '{city_id}'")

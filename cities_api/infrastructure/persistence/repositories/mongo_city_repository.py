"""MongoDB implementation of CityRepository."""
import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pymongo import ASCENDING, ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from cities_api.constants import FIELD_NAME
from cities_api.core.exceptions import ConflictError, StorageError
from cities_api.domain.entities.city import City
from cities_api.domain.repositories.city_repository import CityRepository
from cities_api.domain.value_objects.city_query import MatchOperator, Predicate, SortSpec
from cities_api.infrastructure.persistence.mongo import to_object_id

logger = logging.getLogger(__name__)

NAME_INDEX = "uniq_name"
ID_FIELD = "_id"


def to_mongo_filter(predicate: Predicate) -> Dict[str, Any]:
    """Translate a predicate into a Mongo filter document.

    Conditions on distinct fields merge into one document; a field that is
    constrained twice (e.g. an equality filter and a search on ``name``)
    falls back to ``$and`` so neither condition overwrites the other.
    """
    clauses = []
    for condition in predicate:
        if condition.operator is MatchOperator.CONTAINS_CI:
            clause = {"$regex": re.escape(str(condition.value)), "$options": "i"}
        else:
            clause = condition.value
        clauses.append((condition.field, clause))

    fields = [field for field, _ in clauses]
    if len(fields) != len(set(fields)):
        return {"$and": [{field: clause} for field, clause in clauses]}
    return dict(clauses)


def _to_document(raw: Mapping[str, Any]) -> Dict[str, Any]:
    document = {key: value for key, value in raw.items() if key != "_id"}
    return {"id": str(raw["_id"]), **document}


def _to_entity(raw: Mapping[str, Any]) -> City:
    return City.from_payload(raw, city_id=str(raw["_id"]))


class MongoCityRepository(CityRepository):
    """City repository backed by a MongoDB collection."""

    def __init__(self, collection: AsyncCollection):
        self.collection = collection

    async def ensure_indexes(self) -> None:
        """Ensure the unique name index exists (idempotent)."""
        try:
            await self.collection.create_index([(FIELD_NAME, ASCENDING)], name=NAME_INDEX, unique=True)
        except PyMongoError as e:
            logger.error(f"Failed to create index {NAME_INDEX}: {e}")
            raise StorageError(f"Storage error: {e}")

    async def count(self, predicate: Predicate) -> int:
        try:
            return await self.collection.count_documents(to_mongo_filter(predicate))
        except PyMongoError as e:
            logger.error(f"Count failed: {e}")
            raise StorageError(f"Storage error: {e}")

    async def find(
        self,
        predicate: Predicate,
        projection: Sequence[str] = (),
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> List[Dict[str, Any]]:
        fields = {field: 1 for field in projection} or None
        cursor = self.collection.find(to_mongo_filter(predicate), fields)
        # _id breaks ties so consecutive pages never overlap or leave gaps.
        keys = [(ID_FIELD, ASCENDING)]
        if sort is not None:
            keys.insert(0, (sort.field, sort.direction.value))
        cursor = cursor.sort(keys).skip(skip).limit(limit)
        try:
            rows = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Find failed: {e}")
            raise StorageError(f"Storage error: {e}")
        return [_to_document(row) for row in rows]

    async def get_by_id(self, city_id: str) -> Optional[City]:
        object_id = to_object_id(city_id)
        try:
            row = await self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"Lookup of city {city_id} failed: {e}")
            raise StorageError(f"Storage error: {e}")
        return _to_entity(row) if row else None

    async def insert(self, city: City) -> City:
        try:
            result = await self.collection.insert_one(city.to_document())
        except DuplicateKeyError:
            raise ConflictError(f"City with name '{city.name}' already exists")
        except PyMongoError as e:
            logger.error(f"Insert of city '{city.name}' failed: {e}")
            raise StorageError(f"Storage error: {e}")
        city.id = str(result.inserted_id)
        return city

    async def update_by_id(self, city_id: str, fields: Mapping[str, Any]) -> Optional[City]:
        object_id = to_object_id(city_id)
        changes = City.validate_partial(fields)
        if not changes:
            return await self.get_by_id(city_id)
        try:
            row = await self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise ConflictError(f"City with name '{changes.get(FIELD_NAME)}' already exists")
        except PyMongoError as e:
            logger.error(f"Update of city {city_id} failed: {e}")
            raise StorageError(f"Storage error: {e}")
        return _to_entity(row) if row else None

    async def delete_by_id(self, city_id: str) -> Optional[City]:
        object_id = to_object_id(city_id)
        try:
            row = await self.collection.find_one_and_delete({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"Delete of city {city_id} failed: {e}")
            raise StorageError(f"Storage error: {e}")
        return _to_entity(row) if row else None

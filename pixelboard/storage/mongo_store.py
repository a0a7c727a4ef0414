import logging
import uuid
from datetime import datetime
from typing import Any, Callable

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..canvas.models import CooldownRecord, NewPixel, Pixel, utcnow
from ..errors import DuplicatePositionError, StorageError

_LOGGER = logging.getLogger(__name__)


def connect_mongo(mongo_url: str, database: str = "pixelboard") -> Database:
    try:
        client: MongoClient = MongoClient(mongo_url, connect=True, tz_aware=True)
        return client[database]
    except PyMongoError as e:
        raise StorageError("failed to connect to MongoDB", e) from e


def _pixel_from_doc(doc: dict[str, Any]) -> Pixel:
    data = dict(doc)
    data["id"] = data.pop("_id")
    return Pixel.from_dict(data)


class MongoPixelStore:
    def __init__(self, db: Any, clock: Callable[[], datetime] = utcnow) -> None:
        self._clock = clock
        self.col = db.get_collection("pixels")
        try:
            # the one invariant that must hold under concurrent writers
            self.col.create_index([("x", ASCENDING), ("y", ASCENDING)], unique=True, name="xy_unique")
            self.col.create_index([("created_at", ASCENDING)], name="created_at")
        except PyMongoError as e:
            raise StorageError("failed to ensure pixel indexes", e) from e

    def get_pixel(self, x: int, y: int) -> Pixel | None:
        try:
            doc = self.col.find_one({"x": x, "y": y})
        except PyMongoError as e:
            raise StorageError("pixel lookup failed", e) from e
        return _pixel_from_doc(doc) if doc else None

    def insert_pixel(self, pixel: NewPixel) -> Pixel:
        doc = {
            "_id": uuid.uuid4().hex,
            "x": pixel.x,
            "y": pixel.y,
            "color": pixel.color,
            "link": pixel.link,
            "owner_id": pixel.owner_id,
            "owner_name": pixel.owner_name,
            "created_at": self._clock(),
        }
        try:
            self.col.insert_one(doc)
        except DuplicateKeyError as e:
            raise DuplicatePositionError(pixel.x, pixel.y, e) from e
        except PyMongoError as e:
            _LOGGER.exception("pixel insert (mongo) failed")
            raise StorageError("pixel insert failed", e) from e
        return _pixel_from_doc(doc)

    def list_pixels(self) -> list[Pixel]:
        try:
            return [_pixel_from_doc(d) for d in self.col.find({}).sort("created_at", ASCENDING)]
        except PyMongoError as e:
            raise StorageError("pixel listing failed", e) from e


class MongoCooldownStore:
    def __init__(self, db: Any) -> None:
        self.col = db.get_collection("user_cooldowns")

    def get_cooldown(self, user_id: str) -> CooldownRecord | None:
        try:
            doc = self.col.find_one({"_id": user_id})
        except PyMongoError as e:
            raise StorageError("cooldown lookup failed", e) from e
        if not doc:
            return None
        return CooldownRecord(user_id=user_id, last_placement=doc["last_placement"])

    def upsert_cooldown(self, user_id: str, last_placement: datetime) -> None:
        try:
            self.col.update_one({"_id": user_id}, {"$set": {"last_placement": last_placement}}, upsert=True)
        except PyMongoError as e:
            _LOGGER.exception("cooldown upsert (mongo) failed")
            raise StorageError("cooldown upsert failed", e) from e

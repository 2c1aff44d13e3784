from beanie import Document
from datetime import datetime
from pymongo import ASCENDING, IndexModel, ReturnDocument
from typing import Optional


class SequenceCounter(Document):
    id: str
    seq: int = 0
    # MongoDB's TTL monitor removes the counter once this moment has passed
    expires_at: Optional[datetime] = None

    class Settings:
        name = "sequence_counters"
        indexes = [
            IndexModel([("expires_at", ASCENDING)], expireAfterSeconds=0),
        ]

    @classmethod
    async def reserve(
        cls, name: str, floor: int, limit: int, expires_at: Optional[datetime] = None
    ) -> Optional[int]:
        """Atomically take the next number below ``limit``.

        The counter is first raised to ``floor`` so numbers already handed
        out by other means are never reissued. ``expires_at`` is only written
        when the counter is created. Returns None once ``limit`` numbers have
        been taken.
        """
        collection = cls.get_motor_collection()
        seed = {"$max": {"seq": floor}}
        if expires_at is not None:
            seed["$setOnInsert"] = {"expires_at": expires_at}
        await collection.update_one({"_id": name}, seed, upsert=True)
        result = await collection.find_one_and_update(
            {"_id": name, "seq": {"$lt": limit}},
            {"$inc": {"seq": 1}},
            return_document=ReturnDocument.AFTER,
        )
        return result["seq"] if result else None

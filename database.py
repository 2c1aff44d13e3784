import logging
from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie
from models.user import User
from models.patient import Patient
from models.appointment import Appointment
from models.sequence_counter import SequenceCounter
from config import settings

logger = logging.getLogger(__name__)

client = AsyncIOMotorClient(settings.mongodb_uri)
db = client[settings.mongodb_db_name]


async def connect_to_mongo():
    await init_beanie(
        database=db, document_models=[User, Patient, Appointment, SequenceCounter]
    )
    logger.info(f"Successfully connected to MongoDB database {settings.mongodb_db_name}")


def close_mongo_connection():
    client.close()
    logger.info("MongoDB connection closed")

import logging

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from core import config

logger = logging.getLogger(__name__)

SETTINGS_ID = "settings"
MARQUEE_ID = "marquee"


def default_id():
    return str(ObjectId())

# One profile per email
async def create_indexes():
    await db.users.create_index("email", unique=True)
    await db.tournaments.create_index("start_time")
    await db.transactions.create_index("user_id")
    await db.messages.create_index("user_id")

# Initialize the database connection
client = None
db = None

def initialize_db_connection(mongo_client=None):
    global client, db
    client = mongo_client or AsyncIOMotorClient(config.MONGODB_URL)
    db = client[config.DATABASE_NAME]
    logger.info("Database connection initialized (%s)", config.DATABASE_NAME)

def get_db():
    return db

import motor.motor_asyncio
from pymongo import ASCENDING, DESCENDING
import os
from dotenv import load_dotenv

from resume_ats.utils.logging_config import get_logger

logger = get_logger(__name__)

load_dotenv()

MONGO_DETAILS = os.getenv("MONGO_DETAILS", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "resume_ats_db")

logger.info(f"Initializing MongoDB connection to database: {DB_NAME}")

try:
    client = motor.motor_asyncio.AsyncIOMotorClient(MONGO_DETAILS)
    db = client[DB_NAME]
    logger.info("MongoDB client initialized successfully")
except Exception as e:
    logger.error(f"Failed to initialize MongoDB client: {e}")
    raise

# Collections
resumes_coll = db["resumes"]
analyses_coll = db["resume_analyses"]
requirements_coll = db["company_requirements"]

INDEXES = [
    (resumes_coll, [("resume_id", ASCENDING)], {"unique": True}),
    (resumes_coll, [("student_id", ASCENDING), ("created_at", DESCENDING)], {}),
    (analyses_coll, [("analysis_id", ASCENDING)], {"unique": True}),
    (analyses_coll, [("resume_id", ASCENDING), ("ats_score", DESCENDING)], {}),
    (analyses_coll, [("student_id", ASCENDING), ("created_at", DESCENDING)], {}),
    (requirements_coll, [("company_id", ASCENDING), ("role", ASCENDING)], {"unique": True}),
    (requirements_coll, [("company_name", ASCENDING)], {}),
]


async def init_indexes():
    """Index initialization for collections."""
    logger.info("Starting database index initialization")

    for coll, keys, options in INDEXES:
        label = f"{coll.name}.({', '.join(k for k, _ in keys)})"
        try:
            await coll.create_index(keys, **options)
            logger.debug(f"Created index on {label}")
        except Exception as e:
            if "already exists" in str(e).lower():
                logger.debug(f"Index on {label} already exists")
            else:
                logger.warning(f"Could not create index on {label}: {e}")

    logger.info("Database index initialization completed")


def to_dict(doc):
    if not doc:
        return None
    doc = dict(doc)
    doc.pop("_id", None)
    return doc

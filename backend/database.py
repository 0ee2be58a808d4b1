"""
Database connection and configuration

MongoDB is only needed when SNAPSHOT_BACKEND=mongo. The client is created
lazily on first use and fails fast with a clear error message if required
variables are missing.
"""
from motor.motor_asyncio import AsyncIOMotorClient
import os
import logging
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

_client: Optional[AsyncIOMotorClient] = None


def validate_required_env_vars():
    """
    Validate the MongoDB environment variables.
    Raises ValueError with clear error message if required variables are missing.
    """
    required_vars = {
        "MONGO_URL": "MongoDB connection string (e.g., mongodb://localhost:27017)",
        "DB_NAME": "Database name (e.g., covered_call_planner)"
    }

    missing = []
    for var, description in required_vars.items():
        if not os.environ.get(var):
            missing.append(f"  - {var}: {description}")

    if missing:
        error_msg = (
            "\n" + "=" * 60 + "\n"
            "CRITICAL: Missing required environment variables!\n"
            "=" * 60 + "\n"
            "SNAPSHOT_BACKEND=mongo requires:\n\n"
            + "\n".join(missing) + "\n\n"
            "Please check your .env file or environment configuration.\n"
            + "=" * 60
        )
        raise ValueError(error_msg)


def get_client() -> AsyncIOMotorClient:
    global _client
    if _client is None:
        validate_required_env_vars()
        _client = AsyncIOMotorClient(
            os.environ['MONGO_URL'],
            maxPoolSize=10,
            connectTimeoutMS=5000,
            serverSelectionTimeoutMS=5000,
            retryWrites=True
        )
    return _client


def get_db():
    return get_client()[os.environ['DB_NAME']]


async def check_db_connection():
    """
    Test database connection health.

    Returns:
        Tuple[bool, Optional[str]]: (success, error_message)
    """
    try:
        await get_client().admin.command('ping')
        logger.info(f"Database connected successfully: {os.environ['DB_NAME']}")
        return True, None
    except Exception as e:
        error_msg = f"Database connection failed: {e}"
        logger.error(error_msg)
        return False, error_msg


def close_client():
    global _client
    if _client is not None:
        _client.close()
        _client = None

from dotenv import load_dotenv
from pathlib import Path

ROOT_DIR = Path(__file__).parent
# Settings read at import time (ENVIRONMENT) must see backend/.env
load_dotenv(ROOT_DIR / '.env')

from routes.calculator import calculator_router
from routes.stocks import stocks_router
from services.snapshot_store import get_snapshot_store, shutdown_snapshot_writer, MongoSnapshotStore
from utils.environment import ENVIRONMENT, get_cors_origins
from fastapi import FastAPI, APIRouter
from starlette.middleware.cors import CORSMiddleware
import logging
from datetime import datetime, timezone

# Create the main app
app = FastAPI(title="Covered Call Planner - Options Income Calculator")

api_router = APIRouter(prefix="/api")


@api_router.get("/health")
async def health_check():
    return {
        "status": "ok",
        "environment": ENVIRONMENT,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


# Include all routers
api_router.include_router(calculator_router, prefix="/covered-call")
api_router.include_router(stocks_router, prefix="/stocks")

app.include_router(api_router)

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=get_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def startup():
    # Build the snapshot store now so configuration errors fail fast
    store = get_snapshot_store()

    if isinstance(store, MongoSnapshotStore):
        from database import check_db_connection
        db_ok, db_error = await check_db_connection()
        if not db_ok:
            logger.critical(f"Database connection failed on startup: {db_error}")
            raise RuntimeError(
                f"Cannot start application - database connection failed: {db_error}")
        await store.db.form_snapshots.create_index("key", unique=True)

    logger.info(f"Covered call planner started ({ENVIRONMENT})")


@app.on_event("shutdown")
async def shutdown():
    # Do not lose the user's last edits
    await shutdown_snapshot_writer()

    from database import close_client
    close_client()

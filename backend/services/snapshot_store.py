"""
Form Snapshot Store
===================
Persistence port for the single "last entered form" snapshot.

RULES:
1. Exactly one snapshot, keyed by SNAPSHOT_KEY
2. Values are stored as the raw strings the user typed
3. Corrupt or partially typed data is repaired field by field against
   the form defaults; unusable data is discarded with a warning
4. Writes are debounced by DebouncedSnapshotWriter; only the last save
   within the window reaches the store

BACKENDS (SNAPSHOT_BACKEND):
- memory: process-local, for tests and ephemeral runs
- file:   one JSON object on disk (default)
- mongo:  form_snapshots collection via motor
"""
import asyncio
import json
import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from models.schemas import TradeInputs, TRADE_INPUT_DEFAULTS
from utils.environment import allow_ephemeral_storage
from utils.ui_events import Debouncer

logger = logging.getLogger(__name__)

SNAPSHOT_KEY = "covered-call-planner:inputs"
SNAPSHOT_COLLECTION = "form_snapshots"

DEFAULT_SNAPSHOT_PATH = "covered_call_snapshot.json"
DEFAULT_DEBOUNCE_SECONDS = 0.5

VALID_BACKENDS = {"memory", "file", "mongo"}


class SnapshotStoreError(Exception):
    """Raised when the snapshot store is misconfigured."""
    pass


def repair_trade_inputs(raw: Any) -> Optional[TradeInputs]:
    """
    Rebuild TradeInputs from stored data.

    - Non-dict payload → None (discard)
    - String fields are kept as-is
    - Missing or non-string fields fall back to their defaults
    """
    if not isinstance(raw, dict):
        if raw is not None:
            logger.warning(f"Discarding snapshot of type {type(raw).__name__}")
        return None

    repaired: Dict[str, str] = {}
    bad_fields = []
    for name, default in TRADE_INPUT_DEFAULTS.items():
        value = raw.get(name)
        if isinstance(value, str):
            repaired[name] = value
        else:
            repaired[name] = default
            if name in raw:
                bad_fields.append(name)

    if bad_fields:
        logger.warning(f"Repaired snapshot fields with defaults: {', '.join(bad_fields)}")

    return TradeInputs(**repaired)


class SnapshotStore(ABC):
    """load() -> Optional[TradeInputs], save(TradeInputs)"""

    @abstractmethod
    async def load(self) -> Optional[TradeInputs]:
        ...

    @abstractmethod
    async def save(self, inputs: TradeInputs) -> None:
        ...


class InMemorySnapshotStore(SnapshotStore):
    def __init__(self):
        self._data: Dict[str, Any] = {}

    async def load(self) -> Optional[TradeInputs]:
        return repair_trade_inputs(self._data.get(SNAPSHOT_KEY))

    async def save(self, inputs: TradeInputs) -> None:
        self._data[SNAPSHOT_KEY] = inputs.model_dump()


class JsonFileSnapshotStore(SnapshotStore):
    """
    Snapshot kept in a JSON file: {"covered-call-planner:inputs": {...}}.
    File I/O runs in the default executor.
    """

    def __init__(self, path: str = DEFAULT_SNAPSHOT_PATH, key: str = SNAPSHOT_KEY):
        self.path = Path(path)
        self.key = key

    def _read_sync(self) -> Any:
        if not self.path.exists():
            return None
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable snapshot file {self.path}: {e}")
            return None
        if not isinstance(document, dict):
            logger.warning(f"Ignoring snapshot file {self.path}: not a JSON object")
            return None
        return document.get(self.key)

    def _write_sync(self, payload: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps({self.key: payload}, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)

    async def load(self) -> Optional[TradeInputs]:
        loop = asyncio.get_running_loop()
        raw = await loop.run_in_executor(None, self._read_sync)
        return repair_trade_inputs(raw)

    async def save(self, inputs: TradeInputs) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._write_sync, inputs.model_dump())
        logger.debug(f"Snapshot written to {self.path}")


class MongoSnapshotStore(SnapshotStore):
    """Snapshot document in the form_snapshots collection, upserted by key."""

    def __init__(self, db, key: str = SNAPSHOT_KEY):
        self.db = db
        self.key = key

    async def load(self) -> Optional[TradeInputs]:
        doc = await self.db[SNAPSHOT_COLLECTION].find_one({"key": self.key}, {"_id": 0})
        if not doc:
            return None
        return repair_trade_inputs(doc.get("inputs"))

    async def save(self, inputs: TradeInputs) -> None:
        await self.db[SNAPSHOT_COLLECTION].update_one(
            {"key": self.key},
            {"$set": {
                "inputs": inputs.model_dump(),
                "saved_at": datetime.now(timezone.utc).isoformat(),
            }},
            upsert=True
        )


class DebouncedSnapshotWriter:
    """Coalesces snapshot saves; the last save within the window wins."""

    def __init__(self, store: SnapshotStore, delay_seconds: float = DEFAULT_DEBOUNCE_SECONDS):
        self.store = store
        self._debouncer = Debouncer(delay_seconds, store.save)

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def save(self, inputs: TradeInputs) -> None:
        self._debouncer.schedule(inputs)

    async def flush(self) -> bool:
        return await self._debouncer.flush()

    def cancel(self) -> None:
        self._debouncer.cancel()


def create_snapshot_store(backend: Optional[str] = None) -> SnapshotStore:
    """
    Build the configured store.

    SNAPSHOT_BACKEND selects memory / file / mongo (default: file).
    """
    backend = (backend or os.environ.get("SNAPSHOT_BACKEND", "file")).lower()
    if backend not in VALID_BACKENDS:
        raise SnapshotStoreError(
            f"Invalid SNAPSHOT_BACKEND '{backend}', expected one of {sorted(VALID_BACKENDS)}"
        )

    if backend == "memory":
        if not allow_ephemeral_storage():
            raise SnapshotStoreError("In-memory snapshot store is not allowed in production")
        store: SnapshotStore = InMemorySnapshotStore()
    elif backend == "file":
        store = JsonFileSnapshotStore(os.environ.get("SNAPSHOT_PATH", DEFAULT_SNAPSHOT_PATH))
    else:
        from database import get_db
        try:
            store = MongoSnapshotStore(get_db())
        except ValueError as e:
            raise SnapshotStoreError(str(e)) from e

    logger.info(f"Snapshot store: {backend}")
    return store


def get_debounce_seconds() -> float:
    raw = os.environ.get("SNAPSHOT_SAVE_DEBOUNCE_SECONDS")
    if not raw:
        return DEFAULT_DEBOUNCE_SECONDS
    try:
        return max(0.0, float(raw))
    except ValueError:
        logger.warning(f"Invalid SNAPSHOT_SAVE_DEBOUNCE_SECONDS '{raw}', using {DEFAULT_DEBOUNCE_SECONDS}")
        return DEFAULT_DEBOUNCE_SECONDS


# Singletons
_snapshot_store: Optional[SnapshotStore] = None
_snapshot_writer: Optional[DebouncedSnapshotWriter] = None


def get_snapshot_store() -> SnapshotStore:
    """Get or create the process-wide snapshot store."""
    global _snapshot_store
    if _snapshot_store is None:
        _snapshot_store = create_snapshot_store()
    return _snapshot_store


def get_snapshot_writer() -> DebouncedSnapshotWriter:
    """Get or create the process-wide debounced writer."""
    global _snapshot_writer
    if _snapshot_writer is None:
        _snapshot_writer = DebouncedSnapshotWriter(get_snapshot_store(), get_debounce_seconds())
    return _snapshot_writer


async def shutdown_snapshot_writer() -> None:
    """Flush a pending save before the process exits."""
    if _snapshot_writer is not None and _snapshot_writer.pending:
        await _snapshot_writer.flush()
        logger.info("Flushed pending snapshot save on shutdown")

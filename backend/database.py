from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError
from dotenv import load_dotenv
from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any, Sequence, Union
import os
import logging
from pathlib import Path

from services.clearance_errors import StoreUnavailableError

ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

logger = logging.getLogger(__name__)

PathLike = Union[str, Sequence[str]]


def split_path(path: PathLike) -> List[str]:
    """Normalize a slash-joined path or a sequence of segments into segments."""
    if isinstance(path, str):
        segments = [s for s in path.split("/") if s]
    else:
        segments = [str(s) for s in path]
    if not segments or any(not s for s in segments):
        raise ValueError(f"Invalid document path: {path!r}")
    return segments


def document_location(path: PathLike) -> tuple[str, str]:
    """Map a document path to (collection name, _id).

    students/III/A/uid-1 -> ("students.III.A", "uid-1")
    faculty/F9           -> ("faculty", "F9")
    """
    segments = split_path(path)
    if len(segments) < 2:
        raise ValueError(f"Document path needs a collection and an id: {path!r}")
    return ".".join(segments[:-1]), segments[-1]


def collection_name(path: PathLike) -> str:
    """Map a collection path (noDues/III/A) to its collection name (noDues.III.A)."""
    return ".".join(split_path(path))


class DocumentStore(ABC):
    """Read-only, path-addressed document access used by the clearance core."""

    @abstractmethod
    async def get(self, path: PathLike) -> Optional[Dict[str, Any]]:
        """Return the document at path, or None when it does not exist.

        Raises StoreUnavailableError on connectivity or permission failures.
        """

    @abstractmethod
    async def query_collection(
        self,
        path: PathLike,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Return every document of a collection, optionally ordered and limited.

        Each returned document carries its id under "id".
        """


class MongoDocumentStore(DocumentStore):
    """DocumentStore over a motor database.

    Nested document paths are flattened into dotted collection names, with the
    final segment used as the document _id.
    """

    def __init__(self, db):
        self.db = db

    async def get(self, path: PathLike) -> Optional[Dict[str, Any]]:
        coll, doc_id = document_location(path)
        try:
            doc = await self.db[coll].find_one({"_id": doc_id})
        except PyMongoError as e:
            logger.error(f"Store read failed for {coll}/{doc_id}: {e}")
            raise StoreUnavailableError(f"Document store read failed: {e}") from e
        return _with_id(doc) if doc is not None else None

    async def query_collection(
        self,
        path: PathLike,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        coll = collection_name(path)
        cursor = self.db[coll].find({})
        if order_by:
            cursor = cursor.sort(order_by, DESCENDING if descending else ASCENDING)
        if limit:
            cursor = cursor.limit(limit)
        try:
            docs = await cursor.to_list(length=limit)
        except PyMongoError as e:
            logger.error(f"Store query failed for {coll}: {e}")
            raise StoreUnavailableError(f"Document store query failed: {e}") from e
        return [_with_id(d) for d in docs]


def _with_id(doc: Dict[str, Any]) -> Dict[str, Any]:
    out = {k: v for k, v in doc.items() if k != "_id"}
    out["id"] = str(doc.get("_id"))
    return out


class Database:
    client: AsyncIOMotorClient = None
    db = None

    async def connect(self):
        try:
            mongo_url = os.environ['MONGO_URL']
            self.client = AsyncIOMotorClient(mongo_url)
            self.db = self.client[os.environ['DB_NAME']]
            # Verify connection
            await self.db.command("ping")
            logger.info(f"Connected to MongoDB: {os.environ['DB_NAME']}")
        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    async def close(self):
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")

    def get_store(self) -> DocumentStore:
        if self.db is None:
            raise StoreUnavailableError("Database is not connected")
        return MongoDocumentStore(self.db)


# Process-wide connection holder; the clearance core only ever sees the store it is handed
database = Database()

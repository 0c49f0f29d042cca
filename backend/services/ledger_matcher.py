"""Ledger Matcher - find one student's entry in a shard's clearance ledger.

Only the matched entry is validated; malformed entries of other students on the
same ledger never affect this student's resolution.
"""
import logging
from typing import Tuple

from pydantic import ValidationError

from database import DocumentStore
from models import ShardKey, LedgerDocument, LedgerEntry
from services.clearance_errors import NoLedgerForTermError, NoMatchingEntryError, MalformedLedgerError

logger = logging.getLogger(__name__)

LEDGER_COLLECTION = "noDues"
LEDGER_ORDER_FIELD = "generatedAt"


def ledger_collection_path(shard: ShardKey) -> tuple:
    return (LEDGER_COLLECTION, shard.year.value, shard.section.value)


def ledger_path(shard: ShardKey, term: str) -> tuple:
    return ledger_collection_path(shard) + (term,)


async def fetch_ledger(store: DocumentStore, shard: ShardKey, term: str) -> LedgerDocument:
    doc = await store.get(ledger_path(shard, term))
    if doc is None:
        raise NoLedgerForTermError(f"No clearance ledger for term '{term}' in {shard}")
    try:
        return LedgerDocument.model_validate({**doc, "id": doc.get("id") or term})
    except ValidationError as e:
        logger.error(f"Malformed ledger {shard} term={term}: {e}")
        raise MalformedLedgerError(f"Clearance ledger for term '{term}' is malformed") from e


def find_entry(ledger: LedgerDocument, identity: str) -> LedgerEntry:
    """First entry whose student id equals identity."""
    for raw in ledger.students:
        if isinstance(raw, dict) and raw.get("id") == identity:
            try:
                return LedgerEntry.model_validate(raw)
            except ValidationError as e:
                logger.error(f"Malformed ledger entry for {identity} in term={ledger.term}: {e}")
                raise MalformedLedgerError(
                    f"Clearance entry for this student in the '{ledger.term}' ledger is malformed"
                ) from e
    raise NoMatchingEntryError(
        f"No clearance entry for this student in the '{ledger.term}' ledger"
    )


async def match_entry(
    store: DocumentStore, shard: ShardKey, term: str, identity: str
) -> Tuple[LedgerDocument, LedgerEntry]:
    """Fetch the ledger for (shard, term) and return it with the student's entry."""
    ledger = await fetch_ledger(store, shard, term)
    entry = find_entry(ledger, identity)
    logger.info(f"Matched ledger entry for {identity} in {shard} term={term}")
    return ledger, entry


async def latest_term(store: DocumentStore, shard: ShardKey) -> str:
    """Term id of the most recently generated ledger for a shard."""
    docs = await store.query_collection(
        ledger_collection_path(shard),
        order_by=LEDGER_ORDER_FIELD,
        descending=True,
        limit=1,
    )
    if not docs:
        raise NoLedgerForTermError(f"No clearance ledgers found for {shard}")
    term = docs[0]["id"]
    logger.info(f"Latest ledger for {shard} is term={term}")
    return term

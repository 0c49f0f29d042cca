"""Shard Locator - find the (year, section) partition holding a student.

Students are not indexed by identity, so every (year, section) pair is probed
with a point read, strictly in declared order. The first hit is authoritative
even if the identity also exists in a later shard.
"""
import logging

from database import DocumentStore
from models import Year, Section, ShardKey
from services.clearance_errors import ShardNotFoundError

logger = logging.getLogger(__name__)

YEAR_ORDER = (Year.I, Year.II, Year.III, Year.IV)
SECTION_ORDER = (Section.A, Section.B, Section.C, Section.D, Section.E, Section.F)


def student_path(shard: ShardKey, identity: str) -> tuple:
    return ("students", shard.year.value, shard.section.value, identity)


def probe_order():
    """All shards in the order they are probed (24 pairs)."""
    for year in YEAR_ORDER:
        for section in SECTION_ORDER:
            yield ShardKey(year=year, section=section)


async def locate(store: DocumentStore, identity: str) -> ShardKey:
    """
    Return the first shard whose students collection holds identity.

    Raises ShardNotFoundError after all probes miss. A StoreUnavailableError from
    any probe propagates immediately; a failed read is never taken as absence.
    """
    probes = 0
    for shard in probe_order():
        probes += 1
        doc = await store.get(student_path(shard, identity))
        if doc is not None:
            logger.info(f"Located student {identity} at shard {shard} after {probes} probe(s)")
            return shard
    logger.info(f"Student {identity} not found after {probes} probes")
    raise ShardNotFoundError()

"""Await-all join that cancels sibling reads when one of them fails."""
import asyncio
import logging

logger = logging.getLogger(__name__)


async def gather_or_cancel(*aws):
    """
    Run awaitables concurrently and return their results in order.

    If any of them raises, the still-running ones are cancelled and awaited
    before the first exception is re-raised, so no read outlives the call.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except Exception:
        pending = [t for t in tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            logger.info(f"Cancelled {len(pending)} in-flight read(s) after a failed sibling")
            await asyncio.gather(*pending, return_exceptions=True)
        raise

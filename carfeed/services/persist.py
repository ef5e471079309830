# carfeed/services/persist.py
import logging
from typing import Awaitable, Callable, List, Sequence
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

BatchWriter = Callable[[List[dict]], Awaitable[int]]

async def persist_in_batches(records: Sequence[dict], batch_size: int, write: BatchWriter) -> int:
    """Write ``records`` in fixed-size batches and return how many rows made it.

    A failed batch is logged and skipped; later batches still run. Compare the
    return value with ``len(records)`` to spot a partial failure.
    """
    if batch_size <= 0:
        raise ValueError("batch_size must be positive")
    written = 0
    for start in range(0, len(records), batch_size):
        batch = list(records[start : start + batch_size])
        try:
            written += await write(batch)
        except SQLAlchemyError as e:
            logger.error("Batch %d (%d rows) failed: %s", start // batch_size + 1, len(batch), e)
    return written

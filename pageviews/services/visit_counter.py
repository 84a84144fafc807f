from typing import Optional
import logging

import redis

from pageviews.keys import sanitize_key
from pageviews.schemas.counter import VisitRecord
from pageviews.services.store import CounterStore, coerce_count, get_store

logger = logging.getLogger(__name__)


class VisitCounterService:
    def __init__(self, store: Optional[CounterStore] = None, atomic_increment: Optional[bool] = None):
        """Initialize the visit counter service.

        Falls back to the process-wide store when none is given, and to the
        store's increment mode when atomic_increment is None.
        """
        self.store = store if store is not None else get_store()
        if atomic_increment is None:
            atomic_increment = self.store.atomic_increment
        self.atomic_increment = atomic_increment

    async def record_visit(self, raw_url: str, output_target=None) -> Optional[VisitRecord]:
        """Count one visit for raw_url and show the new total on output_target.

        output_target is anything with a length and an html(text) method,
        usually a Selection from pageviews.page. Store failures are logged
        and give None; the target is left untouched in that case.
        """
        key = sanitize_key(raw_url)
        ref = self.store.reference(key)
        try:
            if self.atomic_increment:
                count = await ref.increment()
            else:
                count = await self._read_modify_write(ref)
        except redis.RedisError as e:
            logger.error(f"Store error for key {key!r}: {str(e)}")
            return None

        logger.debug(f"Visit recorded: {key} -> {count}")
        if output_target is not None and len(output_target) > 0:
            output_target.html(str(count))
        return VisitRecord(key=key, count=count)

    async def _read_modify_write(self, ref) -> int:
        """Read, add one, overwrite. Concurrent callers may lose increments."""
        current = coerce_count(await ref.read_once())
        count = current + 1
        await ref.set(count)
        return count

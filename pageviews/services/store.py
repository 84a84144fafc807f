import logging
import re
from typing import Any, Optional

import redis.asyncio as aioredis

from pageviews.config import StoreConfig
from pageviews.errors import StoreAlreadyInitializedError, StoreNotInitializedError

logger = logging.getLogger(__name__)

# Same coercion as coerce_count(), run server-side so the read and the write
# happen as one step. The coerced digits are stored as a string and INCR does
# the arithmetic, so counts stay 64-bit integers.
INCREMENT_SCRIPT = """
local raw = redis.call('GET', KEYS[1])
local digits = raw and string.match(raw, '^%s*([+-]?%d+)')
if not digits or string.sub(digits, 1, 1) == '-' then
  digits = '0'
else
  digits = string.gsub(digits, '^%+', '')
  digits = (string.gsub(digits, '^0+(%d)', '%1'))
end
if digits ~= raw then
  redis.call('SET', KEYS[1], digits)
end
return redis.call('INCR', KEYS[1])
"""

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def coerce_count(value: Any) -> int:
    """Parse a stored value into a count; absent or non-numeric content is 0"""
    if value is None:
        return 0
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    return max(int(match.group(1)), 0)


class Reference:
    """Handle addressing a single counter value in the store"""

    def __init__(self, store: "CounterStore", key: str):
        self.store = store
        self.key = key

    @property
    def path(self) -> str:
        return f"{self.store.key_prefix}{self.key}"

    async def read_once(self) -> Optional[str]:
        return await self.store.client.get(self.path)

    async def set(self, value: int) -> None:
        await self.store.client.set(self.path, value)

    async def increment(self) -> int:
        result = await self.store.increment_script(keys=[self.path])
        return int(result)

    def __repr__(self) -> str:
        return f"Reference({self.path!r})"


class CounterStore:
    def __init__(self, client, key_prefix: str = "", atomic_increment: bool = True):
        self.client = client
        self.key_prefix = key_prefix
        self.atomic_increment = atomic_increment
        self.increment_script = client.register_script(INCREMENT_SCRIPT)

    @classmethod
    def from_config(cls, config: StoreConfig) -> "CounterStore":
        client = aioredis.from_url(
            config.database_url,
            username=config.username,
            password=config.password,
            socket_timeout=config.socket_timeout,
            decode_responses=True,
            encoding_errors="replace",
        )
        return cls(client, key_prefix=config.key_prefix, atomic_increment=config.atomic_increment)

    def reference(self, key: str) -> Reference:
        return Reference(self, key)

    async def close(self) -> None:
        await self.client.aclose()


_store: Optional[CounterStore] = None


def initialize(config: StoreConfig) -> CounterStore:
    """Create the process-wide store. Call once before get_store()."""
    global _store
    if _store is not None:
        raise StoreAlreadyInitializedError("counter store is already initialized")
    _store = CounterStore.from_config(config)
    logger.info(f"Counter store initialized (prefix={config.key_prefix!r})")
    return _store


def get_store() -> CounterStore:
    if _store is None:
        raise StoreNotInitializedError("call initialize() before using the counter store")
    return _store


async def close_store() -> None:
    global _store
    if _store is None:
        return
    store, _store = _store, None
    await store.close()
    logger.info("Counter store closed")

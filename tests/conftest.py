import asyncio

import pytest
import redis

from pageviews.services import store as store_module
from pageviews.services.store import CounterStore, coerce_count


class FakeRedis:
    """In-memory stand-in for the parts of redis.asyncio.Redis the store uses."""

    def __init__(self):
        self.data = {}
        self.fail = False
        self.closed = False
        self.set_calls = 0

    def _check(self):
        if self.fail:
            raise redis.ConnectionError("connection refused")

    async def get(self, key):
        self._check()
        value = self.data.get(key)
        # yield after reading, like a network round trip
        await asyncio.sleep(0)
        return value

    async def set(self, key, value):
        self._check()
        self.set_calls += 1
        self.data[key] = str(value)

    def register_script(self, script):
        async def run(keys=None, args=None, client=None):
            self._check()
            count = coerce_count(self.data.get(keys[0])) + 1
            self.data[keys[0]] = str(count)
            return count

        return run

    async def aclose(self):
        self.closed = True


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def store(fake_redis):
    return CounterStore(fake_redis)


@pytest.fixture(autouse=True)
def reset_global_store():
    yield
    store_module._store = None

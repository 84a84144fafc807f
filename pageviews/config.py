import os
from typing import Mapping, Optional

from pydantic import BaseModel

_FALSE_VALUES = {"0", "false", "no", "off"}


class StoreConfig(BaseModel):
    """Connection settings for the counter store"""

    database_url: str = "redis://redis1:6379/0"
    username: Optional[str] = None
    password: Optional[str] = None
    key_prefix: str = ""
    atomic_increment: bool = True
    socket_timeout: Optional[float] = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = os.environ) -> "StoreConfig":
        """Build a config from PAGEVIEWS_* environment variables"""
        values = {}
        for field in ("database_url", "username", "password", "key_prefix"):
            raw = environ.get(f"PAGEVIEWS_{field.upper()}")
            if raw:
                values[field] = raw

        atomic = environ.get("PAGEVIEWS_ATOMIC_INCREMENT")
        if atomic is not None:
            values["atomic_increment"] = atomic.strip().lower() not in _FALSE_VALUES

        timeout = environ.get("PAGEVIEWS_SOCKET_TIMEOUT")
        if timeout:
            values["socket_timeout"] = float(timeout)

        return cls(**values)

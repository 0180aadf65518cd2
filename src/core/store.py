"""
Key-value stores backing the rate limiter and the response cache.

The in-memory store is process-local and best-effort: a serverless host may
wipe it between invocations. Deployments that need shared state point
STORE_BACKEND at Redis; key schemes and TTL semantics are identical.
"""
import copy
import json
import math
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

import redis

from src.utils.logger import setup_logger

logger = setup_logger(__name__)

Value = Dict[str, Any]
Updater = Callable[[Optional[Value]], Tuple[Optional[Value], Any]]


class KeyValueStore(ABC):
    """Minimal store capability shared by the rate limiter and the cache."""

    @abstractmethod
    def get(self, key: str) -> Optional[Value]:
        ...

    @abstractmethod
    def put(self, key: str, value: Value, ttl: Optional[float] = None) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...

    @abstractmethod
    def update(self, key: str, fn: Updater, ttl: Optional[float] = None) -> Any:
        """
        Atomically read-modify-write a single key.

        ``fn`` receives the current value (or None) and returns
        ``(new_value, outcome)``. A new_value of None deletes the key.
        Returns ``outcome``.
        """
        ...

    @abstractmethod
    def items(self, prefix: str = "") -> Iterator[Tuple[str, Value]]:
        ...

    def count(self, prefix: str = "") -> int:
        return sum(1 for _ in self.items(prefix))

    @abstractmethod
    def clear(self) -> None:
        ...


class InMemoryStore(KeyValueStore):
    """Dict-backed store guarded by a single lock.

    Expired keys are dropped when read, and swept from the whole map at most
    once every ``sweep_interval`` seconds on write, so keys that are never
    read again (one per device or ip) do not pile up.
    """

    def __init__(self, clock: Callable[[], float] = time.time, sweep_interval: float = 60):
        self._clock = clock
        self._data: Dict[str, Tuple[Value, Optional[float]]] = {}
        self._lock = threading.Lock()
        self.sweep_interval = sweep_interval
        self._next_sweep = clock() + sweep_interval

    def _live(self, key: str) -> Optional[Value]:
        # Caller holds the lock
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None
        return value

    def _sweep(self, now: float) -> None:
        # Caller holds the lock
        expired = [
            key for key, (_, expires_at) in self._data.items()
            if expires_at is not None and now >= expires_at
        ]
        for key in expired:
            del self._data[key]
        self._next_sweep = now + self.sweep_interval
        if expired:
            logger.debug(f"Swept {len(expired)} expired keys")

    def _write(self, key: str, value: Optional[Value], ttl: Optional[float]) -> None:
        now = self._clock()
        if now >= self._next_sweep:
            self._sweep(now)
        if value is None:
            self._data.pop(key, None)
            return
        expires_at = now + ttl if ttl else None
        self._data[key] = (copy.deepcopy(value), expires_at)

    def get(self, key: str) -> Optional[Value]:
        with self._lock:
            return copy.deepcopy(self._live(key))

    def put(self, key: str, value: Value, ttl: Optional[float] = None) -> None:
        with self._lock:
            self._write(key, value, ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def update(self, key: str, fn: Updater, ttl: Optional[float] = None) -> Any:
        with self._lock:
            new_value, outcome = fn(copy.deepcopy(self._live(key)))
            self._write(key, new_value, ttl)
            return outcome

    def items(self, prefix: str = "") -> Iterator[Tuple[str, Value]]:
        with self._lock:
            snapshot = [
                (key, self._live(key))
                for key in list(self._data)
                if key.startswith(prefix)
            ]
        for key, value in snapshot:
            if value is not None:
                yield key, copy.deepcopy(value)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        return self.count()


class RedisStore(KeyValueStore):
    """
    Redis-backed store. Values are JSON documents under a key namespace.

    Redis failures are logged and treated as an empty store so requests
    degrade to "allow and recompute" instead of failing.
    """

    def __init__(self, client: "redis.Redis", namespace: str = "slangify:"):
        self.client = client
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}{key}"

    @staticmethod
    def _write(target, full_key: str, value: Optional[Value], ttl: Optional[float]) -> None:
        if value is None:
            target.delete(full_key)
        elif ttl:
            target.setex(full_key, max(1, math.ceil(ttl)), json.dumps(value))
        else:
            target.set(full_key, json.dumps(value))

    def get(self, key: str) -> Optional[Value]:
        try:
            raw = self.client.get(self._key(key))
        except redis.RedisError as e:
            logger.error(f"Redis get error: {e}")
            return None
        return json.loads(raw) if raw else None

    def put(self, key: str, value: Value, ttl: Optional[float] = None) -> None:
        try:
            self._write(self.client, self._key(key), value, ttl)
        except redis.RedisError as e:
            logger.error(f"Redis put error: {e}")

    def delete(self, key: str) -> None:
        try:
            self.client.delete(self._key(key))
        except redis.RedisError as e:
            logger.error(f"Redis delete error: {e}")

    def update(self, key: str, fn: Updater, ttl: Optional[float] = None) -> Any:
        full_key = self._key(key)

        def _apply(pipe):
            # WATCHed: immediate mode until multi()
            raw = pipe.get(full_key)
            new_value, outcome = fn(json.loads(raw) if raw else None)
            pipe.multi()
            self._write(pipe, full_key, new_value, ttl)
            return outcome

        try:
            return self.client.transaction(_apply, full_key, value_from_callable=True)
        except redis.RedisError as e:
            logger.error(f"Redis update error: {e}")
            _, outcome = fn(None)
            return outcome

    def items(self, prefix: str = "") -> Iterator[Tuple[str, Value]]:
        try:
            for full_key in self.client.scan_iter(match=f"{self._key(prefix)}*"):
                raw = self.client.get(full_key)
                if raw:
                    yield full_key[len(self.namespace):], json.loads(raw)
        except redis.RedisError as e:
            logger.error(f"Redis scan error: {e}")

    def clear(self) -> None:
        try:
            keys = list(self.client.scan_iter(match=f"{self.namespace}*"))
            if keys:
                self.client.delete(*keys)
        except redis.RedisError as e:
            logger.error(f"Redis clear error: {e}")


def create_store(settings, clock: Callable[[], float] = time.time) -> KeyValueStore:
    """
    Build the store selected by STORE_BACKEND.

    Falls back to the in-memory store when Redis is not configured or
    unreachable.
    """
    if settings.STORE_BACKEND != "redis":
        return InMemoryStore(clock=clock)

    if not settings.REDIS_URL:
        logger.warning("REDIS_URL not set - falling back to in-memory store")
        return InMemoryStore(clock=clock)

    try:
        client = redis.from_url(settings.REDIS_URL, decode_responses=True)
        # Test connection
        client.ping()
        logger.info("✅ Redis connected successfully")
        return RedisStore(client, namespace=settings.REDIS_KEY_PREFIX)
    except redis.RedisError as e:
        logger.error(f"Redis connection failed: {e} - falling back to in-memory store")
        return InMemoryStore(clock=clock)

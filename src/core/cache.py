"""
Response cache for translation results.

Entries are keyed by a hash of the normalized input and expire after the
configured TTL. When the cache grows past its cap, the oldest half of the
entries (by creation time) is dropped in one go.
"""
import hashlib
import re
import time
from typing import Callable, Optional

from src.core.store import KeyValueStore
from src.models.schemas import TranslationResult
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Lowercase, trim and collapse internal whitespace."""
    return _WHITESPACE.sub(" ", text.lower().strip())


class ResponseCache:
    """Caches TranslationResult objects in a KeyValueStore."""

    KEY_PREFIX = "cache:"

    def __init__(
        self,
        store: KeyValueStore,
        ttl_seconds: float = 24 * 60 * 60,
        max_entries: int = 100,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.clock = clock

    def cache_key(self, text: str) -> str:
        digest = hashlib.sha256(normalize_text(text).encode("utf-8")).hexdigest()
        return f"{self.KEY_PREFIX}{digest}"

    def get(self, text: str) -> Optional[TranslationResult]:
        """
        Look up a cached result.

        Returns None when the entry is absent, expired (and then deletes it),
        or stored for a different normalized text.
        """
        key = self.cache_key(text)
        entry = self.store.get(key)
        if entry is None:
            return None

        if self.clock() - entry["created_at"] >= self.ttl_seconds:
            logger.info("⏰ Cached translation expired")
            self.store.delete(key)
            return None

        if entry["normalized_text"] != normalize_text(text):
            logger.warning("Cache key collision, treating as miss")
            return None

        return TranslationResult.model_validate(entry["result"])

    def put(self, text: str, result: TranslationResult) -> None:
        """Store a result, evicting the oldest half first if over capacity."""
        if self.store.count(self.KEY_PREFIX) > self.max_entries:
            self._evict_oldest()

        self.store.put(
            self.cache_key(text),
            {
                "result": result.model_dump(by_alias=True, mode="json"),
                "created_at": self.clock(),
                "normalized_text": normalize_text(text),
            },
            ttl=self.ttl_seconds,
        )

    def _evict_oldest(self) -> None:
        entries = sorted(
            self.store.items(self.KEY_PREFIX),
            key=lambda item: item[1]["created_at"],
        )
        to_evict = entries[: self.max_entries // 2]
        for key, _ in to_evict:
            self.store.delete(key)
        logger.info(f"🧹 Evicted {len(to_evict)} cached translations")

    def __len__(self) -> int:
        return self.store.count(self.KEY_PREFIX)

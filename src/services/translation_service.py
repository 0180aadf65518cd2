"""
Translation Service
Runs a request through kill switch, validation, cache, rate limit and the
upstream model, in that order.
"""
import asyncio
import math
import time
from typing import Callable, Optional, Set, Tuple

from config.settings import Settings, settings as default_settings
from src.core.cache import ResponseCache
from src.core.rate_limiter import RateLimiter
from src.core.store import KeyValueStore, create_store
from src.core.validator import validate_text
from src.models.schemas import TranslationResult
from src.services.llm_service import get_llm_service
from src.utils.exceptions import RateLimitException, ServiceDisabledException
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


class TranslationService:
    """
    Orchestrates one translation request.

    Cache lookups happen before rate limiting, so repeated identical
    queries never consume quota. Every failure is terminal for the request;
    nothing is retried here.
    """

    def __init__(
        self,
        settings: Settings,
        upstream,
        store: Optional[KeyValueStore] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self.upstream = upstream
        self.store = store if store is not None else create_store(settings, clock=clock)
        self.cache = ResponseCache(
            self.store,
            ttl_seconds=settings.CACHE_TTL,
            max_entries=settings.CACHE_MAX_ENTRIES,
            clock=clock,
        )
        self.rate_limiter = RateLimiter(
            self.store,
            max_requests=settings.RATE_LIMIT_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW,
            clock=clock,
        )
        # Upstream calls still running for requests that were cancelled
        self._pending: Set[asyncio.Future] = set()

    def ensure_enabled(self) -> None:
        """Cheapest possible bail-out; runs before anything else."""
        if self.settings.KILL_SWITCH_ENABLED:
            logger.warning("🛑 Kill switch enabled, rejecting request")
            raise ServiceDisabledException()

    async def translate(self, text, client_key: str) -> Tuple[TranslationResult, bool]:
        """
        Translate ``text`` for the client identified by ``client_key``.

        Returns:
            (result, cached)
        """
        self.ensure_enabled()

        trimmed = validate_text(
            text,
            max_characters=self.settings.MAX_CHARACTERS,
            max_words=self.settings.MAX_WORDS,
        )

        cached = self.cache.get(trimmed)
        if cached is not None:
            logger.info("📦 Serving cached translation")
            return cached, True

        decision = self.rate_limiter.check(client_key)
        if not decision.allowed:
            minutes = math.ceil(decision.retry_after / 60)
            raise RateLimitException(
                f"Too many requests. Please wait {minutes} minute{'s' if minutes != 1 else ''}.",
                retry_after=decision.retry_after,
            )

        call = asyncio.ensure_future(asyncio.to_thread(self.upstream.translate, trimmed))
        try:
            result = await asyncio.shield(call)
        except asyncio.CancelledError:
            # Caller went away; the paid call still finishes in its thread
            logger.info("🔌 Request cancelled, upstream answer will be cached on arrival")
            self._pending.add(call)
            call.add_done_callback(lambda done: self._store_late_result(trimmed, done))
            raise

        self.cache.put(trimmed, result)
        return result, False

    def _store_late_result(self, text: str, call: asyncio.Future) -> None:
        self._pending.discard(call)
        if call.cancelled():
            return
        error = call.exception()
        if error is not None:
            logger.warning(f"Upstream call for a cancelled request failed: {error}")
            return
        self.cache.put(text, call.result())
        logger.info("💾 Cached upstream answer for a cancelled request")


# Singleton instance
_translation_service = None


def get_translation_service() -> TranslationService:
    """Get or create translation service singleton."""
    global _translation_service
    if _translation_service is None:
        _translation_service = TranslationService(default_settings, get_llm_service())
    return _translation_service

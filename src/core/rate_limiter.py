"""
Per-client request throttling over a fixed window that resets on expiry.
"""
import math
import time
from dataclasses import dataclass
from typing import Callable, Optional

from src.core.store import KeyValueStore
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    retry_after: Optional[int] = None


class RateLimiter:
    """
    Tracks ``{count, window_start}`` per client key.

    Not a guaranteed global limiter: with the in-memory store each process
    keeps its own counters, and a wiped store simply starts a new window.
    """

    KEY_PREFIX = "ratelimit:"

    def __init__(
        self,
        store: KeyValueStore,
        max_requests: int = 10,
        window_seconds: float = 3600,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock

    def check(self, client_key: str) -> RateLimitDecision:
        """Count a request for ``client_key`` and decide whether it may proceed."""
        now = self.clock()

        def _step(entry):
            if entry is None or now - entry["window_start"] >= self.window_seconds:
                return {"count": 1, "window_start": now}, RateLimitDecision(True)

            if entry["count"] >= self.max_requests:
                remaining = entry["window_start"] + self.window_seconds - now
                return entry, RateLimitDecision(False, max(1, math.ceil(remaining)))

            entry["count"] += 1
            return entry, RateLimitDecision(True)

        decision = self.store.update(
            f"{self.KEY_PREFIX}{client_key}", _step, ttl=self.window_seconds
        )
        if not decision.allowed:
            logger.warning(f"⛔ Rate limit hit for {client_key} (retry in {decision.retry_after}s)")
        return decision


def client_key_for(device_id: Optional[str], forwarded_for: Optional[str], remote_addr: Optional[str]) -> str:
    """
    Derive the rate-limit bucket for a request.

    Prefers the device id, then the first X-Forwarded-For hop, then the
    socket address.
    """
    if device_id and device_id.strip():
        return f"device:{device_id.strip()}"

    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return f"ip:{first_hop}"

    if remote_addr:
        return f"ip:{remote_addr}"

    return "anonymous"

"""
Redis-backed quote source: observable market data published by a feed.

Quotes of one feed live in the hash `quotes:<feed>`, one field per ticker.
A field holds a JSON number (shared by every scenario) or a JSON list of
numbers (one per scenario).
"""

from __future__ import annotations

import json
import logging
import os
from collections import defaultdict
from typing import Any, Iterable, Mapping, Optional

from calculation.marketdata import MarketDataBox, MarketDataFeed, MarketDataId, QuoteId

LOGGER = logging.getLogger(__name__)

HASH_PREFIX = "quotes"

_redis: Optional["redis.Redis"] = None


def get_redis() -> "redis.Redis":
    """Return shared Redis connection; create if needed."""
    global _redis
    if _redis is None:
        import redis
        url = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
        _redis = redis.from_url(url, decode_responses=True)
    return _redis


def close_redis() -> None:
    """Close Redis connection (call on app shutdown)."""
    global _redis
    if _redis is not None:
        _redis.close()
        _redis = None


def hash_key(feed: MarketDataFeed) -> str:
    return f"{HASH_PREFIX}:{feed.name}"


def quote_to_payload(value: "float | list[float]") -> str:
    """Serialize a quote (one value, or one value per scenario) for Redis."""
    if isinstance(value, list):
        return json.dumps([float(v) for v in value])
    return json.dumps(float(value))


def quote_from_payload(payload: str) -> Optional[MarketDataBox[float]]:
    """Deserialize a Redis quote payload; return None if invalid."""
    try:
        data: Any = json.loads(payload)
        if isinstance(data, list):
            return MarketDataBox.scenarios(float(v) for v in data)
        return MarketDataBox.single(float(data))
    except (json.JSONDecodeError, TypeError, ValueError):
        return None


def publish_quote(client: Any, quote_id: QuoteId, value: "float | list[float]") -> None:
    client.hset(hash_key(quote_id.feed), quote_id.ticker, quote_to_payload(value))


class RedisQuoteSource:
    """`ObservableSource` reading `QuoteId`s from Redis hashes, one round trip per feed."""

    def __init__(self, client: Any = None) -> None:
        self._client = client

    @property
    def client(self) -> Any:
        return self._client if self._client is not None else get_redis()

    def fetch(self, ids: Iterable[MarketDataId]) -> Mapping[MarketDataId, MarketDataBox[Any]]:
        by_feed: dict[MarketDataFeed, list[QuoteId]] = defaultdict(list)
        for market_data_id in ids:
            if isinstance(market_data_id, QuoteId):
                by_feed[market_data_id.feed].append(market_data_id)
        found: dict[MarketDataId, MarketDataBox[Any]] = {}
        for feed, quote_ids in by_feed.items():
            payloads = self.client.hmget(hash_key(feed), [q.ticker for q in quote_ids])
            for quote_id, payload in zip(quote_ids, payloads):
                if payload is None:
                    continue
                box = quote_from_payload(payload)
                if box is None:
                    LOGGER.warning("Ignoring invalid quote payload for %s: %r", quote_id, payload)
                    continue
                found[quote_id] = box
        LOGGER.debug("Fetched %d of %d quotes from Redis", len(found), sum(len(v) for v in by_feed.values()))
        return found

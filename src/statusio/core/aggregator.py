"""Concurrent provider fan-out with TTL memoization.

Every enabled provider is queried at once and the request waits for all of
them; a failing provider only affects its own slot. Results are cached per
credential fingerprint. Concurrent misses for the same fingerprint are not
coalesced: each performs its own fan-out and the last write wins.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Optional

import httpx

from .cache import ResultCache
from .clients import ADAPTERS, Adapter
from .clients.base import failed
from .fingerprint import fingerprint
from .models import AggregationResult, Credential, FailureKind, Provider, ProviderStatus

logger = logging.getLogger(__name__)


class OrchestrationError(Exception):
    """The fan-out itself failed, as opposed to an individual provider."""


class StatusAggregator:
    """Fetches, merges and caches provider statuses for one credential set."""

    def __init__(
        self,
        cache: ResultCache,
        adapters: Optional[Mapping[Provider, Adapter]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._cache = cache
        self._adapters = dict(ADAPTERS if adapters is None else adapters)
        self._client = client

    @property
    def cache(self) -> ResultCache:
        return self._cache

    async def fetch(
        self,
        enabled: Sequence[Provider],
        credentials: Mapping[Provider, Credential],
        ttl_ms: int,
    ) -> AggregationResult:
        """Statuses for ``enabled`` in that order, served from cache when fresh."""
        enabled = list(enabled)
        if not enabled:
            return AggregationResult()

        key = fingerprint(enabled, credentials)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return AggregationResult(results=cached, cached=True)

        logger.debug("Cache miss for %s, querying %d provider(s)", key, len(enabled))
        try:
            results = await self._fan_out(enabled, credentials)
        except Exception as exc:
            logger.error("Provider fan-out failed: %s", exc, exc_info=True)
            return AggregationResult(error=str(exc) or type(exc).__name__)

        self._cache.put(key, results, ttl_ms)
        return AggregationResult(results=results)

    async def _fan_out(
        self,
        enabled: list[Provider],
        credentials: Mapping[Provider, Credential],
    ) -> tuple[ProviderStatus, ...]:
        calls = []
        for provider in enabled:
            adapter = self._adapters.get(provider)
            if adapter is None:
                raise OrchestrationError(f"No adapter registered for {provider.value}")
            credential = credentials.get(provider)
            if credential is None:
                raise OrchestrationError(f"No credential supplied for {provider.value}")
            calls.append((adapter, credential))

        outcomes = await asyncio.gather(
            *(adapter(credential, self._client) for adapter, credential in calls),
            return_exceptions=True,
        )

        results = []
        for provider, outcome in zip(enabled, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.warning("%s adapter raised: %s", provider.display_name, outcome)
                outcome = failed(provider, FailureKind.MALFORMED_RESPONSE, "bad response")
            results.append(outcome)
        return tuple(results)

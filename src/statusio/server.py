"""Statusio MCP Server.

FastMCP server exposing cached debrid subscription status as read-only tools.
Run: statusio-mcp
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from .config import StatusioConfig
from .core.aggregator import StatusAggregator
from .core.cache import ResultCache
from .core.classifier import ALERT_SEVERITIES, classify, effective_days, format_status, select, sort_by_urgency
from .core.models import AggregationResult, ProviderStatus

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=True)

MAX_ALERTS = 3

cache = ResultCache()
aggregator = StatusAggregator(cache)


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Configure logging for the server process."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    logger.info("Statusio server starting")
    try:
        yield
    finally:
        cache.clear()


mcp = FastMCP(
    "Statusio",
    instructions="Check premium subscription status for Real-Debrid, AllDebrid, Premiumize, TorBox and Debrid-Link. Results are cached per credential set.",
    lifespan=lifespan,
)


def _status_to_dict(status: ProviderStatus) -> dict:
    """Convert a ProviderStatus to tool-friendly JSON."""
    return {
        "provider": status.name.value,
        "service": status.display_name,
        "premium": status.premium_state.value,
        "days_remaining": status.days_remaining,
        "expires_at": status.expiry.isoformat() if status.expiry else None,
        "username": status.username,
        "severity": classify(status).value,
        "note": status.note,
        "error": status.error,
        "failure": status.failure.value if status.failure else None,
    }


async def _fetch(config: StatusioConfig) -> AggregationResult:
    return await aggregator.fetch(config.enabled(), config.credentials(), config.ttl_ms)


def _config(**overrides: Any) -> StatusioConfig:
    return StatusioConfig.load(overrides)


def _status_summary(statuses: list[ProviderStatus]) -> str:
    parts = []
    for s in statuses:
        days = effective_days(s)
        if s.error:
            parts.append(f"{s.display_name}: unavailable ({s.note})")
        elif days is None:
            parts.append(f"{s.display_name}: active")
        else:
            parts.append(f"{s.display_name}: {days} day(s) left")
    return " | ".join(parts) if parts else "No providers configured"


# ─── Tool 1: Subscription Status ─────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def subscription_status(
    rd_token: str = "",
    ad_key: str = "",
    pm_key: str = "",
    pm_oauth: bool = False,
    tb_token: str = "",
    dl_key: str = "",
    dl_auth: str = "",
    dl_endpoint: str = "",
    cache_minutes: Optional[float] = None,
) -> dict:
    """Premium status, days remaining and expiry for every configured provider.

    Blank arguments fall back to the RD_TOKEN, AD_KEY, PM_KEY, TB_TOKEN,
    DL_KEY, DL_AUTH, DL_ENDPOINT and CACHE_MINUTES environment variables.

    Args:
        rd_token: Real-Debrid API token.
        ad_key: AllDebrid API key.
        pm_key: Premiumize API key or OAuth access token.
        pm_oauth: Send the Premiumize key as an OAuth access token.
        tb_token: TorBox API token.
        dl_key: Debrid-Link API key.
        dl_auth: Debrid-Link auth scheme, 'Bearer' or 'query'.
        dl_endpoint: Debrid-Link account endpoint override.
        cache_minutes: How long results are reused. Minimum 1, default 45.
    """
    config = _config(
        rd_token=rd_token, ad_key=ad_key, pm_key=pm_key, pm_oauth=pm_oauth or None,
        tb_token=tb_token, dl_key=dl_key, dl_auth=dl_auth, dl_endpoint=dl_endpoint,
        cache_minutes=cache_minutes,
    )
    result = await _fetch(config)
    statuses = list(result.results)
    return {
        "title": "Subscription Status",
        "providers": [_status_to_dict(s) for s in statuses],
        "has_data": result.has_data,
        "cached": result.cached,
        "error": result.error,
        "summary": result.error or _status_summary(statuses),
    }


# ─── Tool 2: Expiry Alerts ───────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def subscription_alerts(
    rd_token: str = "",
    ad_key: str = "",
    pm_key: str = "",
    pm_oauth: bool = False,
    tb_token: str = "",
    dl_key: str = "",
    dl_auth: str = "",
    dl_endpoint: str = "",
    cache_minutes: Optional[float] = None,
) -> dict:
    """Only subscriptions that are expired or have 3 days or fewer left.

    Takes the same arguments as subscription_status. At most three alerts
    are returned, most urgent first.
    """
    config = _config(
        rd_token=rd_token, ad_key=ad_key, pm_key=pm_key, pm_oauth=pm_oauth or None,
        tb_token=tb_token, dl_key=dl_key, dl_auth=dl_auth, dl_endpoint=dl_endpoint,
        cache_minutes=cache_minutes,
    )
    result = await _fetch(config)
    alerts = sort_by_urgency(select(result.results, ALERT_SEVERITIES))[:MAX_ALERTS]

    if result.error:
        summary = f"Status lookup failed: {result.error}"
    elif not alerts:
        summary = "No subscriptions need attention."
    else:
        summary = f"{len(alerts)} subscription(s) need attention: " + ", ".join(s.display_name for s in alerts) + "."

    return {
        "title": "Subscription Alerts",
        "alerts": [{**_status_to_dict(s), "text": format_status(s)} for s in alerts],
        "total_alerts": len(alerts),
        "error": result.error,
        "summary": summary,
    }


def main():
    """Entry point for the CLI command."""
    mcp.run()


if __name__ == "__main__":
    main()

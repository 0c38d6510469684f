"""Real-Debrid account-info client.

API docs: https://api.real-debrid.com/
Bearer token auth; ``auth_token`` query parameter as the alternative.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from ..models import AuthScheme, Credential, FailureKind, Provider, ProviderStatus
from ..timeleft import TimeLeft, as_seconds, from_date_string, from_epoch_seconds
from .base import ProviderFailure, active, bad_response, get_account_json, inactive, provider_adapter, text

logger = logging.getLogger(__name__)

PROVIDER = Provider.REALDEBRID
API_URL = "https://api.real-debrid.com/rest/1.0/user"

# Numeric expirations above this are epoch seconds; anything else is a date string.
EPOCH_THRESHOLD = 1_000_000_000


def _time_left(account: dict, now: Optional[datetime]) -> Optional[TimeLeft]:
    expiration = account.get("expiration")
    if expiration:
        secs = as_seconds(expiration)
        if secs is not None and secs > EPOCH_THRESHOLD:
            return from_epoch_seconds(secs, now)
        return from_date_string(expiration, now)

    until = account.get("premium_until") or account.get("premiumUntil")
    if until:
        return from_epoch_seconds(until, now)
    return None


def parse_account(account: Any, now: Optional[datetime] = None) -> ProviderStatus:
    """Normalize a ``/user`` response body."""
    if not isinstance(account, dict):
        raise bad_response()

    username = text(account.get("username") or account.get("user"))
    if "premium" not in account and "type" not in account:
        raise ProviderFailure(FailureKind.AMBIGUOUS_STATE, "status unknown", username)

    is_premium = account.get("premium") is True or str(account.get("type") or "").lower() == "premium"
    if not is_premium:
        return inactive(PROVIDER, username)
    return active(PROVIDER, _time_left(account, now), username)


@provider_adapter(PROVIDER, missing_note="missing token")
async def fetch_status(credential: Credential, client: Optional[httpx.AsyncClient] = None) -> ProviderStatus:
    account = await get_account_json(
        credential,
        endpoint=API_URL,
        default_scheme=AuthScheme.BEARER,
        query_param="auth_token",
        client=client,
    )
    return parse_account(account)

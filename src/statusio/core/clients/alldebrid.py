"""AllDebrid account-info client.

API docs: https://docs.alldebrid.com/
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from ..models import AuthScheme, Credential, Provider, ProviderStatus
from ..timeleft import as_seconds, from_epoch_seconds
from .base import active, bad_response, get_account_json, inactive, provider_adapter, text

logger = logging.getLogger(__name__)

PROVIDER = Provider.ALLDEBRID
API_URL = "https://api.alldebrid.com/v4/user"


def parse_account(body: Any, now: Optional[datetime] = None) -> ProviderStatus:
    """Normalize a ``/v4/user`` response body."""
    if not isinstance(body, dict) or body.get("status") != "success":
        raise bad_response()
    data = body.get("data")
    user = data.get("user") if isinstance(data, dict) else None
    if not isinstance(user, dict):
        raise bad_response()

    username = text(user.get("username"))
    if not user.get("isPremium"):
        return inactive(PROVIDER, username)

    until = as_seconds(user.get("premiumUntil"))
    time_left = from_epoch_seconds(until, now) if until and until > 0 else None
    return active(PROVIDER, time_left, username)


@provider_adapter(PROVIDER)
async def fetch_status(credential: Credential, client: Optional[httpx.AsyncClient] = None) -> ProviderStatus:
    body = await get_account_json(
        credential,
        endpoint=API_URL,
        default_scheme=AuthScheme.BEARER,
        query_param="apikey",
        client=client,
    )
    return parse_account(body)

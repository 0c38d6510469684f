"""Debrid-Link account-info client.

API docs: https://debrid-link.com/api_doc/v2/introduction
The endpoint and auth scheme are both user-configurable; some accounts only
accept the key as an ``apikey`` query parameter.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from ..models import AuthScheme, Credential, Provider, ProviderStatus
from ..timeleft import as_seconds, from_duration_seconds
from .base import active, bad_response, get_account_json, inactive, provider_adapter, text

logger = logging.getLogger(__name__)

PROVIDER = Provider.DEBRIDLINK
API_URL = "https://debrid-link.com/api/account/infos"


def parse_account(body: Any, now: Optional[datetime] = None) -> ProviderStatus:
    """Normalize an ``/account/infos`` response body."""
    if not isinstance(body, dict) or not body.get("success") or not isinstance(body.get("value"), dict):
        raise bad_response()

    value = body["value"]
    username = text(value.get("username"))
    time_left = from_duration_seconds(as_seconds(value.get("premiumLeft")) or 0, now)
    if time_left.days > 0:
        return active(PROVIDER, time_left, username)

    account_type = value.get("accountType")
    return inactive(PROVIDER, username, f"accountType={account_type if account_type is not None else '?'}")


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

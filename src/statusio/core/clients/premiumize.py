"""Premiumize account-info client.

API docs: https://www.premiumize.me/api
Authenticates with an ``apikey`` query parameter, or ``access_token`` for
OAuth tokens.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from ..models import AuthScheme, Credential, Provider, ProviderStatus
from ..timeleft import from_epoch_seconds
from .base import active, bad_response, get_account_json, inactive, provider_adapter, text

logger = logging.getLogger(__name__)

PROVIDER = Provider.PREMIUMIZE
API_URL = "https://www.premiumize.me/api/account/info"


def parse_account(body: Any, now: Optional[datetime] = None) -> ProviderStatus:
    """Normalize an ``/account/info`` response body.

    Premiumize has no explicit premium flag; an account is premium while
    ``premium_until`` lies in the future.
    """
    if not isinstance(body, dict) or str(body.get("status")).lower() != "success":
        raise bad_response()

    username = text(body.get("customer_id"))
    time_left = from_epoch_seconds(body.get("premium_until") or 0, now)
    if time_left.days > 0:
        return active(PROVIDER, time_left, username)
    return inactive(PROVIDER, username)


@provider_adapter(PROVIDER)
async def fetch_status(credential: Credential, client: Optional[httpx.AsyncClient] = None) -> ProviderStatus:
    body = await get_account_json(
        credential,
        endpoint=API_URL,
        default_scheme=AuthScheme.QUERY,
        query_param="access_token" if credential.oauth else "apikey",
        client=client,
    )
    return parse_account(body)

"""TorBox account-info client.

API docs: https://api-docs.torbox.app/
The user payload has shipped under several key spellings over time, so each
field is looked up under all of its known names.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from ..models import AuthScheme, Credential, FailureKind, Provider, ProviderStatus
from ..timeleft import TimeLeft, from_date_string, from_duration_seconds
from .base import ProviderFailure, active, get_account_json, inactive, provider_adapter, text

logger = logging.getLogger(__name__)

PROVIDER = Provider.TORBOX
API_URL = "https://api.torbox.app/v1/api/user/me?settings=true"

EXPIRY_FIELDS = ("premium_expires_at", "premiumExpiresAt", "premium_until_iso")
SECONDS_FIELDS = ("remainingPremiumSeconds", "premium_left", "premiumLeft")


def _first(user: dict, fields: tuple[str, ...]) -> Any:
    for field in fields:
        if user.get(field):
            return user[field]
    return None


def _message(body: dict) -> Optional[str]:
    return text(body.get("error")) or text(body.get("message"))


def _time_left(user: dict, now: Optional[datetime]) -> Optional[TimeLeft]:
    expiry_text = _first(user, EXPIRY_FIELDS)
    if expiry_text:
        return from_date_string(expiry_text, now)
    seconds = _first(user, SECONDS_FIELDS)
    if seconds:
        return from_duration_seconds(seconds, now)
    return None


def parse_account(body: Any, now: Optional[datetime] = None) -> ProviderStatus:
    """Normalize a ``/user/me`` response body.

    Subscribed and positive days left are each sufficient for active, so a
    subscribed account with no readable expiry is active with unknown days.
    """
    if not isinstance(body, dict):
        raise ProviderFailure(FailureKind.MALFORMED_RESPONSE, "bad response")
    if body.get("success") is False and not isinstance(body.get("data"), dict):
        raise ProviderFailure(FailureKind.MALFORMED_RESPONSE, _message(body) or "bad response")

    user = next((c for c in (body.get("data"), body.get("user")) if isinstance(c, dict)), body)
    username = text(user.get("username")) or text(user.get("email"))
    subscribed = user.get("is_subscribed") is True or user.get("isSubscribed") is True

    time_left = _time_left(user, now)
    has_days = time_left is not None and time_left.days > 0

    if subscribed or has_days:
        return active(PROVIDER, time_left if has_days else None, username)
    note = _message(body) or text(user.get("note")) or "not subscribed"
    return inactive(PROVIDER, username, note)


@provider_adapter(PROVIDER, missing_note="missing token")
async def fetch_status(credential: Credential, client: Optional[httpx.AsyncClient] = None) -> ProviderStatus:
    body = await get_account_json(
        credential,
        endpoint=API_URL,
        default_scheme=AuthScheme.BEARER,
        query_param="token",
        client=client,
    )
    return parse_account(body)

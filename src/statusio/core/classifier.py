"""Severity buckets and presentation helpers for provider statuses.

Classification never mutates an aggregation result; filtering and sorting
return new sequences.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from enum import Enum
from typing import Optional

from .models import PremiumState, ProviderStatus

CRITICAL_DAYS = 3
WARNING_DAYS = 14


class Severity(str, Enum):
    """How urgently a subscription needs attention."""

    EXPIRED = "expired"
    CRITICAL = "critical"
    WARNING = "warning"
    OK = "ok"

    @property
    def label(self) -> str:
        return "OK" if self is Severity.OK else self.value.capitalize()

    @property
    def emoji(self) -> str:
        return SEVERITY_EMOJI[self]


SEVERITY_EMOJI: dict[Severity, str] = {
    Severity.EXPIRED: "\U0001f534",
    Severity.CRITICAL: "\U0001f7e0",
    Severity.WARNING: "\U0001f7e1",
    Severity.OK: "\U0001f7e2",
}

ALERT_SEVERITIES = frozenset({Severity.EXPIRED, Severity.CRITICAL})


def classify_days(days: Optional[int]) -> Severity:
    """Bucket a days-remaining count; unknown counts are treated as OK."""
    if days is None:
        return Severity.OK
    if days <= 0:
        return Severity.EXPIRED
    if days <= CRITICAL_DAYS:
        return Severity.CRITICAL
    if days <= WARNING_DAYS:
        return Severity.WARNING
    return Severity.OK


def effective_days(status: ProviderStatus) -> Optional[int]:
    """Days used for display: None only for active accounts with no known expiry."""
    if status.days_remaining is not None:
        return status.days_remaining
    if status.premium_state == PremiumState.ACTIVE:
        return None
    return 0


def classify(status: ProviderStatus) -> Severity:
    return classify_days(effective_days(status))


def is_displayable(status: ProviderStatus) -> bool:
    """Whether a status carries anything worth showing."""
    return status.resolved or bool(status.username)


def select(
    statuses: Iterable[ProviderStatus],
    severities: Optional[Collection[Severity]] = None,
    limit: Optional[int] = None,
) -> list[ProviderStatus]:
    """Displayable statuses, optionally restricted to some severities and capped."""
    selected = [
        s for s in statuses
        if is_displayable(s) and (severities is None or classify(s) in severities)
    ]
    return selected if limit is None else selected[:limit]


def sort_by_urgency(statuses: Iterable[ProviderStatus]) -> list[ProviderStatus]:
    """Fewest days left first; active accounts with unknown expiry last."""

    def key(status: ProviderStatus) -> tuple[int, int]:
        days = effective_days(status)
        return (1, 0) if days is None else (0, days)

    return sorted(statuses, key=key)


def format_status(status: ProviderStatus) -> str:
    """Multi-line human-readable summary of one provider."""
    days = effective_days(status)
    severity = classify_days(days)
    user = f"@{status.username}" if status.username else "-"
    if status.expiry is not None:
        expires = status.expiry.date().isoformat()
    elif status.premium_state == PremiumState.ACTIVE:
        expires = "-"
    else:
        expires = "N/A"

    lines = [
        f"Service: {status.display_name}",
        f"User: {user}",
        f"Expires: {expires}",
        f"Days left: {'-' if days is None else days}",
        f"{severity.emoji} Status: {severity.label}",
    ]
    if status.note:
        lines.append(f"Note: {status.note}")
    return "\n".join(lines)

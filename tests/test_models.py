"""Tests for status model invariants."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from statusio.core.models import (
    AggregationResult,
    AuthScheme,
    Credential,
    FailureKind,
    PremiumState,
    Provider,
    ProviderStatus,
)


class TestProviderStatusInvariants:
    """Test validation of ProviderStatus."""

    def test_inactive_requires_zero_days(self):
        with pytest.raises(ValidationError):
            ProviderStatus(name=Provider.TORBOX, premium_state=PremiumState.INACTIVE, days_remaining=5)

    def test_inactive_forbids_expiry(self):
        with pytest.raises(ValidationError):
            ProviderStatus(
                name=Provider.TORBOX,
                premium_state=PremiumState.INACTIVE,
                days_remaining=0,
                expiry=datetime(2030, 1, 1, tzinfo=timezone.utc),
            )

    def test_error_requires_unknown_state(self):
        with pytest.raises(ValidationError):
            ProviderStatus(
                name=Provider.ALLDEBRID,
                premium_state=PremiumState.ACTIVE,
                error=True,
                failure=FailureKind.TRANSPORT_FAILURE,
            )

    def test_error_requires_failure_kind(self):
        with pytest.raises(ValidationError):
            ProviderStatus(name=Provider.ALLDEBRID, error=True)

    def test_negative_days_rejected(self):
        with pytest.raises(ValidationError):
            ProviderStatus(name=Provider.PREMIUMIZE, premium_state=PremiumState.ACTIVE, days_remaining=-1)

    def test_frozen(self):
        status = ProviderStatus(name=Provider.PREMIUMIZE, premium_state=PremiumState.ACTIVE, days_remaining=1)
        with pytest.raises(ValidationError):
            status.days_remaining = 5


class TestCredential:
    """Test Credential normalization."""

    def test_secret_stripped_and_hidden_from_repr(self):
        credential = Credential(secret="  hunter2-token  ")
        assert credential.secret == "hunter2-token"
        assert "hunter2" not in repr(credential)

    def test_blank_endpoint_is_none(self):
        assert Credential(secret="x", endpoint="  ").endpoint is None

    @pytest.mark.parametrize("value,scheme", [("bearer", AuthScheme.BEARER), ("Query", AuthScheme.QUERY)])
    def test_auth_scheme_case_insensitive(self, value, scheme):
        assert AuthScheme(value) is scheme


class TestAggregationResult:
    """Test has_data."""

    def test_username_alone_counts_as_data(self):
        result = AggregationResult(results=(
            ProviderStatus(name=Provider.REALDEBRID, username="x", note="status unknown",
                           error=True, failure=FailureKind.AMBIGUOUS_STATE),
        ))
        assert result.has_data is True

    def test_empty(self):
        assert AggregationResult().has_data is False

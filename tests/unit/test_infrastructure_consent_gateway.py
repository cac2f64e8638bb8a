"""Unit tests for ConsentGateway.

Tests for:
- Candidate path probing (404 falls through, other errors stop)
- Negotiation exhaustion
- Request body and headers
- Status lookup and revocation
"""

import json

import pytest

from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.enums import ConsentStatus
from src.domain.errors import ConsentError, ProviderAuthenticationError
from src.infrastructure.consent import ConsentGateway
from src.infrastructure.http import HTTPClient
from tests.conftest import STANDARD_BASE_URL

PATHS = ("/account-consents/request", "/api/v1/consents", "/consents")


@pytest.fixture
def gateway(http_client: HTTPClient) -> ConsentGateway:
    """Consent gateway probing three candidate routes."""
    return ConsentGateway(http_client=http_client, candidate_paths=PATHS)


async def _create(gateway: ConsentGateway):
    return await gateway.create_account_consent(
        access_token="abc",
        client_id="team042",
        requesting_bank_id="team042",
        requesting_bank_name="Team 42 App",
        base_url=f"{STANDARD_BASE_URL}/",
        provider_id="vbank",
    )


@pytest.mark.unit
class TestCreateAccountConsent:
    """Tests for consent creation."""

    async def test_first_path_success(self, gateway: ConsentGateway, httpx_mock):
        """A 2xx on the first route returns the consent."""
        httpx_mock.add_response(
            url=f"{STANDARD_BASE_URL}/account-consents/request",
            method="POST",
            json={"consent_id": "c-1", "status": "approved", "auto_approved": True},
        )

        result = await _create(gateway)

        assert isinstance(result, Success)
        assert result.value.consent_id == "c-1"
        assert result.value.status == ConsentStatus.APPROVED
        assert result.value.auto_approved is True

    async def test_not_found_falls_through_to_next_path(
        self, gateway: ConsentGateway, httpx_mock
    ):
        """404 on earlier routes moves on to the next candidate."""
        httpx_mock.add_response(
            url=f"{STANDARD_BASE_URL}/account-consents/request", method="POST", status_code=404
        )
        httpx_mock.add_response(
            url=f"{STANDARD_BASE_URL}/api/v1/consents", method="POST", status_code=404
        )
        httpx_mock.add_response(
            url=f"{STANDARD_BASE_URL}/consents",
            method="POST",
            json={"consent_id": "c-3", "status": "AwaitingAuthorisation"},
        )

        result = await _create(gateway)

        assert isinstance(result, Success)
        assert result.value.consent_id == "c-3"
        assert result.value.status == ConsentStatus.PENDING
        assert len(httpx_mock.get_requests()) == 3

    async def test_non_404_failure_stops_negotiation(
        self, gateway: ConsentGateway, httpx_mock
    ):
        """Any failure other than 404 is returned immediately."""
        httpx_mock.add_response(
            url=f"{STANDARD_BASE_URL}/account-consents/request", method="POST", status_code=401
        )

        result = await _create(gateway)

        assert isinstance(result, Failure)
        assert isinstance(result.error, ProviderAuthenticationError)
        assert len(httpx_mock.get_requests()) == 1

    async def test_all_paths_not_found(self, gateway: ConsentGateway, httpx_mock):
        """Exhausting every route yields CONSENT_NEGOTIATION_EXHAUSTED."""
        for path in PATHS:
            httpx_mock.add_response(
                url=f"{STANDARD_BASE_URL}{path}", method="POST", status_code=404
            )

        result = await _create(gateway)

        assert isinstance(result, Failure)
        assert isinstance(result.error, ConsentError)
        assert result.error.code == ErrorCode.CONSENT_NEGOTIATION_EXHAUSTED
        assert result.error.attempted_paths == PATHS

    async def test_request_body_and_headers(self, gateway: ConsentGateway, httpx_mock):
        """The request carries permissions, bearer token and requesting bank."""
        httpx_mock.add_response(
            url=f"{STANDARD_BASE_URL}/account-consents/request",
            method="POST",
            json={"consent_id": "c-1"},
        )

        await _create(gateway)

        request = httpx_mock.get_requests()[0]
        body = json.loads(request.content)
        assert request.headers["Authorization"] == "Bearer abc"
        assert request.headers["X-Requesting-Bank"] == "team042"
        assert body["client_id"] == "team042"
        assert body["requesting_bank_name"] == "Team 42 App"
        assert body["permissions"] == [
            "ReadAccountsDetail",
            "ReadBalances",
            "ReadTransactionsDetail",
        ]


@pytest.mark.unit
class TestConsentStatusAndRevocation:
    """Tests for consent detail routes."""

    async def test_get_status(self, gateway: ConsentGateway, httpx_mock):
        """Status lookup maps the provider status and permissions."""
        httpx_mock.add_response(
            url=f"{STANDARD_BASE_URL}/api/v1/account-consents/c-1",
            method="GET",
            json={
                "consent_id": "c-1",
                "status": "Authorised",
                "permissions": ["ReadBalances"],
                "expiration_date_time": "2024-12-31T00:00:00Z",
            },
        )

        result = await gateway.get_consent_status(
            consent_id="c-1", base_url=STANDARD_BASE_URL, access_token="abc"
        )

        assert isinstance(result, Success)
        assert result.value.status == ConsentStatus.APPROVED
        assert result.value.permissions == ("ReadBalances",)
        assert result.value.expires_at is not None

    async def test_revoke_any_2xx_succeeds(self, gateway: ConsentGateway, httpx_mock):
        """A 204 counts as revoked."""
        httpx_mock.add_response(
            url=f"{STANDARD_BASE_URL}/api/v1/account-consents/c-1",
            method="DELETE",
            status_code=204,
        )

        result = await gateway.revoke_consent(consent_id="c-1", base_url=STANDARD_BASE_URL)

        assert result == Success(value=None)
        assert "Authorization" not in httpx_mock.get_requests()[0].headers

    async def test_revoke_failure_propagates(self, gateway: ConsentGateway, httpx_mock):
        """A rejected revocation is returned as Failure."""
        httpx_mock.add_response(
            url=f"{STANDARD_BASE_URL}/api/v1/account-consents/c-1",
            method="DELETE",
            status_code=403,
        )

        result = await gateway.revoke_consent(
            consent_id="c-1", base_url=STANDARD_BASE_URL, access_token="abc"
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.PROVIDER_FORBIDDEN

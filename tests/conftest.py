"""
Pytest configuration and fixtures for Business Central client tests
"""

import json
from typing import Any, List, Optional

import httpx
import pytest

from d365bc_mcp.client import BCClient
from d365bc_mcp.config import Settings
from d365bc_mcp.factories import MockAuthProvider

TENANT_ID = "contoso-tenant"
ENVIRONMENT = "Contoso-Production"
COMPANY_ID = "11111111-1111-1111-1111-111111111111"
COMPANY_NAME = "CRONUS USA, Inc."
API_ROOT = "https://api.businesscentral.dynamics.com/v2.0"

COMPANIES = [
    {"id": COMPANY_ID, "name": COMPANY_NAME, "displayName": "CRONUS USA"},
    {"id": "22222222-2222-2222-2222-222222222222", "name": "My Company", "displayName": "My Company"},
]


class RecordingTransport:
    """Records outgoing requests and answers with queued responses"""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self._responses: List[httpx.Response] = []

    def queue(
        self,
        status_code: int = 200,
        json_body: Optional[Any] = None,
        content: Optional[bytes] = None,
        headers: Optional[dict] = None,
    ) -> None:
        if json_body is not None:
            response = httpx.Response(status_code, json=json_body, headers=headers)
        else:
            response = httpx.Response(status_code, content=content or b"", headers=headers)
        self._responses.append(response)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._responses:
            return self._responses.pop(0)
        return httpx.Response(200, json={"value": []})

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def transport():
    """Recording transport for the client under test"""
    return RecordingTransport()


@pytest.fixture
def bc_client(transport):
    """Unauthenticated client with a mocked HTTP transport"""
    http_client = httpx.Client(transport=httpx.MockTransport(transport.handler))
    client = BCClient(MockAuthProvider(), http_client=http_client)
    yield client
    client.close()


@pytest.fixture
def scoped_client(bc_client):
    """Client with token, environment and company in place"""
    bc_client.authenticate(TENANT_ID, "client-id", "client-secret")
    bc_client.set_environment(ENVIRONMENT)
    bc_client.context.set_company(COMPANY_ID, COMPANY_NAME)
    return bc_client


@pytest.fixture
def mock_settings():
    """Settings for testing"""
    return Settings(
        azure_tenant_id=TENANT_ID,
        azure_client_id="test-client-id",
        azure_client_secret="test-client-secret",
        bc_environment=ENVIRONMENT,
        bc_company_name=COMPANY_NAME,
        auth_provider="mock",
    )

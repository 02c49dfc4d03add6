"""
Tests for the request dispatcher and session scope handling
"""

import httpx
import pytest
from structlog.testing import capture_logs

from d365bc_mcp.client import (
    AddressingMode,
    BCClient,
    HttpMethod,
    RequestDescriptor,
    Verbosity,
)
from d365bc_mcp.errors import (
    AuthenticationRequiredError,
    BCApiError,
    CompanyContextRequiredError,
    CompanyNotFoundError,
    ConfigurationError,
    EnvironmentContextRequiredError,
)
from d365bc_mcp.factories import MockAuthProvider

from ..conftest import API_ROOT, COMPANIES, COMPANY_ID, COMPANY_NAME, ENVIRONMENT, TENANT_ID

DEFAULT_BASE = f"{API_ROOT}/{ENVIRONMENT}/api/v2.0/companies({COMPANY_ID})"

THIRD_PARTY_ROUTE = {"api_publisher": "contoso", "api_group": "app1", "api_version": "v1.0"}


def _descriptor(mode: AddressingMode, **kwargs) -> RequestDescriptor:
    if mode is AddressingMode.THIRD_PARTY_API:
        kwargs = {**THIRD_PARTY_ROUTE, **kwargs}
    return RequestDescriptor("/customers", mode=mode, **kwargs)


@pytest.mark.unit
class TestPreconditions:
    @pytest.mark.parametrize("mode", list(AddressingMode))
    def test_dispatch_before_authentication(self, bc_client, transport, mode):
        bc_client.set_environment(ENVIRONMENT)
        bc_client.context.set_company(COMPANY_ID, COMPANY_NAME)

        with pytest.raises(AuthenticationRequiredError, match="authenticate"):
            bc_client.dispatch(_descriptor(mode))
        assert transport.requests == []

    @pytest.mark.parametrize(
        "mode",
        [AddressingMode.DEFAULT, AddressingMode.ODATA_ENDPOINT, AddressingMode.THIRD_PARTY_API],
    )
    def test_dispatch_before_environment(self, bc_client, transport, mode):
        bc_client.authenticate(TENANT_ID, "client-id", "client-secret")

        with pytest.raises(EnvironmentContextRequiredError, match="set_environment"):
            bc_client.dispatch(_descriptor(mode))
        assert transport.requests == []

    @pytest.mark.parametrize(
        "mode",
        [AddressingMode.DEFAULT, AddressingMode.ODATA_ENDPOINT, AddressingMode.THIRD_PARTY_API],
    )
    def test_dispatch_before_company(self, bc_client, transport, mode):
        bc_client.authenticate(TENANT_ID, "client-id", "client-secret")
        bc_client.set_environment(ENVIRONMENT)

        with pytest.raises(CompanyContextRequiredError, match="set_company"):
            bc_client.dispatch(_descriptor(mode))
        assert transport.requests == []

    def test_company_needs_both_id_and_name(self, bc_client):
        bc_client.authenticate(TENANT_ID, "client-id", "client-secret")
        bc_client.set_environment(ENVIRONMENT)
        bc_client.context.company_id = COMPANY_ID

        with pytest.raises(CompanyContextRequiredError):
            bc_client.dispatch(_descriptor(AddressingMode.DEFAULT))

    def test_no_company_context_without_company(self, bc_client, transport):
        bc_client.authenticate(TENANT_ID, "client-id", "client-secret")
        bc_client.set_environment(ENVIRONMENT)
        transport.queue(json_body={"value": []})

        result = bc_client.dispatch(RequestDescriptor("/companies", mode=AddressingMode.NO_COMPANY_CONTEXT))

        assert result == {"value": []}
        assert str(transport.last.url) == f"{API_ROOT}/{ENVIRONMENT}/api/v2.0/companies"

    def test_no_company_context_without_environment(self, bc_client):
        bc_client.authenticate(TENANT_ID, "client-id", "client-secret")

        with pytest.raises(EnvironmentContextRequiredError):
            bc_client.dispatch(RequestDescriptor("/companies", mode=AddressingMode.NO_COMPANY_CONTEXT))

    @pytest.mark.parametrize("missing", ["api_publisher", "api_group", "api_version"])
    def test_third_party_route_incomplete(self, scoped_client, transport, missing):
        route = {**THIRD_PARTY_ROUTE, missing: None}

        with pytest.raises(ConfigurationError, match=missing):
            scoped_client.dispatch(
                RequestDescriptor("/things", mode=AddressingMode.THIRD_PARTY_API, **route)
            )
        assert transport.requests == []


@pytest.mark.unit
class TestHeaders:
    @pytest.mark.parametrize(
        "method, body",
        [
            (HttpMethod.GET, None),
            (HttpMethod.POST, {"displayName": "Acme"}),
            (HttpMethod.DELETE, None),
        ],
    )
    def test_no_if_match(self, scoped_client, transport, method, body):
        scoped_client.dispatch(RequestDescriptor("/customers", method=method, body=body))

        headers = transport.last.headers
        assert "if-match" not in headers
        assert headers["authorization"] == "Bearer mock_bearer_token_12345"
        assert headers["accept"] == "application/json"
        assert headers["content-type"] == "application/json"

    def test_patch_has_if_match(self, scoped_client, transport):
        scoped_client.dispatch(
            RequestDescriptor("/customers(abc)", method=HttpMethod.PATCH, body={"displayName": "Acme"})
        )

        assert transport.last.method == "PATCH"
        assert transport.last.headers["if-match"] == "*"

    def test_upload_has_if_match_and_sends_file(self, scoped_client, transport, tmp_path):
        picture = tmp_path / "logo.png"
        picture.write_bytes(b"\x89PNG-bytes")
        transport.queue(status_code=204)

        result = scoped_client.dispatch(
            RequestDescriptor(
                "/items(abc)/picture/pictureContent",
                method=HttpMethod.UPLOAD,
                file_path=picture,
            )
        )

        assert result is None
        assert transport.last.method == "PATCH"
        assert transport.last.headers["if-match"] == "*"
        assert transport.last.content == b"\x89PNG-bytes"
        assert str(transport.last.url) == f"{DEFAULT_BASE}/items(abc)/picture/pictureContent"


@pytest.mark.unit
class TestResponses:
    def test_get_returns_parsed_json(self, scoped_client, transport):
        transport.queue(json_body={"value": [{"id": "c1"}]})

        result = scoped_client.dispatch(RequestDescriptor("/customers", query_string="?$top=1"))

        assert result == {"value": [{"id": "c1"}]}
        assert str(transport.last.url) == f"{DEFAULT_BASE}/customers?$top=1"

    @pytest.mark.parametrize("mode", list(AddressingMode))
    def test_post_returns_parsed_json_in_every_mode(self, scoped_client, transport, mode):
        transport.queue(status_code=201, json_body={"id": "new"})

        result = scoped_client.dispatch(_descriptor(mode, method=HttpMethod.POST, body={"a": 1}))

        assert result == {"id": "new"}
        assert transport.last_json() == {"a": 1}

    def test_delete_no_content(self, scoped_client, transport):
        transport.queue(status_code=204)

        assert scoped_client.dispatch(RequestDescriptor("/customers(abc)", method=HttpMethod.DELETE)) is None
        assert transport.last.method == "DELETE"

    def test_binary_response(self, scoped_client, transport):
        transport.queue(content=b"image", headers={"content-type": "application/octet-stream"})

        assert scoped_client.dispatch(RequestDescriptor("/items(abc)/picture/pictureContent")) == b"image"

    @pytest.mark.parametrize(
        "method, body",
        [
            (HttpMethod.GET, None),
            (HttpMethod.POST, {"a": 1}),
            (HttpMethod.PATCH, {"a": 1}),
            (HttpMethod.DELETE, None),
        ],
    )
    def test_non_success_raises_with_upstream_body(self, scoped_client, transport, method, body):
        upstream = {"error": {"code": "BadRequest", "message": "The field Display Name is too long."}}
        transport.queue(status_code=400, json_body=upstream)

        with pytest.raises(BCApiError) as exc_info:
            scoped_client.dispatch(RequestDescriptor("/customers(abc)", method=method, body=body))

        error = exc_info.value
        assert error.status_code == 400
        assert "The field Display Name is too long." in error.response_text
        assert "The field Display Name is too long." in str(error)
        assert error.method == method.http_verb

    def test_expired_token_surfaces_as_api_error(self, scoped_client, transport):
        transport.queue(status_code=401, content=b"token expired")

        with pytest.raises(BCApiError) as exc_info:
            scoped_client.dispatch(RequestDescriptor("/customers"))
        assert exc_info.value.status_code == 401
        assert len(transport.requests) == 1

    def test_transport_error_propagates(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = BCClient(
            MockAuthProvider(),
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        )
        client.authenticate(TENANT_ID, "client-id", "client-secret")
        client.set_environment(ENVIRONMENT)

        with pytest.raises(httpx.ConnectError):
            client.dispatch(RequestDescriptor("/companies", mode=AddressingMode.NO_COMPANY_CONTEXT))


@pytest.mark.unit
class TestDebugVerbosity:
    def test_debug_logs_request(self, scoped_client, transport):
        scoped_client.set_verbosity(Verbosity.DEBUG)

        with capture_logs() as logs:
            scoped_client.dispatch(
                RequestDescriptor("/customers", method=HttpMethod.POST, body={"displayName": "Acme"})
            )

        dispatched = [entry for entry in logs if entry["event"] == "Dispatching request"]
        assert len(dispatched) == 1
        assert dispatched[0]["environment"] == ENVIRONMENT
        assert dispatched[0]["request"] == f"POST {DEFAULT_BASE}/customers"
        assert dispatched[0]["body"] == {"displayName": "Acme"}

    def test_normal_verbosity_is_quiet(self, scoped_client, transport):
        with capture_logs() as logs:
            scoped_client.dispatch(RequestDescriptor("/customers"))

        assert not [entry for entry in logs if entry["event"] == "Dispatching request"]

    def test_debug_does_not_change_result(self, scoped_client, transport):
        transport.queue(json_body={"value": [1]})
        transport.queue(json_body={"value": [1]})

        normal = scoped_client.dispatch(RequestDescriptor("/customers"))
        scoped_client.set_verbosity(True)
        debug = scoped_client.dispatch(RequestDescriptor("/customers"))

        assert normal == debug

    def test_set_verbosity_accepts_bool_and_str(self, bc_client):
        bc_client.set_verbosity(True)
        assert bc_client.context.verbosity is Verbosity.DEBUG
        bc_client.set_verbosity("normal")
        assert bc_client.context.verbosity is Verbosity.NORMAL


@pytest.mark.unit
class TestSessionScope:
    def test_authenticate_stores_token_and_tenant(self, bc_client):
        token = bc_client.authenticate(TENANT_ID, "client-id", "client-secret")

        assert token == "mock_bearer_token_12345"
        assert bc_client.context.token == token
        assert bc_client.context.token_tenant_id == TENANT_ID

    def test_set_company_by_name_and_by_id_give_same_url(self, bc_client, transport):
        bc_client.authenticate(TENANT_ID, "client-id", "client-secret")
        bc_client.set_environment(ENVIRONMENT)

        transport.queue(json_body={"value": COMPANIES})
        bc_client.set_company(company_name=COMPANY_NAME)
        by_name = bc_client.build_request_url(RequestDescriptor("/customers"))
        by_name_scope = (bc_client.context.company_id, bc_client.context.company_name)

        transport.queue(json_body={"value": COMPANIES})
        bc_client.set_company(company_id=COMPANY_ID.upper())
        by_id = bc_client.build_request_url(RequestDescriptor("/customers"))

        assert by_name == by_id == f"{DEFAULT_BASE}/customers"
        assert by_name_scope == (bc_client.context.company_id, bc_client.context.company_name)

    def test_set_company_lookup_uses_environment_scope(self, bc_client, transport):
        bc_client.authenticate(TENANT_ID, "client-id", "client-secret")
        bc_client.set_environment(ENVIRONMENT)
        transport.queue(json_body={"value": COMPANIES})

        company = bc_client.set_company(company_name="My Company")

        assert company["id"] == "22222222-2222-2222-2222-222222222222"
        assert str(transport.last.url) == f"{API_ROOT}/{ENVIRONMENT}/api/v2.0/companies"
        assert "if-match" not in transport.last.headers

    def test_set_company_not_found(self, bc_client, transport):
        bc_client.authenticate(TENANT_ID, "client-id", "client-secret")
        bc_client.set_environment(ENVIRONMENT)
        transport.queue(json_body={"value": COMPANIES})

        with pytest.raises(CompanyNotFoundError):
            bc_client.set_company(company_name="Fabrikam")
        assert not bc_client.context.has_company

    def test_set_company_requires_an_argument(self, bc_client):
        with pytest.raises(ValueError):
            bc_client.set_company()

    def test_set_company_before_authentication(self, bc_client, transport):
        bc_client.set_environment(ENVIRONMENT)

        with pytest.raises(AuthenticationRequiredError):
            bc_client.set_company(company_name=COMPANY_NAME)
        assert transport.requests == []

    def test_switching_environment_clears_company(self, scoped_client):
        scoped_client.set_environment("Sandbox")

        assert scoped_client.context.environment_name == "Sandbox"
        assert scoped_client.context.company_id is None
        assert scoped_client.context.company_name is None

    def test_same_environment_keeps_company(self, scoped_client):
        scoped_client.set_environment(ENVIRONMENT)
        assert scoped_client.context.has_company

    def test_sessions_are_independent(self, transport):
        first = BCClient(MockAuthProvider(), http_client=httpx.Client(transport=httpx.MockTransport(transport.handler)))
        second = BCClient(MockAuthProvider(), http_client=httpx.Client(transport=httpx.MockTransport(transport.handler)))

        first.authenticate(TENANT_ID, "client-id", "client-secret")

        assert first.context.is_authenticated
        assert not second.context.is_authenticated

    def test_client_info_hides_token(self, scoped_client):
        info = scoped_client.get_client_info()

        assert info["scope"]["environment"] == ENVIRONMENT
        assert info["scope"]["company_name"] == COMPANY_NAME
        assert "mock_bearer_token_12345" not in str(info)

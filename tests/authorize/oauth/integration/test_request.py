import pytest
from starlette.authentication import SimpleUser, UnauthenticatedUser
from starlette.requests import Request

from authorize.oauth.integration.context import get_context
from authorize.oauth.integration.request import AuthorizationPayload, to_oauth2_request


def make_request(
    query_string: bytes = b"", scheme: str = "https", user=None
) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/authorize",
        "root_path": "",
        "scheme": scheme,
        "server": ("auth.example", 443),
        "client": ("127.0.0.1", 1234),
        "headers": [(b"host", b"auth.example")],
        "query_string": query_string,
        "app": {},
    }
    if user is not None:
        scope["user"] = user
    return Request(scope)


def test_payload_without_sources_has_no_params():
    payload = AuthorizationPayload()
    assert payload.has_params is False
    assert payload.data == {}


def test_payload_merges_body_over_query_and_skips_blanks():
    payload = AuthorizationPayload(
        body={"client_id": "from-body", "state": ""},
        query={"client_id": "from-query", "state": "q-state", "redirect_uri": "u"},
    )

    assert payload.has_params is True
    assert payload.client_id == "from-body"
    assert payload.state == "q-state"
    assert payload.redirect_uri == "u"
    assert payload.datalist["client_id"] == ["from-body"]


@pytest.mark.asyncio
async def test_to_oauth2_request_reads_query_and_attaches_db():
    db = object()
    request = make_request(b"response_type=code&client_id=c1&state=xyz")

    oauth2_req = await to_oauth2_request(request, db=db)

    assert oauth2_req.method == "GET"
    assert oauth2_req.uri.startswith("https://auth.example/authorize")
    assert oauth2_req.payload.body is None
    assert oauth2_req.payload.query == {
        "response_type": "code",
        "client_id": "c1",
        "state": "xyz",
    }
    assert get_context(oauth2_req).db is db


@pytest.mark.asyncio
async def test_to_oauth2_request_without_params_has_no_sources():
    oauth2_req = await to_oauth2_request(make_request(), form_data={})

    assert oauth2_req.payload.has_params is False
    assert get_context(oauth2_req).db is None
    assert get_context(oauth2_req).subject is None


class AccountUser(SimpleUser):
    def __init__(self, account_id: str):
        super().__init__(username=f"user-{account_id}")
        self.account_id = account_id

    @property
    def identity(self) -> str:
        return self.account_id


@pytest.mark.asyncio
async def test_to_oauth2_request_attaches_authenticated_identity():
    request = make_request(b"subject_id=mallory", user=AccountUser("acct-7"))

    oauth2_req = await to_oauth2_request(request)

    assert get_context(oauth2_req).subject == "acct-7"


@pytest.mark.asyncio
async def test_to_oauth2_request_ignores_unauthenticated_user():
    oauth2_req = await to_oauth2_request(make_request(user=UnauthenticatedUser()))

    assert get_context(oauth2_req).subject is None

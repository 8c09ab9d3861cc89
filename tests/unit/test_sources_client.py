"""Unit tests for the repo-creator and GitHub search HTTP clients."""

from __future__ import annotations

import dataclasses
import json
import typing as typ

import httpx
import pytest

from repo_creator.catalog import RepositoryDescriptor
from repo_creator.sources import (
    ActionError,
    GitHubSearchClient,
    GitHubSearchConfig,
    PaymentAuthorization,
    RepoCreatorClient,
    RepoCreatorConfig,
    SourceError,
    SponsorshipLedger,
    TemplateCatalogue,
)

_BASE_URL = "https://api.example.test"
_ACME = RepositoryDescriptor("acme", "starter")


@dataclasses.dataclass(slots=True)
class _Recorded:
    method: str
    url: str
    body: typ.Any


def _transport(
    responses: dict[tuple[str, str], httpx.Response | Exception],
    calls: list[_Recorded],
) -> httpx.MockTransport:
    def _handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        calls.append(_Recorded(request.method, str(request.url), body))
        outcome = responses[(request.method, request.url.path)]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    return httpx.MockTransport(_handler)


def _repo_client(
    responses: dict[tuple[str, str], httpx.Response | Exception],
) -> tuple[RepoCreatorClient, list[_Recorded]]:
    calls: list[_Recorded] = []
    http_client = httpx.AsyncClient(transport=_transport(responses, calls))
    client = RepoCreatorClient(
        RepoCreatorConfig(base_url=_BASE_URL), http_client=http_client
    )
    return client, calls


def _wire(*slugs: str) -> list[dict[str, str]]:
    return [
        {"provider": "GitHub", "owner": owner, "name": name}
        for owner, name in (slug.split("/") for slug in slugs)
    ]


def test_repo_creator_client_implements_ports() -> None:
    """The client satisfies the template and sponsorship ports."""
    client = RepoCreatorClient(RepoCreatorConfig(base_url=_BASE_URL))

    assert isinstance(client, TemplateCatalogue)
    assert isinstance(client, SponsorshipLedger)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("method_name", "path"),
    [
        ("get_favorites", "/favorites"),
        ("get_sponsored", "/sponsored"),
        ("get_popular", "/popular"),
    ],
)
async def test_list_endpoints_decode_descriptors(method_name: str, path: str) -> None:
    """List endpoints return descriptors in server order."""
    client, calls = _repo_client(
        {("GET", path): httpx.Response(200, json=_wire("b/y", "a/x"))}
    )

    result = await getattr(client, method_name)()

    assert result == [RepositoryDescriptor("b", "y"), RepositoryDescriptor("a", "x")]
    assert calls[0].url == f"{_BASE_URL}{path}"


@pytest.mark.asyncio
async def test_list_endpoint_http_error_raises_source_error() -> None:
    """Non-2xx responses surface as SourceError with the status code."""
    client, _ = _repo_client({("GET", "/popular"): httpx.Response(503)})

    with pytest.raises(SourceError, match="HTTP 503") as excinfo:
        await client.get_popular()

    assert excinfo.value.status_code == 503


@pytest.mark.asyncio
async def test_list_endpoint_transport_error_raises_source_error() -> None:
    """Connection failures surface as SourceError."""
    client, _ = _repo_client(
        {("GET", "/sponsored"): httpx.ConnectError("connection refused")}
    )

    with pytest.raises(SourceError, match="connection refused") as excinfo:
        await client.get_sponsored()

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_list_endpoint_malformed_payload_raises_source_error() -> None:
    """Payloads of the wrong shape surface as SourceError."""
    client, _ = _repo_client(
        {("GET", "/favorites"): httpx.Response(200, json={"not": "a list"})}
    )

    with pytest.raises(SourceError, match="malformed"):
        await client.get_favorites()


@pytest.mark.asyncio
async def test_add_favorite_sends_repository_and_returns_list() -> None:
    """add_favorite PUTs the repository and returns the new favorites."""
    client, calls = _repo_client(
        {("PUT", "/favorites"): httpx.Response(200, json=_wire("acme/starter"))}
    )

    result = await client.add_favorite(_ACME)

    assert result == [_ACME]
    assert calls[0].body == {"owner": "acme", "name": "starter", "provider": "GitHub"}


@pytest.mark.asyncio
async def test_remove_favorite_uses_delete_with_body() -> None:
    """remove_favorite sends DELETE with the repository in the body."""
    client, calls = _repo_client(
        {("DELETE", "/favorites"): httpx.Response(200, json=[])}
    )

    assert await client.remove_favorite(_ACME) == []
    assert calls[0].method == "DELETE"
    assert calls[0].body["name"] == "starter"


@pytest.mark.asyncio
async def test_rejected_mutation_raises_action_error() -> None:
    """Mutation failures surface as ActionError, not SourceError."""
    client, _ = _repo_client({("PUT", "/favorites"): httpx.Response(409)})

    with pytest.raises(ActionError, match="add favorite failed: HTTP 409"):
        await client.add_favorite(_ACME)


@pytest.mark.asyncio
async def test_sponsor_posts_payment_in_camel_case() -> None:
    """Sponsorship requests carry the repository and payment token."""
    client, calls = _repo_client(
        {("POST", "/sponsorships"): httpx.Response(200, json=_wire("acme/starter"))}
    )
    payment = PaymentAuthorization(token_id="tok_1", email="dev@example.test")

    assert await client.sponsor(_ACME, payment) == [_ACME]
    assert calls[0].body["payment"] == {"tokenId": "tok_1", "email": "dev@example.test"}
    assert calls[0].body["repository"]["owner"] == "acme"


@pytest.mark.asyncio
async def test_declined_sponsorship_raises_action_error() -> None:
    """A 402 response is reported with its status code."""
    client, _ = _repo_client({("POST", "/sponsorships"): httpx.Response(402)})
    payment = PaymentAuthorization(token_id="tok_1", email="dev@example.test")

    with pytest.raises(ActionError) as excinfo:
        await client.sponsor(_ACME, payment)

    assert excinfo.value.status_code == 402


@pytest.mark.asyncio
async def test_my_sponsorships_unwrap_repository() -> None:
    """Sponsorship entries are unwrapped to their repository."""
    client, _ = _repo_client(
        {
            ("GET", "/sponsorships/mine"): httpx.Response(
                200, json=[{"repository": _wire("acme/starter")[0]}]
            )
        }
    )

    assert await client.get_my_sponsorships() == [_ACME]


@pytest.mark.asyncio
async def test_cancel_sponsorship_ignores_empty_body() -> None:
    """Cancellation succeeds on a 204 without decoding a body."""
    client, calls = _repo_client(
        {("DELETE", "/sponsorships"): httpx.Response(204)}
    )

    await client.cancel_sponsorship(_ACME)

    assert calls[0].body["owner"] == "acme"


def test_authorization_header_only_sent_with_token() -> None:
    """Owned clients send the bearer token when configured."""
    signed_in = RepoCreatorClient(RepoCreatorConfig(base_url=_BASE_URL, token="t0k"))
    anonymous = RepoCreatorClient(RepoCreatorConfig(base_url=_BASE_URL))

    assert signed_in._client.headers["Authorization"] == "Bearer t0k"
    assert "Authorization" not in anonymous._client.headers


# -- GitHub search ----------------------------------------------------------


def _search_client(
    response: httpx.Response | Exception,
) -> tuple[GitHubSearchClient, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if isinstance(response, Exception):
            raise response
        return response

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))
    config = GitHubSearchConfig(api_url="https://github.example.test")
    return GitHubSearchClient(config, http_client=http_client), requests


@pytest.mark.parametrize(
    ("owner", "name", "expected"),
    [
        ("acme", "starter", "starter in:name user:acme"),
        (None, "starter", "starter in:name"),
        ("acme", None, "user:acme"),
        ("  ", "", ""),
    ],
)
def test_build_query(owner: str | None, name: str | None, expected: str) -> None:
    """Owner and name fragments map to GitHub qualifiers."""
    assert GitHubSearchClient.build_query(owner, name) == expected


@pytest.mark.asyncio
async def test_search_returns_descriptors() -> None:
    """Search items are mapped to owner/name descriptors."""
    payload = {
        "total_count": 2,
        "items": [
            {"name": "starter", "owner": {"login": "acme"}, "stargazers_count": 5},
            {"name": "starter-py", "owner": {"login": "octo"}},
        ],
    }
    client, requests = _search_client(httpx.Response(200, json=payload))

    result = await client.search("acme", "starter")

    assert result == [_ACME, RepositoryDescriptor("octo", "starter-py")]
    assert requests[0].url.path == "/search/repositories"
    assert requests[0].url.params["q"] == "starter in:name user:acme"


@pytest.mark.asyncio
async def test_empty_search_sends_no_request() -> None:
    """Blank fragments short-circuit to an empty result."""
    client, requests = _search_client(httpx.Response(500))

    assert await client.search(None, " ") == []
    assert requests == []


@pytest.mark.asyncio
async def test_search_rate_limit_raises_source_error() -> None:
    """GitHub errors surface as SourceError."""
    client, _ = _search_client(httpx.Response(403, json={"message": "rate limit"}))

    with pytest.raises(SourceError, match="search fetch failed: HTTP 403"):
        await client.search("acme", None)


@pytest.mark.asyncio
async def test_search_timeout_raises_source_error() -> None:
    """Timeouts surface as SourceError."""
    client, _ = _search_client(httpx.ReadTimeout("timed out"))

    with pytest.raises(SourceError, match="timed out"):
        await client.search("acme", None)

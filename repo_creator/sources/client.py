"""httpx adapters for the repo-creator API and GitHub repository search."""

from __future__ import annotations

import typing as typ

import httpx
import msgspec

from repo_creator.logging import get_logger, log_debug, log_info
from repo_creator.sources.errors import ActionError, SourceError
from repo_creator.sources.wire import (
    GitHubSearchResponse,
    RepositoryWireModel,
    SponsorRequest,
    SponsorshipWireModel,
)

if typ.TYPE_CHECKING:
    from repo_creator.catalog.models import RepositoryDescriptor
    from repo_creator.sources.config import GitHubSearchConfig, RepoCreatorConfig
    from repo_creator.sources.wire import PaymentAuthorization

logger = get_logger(__name__)

_HTTP_ERROR_STATUS_THRESHOLD = 400

_REPOSITORY_LIST = list[RepositoryWireModel]
_SPONSORSHIP_LIST = list[SponsorshipWireModel]


def _descriptors(models: list[RepositoryWireModel]) -> list[RepositoryDescriptor]:
    return [model.to_descriptor() for model in models]


class RepoCreatorClient:
    """repo-creator API implementation of the template and sponsorship ports.

    Implements :class:`~repo_creator.sources.protocol.TemplateCatalogue` and
    :class:`~repo_creator.sources.protocol.SponsorshipLedger`.
    """

    def __init__(
        self,
        config: RepoCreatorConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        self._config = config
        self._owns_client = http_client is None
        headers = {
            "User-Agent": config.user_agent,
            "Accept": "application/json",
        }
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s, headers=headers
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    # -- reads -------------------------------------------------------------

    async def get_favorites(self) -> list[RepositoryDescriptor]:
        """Return the signed-in user's favorite templates."""
        return _descriptors(await self._fetch("favorites", _REPOSITORY_LIST))

    async def get_sponsored(self) -> list[RepositoryDescriptor]:
        """Return templates that have been sponsored."""
        return _descriptors(await self._fetch("sponsored", _REPOSITORY_LIST))

    async def get_popular(self) -> list[RepositoryDescriptor]:
        """Return the popularity ranking of templates."""
        return _descriptors(await self._fetch("popular", _REPOSITORY_LIST))

    async def get_my_sponsorships(self) -> list[RepositoryDescriptor]:
        """Return the repositories the signed-in user sponsors."""
        sponsorships = await self._fetch("sponsorships/mine", _SPONSORSHIP_LIST)
        return [item.repository.to_descriptor() for item in sponsorships]

    # -- mutations ---------------------------------------------------------

    async def add_favorite(
        self, repository: RepositoryDescriptor
    ) -> list[RepositoryDescriptor]:
        """Favorite ``repository`` and return the updated favorites."""
        body = RepositoryWireModel.from_descriptor(repository)
        favorites = await self._act("PUT", "favorites", body, "add favorite")
        log_info(logger, "Added favorite %s", repository.slug)
        return _descriptors(favorites)

    async def remove_favorite(
        self, repository: RepositoryDescriptor
    ) -> list[RepositoryDescriptor]:
        """Unfavorite ``repository`` and return the updated favorites."""
        body = RepositoryWireModel.from_descriptor(repository)
        favorites = await self._act("DELETE", "favorites", body, "remove favorite")
        log_info(logger, "Removed favorite %s", repository.slug)
        return _descriptors(favorites)

    async def sponsor(
        self,
        repository: RepositoryDescriptor,
        payment: PaymentAuthorization,
    ) -> list[RepositoryDescriptor]:
        """Sponsor ``repository`` and return the updated sponsored list."""
        body = SponsorRequest(
            repository=RepositoryWireModel.from_descriptor(repository),
            payment=payment,
        )
        sponsored = await self._act("POST", "sponsorships", body, "sponsor")
        log_info(logger, "Sponsored %s", repository.slug)
        return _descriptors(sponsored)

    async def cancel_sponsorship(self, repository: RepositoryDescriptor) -> None:
        """Stop sponsoring ``repository``."""
        body = RepositoryWireModel.from_descriptor(repository)
        await self._send_action("DELETE", "sponsorships", body, "cancel sponsorship")
        log_info(logger, "Cancelled sponsorship of %s", repository.slug)

    # -- transport ---------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self._config.base_url}/{path}"

    async def _fetch[T](self, path: str, model: type[T]) -> T:
        """GET ``path`` and decode it, mapping failures to SourceError."""
        try:
            response = await self._client.get(self._url(path))
        except httpx.HTTPError as exc:
            raise SourceError.transport(path, exc) from exc
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise SourceError.http_error(path, response.status_code)
        try:
            decoded = msgspec.json.decode(response.content, type=model)
        except msgspec.DecodeError as exc:
            raise SourceError.malformed(path, str(exc)) from exc
        log_debug(logger, "GET %s returned %d bytes", path, len(response.content))
        return decoded

    async def _send_action(
        self, method: str, path: str, body: msgspec.Struct, action: str
    ) -> httpx.Response:
        """Send a state-changing request, mapping failures to ActionError."""
        try:
            response = await self._client.request(
                method,
                self._url(path),
                content=msgspec.json.encode(body),
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as exc:
            raise ActionError.transport(action, exc) from exc
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise ActionError.http_error(action, response.status_code)
        return response

    async def _act(
        self, method: str, path: str, body: msgspec.Struct, action: str
    ) -> list[RepositoryWireModel]:
        """Send a mutation and decode the authoritative list it returns."""
        response = await self._send_action(method, path, body, action)
        try:
            return msgspec.json.decode(response.content, type=_REPOSITORY_LIST)
        except msgspec.DecodeError as exc:
            raise ActionError.malformed(action, str(exc)) from exc


class GitHubSearchClient:
    """GitHub REST implementation of the repository search port.

    The owner fragment becomes a ``user:`` qualifier and the name fragment an
    ``in:name`` term. Only the first page of results is requested.
    """

    def __init__(
        self,
        config: GitHubSearchConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided search configuration."""
        self._config = config
        self._owns_client = http_client is None
        headers = {
            "User-Agent": config.user_agent,
            "Accept": "application/vnd.github+json",
        }
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s, headers=headers
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    @staticmethod
    def build_query(owner: str | None, name: str | None) -> str:
        """Return the GitHub search query for the given fragments."""
        terms: list[str] = []
        if name and name.strip():
            terms.append(f"{name.strip()} in:name")
        if owner and owner.strip():
            terms.append(f"user:{owner.strip()}")
        return " ".join(terms)

    async def search(
        self, owner: str | None = None, name: str | None = None
    ) -> list[RepositoryDescriptor]:
        """Return repositories matching the owner and name fragments.

        An empty query matches nothing and is answered without a request.
        """
        query = self.build_query(owner, name)
        if not query:
            return []

        try:
            response = await self._client.get(
                f"{self._config.api_url}/search/repositories",
                params={"q": query, "per_page": self._config.per_page},
            )
        except httpx.HTTPError as exc:
            raise SourceError.transport("search", exc) from exc
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise SourceError.http_error("search", response.status_code)
        try:
            payload = msgspec.json.decode(response.content, type=GitHubSearchResponse)
        except msgspec.DecodeError as exc:
            raise SourceError.malformed("search", str(exc)) from exc

        log_debug(
            logger,
            "search q=%r returned %d of %d repositories",
            query,
            len(payload.items),
            payload.total_count,
        )
        return [item.to_descriptor() for item in payload.items]

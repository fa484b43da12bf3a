"""npm registry adapter, used to find the GitHub repository behind a package."""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from pkgtrust.adapters.base import BaseAdapter, PackageNotFoundError, parse_repo_url
from pkgtrust.models.schemas import Ecosystem, PackageMetadata, Platform, RepoRef

logger = logging.getLogger(__name__)


class NpmAdapter(BaseAdapter):
    """Looks up packages in the npm registry.

    Data source:
    - Package document: https://registry.npmjs.org/{package}
    """

    REGISTRY_URL = "https://registry.npmjs.org"

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        """Initialize the adapter.

        Args:
            client: Optional shared httpx client. If not provided, one is created per request.
        """
        self._client = client

    @property
    def ecosystem(self) -> Ecosystem:
        return Ecosystem.NPM

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=30.0)

    async def _get_document(self, name: str) -> dict[str, Any]:
        """GET the registry document for a package; scoped names keep their '@'."""
        url = f"{self.REGISTRY_URL}/{quote(name, safe='@')}"
        client = await self._get_client()
        try:
            response = await client.get(url, headers={"Accept": "application/json"})
            response.raise_for_status()
            return response.json()
        finally:
            if self._client is None:
                await client.aclose()

    async def get_package_metadata(self, name: str) -> PackageMetadata:
        """Fetch metadata for an npm package.

        Fields missing from the top-level document are taken from the
        manifest of the latest published version.

        Raises:
            PackageNotFoundError: If the registry has no such package.
            httpx.HTTPError: On any other registry failure.
            ValueError: If the registry reply is not a JSON object.
        """
        logger.info(f"Fetching npm metadata for {name}")
        try:
            document = await self._get_document(name)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise PackageNotFoundError(Ecosystem.NPM, name) from e
            raise
        if not isinstance(document, dict):
            raise ValueError(
                f"npm registry returned {type(document).__name__} for {name}, expected an object"
            )

        version = (document.get("dist-tags") or {}).get("latest", "")
        manifest = (document.get("versions") or {}).get(version) or {}

        def pick(key: str) -> Any:
            return document.get(key) or manifest.get(key)

        repository_url = repository_field_url(pick("repository"))
        logger.debug(f"npm {name}@{version} repository: {repository_url}")

        return PackageMetadata(
            ecosystem=Ecosystem.NPM,
            name=document.get("name", name),
            homepage=pick("homepage"),
            repository_url=repository_url,
        )

    def get_source_repo(self, metadata: PackageMetadata) -> RepoRef | None:
        """Locate the source repository, understanding npm's shorthand forms."""
        url = metadata.repository_url or metadata.homepage
        if not url:
            return None

        url = normalize_npm_repo_url(url)
        if url.startswith("gitlab:"):
            owner, _, repo = url.removeprefix("gitlab:").partition("/")
            if owner and repo:
                return RepoRef(platform=Platform.GITLAB, owner=owner, repo=repo)
            return None

        return parse_repo_url(url)


def repository_field_url(field: dict | str | None) -> str | None:
    """URL from a package.json `repository` field (object or string form)."""
    if isinstance(field, dict):
        field = field.get("url")
    if not isinstance(field, str) or not field.strip():
        return None
    return normalize_npm_repo_url(field) or None


def normalize_npm_repo_url(url: str) -> str:
    """Normalize the common npm repository URL spellings.

    git+https://github.com/o/r.git -> https://github.com/o/r
    git://github.com/o/r.git       -> https://github.com/o/r
    github:o/r and o/r             -> https://github.com/o/r
    """
    url = url.strip()
    if url.startswith("git+"):
        url = url[4:]
    if url.startswith("git://"):
        url = "https://" + url[6:]
    url = url.removesuffix("/").removesuffix(".git")

    if url.startswith("github:"):
        url = f"https://github.com/{url[7:]}"
    elif "://" not in url and ":" not in url and url.count("/") == 1:
        # Bare "owner/repo" defaults to GitHub
        url = f"https://github.com/{url}"

    return url

"""Resolve GitHub and npm URLs to a GitHub owner/repo pair."""

import logging
import re
from enum import Enum
from urllib.parse import unquote

import httpx

from pkgtrust.adapters.base import PackageNotFoundError, parse_repo_url
from pkgtrust.adapters.npm import NpmAdapter
from pkgtrust.errors import UrlResolutionError
from pkgtrust.models.schemas import Platform, RepoRef

logger = logging.getLogger(__name__)

_GITHUB_URL = re.compile(r"^(?:https?://)?(?:www\.)?github\.com/[^/\s]+/[^/\s]+")
_NPM_URL = re.compile(
    r"^(?:https?://)?(?:www\.)?npmjs\.(?:com|org)/package/((?:@[^/\s]+/)?[^/\s?#]+)"
)


class UrlKind(str, Enum):
    """Kind of URL found in the input file."""

    GITHUB = "github"
    NPM = "npm"
    UNKNOWN = "unknown"


def classify_url(url: str) -> UrlKind:
    """Classify a URL as a GitHub repository, an npm package, or neither."""
    url = url.strip()
    if _GITHUB_URL.match(url):
        return UrlKind.GITHUB
    if _NPM_URL.match(url):
        return UrlKind.NPM
    return UrlKind.UNKNOWN


def extract_npm_package_name(url: str) -> str | None:
    """Extract the package name from an npmjs.com package URL.

    Scoped names are returned as "@scope/name".
    """
    match = _NPM_URL.match(url.strip())
    if not match:
        return None
    return unquote(match.group(1))


class UrlResolver:
    """Resolves input URLs to GitHub repositories.

    GitHub URLs are parsed directly. npm package URLs are looked up in the
    npm registry and the package's declared repository is used.
    """

    def __init__(self, npm: NpmAdapter) -> None:
        self.npm = npm

    async def resolve(self, url: str) -> RepoRef:
        """Resolve a URL to a GitHub RepoRef.

        Raises:
            UrlResolutionError: If the URL is not a GitHub/npm URL, the package
                cannot be found, or it has no GitHub repository.
        """
        kind = classify_url(url)
        logger.debug(f"Classified {url} as {kind.value}")

        if kind == UrlKind.GITHUB:
            repo_ref = parse_repo_url(url)
            if repo_ref is None:
                raise UrlResolutionError(url, "malformed GitHub URL")
            return repo_ref

        if kind == UrlKind.NPM:
            return await self._resolve_npm(url)

        raise UrlResolutionError(url, "not a GitHub repository or npm package URL")

    async def _resolve_npm(self, url: str) -> RepoRef:
        name = extract_npm_package_name(url)
        if not name:
            raise UrlResolutionError(url, "missing npm package name")

        try:
            metadata = await self.npm.get_package_metadata(name)
        except PackageNotFoundError as e:
            raise UrlResolutionError(url, str(e)) from e
        except httpx.HTTPError as e:
            raise UrlResolutionError(url, f"npm registry request failed: {e}") from e
        except ValueError as e:
            raise UrlResolutionError(url, f"invalid npm registry response: {e}") from e

        repo_ref = self.npm.get_source_repo(metadata)
        if repo_ref is None:
            raise UrlResolutionError(url, f"no repository declared for npm package {name}")
        if repo_ref.platform != Platform.GITHUB:
            raise UrlResolutionError(
                url, f"repository is on {repo_ref.platform.value}, not GitHub"
            )

        logger.info(f"Resolved npm package {name} to {repo_ref.owner}/{repo_ref.repo}")
        return repo_ref

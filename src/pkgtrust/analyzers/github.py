"""GitHub GraphQL data fetcher for repository metrics."""

import logging
from typing import Any

import httpx

from pkgtrust.errors import GitHubAPIError, RepositoryNotFoundError

logger = logging.getLogger(__name__)

LICENSE_QUERY = """
query GetLicense($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) {
    licenseInfo {
      name
      spdxId
    }
  }
}
"""

COMMITS_QUERY = """
query GetCommitAuthors($owner: String!, $name: String!, $limit: Int!) {
  repository(owner: $owner, name: $name) {
    defaultBranchRef {
      target {
        ... on Commit {
          history(first: $limit) {
            edges {
              node {
                author {
                  name
                  email
                }
                committedDate
              }
            }
          }
        }
      }
    }
  }
}
"""

ISSUES_QUERY = """
query GetOpenIssues($owner: String!, $name: String!, $limit: Int!) {
  repository(owner: $owner, name: $name) {
    issues(first: $limit, states: OPEN) {
      edges {
        node {
          createdAt
          closedAt
          comments(first: 1) {
            nodes {
              createdAt
            }
          }
        }
      }
    }
  }
}
"""

# README candidates in lookup order, fetched in one request via aliases
README_PATHS = {
    "readmeMd": "README.md",
    "readmePlain": "README",
    "readmeLower": "readme.md",
    "readmeRst": "README.rst",
}

README_QUERY = (
    "query GetReadme($owner: String!, $name: String!) {\n"
    "  repository(owner: $owner, name: $name) {\n"
    + "".join(
        f'    {alias}: object(expression: "HEAD:{path}") {{ ... on Blob {{ text }} }}\n'
        for alias, path in README_PATHS.items()
    )
    + "  }\n}\n"
)


class GitHubFetcher:
    """Fetches repository data from the GitHub GraphQL API.

    The GraphQL API requires a personal access token. Without one every
    query raises GitHubAPIError.
    """

    GRAPHQL_URL = "https://api.github.com/graphql"

    def __init__(
        self,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            token: GitHub personal access token.
            client: Optional httpx client. If not provided, one is created per request.
        """
        self._token = token
        self._client = client

    def _headers(self) -> dict[str, str]:
        """Get headers for GitHub API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=30.0)

    async def query(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Execute a GraphQL query and return its `data` payload.

        Raises:
            GitHubAPIError: If no token is configured, the request fails,
                or the response carries GraphQL errors.
            RepositoryNotFoundError: If GitHub reports the repository as missing.
        """
        if not self._token:
            raise GitHubAPIError(
                "GITHUB_TOKEN is required for the GitHub GraphQL API. "
                "Set it in the environment or in a .env file."
            )

        client = await self._get_client()
        try:
            response = await client.post(
                self.GRAPHQL_URL,
                json={"query": query, "variables": variables},
                headers=self._headers(),
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"GitHub GraphQL request failed: {e}") from e
        finally:
            if self._client is None:
                await client.aclose()

        errors = payload.get("errors")
        if errors:
            if any(err.get("type") == "NOT_FOUND" for err in errors):
                raise RepositoryNotFoundError(
                    variables.get("owner", "?"), variables.get("name", "?")
                )
            messages = "; ".join(err.get("message", "unknown error") for err in errors)
            raise GitHubAPIError(f"GitHub GraphQL error: {messages}")

        return payload.get("data") or {}

    async def _fetch_repository(
        self, query: str, owner: str, repo: str, **extra: Any
    ) -> dict[str, Any]:
        """Run a repository-scoped query and return the `repository` object."""
        data = await self.query(query, {"owner": owner, "name": repo, **extra})
        repository = data.get("repository")
        if repository is None:
            raise RepositoryNotFoundError(owner, repo)
        return repository

    async def fetch_license(self, owner: str, repo: str) -> str | None:
        """Fetch the SPDX identifier of the repository's detected license.

        Returns:
            The SPDX id, or None if GitHub detected no license.
        """
        repository = await self._fetch_repository(LICENSE_QUERY, owner, repo)
        license_info = repository.get("licenseInfo") or {}
        spdx_id = license_info.get("spdxId")
        logger.info(f"License for {owner}/{repo}: {spdx_id}")
        return spdx_id

    async def fetch_commit_authors(
        self, owner: str, repo: str, limit: int = 100
    ) -> list[str] | None:
        """Fetch the author names of the most recent commits on the default branch.

        Returns:
            One author name per commit, newest first, or None if the
            repository has no default branch.
        """
        repository = await self._fetch_repository(COMMITS_QUERY, owner, repo, limit=limit)
        branch = repository.get("defaultBranchRef")
        if not branch:
            return None

        history = (branch.get("target") or {}).get("history") or {}
        authors = []
        for edge in history.get("edges", []):
            author = (edge.get("node") or {}).get("author") or {}
            authors.append(author.get("name") or author.get("email") or "unknown")

        logger.info(f"Fetched {len(authors)} commits for {owner}/{repo}")
        return authors

    async def fetch_open_issues(
        self, owner: str, repo: str, limit: int = 100
    ) -> list[dict[str, Any]]:
        """Fetch open issues with their creation, closing and first-comment times.

        Returns:
            List of {"created_at", "closed_at", "first_comment_at"} ISO strings
            (the latter two may be None).
        """
        repository = await self._fetch_repository(ISSUES_QUERY, owner, repo, limit=limit)
        issues = []
        for edge in (repository.get("issues") or {}).get("edges", []):
            node = edge.get("node") or {}
            comments = (node.get("comments") or {}).get("nodes") or []
            issues.append(
                {
                    "created_at": node.get("createdAt"),
                    "closed_at": node.get("closedAt"),
                    "first_comment_at": comments[0].get("createdAt") if comments else None,
                }
            )

        logger.info(f"Fetched {len(issues)} open issues for {owner}/{repo}")
        return issues

    async def fetch_readme(self, owner: str, repo: str) -> str | None:
        """Fetch README text from the default branch.

        Returns:
            The first README found, or None if the repository has none.
        """
        repository = await self._fetch_repository(README_QUERY, owner, repo)
        for alias, path in README_PATHS.items():
            blob = repository.get(alias)
            if blob and blob.get("text"):
                logger.debug(f"Found {path} for {owner}/{repo}")
                return blob["text"]
        return None

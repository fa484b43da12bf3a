"""Registry adapter interface and repository URL parsing."""

import re
from abc import ABC, abstractmethod

from pkgtrust.errors import PkgTrustError
from pkgtrust.models.schemas import Ecosystem, PackageMetadata, Platform, RepoRef


class BaseAdapter(ABC):
    """A package registry that can point at a package's source repository."""

    @property
    @abstractmethod
    def ecosystem(self) -> Ecosystem:
        ...

    @abstractmethod
    async def get_package_metadata(self, name: str) -> PackageMetadata:
        """Look up a package by name.

        Raises:
            PackageNotFoundError: If the registry has no such package.
        """
        ...

    def get_source_repo(self, metadata: PackageMetadata) -> RepoRef | None:
        """RepoRef for the package's repository (or homepage), if it names one."""
        url = metadata.repository_url or metadata.homepage
        return parse_repo_url(url) if url else None


# (platform, host pattern) pairs; the host pattern is spliced into each URL form
_HOSTS = [
    (Platform.GITHUB, r"github\.com"),
    (Platform.GITLAB, r"gitlab\.com"),
    (Platform.BITBUCKET, r"bitbucket\.org"),
]

_URL_FORMS = [
    # https://host/owner/repo, https://host/owner/repo.git, https://host/owner/repo/tree/main/sub
    r"^(?:https?://)?(?:www\.)?{host}/([^/\s]+)/([^/\s#?]+)([/#?][^\s]*)?$",
    # git@host:owner/repo.git
    r"^git@{host}:([^/\s]+)/([^/\s]+)()$",
    # git://host/owner/repo.git, ssh://git@host/owner/repo.git
    r"^(?:git|ssh)://(?:git@)?{host}/([^/\s]+)/([^/\s]+)()$",
]


def parse_repo_url(url: str) -> RepoRef | None:
    """Parse a GitHub, GitLab or Bitbucket URL (https, ssh or git form).

    Trailing paths such as `/tree/<branch>/<path>` are ignored.
    Returns None for anything else.
    """
    if not url:
        return None
    url = url.strip()

    for platform, host in _HOSTS:
        for form in _URL_FORMS:
            match = re.match(form.format(host=host), url)
            if not match:
                continue
            owner, repo, _ = match.groups()
            repo = repo.removesuffix(".git")
            if not repo:
                return None
            return RepoRef(platform=platform, owner=owner, repo=repo)

    return None


class PackageNotFoundError(PkgTrustError):
    """The registry has no package by this name."""

    def __init__(self, ecosystem: Ecosystem, name: str) -> None:
        self.ecosystem = ecosystem
        self.name = name
        super().__init__(f"Package '{name}' not found in {ecosystem.value}")

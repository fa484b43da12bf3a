"""Package registry adapters and URL resolution."""

from pkgtrust.adapters.base import BaseAdapter, PackageNotFoundError, parse_repo_url
from pkgtrust.adapters.npm import NpmAdapter
from pkgtrust.adapters.resolver import UrlKind, UrlResolver, classify_url

__all__ = [
    "BaseAdapter",
    "NpmAdapter",
    "PackageNotFoundError",
    "UrlKind",
    "UrlResolver",
    "classify_url",
    "parse_repo_url",
]

"""GitHub forge provider."""

from .graphql import GitHubGraphQL, graphql_endpoint
from .plugin import GITHUB_PLUGIN, PUBLIC_API_URL, build_github_plugin, github_api_url
from .provider import GitHubProvider
from .rest import GitHubRest

__all__ = [
    "GITHUB_PLUGIN",
    "PUBLIC_API_URL",
    "GitHubGraphQL",
    "GitHubProvider",
    "GitHubRest",
    "build_github_plugin",
    "github_api_url",
    "graphql_endpoint",
]

"""Bundled fetchers and the default registry."""

from depfetch.fetch.registry import FetcherRegistry

from .base import RepositoryFetcher
from .bundler import BundlerFetcher
from .pip import PipFetcher


def default_registry() -> FetcherRegistry:
    registry = FetcherRegistry()
    registry.register("bundler", BundlerFetcher)
    registry.register("pip", PipFetcher)
    return registry


__all__ = [
    "BundlerFetcher",
    "PipFetcher",
    "RepositoryFetcher",
    "default_registry",
]

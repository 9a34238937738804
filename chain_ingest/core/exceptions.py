"""
Application-level exceptions.

- FetchError: explorer request failed (transport, HTTP status, bad payload,
  non-affirmative status). Never escapes the category fetcher.
- StorageError: a namespace commit could not be finalized. Propagates to the
  run orchestrator, which counts that network as 0.
- ConfigurationError / UnknownNetworkError: fatal, raised before any network
  is touched.
"""

from __future__ import annotations


class ChainIngestError(Exception):
    """Base class for all chain_ingest errors."""


class ConfigurationError(ChainIngestError):
    """Invalid or incomplete process configuration."""


class UnknownNetworkError(ConfigurationError):
    """A network selector names a network that is not configured."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = list(available)
        super().__init__(
            f"Unsupported network {name!r}. Available networks: {', '.join(self.available)}"
        )


class FetchError(ChainIngestError):
    """Explorer request failed or returned an unusable payload."""

    def __init__(self, message: str, *, network: str | None = None, category: str | None = None) -> None:
        self.network = network
        self.category = category
        super().__init__(message)


class StorageError(ChainIngestError):
    """A storage namespace could not be opened or a commit could not be finalized."""

    def __init__(self, message: str, *, namespace: str | None = None) -> None:
        self.namespace = namespace
        super().__init__(message)

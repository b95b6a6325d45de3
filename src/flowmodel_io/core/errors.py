"""Error types raised while reading and resolving inputs."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .handler import FormatHandler


class FlowModelError(Exception):
    """Base exception for all flowmodel-io errors."""
    pass


class SourceError(FlowModelError):
    """A readable view of the input could not be obtained."""

    def __init__(self, message: str, location: str | None = None):
        super().__init__(message)
        self.location = location


class FormatParseError(FlowModelError):
    """An importer or validator rejected the bytes it was given."""

    def __init__(self, message: str, handler: "FormatHandler | None" = None):
        super().__init__(message)
        self.handler = handler


class ResolutionError(FlowModelError):
    """No registered importer could make sense of the input."""
    pass


class TraitResolutionError(ResolutionError):
    """
    Every importer for a capability failed.

    Keeps the failure of the last importer that was tried, both as
    ``cause`` and as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        capability: Any,
        attempted: list["FormatHandler"] | None = None,
        last_handler: "FormatHandler | None" = None,
        cause: Exception | None = None
    ):
        super().__init__(message)
        self.capability = capability
        self.attempted = attempted or []
        self.last_handler = last_handler
        self.cause = cause


class UnrecognisedInputError(ResolutionError):
    """Every object importer failed; no individual cause is kept."""
    pass


class NoCandidatesError(ResolutionError):
    """Nothing in the catalog declares an importer for the request."""

    def __init__(self, message: str, requested: Any = None):
        super().__init__(message)
        self.requested = requested


class CatalogFrozenError(FlowModelError):
    """A file handler was registered after the catalog was built."""
    pass


class PluginError(FlowModelError):
    """A plug-in package failed while declaring its file handlers."""

    def __init__(self, message: str, module: str | None = None):
        super().__init__(message)
        self.module = module


class ConfigError(FlowModelError):
    """The configuration file is not valid."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []

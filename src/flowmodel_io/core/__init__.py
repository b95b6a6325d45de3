"""Capability and format resolution core."""

from .capability import Capability
from .object_kind import ObjectKind
from .handler import (
    FormatHandler,
    CapabilityImporter,
    ObjectImporter,
    InteropHandler,
)
from .catalog import (
    FileHandlerCatalog,
    register_file_handler,
    file_handler,
    get_catalog,
    auto_discover_file_handlers,
)
from .source import RewindableSource, open_source
from .errors import (
    FlowModelError,
    SourceError,
    FormatParseError,
    ResolutionError,
    TraitResolutionError,
    UnrecognisedInputError,
    NoCandidatesError,
    CatalogFrozenError,
    PluginError,
    ConfigError,
)
from .resolution import (
    read_as_trait,
    read_as_object,
    read_as_any_object,
    validate_object_of,
)
from .inputs import (
    InputType,
    InputTag,
    ResolvedInput,
    UnparsedFraction,
    resolve_input,
)
from .commands import Command

__all__ = [
    # Registries
    "Capability",
    "ObjectKind",
    # Handlers
    "FormatHandler",
    "CapabilityImporter",
    "ObjectImporter",
    "InteropHandler",
    # Catalog
    "FileHandlerCatalog",
    "register_file_handler",
    "file_handler",
    "get_catalog",
    "auto_discover_file_handlers",
    # Source
    "RewindableSource",
    "open_source",
    # Errors
    "FlowModelError",
    "SourceError",
    "FormatParseError",
    "ResolutionError",
    "TraitResolutionError",
    "UnrecognisedInputError",
    "NoCandidatesError",
    "CatalogFrozenError",
    "PluginError",
    "ConfigError",
    # Resolution
    "read_as_trait",
    "read_as_object",
    "read_as_any_object",
    "validate_object_of",
    # Inputs
    "InputType",
    "InputTag",
    "ResolvedInput",
    "UnparsedFraction",
    "resolve_input",
    # Commands
    "Command",
]
